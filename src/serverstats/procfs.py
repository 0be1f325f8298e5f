"""Readers for the kernel's /proc counter files."""

import os
from dataclasses import fields
from pathlib import Path

from serverstats.errors import UnsupportedPlatformError
from serverstats.models import CpuTimes

REQUIRED_FILES = ("stat", "meminfo")

_CPU_FIELDS = [f.name for f in fields(CpuTimes)]


def ensure_procfs(proc_root: Path) -> None:
    """
    Check that every counter file the report needs can be read.

    Raises:
        UnsupportedPlatformError: naming the first missing or unreadable file.
    """
    for name in REQUIRED_FILES:
        path = Path(proc_root) / name
        if not path.is_file() or not os.access(path, os.R_OK):
            raise UnsupportedPlatformError(path)


def parse_cpu_line(line: str) -> CpuTimes:
    """
    Parse the aggregate ``cpu`` line of /proc/stat.

    Kernels older than 2.6.33 print fewer columns; the missing trailing
    counters are taken as zero.
    """
    parts = line.split()
    if not parts or parts[0] != "cpu":
        raise ValueError(f"not an aggregate cpu line: {line!r}")
    values = [int(v) for v in parts[1 : len(_CPU_FIELDS) + 1]]
    return CpuTimes(**dict(zip(_CPU_FIELDS, values)))


def read_cpu_times(proc_root: Path) -> CpuTimes:
    """Read the aggregate CPU counters from ``<proc_root>/stat``."""
    with open(Path(proc_root) / "stat", encoding="ascii") as f:
        return parse_cpu_line(f.readline())


def parse_meminfo(text: str) -> dict[str, int]:
    """Map each ``Label: value [kB]`` line of /proc/meminfo to its value."""
    info: dict[str, int] = {}
    for line in text.splitlines():
        label, sep, rest = line.partition(":")
        if not sep:
            continue
        value = rest.split()
        if value and value[0].isdigit():
            info[label.strip()] = int(value[0])
    return info


def read_meminfo(proc_root: Path) -> dict[str, int]:
    """Read ``<proc_root>/meminfo`` into a label to kB mapping."""
    with open(Path(proc_root) / "meminfo", encoding="ascii") as f:
        return parse_meminfo(f.read())
