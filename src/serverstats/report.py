"""serverstats - report assembly and entry point."""

import sys
from datetime import datetime
from typing import TextIO

import psutil

from serverstats.config import settings
from serverstats.errors import UnsupportedPlatformError
from serverstats.logutil import get_logger, setup_logging
from serverstats.models import DiskSummary, MemoryInfo, ProcessEntry
from serverstats.monitor import SystemMonitor
from serverstats.procfs import ensure_procfs
from serverstats.units import format_percent, human_readable_kb

UNSUPPORTED_MESSAGE = "serverstats must be run on a Linux system with /proc available."

logger = get_logger("report")


def format_memory_line(info: MemoryInfo) -> str:
    """Format memory usage as ``<used> used / <total> total (<pct>%)``."""
    return (
        f"{human_readable_kb(info.used_kb)} used / "
        f"{human_readable_kb(info.total_kb)} total "
        f"({format_percent(info.percent)}%)"
    )


def format_disk_line(summary: DiskSummary) -> str:
    """Format disk usage as ``<used> used / <total> total (<pct>)``."""
    return f"{summary.used} used / {summary.total} total ({summary.percent})"


def format_process_line(proc: ProcessEntry) -> str:
    """Format one ranked process as a fixed-width line."""
    return (
        f"PID:{proc.pid} {proc.command[:16]:<16} "
        f"{proc.cpu_percent:6.1f}% CPU {proc.mem_percent:5.1f}% MEM {proc.user}"
    )


def format_header(now: datetime) -> str:
    """Report title stamped like date(1)."""
    return f"=== Server performance summary ({now.strftime('%a %b %e %H:%M:%S %Z %Y')}) ==="


def write_report(
    monitor: SystemMonitor,
    out: TextIO = sys.stdout,
    now: datetime | None = None,
) -> None:
    """
    Collect every figure and write the report, section by section.

    The header is written before the CPU sample so the timestamp marks
    the start of the measurement.
    """
    if now is None:
        now = datetime.now().astimezone()

    def emit(line: str = "") -> None:
        out.write(line + "\n")
        out.flush()

    emit(format_header(now))
    emit(f"Total CPU usage: {format_percent(monitor.cpu_percent())}%")
    emit(f"Total memory usage: {format_memory_line(monitor.memory())}")
    emit(f"Total disk usage: {format_disk_line(monitor.disk())}")
    emit()

    by_cpu, by_mem = monitor.top_processes()
    emit(f"Top {monitor.top_n} processes by CPU usage:")
    for proc in by_cpu:
        emit(format_process_line(proc))
    emit()
    emit(f"Top {monitor.top_n} processes by Memory usage:")
    for proc in by_mem:
        emit(format_process_line(proc))


def main() -> None:
    """Entry point for the server-stats command."""
    setup_logging()

    try:
        ensure_procfs(settings.proc_root)
    except UnsupportedPlatformError as exc:
        logger.debug("platform_unsupported", path=str(exc.path))
        print(UNSUPPORTED_MESSAGE, file=sys.stderr)
        sys.exit(1)

    # psutil reads disk mounts and processes from the same procfs
    psutil.PROCFS_PATH = str(settings.proc_root)
    write_report(SystemMonitor(settings))


if __name__ == "__main__":
    main()
