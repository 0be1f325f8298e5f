"""Shared fixtures: a fake procfs and quiet logging."""

from pathlib import Path

import pytest

from serverstats.config import ServerStatsSettings
from serverstats.logutil import setup_logging

STAT_IDLE = "cpu  100 0 50 800 50 0 0 0 0 0\ncpu0 100 0 50 800 50 0 0 0 0 0\nintr 0\n"

MEMINFO_MODERN = """\
MemTotal:        1000 kB
MemFree:          100 kB
MemAvailable:     250 kB
Buffers:           50 kB
Cached:           100 kB
SwapCached:       999 kB
"""


@pytest.fixture(autouse=True, scope="session")
def _configure_logging():
    """Configure structlog before any module logger is used."""
    setup_logging(ServerStatsSettings(log_level="WARNING"))


def write_proc(root: Path, stat: str = STAT_IDLE, meminfo: str = MEMINFO_MODERN) -> Path:
    """Populate ``root`` with stat and meminfo files."""
    root.mkdir(parents=True, exist_ok=True)
    (root / "stat").write_text(stat)
    (root / "meminfo").write_text(meminfo)
    return root


@pytest.fixture
def proc_root(tmp_path: Path) -> Path:
    """A fake procfs with an idle CPU line and a modern meminfo."""
    return write_proc(tmp_path / "proc")


@pytest.fixture
def config(proc_root: Path) -> ServerStatsSettings:
    """Settings pointing at the fake procfs."""
    return ServerStatsSettings(proc_root=proc_root, sample_interval=1.0, top_n=5)
