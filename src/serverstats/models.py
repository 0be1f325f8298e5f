"""Data models for serverstats."""

from dataclasses import dataclass
from enum import Enum


class MemorySource(Enum):
    """Where the available-memory figure came from."""

    AVAILABLE = "MemAvailable"
    ESTIMATED = "MemFree+Buffers+Cached"


class DiskScope(Enum):
    """Which filesystems a disk summary covers."""

    ALL_MOUNTS = "total"
    ROOT = "/"


class SortKey(Enum):
    """Sort keys for the process rankings."""

    CPU = "cpu"
    MEM = "mem"


@dataclass(slots=True, frozen=True)
class CpuTimes:
    """Aggregate CPU time counters, in ticks since boot."""

    user: int = 0
    nice: int = 0
    system: int = 0
    idle: int = 0
    iowait: int = 0
    irq: int = 0
    softirq: int = 0
    steal: int = 0
    guest: int = 0
    guest_nice: int = 0

    @property
    def idle_total(self) -> int:
        return self.idle + self.iowait

    @property
    def active_total(self) -> int:
        # guest time is already accounted for in user/nice
        return self.user + self.nice + self.system + self.irq + self.softirq + self.steal

    @property
    def grand_total(self) -> int:
        return self.idle_total + self.active_total


@dataclass(slots=True, frozen=True)
class MemoryInfo:
    """Total and available memory, in kB."""

    total_kb: int
    available_kb: int
    source: MemorySource = MemorySource.AVAILABLE

    @property
    def used_kb(self) -> int:
        """Used memory; negative if the kernel reports available > total."""
        return self.total_kb - self.available_kb

    @property
    def percent(self) -> float:
        if self.total_kb == 0:
            return 0.0
        return round(self.used_kb / self.total_kb * 100, 1)


@dataclass(slots=True, frozen=True)
class DiskSummary:
    """Preformatted disk usage figures."""

    used: str
    total: str
    percent: str  # includes the trailing '%', or '-'
    scope: DiskScope = DiskScope.ALL_MOUNTS


@dataclass(slots=True, frozen=True)
class ProcessEntry:
    """Immutable snapshot of one process for ranking."""

    pid: int
    user: str
    command: str
    cpu_percent: float  # lifetime average, ps-style
    mem_percent: float
