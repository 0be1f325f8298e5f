"""Statistics collection engine for serverstats."""

import os
import time
from collections.abc import Callable

import psutil

from serverstats.config import ServerStatsSettings, settings
from serverstats.logutil import get_logger
from serverstats.models import (
    CpuTimes,
    DiskScope,
    DiskSummary,
    MemoryInfo,
    MemorySource,
    ProcessEntry,
    SortKey,
)
from serverstats.procfs import read_cpu_times, read_meminfo
from serverstats.units import df_percent, format_df_size

logger = get_logger("monitor")


def busy_percent(prev: CpuTimes, curr: CpuTimes) -> float:
    """Share of non-idle ticks between two samples, as a percentage."""
    total_delta = curr.grand_total - prev.grand_total
    idle_delta = curr.idle_total - prev.idle_total
    if total_delta == 0:
        return 0.0
    return round((total_delta - idle_delta) / total_delta * 100, 1)


def select_memory_source(meminfo: dict[str, int]) -> MemorySource:
    """Pick MemAvailable when the kernel exports it (3.14+), else estimate."""
    if "MemAvailable" in meminfo:
        return MemorySource.AVAILABLE
    return MemorySource.ESTIMATED


def memory_from_meminfo(meminfo: dict[str, int]) -> MemoryInfo:
    """Build a MemoryInfo from parsed /proc/meminfo values."""
    source = select_memory_source(meminfo)
    if source is MemorySource.AVAILABLE:
        available_kb = meminfo["MemAvailable"]
    else:
        available_kb = (
            meminfo.get("MemFree", 0) + meminfo.get("Buffers", 0) + meminfo.get("Cached", 0)
        )
    return MemoryInfo(
        total_kb=meminfo.get("MemTotal", 0),
        available_kb=available_kb,
        source=source,
    )


def mount_device(mountpoint: str) -> int:
    """Device number backing a mount point; every tmpfs gets its own."""
    return os.stat(mountpoint).st_dev


def rank_processes(
    processes: list[ProcessEntry], key: SortKey, limit: int = 5
) -> list[ProcessEntry]:
    """Return the ``limit`` heaviest processes by ``key``, heaviest first."""
    key_func = {
        SortKey.CPU: lambda p: p.cpu_percent,
        SortKey.MEM: lambda p: p.mem_percent,
    }
    # sorted() is stable, so ties keep listing order
    return sorted(processes, key=key_func[key], reverse=True)[:limit]


class SystemMonitor:
    """
    Collects the figures for one report.

    Each method reads the system afresh and returns a value; nothing is
    cached between calls.
    """

    def __init__(
        self,
        config: ServerStatsSettings = settings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize the SystemMonitor.

        Args:
            config: Settings providing the proc root, sample interval and top_n.
            sleep: Blocking wait used between the two CPU samples.
        """
        self._config = config
        self._sleep = sleep

    @property
    def top_n(self) -> int:
        """Number of processes in each ranking."""
        return self._config.top_n

    def cpu_percent(self) -> float:
        """Measure total CPU busy percentage over one sample interval."""
        first = read_cpu_times(self._config.proc_root)
        self._sleep(self._config.sample_interval)
        second = read_cpu_times(self._config.proc_root)
        return busy_percent(first, second)

    def memory(self) -> MemoryInfo:
        """Read total and available memory."""
        info = memory_from_meminfo(read_meminfo(self._config.proc_root))
        logger.debug("memory_source_selected", source=info.source.name)
        return info

    def disk(self) -> DiskSummary:
        """
        Summarize disk usage across mounted filesystems.

        Falls back to the root filesystem when no mount could be queried,
        and to placeholder dashes when not even the root can be.
        """
        usages = self._mount_usages()
        scope = DiskScope.ALL_MOUNTS if usages else DiskScope.ROOT
        logger.debug("disk_scope_selected", scope=scope.name, mounts=len(usages))
        if scope is DiskScope.ROOT:
            try:
                usages = [psutil.disk_usage(DiskScope.ROOT.value)]
            except OSError:
                logger.debug("root_filesystem_unreadable", exc_info=True)
                return DiskSummary(used="-", total="-", percent="-", scope=scope)

        total = sum(u.total for u in usages)
        used = sum(u.used for u in usages)
        free = sum(u.free for u in usages)
        return DiskSummary(
            used=format_df_size(used),
            total=format_df_size(total),
            percent=df_percent(used, free),
            scope=scope,
        )

    def _mount_usages(self) -> list:
        """
        Usage of every distinct mounted filesystem that can be queried.

        Pseudo filesystems report no blocks and are left out, as df does.
        """
        try:
            partitions = psutil.disk_partitions(all=True)
        except (psutil.Error, OSError):
            logger.debug("mount_listing_unavailable", exc_info=True)
            return []

        usages = []
        seen_devices: set[int] = set()
        for part in partitions:
            try:
                device = mount_device(part.mountpoint)
                # Bind mounts repeat the same device
                if device in seen_devices:
                    continue
                usage = psutil.disk_usage(part.mountpoint)
            except OSError:
                logger.debug("mount_unreadable", mountpoint=part.mountpoint)
                continue
            seen_devices.add(device)
            if usage.total == 0:
                continue
            usages.append(usage)
        return usages

    def top_processes(self) -> tuple[list[ProcessEntry], list[ProcessEntry]]:
        """Rank one process listing by CPU and by memory."""
        processes = self._collect_processes()
        return (
            rank_processes(processes, SortKey.CPU, self.top_n),
            rank_processes(processes, SortKey.MEM, self.top_n),
        )

    def _collect_processes(self) -> list[ProcessEntry]:
        """
        Collect an entry for every running process.

        CPU% is the lifetime average used by ps: CPU time over elapsed wall
        time. Returns an empty list when processes cannot be listed at all.
        """
        processes: list[ProcessEntry] = []
        attrs = ["pid", "name", "username", "cpu_times", "create_time", "memory_percent"]
        now = time.time()

        try:
            for proc in psutil.process_iter(attrs=attrs):
                try:
                    info = proc.info
                    cpu_times = info.get("cpu_times")
                    cpu_seconds = cpu_times.user + cpu_times.system if cpu_times else 0.0
                    elapsed = now - (info.get("create_time") or now)
                    cpu_percent = cpu_seconds / elapsed * 100 if elapsed > 0 else 0.0

                    processes.append(
                        ProcessEntry(
                            pid=info.get("pid", 0),
                            user=info.get("username") or "?",
                            command=info.get("name") or "",
                            cpu_percent=round(cpu_percent, 1),
                            mem_percent=round(info.get("memory_percent") or 0.0, 1),
                        )
                    )
                except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
                    # Process died mid-listing or is not ours to inspect
                    continue
        except (psutil.Error, OSError):
            logger.debug("process_listing_unavailable", exc_info=True)
            return []

        return processes
