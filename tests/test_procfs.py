"""Tests for the /proc readers and the platform guard."""

import pytest

from serverstats.errors import ServerStatsError, UnsupportedPlatformError
from serverstats.models import CpuTimes
from serverstats.procfs import (
    ensure_procfs,
    parse_cpu_line,
    parse_meminfo,
    read_cpu_times,
    read_meminfo,
)


class TestParseCpuLine:
    """Tests for parsing the aggregate cpu line."""

    def test_all_columns(self):
        """Test a modern ten-counter line."""
        times = parse_cpu_line("cpu  1 2 3 4 5 6 7 8 9 10\n")

        assert times == CpuTimes(1, 2, 3, 4, 5, 6, 7, 8, 9, 10)

    def test_short_line_pads_with_zero(self):
        """Test old kernels without steal/guest columns."""
        times = parse_cpu_line("cpu 10 0 5 100 2 1 1")

        assert times.softirq == 1
        assert times.steal == 0
        assert times.guest_nice == 0

    def test_rejects_per_core_line(self):
        """Test a per-core line is not mistaken for the aggregate."""
        with pytest.raises(ValueError):
            parse_cpu_line("cpu0 1 2 3 4")


class TestParseMeminfo:
    """Tests for parsing /proc/meminfo."""

    def test_labels_match_exactly(self):
        """Test Cached and SwapCached are kept apart."""
        info = parse_meminfo("Cached:    100 kB\nSwapCached:   7 kB\n")

        assert info["Cached"] == 100
        assert info["SwapCached"] == 7

    def test_values_without_unit(self):
        """Test counters such as HugePages_Total that carry no unit."""
        info = parse_meminfo("MemTotal: 2048 kB\nHugePages_Total:       0\n")

        assert info == {"MemTotal": 2048, "HugePages_Total": 0}

    def test_skips_malformed_lines(self):
        """Test lines without a colon or a number are ignored."""
        info = parse_meminfo("garbage\nMemFree:\nMemTotal: 10 kB\n")

        assert info == {"MemTotal": 10}


class TestReaders:
    """Tests for reading the files under a proc root."""

    def test_read_cpu_times(self, proc_root):
        """Test only the first, aggregate line is read."""
        times = read_cpu_times(proc_root)

        assert times.user == 100
        assert times.idle_total == 850

    def test_read_meminfo(self, proc_root):
        """Test meminfo is read into a label mapping."""
        info = read_meminfo(proc_root)

        assert info["MemTotal"] == 1000
        assert info["MemAvailable"] == 250


class TestEnsureProcfs:
    """Tests for the platform guard."""

    def test_accepts_complete_procfs(self, proc_root):
        """Test a proc root with stat and meminfo passes."""
        ensure_procfs(proc_root)

    def test_missing_stat(self, proc_root):
        """Test a missing CPU counter file is rejected."""
        (proc_root / "stat").unlink()

        with pytest.raises(UnsupportedPlatformError) as excinfo:
            ensure_procfs(proc_root)

        assert excinfo.value.path == proc_root / "stat"

    def test_missing_meminfo(self, proc_root):
        """Test a missing memory counter file is rejected."""
        (proc_root / "meminfo").unlink()

        with pytest.raises(UnsupportedPlatformError):
            ensure_procfs(proc_root)

    def test_missing_root(self, tmp_path):
        """Test a host without procfs at all."""
        with pytest.raises(ServerStatsError):
            ensure_procfs(tmp_path / "nowhere")

    def test_directory_is_not_readable_counter(self, proc_root):
        """Test a directory in place of a counter file is rejected."""
        (proc_root / "meminfo").unlink()
        (proc_root / "meminfo").mkdir()

        with pytest.raises(UnsupportedPlatformError):
            ensure_procfs(proc_root)
