"""Tests for the psutil-backed metrics provider helpers."""

import psutil

from sysinfo_mcp.mcp.tools.network import summarize_connections
from sysinfo_mcp.utils import system_info
from sysinfo_mcp.utils.system_info import ProcessSample

CPUINFO = """\
processor\t: 0
vendor_id\t: AuthenticAMD
cpu family\t: 25
model\t\t: 80
model name\t: AMD Ryzen 7 5800U with Radeon Graphics

processor\t: 1
vendor_id\t: AuthenticAMD
model name\t: second block is ignored
"""

OS_RELEASE = """\
# comment
NAME="Ubuntu"
VERSION_ID="24.04"
VERSION_CODENAME=noble
PRETTY_NAME="Ubuntu 24.04.1 LTS"
garbage line
"""


def _sample(status):
    return ProcessSample(pid=1, name="x", cpu_percent=0.0, rss=0, vms=0, status=status, started=None, user=None)


class TestReadCpuinfo:
    """Tests for /proc/cpuinfo parsing."""

    def test_first_block_only(self, tmp_path):
        path = tmp_path / "cpuinfo"
        path.write_text(CPUINFO)

        info = system_info.read_cpuinfo(str(path))

        assert info["vendor_id"] == "AuthenticAMD"
        assert info["cpu family"] == "25"
        assert info["model"] == "80"
        assert info["model name"] == "AMD Ryzen 7 5800U with Radeon Graphics"

    def test_missing_file(self, tmp_path):
        assert system_info.read_cpuinfo(str(tmp_path / "missing")) == {}


class TestOsRelease:
    """Tests for os-release parsing."""

    def test_parses_quoted_values(self, tmp_path):
        path = tmp_path / "os-release"
        path.write_text(OS_RELEASE)

        data = system_info._parse_os_release_file(str(path))

        assert data["NAME"] == "Ubuntu"
        assert data["PRETTY_NAME"] == "Ubuntu 24.04.1 LTS"
        assert data["VERSION_CODENAME"] == "noble"
        assert "garbage line" not in data

    def test_missing_file(self, tmp_path):
        assert system_info._parse_os_release_file(str(tmp_path / "nope")) == {}


class TestProcessStatusCounts:
    """Tests for process summary counting."""

    def test_counts(self):
        samples = [
            _sample(psutil.STATUS_RUNNING),
            _sample(psutil.STATUS_SLEEPING),
            _sample(psutil.STATUS_IDLE),
            _sample(psutil.STATUS_DISK_SLEEP),
            _sample(psutil.STATUS_ZOMBIE),
        ]
        assert system_info.process_status_counts(samples) == {
            "total": 5,
            "running": 1,
            "sleeping": 2,
            "blocked": 1,
        }

    def test_empty(self):
        assert system_info.process_status_counts([]) == {"total": 0, "running": 0, "sleeping": 0, "blocked": 0}


class TestInterfaceType:
    """Tests for interface classification."""

    def test_loopback(self):
        assert system_info._interface_type("lo", True) == "loopback"

    def test_wireless(self):
        assert system_info._interface_type("wlp2s0", False) == "wireless"

    def test_wired(self):
        assert system_info._interface_type("enp3s0", False) == "wired"


class TestSummarizeConnections:
    """Tests for connection counting."""

    def test_counts_by_protocol_and_state(self):
        connections = [
            ("tcp", "listen"),
            ("tcp", "established"),
            ("tcp", "time_wait"),
            ("udp", "none"),
            ("udp", ""),
        ]
        assert summarize_connections(connections) == {
            "total": 5,
            "tcp": 3,
            "udp": 2,
            "listening": 1,
            "established": 1,
        }

    def test_empty(self):
        assert summarize_connections([])["total"] == 0


class TestLiveProvider:
    """Smoke tests against the real host."""

    def test_memory_snapshot(self):
        mem, swap = system_info.memory_snapshot()
        assert mem.total > 0
        assert swap.total >= 0

    def test_cpu_usage_bounds(self):
        usage = system_info.cpu_usage(0.05)
        assert 0.0 <= usage["overall"] <= 100.0
        assert set(usage) == {"overall", "user", "system", "idle"}

    def test_process_snapshot_contains_self(self):
        import os

        samples = system_info.process_snapshot(0)
        assert any(sample.pid == os.getpid() for sample in samples)
