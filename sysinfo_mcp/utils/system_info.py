"""Metrics provider: raw host telemetry collected through psutil and platform.

Functions here return plain numbers and strings; formatting for display lives
in the tool handlers. Sub-queries that some hosts cannot answer (sensors,
hardware UUID, socket table) return ``None`` or raise, and callers wrap them
with :func:`sysinfo_mcp.utils.async_helpers.run_optional`.
"""

from __future__ import annotations

import getpass
import os
import platform
import re
import socket
import subprocess
import sys
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import psutil

_DMI_ROOT = "/sys/class/dmi/id"

_VENDOR_IDS = {
    "GenuineIntel": "Intel",
    "AuthenticAMD": "AMD",
    "HygonGenuine": "Hygon",
    "CentaurHauls": "VIA",
}

_VIRTUAL_PREFIXES = ("docker", "veth", "br-", "virbr", "vmnet", "vboxnet", "tun", "tap", "utun", "zt", "tailscale", "wg")
_WIRELESS_PREFIXES = ("wl", "wlan", "wifi", "wi-fi", "ath", "ra")


def _safe_call(fn, default=None):
    try:
        return fn()
    except Exception:
        return default


def _parse_os_release_file(path: str) -> Dict[str, str]:
    data: Dict[str, str] = {}
    if not os.path.exists(path):
        return data
    try:
        with open(path, "r", encoding="utf-8") as handle:
            for raw_line in handle:
                line = raw_line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                data[key.strip()] = value.strip().strip('"')
    except OSError:
        return {}
    return data


def _read_first_line(path: str) -> str:
    if not os.path.exists(path):
        return ""
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return handle.readline().strip()
    except OSError:
        return ""


def _check_output(*cmd: str) -> str:
    return subprocess.check_output(list(cmd), text=True, stderr=subprocess.DEVNULL, timeout=5).strip()


# ---------------------------------------------------------------------------
# Operating system
# ---------------------------------------------------------------------------


def collect_os_release_meta() -> Dict[str, str]:
    """Distribution name/version/codename from os-release and lsb_release (Linux)."""
    meta: Dict[str, str] = {}
    freedesktop = getattr(platform, "freedesktop_os_release", None)
    if callable(freedesktop):
        fd_data = _safe_call(freedesktop)
        if fd_data:
            meta.update(fd_data)

    os_release_data = _parse_os_release_file("/etc/os-release")
    if os_release_data:
        meta.update(os_release_data)

    if not meta:
        lsb_desc = _safe_call(lambda: _check_output("lsb_release", "-ds").strip('"'))
        if lsb_desc:
            meta["PRETTY_NAME"] = lsb_desc
        lsb_release = _safe_call(lambda: _check_output("lsb_release", "-rs"))
        if lsb_release:
            meta["VERSION_ID"] = lsb_release

    result: Dict[str, str] = {}
    name = meta.get("PRETTY_NAME") or meta.get("NAME") or meta.get("ID")
    if name:
        result["distro"] = name
    version = meta.get("VERSION_ID") or meta.get("VERSION") or _read_first_line("/etc/debian_version")
    if version:
        result["release"] = version
    codename = meta.get("VERSION_CODENAME") or meta.get("UBUNTU_CODENAME")
    if codename:
        result["codename"] = codename
    return result


def os_details() -> Dict[str, str]:
    """Platform, distro, release, codename, kernel and arch of the running OS."""
    system = platform.system()
    details = {
        "platform": sys.platform,
        "distro": system,
        "release": platform.release(),
        "codename": "",
        "kernel": platform.release(),
        "arch": platform.machine(),
    }
    if system == "Linux":
        details.update(collect_os_release_meta())
    elif system == "Darwin":
        mac_version = platform.mac_ver()[0]
        details["distro"] = "macOS"
        if mac_version:
            details["release"] = mac_version
    elif system == "Windows":
        win_release, win_version, _, _ = platform.win32_ver()
        details["distro"] = f"Windows {win_release}".strip()
        details["release"] = win_version or details["release"]
        details["kernel"] = win_version or details["kernel"]
    return details


def hostname() -> str:
    return socket.gethostname()


def current_user() -> Optional[str]:
    return _safe_call(getpass.getuser)


def uptime_seconds() -> float:
    return max(0.0, time.time() - psutil.boot_time())


# ---------------------------------------------------------------------------
# Hardware
# ---------------------------------------------------------------------------


def _read_dmi(field_name: str) -> str:
    return _read_first_line(os.path.join(_DMI_ROOT, field_name))


def hardware_details() -> Dict[str, str]:
    """Manufacturer, model, version and serial of the machine (where readable)."""
    system = platform.system()
    if system == "Linux":
        return {
            "manufacturer": _read_dmi("sys_vendor"),
            "model": _read_dmi("product_name"),
            "version": _read_dmi("product_version"),
            "serial": _read_dmi("product_serial"),
        }
    if system == "Darwin":
        return {
            "manufacturer": "Apple Inc.",
            "model": _safe_call(lambda: _check_output("sysctl", "-n", "hw.model"), ""),
            "version": "",
            "serial": "",
        }
    return {"manufacturer": "", "model": "", "version": "", "serial": ""}


def hardware_uuid() -> Optional[str]:
    """Hardware UUID. Usually needs elevated rights on Linux; may raise."""
    system = platform.system()
    if system == "Linux":
        with open(os.path.join(_DMI_ROOT, "product_uuid"), "r", encoding="utf-8") as handle:
            return handle.readline().strip() or None
    if system == "Darwin":
        output = _check_output("ioreg", "-rd1", "-c", "IOPlatformExpertDevice")
        match = re.search(r'"IOPlatformUUID"\s*=\s*"([^"]+)"', output)
        return match.group(1) if match else None
    return None


# ---------------------------------------------------------------------------
# CPU
# ---------------------------------------------------------------------------


def read_cpuinfo(path: str = "/proc/cpuinfo") -> Dict[str, str]:
    """Key/value pairs of the first processor block of /proc/cpuinfo."""
    info: Dict[str, str] = {}
    if not os.path.exists(path):
        return info
    with open(path, "r", encoding="utf-8", errors="ignore") as handle:
        for line in handle:
            if not line.strip():
                if info:
                    break
                continue
            if ":" not in line:
                continue
            key, value = line.split(":", 1)
            info.setdefault(key.strip(), value.strip())
    return info


def _manufacturer_from_brand(brand: str) -> str:
    lowered = brand.lower()
    for needle, vendor in (("intel", "Intel"), ("amd", "AMD"), ("apple", "Apple"), ("arm", "ARM"), ("qualcomm", "Qualcomm")):
        if needle in lowered:
            return vendor
    return brand.split()[0] if brand else ""


def cpu_identity() -> Dict[str, Any]:
    """Brand, manufacturer, family, model, nominal speed and core counts."""
    brand = ""
    family = ""
    model = ""
    manufacturer = ""
    system = platform.system()

    if system == "Linux":
        cpuinfo = _safe_call(read_cpuinfo, {})
        brand = cpuinfo.get("model name") or cpuinfo.get("Hardware") or cpuinfo.get("Model", "")
        family = cpuinfo.get("cpu family", "")
        model = cpuinfo.get("model", "")
        vendor_id = cpuinfo.get("vendor_id", "")
        manufacturer = _VENDOR_IDS.get(vendor_id, vendor_id)
    elif system == "Darwin":
        brand = _safe_call(lambda: _check_output("sysctl", "-n", "machdep.cpu.brand_string"), "")
        family = _safe_call(lambda: _check_output("sysctl", "-n", "machdep.cpu.family"), "")
        model = _safe_call(lambda: _check_output("sysctl", "-n", "machdep.cpu.model"), "")

    brand = brand or platform.processor()
    manufacturer = manufacturer or _manufacturer_from_brand(brand)

    freq = _safe_call(psutil.cpu_freq)
    speed_ghz = None
    if freq:
        mhz = freq.max or freq.current
        if mhz:
            speed_ghz = round(mhz / 1000, 2)

    return {
        "brand": brand,
        "manufacturer": manufacturer,
        "family": family,
        "model": model,
        "speed_ghz": speed_ghz,
        "physical_cores": psutil.cpu_count(logical=False),
        "logical_cores": psutil.cpu_count(logical=True),
        "arch": platform.machine(),
    }


def cpu_usage(interval: float) -> Dict[str, float]:
    """Overall/user/system/idle CPU percentages sampled over ``interval`` seconds."""
    times = psutil.cpu_times_percent(interval=interval)
    idle = float(times.idle)
    return {
        "overall": max(0.0, 100.0 - idle),
        "user": float(times.user),
        "system": float(times.system),
        "idle": idle,
    }


def cpu_temperature() -> Optional[float]:
    """First available package/core temperature in °C, or None."""
    sensors = getattr(psutil, "sensors_temperatures", None)
    if sensors is None:
        return None
    temps = sensors()
    if not temps:
        return None
    for key in ("coretemp", "k10temp", "cpu_thermal", "zenpower"):
        readings = temps.get(key)
        if readings:
            return readings[0].current
    for readings in temps.values():
        if readings and readings[0].current is not None:
            return readings[0].current
    return None


def load_average() -> Tuple[float, float, float]:
    return psutil.getloadavg()


# ---------------------------------------------------------------------------
# Memory and disks
# ---------------------------------------------------------------------------


def memory_snapshot():
    """Tuple of (virtual_memory, swap_memory) psutil records."""
    return psutil.virtual_memory(), psutil.swap_memory()


def total_memory() -> int:
    return psutil.virtual_memory().total


def disk_partitions() -> List[Dict[str, Any]]:
    """Mounted partitions with usage; unreadable mounts are skipped."""
    disks: List[Dict[str, Any]] = []
    for part in psutil.disk_partitions(all=False):
        usage = _safe_call(lambda: psutil.disk_usage(part.mountpoint))
        if usage is None:
            continue
        disks.append(
            {
                "device": part.device,
                "mountpoint": part.mountpoint,
                "fstype": part.fstype,
                "total": usage.total,
                "used": usage.used,
                "free": usage.free,
                "percent": usage.percent,
            }
        )
    return disks


# ---------------------------------------------------------------------------
# Processes
# ---------------------------------------------------------------------------


@dataclass
class ProcessSample:
    """One process as seen during a sampling window."""

    pid: int
    name: str
    cpu_percent: float
    rss: int
    vms: int
    status: str
    started: Optional[float]
    user: Optional[str]


_PROCESS_ATTRS = ["pid", "name", "username", "status", "create_time", "memory_info"]


def process_snapshot(interval: float) -> List[ProcessSample]:
    """Sample every visible process, measuring CPU over ``interval`` seconds."""
    tracked = []
    for proc in psutil.process_iter(_PROCESS_ATTRS):
        try:
            proc.cpu_percent(None)
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
            continue
        tracked.append(proc)

    if interval > 0:
        time.sleep(interval)

    samples: List[ProcessSample] = []
    for proc in tracked:
        try:
            cpu = proc.cpu_percent(None)
        except (psutil.NoSuchProcess, psutil.ZombieProcess):
            continue
        except psutil.AccessDenied:
            cpu = 0.0
        info = proc.info
        mem = info.get("memory_info")
        samples.append(
            ProcessSample(
                pid=info["pid"],
                name=info.get("name") or "",
                cpu_percent=float(cpu or 0.0),
                rss=getattr(mem, "rss", 0) or 0,
                vms=getattr(mem, "vms", 0) or 0,
                status=info.get("status") or "unknown",
                started=info.get("create_time"),
                user=info.get("username"),
            )
        )
    return samples


def process_status_counts(samples: List[ProcessSample]) -> Dict[str, int]:
    """Total/running/sleeping/blocked counts over a process snapshot."""
    counts = {"total": len(samples), "running": 0, "sleeping": 0, "blocked": 0}
    for sample in samples:
        if sample.status == psutil.STATUS_RUNNING:
            counts["running"] += 1
        elif sample.status in (psutil.STATUS_SLEEPING, psutil.STATUS_IDLE):
            counts["sleeping"] += 1
        elif sample.status == psutil.STATUS_DISK_SLEEP:
            counts["blocked"] += 1
    return counts


# ---------------------------------------------------------------------------
# Network
# ---------------------------------------------------------------------------


def _interface_type(name: str, is_loopback: bool) -> str:
    if is_loopback:
        return "loopback"
    if name.lower().startswith(_WIRELESS_PREFIXES):
        return "wireless"
    return "wired"


def network_interfaces() -> List[Dict[str, Any]]:
    """Addresses and link state per network interface."""
    stats = psutil.net_if_stats()
    interfaces: List[Dict[str, Any]] = []
    for name, addrs in psutil.net_if_addrs().items():
        ip4 = next((a.address for a in addrs if a.family == socket.AF_INET), "")
        ip6 = next((a.address.split("%")[0] for a in addrs if a.family == socket.AF_INET6), "")
        mac = next((a.address for a in addrs if a.family == psutil.AF_LINK), "")
        is_loopback = ip4.startswith("127.") or ip6 == "::1" or name.lower().startswith("lo")
        stat = stats.get(name)
        interfaces.append(
            {
                "name": name,
                "type": _interface_type(name, is_loopback),
                "ip4": ip4,
                "ip6": ip6,
                "mac": mac,
                "internal": is_loopback,
                "virtual": name.lower().startswith(_VIRTUAL_PREFIXES),
                "speed_mbps": stat.speed if stat else 0,
                "is_up": bool(stat.isup) if stat else False,
            }
        )
    return interfaces


def network_connections() -> List[Tuple[str, str]]:
    """(protocol, state) for every inet socket; may raise AccessDenied on macOS."""
    connections = []
    for conn in psutil.net_connections(kind="inet"):
        protocol = "tcp" if conn.type == socket.SOCK_STREAM else "udp"
        connections.append((protocol, (conn.status or "").lower()))
    return connections


__all__ = [
    "ProcessSample",
    "collect_os_release_meta",
    "cpu_identity",
    "cpu_temperature",
    "cpu_usage",
    "current_user",
    "disk_partitions",
    "hardware_details",
    "hardware_uuid",
    "hostname",
    "load_average",
    "memory_snapshot",
    "network_connections",
    "network_interfaces",
    "os_details",
    "process_snapshot",
    "process_status_counts",
    "read_cpuinfo",
    "total_memory",
    "uptime_seconds",
]
