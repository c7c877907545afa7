"""Host metrics read from procfs on every request (no sampling, no cache)."""

import logging
import os
import re
import shutil
import time
from pathlib import Path

from dockmaster.core.errors import InternalError
from dockmaster.schemas.system import (
    CpuMetrics,
    DiskMetrics,
    LoadAverage,
    MemoryMetrics,
    NetworkMetrics,
    SystemMetrics,
)

logger = logging.getLogger(__name__)

SECTOR_SIZE = 512

# Whole block devices only; partitions (sda1, nvme0n1p1) would double count.
_WHOLE_DISK = re.compile(r"(sd|vd|xvd)[a-z]+|nvme\d+n\d+")


def _percent(part: float, whole: float) -> float:
    return part / whole * 100 if whole > 0 else 0.0


class MetricsReader:
    """
    Reads CPU, memory, disk, network, load and uptime for the host.

    proc_root is normally /proc; tests point it at a directory of fixture files.
    /proc/stat and /proc/meminfo are required; the other sources fall back to zeros.
    """

    def __init__(self, proc_root: Path = Path("/proc"), disk_path: Path = Path("/")) -> None:
        self.proc_root = Path(proc_root)
        self.disk_path = Path(disk_path)

    def _read(self, name: str, required: bool = False) -> str | None:
        path = self.proc_root / name
        try:
            return path.read_text(encoding="utf-8")
        except OSError as e:
            if required:
                raise InternalError(f"Failed to read {path}") from e
            logger.debug("Optional metrics source unavailable", extra={"path": str(path)})
            return None

    def cpu(self) -> CpuMetrics:
        """Aggregate since boot: usage = (total - idle) / total."""
        text = self._read("stat", required=True) or ""
        fields = text.splitlines()[0].split() if text else []
        if len(fields) < 8 or fields[0] != "cpu":
            raise InternalError("Unexpected /proc/stat format")
        try:
            user, nice, system, idle, iowait, irq, softirq = (int(v) for v in fields[1:8])
        except ValueError as e:
            raise InternalError("Unexpected /proc/stat format") from e
        total = user + nice + system + idle + iowait + irq + softirq
        return CpuMetrics(
            usage=_percent(total - idle, total),
            user_time=user,
            system_time=system,
            idle_time=idle,
            cores=self._cores(),
        )

    def _cores(self) -> int:
        text = self._read("cpuinfo")
        if text:
            count = sum(1 for line in text.splitlines() if line.startswith("processor"))
            if count:
                return count
        return os.cpu_count() or 1

    def memory(self) -> MemoryMetrics:
        text = self._read("meminfo", required=True) or ""
        info: dict[str, int] = {}
        for line in text.splitlines():
            parts = line.split()
            if len(parts) < 2:
                continue
            try:
                # Values are in kB.
                info[parts[0].rstrip(":")] = int(parts[1]) * 1024
            except ValueError:
                continue
        if "MemTotal" not in info:
            raise InternalError("Unexpected /proc/meminfo format")
        total = info["MemTotal"]
        free = info.get("MemFree", 0)
        used = total - free
        return MemoryMetrics(
            total=total,
            used=used,
            free=free,
            available=info.get("MemAvailable", 0),
            usage=_percent(used, total),
            buffers=info.get("Buffers", 0),
            cached=info.get("Cached", 0),
        )

    def disk(self) -> DiskMetrics:
        metrics = DiskMetrics()
        try:
            usage = shutil.disk_usage(self.disk_path)
        except OSError:
            logger.warning("Failed to read disk usage", extra={"path": str(self.disk_path)})
        else:
            metrics.total, metrics.used, metrics.free = usage.total, usage.used, usage.free
            metrics.usage = _percent(usage.used, usage.total)

        for line in (self._read("diskstats") or "").splitlines():
            fields = line.split()
            if len(fields) < 10 or not _WHOLE_DISK.fullmatch(fields[2]):
                continue
            try:
                metrics.read_ops += int(fields[3])
                metrics.read_bytes += int(fields[5]) * SECTOR_SIZE
                metrics.write_ops += int(fields[7])
                metrics.write_bytes += int(fields[9]) * SECTOR_SIZE
            except ValueError:
                continue
        return metrics

    def network(self) -> NetworkMetrics:
        metrics = NetworkMetrics()
        # First two lines of /proc/net/dev are headers.
        for line in (self._read("net/dev") or "").splitlines()[2:]:
            iface, sep, counters = line.partition(":")
            fields = counters.split()
            if not sep or iface.strip() == "lo" or len(fields) < 10:
                continue
            try:
                metrics.bytes_received += int(fields[0])
                metrics.packets_received += int(fields[1])
                metrics.bytes_sent += int(fields[8])
                metrics.packets_sent += int(fields[9])
            except ValueError:
                continue
        return metrics

    def load(self) -> LoadAverage:
        fields = (self._read("loadavg") or "").split()
        try:
            return LoadAverage(load1=float(fields[0]), load5=float(fields[1]), load15=float(fields[2]))
        except (IndexError, ValueError):
            return LoadAverage()

    def uptime(self) -> int:
        fields = (self._read("uptime") or "").split()
        try:
            return int(float(fields[0]))
        except (IndexError, ValueError):
            return 0

    def read(self) -> SystemMetrics:
        return SystemMetrics(
            cpu=self.cpu(),
            memory=self.memory(),
            disk=self.disk(),
            network=self.network(),
            load=self.load(),
            uptime=self.uptime(),
            timestamp=int(time.time()),
        )
