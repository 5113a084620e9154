"""Host snapshot: date, host, kernel, disks, largest directories and processes."""

from __future__ import annotations

import logging
import platform
import socket
import time
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple

import psutil
from rich.console import Console
from rich.table import Table
from rich.text import Text

from systoolkit.scan.pathset import build_pathset
from systoolkit.utils.files import format_size

LOGGER = logging.getLogger(__name__)

CPU_SAMPLE_INTERVAL = 0.1


@dataclass(slots=True)
class DiskUsage:
    device: str
    mountpoint: str
    total: int
    used: int
    free: int
    percent: float


@dataclass(slots=True)
class ProcessInfo:
    pid: int
    name: str
    cpu_percent: float
    memory_percent: float


@dataclass(slots=True)
class HostSnapshot:
    taken_at: datetime
    hostname: str
    kernel: str
    disks: List[DiskUsage] = field(default_factory=list)
    largest_dirs: List[Tuple[Path, int]] = field(default_factory=list)
    processes: List[ProcessInfo] = field(default_factory=list)


def disk_usage(limit: int = 5) -> List[DiskUsage]:
    disks: List[DiskUsage] = []
    for partition in psutil.disk_partitions(all=False):
        if len(disks) >= limit:
            break
        try:
            usage = psutil.disk_usage(partition.mountpoint)
        except OSError as exc:
            LOGGER.debug("Skipping %s: %s", partition.mountpoint, exc)
            continue
        disks.append(
            DiskUsage(
                device=partition.device,
                mountpoint=partition.mountpoint,
                total=usage.total,
                used=usage.used,
                free=usage.free,
                percent=usage.percent,
            )
        )
    return disks


def largest_directories(root: Path, limit: int = 5) -> List[Tuple[Path, int]]:
    """Directories under ``root`` (itself included) by cumulative file size."""
    root = Path(root)
    totals: Dict[Path, int] = defaultdict(int)
    for entry in build_pathset(root):
        directory = entry.path.parent
        while True:
            totals[directory] += entry.size
            if directory == root or directory == directory.parent:
                break
            directory = directory.parent
    ranked = sorted(totals.items(), key=lambda item: (-item[1], str(item[0])))
    return ranked[:limit]


def top_processes(limit: int = 5, interval: float = CPU_SAMPLE_INTERVAL) -> List[ProcessInfo]:
    """Processes ranked by CPU usage measured over ``interval`` seconds.

    psutil returns 0.0 from the first ``cpu_percent`` call on a process, so
    every counter is primed, then read again after the interval.
    """
    primed: List[psutil.Process] = []
    for proc in psutil.process_iter():
        try:
            proc.cpu_percent(None)
        except psutil.Error:
            continue
        primed.append(proc)

    time.sleep(interval)

    processes: List[ProcessInfo] = []
    for proc in primed:
        try:
            with proc.oneshot():
                info = ProcessInfo(
                    pid=proc.pid,
                    name=proc.name() or "?",
                    cpu_percent=proc.cpu_percent(None),
                    memory_percent=proc.memory_percent(),
                )
        except psutil.Error as exc:
            LOGGER.debug("Skipping process %s: %s", proc.pid, exc)
            continue
        processes.append(info)
    processes.sort(key=lambda proc: (-proc.cpu_percent, proc.pid))
    return processes[:limit]


def take_snapshot(root: Path, *, rows: int = 5) -> HostSnapshot:
    return HostSnapshot(
        taken_at=datetime.now().astimezone(),
        hostname=socket.gethostname(),
        kernel=f"{platform.system()} {platform.release()}",
        disks=disk_usage(rows),
        largest_dirs=largest_directories(root, rows),
        processes=top_processes(rows),
    )


def render_snapshot(snapshot: HostSnapshot, console: Console) -> None:
    console.print(f"Date: {snapshot.taken_at:%Y-%m-%d %H:%M:%S %Z}")
    console.print(f"Host: {snapshot.hostname}", markup=False, highlight=False)
    console.print(f"Kernel: {snapshot.kernel}", markup=False, highlight=False)

    disks = Table(show_header=True, header_style="bold magenta", title="Disks")
    disks.add_column("Device")
    disks.add_column("Size", justify="right")
    disks.add_column("Used", justify="right")
    disks.add_column("Avail", justify="right")
    disks.add_column("Use%", justify="right")
    disks.add_column("Mounted on")
    for disk in snapshot.disks:
        disks.add_row(
            Text(disk.device),
            format_size(disk.total),
            format_size(disk.used),
            format_size(disk.free),
            f"{disk.percent:.0f}%",
            Text(disk.mountpoint),
        )
    console.print(disks)

    dirs = Table(show_header=True, header_style="bold magenta", title="Largest directories")
    dirs.add_column("Size", justify="right")
    dirs.add_column("Directory", overflow="fold")
    for directory, size in snapshot.largest_dirs:
        dirs.add_row(format_size(size), Text(str(directory)))
    console.print(dirs)

    procs = Table(show_header=True, header_style="bold magenta", title="Processes")
    procs.add_column("PID", justify="right")
    procs.add_column("Command")
    procs.add_column("%CPU", justify="right")
    procs.add_column("%MEM", justify="right")
    for proc in snapshot.processes:
        procs.add_row(str(proc.pid), Text(proc.name), f"{proc.cpu_percent:.1f}", f"{proc.memory_percent:.1f}")
    console.print(procs)
