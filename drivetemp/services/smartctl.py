import logging
import os
import re
import subprocess
from typing import List, Tuple

import psutil

logger = logging.getLogger(__name__)

# "smartctl 7.3 2022-02-28 r5338 [x86_64-linux-6.1.0] (local build)"
_VERSION_PATTERN = re.compile(r"^smartctl\s+(\d+)\.(\d+)")

# Whole disks only: sda, hdb, nvme0n1 (no sda1, nvme0n1p2)
_WHOLE_DISK_PATTERN = re.compile(r"^(?:[sh]d[a-z]+|nvme\d+n\d+)$")

MIN_SMARTCTL_VERSION = (6, 0)

# Identification, SMART attributes and the SCT temperature status log
_REPORT_ARGS = ["-i", "-A", "-l", "scttempsts"]


def smartctl_version(binary: str = "smartctl") -> Tuple[int, int]:
    """
    Return the (major, minor) version of the installed smartctl.

    Raises RuntimeError if smartctl is missing, its version banner cannot be
    parsed, or the version is older than MIN_SMARTCTL_VERSION.
    """
    try:
        result = subprocess.run(
            [binary, "--version"],
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except FileNotFoundError as exc:
        raise RuntimeError(
            "smartctl binary not found; install smartmontools on the host"
        ) from exc

    first_line = result.stdout.splitlines()[0] if result.stdout else ""
    match = _VERSION_PATTERN.match(first_line)
    if not match:
        raise RuntimeError(
            f"Could not determine smartctl version from {first_line!r}"
        )

    version = (int(match.group(1)), int(match.group(2)))
    if version < MIN_SMARTCTL_VERSION:
        raise RuntimeError(
            f"smartctl {version[0]}.{version[1]} is not supported, "
            f"at least {MIN_SMARTCTL_VERSION[0]}.{MIN_SMARTCTL_VERSION[1]} is required"
        )
    return version


def ensure_privileges() -> None:
    if os.geteuid() != 0:
        raise RuntimeError("drivetemp must be run as root to query drives")


def list_block_devices() -> List[str]:
    """
    Enumerate whole-disk block devices known to the kernel.

    psutil reports per-disk I/O counters for disks and partitions alike;
    partitions are filtered out by name.
    """
    counters = psutil.disk_io_counters(perdisk=True) or {}
    names = sorted(name for name in counters if _WHOLE_DISK_PATTERN.match(name))
    return [f"/dev/{name}" for name in names]


def read_report(device: str, binary: str = "smartctl", timeout: int = 30) -> List[str]:
    """
    Run smartctl for a single device and return its report as lines.

    smartctl encodes drive health in its exit status, so a nonzero code is
    not treated as a failure here. A timeout degrades to an empty report and
    undecodable bytes from drive firmware strings are replaced.
    """
    try:
        result = subprocess.run(
            [binary, *_REPORT_ARGS, device],
            check=False,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        raise RuntimeError(
            "smartctl binary not found; install smartmontools on the host"
        ) from exc
    except subprocess.TimeoutExpired:
        logger.warning(f"smartctl timed out after {timeout}s for {device}")
        return []

    if result.returncode != 0:
        logger.debug(f"smartctl exited with status {result.returncode} for {device}")

    return result.stdout.splitlines()
