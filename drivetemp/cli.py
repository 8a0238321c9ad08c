"""
drivetemp command line interface.

Prints the temperature of the given drives (or of every whole-disk block
device) using smartctl, either as aligned columns or in the classic
hddtemp-style one-line-per-drive layout.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from drivetemp.config import Settings, get_settings
from drivetemp.models.drive import TemperatureUnit
from drivetemp.services import drive_monitor
from drivetemp.services.formatter import render

__version__ = "1.0.0"

logger = logging.getLogger("drivetemp")


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="drivetemp",
        description="Report drive temperatures using smartctl.",
    )
    parser.add_argument(
        "devices",
        nargs="*",
        help=(
            "Device paths, e.g. /dev/sda /dev/nvme0n1. "
            "Default: DRIVETEMP_DEVICES or all whole-disk block devices."
        ),
    )
    parser.add_argument(
        "-u",
        "--unit",
        choices=[unit.value for unit in TemperatureUnit],
        type=str.upper,
        default=None,
        help="Temperature unit (default: DRIVETEMP_UNIT or C)",
    )
    parser.add_argument(
        "-c",
        "--classic",
        action="store_true",
        default=None,
        help="Use the classic 'device: name: temperature' layout.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug information to stderr.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    return parser.parse_args(argv)


def configure_logging(settings: Settings, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    logger.setLevel(level)


def run(args: argparse.Namespace, settings: Settings) -> str:
    unit = TemperatureUnit(args.unit) if args.unit else settings.unit
    classic = settings.classic if args.classic is None else args.classic

    drive_monitor.check_environment(settings)
    devices: List[str] = drive_monitor.resolve_devices(settings, args.devices)
    if not devices:
        logger.warning("No drives found")
    readings = drive_monitor.collect_readings(devices, settings)
    rows = drive_monitor.build_rows(readings, unit, classic)
    return render(rows, classic)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = get_settings()
        configure_logging(settings, args.verbose)
        output = run(args, settings)
    except RuntimeError as exc:
        print(f"drivetemp: {exc}", file=sys.stderr)
        return 1

    sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
