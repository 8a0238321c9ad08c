import logging
from typing import List, Optional, Sequence

from drivetemp.config import Settings, get_settings
from drivetemp.models.drive import (
    DriveReading,
    DriveStatus,
    ResultRow,
    TemperatureUnit,
)
from drivetemp.services import smartctl
from drivetemp.services.report_parser import read_drive
from drivetemp.services.units import convert_temperature

logger = logging.getLogger(__name__)


def check_environment(settings: Settings) -> None:
    """
    Run the fatal environment checks once, before any drive is queried.

    Raises RuntimeError if smartctl is unusable or privileges are missing.
    """
    if settings.require_root:
        smartctl.ensure_privileges()
    major, minor = smartctl.smartctl_version(settings.smartctl_binary)
    logger.debug(f"Using smartctl {major}.{minor}")


def resolve_devices(settings: Settings, devices: Optional[Sequence[str]] = None) -> List[str]:
    """Explicit devices win over configured ones; enumerate if neither is set."""
    if devices:
        return list(devices)
    if settings.devices:
        return list(settings.devices)
    return smartctl.list_block_devices()


def collect_readings(devices: Sequence[str], settings: Settings) -> List[DriveReading]:
    """Query every device in order and extract its Celsius reading."""
    readings: List[DriveReading] = []
    for device in devices:
        lines = smartctl.read_report(
            device,
            binary=settings.smartctl_binary,
            timeout=settings.smartctl_timeout_seconds,
        )
        readings.append(read_drive(device, lines))
    return readings


def to_row(reading: DriveReading, unit: TemperatureUnit, classic: bool = False) -> ResultRow:
    if reading.identity.dialect is None:
        return ResultRow(device=reading.device)

    if reading.temperature_celsius is None:
        return ResultRow(device=reading.device, name=reading.identity.name)

    value = convert_temperature(reading.temperature_celsius, unit)
    return ResultRow(
        device=reading.device,
        name=reading.identity.name,
        temperature=str(value),
        unit_suffix=unit.suffix if classic else "",
    )


def build_rows(
    readings: Sequence[DriveReading],
    unit: TemperatureUnit,
    classic: bool = False,
) -> List[ResultRow]:
    return [to_row(reading, unit, classic) for reading in readings]


def to_status(reading: DriveReading, unit: TemperatureUnit) -> DriveStatus:
    temperature = None
    if reading.temperature_celsius is not None:
        temperature = convert_temperature(reading.temperature_celsius, unit)
    return DriveStatus(
        device=reading.device,
        name=reading.identity.name or None,
        dialect=reading.identity.dialect,
        temperature=temperature,
        unit=unit,
    )


def get_drive_status(unit: Optional[TemperatureUnit] = None) -> List[DriveStatus]:
    """
    Collect the current temperature for all configured drives.

    Devices are taken from Settings.devices, or enumerated from the kernel if
    that setting is empty. Environment problems raise RuntimeError; drives
    without a usable reading are returned with temperature None.
    """
    settings = get_settings()
    check_environment(settings)

    devices = resolve_devices(settings)
    readings = collect_readings(devices, settings)
    return [to_status(reading, unit or settings.unit) for reading in readings]
