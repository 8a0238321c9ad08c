from typing import List, Optional
from pydantic import BaseModel, Field
import os
from functools import lru_cache

from drivetemp.models.drive import TemperatureUnit

_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in _TRUE_VALUES


class Settings(BaseModel):
    # Devices to query; None means "enumerate all whole-disk block devices"
    devices: Optional[List[str]] = Field(
        default=None,
        description="Optional list of device paths, e.g. ['/dev/sda', '/dev/nvme0n1']",
    )

    # Output
    unit: TemperatureUnit = Field(
        default=TemperatureUnit.CELSIUS,
        description="Temperature unit applied to every device in a run",
    )
    classic: bool = Field(
        default=False,
        description="Use the legacy one-line-per-device layout with a unit suffix",
    )

    # smartctl
    smartctl_binary: str = Field(
        default="smartctl",
        description="Name or path of the smartctl executable",
    )
    smartctl_timeout_seconds: int = Field(
        default=30,
        gt=0,
        description="Timeout for a single smartctl invocation",
    )
    require_root: bool = Field(
        default=True,
        description="Refuse to run without root privileges (smartctl needs raw device access)",
    )

    log_level: str = Field(
        default="WARNING",
        description="Log level name for the drivetemp loggers",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        raw_devices = os.getenv("DRIVETEMP_DEVICES", "")
        devices = [item.strip() for item in raw_devices.split(",") if item.strip()] or None

        raw_unit = os.getenv("DRIVETEMP_UNIT", "").strip().upper()

        # pydantic.ValidationError is a ValueError as well
        try:
            unit = TemperatureUnit(raw_unit) if raw_unit else TemperatureUnit.CELSIUS
            return cls(
                devices=devices,
                unit=unit,
                classic=_env_flag("DRIVETEMP_CLASSIC", False),
                smartctl_binary=os.getenv("SMARTCTL_BINARY") or "smartctl",
                smartctl_timeout_seconds=int(os.getenv("SMARTCTL_TIMEOUT") or 30),
                require_root=_env_flag("DRIVETEMP_REQUIRE_ROOT", True),
                log_level=(os.getenv("DRIVETEMP_LOG_LEVEL") or "WARNING").upper(),
            )
        except ValueError as exc:
            raise RuntimeError(f"invalid configuration: {exc}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
