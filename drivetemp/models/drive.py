from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

PLACEHOLDER = "?"


class Dialect(str, Enum):
    """Report vocabulary used by smartctl for a given device class."""

    ATA = "ata"
    NVME = "nvme"
    SCSI = "scsi"


class TemperatureUnit(str, Enum):
    CELSIUS = "C"
    FAHRENHEIT = "F"

    @property
    def suffix(self) -> str:
        return f"\N{DEGREE SIGN}{self.value}"


class ReportIdentity(BaseModel):
    """Outcome of classifying a raw smartctl report."""

    model_config = ConfigDict(frozen=True)

    dialect: Optional[Dialect] = Field(
        None,
        description="Detected report dialect, None if no identification line matched",
    )
    name: str = Field(
        "",
        description="Human-readable device name, empty if the dialect is undetermined",
    )


class DriveReading(BaseModel):
    """Per-device extraction result, temperature always in Celsius."""

    model_config = ConfigDict(frozen=True)

    device: str = Field(..., description="Device path, e.g. /dev/sda")
    identity: ReportIdentity = Field(default_factory=ReportIdentity)
    temperature_celsius: Optional[int] = Field(
        None,
        description="Temperature in degrees Celsius, None if no reading is available",
    )


class ResultRow(BaseModel):
    """A single line of the rendered report."""

    model_config = ConfigDict(frozen=True)

    device: str
    name: str = PLACEHOLDER
    temperature: str = PLACEHOLDER
    unit_suffix: str = ""

    def as_tuple(self) -> Tuple[str, str, str, str]:
        return (self.device, self.name, self.temperature, self.unit_suffix)


class DriveStatus(BaseModel):
    """API representation of a drive temperature."""

    device: str = Field(
        ...,
        description="Device path, e.g. /dev/sda or /dev/nvme0n1",
    )
    name: Optional[str] = Field(
        None,
        description="Model name reported by smartctl, if the report could be classified",
    )
    dialect: Optional[Dialect] = Field(
        None,
        description="Report dialect (ata, nvme, scsi)",
    )
    temperature: Optional[int] = Field(
        None,
        description="Current temperature in the requested unit, None if unavailable",
    )
    unit: TemperatureUnit = Field(
        TemperatureUnit.CELSIUS,
        description="Unit of the temperature field",
    )
