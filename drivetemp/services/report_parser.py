"""
Classification and temperature extraction for plain-text smartctl reports.

Everything in here is a pure function of the report lines: no I/O, no
module state. A report that cannot be classified, or that carries no
usable temperature line, degrades to an absent reading instead of raising.
"""

import logging
from typing import Callable, Dict, NamedTuple, Optional, Sequence

from drivetemp.models.drive import Dialect, DriveReading, ReportIdentity

logger = logging.getLogger(__name__)


class _IdentityMarker(NamedTuple):
    prefix: str
    dialect: Dialect
    # number of leading tokens that belong to the label, the name follows
    label_tokens: int


_IDENTITY_MARKERS = (
    _IdentityMarker("Device Model:", Dialect.ATA, 2),
    _IdentityMarker("Model Number:", Dialect.NVME, 2),
    _IdentityMarker("Product:", Dialect.SCSI, 1),
)

_SCT_PREFIX = "Current Temperature:"
_ATTR_194_PREFIX = "194 "
_ATTR_190_PREFIX = "190 "
_NVME_PREFIX = "Temperature:"
_SCSI_PREFIX = "Current Drive Temperature:"


def _field(line: str, position: int) -> Optional[str]:
    """Return the 1-based whitespace-delimited token, or None if missing."""
    tokens = line.split()
    if len(tokens) < position:
        return None
    return tokens[position - 1]


def _trailing_text(line: str, skip: int) -> str:
    parts = line.split(None, skip)
    if len(parts) <= skip:
        return ""
    return parts[skip].strip()


def _sct_value(line: str) -> Optional[str]:
    # Current Temperature:                    38 Celsius
    return _field(line, 3)


def _attribute_raw_value(line: str) -> Optional[str]:
    # ID# ATTRIBUTE_NAME FLAG VALUE WORST THRESH TYPE UPDATED WHEN_FAILED RAW_VALUE
    return _field(line, 10)


def _nvme_value(line: str) -> Optional[str]:
    # Temperature:                        38 Celsius
    return _field(line, 2)


def _scsi_value(line: str) -> Optional[str]:
    # Current Drive Temperature:     18 C
    return _field(line, 4)


def _leading_digits(token: str) -> str:
    digits = []
    for char in token:
        if char not in "0123456789":
            break
        digits.append(char)
    return "".join(digits)


def _to_int(token: Optional[str]) -> Optional[int]:
    if token is None:
        return None
    digits = _leading_digits(token)
    if not digits:
        return None
    return int(digits)


def _is_valid_ata_candidate(token: Optional[str]) -> bool:
    # zero readings from these fields are known to be bogus
    return bool(token) and token[0] in "123456789"


def classify_report(lines: Sequence[str]) -> ReportIdentity:
    """
    Determine the dialect and device name of a smartctl report.

    Lines are scanned in order and the first identification line wins. A
    marker line without a name behind its label is ignored.
    """
    for line in lines:
        for marker in _IDENTITY_MARKERS:
            if not line.startswith(marker.prefix):
                continue
            name = _trailing_text(line, marker.label_tokens)
            if name:
                return ReportIdentity(dialect=marker.dialect, name=name)
    return ReportIdentity()


def _extract_ata(lines: Sequence[str]) -> Optional[int]:
    sct: Optional[str] = None
    attr_194: Optional[str] = None
    attr_190: Optional[str] = None

    for line in lines:
        if line.startswith(_SCT_PREFIX):
            sct = _sct_value(line)
        elif line.startswith(_ATTR_194_PREFIX):
            attr_194 = _attribute_raw_value(line)
        elif line.startswith(_ATTR_190_PREFIX):
            attr_190 = _attribute_raw_value(line)

    for source, candidate in (("sct", sct), ("194", attr_194), ("190", attr_190)):
        if _is_valid_ata_candidate(candidate):
            logger.debug(f"Using ATA temperature source {source}: {candidate!r}")
            return _to_int(candidate)
        if candidate is not None:
            logger.debug(f"Ignoring invalid ATA candidate from {source}: {candidate!r}")
    return None


def _first_match(
    lines: Sequence[str], prefix: str, accessor: Callable[[str], Optional[str]]
) -> Optional[int]:
    for line in lines:
        if line.startswith(prefix):
            return _to_int(accessor(line))
    return None


def _extract_nvme(lines: Sequence[str]) -> Optional[int]:
    return _first_match(lines, _NVME_PREFIX, _nvme_value)


def _extract_scsi(lines: Sequence[str]) -> Optional[int]:
    return _first_match(lines, _SCSI_PREFIX, _scsi_value)


_EXTRACTORS: Dict[Dialect, Callable[[Sequence[str]], Optional[int]]] = {
    Dialect.ATA: _extract_ata,
    Dialect.NVME: _extract_nvme,
    Dialect.SCSI: _extract_scsi,
}


def extract_temperature(dialect: Dialect, lines: Sequence[str]) -> Optional[int]:
    """Return the temperature in Celsius for a classified report, or None."""
    return _EXTRACTORS[dialect](lines)


def read_drive(device: str, lines: Sequence[str]) -> DriveReading:
    """Classify a report and, if that succeeds, extract its temperature."""
    identity = classify_report(lines)
    if identity.dialect is None:
        logger.debug(f"No identification line found in report for {device}")
        return DriveReading(device=device, identity=identity)

    temperature = extract_temperature(identity.dialect, lines)
    if temperature is None:
        logger.debug(
            f"No usable temperature in {identity.dialect.value} report for {device}"
        )
    return DriveReading(
        device=device,
        identity=identity,
        temperature_celsius=temperature,
    )
