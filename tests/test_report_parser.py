import pytest

from drivetemp.models.drive import Dialect
from drivetemp.services.report_parser import (
    classify_report,
    extract_temperature,
    read_drive,
)

ATA_REPORT = """\
smartctl 7.3 2022-02-28 r5338 [x86_64-linux-6.1.0-18-amd64] (local build)
Copyright (C) 2002-22, Bruce Allen, Christian Franke, www.smartmontools.org

=== START OF INFORMATION SECTION ===
Model Family:     Western Digital Red
Device Model:     WDC WD40EFRX-68N32N0
Serial Number:    WD-WCC7K1234567
User Capacity:    4,000,787,030,016 bytes [4.00 TB]

=== START OF READ SMART DATA SECTION ===
SMART Attributes Data Structure revision number: 16
Vendor Specific SMART Attributes with Thresholds:
ID# ATTRIBUTE_NAME          FLAG     VALUE WORST THRESH TYPE      UPDATED  WHEN_FAILED RAW_VALUE
  1 Raw_Read_Error_Rate     0x002f   200   200   051    Pre-fail  Always       -       0
  9 Power_On_Hours          0x0032   047   047   000    Old_age   Always       -       38912
190 Airflow_Temperature_Cel 0x0022   073   037   045    Old_age   Always   In_the_past 60 (3 44 30 26 0)
194 Temperature_Celsius     0x0022   049   067   ---    Old_age   Always       -       50 (Min/Max 24/67)

SCT Status Version:                  3
SCT Version (vendor specific):       258 (0x0102)
Device State:                        Active (0)
Current Temperature:                    45 Celsius
Power Cycle Min/Max Temperature:     24/46 Celsius
"""

NVME_REPORT = """\
smartctl 7.3 2022-02-28 r5338 [x86_64-linux-6.1.0-18-amd64] (local build)

=== START OF INFORMATION SECTION ===
Model Number:                       Samsung SSD 970 EVO Plus 1TB
Serial Number:                      S4EWNX0N123456
Firmware Version:                   2B2QEXM7

=== START OF SMART DATA SECTION ===
SMART/Health Information (NVMe Log 0x02)
Critical Warning:                   0x00
Temperature:                        38 Celsius
Available Spare:                    100%
Temperature Sensor 1:               38 Celsius
Temperature Sensor 2:               41 Celsius
"""

SCSI_REPORT = """\
smartctl 7.3 2022-02-28 r5338 [x86_64-linux-6.1.0-18-amd64] (local build)

=== START OF INFORMATION SECTION ===
Vendor:               SEAGATE
Product:              ST4000NM0023
Revision:             0004
Logical block size:   512 bytes

=== START OF READ SMART DATA SECTION ===
SMART Health Status: OK

Current Drive Temperature:     18 C
Drive Trip Temperature:        68 C
"""

UNKNOWN_REPORT = """\
smartctl 7.3 2022-02-28 r5338 [x86_64-linux-6.1.0-18-amd64] (local build)

/dev/sdz: Unable to detect device type
Please specify device type with the -d option.
"""


def _lines(text: str):
    return text.splitlines()


@pytest.mark.parametrize("report,dialect,name", [
    (ATA_REPORT, Dialect.ATA, "WDC WD40EFRX-68N32N0"),
    (NVME_REPORT, Dialect.NVME, "Samsung SSD 970 EVO Plus 1TB"),
    (SCSI_REPORT, Dialect.SCSI, "ST4000NM0023"),
])
def test_classify_report_detects_dialect_and_name(report, dialect, name):
    identity = classify_report(_lines(report))

    assert identity.dialect is dialect
    assert identity.name == name


def test_classify_report_without_marker_is_undetermined():
    identity = classify_report(_lines(UNKNOWN_REPORT))

    assert identity.dialect is None
    assert identity.name == ""


def test_classify_report_first_marker_wins():
    lines = [
        "Product:              ST4000NM0023",
        "Device Model:     WDC WD40EFRX-68N32N0",
    ]
    identity = classify_report(lines)

    assert identity.dialect is Dialect.SCSI
    assert identity.name == "ST4000NM0023"


def test_classify_report_skips_marker_without_name():
    lines = [
        "Device Model:",
        "Model Number:                       INTEL SSDPEKNW010T8",
    ]
    identity = classify_report(lines)

    assert identity.dialect is Dialect.NVME
    assert identity.name == "INTEL SSDPEKNW010T8"


def test_ata_sct_reading_wins_over_attributes():
    assert extract_temperature(Dialect.ATA, _lines(ATA_REPORT)) == 45


def test_ata_attribute_194_wins_over_190():
    lines = [
        line for line in _lines(ATA_REPORT)
        if not line.startswith("Current Temperature:")
    ]
    assert extract_temperature(Dialect.ATA, lines) == 50


def test_ata_zero_candidate_is_ignored():
    lines = [
        "194 Temperature_Celsius     0x0022   100   100   000    Old_age   Always       -       0",
        "190 Airflow_Temperature_Cel 0x0022   045   040   045    Old_age   Always       -       55",
    ]
    assert extract_temperature(Dialect.ATA, lines) == 55


def test_ata_zero_sct_reading_falls_back_to_attribute():
    lines = [
        "194 Temperature_Celsius     0x0022   100   100   000    Old_age   Always       -       33",
        "Current Temperature:                    0 Celsius",
    ]
    assert extract_temperature(Dialect.ATA, lines) == 33


def test_ata_last_line_of_a_source_wins():
    lines = [
        "194 Temperature_Celsius     0x0022   100   100   000    Old_age   Always       -       40",
        "194 Temperature_Celsius     0x0022   100   100   000    Old_age   Always       -       42",
    ]
    assert extract_temperature(Dialect.ATA, lines) == 42


def test_ata_last_seen_invalid_value_hides_earlier_valid_one():
    lines = [
        "194 Temperature_Celsius     0x0022   100   100   000    Old_age   Always       -       40",
        "194 Temperature_Celsius     0x0022   100   100   000    Old_age   Always       -       0",
        "190 Airflow_Temperature_Cel 0x0022   045   040   045    Old_age   Always       -       37",
    ]
    assert extract_temperature(Dialect.ATA, lines) == 37


def test_ata_raw_value_is_truncated_at_first_non_digit():
    lines = [
        "194 Temperature_Celsius     0x0022   100   100   000    Old_age   Always       -       36/41",
    ]
    assert extract_temperature(Dialect.ATA, lines) == 36


@pytest.mark.parametrize("lines", [
    [],
    ["194 Temperature_Celsius     0x0022   100   100"],
    ["Current Temperature:"],
    ["190 Airflow_Temperature_Cel 0x0022   045   040   045    Old_age   Always       -       -"],
])
def test_ata_without_valid_candidate_is_absent(lines):
    assert extract_temperature(Dialect.ATA, lines) is None


def test_nvme_temperature():
    assert extract_temperature(Dialect.NVME, ["Temperature: 38 Celsius"]) == 38
    assert extract_temperature(Dialect.NVME, _lines(NVME_REPORT)) == 38


def test_nvme_first_temperature_line_wins():
    lines = ["Temperature:   31 Celsius", "Temperature:   99 Celsius"]
    assert extract_temperature(Dialect.NVME, lines) == 31


def test_scsi_temperature():
    assert extract_temperature(Dialect.SCSI, ["Current Drive Temperature: 18 C"]) == 18
    assert extract_temperature(Dialect.SCSI, _lines(SCSI_REPORT)) == 18


@pytest.mark.parametrize("dialect,lines", [
    (Dialect.NVME, ["Available Spare:                    100%"]),
    (Dialect.NVME, ["Temperature:"]),
    (Dialect.SCSI, ["Drive Trip Temperature:        68 C"]),
    (Dialect.SCSI, ["Current Drive Temperature:     <not available>"]),
    (Dialect.NVME, ["Temperature: ²3 Celsius"]),
    (Dialect.SCSI, ["Current Drive Temperature: ¹8 C"]),
])
def test_missing_or_malformed_marker_is_absent(dialect, lines):
    assert extract_temperature(dialect, lines) is None


@pytest.mark.parametrize("dialect,lines,expected", [
    (Dialect.NVME, ["Temperature: 3² Celsius"], 3),
    (Dialect.SCSI, ["Current Drive Temperature: 1٨ C"], 1),
    (Dialect.ATA, [
        "194 Temperature_Celsius     0x0022   100   100   000    Old_age   Always       -       4²",
    ], 4),
    (Dialect.ATA, [
        "Current Temperature:                    ٣٨ Celsius",
        "190 Airflow_Temperature_Cel 0x0022   045   040   045    Old_age   Always       -       29",
    ], 29),
])
def test_non_ascii_digits_end_the_value(dialect, lines, expected):
    assert extract_temperature(dialect, lines) == expected


def test_read_drive_combines_identity_and_temperature():
    reading = read_drive("/dev/sda", _lines(ATA_REPORT))

    assert reading.device == "/dev/sda"
    assert reading.identity.dialect is Dialect.ATA
    assert reading.identity.name == "WDC WD40EFRX-68N32N0"
    assert reading.temperature_celsius == 45


def test_read_drive_does_not_extract_without_dialect(monkeypatch):
    from drivetemp.services import report_parser

    def fail_extract(dialect, lines):
        raise AssertionError("temperature must not be extracted")

    monkeypatch.setattr(report_parser, "extract_temperature", fail_extract)

    # Would be a valid NVMe temperature line if a dialect had been detected
    reading = read_drive("/dev/sdz", _lines(UNKNOWN_REPORT) + ["Temperature: 38 Celsius"])

    assert reading.identity.dialect is None
    assert reading.identity.name == ""
    assert reading.temperature_celsius is None


def test_read_drive_is_idempotent():
    lines = _lines(NVME_REPORT)
    assert read_drive("/dev/nvme0n1", lines) == read_drive("/dev/nvme0n1", lines)
