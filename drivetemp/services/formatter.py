from typing import List, Sequence

from drivetemp.models.drive import ResultRow

_COLUMN_GAP = "  "


def format_columns(rows: Sequence[ResultRow]) -> List[str]:
    """
    Render rows as aligned columns: device, name, temperature.

    Device and name are left-aligned, the temperature is right-aligned so
    that values of different width line up on the last digit.
    """
    if not rows:
        return []

    device_width = max(len(row.device) for row in rows)
    name_width = max(len(row.name) for row in rows)
    temp_width = max(len(row.temperature + row.unit_suffix) for row in rows)

    lines: List[str] = []
    for row in rows:
        line = _COLUMN_GAP.join(
            [
                row.device.ljust(device_width),
                row.name.ljust(name_width),
                (row.temperature + row.unit_suffix).rjust(temp_width),
            ]
        )
        lines.append(line.rstrip())
    return lines


def format_classic(rows: Sequence[ResultRow]) -> List[str]:
    # /dev/sda: WDC WD40EFRX-68N32N0: 35°C
    return [f"{row.device}: {row.name}: {row.temperature}{row.unit_suffix}" for row in rows]


def render(rows: Sequence[ResultRow], classic: bool = False) -> str:
    lines = format_classic(rows) if classic else format_columns(rows)
    if not lines:
        return ""
    return "\n".join(lines) + "\n"
