from typing import List, Optional

from fastapi import APIRouter, HTTPException, Query

from drivetemp.models.drive import DriveStatus, TemperatureUnit
from drivetemp.services import drive_monitor

router = APIRouter()


@router.get(
    "/status",
    response_model=List[DriveStatus],
    summary="Drive temperatures",
)
def drive_status(
    unit: Optional[TemperatureUnit] = Query(
        None,
        description="Temperature unit (C or F); defaults to DRIVETEMP_UNIT",
    ),
) -> List[DriveStatus]:
    """
    Return the current temperature for all configured drives (env var
    DRIVETEMP_DEVICES), or for every whole-disk block device if none are
    configured.

    Drives whose report cannot be classified or carries no temperature are
    listed with null name/temperature. Environment errors (smartctl missing,
    unsupported version, insufficient privileges) map to HTTP 503.
    """
    try:
        return drive_monitor.get_drive_status(unit)
    except RuntimeError as exc:
        raise HTTPException(
            status_code=503,
            detail=str(exc),
        ) from exc
