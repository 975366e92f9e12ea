from fastapi import APIRouter, Depends, HTTPException

from app.models.schemas import ScanRequest, ScanResponse
from app.services.attendance_service import AttendanceService, get_attendance_service
from app.services.exceptions import CollaboratorUnavailable, TransientConflict, UnknownEntity

router = APIRouter(tags=["entry"])


@router.post("/entry", response_model=ScanResponse)
async def record_entry(request: ScanRequest, service: AttendanceService = Depends(get_attendance_service)):
    """Registra una entrada o salida en el punto de control"""
    try:
        return await service.record_entry(request.identifier)
    except UnknownEntity as e:
        raise HTTPException(status_code=404, detail=str(e))
    except TransientConflict as e:
        raise HTTPException(status_code=409, detail=f"{e}. Vuelva a intentarlo")
    except CollaboratorUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
