from fastapi import APIRouter, Depends, HTTPException

from app.models.schemas import RosterResponse
from app.services.attendance_service import AttendanceService, get_attendance_service
from app.services.exceptions import CollaboratorUnavailable

router = APIRouter(tags=["analytics"])


@router.get("/analytics", response_model=RosterResponse)
async def get_students_inside(service: AttendanceService = Depends(get_attendance_service)):
    """Obtiene la lista de estudiantes que están actualmente en el recinto"""
    try:
        return await service.roster()
    except CollaboratorUnavailable as e:
        raise HTTPException(status_code=503, detail=str(e))
