from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.config import Settings, get_settings
from edumanage.core.exceptions import ServiceError
from edumanage.db.session import get_db

from . import service
from .schemas import VerifyLocationRequest, VerifyLocationResponse

router = APIRouter(prefix="/api/v1", tags=["location"])


@router.post("/verify-location", response_model=VerifyLocationResponse)
async def verify_location(
    payload: VerifyLocationRequest,
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> VerifyLocationResponse:
    """Distance of the user's first reading today from the reference point."""
    try:
        return await service.verify_location(
            db, payload, (settings.reference_lat, settings.reference_lng)
        )
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
