"""Single-record endpoints: marks, fees, placement."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.exceptions import ServiceError
from edumanage.core.schemas import MessageResponse
from edumanage.db.session import get_db

from . import service
from .schemas import FeeCreate, MarkCreate, PlacementCreate

router = APIRouter(prefix="/api/v1", tags=["records"])


@router.post("/marks", response_model=MessageResponse)
async def record_mark(
    payload: MarkCreate,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.record_mark(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message="Marks recorded.")


@router.post("/fees", response_model=MessageResponse)
async def record_fee(
    payload: FeeCreate,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    try:
        await service.record_fee(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message="Fee recorded.")


@router.post("/placement", response_model=MessageResponse)
async def record_placement(
    payload: PlacementCreate,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Record placement details; the student is flagged as placed."""
    try:
        await service.record_placement(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message="Placement recorded.")
