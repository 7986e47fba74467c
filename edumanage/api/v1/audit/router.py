"""Audited delete, deleted-data log and restore API."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.exceptions import ServiceError
from edumanage.core.schemas import MessageResponse
from edumanage.db.session import get_db

from . import service
from .schemas import DeleteStudentDataRequest, DeletedLogEntryResponse, RestoreLogRequest

router = APIRouter(prefix="/api/v1", tags=["audit"])


@router.post("/delete-student-data", response_model=MessageResponse)
async def delete_student_data(
    payload: DeleteStudentDataRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Delete marks, fees or attendance of one student. The rows are kept in the deleted-data log."""
    try:
        count = await service.delete_student_data(db, payload)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message=f"Deleted {count} records.")


@router.get("/deleted-log", response_model=List[DeletedLogEntryResponse])
async def list_deleted_log(db: AsyncSession = Depends(get_db)) -> List[DeletedLogEntryResponse]:
    """Newest first."""
    return await service.list_deleted_log(db)


@router.delete("/deleted-log", response_model=MessageResponse)
async def purge_deleted_log(db: AsyncSession = Depends(get_db)) -> MessageResponse:
    count = await service.purge_deleted_log(db)
    return MessageResponse(message=f"Removed {count} log entries.")


@router.delete("/deleted-log/{log_id}", response_model=MessageResponse)
async def delete_log_entry(log_id: int, db: AsyncSession = Depends(get_db)) -> MessageResponse:
    try:
        await service.delete_log_entry(db, log_id)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message="Log entry removed.")


@router.post("/restore-log", response_model=MessageResponse)
async def restore_log(
    payload: RestoreLogRequest,
    db: AsyncSession = Depends(get_db),
) -> MessageResponse:
    """Put the captured rows back and consume the log entries. All or nothing."""
    try:
        count = await service.restore_logs(db, payload.log_ids)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
    return MessageResponse(message=f"Data restored ({count} records).")
