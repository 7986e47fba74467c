"""Health check and database reset."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.config import Settings, get_settings
from edumanage.core.schemas import MessageResponse
from edumanage.db.session import get_db

from . import service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["system"])


@router.get("/health")
async def health(db: AsyncSession = Depends(get_db)):
    try:
        db_time = await service.database_time(db)
    except SQLAlchemyError as e:
        logger.error("Database connection error: %s", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"status": "error", "message": "Server error", "error": str(e)},
        )
    return {"status": "ok", "message": "EduManage server is running healthy!", "dbTime": db_time.isoformat()}


@router.post("/seed-database", response_model=MessageResponse)
async def seed_database(
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> MessageResponse:
    """Empty every table. Disabled unless ALLOW_DATABASE_RESET is set."""
    if not settings.allow_database_reset:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Database reset is disabled")
    await service.reset_database(db)
    return MessageResponse(message="Database seeded.")
