import logging
from datetime import datetime

from sqlalchemy import delete, text
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.models import (
    DeletedDataLog,
    PlacementDetail,
    Student,
    StudentAttendance,
    StudentFee,
    StudentMark,
    UserGpsAnchor,
)

logger = logging.getLogger(__name__)

# Children before parents.
_RESET_ORDER = (
    StudentMark,
    StudentAttendance,
    StudentFee,
    PlacementDetail,
    Student,
    DeletedDataLog,
    UserGpsAnchor,
)


async def database_time(db: AsyncSession) -> datetime:
    result = await db.execute(text("SELECT CURRENT_TIMESTAMP"))
    value = result.scalar_one()
    # SQLite hands the timestamp back as text.
    return datetime.fromisoformat(value) if isinstance(value, str) else value


async def reset_database(db: AsyncSession) -> None:
    """Remove every row from every table."""
    async with db.begin():
        for model in _RESET_ORDER:
            await db.execute(delete(model))
    logger.warning("Database reset: all tables emptied")
