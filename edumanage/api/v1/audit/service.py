"""
Audited deletes and restores.

A delete captures the matched rows into one deleted_data_log entry and removes them in the
same transaction. A restore reinserts the captured rows (fresh ids) and then drops the entries.
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Tuple, Type

from fastapi import status
from sqlalchemy import Date, DateTime, delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.api.v1.uploads.service import db_error_message
from edumanage.core.enums import ALL_SEMESTERS, ALL_YEARS, DataType
from edumanage.core.exceptions import ServiceError
from edumanage.core.models import DeletedDataLog, Student, StudentAttendance, StudentFee, StudentMark
from edumanage.db.session import Base

from .schemas import DeleteStudentDataRequest, DeletedLogEntryResponse

logger = logging.getLogger(__name__)

MANUAL_SCOPE = "Manual"

# Attendance for academic year 'YYYY-YY' is counted from July 1 of YYYY.
ACADEMIC_YEAR_START_MONTH = 7
ACADEMIC_YEAR_START_DAY = 1

DATA_TYPE_MODELS: Dict[DataType, Type[Base]] = {
    DataType.MARKS: StudentMark,
    DataType.FEES: StudentFee,
    DataType.EXAM_FEES: StudentFee,
    DataType.ATTENDANCE: StudentAttendance,
}


# ----- Snapshots -----
def snapshot_row(obj: Base) -> Dict[str, Any]:
    """All column values of a row, JSON-safe."""
    row: Dict[str, Any] = {}
    for column in obj.__table__.columns:
        value = getattr(obj, column.key)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        row[column.key] = value
    return row


def restore_values(model: Type[Base], item: Mapping[str, Any]) -> Dict[str, Any]:
    """Column values from a snapshot row, minus the primary key, with dates parsed back."""
    values: Dict[str, Any] = {}
    for column in model.__table__.columns:
        if column.primary_key or column.key not in item:
            continue
        value = item[column.key]
        if isinstance(value, str):
            if isinstance(column.type, DateTime):
                value = datetime.fromisoformat(value)
            elif isinstance(column.type, Date):
                value = date.fromisoformat(value)
        values[column.key] = value
    return values


# ----- Delete -----
def _is_all(value: str, sentinel: str) -> bool:
    text = (value or "").strip().lower()
    return text in ("", "all", sentinel.lower())


def _parse_semester(value: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ServiceError(f"Invalid semester: {value}", status.HTTP_400_BAD_REQUEST)


def _academic_year_start(value: str) -> date:
    try:
        return date(int(value.split("-")[0]), ACADEMIC_YEAR_START_MONTH, ACADEMIC_YEAR_START_DAY)
    except ValueError:
        raise ServiceError(f"Invalid academic year: {value}", status.HTTP_400_BAD_REQUEST)


def build_delete_filter(payload: DeleteStudentDataRequest) -> Tuple[Type[Base], List[Any]]:
    """Target model plus the where-clauses shared by the capture and the delete."""
    model = DATA_TYPE_MODELS[payload.tab]
    clauses: List[Any] = [model.admission_number == payload.admission_number]
    if payload.tab == DataType.MARKS:
        if not _is_all(payload.semester, ALL_SEMESTERS):
            clauses.append(model.semester == _parse_semester(payload.semester))
    elif payload.tab in (DataType.FEES, DataType.EXAM_FEES):
        if not _is_all(payload.academic_year, ALL_YEARS):
            clauses.append(model.academic_year == payload.academic_year)
        if not _is_all(payload.semester, ALL_SEMESTERS):
            clauses.append(model.semester == _parse_semester(payload.semester))
    elif payload.tab == DataType.ATTENDANCE:
        if not _is_all(payload.academic_year, ALL_YEARS):
            clauses.append(model.date >= _academic_year_start(payload.academic_year))
    return model, clauses


async def delete_student_data(db: AsyncSession, payload: DeleteStudentDataRequest) -> int:
    """Capture then delete. Zero matches is a failure and writes nothing."""
    model, clauses = build_delete_filter(payload)
    try:
        async with db.begin():
            result = await db.execute(select(model).where(*clauses).order_by(model.id))
            rows = result.scalars().all()
            if not rows:
                raise ServiceError("No records found to delete.", status.HTTP_404_NOT_FOUND)

            student_name = payload.student_name
            if not student_name:
                student = await db.get(Student, payload.admission_number)
                student_name = student.student_name if student else None

            db.add(
                DeletedDataLog(
                    student_name=student_name,
                    admission_number=payload.admission_number,
                    data_type=payload.tab.value,
                    scope=MANUAL_SCOPE,
                    deleted_by=payload.deleted_by,
                    reason=payload.reason,
                    deleted_data=[snapshot_row(r) for r in rows],
                )
            )
            await db.flush()
            await db.execute(delete(model).where(*clauses))
    except IntegrityError as e:
        raise ServiceError(f"Delete failed: {db_error_message(e)}", status.HTTP_409_CONFLICT)
    logger.info(
        "Deleted %d %s row(s) of %s by %s",
        len(rows),
        payload.tab.value,
        payload.admission_number,
        payload.deleted_by,
    )
    return len(rows)


# ----- Log maintenance -----
async def list_deleted_log(db: AsyncSession) -> List[DeletedLogEntryResponse]:
    result = await db.execute(
        select(DeletedDataLog).order_by(DeletedDataLog.timestamp.desc(), DeletedDataLog.id.desc())
    )
    return [DeletedLogEntryResponse.model_validate(e) for e in result.scalars().all()]


async def purge_deleted_log(db: AsyncSession) -> int:
    """Drop every audit entry. The captured rows become unrecoverable."""
    async with db.begin():
        result = await db.execute(delete(DeletedDataLog))
    logger.warning("Purged %d deleted-data log entries", result.rowcount)
    return result.rowcount


async def delete_log_entry(db: AsyncSession, log_id: int) -> None:
    async with db.begin():
        entry = await db.get(DeletedDataLog, log_id)
        if entry is None:
            raise ServiceError(f"Log entry {log_id} not found", status.HTTP_404_NOT_FOUND)
        await db.delete(entry)
    logger.info("Removed deleted-data log entry %s", log_id)


# ----- Restore -----
async def restore_logs(db: AsyncSession, log_ids: List[int]) -> int:
    """
    Reinsert every row captured by the given entries, then delete the entries.

    One transaction for the whole set: a missing id or a failed insert leaves all
    entries and tables as they were.
    """
    ids = sorted(set(log_ids))
    restored = 0
    try:
        async with db.begin():
            result = await db.execute(
                select(DeletedDataLog).where(DeletedDataLog.id.in_(ids)).order_by(DeletedDataLog.id)
            )
            entries = result.scalars().all()
            missing = set(ids) - {e.id for e in entries}
            if missing:
                raise ServiceError(
                    f"Log entries not found: {', '.join(str(i) for i in sorted(missing))}",
                    status.HTTP_404_NOT_FOUND,
                )

            for entry in entries:
                try:
                    data_type = DataType(entry.data_type)
                except ValueError:
                    raise ServiceError(
                        f"Log entry {entry.id} has unknown data type '{entry.data_type}'",
                        status.HTTP_400_BAD_REQUEST,
                    )
                model = DATA_TYPE_MODELS[data_type]
                for item in entry.deleted_data:
                    db.add(model(**restore_values(model, item)))
                    restored += 1
            await db.flush()
            await db.execute(delete(DeletedDataLog).where(DeletedDataLog.id.in_(ids)))
    except IntegrityError as e:
        raise ServiceError(f"Restore failed: {db_error_message(e)}", status.HTTP_409_CONFLICT)
    logger.info("Restored %d row(s) from %d log entries", restored, len(ids))
    return restored
