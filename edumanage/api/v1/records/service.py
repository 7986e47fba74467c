"""Single-record writes: same transaction discipline as bulk uploads, one logical record each."""

import logging

from fastapi import status
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.api.v1.uploads.normalizer import DEFAULT_GENDER, DEFAULT_PROGRAM_CODE, StudentRecord
from edumanage.api.v1.uploads.service import db_error_message, new_fee, replace_mark, upsert_student
from edumanage.core.exceptions import ServiceError
from edumanage.core.models import PlacementDetail, Student

from .schemas import FeeCreate, MarkCreate, PlacementCreate

logger = logging.getLogger(__name__)

_PLACEMENT_FIELDS = (
    "company_name",
    "hr_name",
    "hr_mobile_number",
    "student_mobile_number",
    "year",
    "semester",
    "academic_year",
    "hr_email",
)


async def record_mark(db: AsyncSession, payload: MarkCreate) -> None:
    """Upsert the student stub, then replace the mark for (student, subject, semester)."""
    record = StudentRecord(
        admission_number=payload.admission_number,
        college_code=payload.college_code,
        program_code=payload.program_code or DEFAULT_PROGRAM_CODE,
        roll_no=payload.roll_no or payload.admission_number[-2:],
        gender=payload.gender.value if payload.gender else DEFAULT_GENDER,
        student_name=payload.student_name,
        father_mobile_number=payload.father_mobile_number,
    )
    try:
        async with db.begin():
            await upsert_student(db, record)
            await db.flush()
            await replace_mark(db, payload)
    except IntegrityError as e:
        raise ServiceError(f"Marks not recorded: {db_error_message(e)}", status.HTTP_409_CONFLICT)
    logger.info(
        "Recorded mark %s sem %s for %s", payload.subject_code, payload.semester, payload.admission_number
    )


async def record_fee(db: AsyncSession, payload: FeeCreate) -> None:
    """Append one fee ledger row. No duplicate check."""
    try:
        async with db.begin():
            db.add(new_fee(payload))
    except IntegrityError as e:
        raise ServiceError(f"Fee not recorded: {db_error_message(e)}", status.HTTP_409_CONFLICT)
    logger.info("Recorded %s fee for %s (%s)", payload.fee_type, payload.admission_number, payload.academic_year)


async def record_placement(db: AsyncSession, payload: PlacementCreate) -> None:
    """Insert or update placement details and mark the student as placed."""
    try:
        async with db.begin():
            student = await db.get(Student, payload.admission_number)
            if student is None:
                raise ServiceError(f"Student {payload.admission_number} not found", status.HTTP_404_NOT_FOUND)
            student.is_placed = True
            if payload.student_mobile_number:
                student.mobile_number = payload.student_mobile_number

            result = await db.execute(
                select(PlacementDetail).where(PlacementDetail.admission_number == payload.admission_number)
            )
            placement = result.scalar_one_or_none()
            if placement is None:
                placement = PlacementDetail(admission_number=payload.admission_number)
                db.add(placement)
            for name in _PLACEMENT_FIELDS:
                setattr(placement, name, getattr(payload, name))
    except IntegrityError as e:
        raise ServiceError(f"Placement not recorded: {db_error_message(e)}", status.HTTP_409_CONFLICT)
    logger.info("Recorded placement at %s for %s", payload.company_name, payload.admission_number)
