from typing import List, Optional

from fastapi import status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.api.v1.dashboard.schemas import CohortFilter
from edumanage.api.v1.dashboard.service import cohort_clauses
from edumanage.core.exceptions import ServiceError
from edumanage.core.models import PlacementDetail, Student, StudentAttendance, StudentFee, StudentMark

from .schemas import (
    AttendanceResponse,
    FeeResponse,
    MarkResponse,
    PlacementResponse,
    StudentDetailResponse,
    StudentResponse,
)

SEARCH_LIMIT = 100


async def search_students(
    db: AsyncSession,
    filters: CohortFilter,
    name: Optional[str] = None,
    admission_number: Optional[str] = None,
) -> List[StudentResponse]:
    """Cohort filters plus case-insensitive substring search on name and admission number."""
    stmt = select(Student).where(*cohort_clauses(filters))
    if name and name.strip():
        stmt = stmt.where(func.lower(Student.student_name).contains(name.strip().lower(), autoescape=True))
    if admission_number and admission_number.strip():
        stmt = stmt.where(
            func.upper(Student.admission_number).contains(admission_number.strip().upper(), autoescape=True)
        )
    stmt = stmt.order_by(Student.admission_number).limit(SEARCH_LIMIT)
    result = await db.execute(stmt)
    return [StudentResponse.model_validate(s) for s in result.scalars().all()]


async def get_student_detail(db: AsyncSession, admission_number: str) -> StudentDetailResponse:
    admission_number = admission_number.strip().upper()
    student = await db.get(Student, admission_number)
    if student is None:
        raise ServiceError("Student not found", status.HTTP_404_NOT_FOUND)

    marks = await db.execute(
        select(StudentMark)
        .where(StudentMark.admission_number == admission_number)
        .order_by(StudentMark.semester, StudentMark.subject_code)
    )
    attendance = await db.execute(
        select(StudentAttendance)
        .where(StudentAttendance.admission_number == admission_number)
        .order_by(StudentAttendance.date.desc())
    )
    fees = await db.execute(
        select(StudentFee)
        .where(StudentFee.admission_number == admission_number)
        .order_by(StudentFee.payment_date.desc(), StudentFee.id.desc())
    )
    placement = await db.execute(
        select(PlacementDetail).where(PlacementDetail.admission_number == admission_number)
    )
    placement_row = placement.scalar_one_or_none()

    return StudentDetailResponse(
        **StudentResponse.model_validate(student).model_dump(),
        marks=[MarkResponse.model_validate(m) for m in marks.scalars().all()],
        attendance=[AttendanceResponse.model_validate(a) for a in attendance.scalars().all()],
        fees=[FeeResponse.model_validate(f) for f in fees.scalars().all()],
        placement_details=PlacementResponse.model_validate(placement_row) if placement_row else None,
    )
