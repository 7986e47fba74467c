"""
Dashboard metrics for a cohort of students. Read-only.

Pass rule per subject: internal >= 14, external >= 21 and total >= 40. A student passes
only when every subject passes. Percentages are rounded half-up to one decimal and
a zero denominator gives 0.
"""

from collections import defaultdict
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.enums import FeeStatus, SlotStatus
from edumanage.core.models import Student, StudentAttendance, StudentFee, StudentMark

from .schemas import (
    AcademicMetrics,
    AttendanceMetrics,
    CohortFilter,
    DashboardResponse,
    FeeMetrics,
    PlacementMetrics,
)

INTERNAL_PASS_MARK = 14
EXTERNAL_PASS_MARK = 21
TOTAL_PASS_MARK = 40

_PRESENT = SlotStatus.PRESENT.value
_ABSENT = SlotStatus.ABSENT.value


def percentage(numerator: Any, denominator: Any) -> float:
    if not denominator:
        return 0.0
    value = Decimal(str(numerator)) / Decimal(str(denominator)) * 100
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def normalize_filter_value(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    if not text or text.lower() == "all":
        return None
    return text


def cohort_clauses(filters: CohortFilter) -> List[Any]:
    """Where-clauses on Student for the cohort."""
    clauses: List[Any] = []
    college = normalize_filter_value(filters.college)
    department = normalize_filter_value(filters.department)
    roll_no = normalize_filter_value(filters.roll_no)
    year = normalize_filter_value(filters.year)
    if college:
        clauses.append(func.upper(Student.college_code) == college.upper())
    if department:
        clauses.append(func.upper(Student.program_code) == department.upper())
    if roll_no:
        clauses.append(Student.roll_no == roll_no)
    if year:
        # '2023-24' -> admission numbers containing '2023'
        clauses.append(Student.admission_number.contains(year.split("-")[0], autoescape=True))
    return clauses


# ----- Pure aggregation -----
def attendance_metrics(total: int, full_day: int, half_day: int) -> AttendanceMetrics:
    present = full_day + 0.5 * half_day
    return AttendanceMetrics(
        total=total,
        present=present,
        absent=total - (full_day + half_day),
        full_day=full_day,
        half_day=half_day,
        overall_percentage=percentage(present, total),
    )


def subject_failed(internal_mark: Optional[int], external_mark: Optional[int], total: Optional[int]) -> bool:
    """Missing components count as 0."""
    return (
        (internal_mark or 0) < INTERNAL_PASS_MARK
        or (external_mark or 0) < EXTERNAL_PASS_MARK
        or (total or 0) < TOTAL_PASS_MARK
    )


def academic_metrics(rows: Iterable[Any]) -> AcademicMetrics:
    """rows: objects with admission_number, marks_obtained, max_marks, internal_mark, external_mark."""
    failed_by_student: Dict[str, bool] = defaultdict(bool)
    total_obtained = 0
    total_max = 0
    for row in rows:
        total_obtained += row.marks_obtained or 0
        total_max += row.max_marks or 0
        failed = subject_failed(row.internal_mark, row.external_mark, row.marks_obtained)
        failed_by_student[row.admission_number] = failed_by_student[row.admission_number] or failed

    assessed = len(failed_by_student)
    pass_count = sum(1 for failed in failed_by_student.values() if not failed)
    return AcademicMetrics(
        assessed_students=assessed,
        pass_count=pass_count,
        fail_count=assessed - pass_count,
        pass_percentage=percentage(pass_count, assessed),
        aggregate_percentage=percentage(total_obtained, total_max),
    )


def placement_metrics(placed_flags: Sequence[bool]) -> PlacementMetrics:
    total = len(placed_flags)
    placed = sum(1 for p in placed_flags if p)
    return PlacementMetrics(
        total_students=total,
        placed_students=placed,
        not_placed_students=total - placed,
        placement_percentage=percentage(placed, total),
    )


# ----- Queries -----
async def _attendance(db: AsyncSession, cohort) -> AttendanceMetrics:
    both_present = and_(StudentAttendance.morning == _PRESENT, StudentAttendance.afternoon == _PRESENT)
    one_present = or_(
        and_(StudentAttendance.morning == _PRESENT, StudentAttendance.afternoon == _ABSENT),
        and_(StudentAttendance.morning == _ABSENT, StudentAttendance.afternoon == _PRESENT),
    )
    result = await db.execute(
        select(
            func.count(StudentAttendance.id),
            func.coalesce(func.sum(case((both_present, 1), else_=0)), 0),
            func.coalesce(func.sum(case((one_present, 1), else_=0)), 0),
        ).where(StudentAttendance.admission_number.in_(cohort))
    )
    total, full_day, half_day = result.one()
    return attendance_metrics(int(total or 0), int(full_day or 0), int(half_day or 0))


async def _academics(db: AsyncSession, cohort) -> AcademicMetrics:
    result = await db.execute(
        select(
            StudentMark.admission_number,
            StudentMark.marks_obtained,
            StudentMark.max_marks,
            StudentMark.internal_mark,
            StudentMark.external_mark,
        ).where(StudentMark.admission_number.in_(cohort))
    )
    return academic_metrics(result.all())


async def _fees(db: AsyncSession, cohort) -> FeeMetrics:
    def _count(status: FeeStatus):
        return func.coalesce(func.sum(case((StudentFee.status == status.value, 1), else_=0)), 0)

    result = await db.execute(
        select(
            func.coalesce(func.sum(StudentFee.total_fees), 0),
            func.coalesce(func.sum(StudentFee.paid_amount), 0),
            func.coalesce(func.sum(StudentFee.due_amount), 0),
            _count(FeeStatus.PAID),
            _count(FeeStatus.PARTIAL),
            _count(FeeStatus.DUE),
        ).where(StudentFee.admission_number.in_(cohort))
    )
    total_fees, paid, due, paid_count, partial_count, due_count = result.one()
    return FeeMetrics(
        total_fees=int(total_fees),
        paid_amount=int(paid),
        due_amount=int(due),
        paid_count=int(paid_count),
        partial_count=int(partial_count),
        due_count=int(due_count),
    )


async def get_dashboard(db: AsyncSession, filters: CohortFilter) -> DashboardResponse:
    """Attendance, academics, placement and fee metrics for the filtered cohort."""
    clauses = cohort_clauses(filters)
    result = await db.execute(select(Student.admission_number, Student.is_placed).where(*clauses))
    students = result.all()
    if not students:
        return DashboardResponse()

    cohort = select(Student.admission_number).where(*clauses)
    return DashboardResponse(
        student_attendance=await _attendance(db, cohort),
        student_academics=await _academics(db, cohort),
        placement_metrics=placement_metrics([s.is_placed for s in students]),
        student_fees=await _fees(db, cohort),
    )
