"""Upsert engine: applies a normalized batch to the student tables in one transaction."""

import io
import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Sequence

from fastapi import status
from openpyxl import load_workbook
from sqlalchemy import delete, select
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.enums import SlotStatus, UploadDataType
from edumanage.core.exceptions import ServiceError
from edumanage.core.models import Student, StudentAttendance, StudentFee, StudentMark

from .normalizer import NormalizedBatch, StudentRecord
from .schemas import AttendanceRow, FeeRow, MarkRow, UploadResponse, UploadStats

logger = logging.getLogger(__name__)

EXCEL_MAX_ROWS = 5000
REQUIRED_EXCEL_COLUMN = "admissionNumber"


@dataclass
class _Progress:
    """Where a batch is, for failure messages."""

    stage: str
    total: int
    applied: int = 0

    def enter(self, stage: str, total: int) -> None:
        self.stage = stage
        self.total = total
        self.applied = 0


def db_error_message(exc: DBAPIError) -> str:
    return str(exc.orig) if exc.orig is not None else str(exc)


def merge_slot(current: str, incoming: str) -> str:
    """A slot already Present is never downgraded; only a non-Absent upload changes it."""
    if incoming != SlotStatus.ABSENT.value:
        return incoming
    return current


# ----- Students -----
async def upsert_student(db: AsyncSession, record: StudentRecord) -> Student:
    """Insert a new student, or overwrite name and college (father mobile only when supplied)."""
    student = await db.get(Student, record.admission_number)
    if student is None:
        if not record.student_name:
            raise ServiceError(
                f"studentName is required for new student {record.admission_number}",
                status.HTTP_400_BAD_REQUEST,
            )
        student = Student(
            admission_number=record.admission_number,
            college_code=record.college_code,
            program_code=record.program_code,
            roll_no=record.roll_no,
            student_name=record.student_name,
            gender=record.gender,
            is_placed=False,
            father_mobile_number=record.father_mobile_number,
        )
        db.add(student)
        return student
    if record.student_name:
        student.student_name = record.student_name
    student.college_code = record.college_code
    if record.father_mobile_number:
        student.father_mobile_number = record.father_mobile_number
    return student


async def _upsert_students(db: AsyncSession, students: Iterable[StudentRecord], progress: _Progress) -> None:
    for record in students:
        await upsert_student(db, record)
        progress.applied += 1
    await db.flush()


# ----- Type-specific writers -----
async def replace_mark(db: AsyncSession, row: MarkRow) -> StudentMark:
    await db.execute(
        delete(StudentMark).where(
            StudentMark.admission_number == row.admission_number,
            StudentMark.subject_code == row.subject_code,
            StudentMark.semester == row.semester,
        )
    )
    mark = StudentMark(
        admission_number=row.admission_number,
        semester=row.semester,
        subject_code=row.subject_code,
        subject_name=row.subject_name,
        marks_obtained=row.marks_obtained,
        max_marks=row.max_marks,
        internal_mark=row.internal_mark,
        external_mark=row.external_mark,
    )
    db.add(mark)
    return mark


def new_fee(row: FeeRow) -> StudentFee:
    return StudentFee(
        admission_number=row.admission_number,
        academic_year=row.academic_year,
        semester=row.semester,
        total_fees=row.total_fees,
        paid_amount=row.paid_amount,
        due_amount=row.due_amount,
        status=row.status.value,
        payment_date=row.payment_date,
        program_code=row.program_code,
        admission_type=row.admission_type,
        fee_type=row.fee_type,
    )


async def _write_marks(db: AsyncSession, rows: Sequence[MarkRow], progress: _Progress) -> None:
    for row in rows:
        await replace_mark(db, row)
        progress.applied += 1
    await db.flush()


async def _write_fees(db: AsyncSession, rows: Sequence[FeeRow], progress: _Progress) -> None:
    for row in rows:
        db.add(new_fee(row))
        progress.applied += 1
    await db.flush()


async def _write_attendance(db: AsyncSession, rows: Sequence[AttendanceRow], progress: _Progress) -> None:
    for row in rows:
        result = await db.execute(
            select(StudentAttendance).where(
                StudentAttendance.admission_number == row.admission_number,
                StudentAttendance.date == row.date,
            )
        )
        existing = result.scalar_one_or_none()
        if existing:
            existing.morning = merge_slot(existing.morning, row.morning.value)
            existing.afternoon = merge_slot(existing.afternoon, row.afternoon.value)
        else:
            db.add(
                StudentAttendance(
                    admission_number=row.admission_number,
                    date=row.date,
                    morning=row.morning.value,
                    afternoon=row.afternoon.value,
                )
            )
        progress.applied += 1
    await db.flush()


_WRITERS: Dict[UploadDataType, Callable[[AsyncSession, Sequence[Any], _Progress], Awaitable[None]]] = {
    UploadDataType.MARKS: _write_marks,
    UploadDataType.FEE: _write_fees,
    UploadDataType.STUDENT_ATTENDANCE: _write_attendance,
}


async def ingest_batch(db: AsyncSession, batch: NormalizedBatch) -> UploadResponse:
    """Upsert students, then write the typed rows. All or nothing."""
    progress = _Progress(stage="students", total=len(batch.students))
    try:
        async with db.begin():
            await _upsert_students(db, batch.students.values(), progress)
            progress.enter(batch.data_type.value, len(batch.rows))
            await _WRITERS[batch.data_type](db, batch.rows, progress)
            progress.enter("commit", len(batch.rows))
    except IntegrityError as e:
        logger.warning("Upload rolled back at stage %s: %s", progress.stage, db_error_message(e))
        raise ServiceError(
            f"Upload failed at stage '{progress.stage}' after {progress.applied} of {progress.total} rows: "
            f"{db_error_message(e)}",
            status.HTTP_409_CONFLICT,
        )
    except DBAPIError as e:
        logger.error("Upload rolled back at stage %s: %s", progress.stage, db_error_message(e))
        raise ServiceError(
            f"Upload failed at stage '{progress.stage}' after {progress.applied} of {progress.total} rows: "
            f"{db_error_message(e)}",
        )

    logger.info(
        "Uploaded %d %s record(s): %d student(s), %d row(s) written, %d skipped",
        batch.total,
        batch.data_type.value,
        len(batch.students),
        len(batch.rows),
        batch.skipped,
    )
    # processed mirrors the submitted count; inserted vs updated is not tracked.
    return UploadResponse(
        success=True,
        message=f"Processed {batch.total} records.",
        stats=UploadStats(total_rows=batch.total, processed=batch.total, errors=0),
    )


# ----- Excel -----
def _header_key(header: Any) -> str:
    """'Admission Number' / 'ADMISSION_NUMBER' / 'admissionNumber' -> 'admissionNumber'."""
    text = str(header).strip() if header is not None else ""
    words = [w for w in re.split(r"[\s_]+", text) if w]
    if len(words) <= 1:
        if text.isupper():
            return text.lower()
        return text[:1].lower() + text[1:]
    return words[0].lower() + "".join(w.capitalize() for w in words[1:])


def _cell_value(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.time() == time(0, 0):
            return value.date().isoformat()
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def parse_upload_workbook(content: bytes, filename: str) -> List[Dict[str, Any]]:
    """Read the active sheet into records keyed by header. Raises ValueError on invalid format."""
    if not filename or not filename.lower().endswith((".xlsx", ".xlsm")):
        raise ValueError("File must be an Excel file (.xlsx)")
    if not content:
        raise ValueError("File is empty")

    try:
        wb = load_workbook(filename=io.BytesIO(content), read_only=True, data_only=True)
    except Exception as e:
        raise ValueError(f"Invalid Excel file: {e}") from e

    try:
        ws = wb.active
        if ws is None:
            raise ValueError("Excel file has no active sheet")
        rows_iter = ws.iter_rows(values_only=True)
        header_row = next(rows_iter, None)
        if not header_row:
            raise ValueError("Excel file has no header row")
        headers = [_header_key(h) for h in header_row]
        if REQUIRED_EXCEL_COLUMN not in headers:
            found = [str(h).strip() for h in header_row if h is not None]
            raise ValueError(f"Missing required column: {REQUIRED_EXCEL_COLUMN}. Found: {found}")

        records: List[Dict[str, Any]] = []
        for row_num, row in enumerate(rows_iter, start=2):
            if row_num - 1 > EXCEL_MAX_ROWS:
                raise ValueError(f"Maximum {EXCEL_MAX_ROWS} data rows allowed")
            if not row or all(c is None or (isinstance(c, str) and not c.strip()) for c in row):
                continue
            records.append(
                {h: _cell_value(row[i]) for i, h in enumerate(headers) if h and i < len(row)}
            )
        return records
    finally:
        wb.close()
