"""
Row normalizer for bulk uploads.

Turns raw records into typed rows plus one merged student record per admission number.
Nothing here touches the database: every rejection happens before a transaction is opened.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type

from pydantic import ValidationError

from edumanage.core.enums import ALL_COLLEGES, UploadDataType
from edumanage.core.exceptions import BatchValidationError

from .schemas import AttendanceRow, FeeRow, MarkRow, UploadRow

logger = logging.getLogger(__name__)

DEFAULT_PROGRAM_CODE = "CSE"
DEFAULT_GENDER = "M"

ROW_MODELS: Dict[UploadDataType, Type[UploadRow]] = {
    UploadDataType.MARKS: MarkRow,
    UploadDataType.FEE: FeeRow,
    UploadDataType.STUDENT_ATTENDANCE: AttendanceRow,
}

_STUDENT_FIELDS = (
    "college_code",
    "program_code",
    "roll_no",
    "student_name",
    "gender",
    "father_mobile_number",
)


@dataclass
class StudentRecord:
    admission_number: str
    college_code: str
    program_code: str
    roll_no: str
    gender: str
    student_name: Optional[str] = None
    father_mobile_number: Optional[str] = None


@dataclass
class NormalizedBatch:
    data_type: UploadDataType
    total: int
    students: Dict[str, StudentRecord] = field(default_factory=dict)
    rows: List[UploadRow] = field(default_factory=list)
    skipped: int = 0


def is_all_scope(college_code: Optional[str]) -> bool:
    return not college_code or college_code.strip().upper() == ALL_COLLEGES


def raw_admission_number(raw: Mapping[str, Any]) -> Optional[str]:
    value = raw.get("admissionNumber", raw.get("admission_number"))
    if value is None:
        return None
    text = str(value).strip()
    return text.upper() or None


def check_college_scope(records: Sequence[Mapping[str, Any]], college_code: str) -> None:
    """Abort the whole batch on the first row whose college differs from the declared scope."""
    if is_all_scope(college_code):
        return
    expected = college_code.strip().upper()
    for raw in records:
        if not isinstance(raw, Mapping):
            continue
        row_college = raw.get("collegeCode", raw.get("college_code"))
        if row_college is None or not str(row_college).strip():
            continue
        if str(row_college).strip().upper() != expected:
            raise BatchValidationError(
                f"College Mismatch! File has '{row_college}', you selected '{college_code}'."
            )


def _format_error(row_number: int, exc: ValidationError) -> List[str]:
    messages = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "row"
        messages.append(f"Row {row_number}: {loc}: {err.get('msg')}")
    return messages


def merge_students(rows: Sequence[UploadRow], college_code: str) -> Dict[str, StudentRecord]:
    """One record per admission number; later non-empty values win field by field."""
    merged: Dict[str, Dict[str, Any]] = {}
    for row in rows:
        fields = merged.setdefault(row.admission_number, {})
        for name in _STUDENT_FIELDS:
            value = getattr(row, name)
            if value is not None:
                fields[name] = value.value if isinstance(value, Enum) else value

    scope = None if is_all_scope(college_code) else college_code.strip().upper()
    students: Dict[str, StudentRecord] = {}
    errors: List[str] = []
    for admission_number, fields in merged.items():
        college = fields.get("college_code") or scope
        if not college:
            errors.append(f"{admission_number}: collegeCode is required when uploading for all colleges")
            continue
        students[admission_number] = StudentRecord(
            admission_number=admission_number,
            college_code=college,
            program_code=fields.get("program_code") or DEFAULT_PROGRAM_CODE,
            roll_no=fields.get("roll_no") or admission_number[-2:],
            gender=fields.get("gender") or DEFAULT_GENDER,
            student_name=fields.get("student_name"),
            father_mobile_number=fields.get("father_mobile_number"),
        )
    if errors:
        raise BatchValidationError(f"{len(errors)} student(s) rejected", errors)
    return students


def normalize_batch(
    records: Sequence[Mapping[str, Any]],
    data_type: UploadDataType,
    college_code: str = ALL_COLLEGES,
) -> NormalizedBatch:
    """
    Validate a raw batch.

    - Scope mismatch aborts immediately (batch-level error).
    - Rows without an admission number are skipped.
    - Every other row is validated; all row errors are collected and reported together.
    """
    check_college_scope(records, college_code)

    model = ROW_MODELS[data_type]
    batch = NormalizedBatch(data_type=data_type, total=len(records))
    errors: List[str] = []
    for row_number, raw in enumerate(records, start=1):
        if not isinstance(raw, Mapping):
            errors.append(f"Row {row_number}: expected an object")
            continue
        if raw_admission_number(raw) is None:
            batch.skipped += 1
            continue
        try:
            batch.rows.append(model.model_validate(raw))
        except ValidationError as e:
            errors.extend(_format_error(row_number, e))

    if errors:
        logger.warning("Rejected %s upload: %d invalid row message(s)", data_type.value, len(errors))
        raise BatchValidationError(f"{len(errors)} validation error(s) in upload", errors)
    if batch.skipped:
        logger.warning("Skipped %d %s row(s) without admission number", batch.skipped, data_type.value)

    batch.students = merge_students(batch.rows, college_code)
    return batch
