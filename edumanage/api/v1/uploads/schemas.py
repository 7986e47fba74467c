"""Upload schemas: one typed row variant per record type tag."""

from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from edumanage.core.enums import ALL_COLLEGES, FeeStatus, Gender, SlotStatus, UploadDataType
from edumanage.core.schemas import CamelModel


def coerce_text(value: Any) -> Any:
    """Spreadsheet cells arrive as numbers; store them as trimmed text, blank as missing."""
    if value is None:
        return None
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


class UploadRow(CamelModel):
    """Student fields carried by every bulk row."""

    admission_number: str
    college_code: Optional[str] = None
    program_code: Optional[str] = None
    roll_no: Optional[str] = None
    student_name: Optional[str] = None
    gender: Optional[Gender] = None
    father_mobile_number: Optional[str] = None

    @field_validator(
        "admission_number",
        "college_code",
        "program_code",
        "roll_no",
        "student_name",
        "father_mobile_number",
        mode="before",
    )
    @classmethod
    def _text(cls, v: Any) -> Any:
        return coerce_text(v)

    @field_validator("gender", mode="before")
    @classmethod
    def _gender(cls, v: Any) -> Any:
        v = coerce_text(v)
        return v.upper() if isinstance(v, str) else v

    @field_validator("admission_number", "college_code")
    @classmethod
    def _upper(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v


class MarkRow(UploadRow):
    semester: int = Field(..., ge=1)
    subject_code: str
    subject_name: str
    marks_obtained: int = Field(..., ge=0)
    max_marks: int = Field(..., gt=0)
    internal_mark: Optional[int] = Field(None, ge=0)
    external_mark: Optional[int] = Field(None, ge=0)

    @field_validator("subject_code", "subject_name", mode="before")
    @classmethod
    def _subject_text(cls, v: Any) -> Any:
        return coerce_text(v)

    @field_validator("internal_mark", "external_mark", mode="before")
    @classmethod
    def _blank_mark(cls, v: Any) -> Any:
        return None if isinstance(v, str) and not v.strip() else v


class FeeRow(UploadRow):
    academic_year: str
    semester: int = Field(..., ge=1)
    total_fees: int
    paid_amount: int
    due_amount: int
    status: FeeStatus
    payment_date: Optional[datetime] = None
    admission_type: Optional[str] = None
    fee_type: str = "Tuition"

    @field_validator("academic_year", "admission_type", mode="before")
    @classmethod
    def _fee_text(cls, v: Any) -> Any:
        return coerce_text(v)

    @field_validator("fee_type", mode="before")
    @classmethod
    def _default_fee_type(cls, v: Any) -> Any:
        return coerce_text(v) or "Tuition"

    @field_validator("payment_date", mode="before")
    @classmethod
    def _blank_payment_date(cls, v: Any) -> Any:
        return None if isinstance(v, str) and not v.strip() else v


class AttendanceRow(UploadRow):
    date: date
    morning: SlotStatus
    afternoon: SlotStatus


class UploadRequest(CamelModel):
    """Bulk upload body. data holds raw records; they are validated per row against data_type."""

    data: List[Dict[str, Any]]
    data_type: UploadDataType
    college_code: str = ALL_COLLEGES


class UploadStats(CamelModel):
    total_rows: int
    processed: int
    errors: int = 0


class UploadResponse(CamelModel):
    success: bool = True
    message: str
    stats: UploadStats
