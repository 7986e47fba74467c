from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from edumanage.api.v1.uploads.schemas import coerce_text
from edumanage.core.enums import ALL_SEMESTERS, ALL_YEARS, DataType
from edumanage.core.schemas import CamelModel


class DeleteStudentDataRequest(CamelModel):
    """
    Scoped delete for one student.

    tab picks the table; semester / academic_year narrow it unless they carry the
    'All Semesters' / 'All Years' sentinels.
    """

    admission_number: str
    student_name: Optional[str] = None
    tab: DataType
    academic_year: str = ALL_YEARS
    semester: str = ALL_SEMESTERS
    deleted_by: str = Field(..., min_length=1)
    reason: Optional[str] = None

    @field_validator("admission_number", "student_name", "reason", mode="before")
    @classmethod
    def _text(cls, v: Any) -> Any:
        return coerce_text(v)

    @field_validator("admission_number")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()

    @field_validator("academic_year", mode="before")
    @classmethod
    def _default_year(cls, v: Any) -> Any:
        return coerce_text(v) or ALL_YEARS

    @field_validator("semester", mode="before")
    @classmethod
    def _default_semester(cls, v: Any) -> Any:
        return coerce_text(v) or ALL_SEMESTERS


class DeletedLogEntryResponse(CamelModel):
    id: int
    student_name: Optional[str] = None
    admission_number: str
    data_type: str
    scope: str
    deleted_by: str
    timestamp: datetime
    reason: Optional[str] = None
    deleted_data: List[Dict[str, Any]]


class RestoreLogRequest(CamelModel):
    log_ids: List[int] = Field(..., min_length=1)
