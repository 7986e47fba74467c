from typing import Optional

from pydantic import EmailStr, field_validator

from edumanage.api.v1.uploads.schemas import FeeRow, MarkRow, coerce_text
from edumanage.core.schemas import CamelModel


class MarkCreate(MarkRow):
    """One mark. The student stub is created from the same payload if missing."""

    college_code: str
    student_name: str


class FeeCreate(FeeRow):
    """One fee ledger row. The student must already exist."""


class PlacementCreate(CamelModel):
    admission_number: str
    company_name: str
    hr_name: Optional[str] = None
    hr_mobile_number: Optional[str] = None
    student_mobile_number: Optional[str] = None
    year: Optional[str] = None
    semester: Optional[str] = None
    academic_year: Optional[str] = None
    hr_email: Optional[EmailStr] = None

    @field_validator(
        "admission_number",
        "company_name",
        "hr_name",
        "hr_mobile_number",
        "student_mobile_number",
        "year",
        "semester",
        "academic_year",
        "hr_email",
        mode="before",
    )
    @classmethod
    def _text(cls, v):
        return coerce_text(v)

    @field_validator("admission_number")
    @classmethod
    def _upper(cls, v: str) -> str:
        return v.upper()
