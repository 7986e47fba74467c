from datetime import date, datetime
from typing import List, Optional

from pydantic import Field

from edumanage.core.schemas import CamelModel


class StudentResponse(CamelModel):
    admission_number: str
    college_code: str
    program_code: str
    roll_no: str
    student_name: str
    gender: str
    is_placed: bool
    mobile_number: Optional[str] = None
    father_mobile_number: Optional[str] = None


class MarkResponse(CamelModel):
    id: int
    semester: int
    subject_code: str
    subject_name: str
    marks_obtained: int
    max_marks: int
    internal_mark: Optional[int] = None
    external_mark: Optional[int] = None


class AttendanceResponse(CamelModel):
    id: int
    date: date
    morning: str
    afternoon: str


class FeeResponse(CamelModel):
    id: int
    academic_year: str
    semester: int
    total_fees: int
    paid_amount: int
    due_amount: int
    status: str
    payment_date: Optional[datetime] = None
    program_code: Optional[str] = None
    admission_type: Optional[str] = None
    fee_type: Optional[str] = None


class PlacementResponse(CamelModel):
    company_name: str
    hr_name: Optional[str] = None
    hr_mobile_number: Optional[str] = None
    student_mobile_number: Optional[str] = None
    year: Optional[str] = None
    semester: Optional[str] = None
    academic_year: Optional[str] = None
    hr_email: Optional[str] = None


class StudentDetailResponse(StudentResponse):
    """Student with every record kept about them."""

    marks: List[MarkResponse] = Field(default_factory=list)
    attendance: List[AttendanceResponse] = Field(default_factory=list)
    fees: List[FeeResponse] = Field(default_factory=list)
    placement_details: Optional[PlacementResponse] = None
