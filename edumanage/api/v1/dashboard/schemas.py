from typing import Optional

from pydantic import BaseModel, Field

from edumanage.core.schemas import CamelModel


class CohortFilter(BaseModel):
    """Optional cohort filters. Blank or 'all' values are treated as absent."""

    college: Optional[str] = None
    department: Optional[str] = None
    roll_no: Optional[str] = None
    year: Optional[str] = None


class AttendanceMetrics(CamelModel):
    total: int = 0
    present: float = 0
    absent: int = 0
    full_day: int = 0
    half_day: int = 0
    overall_percentage: float = 0


class AcademicMetrics(CamelModel):
    assessed_students: int = 0
    pass_count: int = 0
    fail_count: int = 0
    pass_percentage: float = 0
    aggregate_percentage: float = 0


class PlacementMetrics(CamelModel):
    total_students: int = 0
    placed_students: int = 0
    not_placed_students: int = 0
    placement_percentage: float = 0


class FeeMetrics(CamelModel):
    total_fees: int = 0
    paid_amount: int = 0
    due_amount: int = 0
    paid_count: int = 0
    partial_count: int = 0
    due_count: int = 0


class DashboardResponse(CamelModel):
    student_attendance: AttendanceMetrics = Field(default_factory=AttendanceMetrics)
    student_academics: AcademicMetrics = Field(default_factory=AcademicMetrics)
    placement_metrics: PlacementMetrics = Field(default_factory=PlacementMetrics)
    student_fees: FeeMetrics = Field(default_factory=FeeMetrics)
