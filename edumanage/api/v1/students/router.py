from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.api.v1.dashboard.schemas import CohortFilter
from edumanage.core.exceptions import ServiceError
from edumanage.db.session import get_db

from . import service
from .schemas import StudentDetailResponse, StudentResponse

router = APIRouter(prefix="/api/v1/students", tags=["students"])


@router.get("", response_model=List[StudentResponse])
async def search_students(
    college: Optional[str] = Query(None),
    department: Optional[str] = Query(None),
    roll_no: Optional[str] = Query(None, alias="rollNo"),
    year: Optional[str] = Query(None),
    name: Optional[str] = Query(None, description="Substring of the student name"),
    admission_number: Optional[str] = Query(None, alias="admissionNumber"),
    db: AsyncSession = Depends(get_db),
) -> List[StudentResponse]:
    """At most 100 students matching the filters."""
    filters = CohortFilter(college=college, department=department, roll_no=roll_no, year=year)
    return await service.search_students(db, filters, name=name, admission_number=admission_number)


@router.get("/{admission_number}", response_model=StudentDetailResponse)
async def get_student(
    admission_number: str,
    db: AsyncSession = Depends(get_db),
) -> StudentDetailResponse:
    """Student with marks, attendance, fees and placement details."""
    try:
        return await service.get_student_detail(db, admission_number)
    except ServiceError as e:
        raise HTTPException(status_code=e.status_code, detail=e.message)
