from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.db.session import get_db

from . import service
from .schemas import CohortFilter, DashboardResponse

router = APIRouter(prefix="/api/v1/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardResponse)
async def get_dashboard(
    college: Optional[str] = Query(None, description="College code, or 'all'"),
    department: Optional[str] = Query(None, description="Program code, or 'all'"),
    roll_no: Optional[str] = Query(None, alias="rollNo"),
    year: Optional[str] = Query(None, description="Admission year, e.g. 2023 or 2023-24"),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    """Cohort metrics: attendance, pass/fail, placement and fee totals."""
    filters = CohortFilter(college=college, department=department, roll_no=roll_no, year=year)
    return await service.get_dashboard(db, filters)
