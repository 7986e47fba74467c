from typing import List

from fastapi import APIRouter, Query

from .catalog import subjects_for

router = APIRouter(prefix="/api/v1/subjects", tags=["subjects"])


@router.get("", response_model=List[str])
async def list_subjects(
    department: str = Query(..., description="Program code, e.g. CSE"),
    semester: int = Query(..., ge=1, le=8),
) -> List[str]:
    """Subject names of a program semester, from the static catalog."""
    return [s.name for s in subjects_for(department, semester)]
