"""Bulk upload API: JSON records or an Excel sheet, applied all-or-nothing."""

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from edumanage.core.enums import ALL_COLLEGES, UploadDataType
from edumanage.core.exceptions import BatchValidationError, ServiceError
from edumanage.db.session import get_db

from . import service
from .normalizer import normalize_batch
from .schemas import UploadRequest, UploadResponse

router = APIRouter(prefix="/api/v1", tags=["uploads"])


def _to_http(e: ServiceError) -> HTTPException:
    if isinstance(e, BatchValidationError):
        return HTTPException(status_code=e.status_code, detail={"message": e.message, "errors": e.errors})
    return HTTPException(status_code=e.status_code, detail=e.message)


@router.post("/upload", response_model=UploadResponse)
async def upload_records(
    payload: UploadRequest,
    db: AsyncSession = Depends(get_db),
) -> UploadResponse:
    """Bulk ingest marks, fee or attendance rows. Students are created or updated on the way."""
    try:
        batch = normalize_batch(payload.data, payload.data_type, payload.college_code)
        return await service.ingest_batch(db, batch)
    except ServiceError as e:
        raise _to_http(e)


@router.post("/upload/excel", response_model=UploadResponse)
async def upload_excel(
    data_type: UploadDataType = Form(..., alias="dataType"),
    college_code: str = Form(ALL_COLLEGES, alias="collegeCode"),
    file: UploadFile = File(..., description="Excel sheet whose first row holds the field names"),
    db: AsyncSession = Depends(get_db),
) -> UploadResponse:
    """Same as /upload, reading the records from the first sheet of an .xlsx file."""
    try:
        records = service.parse_upload_workbook(await file.read(), file.filename or "")
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    try:
        batch = normalize_batch(records, data_type, college_code)
        return await service.ingest_batch(db, batch)
    except ServiceError as e:
        raise _to_http(e)
