import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from edumanage.api.v1.audit.router import router as audit_router
from edumanage.api.v1.dashboard.router import router as dashboard_router
from edumanage.api.v1.location.router import router as location_router
from edumanage.api.v1.records.router import router as records_router
from edumanage.api.v1.students.router import router as students_router
from edumanage.api.v1.subjects.router import router as subjects_router
from edumanage.api.v1.system.router import router as system_router
from edumanage.api.v1.uploads.router import router as uploads_router
from edumanage.core.config import Settings
from edumanage.core.schemas import ErrorResponse
from edumanage.db.session import Database

logger = logging.getLogger(__name__)


def _error(status_code: int, message: str, errors=None) -> JSONResponse:
    body = ErrorResponse(error=message, errors=errors).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


def _register_error_handlers(app: FastAPI) -> None:
    """Every failure leaves the API as {"success": false, "error": "..."}."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: HTTPException) -> JSONResponse:
        detail = exc.detail
        if isinstance(detail, dict):
            return _error(exc.status_code, str(detail.get("message", "")), detail.get("errors"))
        return _error(exc.status_code, str(detail))

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = []
        for err in exc.errors():
            loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
            errors.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid payload.", errors)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or exc.__class__.__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    database = Database.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.auto_create_schema:
            await database.create_all()
            logger.info("Database schema verified")
        yield
        await database.dispose()

    app = FastAPI(title="EduManage Backend", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database

    # CORS: allow frontend to call this API
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    # Routers
    app.include_router(uploads_router)
    app.include_router(records_router)
    app.include_router(audit_router)
    app.include_router(dashboard_router)
    app.include_router(students_router)
    app.include_router(location_router)
    app.include_router(subjects_router)
    app.include_router(system_router)

    return app


app = create_app()
