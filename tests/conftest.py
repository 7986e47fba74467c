from typing import AsyncGenerator, Awaitable, Callable

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from edumanage.core.config import Settings
from edumanage.core.models import Student
from edumanage.db.session import Base, Database
from edumanage.main import create_app


TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        DATABASE_URL=TEST_DATABASE_URL,
        AUTO_CREATE_SCHEMA=False,
        ALLOW_DATABASE_RESET=True,
        LOG_LEVEL="WARNING",
    )


@pytest.fixture()
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """Application bound to a fresh in-memory SQLite database with all tables created."""
    application = create_app(settings)
    database: Database = application.state.database
    await database.create_all()
    yield application
    await database.drop_all()
    await database.dispose()


@pytest.fixture()
def database(app: FastAPI) -> Database:
    return app.state.database


@pytest.fixture()
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def seed(database: Database) -> Callable[..., Awaitable[None]]:
    """Insert ORM objects in one committed transaction."""

    async def _seed(*objects: Base) -> None:
        async with database.transaction() as session:
            session.add_all(objects)

    return _seed


@pytest.fixture()
def make_student() -> Callable[..., Student]:
    def _make(admission_number: str, college_code: str = "BRIL", **overrides) -> Student:
        values = dict(
            admission_number=admission_number,
            college_code=college_code,
            program_code="CSE",
            roll_no=admission_number[-2:],
            student_name=f"Student {admission_number}",
            gender="M",
            is_placed=False,
        )
        values.update(overrides)
        return Student(**values)

    return _make
