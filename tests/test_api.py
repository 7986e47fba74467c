"""Student lookup, subject catalog, health and reset endpoints."""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from edumanage.api.v1.location.schemas import VerifyLocationRequest
from edumanage.core.config import Settings
from edumanage.core.models import Student, StudentMark
from edumanage.db.session import Database


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "ok"
    assert body["dbTime"]


@pytest.mark.asyncio
async def test_search_students(client: AsyncClient, seed, make_student) -> None:
    await seed(
        make_student("2023BRIL01", student_name="Asha Rao"),
        make_student("2023BRIL02", student_name="Ravi Kumar"),
        make_student("2023KNRR01", college_code="KNRR", student_name="Ashok"),
    )
    response = await client.get("/api/v1/students", params={"name": "ash"})
    assert [s["admissionNumber"] for s in response.json()] == ["2023BRIL01", "2023KNRR01"]

    response = await client.get("/api/v1/students", params={"name": "ash", "college": "BRIL"})
    assert [s["studentName"] for s in response.json()] == ["Asha Rao"]

    response = await client.get("/api/v1/students", params={"admissionNumber": "bril02"})
    assert [s["studentName"] for s in response.json()] == ["Ravi Kumar"]


@pytest.mark.asyncio
async def test_student_detail(client: AsyncClient, seed, make_student) -> None:
    await seed(
        make_student("2023BRIL01"),
        StudentMark(
            admission_number="2023BRIL01", semester=1, subject_code="MA101BS", subject_name="Maths",
            marks_obtained=60, max_marks=100, internal_mark=20, external_mark=40,
        ),
    )
    response = await client.get("/api/v1/students/2023bril01")
    assert response.status_code == 200
    body = response.json()
    assert body["admissionNumber"] == "2023BRIL01"
    assert [m["subjectCode"] for m in body["marks"]] == ["MA101BS"]
    assert body["placementDetails"] is None


@pytest.mark.asyncio
async def test_student_detail_not_found(client: AsyncClient) -> None:
    response = await client.get("/api/v1/students/UNKNOWN")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Student not found"}


@pytest.mark.asyncio
async def test_subjects(client: AsyncClient) -> None:
    response = await client.get("/api/v1/subjects", params={"department": "cse", "semester": 1})
    assert response.status_code == 200
    assert "Matrices and Calculus" in response.json()

    response = await client.get("/api/v1/subjects", params={"department": "MECH", "semester": 1})
    assert response.json() == []


@pytest.mark.asyncio
async def test_seed_database_empties_tables(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(make_student("2023BRIL01"))
    response = await client.post("/api/v1/seed-database")
    assert response.status_code == 200

    async with database.session() as session:
        result = await session.execute(select(func.count()).select_from(Student))
        assert result.scalar_one() == 0


@pytest.mark.asyncio
async def test_seed_database_disabled_by_default(client: AsyncClient, settings: Settings) -> None:
    settings.allow_database_reset = False
    response = await client.post("/api/v1/seed-database")
    assert response.status_code == 403
    assert response.json() == {"success": False, "error": "Database reset is disabled"}


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client: AsyncClient) -> None:
    response = await client.get("/api/v1/nothing-here")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Not Found"}


@pytest.mark.asyncio
async def test_drop_all_removes_tables(database: Database) -> None:
    await database.drop_all()
    async with database.session() as session:
        with pytest.raises(OperationalError):
            await session.execute(select(func.count()).select_from(Student))

    await database.create_all()
    async with database.session() as session:
        result = await session.execute(select(func.count()).select_from(Student))
        assert result.scalar_one() == 0


def test_payload_models_accept_camel_and_snake_names() -> None:
    by_alias = VerifyLocationRequest.model_validate({"userId": "u1", "lat": 1.0, "lng": 2.0})
    by_name = VerifyLocationRequest(user_id="u1", lat=1.0, lng=2.0)
    assert by_alias == by_name
    assert by_name.model_dump(by_alias=True) == {"userId": "u1", "lat": 1.0, "lng": 2.0}
