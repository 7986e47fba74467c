"""Audited delete, deleted-data log and restore."""

from datetime import date

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from edumanage.core.models import DeletedDataLog, StudentAttendance, StudentFee, StudentMark
from edumanage.db.session import Database


def _mark(semester: int, code: str, obtained: int) -> StudentMark:
    return StudentMark(
        admission_number="23BRIL01",
        semester=semester,
        subject_code=code,
        subject_name=f"Subject {code}",
        marks_obtained=obtained,
        max_marks=100,
        internal_mark=20,
        external_mark=obtained - 20,
    )


def _attendance(day: date) -> StudentAttendance:
    return StudentAttendance(admission_number="23BRIL01", date=day, morning="Present", afternoon="Absent")


async def _marks(database: Database):
    async with database.session() as session:
        result = await session.execute(
            select(
                StudentMark.semester,
                StudentMark.subject_code,
                StudentMark.marks_obtained,
                StudentMark.internal_mark,
                StudentMark.external_mark,
            ).order_by(StudentMark.semester, StudentMark.subject_code)
        )
        return result.all()


async def _log_ids(database: Database):
    async with database.session() as session:
        result = await session.execute(select(DeletedDataLog.id).order_by(DeletedDataLog.id))
        return list(result.scalars().all())


def _delete_body(tab: str, **extra):
    body = {"admissionNumber": "23BRIL01", "tab": tab, "deletedBy": "principal"}
    body.update(extra)
    return body


@pytest.mark.asyncio
async def test_delete_then_restore_round_trip(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(
        make_student("23BRIL01", student_name="Asha Rao"),
        _mark(1, "MA101BS", 55),
        _mark(1, "CH102BS", 61),
        _mark(2, "MA201BS", 47),
    )
    before = await _marks(database)

    response = await client.post("/api/v1/delete-student-data", json=_delete_body("marks", semester=1))
    assert response.status_code == 200
    assert response.json()["message"] == "Deleted 2 records."
    assert [m.subject_code for m in await _marks(database)] == ["MA201BS"]

    log = (await client.get("/api/v1/deleted-log")).json()
    assert len(log) == 1
    entry = log[0]
    assert entry["studentName"] == "Asha Rao"
    assert entry["dataType"] == "marks"
    assert entry["scope"] == "Manual"
    assert entry["deletedBy"] == "principal"
    assert sorted(r["subject_code"] for r in entry["deletedData"]) == ["CH102BS", "MA101BS"]

    response = await client.post("/api/v1/restore-log", json={"logIds": [entry["id"]]})
    assert response.status_code == 200
    assert response.json()["message"] == "Data restored (2 records)."
    assert await _marks(database) == before
    assert await _log_ids(database) == []


@pytest.mark.asyncio
async def test_delete_all_semesters(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(make_student("23BRIL01"), _mark(1, "MA101BS", 55), _mark(2, "MA201BS", 47))
    response = await client.post(
        "/api/v1/delete-student-data",
        json=_delete_body("marks", semester="All Semesters", reason="Wrong file"),
    )
    assert response.status_code == 200
    assert await _marks(database) == []

    log = (await client.get("/api/v1/deleted-log")).json()
    assert log[0]["reason"] == "Wrong file"
    assert len(log[0]["deletedData"]) == 2


@pytest.mark.asyncio
async def test_zero_match_delete_fails_without_log(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(make_student("23BRIL01"))
    response = await client.post("/api/v1/delete-student-data", json=_delete_body("fees"))
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "No records found to delete."}
    assert await _log_ids(database) == []


@pytest.mark.asyncio
async def test_delete_requires_deleted_by(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/delete-student-data",
        json={"admissionNumber": "23BRIL01", "tab": "marks"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_attendance_delete_by_academic_year(
    client: AsyncClient, database: Database, seed, make_student
) -> None:
    await seed(
        make_student("23BRIL01"),
        _attendance(date(2024, 6, 30)),
        _attendance(date(2024, 7, 1)),
        _attendance(date(2024, 12, 1)),
    )
    response = await client.post(
        "/api/v1/delete-student-data",
        json=_delete_body("attendance", academicYear="2024-25"),
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Deleted 2 records."

    async with database.session() as session:
        result = await session.execute(select(StudentAttendance.date))
        assert list(result.scalars().all()) == [date(2024, 6, 30)]


@pytest.mark.asyncio
async def test_exam_fee_delete_restores_into_fees(
    client: AsyncClient, database: Database, seed, make_student
) -> None:
    await seed(
        make_student("23BRIL01"),
        StudentFee(
            admission_number="23BRIL01",
            academic_year="2024-25",
            semester=2,
            total_fees=1500,
            paid_amount=1500,
            due_amount=0,
            status="Paid",
            fee_type="Exam",
        ),
    )
    response = await client.post(
        "/api/v1/delete-student-data",
        json=_delete_body("examFees", academicYear="2024-25", semester="2"),
    )
    assert response.status_code == 200
    log_id = (await _log_ids(database))[0]

    assert (await client.post("/api/v1/restore-log", json={"logIds": [log_id]})).status_code == 200
    async with database.session() as session:
        result = await session.execute(select(StudentFee))
        fee = result.scalar_one()
    assert (fee.fee_type, fee.total_fees, fee.status) == ("Exam", 1500, "Paid")


@pytest.mark.asyncio
async def test_restore_with_missing_id_restores_nothing(
    client: AsyncClient, database: Database, seed, make_student
) -> None:
    await seed(make_student("23BRIL01"), _mark(1, "MA101BS", 55))
    await client.post("/api/v1/delete-student-data", json=_delete_body("marks"))
    log_id = (await _log_ids(database))[0]

    response = await client.post("/api/v1/restore-log", json={"logIds": [log_id, log_id + 100]})
    assert response.status_code == 404
    assert str(log_id + 100) in response.json()["error"]
    assert await _marks(database) == []
    assert await _log_ids(database) == [log_id]


@pytest.mark.asyncio
async def test_restore_conflict_rolls_back(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(make_student("23BRIL01"), _attendance(date(2025, 9, 1)))
    await client.post("/api/v1/delete-student-data", json=_delete_body("attendance"))
    log_id = (await _log_ids(database))[0]

    # Same day uploaded again before the restore.
    await seed(_attendance(date(2025, 9, 1)))
    response = await client.post("/api/v1/restore-log", json={"logIds": [log_id]})
    assert response.status_code == 409
    assert response.json()["error"].startswith("Restore failed")
    assert await _log_ids(database) == [log_id]


@pytest.mark.asyncio
async def test_restore_requires_ids(client: AsyncClient) -> None:
    response = await client.post("/api/v1/restore-log", json={"logIds": []})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_remove_single_log_entry(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(make_student("23BRIL01"), _mark(1, "MA101BS", 55))
    await client.post("/api/v1/delete-student-data", json=_delete_body("marks"))
    log_id = (await _log_ids(database))[0]

    response = await client.delete(f"/api/v1/deleted-log/{log_id}")
    assert response.status_code == 200
    assert await _log_ids(database) == []

    response = await client.delete(f"/api/v1/deleted-log/{log_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_purge_deleted_log(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(make_student("23BRIL01"), _mark(1, "MA101BS", 55), _mark(2, "MA201BS", 47))
    await client.post("/api/v1/delete-student-data", json=_delete_body("marks", semester=1))
    await client.post("/api/v1/delete-student-data", json=_delete_body("marks", semester=2))

    response = await client.delete("/api/v1/deleted-log")
    assert response.status_code == 200
    assert response.json()["message"] == "Removed 2 log entries."
    assert await _log_ids(database) == []


@pytest.mark.asyncio
async def test_restore_of_several_entries_is_all_or_nothing(
    client: AsyncClient, database: Database, seed, make_student
) -> None:
    await seed(make_student("23BRIL01"), _mark(1, "MA101BS", 55), _attendance(date(2025, 9, 1)))
    await client.post("/api/v1/delete-student-data", json=_delete_body("marks"))
    await client.post("/api/v1/delete-student-data", json=_delete_body("attendance"))
    log_ids = await _log_ids(database)
    assert len(log_ids) == 2

    # Only the attendance entry conflicts on restore.
    await seed(_attendance(date(2025, 9, 1)))
    response = await client.post("/api/v1/restore-log", json={"logIds": log_ids})
    assert response.status_code == 409
    assert await _marks(database) == []
    assert await _log_ids(database) == log_ids
