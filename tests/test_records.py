import pytest
from httpx import AsyncClient
from sqlalchemy import select

from edumanage.core.models import PlacementDetail, Student, StudentFee, StudentMark
from edumanage.db.session import Database


MARK = {
    "admissionNumber": "23bril05",
    "collegeCode": "BRIL",
    "studentName": "Kiran",
    "semester": 2,
    "subjectCode": "MA201BS",
    "subjectName": "Ordinary Differential Equations and Vector Calculus",
    "marksObtained": 58,
    "maxMarks": 100,
    "internalMark": 18,
    "externalMark": 40,
}


@pytest.mark.asyncio
async def test_record_mark_creates_student_stub(client: AsyncClient, database: Database) -> None:
    response = await client.post("/api/v1/marks", json=MARK)
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Marks recorded."}

    async with database.session() as session:
        student = await session.get(Student, "23BRIL05")
        assert student is not None
        assert student.student_name == "Kiran"


@pytest.mark.asyncio
async def test_record_mark_replaces_same_subject(client: AsyncClient, database: Database) -> None:
    await client.post("/api/v1/marks", json=MARK)
    await client.post("/api/v1/marks", json={**MARK, "marksObtained": 71, "externalMark": 53})

    async with database.session() as session:
        result = await session.execute(select(StudentMark))
        marks = result.scalars().all()
    assert [m.marks_obtained for m in marks] == [71]


@pytest.mark.asyncio
async def test_record_mark_requires_student_fields(client: AsyncClient) -> None:
    payload = {k: v for k, v in MARK.items() if k != "studentName"}
    response = await client.post("/api/v1/marks", json=payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid payload."


@pytest.mark.asyncio
async def test_record_fee_for_unknown_student_conflicts(client: AsyncClient, database: Database) -> None:
    response = await client.post(
        "/api/v1/fees",
        json={
            "admissionNumber": "NOPE01",
            "academicYear": "2024-25",
            "semester": 1,
            "totalFees": 40000,
            "paidAmount": 40000,
            "dueAmount": 0,
            "status": "Paid",
        },
    )
    assert response.status_code == 409
    assert response.json()["success"] is False

    async with database.session() as session:
        result = await session.execute(select(StudentFee))
        assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_record_fee(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(make_student("23BRIL05"))
    response = await client.post(
        "/api/v1/fees",
        json={
            "admissionNumber": "23BRIL05",
            "academicYear": "2024-25",
            "semester": 1,
            "totalFees": 40000,
            "paidAmount": 40000,
            "dueAmount": 0,
            "status": "Paid",
            "feeType": "Exam",
        },
    )
    assert response.status_code == 200

    async with database.session() as session:
        result = await session.execute(select(StudentFee))
        fee = result.scalar_one()
    assert fee.fee_type == "Exam"
    assert fee.status == "Paid"


@pytest.mark.asyncio
async def test_record_placement_flags_student(client: AsyncClient, database: Database, seed, make_student) -> None:
    await seed(make_student("23BRIL05"))
    payload = {
        "admissionNumber": "23BRIL05",
        "companyName": "Infosys",
        "hrName": "Meena",
        "hrEmail": "meena@infosys.com",
        "studentMobileNumber": 9000012345,
        "year": "4",
        "semester": "8",
        "academicYear": "2026-27",
    }
    assert (await client.post("/api/v1/placement", json=payload)).status_code == 200
    # Second call updates the same placement row.
    response = await client.post("/api/v1/placement", json={**payload, "companyName": "TCS"})
    assert response.status_code == 200

    async with database.session() as session:
        student = await session.get(Student, "23BRIL05")
        result = await session.execute(select(PlacementDetail))
        placements = result.scalars().all()
    assert student.is_placed is True
    assert student.mobile_number == "9000012345"
    assert [p.company_name for p in placements] == ["TCS"]
    assert placements[0].hr_email == "meena@infosys.com"


@pytest.mark.asyncio
async def test_record_placement_unknown_student(client: AsyncClient) -> None:
    response = await client.post("/api/v1/placement", json={"admissionNumber": "X1", "companyName": "TCS"})
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Student X1 not found"}
