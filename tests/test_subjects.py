from types import SimpleNamespace

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from academic_records.api.v1.subjects import service as subjects_service
from academic_records.core.exceptions import InvalidInputError, NotFoundError
from academic_records.core.models import Enrollment
from academic_records.db.repositories import TeacherRepository


async def _create_teacher(client: AsyncClient, payload: dict) -> dict:
    response = await client.post("/api/v1/teachers", json=payload)
    assert response.status_code == 201
    return response.json()["result"]


@pytest.mark.asyncio
async def test_create_subject_with_teacher(client: AsyncClient, teacher_payload: dict) -> None:
    teacher = await _create_teacher(client, teacher_payload)

    response = await client.post(
        "/api/v1/subjects",
        json={"name": "Calculus", "description": "Limits and derivatives", "teacherId": teacher["id"]},
    )
    assert response.status_code == 201
    subject = response.json()["result"]
    assert subject["teacher_id"] == teacher["id"]
    assert subject["profesorAsignado"] == {
        "id": teacher["id"],
        "name": "Ana",
        "surname": "Ruiz",
        "specialty": "Mathematics",
    }


@pytest.mark.asyncio
async def test_create_subject_without_teacher(client: AsyncClient) -> None:
    response = await client.post("/api/v1/subjects", json={"name": "Music", "description": ""})
    assert response.status_code == 201
    subject = response.json()["result"]
    assert subject["description"] is None
    assert subject["teacher_id"] is None
    assert subject["profesorAsignado"] is None


@pytest.mark.asyncio
async def test_create_subject_duplicate_name(client: AsyncClient) -> None:
    assert (await client.post("/api/v1/subjects", json={"name": "Music"})).status_code == 201
    response = await client.post("/api/v1/subjects", json={"name": "Music"})
    assert response.status_code == 409
    assert response.json()["result"] is None


@pytest.mark.asyncio
async def test_create_subject_unknown_teacher(client: AsyncClient) -> None:
    response = await client.post("/api/v1/subjects", json={"name": "Chemistry", "teacherId": 77})
    assert response.status_code == 404
    assert "77" in response.json()["message"]

    listed = await client.get("/api/v1/subjects")
    assert listed.json()["result"] == []


@pytest.mark.asyncio
async def test_create_subject_invalid(client: AsyncClient) -> None:
    response = await client.post("/api/v1/subjects", json={"name": "AB", "teacherId": 0})
    assert response.status_code == 400
    errors = response.json()["errors"]
    assert "name must be at least 3 characters long" in errors
    assert "must be a positive number" in errors


@pytest.mark.asyncio
async def test_list_subjects_ordered_by_name(client: AsyncClient, teacher_payload: dict) -> None:
    teacher = await _create_teacher(client, teacher_payload)
    await client.post("/api/v1/subjects", json={"name": "Zoology"})
    await client.post("/api/v1/subjects", json={"name": "Biology", "teacherId": teacher["id"]})

    response = await client.get("/api/v1/subjects")
    assert response.status_code == 200
    subjects = response.json()["result"]
    assert [s["name"] for s in subjects] == ["Biology", "Zoology"]
    assert subjects[0]["profesorAsignado"]["id"] == teacher["id"]
    assert subjects[1]["profesorAsignado"] is None


@pytest.mark.asyncio
async def test_subject_details_lists_enrolled_students(
    client: AsyncClient, teacher_payload: dict, student_payload: dict
) -> None:
    teacher = await _create_teacher(client, teacher_payload)
    subject = (
        await client.post("/api/v1/subjects", json={"name": "History", "teacherId": teacher["id"]})
    ).json()["result"]
    student = (await client.post("/api/v1/students", json=student_payload)).json()["result"]
    await client.post("/api/v1/enrollments", json={"studentId": student["id"], "subjectId": subject["id"]})

    response = await client.get(f"/api/v1/subjects/{subject['id']}")
    assert response.status_code == 200
    details = response.json()["result"]
    assert details["profesorAsignado"]["surname"] == "Ruiz"
    assert details["estudiantesInscritos"] == [
        {"id": student["id"], "name": "Leo", "surname": "Diaz", "email": "leo@x.com"}
    ]

    missing = await client.get("/api/v1/subjects/999")
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_update_subject_empty_payload(client: AsyncClient) -> None:
    subject = (await client.post("/api/v1/subjects", json={"name": "Music"})).json()["result"]
    response = await client.put(f"/api/v1/subjects/{subject['id']}", json={})
    assert response.status_code == 400
    assert response.json()["message"] == "No data was provided to update."


@pytest.mark.asyncio
async def test_update_subject_fields(client: AsyncClient, teacher_payload: dict) -> None:
    teacher = await _create_teacher(client, teacher_payload)
    subject = (await client.post("/api/v1/subjects", json={"name": "Music"})).json()["result"]

    response = await client.put(
        f"/api/v1/subjects/{subject['id']}",
        json={"description": "Harmony and rhythm", "teacherId": teacher["id"]},
    )
    assert response.status_code == 200
    updated = response.json()["result"]
    assert updated["name"] == "Music"
    assert updated["description"] == "Harmony and rhythm"
    assert updated["profesorAsignado"]["id"] == teacher["id"]

    cleared = await client.put(f"/api/v1/subjects/{subject['id']}", json={"teacherId": None})
    assert cleared.status_code == 200
    assert cleared.json()["result"]["teacher_id"] is None
    assert cleared.json()["result"]["profesorAsignado"] is None


@pytest.mark.asyncio
async def test_update_subject_conflicts_and_missing_refs(client: AsyncClient) -> None:
    music = (await client.post("/api/v1/subjects", json={"name": "Music"})).json()["result"]
    await client.post("/api/v1/subjects", json={"name": "Drama"})

    taken = await client.put(f"/api/v1/subjects/{music['id']}", json={"name": "Drama"})
    assert taken.status_code == 409

    no_teacher = await client.put(f"/api/v1/subjects/{music['id']}", json={"teacherId": 55})
    assert no_teacher.status_code == 404

    null_name = await client.put(f"/api/v1/subjects/{music['id']}", json={"name": None})
    assert null_name.status_code == 400

    missing = await client.put("/api/v1/subjects/999", json={"name": "Poetry"})
    assert missing.status_code == 404

    unchanged = await client.get(f"/api/v1/subjects/{music['id']}")
    assert unchanged.json()["result"]["name"] == "Music"


@pytest.mark.asyncio
async def test_assign_teacher(client: AsyncClient, teacher_payload: dict) -> None:
    teacher = await _create_teacher(client, teacher_payload)
    subject = (await client.post("/api/v1/subjects", json={"name": "Literature"})).json()["result"]

    response = await client.post(
        f"/api/v1/subjects/{subject['id']}/assign-teacher", json={"teacherId": teacher["id"]}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Teacher Ana Ruiz assigned to subject Literature."
    assert data["result"]["profesorAsignado"]["id"] == teacher["id"]


@pytest.mark.asyncio
async def test_assign_unknown_teacher_leaves_subject_unchanged(client: AsyncClient, teacher_payload: dict) -> None:
    teacher = await _create_teacher(client, teacher_payload)
    subject = (
        await client.post("/api/v1/subjects", json={"name": "Literature", "teacherId": teacher["id"]})
    ).json()["result"]

    response = await client.post(f"/api/v1/subjects/{subject['id']}/assign-teacher", json={"teacherId": 404})
    assert response.status_code == 404

    current = await client.get(f"/api/v1/subjects/{subject['id']}")
    assert current.json()["result"]["teacher_id"] == teacher["id"]


@pytest.mark.asyncio
async def test_assign_teacher_validation_and_missing_subject(client: AsyncClient, teacher_payload: dict) -> None:
    teacher = await _create_teacher(client, teacher_payload)

    no_body = await client.post("/api/v1/subjects/1/assign-teacher", json={})
    assert no_body.status_code == 400
    assert "is required" in no_body.json()["errors"]

    negative = await client.post("/api/v1/subjects/1/assign-teacher", json={"teacherId": -3})
    assert negative.status_code == 400

    no_subject = await client.post("/api/v1/subjects/999/assign-teacher", json={"teacherId": teacher["id"]})
    assert no_subject.status_code == 404


@pytest.mark.asyncio
async def test_delete_subject_cascades_enrollments(
    client: AsyncClient, db_session: AsyncSession, student_payload: dict
) -> None:
    subject = (await client.post("/api/v1/subjects", json={"name": "Music"})).json()["result"]
    student = (await client.post("/api/v1/students", json=student_payload)).json()["result"]
    await client.post("/api/v1/enrollments", json={"studentId": student["id"], "subjectId": subject["id"]})

    response = await client.delete(f"/api/v1/subjects/{subject['id']}")
    assert response.status_code == 200
    assert response.json()["result"] == {"id": subject["id"]}

    remaining = await db_session.execute(select(func.count()).select_from(Enrollment))
    assert remaining.scalar_one() == 0

    enrolled = await client.get(f"/api/v1/students/{student['id']}/subjects")
    assert enrolled.json()["result"] == []

    again = await client.delete(f"/api/v1/subjects/{subject['id']}")
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_service_errors_without_http(db_session: AsyncSession) -> None:
    with pytest.raises(InvalidInputError):
        await subjects_service.update_subject(db_session, 1, {})
    with pytest.raises(NotFoundError):
        await subjects_service.get_subject_details(db_session, 1)
    with pytest.raises(NotFoundError):
        await subjects_service.create_subject(db_session, {"name": "Logic", "teacher_id": 3})


@pytest.mark.asyncio
async def test_boolean_teacher_id_is_rejected(client: AsyncClient, teacher_payload: dict) -> None:
    await _create_teacher(client, teacher_payload)

    response = await client.post("/api/v1/subjects", json={"name": "Math", "teacherId": True})
    assert response.status_code == 400
    assert response.json()["errors"] == "teacherId must be an integer."
    assert (await client.get("/api/v1/subjects")).json()["result"] == []

    subject = (await client.post("/api/v1/subjects", json={"name": "Math"})).json()["result"]
    update = await client.put(f"/api/v1/subjects/{subject['id']}", json={"teacher_id": True})
    assert update.status_code == 400
    assign = await client.post(f"/api/v1/subjects/{subject['id']}/assign-teacher", json={"teacherId": True})
    assert assign.status_code == 400

    current = await client.get(f"/api/v1/subjects/{subject['id']}")
    assert current.json()["result"]["teacher_id"] is None


_FK_MESSAGE = "Foreign key error: the specified teacher does not exist."


@pytest.fixture()
def skip_teacher_check(monkeypatch: pytest.MonkeyPatch) -> None:
    async def teacher_assumed_present(db, teacher_id: int) -> None:
        return None

    monkeypatch.setattr(subjects_service, "_teacher_must_exist", teacher_assumed_present)


@pytest.mark.asyncio
async def test_create_with_missing_teacher_rejected_by_store(client: AsyncClient, skip_teacher_check) -> None:
    response = await client.post("/api/v1/subjects", json={"name": "Math", "teacherId": 77})
    assert response.status_code == 400
    assert response.json()["message"] == _FK_MESSAGE
    assert (await client.get("/api/v1/subjects")).json()["result"] == []


@pytest.mark.asyncio
async def test_update_with_missing_teacher_rejected_by_store(client: AsyncClient, skip_teacher_check) -> None:
    subject = (await client.post("/api/v1/subjects", json={"name": "Math"})).json()["result"]

    response = await client.put(f"/api/v1/subjects/{subject['id']}", json={"teacherId": 77})
    assert response.status_code == 400
    assert response.json()["message"] == _FK_MESSAGE

    current = await client.get(f"/api/v1/subjects/{subject['id']}")
    assert current.json()["result"]["teacher_id"] is None


@pytest.mark.asyncio
async def test_assign_missing_teacher_rejected_by_store(
    client: AsyncClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    subject = (await client.post("/api/v1/subjects", json={"name": "Math"})).json()["result"]

    async def removed_teacher(self, teacher_id: int):
        return SimpleNamespace(id=teacher_id)

    monkeypatch.setattr(TeacherRepository, "find_by_id", removed_teacher)

    response = await client.post(f"/api/v1/subjects/{subject['id']}/assign-teacher", json={"teacherId": 77})
    assert response.status_code == 400
    assert response.json()["message"] == _FK_MESSAGE

    current = await client.get(f"/api/v1/subjects/{subject['id']}")
    assert current.json()["result"]["teacher_id"] is None


@pytest.mark.asyncio
async def test_timestamps_are_utc(client: AsyncClient) -> None:
    subject = (await client.post("/api/v1/subjects", json={"name": "Math"})).json()["result"]
    details = (await client.get(f"/api/v1/subjects/{subject['id']}")).json()["result"]

    for value in (subject["created_at"], subject["updated_at"], details["created_at"]):
        assert value.endswith("Z") or value.endswith("+00:00")
