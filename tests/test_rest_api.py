# tests/test_rest_api.py

import pytest
from fastapi.testclient import TestClient

from registrar.api import RegistrarRestAPI


@pytest.fixture
def client(records_service, backup_manager):
    api = RegistrarRestAPI(records_service, backup_manager)
    return TestClient(api.app)


def _create_student(client, student_id="S001", registration_number="2023CSE001", year=2,
                    department="Computer Science"):
    response = client.post("/students", json={
        "id": student_id,
        "name": "John Doe",
        "email": f"{student_id.lower()}@example.com",
        "registration_number": registration_number,
        "year": year,
        "department": department,
    })
    assert response.status_code == 201
    return response.json()


def _create_course(client, course_id="CS101", credits=3, max_enrollment=None):
    payload = {
        "course_id": course_id,
        "course_code": course_id,
        "title": "Intro to Programming",
        "credits": credits,
        "department": "Computer Science",
        "semester": "Fall",
    }
    if max_enrollment is not None:
        payload["max_enrollment"] = max_enrollment
    response = client.post("/courses", json=payload)
    assert response.status_code == 201
    return response.json()


def test_root_and_health(client):
    assert client.get("/").json()["message"] == "Registrar Academic Records API"
    assert client.get("/health").json()["status"] == "healthy"


def test_create_and_get_student(client):
    created = _create_student(client)
    assert created["active"] is True
    assert created["gpa"] == 0.0

    response = client.get("/students/S001")
    assert response.status_code == 200
    assert response.json()["registration_number"] == "2023CSE001"

    assert client.get("/students/S404").status_code == 404


def test_create_student_errors(client):
    _create_student(client)

    duplicate = client.post("/students", json={
        "id": "S001", "name": "Again", "email": "again@example.com",
        "registration_number": "2023CSE777", "year": 1, "department": "Physics",
    })
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "DuplicateIdError"

    bad_email = client.post("/students", json={
        "id": "S002", "name": "Bad", "email": "bad-email",
        "registration_number": "2023CSE778", "year": 1, "department": "Physics",
    })
    assert bad_email.status_code == 400
    assert bad_email.json()["error"] == "ValidationError"

    bad_year = client.post("/students", json={
        "id": "S003", "name": "Bad", "email": "bad@example.com",
        "registration_number": "2023CSE779", "year": 9, "department": "Physics",
    })
    assert bad_year.status_code == 422


def test_list_students_filters(client):
    _create_student(client, "S001", "2023CSE001", year=2)
    _create_student(client, "S002", "2022MTH014", year=3, department="Mathematics")
    client.post("/students/S002/deactivate")

    assert [s["id"] for s in client.get("/students").json()] == ["S001", "S002"]
    assert [s["id"] for s in client.get("/students", params={"active_only": True}).json()] == ["S001"]
    assert [s["id"] for s in client.get("/students", params={"department": "mathematics"}).json()] == ["S002"]
    assert [s["id"] for s in client.get("/students", params={"year": 2}).json()] == ["S001"]
    assert [s["id"] for s in client.get("/students", params={"skip": 1, "limit": 1}).json()] == ["S002"]


def test_update_student_skips_invalid_fields(client):
    _create_student(client)

    response = client.patch("/students/S001", json={"name": "Johnny", "email": "nope", "year": 3})

    body = response.json()
    assert response.status_code == 200
    assert body["name"] == "Johnny"
    assert body["email"] == "s001@example.com"
    assert body["year"] == 3


def test_enrollment_flow(client):
    _create_student(client, "S001", "2023CSE001")
    _create_student(client, "S002", "2022MTH014")
    _create_course(client, max_enrollment=1)

    enrolled = client.post("/enrollments", json={"student_id": "S001", "course_id": "CS101"})
    assert enrolled.status_code == 200
    assert enrolled.json() == {"success": True, "message": "Student enrolled successfully",
                               "status": "confirmed"}

    duplicate = client.post("/enrollments", json={"student_id": "S001", "course_id": "CS101"})
    assert duplicate.status_code == 409
    assert duplicate.json()["error"] == "DuplicateEnrollmentError"

    full = client.post("/enrollments", json={"student_id": "S002", "course_id": "CS101"})
    assert full.status_code == 200
    assert full.json()["success"] is False
    assert full.json()["status"] == "rejected"

    course = client.get("/courses/CS101").json()
    assert course["enrolled_students"] == ["S001"]
    assert course["available_seats"] == 0

    records = client.get("/students/S001/enrollments").json()
    assert [r["course_id"] for r in records] == ["CS101"]

    assert client.delete("/enrollments/S001/CS101").status_code == 204
    assert client.get("/courses/CS101").json()["current_enrollment"] == 0


def test_enroll_unknown_course(client):
    _create_student(client)
    response = client.post("/enrollments", json={"student_id": "S001", "course_id": "CS404"})
    assert response.status_code == 404


def test_credit_limit_response(client):
    _create_student(client)
    for index in range(4):
        _create_course(client, f"CS10{index}", credits=6)
        client.post("/enrollments", json={"student_id": "S001", "course_id": f"CS10{index}"})
    _create_course(client, "CS200", credits=1)

    response = client.post("/enrollments", json={"student_id": "S001", "course_id": "CS200"})

    assert response.status_code == 409
    body = response.json()
    assert body["error"] == "CreditLimitExceededError"
    assert body["current_credits"] == 24
    assert body["max_credits"] == 24


def test_grades_and_transcript(client):
    _create_student(client)
    _create_course(client)
    client.post("/enrollments", json={"student_id": "S001", "course_id": "CS101"})

    graded = client.post("/grades", json={"student_id": "S001", "course_id": "CS101", "grade": "a"})
    assert graded.status_code == 200
    assert graded.json()["grades"] == {"CS101": "A"}
    assert graded.json()["gpa"] == 9.0

    not_enrolled = client.post("/grades", json={"student_id": "S001", "course_id": "MATH201", "grade": "B"})
    assert not_enrolled.status_code == 400
    assert not_enrolled.json()["error"] == "NotEnrolledError"

    transcript = client.get("/students/S001/transcript")
    assert transcript.status_code == 200
    assert transcript.headers["content-type"].startswith("text/plain")
    assert "Course: CS101 - Grade: A (9.0)" in transcript.text

    assert client.get("/students/S404/transcript").status_code == 404


def test_statistics(client):
    _create_student(client)
    _create_course(client)

    statistics = client.get("/statistics").json()["statistics"]

    assert statistics["total_students"] == 1
    assert statistics["year_distribution"] == {"2": 1}
    assert statistics["total_courses"] == 1


def test_backup_and_restore(client, file_service, records_service):
    _create_student(client)
    file_service.export_students_to_csv(records_service.get_all_students(), "students.csv")

    created = client.post("/backups")
    assert created.status_code == 201
    name = created.json()["name"]
    assert created.json()["file_count"] == 1

    assert client.get("/backups").json() == [name]

    restored = client.post(f"/backups/{name}/restore")
    assert restored.json() == {"status": "restored", "backup": name}

    missing = client.post("/backups/backup_1999-01-01_00-00-00/restore")
    assert missing.status_code == 404
    assert missing.json()["error"] == "RecordsIOError"
