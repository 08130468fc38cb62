from fastapi.testclient import TestClient

from careerguide.main import app

client = TestClient(app)

SCHOOLS = "/api/v1/system-admin/schools"
CLASSES = "/api/v1/system-admin/classes"


def _school(name, **extra):
    r = client.post(SCHOOLS, json={"name": name, **extra})
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_school_crud():
    school = _school("Chu Van An", address="Hanoi", contact_email="cva@example.com")
    assert school["address"] == "Hanoi"
    r = client.put(f"{SCHOOLS}/{school['id']}", json={"phone_number": "0123"})
    data = r.json()["data"]
    assert data["phone_number"] == "0123"
    assert data["contact_email"] == "cva@example.com"
    r = client.delete(f"{SCHOOLS}/{school['id']}")
    assert r.status_code == 200
    assert r.json()["message"] == "Delete school successfully"


def test_school_unique_name_and_email():
    _school("Le Quy Don", contact_email="lqd@example.com")
    r = client.post(SCHOOLS, json={"name": "Le Quy Don"})
    assert r.status_code == 409
    r = client.post(SCHOOLS, json={"name": "Other", "contact_email": "lqd@example.com"})
    assert r.status_code == 409
    assert r.json()["message"] == "Contact email already exists"


def test_class_grade_range_and_school_reference():
    school = _school("Amsterdam")
    r = client.post(CLASSES, json={"name": "13A", "grade_level": 13, "school_id": school["id"]})
    assert r.status_code == 400
    assert r.json()["message"] == "Grade level must be a number between 1 and 12"
    r = client.post(CLASSES, json={"name": "10A", "grade_level": 10, "school_id": "missing"})
    assert r.status_code == 404
    r = client.post(CLASSES, json={"name": "10A", "grade_level": 10, "school_id": school["id"]})
    assert r.status_code == 201
    assert r.json()["data"]["school"] == {"id": school["id"], "name": "Amsterdam"}


def test_non_numeric_grade_is_a_bad_request():
    school = _school("Tran Phu")
    r = client.post(CLASSES, json={"name": "A", "grade_level": "ten", "school_id": school["id"]})
    assert r.status_code == 400
    assert r.json()["success"] is False


def test_school_classes_and_delete_block():
    school = _school("Marie Curie")
    client.post(CLASSES, json={"name": "11B", "grade_level": 11, "school_id": school["id"]})
    client.post(CLASSES, json={"name": "10B", "grade_level": 10, "school_id": school["id"]})
    r = client.get(f"{SCHOOLS}/{school['id']}/classes")
    assert [c["name"] for c in r.json()["data"]] == ["10B", "11B"]

    r = client.get(CLASSES, params={"grade_level": "11"})
    assert r.json()["meta"]["total"] == 1

    r = client.delete(f"{SCHOOLS}/{school['id']}")
    assert r.status_code == 409
    assert r.json()["message"] == "Cannot delete school. There are classes associated with this school"
