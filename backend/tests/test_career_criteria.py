from fastapi.testclient import TestClient

from careerguide import models
from careerguide.main import app

client = TestClient(app)

BASE = "/api/v1/careers-manage/career-criteria"


def _career(add, code="ENG", name="Engineer"):
    return add(models.Career(code=code, name=name, description="Builds things", tags="tech", is_active=True))


def test_create_defaults_inactive_and_enriches_career(add):
    career = _career(add)
    r = client.post(BASE, json={"name": "Logic", "career_id": career.id, "order_index": 1})
    assert r.status_code == 201, r.text
    data = r.json()["data"]
    assert data["is_active"] is False
    assert data["career"] == {
        "id": career.id,
        "name": "Engineer",
        "description": "Builds things",
        "tags": "tech",
        "is_active": True,
    }


def test_unknown_career_is_not_found():
    r = client.post(BASE, json={"name": "Logic", "career_id": "missing"})
    assert r.status_code == 404
    assert r.json()["message"] == "Career not found"


def test_name_unique_within_career_only(add):
    a = _career(add)
    b = _career(add, code="DOC", name="Doctor")
    client.post(BASE, json={"name": "Logic", "career_id": a.id})
    r = client.post(BASE, json={"name": "Logic", "career_id": a.id})
    assert r.status_code == 409
    assert r.json()["message"] == "Career criteria name already exists in this career"
    assert client.post(BASE, json={"name": "Logic", "career_id": b.id}).status_code == 201


def test_update_rename_to_sibling_conflicts_and_own_name_passes(add):
    career = _career(add)
    client.post(BASE, json={"name": "Logic", "career_id": career.id})
    other = client.post(BASE, json={"name": "Empathy", "career_id": career.id}).json()["data"]
    r = client.put(f"{BASE}/{other['id']}", json={"name": "Logic"})
    assert r.status_code == 409
    r = client.put(f"{BASE}/{other['id']}", json={"name": "Empathy", "description": "Cares"})
    assert r.status_code == 200
    assert r.json()["data"]["description"] == "Cares"


def test_null_is_active_rejected(add):
    career = _career(add)
    c = client.post(BASE, json={"name": "Logic", "career_id": career.id}).json()["data"]
    r = client.put(f"{BASE}/{c['id']}", json={"is_active": None})
    assert r.status_code == 400
    assert r.json()["message"] == "is_active cannot be null"


def test_toggle_and_filters(add):
    career = _career(add)
    c = client.post(BASE, json={"name": "Logic", "career_id": career.id, "order_index": 2}).json()["data"]
    client.post(BASE, json={"name": "Focus", "career_id": career.id, "order_index": 1})

    r = client.put(f"{BASE}/{c['id']}/active")
    assert r.status_code == 200
    assert r.json()["message"] == "Update status to true successfully"

    r = client.get(BASE, params={"career_id": career.id})
    assert [x["name"] for x in r.json()["data"]] == ["Focus", "Logic"]
    r = client.get(BASE, params={"is_active": "true"})
    assert [x["name"] for x in r.json()["data"]] == ["Logic"]
    r = client.get(BASE, params={"search": "foc"})
    assert r.json()["meta"]["total"] == 1

    r = client.put(f"{BASE}/{c['id']}/active")
    assert r.json()["message"] == "Update status to false successfully"


def test_delete_and_missing(add):
    career = _career(add)
    c = client.post(BASE, json={"name": "Logic", "career_id": career.id}).json()["data"]
    r = client.delete(f"{BASE}/{c['id']}")
    assert r.json() == {"success": True, "message": "Career criteria deleted permanently"}
    r = client.get(f"{BASE}/{c['id']}")
    assert r.status_code == 404
    assert r.json()["message"] == "Career criteria not found"
