from fastapi.testclient import TestClient

from careerguide import models
from careerguide.main import app

client = TestClient(app)

BASE = "/api/v1/careers-manage/careers"
CATEGORIES = "/api/v1/category/career-categories"


def _category(name):
    return client.post(CATEGORIES, json={"name": name}).json()["data"]


def test_create_with_categories_and_get(add):
    tech = _category("Technology")
    science = _category("Science")
    r = client.post(BASE, json={
        "code": "SWE",
        "name": "Software Engineer",
        "career_category_ids": [tech["id"], science["id"]],
    })
    assert r.status_code == 201, r.text
    career = r.json()["data"]
    assert career["is_active"] is False
    assert {c["name"] for c in career["categories"]} == {"Technology", "Science"}
    assert career["criteria_count"] == 0

    add(models.CareerCriteria(name="Logic", career_id=career["id"]))
    add(models.CareerCriteria(name="Retired", career_id=career["id"], is_active=False))
    r = client.get(f"{BASE}/{career['id']}")
    assert r.json()["data"]["criteria_count"] == 1


def test_code_and_name_required_and_unique():
    r = client.post(BASE, json={"name": "No Code"})
    assert r.status_code == 400
    assert r.json()["message"] == "Career code is required"
    client.post(BASE, json={"code": "DOC", "name": "Doctor"})
    r = client.post(BASE, json={"code": "DOC", "name": "Another"})
    assert r.status_code == 409
    assert r.json()["message"] == "Career code already exists"
    r = client.post(BASE, json={"code": "DOC2", "name": "Doctor"})
    assert r.json()["message"] == "Career name already exists"


def test_unknown_category_is_not_found():
    r = client.post(BASE, json={"code": "X", "name": "X", "career_category_ids": ["nope"]})
    assert r.status_code == 404
    assert r.json()["message"] == "Career category not found: nope"


def test_update_replaces_categories_only_when_sent():
    a = _category("A")
    b = _category("B")
    career = client.post(BASE, json={"code": "PIL", "name": "Pilot", "career_category_ids": [a["id"]]}).json()["data"]

    r = client.put(f"{BASE}/{career['id']}", json={"is_active": True})
    data = r.json()["data"]
    assert data["is_active"] is True
    assert [c["id"] for c in data["categories"]] == [a["id"]]

    r = client.put(f"{BASE}/{career['id']}", json={"career_category_ids": [b["id"]]})
    assert [c["id"] for c in r.json()["data"]["categories"]] == [b["id"]]


def test_list_filters_active():
    client.post(BASE, json={"code": "A1", "name": "Active One", "is_active": True})
    client.post(BASE, json={"code": "D1", "name": "Draft One"})
    r = client.get(BASE, params={"is_active": "true"})
    body = r.json()
    assert body["meta"]["total"] == 1
    assert body["data"][0]["code"] == "A1"
    assert body["data"][0]["categories"] == []


def test_career_in_use_cannot_be_deleted(add):
    career = client.post(BASE, json={"code": "CHEF", "name": "Chef"}).json()["data"]
    order = add(models.CareerOrder())
    add(models.CareerOrderItem(order_id=order.id, career_id=career["id"]))
    r = client.delete(f"{BASE}/{career['id']}")
    assert r.status_code == 409


def test_delete_career():
    career = client.post(BASE, json={"code": "ART", "name": "Artist"}).json()["data"]
    r = client.delete(f"{BASE}/{career['id']}")
    assert r.status_code == 200
    assert client.get(f"{BASE}/{career['id']}").status_code == 404
