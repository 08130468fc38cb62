from fastapi.testclient import TestClient

from careerguide.main import app

client = TestClient(app)

BASE = "/api/v1/category/career-categories"


def _create(name):
    r = client.post(BASE, json={"name": name})
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_create_get_and_list():
    created = _create("Engineering")
    assert created["name"] == "Engineering"
    assert created["id"]

    r = client.get(f"{BASE}/{created['id']}")
    body = r.json()
    assert r.status_code == 200
    assert body["success"] is True
    assert body["data"]["name"] == "Engineering"

    _create("Arts")
    _create("Health")
    r = client.get(BASE, params={"page": 1, "limit": 2})
    body = r.json()
    assert [c["name"] for c in body["data"]] == ["Arts", "Engineering"]
    assert body["meta"] == {"total": 3, "skip": 0, "limit": 2, "page": 1}

    r = client.get(BASE, params={"page": 2, "limit": 2})
    assert [c["name"] for c in r.json()["data"]] == ["Health"]


def test_page_beyond_last_is_empty():
    for name in ("Arts", "Engineering", "Health"):
        _create(name)
    r = client.get(BASE, params={"page": 5, "limit": 2})
    assert r.status_code == 200
    body = r.json()
    assert body["data"] == []
    assert body["meta"] == {"total": 3, "skip": 8, "limit": 2, "page": 5}


def test_search_filters_by_name():
    _create("Software Engineering")
    _create("Civil Engineering")
    _create("Nursing")
    r = client.get(BASE, params={"search": "Engineering"})
    body = r.json()
    assert body["meta"]["total"] == 2
    assert all("Engineering" in c["name"] for c in body["data"])


def test_duplicate_name_conflicts():
    _create("Business")
    r = client.post(BASE, json={"name": "Business"})
    assert r.status_code == 409
    assert r.json() == {"success": False, "message": "Career category name already exists"}


def test_missing_name_is_rejected():
    r = client.post(BASE, json={})
    assert r.status_code == 400
    assert r.json()["message"] == "Career category name is required"


def test_rename_rules():
    a = _create("Law")
    b = _create("Media")
    r = client.put(f"{BASE}/{a['id']}", json={"name": "Law"})
    assert r.status_code == 200
    r = client.put(f"{BASE}/{a['id']}", json={"name": "Media"})
    assert r.status_code == 409
    r = client.put(f"{BASE}/{b['id']}", json={"name": "Journalism"})
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Journalism"


def test_get_update_delete_missing_return_404():
    assert client.get(f"{BASE}/nope").status_code == 404
    assert client.put(f"{BASE}/nope", json={"name": "x"}).status_code == 404
    r = client.delete(f"{BASE}/nope")
    assert r.status_code == 404
    assert r.json()["message"] == "Career category not found"


def test_delete():
    c = _create("Temporary")
    r = client.delete(f"{BASE}/{c['id']}")
    assert r.status_code == 200
    assert r.json() == {"success": True, "message": "Delete career category successfully"}
    assert client.get(f"{BASE}/{c['id']}").status_code == 404
