from fastapi.testclient import TestClient

from careerguide import models
from careerguide.main import app

client = TestClient(app)

BASE = "/api/v1/question-manage/question-categories"


def test_crud_and_ordering():
    client.post(BASE, json={"name": "Skills", "order_index": 2})
    r = client.post(BASE, json={"name": "Interests", "description": "What you like", "order_index": 1})
    assert r.status_code == 201
    category = r.json()["data"]

    r = client.get(BASE)
    assert [c["name"] for c in r.json()["data"]] == ["Interests", "Skills"]
    assert r.json()["meta"]["total"] == 2

    r = client.put(f"{BASE}/{category['id']}", json={"description": "Likes"})
    assert r.status_code == 200
    assert r.json()["data"]["name"] == "Interests"
    assert r.json()["data"]["description"] == "Likes"

    r = client.get(BASE, params={"search": "Sk"})
    assert [c["name"] for c in r.json()["data"]] == ["Skills"]


def test_name_required():
    r = client.post(BASE, json={"description": "no name"})
    assert r.status_code == 400
    assert r.json()["message"] == "Question category name is required"


def test_missing_category():
    r = client.get(f"{BASE}/missing")
    assert r.status_code == 404
    assert r.json()["message"] == "Question category not found"


def test_delete_blocked_while_questions_use_it(add):
    category = client.post(BASE, json={"name": "Values"}).json()["data"]
    add(models.Question(content="Q1", category_id=category["id"]), models.Question(content="Q2", category_id=category["id"]))
    r = client.delete(f"{BASE}/{category['id']}")
    assert r.status_code == 409
    assert r.json()["message"] == (
        "Cannot delete category with 2 existing questions. Please reassign or delete questions first."
    )


def test_delete_unused_category():
    category = client.post(BASE, json={"name": "Values"}).json()["data"]
    r = client.delete(f"{BASE}/{category['id']}")
    assert r.json()["message"] == "Question category deleted successfully"
    assert client.get(f"{BASE}/{category['id']}").status_code == 404
