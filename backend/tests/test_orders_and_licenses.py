from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlmodel import select

from careerguide import models
from careerguide.errors import ConflictError, ValidationError
from careerguide.main import app
from careerguide.orders import LicenseService, add_months

client = TestClient(app)

ORDERS = "/api/v1/careers-manage/career-orders"
LICENSES = "/api/v1/careers-manage/career-school-licenses"


@pytest.fixture
def world(add):
    school = add(models.School(name="North High"))
    buyer = add(models.User(user_name="buyer", full_name="Bea Buyer", email="bea@example.com"))
    admin = add(models.User(user_name="admin", full_name="Al Admin"))
    eng = add(models.Career(code="ENG", name="Engineer"))
    doc = add(models.Career(code="DOC", name="Doctor"))
    return {"school": school, "buyer": buyer, "admin": admin, "careers": [eng, doc]}


def _order(world, **extra):
    payload = {
        "school_id": world["school"].id,
        "create_by": world["buyer"].id,
        "career_ids": [c.id for c in world["careers"]],
        "note": "first batch",
    }
    payload.update(extra)
    r = client.post(ORDERS, json=payload)
    assert r.status_code == 201, r.text
    return r.json()["data"]


def test_create_order_with_items(world):
    order = _order(world)
    assert order["status"] == "PENDING"
    assert order["school"] == {"id": world["school"].id, "name": "North High"}
    assert order["creator"]["email"] == "bea@example.com"
    assert order["reviewer"] is None
    assert sorted(i["career"]["name"] for i in order["items"]) == ["Doctor", "Engineer"]
    assert all(i["price"] == 0 for i in order["items"])

    r = client.get(ORDERS, params={"school_id": world["school"].id})
    assert r.json()["meta"]["total"] == 1


@pytest.mark.parametrize(
    "extra, status_code, message",
    [
        ({"school_id": None}, 400, "school_id and create_by are required"),
        ({"career_ids": []}, 400, "career_ids is required and must be a non-empty array"),
        ({"school_id": "missing"}, 404, "School not found"),
        ({"create_by": "missing"}, 404, "User not found"),
        ({"career_ids": ["missing"]}, 404, "Some careers not found"),
    ],
)
def test_create_order_rejections(world, session, extra, status_code, message):
    payload = {
        "school_id": world["school"].id,
        "create_by": world["buyer"].id,
        "career_ids": [world["careers"][0].id],
    }
    payload.update(extra)
    r = client.post(ORDERS, json=payload)
    assert r.status_code == status_code
    assert r.json()["message"] == message
    assert session.exec(select(models.CareerOrder)).all() == []


def test_duplicate_career_ids_rejected(world):
    eng = world["careers"][0].id
    r = client.post(ORDERS, json={"school_id": world["school"].id, "create_by": world["buyer"].id, "career_ids": [eng, eng]})
    assert r.status_code == 400
    assert r.json()["message"] == "Duplicate career_ids found"


def test_review_only_approved_or_rejected(world):
    order = _order(world)
    r = client.put(f"{ORDERS}/{order['id']}/review", json={"status": "PENDING", "reviewed_by": world["admin"].id})
    assert r.status_code == 400
    assert r.json()["message"] == "status must be APPROVED or REJECTED"

    r = client.put(f"{ORDERS}/{order['id']}/review", json={"status": "APPROVED"})
    assert r.json()["message"] == "reviewed_by is required"

    r = client.put(f"{ORDERS}/{order['id']}/review", json={"status": "APPROVED", "reviewed_by": world["admin"].id})
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["status"] == "APPROVED"
    assert data["reviewer"]["user_name"] == "admin"
    assert data["reviewed_at"] is not None
    assert data["note"] == "first batch"

    r = client.get(ORDERS, params={"status": "APPROVED"})
    assert [o["id"] for o in r.json()["data"]] == [order["id"]]


def test_delete_order_removes_items(world, session):
    order = _order(world)
    r = client.delete(f"{ORDERS}/{order['id']}")
    assert r.json()["message"] == "Career order deleted successfully"
    assert session.exec(select(models.CareerOrderItem)).all() == []
    assert client.get(f"{ORDERS}/{order['id']}").status_code == 404


def test_licenses_issued_per_item(world):
    order = _order(world)
    r = client.post(LICENSES, json={"order_id": order["id"], "month_rental": 6})
    assert r.status_code == 201
    assert r.json()["message"] == "Created 2 licenses successfully"
    issued = r.json()["data"]
    today = date.today()
    assert {lic["status"] for lic in issued} == {"PENDING_ACTIVATION"}
    assert {lic["start_date"] for lic in issued} == {today.isoformat()}
    assert {lic["expiry_date"] for lic in issued} == {add_months(today, 6).isoformat()}

    r = client.get(LICENSES, params={"order_id": order["id"]})
    assert r.json()["meta"]["total"] == 2
    assert {lic["school"]["name"] for lic in r.json()["data"]} == {"North High"}

    r = client.post(LICENSES, json={"order_id": order["id"], "month_rental": 6})
    assert r.status_code == 409
    assert r.json()["message"] == "Licenses for this order already exist"

    r = client.delete(f"{ORDERS}/{order['id']}")
    assert r.status_code == 409


def test_license_create_rejections(world):
    order = _order(world)
    r = client.post(LICENSES, json={"order_id": order["id"]})
    assert r.json()["message"] == "order_id and month_rental are required"
    r = client.post(LICENSES, json={"order_id": order["id"], "month_rental": 0})
    assert r.status_code == 400
    assert r.json()["message"] == "month_rental must be greater than 0"
    r = client.post(LICENSES, json={"order_id": "missing", "month_rental": 1})
    assert r.status_code == 404


def test_list_licenses_requires_order_id():
    r = client.get(LICENSES)
    assert r.status_code == 400
    assert r.json()["message"] == "order_id is required"


def test_add_months_clamps_to_month_end():
    assert add_months(date(2025, 1, 31), 1) == date(2025, 2, 28)
    assert add_months(date(2024, 11, 15), 3) == date(2025, 2, 15)
    assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)


def _license(add, world, status="PENDING_ACTIVATION", start=date(2025, 1, 1), expiry=date(2025, 12, 31)):
    return add(models.SchoolCareerLicense(
        school_id=world["school"].id,
        career_id=world["careers"][0].id,
        status=status,
        start_date=start,
        expiry_date=expiry,
    ))


def test_activate_within_window(add, session, world):
    lic = _license(add, world)
    service = LicenseService(session)
    with pytest.raises(ValidationError, match="before start_date"):
        service.activate(lic.id, today=date(2024, 12, 31))
    with pytest.raises(ValidationError, match="after expiry_date"):
        service.activate(lic.id, today=date(2026, 1, 1))
    assert service.activate(lic.id, today=date(2025, 6, 1))["status"] == "ACTIVE"
    with pytest.raises(ConflictError, match="already active"):
        service.activate(lic.id, today=date(2025, 6, 1))


def test_revoked_license_cannot_change(add, world):
    lic = _license(add, world)
    r = client.put(f"{LICENSES}/{lic.id}/revoke")
    assert r.status_code == 200
    assert r.json()["data"]["status"] == "REVOKED"
    assert client.put(f"{LICENSES}/{lic.id}/revoke").json()["message"] == "License is already revoked"
    r = client.put(f"{LICENSES}/{lic.id}/activate")
    assert r.status_code == 409
    assert r.json()["message"] == "Cannot activate a revoked license"
    r = client.put(f"{LICENSES}/{lic.id}/renew", json={"expiry_date": "2030-01-01"})
    assert r.json()["message"] == "Cannot renew a revoked license"


def test_renew_reactivates_expired_license(add, session, world):
    lic = _license(add, world, status="EXPIRED")
    service = LicenseService(session)
    with pytest.raises(ValidationError, match="after start_date"):
        service.renew(lic.id, date(2024, 12, 1))
    renewed = service.renew(lic.id, date(2026, 6, 30), today=date(2026, 1, 10))
    assert renewed["status"] == "ACTIVE"
    assert renewed["expiry_date"] == date(2026, 6, 30)


def test_renew_requires_expiry_and_existing_license(add, world):
    lic = _license(add, world)
    r = client.put(f"{LICENSES}/{lic.id}/renew", json={})
    assert r.status_code == 400
    assert r.json()["message"] == "expiry_date is required"
    r = client.put(f"{LICENSES}/missing/renew", json={"expiry_date": "2030-01-01"})
    assert r.status_code == 404
    assert r.json()["message"] == "License not found"
