import logging
import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["SKIP_MIGRATIONS"] = "1"

from fastapi.testclient import TestClient  # noqa: E402

from tapify.crud.vendors import get_vendor  # noqa: E402
from tapify.main import app  # noqa: E402
from tests.factories import auth_headers, make_vendor, setup_db  # noqa: E402


client = TestClient(app)


def _vendor_id(SessionLocal, name="Maple Goods"):
    with SessionLocal() as db:
        return make_vendor(db, name=name).id


def test_update_commission_persists_split_and_breakdown():
    SessionLocal = setup_db("commission_update")
    vendor_id = _vendor_id(SessionLocal)

    resp = client.post(
        "/api/admin/update-vendor-commission",
        json={"vendorId": vendor_id, "retailerPercent": 20, "sourcerPercent": 10, "tapifyPercent": 10},
        headers=auth_headers(),
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["vendor"] == {
        "id": vendor_id,
        "name": "Maple Goods",
        "retailer_percent": 20,
        "sourcer_percent": 10,
        "tapify_percent": 10,
        "vendor_percent": 60,
    }
    assert body["breakdown"] == {"retailer": "20%", "sourcer": "10%", "tapify": "10%", "vendor": "60%"}

    with SessionLocal() as db:
        vendor = get_vendor(db, vendor_id=vendor_id)
        assert vendor.vendor_commission_percent == 60
        assert vendor.retailer_commission_percent == 20


def test_over_allocation_is_rejected_and_nothing_changes():
    SessionLocal = setup_db("commission_over")
    vendor_id = _vendor_id(SessionLocal)
    client.post(
        "/api/admin/update-vendor-commission",
        json={"vendorId": vendor_id, "retailerPercent": 30, "sourcerPercent": 10, "tapifyPercent": 10},
        headers=auth_headers(),
    )

    resp = client.post(
        "/api/admin/update-vendor-commission",
        json={"vendorId": vendor_id, "retailerPercent": 50, "sourcerPercent": 40, "tapifyPercent": 20},
        headers=auth_headers(),
    )
    assert resp.status_code == 400
    assert resp.json() == {
        "error": "Total percentages (110%) exceed 100%",
        "code": "over_allocation",
        "breakdown": {"retailer": 50, "sourcer": 40, "tapify": 20, "total": 110},
    }

    with SessionLocal() as db:
        vendor = get_vendor(db, vendor_id=vendor_id)
        assert (
            vendor.retailer_commission_percent,
            vendor.sourcer_commission_percent,
            vendor.tapify_commission_percent,
            vendor.vendor_commission_percent,
        ) == (30, 10, 10, 50)


def test_out_of_range_field_is_named():
    SessionLocal = setup_db("commission_range")
    vendor_id = _vendor_id(SessionLocal)

    resp = client.post(
        "/api/admin/update-vendor-commission",
        json={"vendorId": vendor_id, "retailerPercent": 10, "sourcerPercent": 120, "tapifyPercent": 10},
        headers=auth_headers(),
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["code"] == "invalid_range"
    assert body["field"] == "sourcer"
    assert body["error"] == "Sourcer percent must be between 0 and 100"
    assert resp.headers["X-Error-Code"] == "invalid_range"


def test_fractional_percent_is_rejected():
    SessionLocal = setup_db("commission_fraction")
    vendor_id = _vendor_id(SessionLocal)

    resp = client.post(
        "/api/admin/update-vendor-commission",
        json={"vendorId": vendor_id, "retailerPercent": 20.5, "sourcerPercent": 10, "tapifyPercent": 10},
        headers=auth_headers(),
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "Retailer percent must be a whole number between 0 and 100"


def test_non_finite_percent_is_a_bad_request():
    SessionLocal = setup_db("commission_nan")
    vendor_id = _vendor_id(SessionLocal)

    for literal in ("NaN", "Infinity"):
        resp = client.post(
            "/api/admin/update-vendor-commission",
            content=f'{{"vendorId": {vendor_id}, "retailerPercent": {literal}}}',
            headers={**auth_headers(), "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == "invalid_range"
        assert body["field"] == "retailer"
        assert isinstance(body["value"], str)

    with SessionLocal() as db:
        vendor = get_vendor(db, vendor_id=vendor_id)
        assert vendor.retailer_commission_percent is None


def test_unknown_vendor_and_missing_vendor_id():
    setup_db("commission_missing")
    resp = client.post(
        "/api/admin/update-vendor-commission",
        json={"vendorId": 404, "retailerPercent": 20},
        headers=auth_headers(),
    )
    assert resp.status_code == 404
    assert resp.json()["code"] == "vendor_not_found"

    resp = client.post(
        "/api/admin/update-vendor-commission",
        json={"retailerPercent": 20},
        headers=auth_headers(),
    )
    assert resp.status_code == 400


def test_update_requires_admin():
    SessionLocal = setup_db("commission_auth")
    vendor_id = _vendor_id(SessionLocal)
    resp = client.post(
        "/api/admin/update-vendor-commission",
        json={"vendorId": vendor_id, "retailerPercent": 20},
        headers=auth_headers(is_admin=False),
    )
    assert resp.status_code == 403
    with SessionLocal() as db:
        assert get_vendor(db, vendor_id=vendor_id).retailer_commission_percent is None


def test_read_commission_falls_back_to_defaults():
    SessionLocal = setup_db("commission_read")
    vendor_id = _vendor_id(SessionLocal)

    resp = client.get(f"/api/admin/vendors/{vendor_id}/commission", headers=auth_headers())
    assert resp.status_code == 200
    body = resp.json()
    assert body["retailer_percent"] == 20
    assert body["vendor_percent"] == 60
    assert body["total"] == 100
    assert body["is_valid"] is True

    assert client.get("/api/admin/vendors/999/commission", headers=auth_headers()).status_code == 404


def test_commission_changes_are_logged(caplog):
    SessionLocal = setup_db("commission_logging")
    vendor_id = _vendor_id(SessionLocal)
    logger = logging.getLogger("tapify.commission")
    logger.addHandler(caplog.handler)
    try:
        client.post(
            "/api/admin/update-vendor-commission",
            json={"vendorId": vendor_id, "retailerPercent": 25, "sourcerPercent": 5, "tapifyPercent": 10},
            headers=auth_headers(user_id="admin-42"),
        )
        client.post(
            "/api/admin/update-vendor-commission",
            json={"vendorId": vendor_id, "retailerPercent": 90, "sourcerPercent": 10, "tapifyPercent": 10},
            headers=auth_headers(user_id="admin-42"),
        )
    finally:
        logger.removeHandler(caplog.handler)

    updated = next(rec for rec in caplog.records if rec.getMessage() == "commission.updated")
    assert updated.actor_id == "admin-42"
    assert updated.vendor_percent == 60
    rejected = next(rec for rec in caplog.records if rec.getMessage() == "commission.rejected")
    assert rejected.error_code == "over_allocation"
