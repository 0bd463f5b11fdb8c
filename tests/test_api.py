# tests/test_api.py

from datetime import datetime, timedelta, timezone

import pytest

from streeteats.backend.app.models.queue_entry import QueueEntry

TACOS = [
    {"dishId": 1, "quantity": 2, "name": "Carne Asada Taco", "price": 3.50},
    {"dishId": 2, "quantity": 1, "name": "Fish Taco", "price": 5.00},
]


def _join(client, vendor_id, name="Customer", total=12.00):
    return client.post(
        "/api/queue/join",
        json={
            "vendorId": vendor_id,
            "items": TACOS,
            "totalAmount": total,
            "customerName": name,
        },
    )


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_queue_info_opens_queue_lazily(client, vendor):
    resp = client.get(f"/api/queue/{vendor.id}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["vendorId"] == vendor.id
    assert data["currentServingNumber"] == 0
    assert data["totalInQueue"] == 0
    assert data["estimatedWait"] == 0
    assert isinstance(data["queueId"], int)

    again = client.get(f"/api/queue/{vendor.id}").json()
    assert again["queueId"] == data["queueId"]


def test_queue_info_unknown_vendor(client):
    resp = client.get("/api/queue/999")
    assert resp.status_code == 404
    assert resp.json()["error"] == "not_found"


def test_join_returns_ticket(client, vendor):
    resp = _join(client, vendor.id)
    assert resp.status_code == 201
    data = resp.json()
    assert data["success"] is True
    assert data["queueNumber"] == 1
    assert data["position"] == 1
    assert data["estimatedWait"] == 5
    assert data["message"] == "You're #1 in line at Taco Express"


def test_full_scenario_over_http(client, vendor, db_session):
    a = _join(client, vendor.id, "A").json()
    b = _join(client, vendor.id, "B").json()
    assert (b["queueNumber"], b["position"], b["estimatedWait"]) == (2, 2, 10)

    entry_a = (
        db_session.query(QueueEntry)
        .filter(QueueEntry.queue_number == a["queueNumber"])
        .one()
    )
    done = client.post(f"/api/vendor/queue/complete/{entry_a.id}")
    assert done.status_code == 200
    assert done.json()["success"] is True

    status = client.get(f"/api/queue/status/{b['queueNumber']}/{vendor.id}")
    assert status.status_code == 200
    data = status.json()
    assert data["position"] == 1
    assert data["estimatedWait"] == 5
    assert data["status"] == "waiting"
    assert data["totalAmount"] == 12.00
    assert data["items"][0] == {
        "dishId": 1,
        "quantity": 2,
        "name": "Carne Asada Taco",
        "price": 3.50,
    }


def test_status_never_issued_number_is_404(client, vendor):
    _join(client, vendor.id)
    resp = client.get(f"/api/queue/status/7/{vendor.id}")
    assert resp.status_code == 404
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "not_found"
    assert "position" not in body


def test_join_missing_total_is_400(client, vendor):
    resp = client.post(
        "/api/queue/join",
        json={"vendorId": vendor.id, "items": TACOS},
    )
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert body["error"] == "validation_error"
    assert "totalAmount" in body["message"]


def test_join_empty_items_is_400(client, vendor):
    resp = client.post(
        "/api/queue/join",
        json={"vendorId": vendor.id, "items": [], "totalAmount": 0},
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation_error"


def test_join_accepts_snake_case_body(client, vendor):
    resp = client.post(
        "/api/queue/join",
        json={"vendor_id": vendor.id, "items": TACOS, "total_amount": 12.00},
    )
    assert resp.status_code == 201
    assert resp.json()["queueNumber"] == 1


def test_join_offline_vendor_is_409(client, offline_vendor):
    resp = _join(client, offline_vendor.id)
    assert resp.status_code == 409
    assert resp.json()["error"] == "vendor_unavailable"


def test_complete_twice_reports_already_completed(client, vendor, db_session):
    _join(client, vendor.id)
    entry = db_session.query(QueueEntry).one()

    first = client.post(f"/api/vendor/queue/complete/{entry.id}").json()
    second = client.post(f"/api/vendor/queue/complete/{entry.id}")

    assert first["alreadyCompleted"] is False
    assert second.status_code == 200
    assert second.json()["alreadyCompleted"] is True


def test_complete_unknown_entry_is_404(client):
    resp = client.post("/api/vendor/queue/complete/4242")
    assert resp.status_code == 404


def test_vendor_queue_view(client, vendor, db_session):
    for name in ["A", "B", "C"]:
        _join(client, vendor.id, name)
    first = db_session.query(QueueEntry).filter(QueueEntry.queue_number == 1).one()
    client.post(f"/api/vendor/queue/complete/{first.id}")

    resp = client.get(f"/api/vendor/{vendor.id}/queue")
    assert resp.status_code == 200
    data = resp.json()
    assert data["queue"]["totalInQueue"] == 2
    assert [e["queueNumber"] for e in data["entries"]] == [2, 3]
    assert [e["customerName"] for e in data["entries"]] == ["B", "C"]
    assert [e["position"] for e in data["entries"]] == [1, 2]


def test_go_live_then_offline(client, offline_vendor):
    until = (datetime.now(timezone.utc) + timedelta(hours=2)).isoformat()
    live = client.post(
        f"/api/vendor/{offline_vendor.id}/live",
        json={"openUntil": until, "lat": 37.77, "lng": -122.41},
    )
    assert live.status_code == 200
    assert live.json()["isOnline"] is True
    assert live.json()["isStationary"] is True
    assert live.json()["acceptingOrders"] is True

    assert _join(client, offline_vendor.id).status_code == 201

    off = client.post(f"/api/vendor/{offline_vendor.id}/offline")
    assert off.json()["acceptingOrders"] is False
    assert _join(client, offline_vendor.id).status_code == 409

    # the ticket taken while live is still in line
    status = client.get(f"/api/queue/status/1/{offline_vendor.id}")
    assert status.status_code == 200
    assert status.json()["position"] == 1


def test_go_live_in_the_past_is_400(client, offline_vendor):
    until = (datetime.now(timezone.utc) - timedelta(minutes=1)).isoformat()
    resp = client.post(f"/api/vendor/{offline_vendor.id}/live", json={"openUntil": until})
    assert resp.status_code == 400


def test_presence_for_closed_cart(client, closed_cart):
    data = client.get(f"/api/vendor/{closed_cart.id}/presence").json()
    assert data["isOnline"] is True
    assert data["hasFixedAddress"] is False
    assert data["acceptingOrders"] is False


@pytest.mark.parametrize("bad", ["NaN", "Infinity", "-Infinity"])
def test_join_non_finite_total_is_400(client, vendor, bad):
    body = (
        '{"vendorId": %d, "items": [{"dishId": 1, "quantity": 1, '
        '"name": "Fish Taco", "price": 3.5}], "totalAmount": %s}' % (vendor.id, bad)
    )
    resp = client.post(
        "/api/queue/join", content=body, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "validation_error"
    assert "totalAmount" in resp.json()["message"]


@pytest.mark.parametrize("bad", ["NaN", "Infinity"])
def test_join_non_finite_price_is_400(client, vendor, db_session, bad):
    body = (
        '{"vendorId": %d, "items": [{"dishId": 1, "quantity": 1, '
        '"name": "Fish Taco", "price": %s}], "totalAmount": 3.5}' % (vendor.id, bad)
    )
    resp = client.post(
        "/api/queue/join", content=body, headers={"Content-Type": "application/json"}
    )
    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["error"] == "validation_error"
    assert db_session.query(QueueEntry).count() == 0
