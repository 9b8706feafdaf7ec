from datetime import datetime, time, timedelta

import pytest
from fastapi.testclient import TestClient

from core.deps import get_current_user
from tests.conftest import FUTURE_DATE


def create_via_api(client, payload):
    response = client.post("/api/shifts", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["shift"]


def test_create_shift_returns_camel_case_view(client, make_shift_payload):
    shift = create_via_api(client, make_shift_payload())

    assert shift["status"] == "Scheduled"
    assert shift["typeOfShift"] == ["Weekend", "Morning"]
    assert shift["startTime"] == "09:00"
    assert shift["finishTime"] == "17:00"
    assert shift["numOfShiftsPerDay"] == 1
    assert shift["date"] == FUTURE_DATE.isoformat()
    assert shift["clockInTime"] is None
    assert shift["user"] == {
        "id": "worker-1",
        "name": "Alice Worker",
        "email": "alice@example.com",
        "role": "worker",
    }
    assert shift["location"]["postCode"] == "M16 0RA"
    assert shift["location"]["coordinates"]["useRotaCloud"] is True
    assert shift["createdAt"].endswith("Z")


@pytest.mark.parametrize(
    "overrides",
    [
        {"startTime": "9am"},
        {"date": (FUTURE_DATE - timedelta(days=30)).isoformat()},
        {"typeOfShift": []},
        {"typeOfShift": ["Overnight"]},
        {"title": ""},
        {"numOfShiftsPerDay": 0},
    ],
)
def test_create_shift_rejects_invalid_payload(client, make_shift_payload, overrides):
    response = client.post("/api/shifts", json=make_shift_payload(**overrides))
    assert response.status_code == 422


def test_create_shift_requires_admin(client, make_shift_payload, as_worker):
    as_worker()
    response = client.post("/api/shifts", json=make_shift_payload())
    assert response.status_code == 403


def test_unknown_user_error_body(client, make_shift_payload):
    response = client.post("/api/shifts", json=make_shift_payload(user="nobody"))

    assert response.status_code == 404
    body = response.json()
    assert body["name"] == "NotFoundError"
    assert body["message"] == "User not found"
    assert body["statusCode"] == 404
    assert body["errorCode"] == "USER_NOT_FOUND"
    assert body["timestamp"].endswith("Z")


def test_get_missing_shift(client):
    response = client.get("/api/shifts/4242")
    assert response.status_code == 404
    assert response.json()["errorCode"] == "SHIFT_NOT_FOUND"


def test_update_and_get_shift(client, make_shift_payload):
    shift = create_via_api(client, make_shift_payload())

    response = client.put(f"/api/shifts/{shift['id']}", json={"title": "Gate Lead", "finishTime": "18:30"})
    assert response.status_code == 200
    assert response.json()["shift"]["title"] == "Gate Lead"

    fetched = client.get(f"/api/shifts/{shift['id']}").json()["shift"]
    assert fetched["title"] == "Gate Lead"
    assert fetched["finishTime"] == "18:30"
    assert fetched["startTime"] == "09:00"


def test_cancel_then_update_conflicts(client, make_shift_payload):
    shift = create_via_api(client, make_shift_payload())

    response = client.patch(f"/api/shifts/{shift['id']}/cancel")
    assert response.status_code == 200
    assert response.json() == {"message": "Shift cancelled successfully"}

    response = client.patch(f"/api/shifts/{shift['id']}/cancel")
    assert response.status_code == 409
    assert response.json()["errorCode"] == "SHIFT_ALREADY_CANCELLED"

    response = client.put(f"/api/shifts/{shift['id']}", json={"title": "Nope"})
    assert response.status_code == 409
    assert response.json()["errorCode"] == "INVALID_SHIFT_STATUS"


def test_delete_shift(client, make_shift_payload):
    shift = create_via_api(client, make_shift_payload())

    response = client.delete(f"/api/shifts/{shift['id']}")
    assert response.status_code == 200
    assert response.json() == {"message": "Shift deleted successfully"}
    assert client.get(f"/api/shifts/{shift['id']}").status_code == 404


def test_list_shifts_with_query_parameters(client, make_shift_payload):
    for offset in range(3):
        create_via_api(client, make_shift_payload(date=(FUTURE_DATE + timedelta(days=offset)).isoformat()))

    response = client.get("/api/shifts", params={"page": 1, "limit": 2, "sortBy": "date", "sortOrder": "desc"})
    assert response.status_code == 200
    body = response.json()
    assert len(body["shifts"]) == 2
    assert body["shifts"][0]["date"] == (FUTURE_DATE + timedelta(days=2)).isoformat()
    assert body["pagination"] == {
        "currentPage": 1,
        "totalPages": 2,
        "totalCount": 3,
        "hasNextPage": True,
        "hasPrevPage": False,
        "limit": 2,
    }


def test_list_shifts_defaults_to_ascending(client, make_shift_payload):
    for offset in (2, 0, 1):
        create_via_api(client, make_shift_payload(date=(FUTURE_DATE + timedelta(days=offset)).isoformat()))

    dates = [shift["date"] for shift in client.get("/api/shifts").json()["shifts"]]
    assert dates == sorted(dates)


def test_list_shifts_rejects_bad_paging(client):
    assert client.get("/api/shifts", params={"page": 0}).status_code == 422
    assert client.get("/api/shifts", params={"limit": 1001}).status_code == 422
    assert client.get("/api/shifts", params={"status": "Sleeping"}).status_code == 422


def test_list_shifts_filters_by_status(client, make_shift_payload):
    first = create_via_api(client, make_shift_payload())
    create_via_api(client, make_shift_payload())
    client.patch(f"/api/shifts/{first['id']}/cancel")

    body = client.get("/api/shifts", params={"status": "Cancelled"}).json()
    assert [shift["id"] for shift in body["shifts"]] == [first["id"]]


def test_all_shifts_listing_requires_admin(client, as_worker):
    as_worker()
    assert client.get("/api/shifts").status_code == 403


def test_my_shifts_only_returns_callers_shifts(client, make_shift_payload, as_worker):
    create_via_api(client, make_shift_payload(user="worker-1"))
    create_via_api(client, make_shift_payload(user="worker-2"))

    as_worker("worker-2")
    body = client.get("/api/shifts/my-shifts").json()

    assert body["pagination"]["totalCount"] == 1
    assert body["shifts"][0]["user"]["id"] == "worker-2"


def test_clock_in_and_out_over_http(client, make_shift_payload, as_worker, monkeypatch):
    shift = create_via_api(client, make_shift_payload())
    as_worker("worker-1")

    monkeypatch.setattr(
        "services.shift_service.current_datetime",
        lambda: datetime.combine(FUTURE_DATE, time(8, 55)),
    )
    response = client.patch(f"/api/shifts/{shift['id']}/clock-in")
    assert response.status_code == 200
    assert response.json() == {
        "message": "Successfully clocked in",
        "shift": {"id": shift["id"], "status": "In Progress", "clockInTime": "08:55"},
    }

    monkeypatch.setattr(
        "services.shift_service.current_datetime",
        lambda: datetime.combine(FUTURE_DATE, time(16, 0)),
    )
    response = client.patch(f"/api/shifts/{shift['id']}/clock-out")
    assert response.status_code == 200
    assert response.json()["shift"] == {"id": shift["id"], "status": "Completed", "clockOutTime": "16:00"}


def test_clock_in_too_early_over_http(client, make_shift_payload, as_worker):
    shift = create_via_api(client, make_shift_payload())
    as_worker("worker-1")

    response = client.patch(f"/api/shifts/{shift['id']}/clock-in")

    assert response.status_code == 400
    assert response.json()["errorCode"] == "CLOCK_IN_TOO_EARLY"


def test_clock_in_on_someone_elses_shift(client, make_shift_payload, as_worker):
    shift = create_via_api(client, make_shift_payload(user="worker-1"))
    as_worker("worker-2")

    response = client.patch(f"/api/shifts/{shift['id']}/clock-in")

    assert response.status_code == 403
    assert response.json()["errorCode"] == "UNAUTHORIZED_SHIFT_ACCESS"


def test_batch_endpoint(client, make_shift_payload):
    existing = create_via_api(client, make_shift_payload())

    response = client.post(
        "/api/shifts/batch",
        json={
            "shifts": [
                make_shift_payload(title="New"),
                {**make_shift_payload(title="Changed"), "id": existing["id"]},
                make_shift_payload(user="nobody"),
            ]
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert [shift["title"] for shift in body["created"]] == ["New"]
    assert [shift["title"] for shift in body["updated"]] == ["Changed"]
    assert body["errors"][0]["index"] == 2
    assert body["errors"][0]["error"] == {"message": "User not found", "errorCode": "USER_NOT_FOUND"}


def test_batch_endpoint_requires_items(client):
    assert client.post("/api/shifts/batch", json={"shifts": []}).status_code == 422


def test_locations_listing(client, make_shift_payload, make_location_payload):
    create_via_api(client, make_shift_payload())
    create_via_api(client, make_shift_payload(location=make_location_payload(name="MediaCityUK", postCode="M50 3UQ")))
    create_via_api(client, make_shift_payload())

    response = client.get("/api/locations/all")

    assert response.status_code == 200
    assert [location["name"] for location in response.json()] == ["MediaCityUK", "Old Trafford Stadium"]


def test_workers_listing(client):
    response = client.get("/api/workers")

    assert response.status_code == 200
    assert sorted(worker["id"] for worker in response.json()) == ["worker-1", "worker-2"]


def test_workers_listing_requires_admin(client, as_worker):
    as_worker()
    assert client.get("/api/workers").status_code == 403


# --- Authentication without the test override ---


@pytest.fixture
def unauthenticated_client(app, firestore, monkeypatch):
    app.dependency_overrides.pop(get_current_user)
    monkeypatch.setattr("core.deps.get_firestore_client", lambda: firestore)
    return TestClient(app)


def test_missing_bearer_token(unauthenticated_client):
    response = unauthenticated_client.get("/api/shifts")
    assert response.status_code == 401


def test_rejected_token(unauthenticated_client, monkeypatch):
    def reject(token):
        raise ValueError("bad token")

    monkeypatch.setattr("core.deps.verify_id_token", reject)

    response = unauthenticated_client.get("/api/shifts", headers={"Authorization": "Bearer nope"})
    assert response.status_code == 401


def test_valid_token_resolves_firestore_profile(unauthenticated_client, monkeypatch):
    monkeypatch.setattr("core.deps.verify_id_token", lambda token: {"uid": "admin-1"})

    response = unauthenticated_client.get("/api/shifts", headers={"Authorization": "Bearer good"})
    assert response.status_code == 200

    monkeypatch.setattr("core.deps.verify_id_token", lambda token: {"uid": "worker-1"})
    response = unauthenticated_client.get("/api/shifts", headers={"Authorization": "Bearer good"})
    assert response.status_code == 403


def test_token_for_user_without_profile(unauthenticated_client, monkeypatch):
    monkeypatch.setattr("core.deps.verify_id_token", lambda token: {"uid": "ghost"})

    response = unauthenticated_client.get("/api/shifts/my-shifts", headers={"Authorization": "Bearer good"})
    assert response.status_code == 404


def test_update_with_null_user_is_rejected(client, make_shift_payload):
    shift = create_via_api(client, make_shift_payload())

    response = client.put(f"/api/shifts/{shift['id']}", json={"user": None})

    assert response.status_code == 400
    assert response.json()["errorCode"] == "VALIDATION_ERROR"
