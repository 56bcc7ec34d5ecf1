import json

import pytest

from tests.factories import future, task_id_str, user_id_str


def create_payload(task_id: str | None = None, user_id: str | None = None, **overrides) -> dict:
    payload = {
        "times": [future(60).isoformat(), future(75).isoformat()],
        "user_id": user_id or user_id_str(),
        "devices": [{"device_id": "phone", "delivery_token": "fcm-token"}],
        "task_id": task_id or task_id_str(),
        "task_type": "short",
    }
    payload.update(overrides)
    return payload


@pytest.mark.integration
@pytest.mark.asyncio
async def test_reminds_lifecycle(app_client):
    payload = create_payload()

    created = await app_client.post("/api/v1/reminds", json=payload)
    assert created.status_code == 201
    body = created.json()["data"]
    assert body["count"] == 2
    assert [item["slide_window_width"] for item in body["reminds"]] == [270, 120]
    remind_id = body["reminds"][0]["id"]

    again = await app_client.post("/api/v1/reminds", json=create_payload(task_id=payload["task_id"]))
    assert again.status_code == 201
    assert [item["id"] for item in again.json()["data"]["reminds"]] == [item["id"] for item in body["reminds"]]

    listed = await app_client.get(
        "/api/v1/reminds",
        params={"start": payload["times"][0], "end": payload["times"][1]},
    )
    assert listed.status_code == 200
    assert listed.json()["data"]["count"] == 2

    throttled = await app_client.post(f"/api/v1/reminds/{remind_id}/throttled", json={"throttled": True})
    assert throttled.status_code == 200
    assert throttled.json()["data"]["throttled"] is True

    deleted = await app_client.delete(f"/api/v1/reminds/{remind_id}")
    assert deleted.status_code == 200
    assert deleted.json()["data"]["ok"] is True

    deleted_again = await app_client.delete(f"/api/v1/reminds/{remind_id}")
    assert deleted_again.status_code == 200


@pytest.mark.integration
@pytest.mark.asyncio
async def test_cancel_emits_stream_event(app_client, redis_client):
    payload = create_payload()
    created = await app_client.post("/api/v1/reminds", json=payload)
    ids = [item["id"] for item in created.json()["data"]["reminds"]]

    cancelled = await app_client.post(
        "/api/v1/reminds/cancel",
        json={"task_id": payload["task_id"], "user_id": payload["user_id"]},
    )
    assert cancelled.status_code == 200

    entries = await redis_client.xrange("remind.cancelled")
    assert len(entries) == 1
    event = json.loads(entries[0][1]["payload"])
    assert event["deleted_count"] == 2
    assert sorted(event["deleted_ids"]) == sorted(ids)

    empty = await app_client.post(
        "/api/v1/reminds/cancel",
        json={"task_id": payload["task_id"], "user_id": payload["user_id"]},
    )
    assert empty.status_code == 200
    assert len(await redis_client.xrange("remind.cancelled")) == 1


@pytest.mark.integration
@pytest.mark.asyncio
async def test_validation_errors_name_the_field(app_client):
    bad_device = await app_client.post(
        "/api/v1/reminds",
        json=create_payload(devices=[{"device_id": "", "delivery_token": "x"}]),
    )
    assert bad_device.status_code == 422
    error = bad_device.json()["error"]
    assert error["code"] == "validation_error"
    assert error["details"]["field"] == "devices[0]"

    bad_range = await app_client.get(
        "/api/v1/reminds",
        params={"start": future(120).isoformat(), "end": future(60).isoformat()},
    )
    assert bad_range.status_code == 422
    assert bad_range.json()["error"]["details"]["field"] == "time_range"

    bad_id = await app_client.post("/api/v1/reminds/not-a-uuid/throttled", json={"throttled": True})
    assert bad_id.status_code == 422
    assert bad_id.json()["error"]["details"]["field"] == "id"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_throttle_unknown_remind_is_not_found(app_client):
    response = await app_client.post(
        "/api/v1/reminds/0b6f0c6e-8f1e-4c53-9a55-2d4a1d1f6c11/throttled",
        json={"throttled": True},
    )
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_healthz(app_client):
    response = await app_client.get("/healthz")
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "ok"


@pytest.mark.integration
@pytest.mark.asyncio
async def test_malformed_body_and_unknown_route_use_envelope(app_client):
    missing = await app_client.post("/api/v1/reminds", json={"user_id": user_id_str()})
    assert missing.status_code == 422
    error = missing.json()["error"]
    assert error["code"] == "validation_error"
    assert error["details"]["field"].startswith("body.")
    assert all({"loc", "msg", "type"} == set(item) for item in error["details"]["errors"])

    unknown = await app_client.get("/api/v1/nothing-here")
    assert unknown.status_code == 404
    assert unknown.json()["error"]["code"] == "not_found"
