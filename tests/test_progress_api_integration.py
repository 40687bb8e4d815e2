"""Integration tests for the progress, submission and connected-item endpoints."""
import uuid

import pytest

from restops.config import settings

API = settings.API_V1_PREFIX


@pytest.mark.asyncio
async def test_login_and_me(client, employee):
    response = await client.post(
        f"{API}/auth/login",
        json={"tenant_id": str(employee.tenant_id), "employee_code": "E001", "password": "testpassword"},
    )
    assert response.status_code == 200
    token = response.json()["access_token"]

    me = await client.get(f"{API}/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["name"] == "Kim Minji"


@pytest.mark.asyncio
async def test_login_with_wrong_password(client, employee):
    response = await client.post(
        f"{API}/auth/login",
        json={"tenant_id": str(employee.tenant_id), "employee_code": "E001", "password": "wrong"},
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_requests_without_token_are_unauthorized(client, closing_checklist):
    response = await client.get(f"{API}/progress", params={"instance_id": str(closing_checklist.instance.id)})

    assert response.status_code == 401
    assert response.json()["detail"] == "login required"


@pytest.mark.asyncio
async def test_invalid_token_is_unauthorized(client, closing_checklist):
    response = await client.get(
        f"{API}/progress",
        params={"instance_id": str(closing_checklist.instance.id)},
        headers={"Authorization": "Bearer not-a-token"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_progress_requires_instance_id(client, auth_headers):
    response = await client.get(f"{API}/progress", headers=auth_headers)

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_get_progress_returns_tree_with_cache_headers(client, auth_headers, closing_checklist):
    response = await client.get(
        f"{API}/progress",
        params={"instance_id": str(closing_checklist.instance.id)},
        headers=auth_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["instance"]["template_name"] == "Closing Checklist"
    assert body["progress"]["total_main"] == 3
    assert [node["content"] for node in body["items_tree"]] == ["A", "B"]
    assert response.headers["etag"].startswith('W/"')
    assert response.headers["cache-control"] == "public, s-maxage=15, stale-while-revalidate=30, max-age=0"


@pytest.mark.asyncio
async def test_get_progress_not_modified(client, auth_headers, closing_checklist):
    params = {"instance_id": str(closing_checklist.instance.id)}
    first = await client.get(f"{API}/progress", params=params, headers=auth_headers)
    etag = first.headers["etag"]

    second = await client.get(f"{API}/progress", params=params, headers={**auth_headers, "If-None-Match": etag})
    assert second.status_code == 304
    assert second.headers["etag"] == etag

    await client.put(
        f"{API}/progress",
        json={
            "instance_id": str(closing_checklist.instance.id),
            "item_id": str(closing_checklist.a.id),
            "is_completed": True,
        },
        headers=auth_headers,
    )
    third = await client.get(f"{API}/progress", params=params, headers={**auth_headers, "If-None-Match": etag})
    assert third.status_code == 200
    assert third.headers["etag"] != etag


@pytest.mark.asyncio
async def test_other_tenant_gets_not_found(client, other_auth_headers, closing_checklist):
    response = await client.get(
        f"{API}/progress",
        params={"instance_id": str(closing_checklist.instance.id)},
        headers=other_auth_headers,
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_put_progress_validates_fields(client, auth_headers, closing_checklist):
    missing_flag = await client.put(
        f"{API}/progress",
        json={"instance_id": str(closing_checklist.instance.id), "item_id": str(closing_checklist.a.id)},
        headers=auth_headers,
    )
    missing_target = await client.put(
        f"{API}/progress",
        json={"instance_id": str(closing_checklist.instance.id), "is_completed": True},
        headers=auth_headers,
    )

    assert missing_flag.status_code == 400
    assert missing_target.status_code == 400


@pytest.mark.asyncio
async def test_put_progress_unknown_item(client, auth_headers, closing_checklist):
    response = await client.put(
        f"{API}/progress",
        json={
            "instance_id": str(closing_checklist.instance.id),
            "item_id": str(uuid.uuid4()),
            "is_completed": True,
        },
        headers=auth_headers,
    )

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_toggle_and_submit_closing_checklist(client, auth_headers, closing_checklist):
    instance_id = str(closing_checklist.instance.id)

    early = await client.post(f"{API}/submissions", json={"instance_id": instance_id}, headers=auth_headers)
    assert early.status_code == 400

    for item in (closing_checklist.a, closing_checklist.b1, closing_checklist.b2):
        response = await client.put(
            f"{API}/progress",
            json={"instance_id": instance_id, "item_id": str(item.id), "is_completed": True},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["success"] is True
        assert "progress_id" in response.json()

    view = await client.get(f"{API}/progress", params={"instance_id": instance_id}, headers=auth_headers)
    assert view.json()["progress"]["percentage"] == 100
    assert view.json()["items_tree"][1]["is_completed"] is True

    submitted = await client.post(
        f"{API}/submissions",
        json={"instance_id": instance_id, "notes": "Closed on time"},
        headers=auth_headers,
    )
    assert submitted.status_code == 200
    assert submitted.json()["success"] is True

    report = await client.get(f"{API}/submissions", params={"is_submitted": "true"}, headers=auth_headers)
    assert report.status_code == 200
    assert report.json()["total"] == 1
    assert report.json()["items"][0]["notes"] == "Closed on time"


@pytest.mark.asyncio
async def test_toggle_connection_endpoint(client, auth_headers, prep_checklist):
    response = await client.put(
        f"{API}/progress",
        json={
            "instance_id": str(prep_checklist.instance.id),
            "connection_id": str(prep_checklist.c1.id),
            "is_completed": True,
        },
        headers=auth_headers,
    )

    assert response.status_code == 200
    assert "connection_progress_id" in response.json()


@pytest.mark.asyncio
async def test_connected_item_endpoint(client, auth_headers, prep_checklist):
    found = await client.get(
        f"{API}/connected-items/inventory/{prep_checklist.stock.id}", headers=auth_headers
    )
    unsupported = await client.get(f"{API}/connected-items/tag/{uuid.uuid4()}", headers=auth_headers)
    missing = await client.get(f"{API}/connected-items/manual/{uuid.uuid4()}", headers=auth_headers)

    assert found.status_code == 200
    assert found.json()["name"] == "Olive oil"
    assert unsupported.status_code == 400
    assert missing.status_code == 404


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] in ("ok", "degraded")


@pytest.mark.asyncio
async def test_request_id_is_echoed_and_duration_reported(client):
    response = await client.get("/health", headers={"X-Request-ID": "req-42"})

    assert response.headers["X-Request-ID"] == "req-42"
    assert float(response.headers["X-Request-Duration-Ms"]) >= 0


@pytest.mark.asyncio
async def test_metrics_endpoint_exposes_request_counters(client):
    await client.get("/health")
    response = await client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
