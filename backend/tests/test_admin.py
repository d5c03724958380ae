# tests/test_admin.py - Administrative views
import pytest
from httpx import AsyncClient

from tests.conftest import get_auth_headers


@pytest.mark.asyncio
async def test_performance_summary(client: AsyncClient, admin_user, manager, employee):
    manager_headers = get_auth_headers(manager)
    ids = []
    for title in ("A", "B"):
        resp = await client.post(
            "/api/v1/tasks",
            json={"title": title, "assigned_to_user_id": employee.id},
            headers=manager_headers,
        )
        ids.append(resp.json()["id"])
    await client.patch(
        f"/api/v1/tasks/{ids[0]}/status",
        json={"status": "COMPLETED"},
        headers=manager_headers,
    )

    resp = await client.get("/api/v1/admin/performance", headers=get_auth_headers(admin_user))
    assert resp.status_code == 200
    data = resp.json()
    assert data["total_tasks"] == 2
    assert data["completed_tasks"] == 1
    assert data["pending_tasks"] == 1
    assert data["completion_rate_percent"] == 50.0
    assert data["user_stats"][0]["user_id"] == employee.id


@pytest.mark.asyncio
async def test_admin_lists(client: AsyncClient, admin_user, manager, employee):
    headers = get_auth_headers(admin_user)
    await client.post(
        "/api/v1/tasks",
        json={"title": "A", "assigned_to_user_id": employee.id},
        headers=get_auth_headers(manager),
    )

    resp = await client.get("/api/v1/admin/tasks", headers=headers)
    assert resp.status_code == 200
    assert len(resp.json()) == 1

    resp = await client.get("/api/v1/admin/users", headers=headers)
    assert len(resp.json()) == 3

    resp = await client.get("/api/v1/admin/teams", headers=headers)
    assert resp.json() == []


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/tasks", "/users", "/performance", "/teams"])
async def test_admin_views_forbidden_for_manager(client: AsyncClient, manager, path):
    resp = await client.get(f"/api/v1/admin{path}", headers=get_auth_headers(manager))
    assert resp.status_code == 403
