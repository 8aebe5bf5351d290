"""Authorization guard tests: 401 before anything else, 403 on denial, 500 on failure."""

from typing import Annotated

import pytest
from fastapi import Depends, FastAPI
from httpx import ASGITransport, AsyncClient

from app.api.v1.dependencies import (
    get_authorization_service,
    require_all_permissions,
    require_any_permission,
    require_permission,
)
from app.core.exception_handlers import register_exception_handlers
from app.domain.enums import SystemRoles
from app.domain.exceptions import ValidationError
from app.shared.context import ActorContext


async def test_missing_token_returns_401_without_running_handler(
    api_client: AsyncClient, seeded, role_service
) -> None:
    response = await api_client.post(
        "/api/v1/roles", json={"name": "Sneaky", "permissions": {}}
    )
    assert response.status_code == 401
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "AUTHENTICATION_ERROR"
    assert response.headers.get("WWW-Authenticate") == "Bearer"
    assert await role_service.get_role_by_name("Sneaky") is None


async def test_invalid_token_returns_401(api_client: AsyncClient, seeded) -> None:
    response = await api_client.get(
        "/api/v1/roles", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401


async def test_role_guard_denies_with_role_list(
    api_client: AsyncClient, seeded, auth_for, role_service
) -> None:
    response = await api_client.post(
        "/api/v1/roles",
        headers=auth_for(seeded.legal),
        json={"name": "Sneaky", "permissions": {}},
    )
    assert response.status_code == 403
    body = response.json()
    assert body["code"] == "PERMISSION_DENIED"
    assert body["error"] == (
        "This action requires one of the following roles: "
        f"{SystemRoles.PLATFORM_ADMIN.value}"
    )
    assert await role_service.get_role_by_name("Sneaky") is None


async def test_permission_guard_denies_with_pair(
    api_client: AsyncClient, seeded, auth_for
) -> None:
    response = await api_client.get("/api/v1/roles", headers=auth_for(seeded.outsider))
    assert response.status_code == 403
    assert response.json()["error"] == "You do not have permission to read roles (roles:read)"


async def test_permission_guard_allows(api_client: AsyncClient, seeded, auth_for) -> None:
    response = await api_client.get("/api/v1/roles", headers=auth_for(seeded.legal))
    assert response.status_code == 200


async def test_resolution_failure_returns_500_not_403(
    api_client: AsyncClient, seeded, auth_for, user_role_repo
) -> None:
    user_role_repo.fail_with = RuntimeError("assignment store unreachable")
    response = await api_client.get("/api/v1/roles", headers=auth_for(seeded.admin))
    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "PERMISSION_CHECK_FAILED"
    assert "unreachable" not in body["error"]


@pytest.mark.parametrize(
    ("method", "path", "payload"),
    [
        ("GET", "/api/v1/roles", None),
        ("POST", "/api/v1/roles", {"name": "Sneaky", "permissions": {}}),
    ],
)
async def test_malformed_stored_role_returns_500_not_400(
    api_client: AsyncClient, seeded, auth_for, user_role_repo, role_service, method, path, payload
) -> None:
    user_role_repo.fail_with = ValidationError("Invalid action 'fly' for resource 'documents'")
    response = await api_client.request(
        method, path, headers=auth_for(seeded.admin), json=payload
    )
    assert response.status_code == 500
    body = response.json()
    assert body["code"] == "PERMISSION_CHECK_FAILED"
    assert "fly" not in body["error"]
    assert await role_service.get_role_by_name("Sneaky") is None


async def test_revoked_role_takes_effect_on_next_request(
    api_client: AsyncClient, seeded, auth_for, role_service
) -> None:
    headers = auth_for(seeded.legal)
    assert (await api_client.get("/api/v1/roles", headers=headers)).status_code == 200
    await role_service.remove_role_from_user(
        seeded.legal.id, seeded.roles[SystemRoles.LEGAL_ADMIN.value].id
    )
    assert (await api_client.get("/api/v1/roles", headers=headers)).status_code == 403


async def test_attach_permissions_swallows_failures(
    api_client: AsyncClient, seeded, auth_for, user_role_repo
) -> None:
    user_role_repo.fail_with = RuntimeError("down")
    response = await api_client.get(
        "/api/v1/users/me/permissions", headers=auth_for(seeded.member)
    )
    assert response.status_code == 200
    assert response.json()["data"] == {}


async def test_attach_permissions_returns_merged_set(
    api_client: AsyncClient, seeded, auth_for
) -> None:
    response = await api_client.get(
        "/api/v1/users/me/permissions", headers=auth_for(seeded.member)
    )
    assert response.status_code == 200
    assert response.json()["data"]["documents"] == ["create", "read", "update"]


@pytest.fixture
async def pair_guard_client(authorization_service):
    """Small app exercising the any/all permission guards."""
    guarded = FastAPI()
    register_exception_handlers(guarded)
    any_guard = require_any_permission([("system", "configure"), ("documents", "approve")])
    all_guard = require_all_permissions([("documents", "read"), ("documents", "approve")])

    @guarded.get("/any")
    async def _any(actor: Annotated[ActorContext, Depends(any_guard)]):
        return {"user_id": actor.user_id}

    @guarded.get("/all")
    async def _all(actor: Annotated[ActorContext, Depends(all_guard)]):
        return {"user_id": actor.user_id}

    guarded.dependency_overrides[get_authorization_service] = lambda: authorization_service
    async with AsyncClient(transport=ASGITransport(app=guarded), base_url="http://test") as ac:
        yield ac


async def test_any_permission_guard(pair_guard_client, seeded, auth_for) -> None:
    allowed = await pair_guard_client.get("/any", headers=auth_for(seeded.legal))
    assert allowed.status_code == 200
    denied = await pair_guard_client.get("/any", headers=auth_for(seeded.member))
    assert denied.status_code == 403
    assert denied.json()["error"] == (
        "You need at least one of the following permissions: "
        "system:configure, documents:approve"
    )
    assert denied.json()["details"]["permissions"] == [
        "system:configure",
        "documents:approve",
    ]


async def test_all_permissions_guard_lists_missing(pair_guard_client, seeded, auth_for) -> None:
    assert (await pair_guard_client.get("/all", headers=auth_for(seeded.legal))).status_code == 200
    denied = await pair_guard_client.get("/all", headers=auth_for(seeded.member))
    assert denied.status_code == 403
    assert denied.json()["error"] == "Missing required permissions: documents:approve"
    assert denied.json()["details"] == {"permissions": ["documents:approve"]}


async def test_pair_guards_require_authentication(pair_guard_client) -> None:
    assert (await pair_guard_client.get("/any")).status_code == 401
    assert (await pair_guard_client.get("/all")).status_code == 401


async def test_unauthenticated_permission_guard_never_reaches_handler(authorization_service) -> None:
    guarded = FastAPI()
    register_exception_handlers(guarded)
    calls: list[str] = []

    @guarded.delete("/documents/{doc_id}")
    async def _delete(
        doc_id: str,
        _: Annotated[ActorContext, Depends(require_permission("documents", "delete"))],
    ):
        calls.append(doc_id)
        return {"deleted": doc_id}

    guarded.dependency_overrides[get_authorization_service] = lambda: authorization_service
    async with AsyncClient(transport=ASGITransport(app=guarded), base_url="http://test") as ac:
        response = await ac.delete("/documents/d-1")

    assert response.status_code == 401
    assert response.json()["success"] is False
    assert calls == []
