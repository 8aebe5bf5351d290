"""Tests for AuthorizationService (permission resolution over in-memory stores)."""

from dataclasses import replace
from datetime import timedelta

import pytest

from app.domain.enums import Action, Resource, SystemRoles
from app.domain.exceptions import ForbiddenError
from app.shared.utils.datetime import utc_now


async def test_user_without_roles_has_empty_permissions(seeded, authorization_service) -> None:
    """No roles is a normal empty result, not an error."""
    perms = await authorization_service.get_user_permissions(seeded.outsider.id)
    assert perms.to_dict() == {}
    assert await authorization_service.has_permission(seeded.outsider.id, "documents", "read") is False
    assert await authorization_service.get_user_roles(seeded.outsider.id) == []


async def test_permissions_are_union_of_effective_roles(
    seeded, role_service, authorization_service
) -> None:
    reviewer = await role_service.create_role("Reviewer", {"documents": ["approve"]})
    await role_service.assign_role_to_user(seeded.member.id, reviewer.id)

    perms = await authorization_service.get_user_permissions(seeded.member.id)
    assert perms.allows(Resource.DOCUMENTS, Action.APPROVE)
    assert perms.allows(Resource.DOCUMENTS, Action.CREATE)
    assert perms.allows(Resource.TEMPLATES, Action.USE)
    assert not perms.allows(Resource.ROLES, Action.DELETE)


async def test_has_permission_matches_merged_structure(seeded, authorization_service) -> None:
    """has_permission(u, r, a) is exactly 'a in merged[r]'."""
    merged = await authorization_service.get_user_permissions(seeded.legal.id)
    for resource in Resource:
        for action in Action:
            expected = action in merged.actions_for(resource)
            assert (
                await authorization_service.has_permission(seeded.legal.id, resource, action)
                is expected
            )


async def test_unknown_resource_or_action_is_denied(seeded, authorization_service) -> None:
    assert await authorization_service.has_permission(seeded.admin.id, "invoices", "read") is False
    assert await authorization_service.has_permission(seeded.admin.id, "documents", "fly") is False


async def test_inactive_and_expired_assignments_grant_nothing(
    seeded, rbac_store, role_service, authorization_service
) -> None:
    await role_service.remove_role_from_user(
        seeded.member.id, seeded.roles[SystemRoles.DEPARTMENT_USER.value].id
    )
    assert await authorization_service.has_permission(seeded.member.id, "documents", "read") is False

    legal_assignment = next(
        a for a in rbac_store.assignments.values() if a.user_id == seeded.legal.id
    )
    rbac_store.put_assignment(
        replace(legal_assignment, expires_at=utc_now() - timedelta(seconds=1))
    )
    assert (await authorization_service.get_user_permissions(seeded.legal.id)).to_dict() == {}
    assert await authorization_service.has_role(seeded.legal.id, [SystemRoles.LEGAL_ADMIN]) is False


async def test_every_check_reads_the_store(seeded, user_role_repo, authorization_service) -> None:
    """No caching: a revoke is visible on the very next check."""
    before = user_role_repo.list_by_user_calls
    await authorization_service.has_permission(seeded.admin.id, "roles", "read")
    await authorization_service.has_permission(seeded.admin.id, "roles", "read")
    assert user_role_repo.list_by_user_calls == before + 2


async def test_has_role_accepts_enum_and_string_names(seeded, authorization_service) -> None:
    assert await authorization_service.has_role(seeded.admin.id, [SystemRoles.PLATFORM_ADMIN])
    assert await authorization_service.has_role(seeded.legal.id, ["Platform Administrator", "Legal Admin"])
    assert not await authorization_service.has_role(seeded.member.id, ["Legal Admin"])
    assert not await authorization_service.has_role(seeded.admin.id, [])


async def test_require_permission_names_missing_pair(seeded, authorization_service) -> None:
    with pytest.raises(ForbiddenError) as exc_info:
        await authorization_service.require_permission(seeded.member.id, Resource.ROLES, Action.DELETE)
    assert "roles:delete" in exc_info.value.message
    assert exc_info.value.details == {"resource": "roles", "action": "delete"}
    await authorization_service.require_permission(seeded.member.id, "documents", "read")


async def test_require_role_names_allowed_roles(seeded, authorization_service) -> None:
    with pytest.raises(ForbiddenError) as exc_info:
        await authorization_service.require_role(
            seeded.member.id, [SystemRoles.PLATFORM_ADMIN, SystemRoles.LEGAL_ADMIN]
        )
    assert exc_info.value.message == (
        "This action requires one of the following roles: Legal Admin, Platform Administrator"
    )
    await authorization_service.require_role(seeded.admin.id, [SystemRoles.PLATFORM_ADMIN])
