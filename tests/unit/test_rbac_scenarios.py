"""End-to-end role / assignment / permission flows through the services."""

from app.domain.value_objects import PermissionSet


async def test_counsel_role_grants_exactly_its_actions(
    seeded, role_service, authorization_service
) -> None:
    counsel = await role_service.create_role("Counsel", {"documents": ["read", "update"]})
    await role_service.assign_role_to_user(seeded.outsider.id, counsel.id)

    assert await authorization_service.has_permission(seeded.outsider.id, "documents", "update")
    assert not await authorization_service.has_permission(
        seeded.outsider.id, "documents", "delete"
    )


async def test_two_roles_merge_per_resource(seeded, role_service, authorization_service) -> None:
    reader = await role_service.create_role("Reader", {"documents": ["read"]})
    remover = await role_service.create_role("Remover", {"documents": ["delete"]})
    await role_service.assign_role_to_user(seeded.outsider.id, reader.id)
    await role_service.assign_role_to_user(seeded.outsider.id, remover.id)

    merged = await authorization_service.get_user_permissions(seeded.outsider.id)
    assert set(merged.to_dict()["documents"]) == {"read", "delete"}


async def test_merge_is_monotonic(seeded, role_service, authorization_service) -> None:
    before = await authorization_service.get_user_permissions(seeded.member.id)
    extra = await role_service.create_role("Exporter", {"analytics": ["export"]})
    await role_service.assign_role_to_user(seeded.member.id, extra.id)
    after = await authorization_service.get_user_permissions(seeded.member.id)

    assert PermissionSet.merge([before, after]) == after
    assert after.allows("analytics", "export")


async def test_soft_deleted_assignment_visibility(seeded, role_service, user_role_repo) -> None:
    role = await role_service.create_role("Temp", {"documents": ["read"]})
    assignment = await role_service.assign_role_to_user(seeded.outsider.id, role.id)
    assert await user_role_repo.soft_delete(assignment.id)

    effective = await user_role_repo.list_by_user(seeded.outsider.id, include_inactive=False)
    assert all(a.assignment.id != assignment.id for a in effective)
    everything = await user_role_repo.list_by_user(seeded.outsider.id, include_inactive=True)
    [kept] = [a for a in everything if a.assignment.id == assignment.id]
    assert kept.assignment.is_active is False
