"""Pytest configuration and fixtures for the RBAC core.

HTTP tests use app.main:app with the service dependencies overridden by
in-memory stores (no database). Repository tests use a real Postgres session,
are marked requires_db and skip when DATABASE_URL is not configured.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from app.api.v1.dependencies import (
    get_authorization_service,
    get_role_service,
    get_role_service_for_read,
)
from app.application.dtos.role import RoleChanges, RoleResult
from app.application.dtos.user import UserResult
from app.application.dtos.user_role import (
    AssignmentWithRole,
    AssignmentWithUserAndRole,
    UserRoleResult,
)
from app.application.services.authorization_service import AuthorizationService
from app.application.services.role_service import RoleService
from app.core.config import get_settings
from app.core.limiter import limiter
from app.domain.enums import SystemRoles
from app.domain.exceptions import (
    DuplicateAssignmentError,
    DuplicateNameError,
    NotFoundError,
    RoleInUseError,
    SqlNotConfiguredError,
)
from app.domain.value_objects import PermissionSet
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.security.jwt import create_access_token
from app.shared.utils.datetime import utc_now

get_settings.cache_clear()

from app.main import app  # noqa: E402


# ---- In-memory stores (same contracts as the SQL repositories) ----


class InMemoryRbacStore:
    """Users, roles and assignments shared by the fake repositories."""

    def __init__(self) -> None:
        self.users: dict[str, UserResult] = {}
        self.roles: dict[str, RoleResult] = {}
        self.assignments: dict[str, UserRoleResult] = {}

    def add_user(self, email: str, name: str | None = None) -> UserResult:
        user = UserResult(id=str(uuid.uuid4()), email=email, name=name)
        self.users[user.id] = user
        return user

    def put_assignment(self, assignment: UserRoleResult) -> UserRoleResult:
        self.assignments[assignment.id] = assignment
        return assignment


class FakeRoleRepository:
    def __init__(self, store: InMemoryRbacStore) -> None:
        self.store = store

    async def create_role(
        self,
        name: str,
        description: str | None,
        permissions: PermissionSet,
        *,
        is_system_role: bool = False,
    ) -> RoleResult:
        if any(r.name == name for r in self.store.roles.values()):
            raise DuplicateNameError(name)
        now = utc_now()
        role = RoleResult(
            id=str(uuid.uuid4()),
            name=name,
            description=description,
            permissions=PermissionSet.from_raw(permissions),
            is_system_role=is_system_role,
            created_at=now,
            updated_at=now,
        )
        self.store.roles[role.id] = role
        return role

    async def get_by_id(self, role_id: str) -> RoleResult | None:
        return self.store.roles.get(role_id)

    async def get_by_name(self, name: str) -> RoleResult | None:
        return next((r for r in self.store.roles.values() if r.name == name), None)

    async def list_all(self) -> list[RoleResult]:
        return sorted(self.store.roles.values(), key=lambda r: r.name)

    async def update_role(self, role_id: str, changes: RoleChanges) -> RoleResult | None:
        role = self.store.roles.get(role_id)
        if role is None:
            return None
        fields: dict = {"updated_at": utc_now()}
        if changes.name is not None:
            fields["name"] = changes.name
        if changes.description is not None:
            fields["description"] = changes.description
        if changes.permissions is not None:
            fields["permissions"] = changes.permissions
        updated = replace(role, **fields)
        self.store.roles[role_id] = updated
        return updated

    async def delete_role(self, role_id: str) -> bool:
        if role_id not in self.store.roles:
            return False
        now = utc_now()
        linked = [a for a in self.store.assignments.values() if a.role_id == role_id]
        active = sum(1 for a in linked if a.is_effective(now))
        if active:
            raise RoleInUseError(role_id, active)
        for a in linked:
            del self.store.assignments[a.id]
        del self.store.roles[role_id]
        return True


class FakeUserRoleRepository:
    """Assignment store fake.

    stale_reads: number of find_by_user_and_role calls that miss an existing row
        (simulates a concurrent insert between check and insert).
    fail_with: exception raised by list_by_user (simulates the store being down).
    """

    def __init__(self, store: InMemoryRbacStore) -> None:
        self.store = store
        self.stale_reads = 0
        self.fail_with: Exception | None = None
        self.list_by_user_calls = 0

    def _find(self, user_id: str, role_id: str) -> UserRoleResult | None:
        return next(
            (
                a
                for a in self.store.assignments.values()
                if a.user_id == user_id and a.role_id == role_id
            ),
            None,
        )

    def _joined(self, a: UserRoleResult) -> AssignmentWithUserAndRole:
        return AssignmentWithUserAndRole(
            assignment=a,
            role=self.store.roles[a.role_id],
            user=self.store.users[a.user_id],
            assigner=self.store.users.get(a.assigned_by) if a.assigned_by else None,
        )

    async def create(
        self,
        user_id: str,
        role_id: str,
        assigned_by: str | None = None,
        expires_at: datetime | None = None,
    ) -> UserRoleResult:
        if self._find(user_id, role_id) is not None:
            raise DuplicateAssignmentError(user_id, role_id)
        if user_id not in self.store.users:
            raise NotFoundError("user", user_id)
        if role_id not in self.store.roles:
            raise NotFoundError("role", role_id)
        now = utc_now()
        return self.store.put_assignment(
            UserRoleResult(
                id=str(uuid.uuid4()),
                user_id=user_id,
                role_id=role_id,
                assigned_by=assigned_by,
                assigned_at=now,
                expires_at=expires_at,
                is_active=True,
                created_at=now,
                updated_at=now,
            )
        )

    async def get_by_id(self, assignment_id: str) -> AssignmentWithUserAndRole | None:
        a = self.store.assignments.get(assignment_id)
        return self._joined(a) if a else None

    async def find_by_user_and_role(self, user_id: str, role_id: str) -> UserRoleResult | None:
        if self.stale_reads > 0:
            self.stale_reads -= 1
            return None
        return self._find(user_id, role_id)

    async def list_by_user(
        self, user_id: str, *, include_inactive: bool = False
    ) -> list[AssignmentWithRole]:
        self.list_by_user_calls += 1
        if self.fail_with is not None:
            raise self.fail_with
        now = utc_now()
        rows = [
            AssignmentWithRole(assignment=a, role=self.store.roles[a.role_id])
            for a in self.store.assignments.values()
            if a.user_id == user_id and (include_inactive or a.is_effective(now))
        ]
        return sorted(rows, key=lambda r: r.role.name)

    async def list_by_role(
        self, role_id: str, *, include_inactive: bool = False
    ) -> list[AssignmentWithUserAndRole]:
        now = utc_now()
        return [
            self._joined(a)
            for a in self.store.assignments.values()
            if a.role_id == role_id and (include_inactive or a.is_effective(now))
        ]

    async def list_all(self) -> list[AssignmentWithUserAndRole]:
        rows = sorted(
            self.store.assignments.values(), key=lambda a: a.assigned_at, reverse=True
        )
        return [self._joined(a) for a in rows]

    async def update(
        self,
        assignment_id: str,
        *,
        is_active: bool | None = None,
        expires_at: datetime | None = None,
        clear_expires_at: bool = False,
    ) -> UserRoleResult | None:
        a = self.store.assignments.get(assignment_id)
        if a is None:
            return None
        fields: dict = {"updated_at": utc_now()}
        if is_active is not None:
            fields["is_active"] = is_active
        if clear_expires_at:
            fields["expires_at"] = None
        elif expires_at is not None:
            fields["expires_at"] = expires_at
        return self.store.put_assignment(replace(a, **fields))

    async def soft_delete(self, assignment_id: str) -> bool:
        return await self.update(assignment_id, is_active=False) is not None

    async def delete(self, assignment_id: str) -> bool:
        return self.store.assignments.pop(assignment_id, None) is not None

    async def delete_by_user_and_role(self, user_id: str, role_id: str) -> bool:
        a = self._find(user_id, role_id)
        if a is None:
            return False
        del self.store.assignments[a.id]
        return True

    async def count_active_by_role(self, role_id: str) -> int:
        now = utc_now()
        return sum(
            1
            for a in self.store.assignments.values()
            if a.role_id == role_id and a.is_effective(now)
        )


class FakeUserRepository:
    def __init__(self, store: InMemoryRbacStore) -> None:
        self.store = store

    async def get_by_id(self, user_id: str) -> UserResult | None:
        return self.store.users.get(user_id)


@dataclass
class SeededRbac:
    """System roles plus one user per role and one user without roles."""

    admin: UserResult
    legal: UserResult
    member: UserResult
    outsider: UserResult
    roles: dict[str, RoleResult] = field(default_factory=dict)


def bearer(user: UserResult) -> dict[str, str]:
    """Authorization header for user (token signed with the test SECRET_KEY)."""
    token = create_access_token(user.id, email=user.email, name=user.name)
    return {"Authorization": f"Bearer {token}"}


# ---- Fixtures ----


@pytest.fixture(autouse=True)
def _reset_rate_limits() -> None:
    """Rate limit counters are in memory and shared by every test client."""
    limiter.reset()


@pytest.fixture
def rbac_store() -> InMemoryRbacStore:
    return InMemoryRbacStore()


@pytest.fixture
def role_repo(rbac_store: InMemoryRbacStore) -> FakeRoleRepository:
    return FakeRoleRepository(rbac_store)


@pytest.fixture
def user_role_repo(rbac_store: InMemoryRbacStore) -> FakeUserRoleRepository:
    return FakeUserRoleRepository(rbac_store)


@pytest.fixture
def user_repo(rbac_store: InMemoryRbacStore) -> FakeUserRepository:
    return FakeUserRepository(rbac_store)


@pytest.fixture
def role_service(role_repo, user_role_repo, user_repo) -> RoleService:
    return RoleService(role_repo, user_role_repo, user_repo)


@pytest.fixture
def authorization_service(user_role_repo) -> AuthorizationService:
    return AuthorizationService(user_role_repo)


@pytest.fixture
async def seeded(rbac_store: InMemoryRbacStore, role_service: RoleService) -> SeededRbac:
    """Seed system roles and assign them: admin, legal, member; outsider has none."""
    await role_service.ensure_system_roles()
    roles = {r.name: r for r in await role_service.list_roles()}
    seeded = SeededRbac(
        admin=rbac_store.add_user("admin@example.com", "Platform Admin"),
        legal=rbac_store.add_user("legal@example.com", "Legal Admin"),
        member=rbac_store.add_user("member@example.com", "Department User"),
        outsider=rbac_store.add_user("outsider@example.com", "No Roles"),
        roles=roles,
    )
    await role_service.assign_role_to_user(
        seeded.admin.id, roles[SystemRoles.PLATFORM_ADMIN.value].id
    )
    await role_service.assign_role_to_user(
        seeded.legal.id, roles[SystemRoles.LEGAL_ADMIN.value].id, assigned_by=seeded.admin.id
    )
    await role_service.assign_role_to_user(
        seeded.member.id, roles[SystemRoles.DEPARTMENT_USER.value].id, assigned_by=seeded.admin.id
    )
    return seeded


@pytest.fixture
def auth_for():
    """Return a function building the Authorization header for a user."""
    return bearer


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), no overrides."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def api_client(
    role_service: RoleService, authorization_service: AuthorizationService
) -> AsyncClient:
    """HTTP client with services backed by the in-memory stores."""
    app.dependency_overrides[get_role_service] = lambda: role_service
    app.dependency_overrides[get_role_service_for_read] = lambda: role_service
    app.dependency_overrides[get_authorization_service] = lambda: authorization_service
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def db_session():
    """Database session for repository tests. Rolls back after each test.

    Requires DATABASE_URL (postgresql+asyncpg) with migrations applied
    (alembic upgrade head). Skips when not configured; run without DB via:
    pytest -m 'not requires_db'.
    """
    try:
        session_factory = get_session_factory()
    except SqlNotConfiguredError:
        pytest.skip("Postgres not configured: set DATABASE_URL, then run: alembic upgrade head")
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()
    await dispose_engine()
