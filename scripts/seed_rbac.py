"""Seed the system roles and optionally grant Platform Administrator to a user.

Usage:
    python -m scripts.seed_rbac [<user_id_or_email>]
Creates missing system roles (idempotent). With an argument, resolves the
user by id or email and assigns Platform Administrator (reactivating a
removed assignment). Requires Postgres. All imports use app.*.
"""

import asyncio
import sys

from app.application.services.role_service import RoleService
from app.core.config import get_settings
from app.domain.enums import SystemRoles
from app.domain.exceptions import AlreadyAssignedError, SqlNotConfiguredError
from app.infrastructure.persistence.database import dispose_engine, get_session_factory
from app.infrastructure.persistence.repositories import (
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)
from app.shared.logging import setup_logging


async def main() -> None:
    """Seed system roles, then assign Platform Administrator when a user is given."""
    user_arg = sys.argv[1] if len(sys.argv) > 1 else None

    get_settings()
    setup_logging()
    try:
        session_factory = get_session_factory()
    except SqlNotConfiguredError:
        print("DATABASE_URL not configured", file=sys.stderr)
        sys.exit(1)

    async with session_factory() as session:
        async with session.begin():
            user_repo = UserRepository(session)
            role_repo = RoleRepository(session)
            service = RoleService(role_repo, UserRoleRepository(session), user_repo)
            created = await service.ensure_system_roles()
            for role in created:
                print(f"Created system role: {role.name}")
            if not created:
                print("System roles already present")

            if user_arg:
                user = await user_repo.get_by_id(user_arg) or await user_repo.get_by_email(
                    user_arg
                )
                if not user:
                    print(f"User not found: {user_arg}", file=sys.stderr)
                    sys.exit(1)
                admin = await role_repo.get_by_name(SystemRoles.PLATFORM_ADMIN.value)
                try:
                    await service.assign_role_to_user(user.id, admin.id)
                    print(f"Assigned {admin.name} to {user.email}")
                except AlreadyAssignedError:
                    print(f"{user.email} already has {admin.name}")
    await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
