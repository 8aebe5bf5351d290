"""Role ORM model. Global, uniquely named permission bundles."""

from typing import Any

from sqlalchemy import JSON, Boolean, String, Text, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import TimestampMixin, UuidMixin


class Role(UuidMixin, TimestampMixin, Base):
    """Role. Table: role. Unique name (case-sensitive).

    permissions is a JSON object mapping resource -> list of actions.
    """

    __tablename__ = "role"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    permissions: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    is_system_role: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    __table_args__ = (UniqueConstraint("name", name="uq_role_name"),)
