"""User ORM model. Minimal identity record that assignments reference."""

from sqlalchemy import Boolean, String, UniqueConstraint, text
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import TimestampMixin, UuidMixin


class User(UuidMixin, TimestampMixin, Base):
    """User model. Table: app_user. Unique email.

    Owned by the identity service; this core only reads it.
    """

    __tablename__ = "app_user"

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, server_default=text("true")
    )

    __table_args__ = (UniqueConstraint("email", name="uq_app_user_email"),)
