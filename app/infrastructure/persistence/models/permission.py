"""Permission catalog, role defaults and membership override ORM models."""

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import CenterRole
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import (
    CuidMixin,
    TimestampMixin,
    enum_check,
)


class Permission(CuidMixin, TimestampMixin, Base):
    """Permission catalog entry. Table: permission. Unique key (e.g. exercise.publish)."""

    __tablename__ = "permission"

    key: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)


class RolePermission(Base):
    """Role default grant. Table: role_permission. Primary key (role, permission_id)."""

    __tablename__ = "role_permission"

    role: Mapped[str] = mapped_column(String, primary_key=True)
    permission_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("permission.id", ondelete="CASCADE"),
        primary_key=True,
    )

    __table_args__ = (
        CheckConstraint(
            enum_check("role", CenterRole.values()), name="role_permission_role_check"
        ),
    )


class MembershipPermission(CuidMixin, TimestampMixin, Base):
    """Per-membership override. Table: membership_permission. Unique (membership_id, permission_id)."""

    __tablename__ = "membership_permission"

    membership_id: Mapped[str] = mapped_column(
        String,
        ForeignKey("center_membership.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    permission_id: Mapped[str] = mapped_column(
        String, ForeignKey("permission.id", ondelete="CASCADE"), nullable=False
    )
    allowed: Mapped[bool] = mapped_column(Boolean, nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "membership_id", "permission_id", name="uq_membership_permission"
        ),
    )
