"""CenterMembership ORM model: binds a user to a center with role and status."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import CenterRole, MembershipStatus
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CenterScopedModel, enum_check


class CenterMembership(CenterScopedModel, Base):
    """Membership. Table: center_membership. Unique (center_id, user_id)."""

    __tablename__ = "center_membership"

    user_id: Mapped[str] = mapped_column(
        String, ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False
    )
    role: Mapped[str] = mapped_column(String, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=MembershipStatus.INVITED.value
    )

    __table_args__ = (
        UniqueConstraint("center_id", "user_id", name="uq_center_membership_user"),
        Index("ix_center_membership_user", "user_id"),
        Index("ix_center_membership_role_status", "center_id", "role", "status"),
        CheckConstraint(
            enum_check("role", CenterRole.values()), name="center_membership_role_check"
        ),
        CheckConstraint(
            enum_check("status", MembershipStatus.values()),
            name="center_membership_status_check",
        ),
    )
