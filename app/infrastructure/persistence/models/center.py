"""Center ORM model (the organization that scopes memberships and overrides)."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import CuidMixin, TimestampMixin


class Center(CuidMixin, TimestampMixin, Base):
    """Center model. Table: center. Unique slug."""

    __tablename__ = "center"

    name: Mapped[str] = mapped_column(String, nullable=False)
    slug: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
