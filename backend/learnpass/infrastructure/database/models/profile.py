"""SQLAlchemy ORM model for learner profiles."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from learnpass.infrastructure.database.base import Base


class ProfileModel(Base):
    """ORM model — maps to the 'profiles' table. ``id`` is the canonical identity."""

    __tablename__ = "profiles"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    full_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str | None] = mapped_column(String(50), nullable=True, default="student")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="active")
    auth_provider: Mapped[str | None] = mapped_column(String(50), nullable=True, default="clerk")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        Index("ix_profiles_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<ProfileModel(id={self.id}, email='{self.email}')>"
