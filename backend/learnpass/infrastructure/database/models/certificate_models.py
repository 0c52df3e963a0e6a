"""SQLAlchemy ORM models for certificates, templates and completion tracking."""

from datetime import datetime, timezone

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from learnpass.infrastructure.database.base import Base


class CertificateTemplateModel(Base):
    """ORM model — maps to the 'certificate_templates' table."""

    __tablename__ = "certificate_templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    html_template: Mapped[str] = mapped_column(Text, nullable=False)
    placeholders: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    certificate_type: Mapped[str] = mapped_column(String(50), nullable=False, default="completion")
    requirements: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        # At most one active default template.
        Index(
            "uq_certificate_templates_default",
            "is_default",
            unique=True,
            postgresql_where=text("is_default AND is_active"),
            sqlite_where=text("is_default AND is_active"),
        ),
    )


class CertificateModel(Base):
    """ORM model — maps to the 'user_certificates' table."""

    __tablename__ = "user_certificates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    external_user_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    course_id: Mapped[str] = mapped_column(String(100), nullable=False)
    template_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("certificate_templates.id"), nullable=False
    )
    verification_code: Mapped[str] = mapped_column(String(64), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    completion_data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    issued_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    __table_args__ = (
        # One active certificate per (identity, course).
        Index(
            "uq_user_certificates_active",
            "user_id",
            "course_id",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active"),
        ),
        Index("ix_user_certificates_code", "verification_code"),
    )

    def __repr__(self) -> str:
        return f"<CertificateModel(id={self.id}, code='{self.verification_code}')>"


class CompletionTrackingModel(Base):
    """ORM model — maps to the 'course_certificate_management' table."""

    __tablename__ = "course_certificate_management"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    clerk_user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    course_id: Mapped[str] = mapped_column(String(100), nullable=False)
    course_name: Mapped[str] = mapped_column(String(255), nullable=False)
    course_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assessment_pass: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    assessment_score: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completion_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
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
        UniqueConstraint("clerk_user_id", "course_id", name="uq_completion_user_course"),
    )
