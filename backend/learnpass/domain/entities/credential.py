"""Domain entities for completion credentials (certificates)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

DEFAULT_TEMPLATE_HTML = """<!DOCTYPE html>
<html>
<head>
    <style>
        body { font-family: Arial, sans-serif; text-align: center; padding: 50px; }
        .certificate { border: 5px solid #333; padding: 50px; margin: 20px; }
        .title { font-size: 36px; font-weight: bold; margin-bottom: 20px; }
        .name { font-size: 28px; color: #0066cc; margin: 20px 0; }
        .course { font-size: 20px; margin: 20px 0; }
        .date { font-size: 16px; margin-top: 30px; }
    </style>
</head>
<body>
    <div class="certificate">
        <div class="title">Certificate of Completion</div>
        <p>This certifies that</p>
        <div class="name">{{user_name}}</div>
        <p>has successfully completed</p>
        <div class="course">{{course_name}}</div>
        <div class="date">Completed on {{completion_date}}</div>
        <div class="date">Score: {{score}}</div>
        <div class="date">Issued by {{company_name}}</div>
    </div>
</body>
</html>"""

DEFAULT_PLACEHOLDERS = ["user_name", "course_name", "completion_date", "score", "company_name"]


class CredentialStatus(str, Enum):
    NOT_ELIGIBLE = "NotEligible"
    ALREADY_ISSUED = "AlreadyIssued"
    ISSUED = "Issued"
    NOT_ISSUED = "NotIssued"
    NOT_APPLICABLE = "NotApplicable"


@dataclass
class CredentialTemplate:
    """Shared certificate layout; one active default is expected to exist."""

    name: str
    html_template: str
    description: str | None = None
    placeholders: list[str] = field(default_factory=list)
    certificate_type: str = "completion"
    requirements: dict[str, Any] = field(default_factory=dict)
    is_active: bool = True
    is_default: bool = False
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def default(cls, passing_score: int) -> "CredentialTemplate":
        return cls(
            name="Default Certificate Template",
            description="Standard certificate template for course completion",
            html_template=DEFAULT_TEMPLATE_HTML,
            placeholders=list(DEFAULT_PLACEHOLDERS),
            requirements={"min_score": passing_score},
            is_active=True,
            is_default=True,
        )


@dataclass
class Credential:
    """An issued certificate. ``completion_data`` is a display snapshot."""

    user_id: str
    course_id: str
    template_id: str
    verification_code: str
    score: int
    completion_data: dict[str, Any]
    external_user_id: str | None = None
    is_active: bool = True
    id: str = field(default_factory=lambda: str(uuid4()))
    issued_date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class CredentialOutcome:
    """Result of one issuance attempt.

    ``degraded`` names best-effort steps that failed along the way.
    """

    status: CredentialStatus
    credential_id: str | None = None
    message: str | None = None
    degraded: tuple[str, ...] = ()

    @property
    def generated(self) -> bool:
        return self.status in (CredentialStatus.ISSUED, CredentialStatus.ALREADY_ISSUED)


@dataclass
class CompletionRecord:
    """Cross-system completion tracking keyed by (external id, course)."""

    external_user_id: str
    course_id: str
    course_name: str
    course_complete: bool = False
    assessment_pass: bool = False
    assessment_score: int = 0
    completion_date: datetime | None = None
    id: str = field(default_factory=lambda: str(uuid4()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class CertificateView:
    """A certificate as listed to its owner, from either source."""

    source: str
    id: str
    course_id: str
    verification_code: str
    score: int
    title: str
    issued_date: datetime | None
    completion_data: dict[str, Any]
