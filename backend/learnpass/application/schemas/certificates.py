"""Pydantic DTOs for certificate queries."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel


class CertificateResponse(BaseModel):
    """A certificate as shown to its owner or to a verifier."""

    source: str
    id: str
    course_id: str
    verification_code: str
    score: int
    title: str
    issued_date: datetime | None
    completion_data: dict[str, Any]

    model_config = {"from_attributes": True}
