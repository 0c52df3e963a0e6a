"""Credential Issuer: issues at most one active certificate per (identity, course)."""

import logging
import secrets
import string
import time
from datetime import datetime, timezone

from learnpass.application.interfaces import (
    CompletionTrackingRepository,
    CredentialRepository,
    CredentialTemplateRepository,
)
from learnpass.domain.entities import (
    Credential,
    CredentialOutcome,
    CredentialStatus,
    CredentialTemplate,
)
from learnpass.domain.exceptions import DuplicateEntityError, StorageFault
from learnpass.domain.workflow_config import WorkflowConfig
from learnpass.infrastructure.logging.workflow_logger import WorkflowLogger, WorkflowStage

logger = logging.getLogger(__name__)
plog = WorkflowLogger("CredentialIssuer")

_CODE_ALPHABET = string.digits + string.ascii_uppercase


def generate_verification_code(now_ms: int | None = None) -> str:
    """``CERT-<epoch ms>-<6 base36 chars>``. Unlikely, not guaranteed, to be unique."""
    stamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = "".join(secrets.choice(_CODE_ALPHABET) for _ in range(6))
    return f"CERT-{stamp}-{suffix}"


class CredentialIssuer:
    """NoCredential → Eligible → Issued, once per (identity, course).

    The existence check is only a fast path; the storage layer's uniqueness
    constraint decides concurrent issuances and the loser reports the
    winner's credential as AlreadyIssued.
    """

    def __init__(
        self,
        credentials: CredentialRepository,
        templates: CredentialTemplateRepository,
        completion_tracking: CompletionTrackingRepository,
        config: WorkflowConfig,
    ):
        self._credentials = credentials
        self._templates = templates
        self._completion_tracking = completion_tracking
        self._config = config

    async def issue(
        self,
        *,
        user_id: str,
        user_name: str,
        course_id: str,
        course_name: str,
        score: int,
        external_id: str | None = None,
    ) -> CredentialOutcome:
        passing_score = self._config.passing_score
        if score < passing_score:
            plog.detail("Score below passing threshold, no certificate", score=score)
            return CredentialOutcome(CredentialStatus.NOT_ELIGIBLE, message="Score below passing threshold")

        degraded: list[str] = []
        if external_id:
            try:
                await self._completion_tracking.record_completion(
                    external_id, course_id, course_name, True, score
                )
            except Exception as exc:
                degraded.append("completion_tracking")
                plog.degraded(WorkflowStage.CREDENTIAL, "Completion tracking update failed", error=exc)

        try:
            existing = await self._credentials.find_active(user_id, course_id)
        except Exception as exc:
            raise StorageFault(f"Failed to look up certificates: {exc}", subsystem="credential") from exc
        if existing is not None:
            plog.step_complete(WorkflowStage.CREDENTIAL, "Certificate already exists", id=existing.id)
            return CredentialOutcome(
                CredentialStatus.ALREADY_ISSUED,
                credential_id=existing.id,
                message="Certificate already exists",
                degraded=tuple(degraded),
            )

        template = await self._ensure_default_template()
        now = datetime.now(timezone.utc)
        credential = Credential(
            user_id=user_id,
            external_user_id=external_id,
            course_id=course_id,
            template_id=template.id,
            verification_code=generate_verification_code(),
            score=score,
            completion_data={
                "course_id": course_id,
                "course_name": course_name,
                "completion_date": now.isoformat(),
                "score": score,
                "passing_score": passing_score,
                "user_name": user_name,
            },
            issued_date=now,
            created_at=now,
        )

        try:
            created = await self._credentials.create(credential)
        except DuplicateEntityError:
            winner = await self._credentials.find_active(user_id, course_id)
            if winner is None:
                raise StorageFault(
                    "Certificate insert conflicted but no active certificate was found",
                    subsystem="credential",
                )
            plog.detail("Concurrent issuance resolved by storage", id=winner.id)
            return CredentialOutcome(
                CredentialStatus.ALREADY_ISSUED,
                credential_id=winner.id,
                message="Certificate already exists",
                degraded=tuple(degraded),
            )
        except Exception as exc:
            plog.step_error(WorkflowStage.CREDENTIAL, "Error saving certificate", error=exc)
            raise StorageFault(f"Failed to save certificate: {exc}", subsystem="credential") from exc

        plog.step_complete(
            WorkflowStage.CREDENTIAL, "Certificate issued",
            id=created.id, code=created.verification_code,
        )
        return CredentialOutcome(
            CredentialStatus.ISSUED,
            credential_id=created.id,
            message="Certificate generated successfully",
            degraded=tuple(degraded),
        )

    async def _ensure_default_template(self) -> CredentialTemplate:
        try:
            template = await self._templates.get_default()
            if template is not None:
                return template

            logger.warning("No default certificate template found, creating one")
            try:
                return await self._templates.create(
                    CredentialTemplate.default(self._config.passing_score)
                )
            except DuplicateEntityError:
                template = await self._templates.get_default()
                if template is None:
                    raise
                return template
        except Exception as exc:
            raise StorageFault(
                f"Failed to create certificate template: {exc}", subsystem="credential"
            ) from exc
