"""Read-side queries over issued certificates and completion tracking."""

from learnpass.application.interfaces import CompletionTrackingRepository, CredentialRepository
from learnpass.domain.entities import CertificateView, CompletionRecord, Credential
from learnpass.domain.exceptions import EntityNotFoundError
from learnpass.domain.identity import IdentityResolver
from learnpass.domain.workflow_config import WorkflowConfig


def _credential_view(credential: Credential) -> CertificateView:
    course_name = credential.completion_data.get("course_name") or credential.course_id
    return CertificateView(
        source="certificate",
        id=credential.id,
        course_id=credential.course_id,
        verification_code=credential.verification_code,
        score=credential.score,
        title=f"{course_name} Certificate",
        issued_date=credential.issued_date,
        completion_data=dict(credential.completion_data),
    )


def _completion_view(record: CompletionRecord, passing_score: int) -> CertificateView:
    return CertificateView(
        source="completion_tracking",
        id=record.id,
        course_id=record.course_id,
        verification_code=f"CERT-MGMT-{record.id}",
        score=record.assessment_score,
        title=f"{record.course_name} Completion Certificate",
        issued_date=record.completion_date,
        completion_data={
            "course_id": record.course_id,
            "course_name": record.course_name,
            "completion_date": record.completion_date.isoformat() if record.completion_date else None,
            "score": record.assessment_score,
            "passing_score": passing_score,
        },
    )


class CertificateQueryService:
    def __init__(
        self,
        resolver: IdentityResolver,
        credentials: CredentialRepository,
        completion_tracking: CompletionTrackingRepository,
        config: WorkflowConfig,
    ):
        self._resolver = resolver
        self._credentials = credentials
        self._completion_tracking = completion_tracking
        self._config = config

    async def list_for_user(self, external_id: str) -> list[CertificateView]:
        """Issued certificates plus passed courses that never got one."""
        user_id = self._resolver.resolve(external_id)
        issued = await self._credentials.list_active_for_user(user_id)
        views = [_credential_view(c) for c in issued]

        covered = {c.course_id for c in issued}
        for record in await self._completion_tracking.list_passed(external_id):
            if record.course_id not in covered:
                views.append(_completion_view(record, self._config.passing_score))
        return views

    async def verify(self, code: str) -> CertificateView:
        credential = await self._credentials.get_by_verification_code(code)
        if credential is None or not credential.is_active:
            raise EntityNotFoundError("Certificate", code)
        return _credential_view(credential)
