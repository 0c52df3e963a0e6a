"""Concrete repository implementations for certificates, templates and completion tracking."""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnpass.application.interfaces import (
    CompletionTrackingRepository,
    CredentialRepository,
    CredentialTemplateRepository,
)
from learnpass.domain.entities import CompletionRecord, Credential, CredentialTemplate
from learnpass.domain.exceptions import DuplicateEntityError
from learnpass.infrastructure.database.dialect import as_utc, dialect_insert
from learnpass.infrastructure.database.models import (
    CertificateModel,
    CertificateTemplateModel,
    CompletionTrackingModel,
)


class SQLAlchemyCredentialRepository(CredentialRepository):
    """Implements the CredentialRepository port.

    The partial unique index on active (user_id, course_id) turns a second
    concurrent issuance into DuplicateEntityError.
    """

    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: CertificateModel) -> Credential:
        return Credential(
            id=model.id,
            user_id=model.user_id,
            external_user_id=model.external_user_id,
            course_id=model.course_id,
            template_id=model.template_id,
            verification_code=model.verification_code,
            score=model.score,
            completion_data=dict(model.completion_data or {}),
            is_active=model.is_active,
            issued_date=as_utc(model.issued_date),
            created_at=as_utc(model.created_at),
        )

    def _to_model(self, entity: Credential) -> CertificateModel:
        return CertificateModel(
            id=entity.id,
            user_id=entity.user_id,
            external_user_id=entity.external_user_id,
            course_id=entity.course_id,
            template_id=entity.template_id,
            verification_code=entity.verification_code,
            score=entity.score,
            completion_data=entity.completion_data,
            is_active=entity.is_active,
            issued_date=entity.issued_date,
            created_at=entity.created_at,
        )

    async def find_active(self, user_id: str, course_id: str) -> Credential | None:
        stmt = select(CertificateModel).where(
            CertificateModel.user_id == user_id,
            CertificateModel.course_id == course_id,
            CertificateModel.is_active.is_(True),
        )
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, credential: Credential) -> Credential:
        model = self._to_model(credential)
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as exc:
            raise DuplicateEntityError(
                "Credential", "user_id,course_id", f"{credential.user_id},{credential.course_id}"
            ) from exc
        return self._to_entity(model)

    async def list_active_for_user(self, user_id: str) -> list[Credential]:
        stmt = (
            select(CertificateModel)
            .where(CertificateModel.user_id == user_id, CertificateModel.is_active.is_(True))
            .order_by(CertificateModel.issued_date.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]

    async def get_by_verification_code(self, code: str) -> Credential | None:
        stmt = select(CertificateModel).where(CertificateModel.verification_code == code).limit(1)
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_entity(model) if model else None


class SQLAlchemyCredentialTemplateRepository(CredentialTemplateRepository):
    def __init__(self, session: AsyncSession):
        self._session = session

    def _to_entity(self, model: CertificateTemplateModel) -> CredentialTemplate:
        return CredentialTemplate(
            id=model.id,
            name=model.name,
            description=model.description,
            html_template=model.html_template,
            placeholders=list(model.placeholders or []),
            certificate_type=model.certificate_type,
            requirements=dict(model.requirements or {}),
            is_active=model.is_active,
            is_default=model.is_default,
            created_at=as_utc(model.created_at),
        )

    async def get_default(self) -> CredentialTemplate | None:
        stmt = (
            select(CertificateTemplateModel)
            .where(
                CertificateTemplateModel.is_default.is_(True),
                CertificateTemplateModel.is_active.is_(True),
            )
            .limit(1)
        )
        model = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, template: CredentialTemplate) -> CredentialTemplate:
        model = CertificateTemplateModel(
            id=template.id,
            name=template.name,
            description=template.description,
            html_template=template.html_template,
            placeholders=template.placeholders,
            certificate_type=template.certificate_type,
            requirements=template.requirements,
            is_active=template.is_active,
            is_default=template.is_default,
            created_at=template.created_at,
        )
        try:
            async with self._session.begin_nested():
                self._session.add(model)
        except IntegrityError as exc:
            raise DuplicateEntityError("CredentialTemplate", "is_default", "true") from exc
        return self._to_entity(model)


class SQLAlchemyCompletionTrackingRepository(CompletionTrackingRepository):
    """Upserts completion rows keyed by (external id, course)."""

    def __init__(self, session: AsyncSession, passing_score: int):
        self._session = session
        self._passing_score = passing_score

    def _to_entity(self, model: CompletionTrackingModel) -> CompletionRecord:
        return CompletionRecord(
            id=model.id,
            external_user_id=model.clerk_user_id,
            course_id=model.course_id,
            course_name=model.course_name,
            course_complete=model.course_complete,
            assessment_pass=model.assessment_pass,
            assessment_score=model.assessment_score,
            completion_date=as_utc(model.completion_date),
            created_at=as_utc(model.created_at),
            updated_at=as_utc(model.updated_at),
        )

    async def record_completion(
        self,
        external_id: str,
        course_id: str,
        course_name: str,
        course_complete: bool,
        assessment_score: int,
    ) -> None:
        now = datetime.now(timezone.utc)
        passed = assessment_score >= self._passing_score
        insert = dialect_insert(self._session, CompletionTrackingModel).values(
            id=str(uuid4()),
            clerk_user_id=external_id,
            course_id=course_id,
            course_name=course_name,
            course_complete=course_complete,
            assessment_pass=passed,
            assessment_score=assessment_score,
            completion_date=now if course_complete and passed else None,
            created_at=now,
            updated_at=now,
        )
        stmt = insert.on_conflict_do_update(
            index_elements=[CompletionTrackingModel.clerk_user_id, CompletionTrackingModel.course_id],
            set_={
                "course_complete": insert.excluded.course_complete,
                "assessment_pass": insert.excluded.assessment_pass,
                "assessment_score": insert.excluded.assessment_score,
                "completion_date": insert.excluded.completion_date,
                "updated_at": insert.excluded.updated_at,
            },
        )
        async with self._session.begin_nested():
            await self._session.execute(stmt)

    async def list_passed(self, external_id: str) -> list[CompletionRecord]:
        stmt = (
            select(CompletionTrackingModel)
            .where(
                CompletionTrackingModel.clerk_user_id == external_id,
                CompletionTrackingModel.course_complete.is_(True),
                CompletionTrackingModel.assessment_pass.is_(True),
            )
            .order_by(CompletionTrackingModel.completion_date.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(row) for row in result.scalars().all()]
