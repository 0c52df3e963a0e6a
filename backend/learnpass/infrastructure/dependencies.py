"""FastAPI dependency injection: wires infrastructure to application layer."""

import hmac
from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnpass.config import get_settings
from learnpass.application.services import (
    AssessmentService,
    CertificateQueryService,
    CredentialIssuer,
    EntitlementManager,
    GatewayCredentialsProvider,
    LearningWorkflow,
    PaymentWorkflow,
    ProfileService,
    WorkflowOrchestrator,
)
from learnpass.domain.entities import GatewayCredentials
from learnpass.domain.identity import IdentityResolver
from learnpass.infrastructure.database.session import get_db_session
from learnpass.infrastructure.database.repositories import (
    SQLAlchemyAdminCredentialsRepository,
    SQLAlchemyCompletionTrackingRepository,
    SQLAlchemyCourseQuestionRepository,
    SQLAlchemyCredentialRepository,
    SQLAlchemyCredentialTemplateRepository,
    SQLAlchemyEntitlementRepository,
    SQLAlchemyLearningRecordRepository,
    SQLAlchemyPaymentRepository,
    SQLAlchemyProfileRepository,
)
from learnpass.infrastructure.razorpay import RazorpayClient


def get_identity_resolver() -> IdentityResolver:
    config = get_settings().workflow_config()
    return IdentityResolver(config.identity_namespace, config.identity_resolver_version)


async def get_entitlement_manager(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[EntitlementManager, None]:
    """Provides an EntitlementManager with its repository wired up."""
    config = get_settings().workflow_config()
    yield EntitlementManager(SQLAlchemyEntitlementRepository(session), config)


async def get_workflow_orchestrator(
    session: AsyncSession = Depends(get_db_session),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> AsyncGenerator[WorkflowOrchestrator, None]:
    """Provides the WorkflowOrchestrator with both workflows and all repositories."""
    settings = get_settings()
    config = settings.workflow_config()

    profiles = ProfileService(SQLAlchemyProfileRepository(session, resolver))
    credentials = GatewayCredentialsProvider(
        configured=GatewayCredentials(settings.razorpay_key_id, settings.razorpay_key_secret),
        repository=SQLAlchemyAdminCredentialsRepository(session),
    )
    gateway = RazorpayClient(
        base_url=settings.razorpay_base_url,
        timeout=settings.razorpay_timeout,
    )
    payments = PaymentWorkflow(
        resolver=resolver,
        credentials=credentials,
        gateway=gateway,
        profiles=profiles,
        payments=SQLAlchemyPaymentRepository(session),
        entitlements=EntitlementManager(SQLAlchemyEntitlementRepository(session), config),
        config=config,
    )

    completion_tracking = SQLAlchemyCompletionTrackingRepository(session, config.passing_score)
    issuer = CredentialIssuer(
        credentials=SQLAlchemyCredentialRepository(session),
        templates=SQLAlchemyCredentialTemplateRepository(session),
        completion_tracking=completion_tracking,
        config=config,
    )
    learning = LearningWorkflow(
        resolver=resolver,
        profiles=profiles,
        learning=SQLAlchemyLearningRecordRepository(session),
        assessments=AssessmentService(SQLAlchemyCourseQuestionRepository(session), config),
        issuer=issuer,
    )
    yield WorkflowOrchestrator(payments, learning)


async def get_certificate_query_service(
    session: AsyncSession = Depends(get_db_session),
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> AsyncGenerator[CertificateQueryService, None]:
    """Provides certificate listing and verification."""
    config = get_settings().workflow_config()
    yield CertificateQueryService(
        resolver=resolver,
        credentials=SQLAlchemyCredentialRepository(session),
        completion_tracking=SQLAlchemyCompletionTrackingRepository(session, config.passing_score),
        config=config,
    )


def require_admin_token(x_admin_token: str | None = Header(default=None)) -> None:
    """Guard for admin endpoints. Disabled entirely while no token is configured."""
    expected = get_settings().admin_api_token
    if not expected:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin API is disabled")
    if not x_admin_token or not hmac.compare_digest(x_admin_token, expected):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid admin token")
