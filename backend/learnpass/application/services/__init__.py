from .workflow_steps import StepTracker, WorkflowResult
from .profile_service import ProfileService
from .entitlement_service import EntitlementManager
from .assessment_service import AssessmentService
from .gateway_credentials_service import GatewayCredentialsProvider
from .credential_service import CredentialIssuer, generate_verification_code
from .payment_workflow import PaymentWorkflow
from .learning_workflow import LearningWorkflow
from .workflow_orchestrator import WorkflowOrchestrator, flatten_params
from .certificate_query_service import CertificateQueryService

__all__ = [
    "StepTracker",
    "WorkflowResult",
    "ProfileService",
    "EntitlementManager",
    "AssessmentService",
    "GatewayCredentialsProvider",
    "CredentialIssuer",
    "generate_verification_code",
    "PaymentWorkflow",
    "LearningWorkflow",
    "WorkflowOrchestrator",
    "flatten_params",
    "CertificateQueryService",
]
