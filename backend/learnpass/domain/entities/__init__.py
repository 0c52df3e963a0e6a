from .profile import Profile
from .payment import PaymentRecord, GatewayCredentials, GatewayOrder
from .entitlement import Entitlement, EntitlementStatus, add_months
from .learning_record import LearningRecord
from .assessment import CourseQuestion, SubmittedAnswer, AnswerEvaluation, AssessmentScore
from .credential import (
    Credential,
    CredentialTemplate,
    CredentialStatus,
    CredentialOutcome,
    CompletionRecord,
    CertificateView,
)

__all__ = [
    "Profile",
    "PaymentRecord",
    "GatewayCredentials",
    "GatewayOrder",
    "Entitlement",
    "EntitlementStatus",
    "add_months",
    "LearningRecord",
    "CourseQuestion",
    "SubmittedAnswer",
    "AnswerEvaluation",
    "AssessmentScore",
    "Credential",
    "CredentialTemplate",
    "CredentialStatus",
    "CredentialOutcome",
    "CompletionRecord",
    "CertificateView",
]
