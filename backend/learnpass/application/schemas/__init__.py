from .workflow import (
    WorkflowEnvelope,
    CreateOrderParams,
    VerifyPaymentParams,
    AnswerSchema,
    LearningParams,
)
from .certificates import CertificateResponse
from .entitlements import EntitlementResponse, AdminGrantRequest

__all__ = [
    "WorkflowEnvelope",
    "CreateOrderParams",
    "VerifyPaymentParams",
    "AnswerSchema",
    "LearningParams",
    "CertificateResponse",
    "EntitlementResponse",
    "AdminGrantRequest",
]
