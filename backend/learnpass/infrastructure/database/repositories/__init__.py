from .profile_repository import SQLAlchemyProfileRepository
from .payment_repository import SQLAlchemyPaymentRepository, SQLAlchemyAdminCredentialsRepository
from .entitlement_repository import SQLAlchemyEntitlementRepository
from .learning_record_repository import (
    SQLAlchemyLearningRecordRepository,
    SQLAlchemyCourseQuestionRepository,
)
from .credential_repository import (
    SQLAlchemyCredentialRepository,
    SQLAlchemyCredentialTemplateRepository,
    SQLAlchemyCompletionTrackingRepository,
)

__all__ = [
    "SQLAlchemyProfileRepository",
    "SQLAlchemyPaymentRepository",
    "SQLAlchemyAdminCredentialsRepository",
    "SQLAlchemyEntitlementRepository",
    "SQLAlchemyLearningRecordRepository",
    "SQLAlchemyCourseQuestionRepository",
    "SQLAlchemyCredentialRepository",
    "SQLAlchemyCredentialTemplateRepository",
    "SQLAlchemyCompletionTrackingRepository",
]
