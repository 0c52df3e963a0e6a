from .profile_repository import ProfileRepository
from .payment_repository import PaymentRepository
from .entitlement_repository import EntitlementRepository
from .learning_record_repository import LearningRecordRepository
from .course_question_repository import CourseQuestionRepository
from .credential_repository import CredentialRepository, CredentialTemplateRepository
from .completion_tracking_repository import CompletionTrackingRepository
from .admin_credentials_repository import AdminCredentialsRepository
from .payment_gateway import PaymentGateway

__all__ = [
    "ProfileRepository",
    "PaymentRepository",
    "EntitlementRepository",
    "LearningRecordRepository",
    "CourseQuestionRepository",
    "CredentialRepository",
    "CredentialTemplateRepository",
    "CompletionTrackingRepository",
    "AdminCredentialsRepository",
    "PaymentGateway",
]
