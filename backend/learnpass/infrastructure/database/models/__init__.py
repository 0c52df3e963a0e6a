from .profile import ProfileModel
from .payment import PaymentModel, AdminCredentialsModel
from .subscription import SubscriptionModel
from .learning_models import LearningRecordModel, CourseQuestionModel
from .certificate_models import (
    CertificateTemplateModel,
    CertificateModel,
    CompletionTrackingModel,
)

__all__ = [
    "ProfileModel",
    "PaymentModel",
    "AdminCredentialsModel",
    "SubscriptionModel",
    "LearningRecordModel",
    "CourseQuestionModel",
    "CertificateTemplateModel",
    "CertificateModel",
    "CompletionTrackingModel",
]
