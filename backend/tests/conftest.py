"""Shared fixtures: environment for app import and in-memory fakes of every port."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_learnpass.db")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("IDENTITY_RESOLVER_VERSION", "v1")

import pytest

from learnpass.application.interfaces import (
    CompletionTrackingRepository,
    CourseQuestionRepository,
    CredentialRepository,
    CredentialTemplateRepository,
    EntitlementRepository,
    LearningRecordRepository,
    PaymentGateway,
    PaymentRepository,
    ProfileRepository,
)
from learnpass.application.services import (
    AssessmentService,
    CredentialIssuer,
    EntitlementManager,
    GatewayCredentialsProvider,
    LearningWorkflow,
    PaymentWorkflow,
    ProfileService,
    WorkflowOrchestrator,
)
from learnpass.domain.entities import (
    CompletionRecord,
    CourseQuestion,
    Credential,
    CredentialTemplate,
    Entitlement,
    GatewayCredentials,
    GatewayOrder,
    LearningRecord,
    PaymentRecord,
    Profile,
)
from learnpass.domain.exceptions import DuplicateEntityError
from learnpass.domain.identity import IdentityResolver
from learnpass.domain.workflow_config import WorkflowConfig

TEST_SECRET = "rzp_test_secret"


# ── Fakes ────────────────────────────────────────────────────────────


class FakeProfileRepository(ProfileRepository):
    def __init__(self, resolver: IdentityResolver):
        self._resolver = resolver
        self.profiles: dict[str, Profile] = {}
        self.fail = False

    async def get_by_id(self, profile_id: str) -> Profile | None:
        return self.profiles.get(profile_id)

    async def get_or_create(self, external_id, full_name, email, role="student") -> str:
        if self.fail:
            raise RuntimeError("profiles table unavailable")
        user_id = self._resolver.resolve(external_id)
        profile = self.profiles.get(user_id)
        if profile is None:
            self.profiles[user_id] = Profile(id=user_id, full_name=full_name, email=email, role=role)
        else:
            profile.merge_missing(full_name=full_name, email=email, role=role)
        return user_id


class FakePaymentRepository(PaymentRepository):
    def __init__(self):
        self.payments: dict[str, PaymentRecord] = {}
        self.fail_on_create = False

    async def get_by_payment_id(self, razorpay_payment_id):
        return self.payments.get(razorpay_payment_id)

    async def create(self, payment):
        if self.fail_on_create:
            raise RuntimeError("payments table unavailable")
        if payment.razorpay_payment_id in self.payments:
            raise DuplicateEntityError(
                "PaymentRecord", "razorpay_payment_id", payment.razorpay_payment_id
            )
        self.payments[payment.razorpay_payment_id] = payment
        return payment

    async def mark_entitlement_applied(self, payment_id, applied_at):
        for payment in self.payments.values():
            if payment.id == payment_id:
                payment.entitlement_applied_at = applied_at


class FakeEntitlementRepository(EntitlementRepository):
    def __init__(self):
        self.rows: dict[str, Entitlement] = {}
        self.upserts = 0
        self.fail_on_upsert = False

    async def get_by_user(self, user_id):
        return self.rows.get(user_id)

    async def upsert(self, entitlement):
        if self.fail_on_upsert:
            raise RuntimeError("user_subscriptions table unavailable")
        self.upserts += 1
        existing = self.rows.get(entitlement.user_id)
        if existing is not None:
            entitlement.id = existing.id
            entitlement.created_at = existing.created_at
        self.rows[entitlement.user_id] = entitlement
        return entitlement

    async def delete_by_user(self, user_id):
        return self.rows.pop(user_id, None) is not None


class FakeLearningRecordRepository(LearningRecordRepository):
    def __init__(self):
        self.records: dict[tuple[str, str], LearningRecord] = {}
        self.fail = False

    async def get(self, user_id, course_id):
        if self.fail:
            raise RuntimeError("user_learning table unavailable")
        return self.records.get((user_id, course_id))

    async def create(self, record):
        key = (record.user_id, record.course_id)
        if key in self.records:
            raise DuplicateEntityError("LearningRecord", "user_id,course_id", str(key))
        self.records[key] = record
        return record

    async def update(self, record):
        self.records[(record.user_id, record.course_id)] = record
        return record


class FakeCourseQuestionRepository(CourseQuestionRepository):
    def __init__(self):
        self.questions: dict[str, list[CourseQuestion]] = {}

    def seed(self, course_id: str, count: int, answer: str = "A") -> list[CourseQuestion]:
        questions = [
            CourseQuestion(
                id=f"q{i}",
                course_id=course_id,
                question=f"Question {i}?",
                correct_answer=answer,
                options=["A", "B", "C", "D"],
                order_index=i,
            )
            for i in range(1, count + 1)
        ]
        self.questions[course_id] = questions
        return questions

    async def list_active(self, course_id):
        return [q for q in self.questions.get(course_id, []) if q.is_active]


class FakeCredentialRepository(CredentialRepository):
    """Enforces one active credential per (user, course), like the partial unique index."""

    def __init__(self):
        self.rows: list[Credential] = []
        self.stale_reads = 0
        self.fail_on_create = False

    async def find_active(self, user_id, course_id):
        if self.stale_reads:
            # Simulates a concurrent writer committing between check and insert.
            self.stale_reads -= 1
            return None
        for row in self.rows:
            if row.user_id == user_id and row.course_id == course_id and row.is_active:
                return row
        return None

    async def create(self, credential):
        if self.fail_on_create:
            raise RuntimeError("user_certificates table unavailable")
        for row in self.rows:
            if (row.user_id, row.course_id) == (credential.user_id, credential.course_id) and row.is_active:
                raise DuplicateEntityError("Credential", "user_id,course_id", credential.user_id)
        self.rows.append(credential)
        return credential

    async def list_active_for_user(self, user_id):
        return [row for row in self.rows if row.user_id == user_id and row.is_active]

    async def get_by_verification_code(self, code):
        return next((row for row in self.rows if row.verification_code == code), None)


class FakeCredentialTemplateRepository(CredentialTemplateRepository):
    def __init__(self):
        self.templates: list[CredentialTemplate] = []

    async def get_default(self):
        return next((t for t in self.templates if t.is_default and t.is_active), None)

    async def create(self, template):
        if template.is_default and await self.get_default() is not None:
            raise DuplicateEntityError("CredentialTemplate", "is_default", "true")
        self.templates.append(template)
        return template


class FakeCompletionTrackingRepository(CompletionTrackingRepository):
    def __init__(self, passing_score: int = 70):
        self.rows: dict[tuple[str, str], CompletionRecord] = {}
        self.passing_score = passing_score
        self.fail = False

    async def record_completion(self, external_id, course_id, course_name, course_complete, assessment_score):
        if self.fail:
            raise RuntimeError("course_certificate_management table unavailable")
        passed = assessment_score >= self.passing_score
        key = (external_id, course_id)
        existing = self.rows.get(key)
        record = CompletionRecord(
            external_user_id=external_id,
            course_id=course_id,
            course_name=course_name,
            course_complete=course_complete,
            assessment_pass=passed,
            assessment_score=assessment_score,
        )
        if existing is not None:
            record.id = existing.id
        self.rows[key] = record

    async def list_passed(self, external_id):
        return [
            r for (ext, _), r in self.rows.items()
            if ext == external_id and r.course_complete and r.assessment_pass
        ]


class FakePaymentGateway(PaymentGateway):
    def __init__(self):
        self.calls: list[dict] = []

    @property
    def provider_name(self) -> str:
        return "fake"

    async def create_order(self, credentials, amount_minor_units, currency, receipt=None):
        self.calls.append({
            "key_id": credentials.key_id,
            "amount": amount_minor_units,
            "currency": currency,
            "receipt": receipt,
        })
        raw = {
            "id": "order_test_1",
            "entity": "order",
            "amount": amount_minor_units,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
        }
        return GatewayOrder(
            id=raw["id"], amount=amount_minor_units, currency=currency,
            receipt=receipt, status="created", raw=raw,
        )


# ── Fixtures ─────────────────────────────────────────────────────────


@pytest.fixture
def config() -> WorkflowConfig:
    return WorkflowConfig()


@pytest.fixture
def resolver(config: WorkflowConfig) -> IdentityResolver:
    return IdentityResolver(config.identity_namespace, config.identity_resolver_version)


@pytest.fixture
def profile_repo(resolver) -> FakeProfileRepository:
    return FakeProfileRepository(resolver)


@pytest.fixture
def payment_repo() -> FakePaymentRepository:
    return FakePaymentRepository()


@pytest.fixture
def entitlement_repo() -> FakeEntitlementRepository:
    return FakeEntitlementRepository()


@pytest.fixture
def learning_repo() -> FakeLearningRecordRepository:
    return FakeLearningRecordRepository()


@pytest.fixture
def question_repo() -> FakeCourseQuestionRepository:
    return FakeCourseQuestionRepository()


@pytest.fixture
def credential_repo() -> FakeCredentialRepository:
    return FakeCredentialRepository()


@pytest.fixture
def template_repo() -> FakeCredentialTemplateRepository:
    return FakeCredentialTemplateRepository()


@pytest.fixture
def completion_repo(config) -> FakeCompletionTrackingRepository:
    return FakeCompletionTrackingRepository(config.passing_score)


@pytest.fixture
def gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def issuer(credential_repo, template_repo, completion_repo, config) -> CredentialIssuer:
    return CredentialIssuer(credential_repo, template_repo, completion_repo, config)


@pytest.fixture
def payment_workflow(
    resolver, profile_repo, payment_repo, entitlement_repo, gateway, config
) -> PaymentWorkflow:
    return PaymentWorkflow(
        resolver=resolver,
        credentials=GatewayCredentialsProvider(
            configured=GatewayCredentials("rzp_test_key", TEST_SECRET)
        ),
        gateway=gateway,
        profiles=ProfileService(profile_repo),
        payments=payment_repo,
        entitlements=EntitlementManager(entitlement_repo, config),
        config=config,
    )


@pytest.fixture
def learning_workflow(
    resolver, profile_repo, learning_repo, question_repo, issuer, config
) -> LearningWorkflow:
    return LearningWorkflow(
        resolver=resolver,
        profiles=ProfileService(profile_repo),
        learning=learning_repo,
        assessments=AssessmentService(question_repo, config),
        issuer=issuer,
    )


@pytest.fixture
def orchestrator(payment_workflow, learning_workflow) -> WorkflowOrchestrator:
    return WorkflowOrchestrator(payment_workflow, learning_workflow)
