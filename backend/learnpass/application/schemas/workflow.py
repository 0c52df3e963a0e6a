"""Pydantic DTOs for the action-routed workflow endpoint."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class WorkflowEnvelope(BaseModel):
    """Response envelope returned for every action."""

    success: bool
    data: Any | None = None
    error: str | None = None
    details: str | None = None
    degraded: list[str] = Field(default_factory=list)


class _ActionParams(BaseModel):
    model_config = ConfigDict(extra="ignore")


class CreateOrderParams(_ActionParams):
    amount: float = Field(..., gt=0, examples=[999])
    currency: str = Field("INR", min_length=3, max_length=3)
    receipt: str | None = Field(None, max_length=40)

    @property
    def amount_minor_units(self) -> int:
        return round(self.amount * 100)


class VerifyPaymentParams(_ActionParams):
    razorpay_order_id: str = Field(..., min_length=1)
    razorpay_payment_id: str = Field(..., min_length=1)
    razorpay_signature: str = Field(..., min_length=1)
    plan_type: str = Field("pro", min_length=1)
    amount: float | None = None
    currency: str = "INR"
    user_email: str = Field(..., min_length=3)
    external_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("user_id", "clerkUserId", "external_id"),
    )


class AnswerSchema(_ActionParams):
    question_id: str | int = Field(..., validation_alias=AliasChoices("questionId", "question_id"))
    selected_answer: Any = Field(None, validation_alias=AliasChoices("selectedAnswer", "selected_answer"))


class LearningParams(_ActionParams):
    """Parameters shared by fetch, update and evaluateAssessment."""

    external_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("clerkUserId", "user_id", "external_id"),
    )
    course_id: str | None = Field(None, validation_alias=AliasChoices("courseId", "course_id"))
    course_name: str | None = Field(None, validation_alias=AliasChoices("courseName", "course_name"))
    progress: dict[str, Any] | None = Field(
        None, validation_alias=AliasChoices("progress", "course_progress")
    )
    completed_modules: int | None = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("completed_modules_count", "completed_modules", "completedModules"),
    )
    total_modules: int | None = Field(
        None,
        ge=0,
        validation_alias=AliasChoices("totalModules", "total_modules_count", "total_modules"),
    )
    answers: list[AnswerSchema] | None = None
