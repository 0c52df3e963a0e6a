"""Payment workflow: order creation passthrough and payment verification saga."""

import logging
from datetime import datetime, timezone

from learnpass.application.interfaces import PaymentGateway, PaymentRepository
from learnpass.application.schemas.workflow import CreateOrderParams, VerifyPaymentParams
from learnpass.application.services.entitlement_service import EntitlementManager
from learnpass.application.services.gateway_credentials_service import GatewayCredentialsProvider
from learnpass.application.services.profile_service import ProfileService
from learnpass.application.services.workflow_steps import StepTracker, WorkflowResult
from learnpass.domain.entities import Entitlement, PaymentRecord
from learnpass.domain.exceptions import AuthenticityError, DuplicateEntityError
from learnpass.domain.identity import IdentityResolver
from learnpass.domain.signature import verify_payment_signature
from learnpass.domain.workflow_config import WorkflowConfig
from learnpass.infrastructure.logging.workflow_logger import WorkflowLogger, WorkflowStage

logger = logging.getLogger(__name__)
plog = WorkflowLogger("PaymentWorkflow")


def _subscription_payload(entitlement: Entitlement) -> dict:
    return {
        "plan_type": entitlement.plan_type,
        "status": entitlement.status.value,
        "current_period_start": entitlement.current_period_start.isoformat(),
        "current_period_end": entitlement.current_period_end.isoformat(),
        "was_granted": entitlement.was_granted,
    }


class PaymentWorkflow:
    """Runs the payment actions.

    verify_payment is a forward-only saga:
        resolve identity → verify signature → ensure profile (best effort)
        → record payment → grant/extend entitlement → mark payment applied

    A failure after the payment row is written leaves that row in place.
    With idempotency enforced, the gateway payment id is the idempotency
    key: a retry never writes a second row, extends only if the earlier
    attempt did not, and is otherwise a no-op.
    """

    def __init__(
        self,
        resolver: IdentityResolver,
        credentials: GatewayCredentialsProvider,
        gateway: PaymentGateway,
        profiles: ProfileService,
        payments: PaymentRepository,
        entitlements: EntitlementManager,
        config: WorkflowConfig,
    ):
        self._resolver = resolver
        self._credentials = credentials
        self._gateway = gateway
        self._profiles = profiles
        self._payments = payments
        self._entitlements = entitlements
        self._config = config

    async def create_order(self, params: CreateOrderParams) -> WorkflowResult:
        credentials = await self._credentials.get()
        plog.step_start(
            WorkflowStage.GATEWAY, "Creating order",
            amount=params.amount, currency=params.currency, receipt=params.receipt,
        )
        order = await self._gateway.create_order(
            credentials,
            amount_minor_units=params.amount_minor_units,
            currency=params.currency,
            receipt=params.receipt,
        )
        plog.step_complete(WorkflowStage.GATEWAY, "Order created", order_id=order.id)
        return WorkflowResult(data=order.raw or {
            "id": order.id,
            "amount": order.amount,
            "currency": order.currency,
            "receipt": order.receipt,
            "status": order.status,
        })

    async def verify_payment(self, params: VerifyPaymentParams) -> WorkflowResult:
        plog.separator("verify_payment")
        steps = StepTracker(plog)

        user_id = self._resolver.resolve(params.external_id)
        plog.step_complete(WorkflowStage.IDENTITY, "Resolved identity",
                           external_id=params.external_id, user_id=user_id)

        credentials = await self._credentials.get()
        plog.step_start(WorkflowStage.SIGNATURE, "Verifying payment signature",
                        order_id=params.razorpay_order_id)
        if not verify_payment_signature(
            params.razorpay_order_id,
            params.razorpay_payment_id,
            params.razorpay_signature,
            credentials.key_secret,
        ):
            plog.step_error(WorkflowStage.SIGNATURE, "Payment signature verification failed")
            raise AuthenticityError()
        plog.step_complete(WorkflowStage.SIGNATURE, "Payment signature verified")

        with steps.best_effort(WorkflowStage.PROFILE, "profile"):
            await self._profiles.ensure_for_payment(params.external_id, params.user_email)

        with steps.critical(WorkflowStage.PAYMENT, "payment", "Failed to store payment record"):
            payment, replayed = await self._record_payment(user_id, params)

        if replayed and payment.user_id != user_id:
            plog.step_error(WorkflowStage.PAYMENT, "Payment already recorded for another identity")
            raise AuthenticityError("Payment already recorded for a different account")

        if self._config.enforce_payment_idempotency and payment.entitlement_applied:
            plog.step_complete(WorkflowStage.PAYMENT, "Payment already processed, nothing to apply",
                               payment_id=payment.razorpay_payment_id)
            with steps.critical(WorkflowStage.ENTITLEMENT, "entitlement", "Failed to read subscription"):
                entitlement = await self._entitlements.get(user_id)
            return steps.result({
                "message": "Payment already processed",
                "alreadyProcessed": True,
                "subscription": _subscription_payload(entitlement) if entitlement else None,
            })

        with steps.critical(WorkflowStage.ENTITLEMENT, "entitlement", "Failed to manage subscription"):
            entitlement = await self._entitlements.grant_or_extend(user_id, params.plan_type)
        plog.step_complete(WorkflowStage.ENTITLEMENT, "Subscription managed",
                           plan=entitlement.plan_type,
                           until=entitlement.current_period_end.isoformat())

        if self._config.enforce_payment_idempotency:
            with steps.best_effort(WorkflowStage.PAYMENT, "payment_marker"):
                await self._payments.mark_entitlement_applied(payment.id, datetime.now(timezone.utc))

        plog.step_complete(WorkflowStage.COMPLETE, "Payment verified and subscription activated")
        return steps.result({
            "message": "Payment verified and subscription activated",
            "alreadyProcessed": False,
            "subscription": _subscription_payload(entitlement),
        })

    async def _record_payment(
        self, user_id: str, params: VerifyPaymentParams
    ) -> tuple[PaymentRecord, bool]:
        """Insert the payment row, or return the one already recorded for this payment id."""
        existing = await self._payments.get_by_payment_id(params.razorpay_payment_id)
        if existing is not None:
            plog.detail("Payment record already present", payment_id=existing.razorpay_payment_id)
            return existing, True

        record = PaymentRecord(
            user_id=user_id,
            razorpay_order_id=params.razorpay_order_id,
            razorpay_payment_id=params.razorpay_payment_id,
            razorpay_signature=params.razorpay_signature,
            plan_type=params.plan_type,
            amount=params.amount,
            currency=params.currency,
        )
        try:
            created = await self._payments.create(record)
        except DuplicateEntityError:
            existing = await self._payments.get_by_payment_id(params.razorpay_payment_id)
            if existing is None:
                raise
            return existing, True
        plog.step_complete(WorkflowStage.PAYMENT, "Payment record stored", id=created.id)
        return created, False
