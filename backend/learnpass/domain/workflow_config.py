"""Immutable, process-wide workflow configuration."""

from dataclasses import dataclass

DEFAULT_IDENTITY_NAMESPACE = "1b671a64-40d5-491e-99b0-da01ff1f3341"
DEFAULT_PASSING_SCORE = 70


@dataclass(frozen=True)
class WorkflowConfig:
    """Values every workflow component receives at construction.

    Built once from Settings at startup and never mutated afterwards.
    """

    identity_namespace: str = DEFAULT_IDENTITY_NAMESPACE
    identity_resolver_version: str = "v1"
    passing_score: int = DEFAULT_PASSING_SCORE
    subscription_cycle_months: int = 1
    enforce_payment_idempotency: bool = True
