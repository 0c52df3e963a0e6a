"""HMAC-SHA256 authenticity check for payment gateway callbacks."""

import hashlib
import hmac


def compute_payment_signature(order_id: str, payment_id: str, secret: str) -> str:
    """Hex HMAC-SHA256 of ``"<order_id>|<payment_id>"`` keyed by ``secret``."""
    message = f"{order_id}|{payment_id}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def verify_payment_signature(
    order_id: str | None,
    payment_id: str | None,
    provided_signature: str | None,
    secret: str,
) -> bool:
    """Return True iff ``provided_signature`` is the expected hex digest.

    Never raises: missing parts simply fail verification.
    """
    if not order_id or not payment_id or not provided_signature or not secret:
        return False
    expected = compute_payment_signature(order_id, payment_id, secret)
    return hmac.compare_digest(expected.encode("utf-8"), provided_signature.encode("utf-8"))
