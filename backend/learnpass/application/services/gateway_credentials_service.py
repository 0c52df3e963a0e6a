"""Resolves the payment gateway key pair from settings or stored admin credentials."""

import logging

from learnpass.application.interfaces import AdminCredentialsRepository
from learnpass.domain.entities import GatewayCredentials
from learnpass.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class GatewayCredentialsProvider:
    """Settings win; the admin_credentials row is the fallback."""

    def __init__(
        self,
        configured: GatewayCredentials | None = None,
        repository: AdminCredentialsRepository | None = None,
    ):
        self._configured = configured
        self._repository = repository

    async def get(self) -> GatewayCredentials:
        if self._configured and self._configured.key_id and self._configured.key_secret:
            return self._configured

        stored: GatewayCredentials | None = None
        if self._repository is not None:
            try:
                stored = await self._repository.get_gateway_credentials()
            except Exception as exc:
                logger.error("Could not read stored gateway credentials: %s", exc)
                raise ConfigurationError(
                    "Razorpay credentials could not be loaded"
                ) from exc

        if stored is None or not stored.key_id or not stored.key_secret:
            raise ConfigurationError("Razorpay credentials not configured in admin settings")
        return stored
