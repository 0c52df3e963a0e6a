"""Razorpay Orders API client: implements the PaymentGateway interface.

Creates orders at https://api.razorpay.com/v1/orders with HTTP basic auth
(key id and key secret). Amounts are sent in minor currency units.
"""

import logging

import httpx

from learnpass.application.interfaces import PaymentGateway
from learnpass.domain.entities import GatewayCredentials, GatewayOrder
from learnpass.domain.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class RazorpayClient(PaymentGateway):
    """Adapter for the Razorpay REST API.

    Credentials are passed per call since they may come from settings or
    from the admin credentials row.
    """

    def __init__(
        self,
        base_url: str = "https://api.razorpay.com/v1",
        timeout: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._http_client = http_client

    @property
    def provider_name(self) -> str:
        return "razorpay"

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def create_order(
        self,
        credentials: GatewayCredentials,
        amount_minor_units: int,
        currency: str,
        receipt: str | None = None,
    ) -> GatewayOrder:
        payload: dict = {"amount": amount_minor_units, "currency": currency}
        if receipt is not None:
            payload["receipt"] = receipt

        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.post(
                    f"{self._base_url}/orders",
                    json=payload,
                    auth=httpx.BasicAuth(credentials.key_id, credentials.key_secret),
                )
            except httpx.HTTPError as exc:
                logger.error("Razorpay request failed: %s", exc)
                raise UpstreamError(self.provider_name, 0, f"Failed to create order: {exc}") from exc

            if not response.is_success:
                self._raise_upstream_error(response)

            data = self._order_body(response)
            logger.info("Razorpay order created: %s", data["id"])
            return GatewayOrder(
                id=data["id"],
                amount=data.get("amount", amount_minor_units),
                currency=data.get("currency", currency),
                receipt=data.get("receipt"),
                status=data.get("status"),
                raw=data,
            )
        finally:
            if should_close:
                await client.aclose()

    def _order_body(self, response: httpx.Response) -> dict:
        """Parse a successful order response; anything without an order id is an upstream fault."""
        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict) or not data.get("id"):
            logger.error("Razorpay returned an unexpected order body (%s)", response.status_code)
            raise UpstreamError(
                provider=self.provider_name,
                status_code=response.status_code,
                message="Failed to create order: unexpected response from gateway",
            )
        return data

    def _raise_upstream_error(self, response: httpx.Response) -> None:
        """Raise UpstreamError carrying Razorpay's ``error.description``."""
        message = "Failed to create order"
        try:
            body = response.json()
        except ValueError:
            body = None
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict) and error.get("description"):
            message = str(error["description"])

        logger.error("Razorpay order creation failed (%s): %s", response.status_code, message)
        raise UpstreamError(
            provider=self.provider_name,
            status_code=response.status_code,
            message=message,
        )
