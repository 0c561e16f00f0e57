"""
Payment Gateway Client — thin wrapper around the Razorpay SDK.

Only order creation goes through the gateway. Signature verification is
done locally by PaymentService with the shared secret; the SDK's own
verification helper is deliberately not used so the comparison stays
under our control.
"""
from __future__ import annotations

import asyncio
import logging

import razorpay
import requests

from domain.errors import GatewayError
from services.async_executor import run_blocking

logger = logging.getLogger(__name__)


class TimeoutSession(requests.Session):
    """requests.Session that applies a default timeout to every call.

    The SDK passes no timeout of its own, so without this a hung gateway
    would keep an executor thread busy after the caller stopped waiting.
    """

    def __init__(self, timeout: float):
        super().__init__()
        self.timeout = timeout

    def request(self, method, url, **kwargs):
        kwargs.setdefault("timeout", self.timeout)
        return super().request(method, url, **kwargs)


class RazorpayGatewayClient:
    """Creates remote payment orders on Razorpay."""

    def __init__(self, key_id: str, key_secret: str, timeout_seconds: float = 15.0, client=None):
        self._key_id = key_id
        self._timeout = timeout_seconds
        self._client = client or razorpay.Client(
            session=TimeoutSession(timeout_seconds),
            auth=(key_id, key_secret),
        )

    @property
    def key_id(self) -> str:
        """Public key id handed to checkout clients."""
        return self._key_id

    async def create_remote_order(
        self,
        amount: int,
        currency: str,
        *,
        receipt: str | None = None,
        notes: dict | None = None,
    ) -> dict:
        """
        Mint a remote order.

        Args:
            amount: Minor currency units (paise)
            currency: 3-letter currency code

        Returns:
            The gateway order dict; always contains a non-empty "id".

        Raises:
            GatewayError on network/auth/validation failures, timeouts or a
            response without an order id.
        """
        payload = {
            "amount": amount,
            "currency": currency,
            "payment_capture": 1,
            "notes": notes or {},
        }
        if receipt:
            payload["receipt"] = receipt

        try:
            order = await run_blocking(
                self._client.order.create,
                data=payload,
                timeout=self._timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Razorpay order.create timed out after {self._timeout}s")
            raise GatewayError("Payment gateway timed out") from e
        except Exception as e:
            # SDK raises BadRequestError/ServerError/GatewayError, requests raises
            # connection errors. Never echo the raw error to the client.
            logger.error(f"Razorpay order.create failed: {type(e).__name__}: {e}")
            raise GatewayError(
                "Payment gateway rejected the order",
                details={"reason": type(e).__name__},
            ) from e

        if not isinstance(order, dict) or not order.get("id"):
            logger.error("Razorpay order.create returned no order id")
            raise GatewayError("Payment gateway returned a malformed order")

        logger.info(f"Remote order created: {order['id']} ({amount} {currency})")
        return order
