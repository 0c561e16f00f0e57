"""
Shared FastAPI dependencies.

Centralizes construction of the payment collaborators so routers (and
tests, through app.dependency_overrides) have a single place to swap them.
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from database import get_db
from services.gateway_client import RazorpayGatewayClient
from services.order_ledger import OrderLedger
from services.payment_service import PaymentService


@lru_cache(maxsize=1)
def get_gateway_client() -> RazorpayGatewayClient:
    """One SDK client per process, authenticated with the API key pair."""
    return RazorpayGatewayClient(
        key_id=settings.razorpay_key_id,
        key_secret=settings.razorpay_key_secret,
        timeout_seconds=settings.gateway_timeout_seconds,
    )


def get_order_ledger(db: AsyncSession = Depends(get_db)) -> OrderLedger:
    return OrderLedger(db)


def _payment_service(channel: str):
    def _build(
        gateway=Depends(get_gateway_client),
        ledger: OrderLedger = Depends(get_order_ledger),
    ) -> PaymentService:
        return PaymentService(settings.payment_config(channel), gateway, ledger)

    _build.__name__ = f"get_{channel}_payment_service"
    return _build


# Checkout and donation share RAZORPAY_KEY_SECRET; travel uses RAZORPAY_SECRET
get_checkout_payment_service = _payment_service("checkout")
get_donation_payment_service = _payment_service("donation")
get_travel_payment_service = _payment_service("travel")
