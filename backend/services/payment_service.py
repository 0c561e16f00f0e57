"""
Payment Service — order creation and gateway signature verification.

Handles:
    1. create_order: mint a remote order on the gateway, then record it on
       the ledger as Pending (never the other way round)
    2. verify_payment: recompute HMAC-SHA256(secret, "order_id|payment_id"),
       compare in constant time, then move the order Pending -> Paid

Order.payment_status is owned by this module. Verifications for the same
order id are serialized in-process by OrderLocks and across processes by
the ledger's compare-and-set update.
"""
from __future__ import annotations

import asyncio
import hashlib
import hmac
import logging
import uuid
from collections import defaultdict
from contextlib import asynccontextmanager
from dataclasses import dataclass
from decimal import Decimal
from typing import AsyncIterator

from config import PaymentConfig
from db_models import Order
from domain.constants import (
    MINOR_UNITS_PER_MAJOR,
    PURPOSE_CHECKOUT,
    RECEIPT_MAX_LENGTH,
    RECEIPT_PREFIX,
    SIGNATURE_SEPARATOR,
)
from domain.enums import PaymentStatus, VerificationResult
from domain.errors import ValidationError
from services.order_ledger import OrderLedger

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════
# Signatures
# ════════════════════════════════════════════════════════════════════


def signature_digest(secret: str, order_id: str, payment_id: str) -> bytes:
    """Raw HMAC-SHA256 digest over "<order_id>|<payment_id>"."""
    message = f"{order_id}{SIGNATURE_SEPARATOR}{payment_id}"
    return hmac.new(
        secret.encode("utf-8"),
        message.encode("utf-8"),
        hashlib.sha256,
    ).digest()


def compute_signature(secret: str, order_id: str, payment_id: str) -> str:
    """Hex signature exactly as the gateway issues it."""
    return signature_digest(secret, order_id, payment_id).hex()


def signature_matches(secret: str, order_id: str, payment_id: str, signature: str) -> bool:
    """
    Constant-time check of a caller-supplied hex signature.

    The text must equal the lowercase hex digest exactly; uppercase or
    spaced variants of the same bytes are mismatches. Fails closed on a
    missing secret or non-string input.
    """
    if not secret:
        logger.error("Gateway secret not configured, rejecting payment signature")
        return False
    if not all(isinstance(v, str) for v in (order_id, payment_id, signature)):
        return False

    expected = compute_signature(secret, order_id, payment_id).encode("ascii")
    return hmac.compare_digest(expected, signature.encode("utf-8"))


# ════════════════════════════════════════════════════════════════════
# Amounts & receipts
# ════════════════════════════════════════════════════════════════════


def to_minor_units(amount: Decimal | int | str) -> int:
    """
    Convert a major-unit amount (₹) to minor units (paise).

    Raises:
        ValidationError for non-positive amounts or fractional paise
    """
    value = Decimal(str(amount)) * MINOR_UNITS_PER_MAJOR
    if value <= 0:
        raise ValidationError("must be greater than zero", field="amount")
    if value != value.to_integral_value():
        raise ValidationError("supports at most two decimal places", field="amount")
    return int(value)


def make_receipt() -> str:
    return f"{RECEIPT_PREFIX}{uuid.uuid4().hex}"[:RECEIPT_MAX_LENGTH]


# ════════════════════════════════════════════════════════════════════
# Per-order serialization
# ════════════════════════════════════════════════════════════════════


class OrderLocks:
    """
    asyncio locks keyed by order id.

    A lock lives only while someone holds or waits for it, so the registry
    does not grow with the number of orders ever verified.
    """

    def __init__(self):
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = defaultdict(int)

    @asynccontextmanager
    async def hold(self, order_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(order_id, asyncio.Lock())
        self._users[order_id] += 1
        try:
            async with lock:
                yield
        finally:
            self._users[order_id] -= 1
            if self._users[order_id] == 0:
                del self._users[order_id]
                self._locks.pop(order_id, None)

    def __len__(self) -> int:
        return len(self._locks)


# Shared by every PaymentService in this process
order_locks = OrderLocks()


# ════════════════════════════════════════════════════════════════════
# Service
# ════════════════════════════════════════════════════════════════════


@dataclass
class OrderMetadata:
    """Traveler / donor details stored alongside an order."""
    purpose: str = PURPOSE_CHECKOUT
    package_name: str | None = None
    payer_name: str | None = None
    payer_email: str | None = None
    payer_phone: str | None = None

    def as_notes(self) -> dict:
        """Gateway-side notes (non-sensitive labels only)."""
        notes = {"purpose": self.purpose}
        if self.package_name:
            notes["package"] = self.package_name
        return notes


class PaymentService:
    """Orchestrates order creation and payment confirmation."""

    def __init__(
        self,
        config: PaymentConfig,
        gateway,
        ledger: OrderLedger,
        locks: OrderLocks | None = None,
    ):
        self.config = config
        self.gateway = gateway
        self.ledger = ledger
        self.locks = locks or order_locks

    async def create_order(
        self,
        amount: int,
        currency: str,
        metadata: OrderMetadata | None = None,
    ) -> dict:
        """
        Mint a gateway order and record it as Pending.

        Args:
            amount: Positive integer in minor currency units
            currency: One of config.supported_currencies

        Returns:
            {orderId, amount, currency, keyId}

        Raises:
            ValidationError: bad amount or unsupported currency
            GatewayError: remote creation failed (nothing is written)
            DuplicateOrderIdError: gateway reused an order id
        """
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError("must be a positive integer in minor units", field="amount")

        currency = (currency or "").upper()
        if currency not in self.config.supported_currencies:
            raise ValidationError(
                f"unsupported currency '{currency}'",
                field="currency",
                details={"supported": list(self.config.supported_currencies)},
            )

        metadata = metadata or OrderMetadata()
        receipt = make_receipt()

        remote = await self.gateway.create_remote_order(
            amount,
            currency,
            receipt=receipt,
            notes=metadata.as_notes(),
        )
        order_id = remote["id"]

        order = Order(
            order_id=order_id,
            amount=amount,
            currency=currency,
            purpose=metadata.purpose,
            receipt=receipt,
            package_name=metadata.package_name,
            payer_name=metadata.payer_name,
            payer_email=metadata.payer_email,
            payer_phone=metadata.payer_phone,
            payment_status=PaymentStatus.PENDING.value,
        )
        await self.ledger.insert(order)

        logger.info(f"Order recorded: {order_id} ({amount} {currency}, {metadata.purpose})")

        return {
            "orderId": order_id,
            "amount": amount,
            "currency": currency,
            "keyId": self.config.key_id,
        }

    async def verify_payment(
        self,
        order_id: str,
        payment_id: str,
        signature: str,
    ) -> VerificationResult:
        """
        Verify a payment confirmation and mark the order Paid.

        Never raises for expected outcomes; database faults propagate.
        """
        if not signature_matches(self.config.secret, order_id, payment_id, signature):
            logger.warning(f"Signature mismatch for order {str(order_id)[:40]}")
            return VerificationResult.SIGNATURE_MISMATCH

        async with self.locks.hold(order_id):
            order = await self.ledger.find_by_order_id(order_id)
            if order is None:
                logger.warning(f"Valid signature for unknown order {order_id}")
                return VerificationResult.UNKNOWN_ORDER

            if order.purpose not in self.config.purposes:
                # Signed with another channel's secret; treat as unknown here
                logger.warning(
                    f"Order {order_id} ({order.purpose}) cannot be confirmed on this channel"
                )
                return VerificationResult.UNKNOWN_ORDER

            if order.payment_status == PaymentStatus.PAID.value:
                logger.info(f"Order {order_id} already paid, idempotent confirmation")
                return VerificationResult.ALREADY_VERIFIED

            transitioned = await self.ledger.update_status(
                order_id,
                PaymentStatus.PENDING,
                PaymentStatus.PAID,
                payment_id=payment_id,
            )

        if not transitioned:
            # Another worker process won the compare-and-set
            return VerificationResult.ALREADY_VERIFIED

        logger.info(f"Payment verified for order {order_id}")
        return VerificationResult.VERIFIED
