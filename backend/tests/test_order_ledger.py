"""
Tests for the Order Ledger persistence contract.

Tests: insert uniqueness, lookup, compare-and-set status transition.
"""
import pytest
from sqlalchemy.exc import IntegrityError

from db_models import Order
from domain.enums import PaymentStatus
from domain.errors import DuplicateOrderIdError


def _order(order_id: str = "order_ledger_1", amount: int = 10_000) -> Order:
    return Order(order_id=order_id, amount=amount, currency="INR", purpose="checkout")


@pytest.mark.asyncio
async def test_insert_defaults_to_pending(ledger):
    order = await ledger.insert(_order())

    assert order.id is not None
    assert order.payment_status == "Pending"
    assert order.created_at is not None


@pytest.mark.asyncio
async def test_find_missing_returns_none(ledger):
    assert await ledger.find_by_order_id("order_nope") is None


@pytest.mark.asyncio
async def test_duplicate_insert_rejected(ledger):
    await ledger.insert(_order())

    with pytest.raises(DuplicateOrderIdError) as exc_info:
        await ledger.insert(_order(amount=99))

    assert exc_info.value.order_id == "order_ledger_1"
    assert (await ledger.find_by_order_id("order_ledger_1")).amount == 10_000


@pytest.mark.asyncio
async def test_order_id_unique_constraint(db_session):
    """The unique index backs the ledger's duplicate check."""
    db_session.add(_order("order_same"))
    await db_session.commit()

    db_session.add(_order("order_same"))
    with pytest.raises(IntegrityError):
        await db_session.commit()


@pytest.mark.asyncio
async def test_compare_and_set_only_once(ledger):
    await ledger.insert(_order())

    first = await ledger.update_status(
        "order_ledger_1", PaymentStatus.PENDING, PaymentStatus.PAID, payment_id="pay_1"
    )
    second = await ledger.update_status(
        "order_ledger_1", PaymentStatus.PENDING, PaymentStatus.PAID, payment_id="pay_2"
    )

    assert first is True
    assert second is False
    order = await ledger.find_by_order_id("order_ledger_1")
    assert order.payment_status == "Paid"
    assert order.payment_id == "pay_1"
    assert order.paid_at is not None


@pytest.mark.asyncio
async def test_update_status_unknown_order(ledger):
    changed = await ledger.update_status("order_nope", PaymentStatus.PENDING, PaymentStatus.PAID)
    assert changed is False
    assert await ledger.find_by_order_id("order_nope") is None


@pytest.mark.asyncio
async def test_find_reflects_conditional_update(ledger):
    """A previously loaded instance is refreshed by the next lookup."""
    loaded = await ledger.insert(_order())
    assert loaded.payment_status == "Pending"

    await ledger.update_status("order_ledger_1", PaymentStatus.PENDING, PaymentStatus.PAID)

    again = await ledger.find_by_order_id("order_ledger_1")
    assert again is loaded
    assert again.payment_status == "Paid"
