"""
Order Ledger — persistence contract for payment orders.

Every write commits immediately: the ledger is the unit of durability for
the payment flow. Database errors other than the unique-id violation
propagate unchanged.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from db_models import Order
from domain.enums import PaymentStatus
from domain.errors import DuplicateOrderIdError

logger = logging.getLogger(__name__)


class OrderLedger:
    """Order store backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, order: Order) -> Order:
        """
        Persist a new order.

        Raises:
            DuplicateOrderIdError if order.order_id is already recorded
        """
        if await self.find_by_order_id(order.order_id) is not None:
            raise DuplicateOrderIdError(order.order_id)

        self.db.add(order)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same id
            await self.db.rollback()
            raise DuplicateOrderIdError(order.order_id) from e

        await self.db.refresh(order)
        return order

    async def find_by_order_id(self, order_id: str) -> Order | None:
        result = await self.db.execute(
            select(Order)
            .where(Order.order_id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def update_status(
        self,
        order_id: str,
        expected: PaymentStatus,
        new: PaymentStatus,
        *,
        payment_id: str | None = None,
    ) -> bool:
        """
        Compare-and-set the payment status.

        The UPDATE is guarded on the current status, so of any number of
        concurrent callers at most one sees True.

        Returns:
            True if this call performed the transition, False otherwise
        """
        values = {"payment_status": new.value}
        if new is PaymentStatus.PAID:
            values["paid_at"] = datetime.utcnow()
            if payment_id:
                values["payment_id"] = payment_id

        orders = Order.__table__
        result = await self.db.execute(
            update(orders)
            .where(
                orders.c.order_id == order_id,
                orders.c.payment_status == expected.value,
            )
            .values(**values)
        )
        changed = result.rowcount == 1
        await self.db.commit()

        if changed:
            logger.info(f"Order {order_id}: {expected.value} -> {new.value}")
        return changed
