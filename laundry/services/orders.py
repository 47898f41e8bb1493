from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional

from laundry.domain.entities import Repository
from laundry.domain.models import (
    Order,
    Transaction,
    User,
    PAYMENT_PAID,
    PAYMENT_PENDING,
    STATUS_PROCESSING,
    STATUS_QUEUED,
)
from laundry.domain.utils import epoch_millis, utc_now

logger = logging.getLogger(__name__)

ESTIMATED_TURNAROUND = timedelta(days=2)

# Payment method id -> name stamped on the transaction.
PAYMENT_METHODS: Dict[str, str] = {
    "bank": "Transfer Bank",
    "ewallet": "E-Wallet",
    "cash": "Tunai",
}


class OrderService:
    """
    Order placement, payment and status changes.

    An order and its transaction are written as two separate collection
    writes; an interruption in between can leave an order without a
    transaction, or a paid transaction whose order is still queued.
    """

    def __init__(self, repo: Repository, clock: Callable[[], datetime] = utc_now):
        self.repo = repo
        self._clock = clock

    def place_order(self, customer: User, package_id: str, weight: float) -> Optional[Order]:
        """
        Create a queued order and its pending transaction.

        Returns None without writing anything when the package does not exist.
        """
        package = self.repo.get_package_by_id(package_id)
        if package is None:
            logger.warning(f"Order not placed: package '{package_id}' not found")
            return None

        now = self._clock()
        millis = epoch_millis(now)
        total_cost = package.price * weight

        order = Order(
            id=f"ORD-{millis}",
            customer_id=customer.id,
            customer_name=customer.name,
            package_id=package.id,
            package_name=package.name,
            weight=weight,
            total_cost=total_cost,
            status=STATUS_QUEUED,
            created_at=now,
            updated_at=now,
            estimated_time=now + ESTIMATED_TURNAROUND,
        )
        self.repo.add_order(order)

        transaction = Transaction(
            id=f"TRX-{millis}",
            order_id=order.id,
            customer_id=customer.id,
            customer_name=customer.name,
            amount=total_cost,
            payment_method="",
            payment_status=PAYMENT_PENDING,
            date=now,
        )
        self.repo.add_transaction(transaction)

        logger.info(f"Order {order.id} placed by {customer.username} ({weight} kg {package.name})")
        return order

    def complete_payment(self, order_id: str, payment_method: str) -> Optional[Transaction]:
        """
        Mark the order's transaction as paid and move the order to Processing.

        Returns None if the order has no transaction. A transaction that is
        already paid is returned unchanged and the order is left alone.
        Method ids outside PAYMENT_METHODS are recorded with an empty name.
        """
        transaction = self.repo.get_transaction_by_order_id(order_id)
        if transaction is None:
            logger.warning(f"Payment ignored: no transaction for order {order_id}")
            return None
        if transaction.payment_status == PAYMENT_PAID:
            return transaction

        method_name = PAYMENT_METHODS.get(payment_method, "")
        paid = self.repo.update_transaction(
            transaction.id,
            {"payment_method": method_name, "payment_status": PAYMENT_PAID},
        )
        self.repo.update_order(
            order_id,
            {"status": STATUS_PROCESSING, "updated_at": self._clock()},
        )
        logger.info(f"Payment for order {order_id} completed via {method_name}")
        return paid

    def set_order_status(self, order_id: str, status: str) -> Optional[Order]:
        """
        Set any of the four statuses, in any order.

        Administrators use this as an override, so transitions are not
        checked against the Queued -> Processing -> Done/ReadyForPickup flow.
        """
        order = self.repo.update_order(order_id, {"status": status, "updated_at": self._clock()})
        if order is not None:
            logger.info(f"Order {order_id} set to {status}")
        return order

    def pending_orders(self, customer_id: str) -> List[Order]:
        """
        Orders of the customer whose transaction is still awaiting payment.
        """
        pending: List[Order] = []
        for order in self.repo.get_orders_by_customer_id(customer_id):
            transaction = self.repo.get_transaction_by_order_id(order.id)
            if transaction is not None and transaction.payment_status == PAYMENT_PENDING:
                pending.append(order)
        return pending
