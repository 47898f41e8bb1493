"""
Customer API endpoints.

This module provides the customer-facing operations:
- Browsing laundry packages and placing orders
- Following the status of one's orders
- Paying pending orders
- Transaction history and the customer dashboard
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from laundry.api.auth import require_customer
from laundry.core.dependencies import get_order_service, get_repository
from laundry.domain.entities import Repository
from laundry.domain.models import PaymentRequest, PlaceOrderRequest, User
from laundry.services import reports
from laundry.services.orders import PAYMENT_METHODS, OrderService


router = APIRouter()


def _dump(record) -> dict:
    return record.model_dump(mode="json", by_alias=True)


@router.get("/packages")
async def list_packages(
    user: User = Depends(require_customer),
    repo: Repository = Depends(get_repository),
) -> dict:
    return {"packages": [_dump(p) for p in repo.get_packages()]}


@router.post("/orders", status_code=status.HTTP_201_CREATED)
async def place_order(
    body: PlaceOrderRequest,
    user: User = Depends(require_customer),
    orders: OrderService = Depends(get_order_service),
) -> dict:
    """
    Place an order for the logged-in customer.

    The order starts queued and comes with a pending transaction for the
    full amount. An unknown package yields 404.
    """
    order = orders.place_order(user, body.package_id, body.weight)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Package not found")
    transaction = orders.repo.get_transaction_by_order_id(order.id)
    return {
        "order": _dump(order),
        "transaction": _dump(transaction) if transaction else None,
    }


@router.get("/orders")
async def list_orders(
    user: User = Depends(require_customer),
    repo: Repository = Depends(get_repository),
) -> dict:
    """
    The customer's orders, newest first.
    """
    orders = reports.newest_first(repo.get_orders_by_customer_id(user.id))
    return {"orders": [_dump(o) for o in orders]}


@router.get("/payments/methods")
async def payment_methods() -> dict:
    return {"methods": [{"id": key, "name": name} for key, name in PAYMENT_METHODS.items()]}


@router.get("/payments/pending")
async def pending_payments(
    user: User = Depends(require_customer),
    orders: OrderService = Depends(get_order_service),
) -> dict:
    return {"orders": [_dump(o) for o in orders.pending_orders(user.id)]}


@router.post("/payments")
async def pay(
    body: PaymentRequest,
    user: User = Depends(require_customer),
    orders: OrderService = Depends(get_order_service),
) -> dict:
    """
    Pay one of the customer's orders.

    Only the customer's own orders can be paid; anything else yields 404.
    """
    order = orders.repo.get_order_by_id(body.order_id)
    if order is None or order.customer_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")

    transaction = orders.complete_payment(body.order_id, body.payment_method)
    if transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return {"transaction": _dump(transaction)}


@router.get("/transactions")
async def transaction_history(
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    user: User = Depends(require_customer),
    repo: Repository = Depends(get_repository),
) -> dict:
    """
    The customer's transactions, newest first, within an optional date range.
    """
    transactions = reports.newest_first(repo.get_transactions_by_customer_id(user.id), field="date")
    transactions = reports.filter_by_date_range(transactions, start, end, field="date")
    return {"transactions": [_dump(t) for t in transactions]}


@router.get("/dashboard")
async def dashboard(
    user: User = Depends(require_customer),
    repo: Repository = Depends(get_repository),
) -> dict:
    return reports.customer_dashboard(repo, user.id).model_dump(mode="json", by_alias=True)
