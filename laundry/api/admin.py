"""
Admin API endpoints for managing the shop.

This module provides the administrative interface for:
- The dashboard with shop-wide totals
- Managing customers, orders and their statuses
- Managing laundry packages
- Date-filtered reports and CSV export
"""

from __future__ import annotations

from datetime import date
from typing import Optional
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from laundry.api.auth import public_user, require_admin
from laundry.core.dependencies import get_order_service, get_repository, get_session_manager
from laundry.domain.entities import Repository
from laundry.domain.models import (
    CustomerUpdateRequest,
    LaundryPackage,
    OrderStatus,
    PackageRequest,
    PackageUpdateRequest,
    StatusChangeRequest,
    User,
)
from laundry.domain.utils import timestamp_id, utc_now
from laundry.services import reports
from laundry.services.authentication import SessionManager
from laundry.services.orders import OrderService

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


def _dump(record) -> dict:
    return record.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------

@router.get("/dashboard")
async def dashboard(repo: Repository = Depends(get_repository)) -> dict:
    return reports.admin_dashboard(repo).model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

@router.get("/customers")
async def list_customers(
    search: str = Query(default=""),
    repo: Repository = Depends(get_repository),
) -> dict:
    """
    Customers matching the search term, each with their order count.
    """
    counts = reports.customer_order_counts(repo)
    customers = reports.search_customers(repo.get_users(), search)
    return {
        "customers": [
            {**public_user(c), "orderCount": counts.get(c.id, 0)}
            for c in customers
        ]
    }


@router.patch("/customers/{customer_id}")
async def update_customer(
    customer_id: str,
    body: CustomerUpdateRequest,
    admin: User = Depends(require_admin),
    repo: Repository = Depends(get_repository),
    sessions: SessionManager = Depends(get_session_manager),
) -> dict:
    """
    Edit a customer's profile.

    Orders and transactions keep the name they were created with. Editing
    the logged-in account also refreshes the session copy of it.
    """
    user = repo.update_user(customer_id, body.model_dump(exclude_none=True))
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Customer not found")
    if customer_id == admin.id:
        sessions.refresh_user()
    return {"customer": public_user(user)}


@router.delete("/customers/{customer_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_customer(
    customer_id: str,
    admin: User = Depends(require_admin),
    repo: Repository = Depends(get_repository),
) -> Response:
    """
    Delete a customer. Their orders and transactions are kept.
    """
    if customer_id == admin.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Cannot delete the logged-in account")
    repo.delete_user(customer_id)
    logger.info(f"Customer {customer_id} deleted by {admin.username}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

@router.get("/orders")
async def list_orders(
    search: str = Query(default=""),
    status_filter: Optional[OrderStatus] = Query(default=None, alias="status"),
    repo: Repository = Depends(get_repository),
) -> dict:
    """
    All orders, newest first, filtered by search term and status.
    """
    orders = reports.newest_first(repo.get_orders())
    orders = reports.search_orders(orders, search, status_filter)
    return {"orders": [_dump(o) for o in orders]}


@router.get("/orders/{order_id}")
async def get_order(order_id: str, repo: Repository = Depends(get_repository)) -> dict:
    order = repo.get_order_by_id(order_id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    transaction = repo.get_transaction_by_order_id(order_id)
    return {
        "order": _dump(order),
        "transaction": _dump(transaction) if transaction else None,
    }


@router.put("/orders/{order_id}/status")
async def change_order_status(
    order_id: str,
    body: StatusChangeRequest,
    orders: OrderService = Depends(get_order_service),
) -> dict:
    order = orders.set_order_status(order_id, body.status)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return {"order": _dump(order)}


# ---------------------------------------------------------------------------
# Packages
# ---------------------------------------------------------------------------

@router.get("/packages")
async def list_packages(repo: Repository = Depends(get_repository)) -> dict:
    return {"packages": [_dump(p) for p in repo.get_packages()]}


@router.post("/packages", status_code=status.HTTP_201_CREATED)
async def create_package(body: PackageRequest, repo: Repository = Depends(get_repository)) -> dict:
    package = LaundryPackage(
        id=timestamp_id(utc_now()),
        name=body.name,
        price=body.price,
        description=body.description,
    )
    repo.add_package(package)
    logger.info(f"Package '{package.name}' added")
    return {"package": _dump(package)}


@router.put("/packages/{package_id}")
async def update_package(
    package_id: str,
    body: PackageUpdateRequest,
    repo: Repository = Depends(get_repository),
) -> dict:
    """
    Edit a package. Existing orders keep their package name and cost.
    """
    package = repo.update_package(package_id, body.model_dump(exclude_none=True))
    if package is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Package not found")
    return {"package": _dump(package)}


@router.delete("/packages/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package(package_id: str, repo: Repository = Depends(get_repository)) -> Response:
    repo.delete_package(package_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------

@router.get("/reports")
async def report(
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    repo: Repository = Depends(get_repository),
) -> dict:
    """
    Summary and top packages for orders created between start and end
    (inclusive, either bound optional).
    """
    orders = reports.filter_by_date_range(repo.get_orders(), start, end)
    summary = reports.report_summary(orders)
    return {
        "summary": summary.model_dump(mode="json"),
        "top_packages": [p.model_dump(mode="json") for p in reports.top_packages(orders)],
    }


@router.get("/reports/export")
async def export_report(
    start: Optional[date] = Query(default=None),
    end: Optional[date] = Query(default=None),
    repo: Repository = Depends(get_repository),
) -> Response:
    """
    Download the orders between start and end as CSV. Both bounds are required.
    """
    if start is None or end is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both start and end dates are required for export.",
        )
    orders = reports.filter_by_date_range(repo.get_orders(), start, end)
    filename = reports.export_filename(start, end)
    return Response(
        content=reports.orders_to_csv(orders),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
