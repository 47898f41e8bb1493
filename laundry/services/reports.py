"""
Dashboard statistics, reports and exports.

Everything here is a pure read over repository snapshots and is recomputed
from scratch on each call.
"""

from __future__ import annotations

import csv
import io
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, TypeVar, Union

from laundry.domain.entities import Repository
from laundry.domain.models import (
    AdminDashboard,
    CustomerDashboard,
    Order,
    PackageRanking,
    ReportSummary,
    User,
    ACTIVE_STATUSES,
    COMPLETED_STATUSES,
    PAYMENT_PAID,
    ROLE_CUSTOMER,
    STATUS_PROCESSING,
    STATUS_QUEUED,
)
from laundry.domain.utils import as_bound, format_short_date

T = TypeVar("T")

Bound = Optional[Union[date, datetime]]

CSV_HEADER = ["ID Pesanan", "Tanggal", "Pelanggan", "Paket", "Berat (kg)", "Total (Rp)", "Status"]
RECENT_LIMIT = 5
TOP_PACKAGES_LIMIT = 5


def filter_by_date_range(records: Iterable[T], start: Bound, end: Bound, field: str = "created_at") -> List[T]:
    """
    Keep records whose ``field`` timestamp lies within [start, end].

    Both bounds are inclusive and either may be None for an open range.
    """
    lower = as_bound(start)
    upper = as_bound(end)
    result: List[T] = []
    for record in records:
        moment = getattr(record, field)
        if lower is not None and moment < lower:
            continue
        if upper is not None and moment > upper:
            continue
        result.append(record)
    return result


def newest_first(records: Iterable[T], field: str = "created_at") -> List[T]:
    return sorted(records, key=lambda r: getattr(r, field), reverse=True)


def admin_dashboard(repo: Repository) -> AdminDashboard:
    active = len(repo.get_orders_by_status(STATUS_PROCESSING)) + len(repo.get_orders_by_status(STATUS_QUEUED))
    recent = newest_first(repo.get_transactions(), field="date")[:RECENT_LIMIT]
    return AdminDashboard(
        total_customers=repo.total_customers(),
        total_orders=repo.total_orders(),
        total_revenue=repo.total_revenue(),
        active_orders=active,
        recent_transactions=recent,
    )


def customer_dashboard(repo: Repository, customer_id: str) -> CustomerDashboard:
    orders = repo.get_orders_by_customer_id(customer_id)
    transactions = repo.get_transactions_by_customer_id(customer_id)
    return CustomerDashboard(
        total_orders=len(orders),
        ongoing_orders=sum(1 for o in orders if o.status in ACTIVE_STATUSES),
        completed_orders=sum(1 for o in orders if o.status in COMPLETED_STATUSES),
        total_spent=sum(t.amount for t in transactions if t.payment_status == PAYMENT_PAID),
        recent_orders=newest_first(orders)[:RECENT_LIMIT],
    )


def report_summary(orders: Sequence[Order]) -> ReportSummary:
    return ReportSummary(
        total_orders=len(orders),
        total_revenue=sum(o.total_cost for o in orders),
        active_customers=len({o.customer_id for o in orders}),
    )


def top_packages(orders: Iterable[Order], limit: int = TOP_PACKAGES_LIMIT) -> List[PackageRanking]:
    """
    Rank packages by the revenue of the given orders.

    Packages are grouped by id and named after the first order seen for
    them. The sort is stable, so equal revenues keep first-seen order.
    """
    stats: Dict[str, PackageRanking] = {}
    for order in orders:
        entry = stats.get(order.package_id)
        if entry is None:
            entry = PackageRanking(package_id=order.package_id, name=order.package_name)
            stats[order.package_id] = entry
        entry.orders += 1
        entry.revenue += order.total_cost

    ranked = sorted(stats.values(), key=lambda p: p.revenue, reverse=True)
    return ranked[:limit]


def _format_number(value: float) -> str:
    # 3.0 -> "3", 2.5 -> "2.5"
    return str(int(value)) if float(value).is_integer() else str(value)


def orders_to_csv(orders: Iterable[Order]) -> str:
    """
    Serialize orders for the report export.

    Fields containing commas, quotes or line breaks are quoted so that a
    customer named "Budi, Jr." stays in one column.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for order in orders:
        writer.writerow([
            order.id,
            format_short_date(order.created_at),
            order.customer_name,
            order.package_name,
            _format_number(order.weight),
            _format_number(order.total_cost),
            order.status,
        ])
    return buffer.getvalue()


def export_filename(start: date, end: date) -> str:
    return f"laporan_{start.isoformat()}_{end.isoformat()}.csv"


def search_customers(users: Iterable[User], term: str = "") -> List[User]:
    """
    Customers whose name or email contains term (case-insensitive) or whose
    phone number contains it verbatim.
    """
    needle = (term or "").lower()
    return [
        u for u in users
        if u.role == ROLE_CUSTOMER
        and (needle in u.name.lower() or needle in u.email.lower() or (term or "") in u.phone)
    ]


def search_orders(orders: Iterable[Order], term: str = "", status: Optional[str] = None) -> List[Order]:
    """
    Orders matching term on id, customer name or package name, optionally
    restricted to one status.
    """
    needle = (term or "").lower()
    result: List[Order] = []
    for order in orders:
        if status is not None and order.status != status:
            continue
        haystacks = (order.id.lower(), order.customer_name.lower(), order.package_name.lower())
        if any(needle in h for h in haystacks):
            result.append(order)
    return result


def customer_order_counts(repo: Repository) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for order in repo.get_orders():
        counts[order.customer_id] = counts.get(order.customer_id, 0) + 1
    return counts
