"""
Pydantic models for the laundry shop.

This module defines all data models used throughout the application, including:
- The four persisted record types (users, packages, orders, transactions)
- Status vocabularies for orders and payments
- Derived report and dashboard models
- API request models

Persisted records use camelCase field names on disk (``customerId``,
``totalCost``...) while Python code works with snake_case attributes.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from laundry.domain.utils import ensure_utc


# ---------------------------------------------------------------------------
# Vocabularies
# ---------------------------------------------------------------------------

Role = Literal["customer", "admin"]
OrderStatus = Literal["Queued", "Processing", "Done", "ReadyForPickup"]
PaymentStatus = Literal["Pending", "Paid"]
PaymentMethod = Literal["bank", "ewallet", "cash"]

ROLE_CUSTOMER = "customer"
ROLE_ADMIN = "admin"

STATUS_QUEUED = "Queued"
STATUS_PROCESSING = "Processing"
STATUS_DONE = "Done"
STATUS_READY_FOR_PICKUP = "ReadyForPickup"

ORDER_STATUSES = (STATUS_QUEUED, STATUS_PROCESSING, STATUS_DONE, STATUS_READY_FOR_PICKUP)
ACTIVE_STATUSES = (STATUS_QUEUED, STATUS_PROCESSING)
COMPLETED_STATUSES = (STATUS_DONE, STATUS_READY_FOR_PICKUP)

PAYMENT_PENDING = "Pending"
PAYMENT_PAID = "Paid"


# ---------------------------------------------------------------------------
# Persisted records
# ---------------------------------------------------------------------------


class Record(BaseModel):
    """
    Base class for every record stored in a collection.

    Records are identified by a string ``id`` supplied by the caller. Field
    aliases are generated in camelCase so that the persisted JSON layout
    matches ``{"customerId": ..., "createdAt": ...}``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str

    def to_storage(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class User(Record):
    """
    A customer or administrator account.

    Passwords are kept in plain text; this application does not provide
    authentication security.
    """

    name: str
    email: str = ""
    phone: str = ""
    username: str
    password: str
    role: Role = ROLE_CUSTOMER
    join_date: datetime

    @field_validator("join_date")
    @classmethod
    def _utc_join_date(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class LaundryPackage(Record):
    """
    A service offered by the shop, priced per kilogram.
    """

    name: str
    price: float = Field(description="Price per kilogram.")
    description: str = ""


class Order(Record):
    """
    A customer's laundry order.

    ``customer_name`` and ``package_name`` are snapshots taken when the order
    is placed. They are deliberately not kept in sync with later edits of the
    user or package, so an order always shows what the customer ordered at the
    time. ``total_cost`` is likewise computed once at creation.
    """

    customer_id: str
    customer_name: str
    package_id: str
    package_name: str
    weight: float
    total_cost: float
    status: OrderStatus = STATUS_QUEUED
    created_at: datetime
    updated_at: datetime
    estimated_time: datetime

    @field_validator("created_at", "updated_at", "estimated_time")
    @classmethod
    def _utc_timestamps(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class Transaction(Record):
    """
    The payment record belonging to an order (one per order by convention).

    ``payment_method`` stays empty until the transaction is paid.
    """

    order_id: str
    customer_id: str
    customer_name: str
    amount: float
    payment_method: str = ""
    payment_status: PaymentStatus = PAYMENT_PENDING
    date: datetime

    @field_validator("date")
    @classmethod
    def _utc_date(cls, value: datetime) -> datetime:
        return ensure_utc(value)


# ---------------------------------------------------------------------------
# Derived report models
# ---------------------------------------------------------------------------


class PackageRanking(BaseModel):
    """
    Order count and revenue accumulated for one package.
    """

    package_id: str
    name: str
    orders: int = 0
    revenue: float = 0


class ReportSummary(BaseModel):
    total_orders: int
    total_revenue: float
    active_customers: int


class AdminDashboard(BaseModel):
    """
    Shop-wide statistics shown to administrators.
    """

    total_customers: int
    total_orders: int
    total_revenue: float
    active_orders: int
    recent_transactions: List[Transaction] = Field(default_factory=list)


class CustomerDashboard(BaseModel):
    """
    Per-customer statistics shown on the customer home page.
    """

    total_orders: int
    ongoing_orders: int
    completed_orders: int
    total_spent: float
    recent_orders: List[Order] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# API request models
# ---------------------------------------------------------------------------


class LoginRequest(BaseModel):
    username: str
    password: str


class RegisterRequest(BaseModel):
    name: str
    email: str = ""
    phone: str = ""
    username: str
    password: str


class PlaceOrderRequest(BaseModel):
    package_id: str
    weight: float = Field(ge=1, multiple_of=0.5, description="Weight in kilograms, in half-kilogram steps")


class PaymentRequest(BaseModel):
    order_id: str
    payment_method: PaymentMethod


class StatusChangeRequest(BaseModel):
    status: OrderStatus


class PackageRequest(BaseModel):
    name: str
    price: float
    description: str = ""


class PackageUpdateRequest(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = None
    description: Optional[str] = None


class CustomerUpdateRequest(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
