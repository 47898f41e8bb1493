from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Type, TypeVar

from pydantic.alias_generators import to_camel

from laundry.domain.models import (
    LaundryPackage,
    Order,
    Record,
    Transaction,
    User,
    PAYMENT_PAID,
    ROLE_CUSTOMER,
)
from laundry.storage.record_store import (
    ORDERS,
    PACKAGES,
    TRANSACTIONS,
    USERS,
    RecordStore,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=Record)


class Collection(Generic[R]):
    """
    Typed CRUD over one named collection.

    Every operation reads the whole collection, works on it in memory and,
    for mutations, writes the whole collection back. Lookups are linear
    scans; "not found" is reported as None and never raised.
    """

    def __init__(self, records: RecordStore, name: str, model: Type[R]):
        self._records = records
        self.name = name
        self.model = model
        self._field_names = self._build_field_names(model)

    @staticmethod
    def _build_field_names(model: Type[R]) -> Dict[str, str]:
        names: Dict[str, str] = {}
        for field_name, field in model.model_fields.items():
            names[field_name] = field_name
            names[to_camel(field_name)] = field_name
            if field.alias:
                names[field.alias] = field_name
        return names

    def _load(self) -> List[R]:
        return [self.model.model_validate(raw) for raw in self._records.read_collection(self.name)]

    def _save(self, items: List[R]) -> None:
        self._records.write_collection(self.name, [item.to_storage() for item in items])

    def get_all(self) -> List[R]:
        return self._load()

    def get_by_id(self, record_id: str) -> Optional[R]:
        return self.find_first(lambda r: r.id == record_id)

    def find_first(self, predicate: Callable[[R], bool]) -> Optional[R]:
        for item in self._load():
            if predicate(item):
                return item
        return None

    def filter(self, predicate: Callable[[R], bool]) -> List[R]:
        return [item for item in self._load() if predicate(item)]

    def add(self, record: R) -> None:
        items = self._load()
        items.append(record)
        self._save(items)

    def update(self, record_id: str, updates: Mapping[str, Any]) -> Optional[R]:
        """
        Shallow-merge updates into the first record with the given id.

        Keys may be attribute names (``total_cost``) or stored names
        (``totalCost``); unknown keys are ignored. Returns the merged record,
        or None when no record matches.
        """
        items = self._load()
        for index, item in enumerate(items):
            if item.id != record_id:
                continue
            changes = {
                self._field_names[key]: value
                for key, value in updates.items()
                if key in self._field_names
            }
            merged = self.model.model_validate({**item.model_dump(), **changes})
            items[index] = merged
            self._save(items)
            return merged
        logger.debug(f"Update skipped: no record '{record_id}' in '{self.name}'")
        return None

    def delete(self, record_id: str) -> None:
        items = self._load()
        remaining = [item for item in items if item.id != record_id]
        if len(remaining) != len(items):
            self._save(remaining)

    def count(self) -> int:
        return len(self._load())


class Repository:
    """
    Data-access layer for the four laundry collections.

    Relationships between records are plain string ids and are not
    enforced: deleting a user or package leaves dependent orders and
    transactions untouched.
    """

    def __init__(self, records: RecordStore):
        self.records = records
        self.users: Collection[User] = Collection(records, USERS, User)
        self.packages: Collection[LaundryPackage] = Collection(records, PACKAGES, LaundryPackage)
        self.orders: Collection[Order] = Collection(records, ORDERS, Order)
        self.transactions: Collection[Transaction] = Collection(records, TRANSACTIONS, Transaction)

    # Users

    def get_users(self) -> List[User]:
        return self.users.get_all()

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self.users.get_by_id(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return self.users.find_first(lambda u: u.username == username)

    def add_user(self, user: User) -> None:
        self.users.add(user)

    def update_user(self, user_id: str, updates: Mapping[str, Any]) -> Optional[User]:
        return self.users.update(user_id, updates)

    def delete_user(self, user_id: str) -> None:
        self.users.delete(user_id)

    # Packages

    def get_packages(self) -> List[LaundryPackage]:
        return self.packages.get_all()

    def get_package_by_id(self, package_id: str) -> Optional[LaundryPackage]:
        return self.packages.get_by_id(package_id)

    def add_package(self, package: LaundryPackage) -> None:
        self.packages.add(package)

    def update_package(self, package_id: str, updates: Mapping[str, Any]) -> Optional[LaundryPackage]:
        return self.packages.update(package_id, updates)

    def delete_package(self, package_id: str) -> None:
        self.packages.delete(package_id)

    # Orders

    def get_orders(self) -> List[Order]:
        return self.orders.get_all()

    def get_order_by_id(self, order_id: str) -> Optional[Order]:
        return self.orders.get_by_id(order_id)

    def get_orders_by_customer_id(self, customer_id: str) -> List[Order]:
        return self.orders.filter(lambda o: o.customer_id == customer_id)

    def get_orders_by_status(self, status: str) -> List[Order]:
        return self.orders.filter(lambda o: o.status == status)

    def add_order(self, order: Order) -> None:
        self.orders.add(order)

    def update_order(self, order_id: str, updates: Mapping[str, Any]) -> Optional[Order]:
        return self.orders.update(order_id, updates)

    def delete_order(self, order_id: str) -> None:
        self.orders.delete(order_id)

    # Transactions

    def get_transactions(self) -> List[Transaction]:
        return self.transactions.get_all()

    def get_transaction_by_id(self, transaction_id: str) -> Optional[Transaction]:
        return self.transactions.get_by_id(transaction_id)

    def get_transactions_by_customer_id(self, customer_id: str) -> List[Transaction]:
        return self.transactions.filter(lambda t: t.customer_id == customer_id)

    def get_transaction_by_order_id(self, order_id: str) -> Optional[Transaction]:
        return self.transactions.find_first(lambda t: t.order_id == order_id)

    def add_transaction(self, transaction: Transaction) -> None:
        self.transactions.add(transaction)

    def update_transaction(self, transaction_id: str, updates: Mapping[str, Any]) -> Optional[Transaction]:
        return self.transactions.update(transaction_id, updates)

    def delete_transaction(self, transaction_id: str) -> None:
        self.transactions.delete(transaction_id)

    # Statistics

    def total_revenue(self) -> float:
        return sum(t.amount for t in self.get_transactions() if t.payment_status == PAYMENT_PAID)

    def total_orders(self) -> int:
        return self.orders.count()

    def total_customers(self) -> int:
        return len(self.users.filter(lambda u: u.role == ROLE_CUSTOMER))
