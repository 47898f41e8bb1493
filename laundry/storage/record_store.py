from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from laundry.domain.errors import CorruptCollectionError
from laundry.domain.models import LaundryPackage, User, ROLE_ADMIN
from laundry.domain.utils import utc_now
from laundry.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

USERS = "users"
PACKAGES = "packages"
ORDERS = "orders"
TRANSACTIONS = "transactions"
CURRENT_USER = "currentUser"

COLLECTIONS = (USERS, PACKAGES, ORDERS, TRANSACTIONS)


def default_users(now: datetime) -> List[User]:
    return [
        User(
            id="1",
            name="Admin User",
            email="admin@laundry.com",
            phone="08111111111",
            username="umar",
            password="umar123",
            role=ROLE_ADMIN,
            join_date=now,
        )
    ]


def default_packages() -> List[LaundryPackage]:
    return [
        LaundryPackage(id="1", name="Cuci Kering", price=7000, description="Cuci bersih dan keringkan"),
        LaundryPackage(id="2", name="Cuci Setrika", price=10000, description="Cuci, setrika, dan lipat rapi"),
        LaundryPackage(id="3", name="Setrika Saja", price=5000, description="Setrika dan lipat rapi"),
        LaundryPackage(id="4", name="Cuci Lipat", price=8000, description="Cuci dan lipat rapi"),
    ]


class RecordStore:
    """
    Persistence facade over a key-value store.

    Each collection lives under one key as a JSON array and is read and
    written as a whole. Two writers working from the same snapshot race:
    the last full write wins and the other change is lost.
    """

    def __init__(self, store: KeyValueStore, clock: Callable[[], datetime] = utc_now):
        self._store = store
        self._clock = clock

    def initialize(self) -> None:
        """
        Seed default data for every collection that is not yet present.
        Existing data is never overwritten.
        """
        seeds: Dict[str, Callable[[], list]] = {
            USERS: lambda: default_users(self._clock()),
            PACKAGES: default_packages,
            ORDERS: list,
            TRANSACTIONS: list,
        }
        for name, factory in seeds.items():
            if self._store.get_item(name):
                continue
            records = [r.to_storage() for r in factory()]
            self.write_collection(name, records)
            logger.info(f"Seeded collection '{name}' with {len(records)} record(s)")

    def read_collection(self, name: str) -> List[Dict[str, Any]]:
        raw = self._store.get_item(name)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.error(f"Failed to decode collection '{name}': {exc}")
            raise CorruptCollectionError(name, str(exc)) from exc
        if not isinstance(data, list):
            logger.error(f"Collection '{name}' does not hold a JSON array")
            raise CorruptCollectionError(name, "expected a JSON array")
        return data

    def write_collection(self, name: str, records: List[Dict[str, Any]]) -> None:
        self._store.set_item(name, json.dumps(records))
        logger.debug(f"Wrote collection '{name}' ({len(records)} record(s))")

    def read_value(self, key: str) -> Optional[Any]:
        """
        Read a single JSON document stored under key, or None if absent.
        """
        raw = self._store.get_item(key)
        if not raw:
            return None
        return json.loads(raw)

    def write_value(self, key: str, value: Any) -> None:
        self._store.set_item(key, json.dumps(value))

    def remove_value(self, key: str) -> None:
        self._store.remove_item(key)
