from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from laundry.domain.models import LaundryPackage, Order, Transaction, User


T0 = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_order(order_id="ORD-1", customer_id="c1", package_id="1", total=20000.0, status="Queued", created=T0):
    return Order(
        id=order_id,
        customer_id=customer_id,
        customer_name="Budi",
        package_id=package_id,
        package_name="Cuci Setrika",
        weight=2.0,
        total_cost=total,
        status=status,
        created_at=created,
        updated_at=created,
        estimated_time=created + timedelta(days=2),
    )


def make_transaction(tx_id="TRX-1", order_id="ORD-1", customer_id="c1", amount=20000.0, paid=False):
    return Transaction(
        id=tx_id,
        order_id=order_id,
        customer_id=customer_id,
        customer_name="Budi",
        amount=amount,
        payment_method="Tunai" if paid else "",
        payment_status="Paid" if paid else "Pending",
        date=T0,
    )


def make_user(user_id="c1", username="budi", role="customer"):
    return User(
        id=user_id,
        name="Budi",
        email="budi@example.com",
        phone="0811",
        username=username,
        password="pw",
        role=role,
        join_date=T0,
    )


class TestCollectionCrud:
    def test_add_then_get_by_id_returns_equal_record(self, repo):
        order = make_order()
        repo.add_order(order)
        assert repo.get_order_by_id("ORD-1") == order

    def test_get_all_keeps_insertion_order(self, repo):
        for i in (3, 1, 2):
            repo.add_order(make_order(order_id=f"ORD-{i}"))
        assert [o.id for o in repo.get_orders()] == ["ORD-3", "ORD-1", "ORD-2"]

    def test_get_by_id_absent_returns_none(self, repo):
        assert repo.get_order_by_id("missing") is None
        assert repo.get_user_by_id("missing") is None

    def test_update_changes_only_given_fields(self, repo):
        order = make_order()
        repo.add_order(order)

        updated = repo.update_order("ORD-1", {"status": "Done"})

        assert updated.status == "Done"
        assert updated.model_dump(exclude={"status"}) == order.model_dump(exclude={"status"})
        assert repo.get_order_by_id("ORD-1") == updated

    def test_update_accepts_stored_field_names(self, repo):
        repo.add_package(LaundryPackage(id="9", name="Karpet", price=15000, description="Cuci karpet"))
        repo.update_package("9", {"price": 17500})
        repo.update_order("nope", {"totalCost": 1})
        repo.add_order(make_order())
        repo.update_order("ORD-1", {"totalCost": 25000, "customerName": "Budi S."})

        order = repo.get_order_by_id("ORD-1")
        assert order.total_cost == 25000
        assert order.customer_name == "Budi S."
        assert repo.get_package_by_id("9").price == 17500
        assert repo.get_package_by_id("9").description == "Cuci karpet"

    def test_update_ignores_unknown_keys(self, repo):
        repo.add_order(make_order())
        updated = repo.update_order("ORD-1", {"colour": "blue"})
        assert updated == make_order()

    def test_update_missing_id_is_silent_noop(self, repo):
        repo.add_order(make_order())
        assert repo.update_order("ORD-404", {"status": "Done"}) is None
        assert repo.get_orders() == [make_order()]

    def test_update_with_invalid_status_is_rejected(self, repo):
        repo.add_order(make_order())
        with pytest.raises(ValidationError):
            repo.update_order("ORD-1", {"status": "Lost"})
        assert repo.get_order_by_id("ORD-1").status == "Queued"

    def test_delete_then_get_is_absent(self, repo):
        repo.add_order(make_order())
        repo.delete_order("ORD-1")
        assert repo.get_order_by_id("ORD-1") is None

    def test_delete_missing_id_is_noop(self, repo):
        before = repo.get_packages()
        repo.delete_package("does-not-exist")
        assert repo.get_packages() == before

    def test_transactions_support_the_same_operations(self, repo):
        repo.add_transaction(make_transaction())
        repo.update_transaction("TRX-1", {"payment_status": "Paid"})
        assert repo.get_transaction_by_id("TRX-1").payment_status == "Paid"
        repo.delete_transaction("TRX-1")
        assert repo.get_transactions() == []


class TestLookups:
    def test_user_by_username(self, repo):
        assert repo.get_user_by_username("umar").role == "admin"
        assert repo.get_user_by_username("nobody") is None

    def test_user_by_username_returns_first_duplicate(self, repo):
        repo.add_user(make_user(user_id="a", username="twin"))
        repo.add_user(make_user(user_id="b", username="twin"))
        assert repo.get_user_by_username("twin").id == "a"

    def test_orders_by_customer_and_status(self, repo):
        repo.add_order(make_order(order_id="ORD-1", customer_id="c1", status="Queued"))
        repo.add_order(make_order(order_id="ORD-2", customer_id="c2", status="Done"))
        repo.add_order(make_order(order_id="ORD-3", customer_id="c1", status="Done"))

        assert [o.id for o in repo.get_orders_by_customer_id("c1")] == ["ORD-1", "ORD-3"]
        assert [o.id for o in repo.get_orders_by_status("Done")] == ["ORD-2", "ORD-3"]
        assert repo.get_orders_by_customer_id("c9") == []

    def test_transaction_by_order_id(self, repo):
        repo.add_transaction(make_transaction(tx_id="TRX-1", order_id="ORD-1"))
        repo.add_transaction(make_transaction(tx_id="TRX-2", order_id="ORD-2", customer_id="c2"))

        assert repo.get_transaction_by_order_id("ORD-2").id == "TRX-2"
        assert repo.get_transaction_by_order_id("ORD-3") is None
        assert [t.id for t in repo.get_transactions_by_customer_id("c1")] == ["TRX-1"]


class TestStatistics:
    def test_total_revenue_counts_only_paid(self, repo):
        repo.add_transaction(make_transaction(tx_id="TRX-1", order_id="ORD-1", amount=50000, paid=True))
        repo.add_transaction(make_transaction(tx_id="TRX-2", order_id="ORD-2", amount=30000, paid=False))
        assert repo.total_revenue() == 50000

    def test_total_revenue_empty(self, repo):
        assert repo.total_revenue() == 0

    def test_total_orders_and_customers(self, repo):
        repo.add_user(make_user(user_id="c1", username="budi"))
        repo.add_user(make_user(user_id="c2", username="ani"))
        repo.add_order(make_order(order_id="ORD-1"))

        assert repo.total_orders() == 1
        # The seeded admin is not a customer.
        assert repo.total_customers() == 2

    def test_deleting_a_user_keeps_their_orders(self, repo):
        repo.add_user(make_user(user_id="c1"))
        repo.add_order(make_order(customer_id="c1"))
        repo.add_transaction(make_transaction(customer_id="c1"))

        repo.delete_user("c1")

        assert repo.get_user_by_id("c1") is None
        assert len(repo.get_orders_by_customer_id("c1")) == 1
        assert len(repo.get_transactions_by_customer_id("c1")) == 1
