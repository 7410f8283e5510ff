"""Concurrent purchases, restocks and creates: one session per thread, shared SQLite file."""

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor
from decimal import Decimal

from _support import DatabaseTestCase
from sqlalchemy import func, select

from sweetshop.core.errors import Conflict, InsufficientStock
from sweetshop.models import Sweet
from sweetshop.services import inventory


class ConcurrencyTestCase(DatabaseTestCase):
    def run_concurrently(self, count: int, action) -> list[object]:
        """
        Run action(index, session) in `count` threads released together.
        Returns each call's result, or the exception it raised.
        """
        barrier = threading.Barrier(count)

        def worker(index: int) -> object:
            session = self.new_session()
            try:
                barrier.wait()
                return action(index, session)
            except Exception as e:  # collected and asserted by the test
                return e
            finally:
                session.close()

        with ThreadPoolExecutor(max_workers=count) as pool:
            return list(pool.map(worker, range(count)))

    def stored_quantity(self, sweet_id: int) -> int:
        session = self.new_session()
        try:
            return session.get(Sweet, sweet_id).quantity
        finally:
            session.close()


class TestConcurrentPurchases(ConcurrencyTestCase):
    def test_single_unit_purchases_never_oversell(self) -> None:
        sweet = self.add_sweet(quantity=10)
        results = self.run_concurrently(
            25, lambda _i, s: inventory.purchase_sweet(s, sweet.id, 1)
        )
        successes = [r for r in results if isinstance(r, Sweet)]
        rejected = [r for r in results if isinstance(r, InsufficientStock)]
        self.assertEqual(len(successes), 10)
        self.assertEqual(len(rejected), 15)
        self.assertEqual(self.stored_quantity(sweet.id), 0)

    def test_multi_unit_purchases_floor_division(self) -> None:
        sweet = self.add_sweet(quantity=10)
        results = self.run_concurrently(
            8, lambda _i, s: inventory.purchase_sweet(s, sweet.id, 3)
        )
        successes = [r for r in results if isinstance(r, Sweet)]
        self.assertEqual(len(successes), 10 // 3)
        self.assertTrue(all(isinstance(r, (Sweet, InsufficientStock)) for r in results))
        self.assertEqual(self.stored_quantity(sweet.id), 10 - 3 * len(successes))

    def test_each_success_sees_a_distinct_remaining_quantity(self) -> None:
        sweet = self.add_sweet(quantity=6)
        results = self.run_concurrently(
            6, lambda _i, s: inventory.purchase_sweet(s, sweet.id, 1)
        )
        remaining = sorted(r.quantity for r in results if isinstance(r, Sweet))
        self.assertEqual(remaining, [0, 1, 2, 3, 4, 5])

    def test_different_sweets_do_not_interfere(self) -> None:
        first = self.add_sweet(name="Fudge", quantity=5)
        second = self.add_sweet(name="Toffee", quantity=5)
        results = self.run_concurrently(
            10,
            lambda i, s: inventory.purchase_sweet(s, (first if i % 2 else second).id, 1),
        )
        self.assertTrue(all(isinstance(r, Sweet) for r in results))
        self.assertEqual(self.stored_quantity(first.id), 0)
        self.assertEqual(self.stored_quantity(second.id), 0)


class TestConcurrentRestockAndPurchase(ConcurrencyTestCase):
    def test_no_lost_updates(self) -> None:
        sweet = self.add_sweet(quantity=20)

        def action(index: int, session):
            if index % 2 == 0:
                return inventory.restock_sweet(session, sweet.id, 5)
            return inventory.purchase_sweet(session, sweet.id, 2)

        results = self.run_concurrently(16, action)
        self.assertTrue(all(isinstance(r, Sweet) for r in results), results)
        # 8 restocks of 5, 8 purchases of 2; stock never runs short.
        self.assertEqual(self.stored_quantity(sweet.id), 20 + 8 * 5 - 8 * 2)


class TestConcurrentCreates(ConcurrencyTestCase):
    def test_same_name_leaves_exactly_one_record(self) -> None:
        results = self.run_concurrently(
            8,
            lambda i, s: inventory.create_sweet(s, "Gummy Bears", "Gummies", Decimal("3.99"), i),
        )
        created = [r for r in results if isinstance(r, Sweet)]
        conflicts = [r for r in results if isinstance(r, Conflict)]
        self.assertEqual(len(created), 1)
        self.assertEqual(len(conflicts), 7)
        session = self.new_session()
        try:
            count = session.scalar(
                select(func.count()).select_from(Sweet).where(Sweet.name == "Gummy Bears")
            )
        finally:
            session.close()
        self.assertEqual(count, 1)


if __name__ == "__main__":
    unittest.main()
