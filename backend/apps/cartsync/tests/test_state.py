import unittest
from decimal import Decimal

from apps.cartsync.state import (
    CartLine,
    CartStore,
    add_line,
    clear_owner,
    decrease_line,
    describe_line,
    increase_line,
    remove_line,
)


def line(product_id, owner_id="u1", quantity=1, price="10.00"):
    return CartLine(
        product_id=product_id,
        owner_id=owner_id,
        quantity=quantity,
        title=f"Product {product_id}",
        price=Decimal(price),
    )


class ReducerTests(unittest.TestCase):
    def test_add_creates_line_with_quantity_one(self):
        lines = add_line((), 42, "u1", title="Pump", price=Decimal("5.00"))
        self.assertEqual(lines, (CartLine(42, "u1", 1, "Pump", Decimal("5.00"), ""),))

    def test_add_existing_line_increments_instead_of_duplicating(self):
        lines = add_line((line(42),), 42, "u1")
        self.assertEqual(len(lines), 1)
        self.assertEqual(lines[0].quantity, 2)

    def test_add_same_product_for_other_owner_is_separate_line(self):
        lines = add_line((line(42, "u1"),), 42, "u2")
        self.assertEqual([(l.owner_id, l.quantity) for l in lines], [("u1", 1), ("u2", 1)])

    def test_decrease_at_one_drops_line(self):
        self.assertEqual(decrease_line((line(42),), 42, "u1"), ())

    def test_decrease_missing_line_is_noop(self):
        lines = (line(7),)
        self.assertEqual(decrease_line(lines, 42, "u1"), lines)

    def test_increase_and_remove_touch_only_matching_line(self):
        lines = (line(42, "u1"), line(42, "u2"))
        increased = increase_line(lines, 42, "u1")
        self.assertEqual([l.quantity for l in increased], [2, 1])
        self.assertEqual(remove_line(lines, 42, "u1"), (line(42, "u2"),))

    def test_describe_updates_display_fields_only(self):
        lines = describe_line(
            (line(42, quantity=3), line(42, "u2")), 42, "u1",
            title="Jet Pump", price=Decimal("12.50"), image="/img/42.png",
        )
        self.assertEqual(
            lines[0], CartLine(42, "u1", 3, "Jet Pump", Decimal("12.50"), "/img/42.png")
        )
        self.assertEqual(lines[1], line(42, "u2"))

    def test_clear_owner(self):
        lines = (line(1, "u1"), line(2, "u2"), line(3, "u1"))
        self.assertEqual(clear_owner(lines, "u1"), (line(2, "u2"),))

    def test_reducers_do_not_mutate_input(self):
        lines = (line(42, quantity=2),)
        increase_line(lines, 42, "u1")
        decrease_line(lines, 42, "u1")
        self.assertEqual(lines[0].quantity, 2)


class CartStoreTests(unittest.TestCase):
    def test_subscribers_receive_each_new_state(self):
        store = CartStore()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        store.apply_add(42, "u1")
        store.apply_increase(42, "u1")
        unsubscribe()
        store.apply_clear("u1")
        self.assertEqual([s[0].quantity for s in seen], [1, 2])
        self.assertEqual(store.lines, ())

    def test_snapshot_restore_round_trips_state(self):
        store = CartStore([line(1), line(2, quantity=3)])
        snapshot = store.snapshot()
        store.apply_remove(1, "u1")
        store.apply_decrease(2, "u1")
        store.restore(snapshot)
        self.assertEqual(store.lines, (line(1), line(2, quantity=3)))

    def test_snapshot_is_unaffected_by_later_changes(self):
        store = CartStore([line(1)])
        snapshot = store.snapshot()
        store.apply_increase(1, "u1")
        self.assertEqual(snapshot.lines[0].quantity, 1)

    def test_derived_totals_are_per_owner(self):
        store = CartStore(
            [
                line(1, "u1", quantity=2, price="10.50"),
                line(2, "u1", quantity=1, price="3.25"),
                line(1, "u2", quantity=9, price="10.50"),
            ]
        )
        self.assertEqual(store.total_items("u1"), 3)
        self.assertEqual(store.total_price("u1"), Decimal("24.25"))
        self.assertEqual(len(store.lines_for("u2")), 1)
        self.assertEqual(store.total_price("nobody"), Decimal("0"))

    def test_totals_recomputed_after_each_change(self):
        store = CartStore([line(1, quantity=1, price="4.00")])
        self.assertEqual(store.total_price("u1"), Decimal("4.00"))
        store.apply_increase(1, "u1")
        self.assertEqual(store.total_price("u1"), Decimal("8.00"))
        self.assertEqual(store.total_items("u1"), 2)
