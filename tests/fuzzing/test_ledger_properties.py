"""
Property-based tests for the ledger invariants.

Properties:
- Identifier uniqueness: no sequence of intakes produces a repeated id.
- Sequence monotonicity: per combined prefix, ids are 1..n with no gaps.
- Checkout atomicity: a checked-out id is absent from stock and present
  exactly once in the Sold Ledger; a failed checkout changes nothing.
- Aggregate correctness: the stock value always equals the sum of
  purchase prices over the current Stock Ledger.
- No resurrection: deleting a sold record never re-inserts the unit.

Each example builds its own MemoryRecordStore so examples are independent.
"""

from collections import defaultdict
from decimal import Decimal

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from stock_kernel.app import create_app
from stock_kernel.domain.clock import DeterministicClock
from stock_kernel.domain.identifier import (
    combined_prefix,
    next_identifier,
    parse_sequence,
)
from stock_kernel.domain.values import Category
from stock_kernel.exceptions import NotFoundError
from stock_kernel.store.memory_store import MemoryRecordStore

BRANDS = ["Samsung S24", "Samsung A10", "Xiaomi 13", "iPhone 15", "Oppo", "X"]
CATEGORIES = [("Handphone", "H"), ("Laptop", "L"), ("Tablet", "TB")]

prices = st.decimals(min_value=0, max_value=Decimal("99999999.99"), places=2)
intakes = st.lists(
    st.tuples(st.sampled_from(CATEGORIES), st.sampled_from(BRANDS), prices),
    min_size=1,
    max_size=25,
)


def _fresh_app():
    clock = DeterministicClock()
    app = create_app(MemoryRecordStore(), clock=clock)
    app.registry.ensure_seeded(CATEGORIES)
    return app, clock


@settings(max_examples=200, suppress_health_check=[HealthCheck.function_scoped_fixture])
@given(existing=st.sets(st.integers(min_value=1, max_value=9998), max_size=30))
def test_next_identifier_is_one_past_max(existing):
    category = Category(name="Handphone", prefix_code="H")
    ids = [f"HSA{n:04d}" for n in existing] + ["HSB0500", "LSA9000"]

    result = next_identifier(category, "Samsung", ids)

    assert result not in ids
    assert parse_sequence(result, "HSA") == max(existing, default=0) + 1


@settings(
    max_examples=50,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
@given(batch=intakes)
def test_intake_ids_unique_and_gapless(batch):
    app, clock = _fresh_app()
    issued = defaultdict(list)

    for (category_name, prefix_code), brand, price in batch:
        clock.advance(1)
        unit = app.intake.receive(category_name, brand, "A", price, "")
        prefix = combined_prefix(Category(name=category_name, prefix_code=prefix_code), brand)
        issued[prefix].append(parse_sequence(unit.id, prefix))

    all_ids = [u.id for u in app.stock.all()]
    assert len(all_ids) == len(set(all_ids)) == len(batch)
    for sequences in issued.values():
        assert sequences == list(range(1, len(sequences) + 1))


operations = st.lists(
    st.one_of(
        st.tuples(st.just("receive"), st.sampled_from(BRANDS), prices),
        st.tuples(st.just("revise"), st.integers(min_value=0, max_value=30), prices),
        st.tuples(st.just("checkout"), st.integers(min_value=0, max_value=30)),
        st.tuples(st.just("checkout_missing"), st.just("HZZ9999")),
        st.tuples(st.just("delete_sold"), st.integers(min_value=0, max_value=30)),
    ),
    max_size=40,
)


@settings(
    max_examples=50,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.function_scoped_fixture],
)
@given(ops=operations)
def test_ledgers_and_aggregates_stay_consistent(ops):
    app, clock = _fresh_app()

    for op in ops:
        clock.advance(1)
        stock_ids = [u.id for u in app.stock.all()]
        sold_ids = [r.id for r in app.sold.all()]

        if op[0] == "receive":
            app.intake.receive("Handphone", op[1], "B", op[2], "")
        elif op[0] == "revise" and stock_ids:
            app.intake.revise(stock_ids[op[1] % len(stock_ids)], purchase_price=op[2])
        elif op[0] == "checkout" and stock_ids:
            target = stock_ids[op[1] % len(stock_ids)]
            record = app.checkout.checkout(target)
            assert record.id == target
            assert app.stock.find_by_id(target) is None
            assert [r.id for r in app.sold.all()].count(target) == 1
        elif op[0] == "checkout_missing":
            before = (app.stock.all(), app.sold.all())
            try:
                app.checkout.checkout(op[1])
            except NotFoundError:
                pass
            assert (app.stock.all(), app.sold.all()) == before
        elif op[0] == "delete_sold" and sold_ids:
            target = sold_ids[op[1] % len(sold_ids)]
            app.sold.remove(target)
            assert app.stock.find_by_id(target) is None

        units = app.stock.all()
        records = app.sold.all()
        assert app.summary.active_value() == sum((u.purchase_price for u in units), Decimal("0"))
        assert app.summary.sold_value() == sum((r.sale_price_basis for r in records), Decimal("0"))
        assert not {u.id for u in units} & {r.id for r in records}
