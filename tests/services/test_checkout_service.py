"""
CheckoutService: the Stock -> Sold transition.
"""

from decimal import Decimal

import pytest

from stock_kernel.app import create_app
from stock_kernel.exceptions import (
    DuplicateRecordError,
    InconsistentLedgerError,
    NotFoundError,
    RecordNotFoundError,
    ValidationError,
)
from stock_kernel.services.checkout_service import CheckoutMode, normalize_identifier
from stock_kernel.store.base import Collection


class TestNormalize:
    def test_trim_and_uppercase(self):
        assert normalize_identifier("  hsa0001\n") == "HSA0001"

    def test_non_text_rejected(self):
        with pytest.raises(ValidationError):
            normalize_identifier(None)


class TestCheckout:
    def test_two_units_one_checkout(self, app, receive):
        """Receive two handphones, check out the first."""
        assert receive("Samsung S24").id == "HSA0001"
        assert receive("Samsung A10").id == "HSA0002"

        record = app.checkout.checkout("HSA0001")

        assert record.id == "HSA0001"
        assert [u.id for u in app.stock.all()] == ["HSA0002"]
        assert [r.id for r in app.sold.all()] == ["HSA0001"]

    def test_record_built_from_unit(self, app, receive, deterministic_clock):
        receive("Samsung S24", price="4750000")
        deterministic_clock.advance(3600)

        record = app.checkout.checkout(" hsa0001 ")

        assert record.brand_model == "Samsung S24"
        assert record.sale_price_basis == Decimal("4750000.00")
        assert record.exited_at == deterministic_clock.now()
        assert app.sold.find_by_id("HSA0001") == record

    def test_unknown_id_leaves_ledgers_unchanged(self, app, receive):
        receive("Samsung S24")
        with pytest.raises(RecordNotFoundError):
            app.checkout.checkout("HSA0404")
        assert [u.id for u in app.stock.all()] == ["HSA0001"]
        assert app.sold.all() == []

    def test_empty_id_rejected(self, app):
        with pytest.raises(ValidationError):
            app.checkout.checkout("   ")

    def test_declined_is_a_no_op(self, app, receive, confirm_answers, captured_logs):
        unit = receive("Samsung S24")
        confirm_answers.append(False)

        assert app.checkout.checkout("HSA0001") is None

        assert confirm_answers.asked == [unit]
        assert app.stock.find_by_id("HSA0001") == unit
        assert app.sold.all() == []
        assert any(r["message"] == "checkout_declined" for r in captured_logs())

    def test_falsy_confirm_callable_is_still_used(self, store, deterministic_clock):
        """An empty sequence that is also callable is a real callback, not a default."""

        class _Refuse(list):
            def __call__(self, unit):
                self.append(unit.id)
                return False

        refuse = _Refuse()
        app = create_app(store, confirm=refuse, clock=deterministic_clock)
        app.registry.add("Handphone", "H")
        app.intake.receive("Handphone", "Samsung S24", "A", "1", "")

        assert app.checkout.checkout("HSA0001") is None

        assert refuse == ["HSA0001"]
        assert app.sold.all() == []

    def test_second_checkout_of_same_id_not_found(self, app, receive):
        receive("Samsung S24")
        app.checkout.checkout("HSA0001")
        with pytest.raises(NotFoundError):
            app.checkout.checkout("HSA0001")
        assert len(app.sold.all()) == 1

    def test_unit_removed_after_confirmation_loses_race(self, app, receive, confirm_answers):
        """Another operator checks the unit out while this one is confirming."""
        receive("Samsung S24")

        def confirm_while_other_wins(unit):
            app.store.delete(Collection.INVENTORY, unit.id)
            return True

        app.checkout.confirm = confirm_while_other_wins
        with pytest.raises(RecordNotFoundError):
            app.checkout.checkout("HSA0001")
        assert app.sold.all() == []

    def test_logs_completion_with_context(self, app, receive, captured_logs):
        receive("Samsung S24")
        app.checkout.checkout("HSA0001", mode=CheckoutMode.MANUAL)
        events = [r for r in captured_logs() if r["message"] == "checkout_completed"]
        assert len(events) == 1
        assert events[0]["unit_id"] == "HSA0001"
        assert events[0]["operation"] == "checkout_manual"
        assert events[0]["mode"] == "manual"


class _FailingStore:
    """Store wrapper whose writes to the chosen collections fail."""

    def __init__(self, inner, failing_inserts=(), failing_deletes=(), error=None):
        self._inner = inner
        self.failing_inserts = set(failing_inserts)
        self.failing_deletes = set(failing_deletes)
        self.error = error or ConnectionError("store unavailable")

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def insert(self, collection, record):
        if collection in self.failing_inserts:
            raise self.error
        return self._inner.insert(collection, record)

    def delete(self, collection, key):
        if collection in self.failing_deletes:
            raise self.error
        return self._inner.delete(collection, key)


def _wire(app, store):
    app.checkout.sold.store = store
    app.checkout.stock.store = store


class TestPartialFailure:
    def test_append_failure_changes_nothing(self, app, receive):
        unit = receive("Samsung S24")
        _wire(app, _FailingStore(app.store, failing_inserts=[Collection.INVENTORY_OUT]))

        with pytest.raises(ConnectionError):
            app.checkout.checkout("HSA0001")

        assert app.stock.find_by_id("HSA0001") == unit
        assert app.sold.all() == []

    def test_remove_failure_withdraws_record(self, app, receive, captured_logs):
        unit = receive("Samsung S24")
        _wire(app, _FailingStore(app.store, failing_deletes=[Collection.INVENTORY]))

        with pytest.raises(ConnectionError):
            app.checkout.checkout("HSA0001")

        assert app.stock.find_by_id("HSA0001") == unit
        assert app.sold.all() == []
        assert "checkout_rolled_back" in [r["message"] for r in captured_logs()]

    def test_withdraw_failure_is_inconsistent(self, app, receive, captured_logs):
        unit = receive("Samsung S24")
        _wire(
            app,
            _FailingStore(
                app.store,
                failing_deletes=[Collection.INVENTORY, Collection.INVENTORY_OUT],
            ),
        )

        with pytest.raises(InconsistentLedgerError) as exc_info:
            app.checkout.checkout("HSA0001")

        assert exc_info.value.unit_id == "HSA0001"
        assert exc_info.value.stage == "withdraw"
        assert exc_info.value.unit == unit
        assert app.stock.find_by_id("HSA0001") == unit
        assert app.sold.find_by_id("HSA0001") is not None
        critical = [r for r in captured_logs() if r["message"] == "checkout_inconsistent"]
        assert critical and critical[0]["level"] == "CRITICAL"

    def test_stale_sold_record_is_a_conflict(self, store, deterministic_clock):
        """A reissued identifier whose old sale is still recorded is refused."""
        app = create_app(store, clock=deterministic_clock, include_sold_history=False)
        app.registry.add("Handphone", "H")
        app.intake.receive("Handphone", "Samsung S24", "A", "1", "")
        first = app.checkout.checkout("HSA0001")
        deterministic_clock.advance(60)
        reissued = app.intake.receive("Handphone", "Samsung A10", "A", "2", "")
        assert reissued.id == "HSA0001"

        with pytest.raises(DuplicateRecordError):
            app.checkout.checkout("HSA0001")

        assert app.stock.find_by_id("HSA0001") == reissued
        assert app.sold.all() == [first]


class _IntakeDuringCheckout:
    """Store wrapper that receives one unit right after the chosen write."""

    def __init__(self, inner, app, after):
        self._inner = inner
        self.app = app
        self.after = after
        self.received = []

    def __getattr__(self, name):
        return getattr(self._inner, name)

    def _interleave(self, operation, collection):
        if (operation, collection) == self.after and not self.received:
            self.received.append(
                self.app.intake.receive("Handphone", "Samsung A10", "A", "1500000", "")
            )

    def insert(self, collection, record):
        row = self._inner.insert(collection, record)
        self._interleave("insert", collection)
        return row

    def delete(self, collection, key):
        row = self._inner.delete(collection, key)
        self._interleave("delete", collection)
        return row


class TestInterleavedIntake:
    @pytest.mark.parametrize(
        "after",
        [("insert", Collection.INVENTORY_OUT), ("delete", Collection.INVENTORY)],
        ids=["after_append", "after_remove"],
    )
    def test_checked_out_identifier_is_not_reissued(self, app, receive, after):
        receive("Samsung S24")
        wrapper = _IntakeDuringCheckout(app.store, app, after)
        _wire(app, wrapper)

        record = app.checkout.checkout("HSA0001")

        assert record.id == "HSA0001"
        assert [u.id for u in wrapper.received] == ["HSA0002"]
        assert [u.id for u in app.stock.all()] == ["HSA0002"]
        assert [r.id for r in app.sold.all()] == ["HSA0001"]
        assert app.integrity.check().ok
