"""
SummarySelector: dashboard figures are always recomputed from the ledgers.
"""

from decimal import Decimal


def test_empty_summary(app):
    summary = app.summary.summary()
    assert summary.total_active_value == Decimal("0")
    assert summary.total_sold_value == Decimal("0")
    assert [c.name for c in summary.categories] == ["Handphone", "Laptop", "Tablet"]
    assert all(c.in_stock == 0 and c.sold == 0 for c in summary.categories)


def test_summary_tracks_every_mutation(app, receive):
    receive("Samsung S24", price="5000000")
    receive("Samsung A10", price="1500000")
    receive("ThinkPad X1", category="Laptop", price="12000000")
    assert app.summary.active_value() == Decimal("18500000.00")

    app.intake.revise("HSA0002", purchase_price="1000000")
    assert app.summary.active_value() == Decimal("18000000.00")

    app.checkout.checkout("HSA0001")
    summary = app.summary.summary()

    assert summary.total_active_value == Decimal("13000000.00")
    assert summary.total_sold_value == Decimal("5000000.00")
    assert summary.active_units == 2
    assert summary.sold_units == 1
    assert summary.for_category("Handphone").in_stock == 1
    assert summary.for_category("Handphone").sold == 1
    assert summary.for_category("Laptop").in_stock == 1
    assert summary.for_category("Laptop").sold == 0


def test_sold_value_drops_when_record_deleted(app, receive):
    receive("Samsung S24", price="5000000")
    app.checkout.checkout("HSA0001")
    app.sold.remove("HSA0001")
    assert app.summary.sold_value() == Decimal("0")
    assert app.summary.active_value() == Decimal("0")
