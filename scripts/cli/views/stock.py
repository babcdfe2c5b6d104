"""CLI views: Stock Ledger and Sold Ledger listings."""

from scripts.cli.config import WIDTH
from scripts.cli.util import fmt_amount, fmt_time


def show_unit(unit):
    print(f"    {unit.id}  {unit.brand_model}")
    print(f"      Category: {unit.category}   Grade: {unit.grade.value}")
    print(f"      Price:    {fmt_amount(unit.purchase_price)}")
    if unit.condition:
        print(f"      Notes:    {unit.condition}")


def show_stock(app):
    """List units in stock, newest first."""
    units = app.stock.all()
    if not units:
        print("\n  No units in stock.\n")
        return
    W = WIDTH
    print()
    print("=" * W)
    print("  STOCK LEDGER".center(W))
    print("=" * W)
    print(f"  {'ID':<10} {'Brand / model':<26} {'Gr':<3} {'Price':>16} {'Received'}")
    print(f"  {'-'*10} {'-'*26} {'-'*3} {'-'*16} {'-'*10}")
    for u in units:
        print(
            f"  {u.id:<10} {u.brand_model[:26]:<26} {u.grade.value:<3} "
            f"{fmt_amount(u.purchase_price):>16} {fmt_time(u.created_at)}"
        )
    print(f"\n  Total: {len(units)} units")
    print()


def show_sold(app):
    """List sold records, most recent exit first."""
    records = app.sold.all()
    if not records:
        print("\n  No sold records.\n")
        return
    W = WIDTH
    print()
    print("=" * W)
    print("  SOLD HISTORY".center(W))
    print("=" * W)
    print(f"  {'ID':<10} {'Brand / model':<28} {'Basis':>16} {'Exited'}")
    print(f"  {'-'*10} {'-'*28} {'-'*16} {'-'*10}")
    for r in records:
        print(
            f"  {r.id:<10} {r.brand_model[:28]:<28} "
            f"{fmt_amount(r.sale_price_basis):>16} {fmt_time(r.exited_at)}"
        )
    print(f"\n  Total: {len(records)} records")
    print()
