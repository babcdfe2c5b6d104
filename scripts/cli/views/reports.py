"""CLI views: dashboard summary and integrity report."""

from scripts.cli.config import WIDTH
from scripts.cli.util import fmt_amount


def show_dashboard(app):
    summary = app.summary.summary()
    W = WIDTH
    print()
    print("=" * W)
    print("  DASHBOARD".center(W))
    print("=" * W)
    print(f"  Stock value:  {fmt_amount(summary.total_active_value):>20}   ({summary.active_units} units)")
    print(f"  Sold value:   {fmt_amount(summary.total_sold_value):>20}   ({summary.sold_units} units)")
    print()
    print(f"  {'Category':<20} {'Prefix':<7} {'In stock':>9} {'Sold':>6}")
    print(f"  {'-'*20} {'-'*7} {'-'*9} {'-'*6}")
    for c in summary.categories:
        print(f"  {c.name[:20]:<20} {c.prefix_code:<7} {c.in_stock:>9} {c.sold:>6}")
    print()


def show_integrity(app):
    report = app.integrity.check()
    print()
    if report.ok:
        print("  Integrity check passed: every id is in one ledger and well formed.\n")
        return
    if report.in_both_ledgers:
        print("  In BOTH ledgers (reconcile by hand):")
        for unit_id in report.in_both_ledgers:
            print(f"    {unit_id}")
    if report.malformed_ids:
        print("  Malformed stock ids:")
        for unit_id in report.malformed_ids:
            print(f"    {unit_id}")
    print()
