"""CLI menu: print main menu."""

from scripts.cli.config import WIDTH


def print_menu(operator: str | None = None):
    """Print the main interactive menu."""
    W = WIDTH
    print()
    print("=" * W)
    print("  UNIT STOCK LEDGER".center(W))
    print("=" * W)
    print(f"  Operator: {operator or '(not signed in)'}")
    print()
    print("  View:")
    print("    D   Dashboard (stock value, sold value, per-category counts)")
    print("    S   List units in stock")
    print("    H   Sold history")
    print("    G   Integrity check")
    print()
    print("  Stock:")
    print("    N   Receive a new unit")
    print("    E   Edit a unit")
    print("    O   Check out a unit (manual)")
    print("    B   Scan mode (check out by scanner)")
    print()
    print("  Admin:")
    print("    C   Add a category")
    print("    K   Delete a sold record")
    print("    X   Reset all data (requires password)")
    print()
    print("  Session:")
    print("    L   Sign in")
    print("    U   Sign out")
    print("    Q   Quit")
    print()
