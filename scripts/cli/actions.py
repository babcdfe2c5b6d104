"""CLI actions: the screens that write to the ledgers."""

from stock_kernel.exceptions import NotFoundError, ValidationError
from stock_kernel.services.checkout_service import normalize_identifier

from scripts.cli.util import ask, ask_secret, ask_yes_no, fmt_amount
from scripts.cli.views.stock import show_unit


def confirm_checkout(unit) -> bool:
    """Checkout confirmation prompt passed to the kernel."""
    print()
    show_unit(unit)
    return ask_yes_no(f"Check out {unit.id}?")


def _pick_category(app):
    categories = app.registry.list()
    if not categories:
        raise ValidationError("category", "no categories registered (use C first)")
    print()
    for i, c in enumerate(categories, 1):
        print(f"   {i:>2}.  {c.name} ({c.prefix_code})")
    choice = ask("Category (number or name)")
    if choice.isdigit() and 1 <= int(choice) <= len(categories):
        return categories[int(choice) - 1].name
    return choice


def receive_unit(app):
    category = _pick_category(app)
    brand_model = ask("Brand / model")
    grade = ask("Grade A/B/C", "A")
    price = ask("Purchase price")
    condition = ask("Condition notes", "")
    unit = app.intake.receive(category, brand_model, grade, price, condition)
    print(f"\n  Received {unit.id}  {unit.brand_model}  {fmt_amount(unit.purchase_price)}\n")


def edit_unit(app):
    unit_id = normalize_identifier(ask("Unit id"))
    unit = app.stock.find_by_id(unit_id)
    if unit is None:
        raise NotFoundError(f"{unit_id} is not in stock")
    show_unit(unit)
    print("  Blank keeps the current value.")
    answers = {
        "brand_model": ask("Brand / model", unit.brand_model),
        "grade": ask("Grade A/B/C", unit.grade.value).upper(),
        "purchase_price": ask("Purchase price", str(unit.purchase_price)),
        "condition": ask("Condition notes", unit.condition),
    }
    current = {
        "brand_model": unit.brand_model,
        "grade": unit.grade.value,
        "purchase_price": str(unit.purchase_price),
        "condition": unit.condition,
    }
    changes = {k: v for k, v in answers.items() if v != current[k]}
    if not changes:
        print("\n  No changes.\n")
        return
    revised = app.intake.revise(unit.id, **changes)
    print(f"\n  Updated {revised.id}: {', '.join(sorted(changes))}\n")


def checkout_unit(app):
    record = app.checkout.checkout(ask("Unit id"))
    if record is None:
        print("\n  Cancelled.\n")
        return
    print(f"\n  Checked out {record.id}  {fmt_amount(record.sale_price_basis)}\n")


def scan_mode(app):
    """Feed each scanned line to the scan trigger until a blank line on an empty buffer."""
    print("\n  Scan mode. One scan per line. Blank line clears a miss; blank again to leave.")
    app.scan.reset()
    while True:
        try:
            line = input(f"  scan [{app.scan.buffer}]> ")
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not line.strip():
            if not app.scan.buffer:
                break
            app.scan.reset()
            continue
        record = app.scan.feed(line)
        if record is not None:
            print(f"  Checked out {record.id}  {fmt_amount(record.sale_price_basis)}")
    app.scan.reset()
    print()


def add_category(app):
    category = app.registry.add(ask("Category name"), ask("Prefix code (1-2 letters)"))
    print(f"\n  Added {category.name} ({category.prefix_code})\n")


def delete_sold_record(app):
    record_id = normalize_identifier(ask("Sold record id"))
    record = app.sold.find_by_id(record_id)
    if record is None:
        raise NotFoundError(f"{record_id} is not in the sold history")
    print(f"    {record.id}  {record.brand_model}  {fmt_amount(record.sale_price_basis)}")
    if not ask_yes_no(f"Delete sold record {record.id}? The unit does NOT return to stock."):
        print("\n  Cancelled.\n")
        return
    app.sold.remove(record.id)
    print(f"\n  Deleted {record.id}\n")


def sign_in(app):
    session = app.auth.sign_in(ask("Email"), ask_secret("Password"))
    print(f"\n  Signed in as {session.email}\n")


def sign_out(app):
    app.auth.sign_out()
    print("\n  Signed out.\n")


def reset_all(app):
    app.auth.require_session("reset_ledgers")
    password = ask_secret("Password (confirm identity)")
    result = app.maintenance.reset_ledgers(
        password,
        confirm=lambda: ask_yes_no("Delete ALL stock and sold records? This cannot be undone."),
    )
    if result is None:
        print("\n  Cancelled.\n")
        return
    print(
        f"\n  Removed {result.stock_removed} stock units and "
        f"{result.sold_removed} sold records.\n"
    )
