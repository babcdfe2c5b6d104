"""CLI utilities: formatting and prompts."""

from datetime import datetime
from decimal import Decimal
from getpass import getpass


def fmt_amount(v) -> str:
    """Format amount for display (e.g. Rp 1,234,000)."""
    d = Decimal(str(v))
    return f"Rp {d:,.0f}"


def fmt_time(ts: datetime) -> str:
    return ts.strftime("%Y-%m-%d %H:%M")


def ask(label: str, default: str | None = None) -> str:
    """Prompt for a line; blank input returns ``default`` when given."""
    suffix = f" [{default}]" if default not in (None, "") else ""
    answer = input(f"  {label}{suffix}: ").strip()
    if not answer and default is not None:
        return default
    return answer


def ask_yes_no(question: str) -> bool:
    return input(f"  {question} [y/N]: ").strip().lower() in ("y", "yes")


def ask_secret(label: str) -> str:
    return getpass(f"  {label}: ")

