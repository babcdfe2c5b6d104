"""CLI main loop: menu dispatch and error reporting."""

import logging
import sys

from stock_kernel.exceptions import (
    AuthError,
    CapacityError,
    ConflictError,
    InconsistentLedgerError,
    NotFoundError,
    ValidationError,
)
from stock_kernel.logging_config import StructuredFormatter, configure_logging

from scripts.cli import actions
from scripts.cli import config as cli_config
from scripts.cli.menu import print_menu
from scripts.cli.views import show_dashboard, show_integrity, show_sold, show_stock

logger = logging.getLogger("stock_kernel.cli")

COMMANDS = {
    "D": show_dashboard,
    "S": show_stock,
    "H": show_sold,
    "G": show_integrity,
    "N": actions.receive_unit,
    "E": actions.edit_unit,
    "O": actions.checkout_unit,
    "B": actions.scan_mode,
    "C": actions.add_category,
    "K": actions.delete_sold_record,
    "X": actions.reset_all,
    "L": actions.sign_in,
    "U": actions.sign_out,
}


class _FlushingFileHandler(logging.FileHandler):
    """FileHandler that flushes after every emit so interactive.log updates immediately."""

    def emit(self, record: logging.LogRecord) -> None:
        super().emit(record)
        self.flush()


def run(app) -> int:
    """Menu loop over a wired InventoryApp.  Returns the process exit code."""
    while True:
        session = app.auth.current_session()
        print_menu(session.email if session else None)
        try:
            choice = input("  Pick: ").strip().upper()
        except (EOFError, KeyboardInterrupt):
            print("\n")
            return 0

        if choice == "Q":
            print("\n  Goodbye.\n")
            return 0
        command = COMMANDS.get(choice)
        if command is None:
            print(f"\n  Unknown command '{choice}'. Try one of {', '.join(COMMANDS)} or Q.")
            continue

        try:
            command(app)
        except InconsistentLedgerError as exc:
            logger.critical("cli_inconsistent_ledger", exc_info=True)
            print(f"\n  FATAL: {exc}", file=sys.stderr)
            if exc.unit is not None:
                print(f"  Unit snapshot: {exc.unit.to_record()}", file=sys.stderr)
            return 2
        except (ValidationError, NotFoundError) as exc:
            print(f"\n  Rejected: {exc}\n")
        except AuthError as exc:
            print(f"\n  Not allowed: {exc}\n")
        except (ConflictError, CapacityError) as exc:
            logger.warning("cli_command_failed", exc_info=True, extra={"command": choice})
            print(f"\n  FAILED: {exc}\n")


def main() -> int:
    from stock_config import bootstrap, get_active_config

    log_dir = cli_config.LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / cli_config.LOG_FILE

    try:
        config = get_active_config()
    except (FileNotFoundError, ValueError) as exc:
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    file_handler = _FlushingFileHandler(str(log_path), mode="a")
    file_handler.setFormatter(StructuredFormatter())
    configure_logging(level=config.log_level, handler=file_handler)
    logger.info("interactive_cli_starting", extra={"log_path": str(log_path)})

    try:
        app = bootstrap(config, confirm=actions.confirm_checkout)
    except Exception as exc:
        logger.exception("interactive_cli_bootstrap_failed")
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    logger.info("interactive_cli_started", extra={"config_id": config.config_id})
    print(f"  Config: {config.config_id}  Database: {config.database_url}")
    print(f"  Logging to: {log_path}", file=sys.stderr)
    return run(app)
