#!/usr/bin/env python3
"""
Print a password hash for the ``operators`` section of a config file.

Usage:
    python3 -m scripts.hash_password
"""

import sys
from getpass import getpass

from stock_kernel.services.auth_gateway import hash_password


def main() -> int:
    password = getpass("Password: ")
    if not password:
        print("Empty password.", file=sys.stderr)
        return 1
    if getpass("Again: ") != password:
        print("Passwords differ.", file=sys.stderr)
        return 1
    print(hash_password(password))
    return 0


if __name__ == "__main__":
    sys.exit(main())
