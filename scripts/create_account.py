"""
Register an account from the command line using the configured store.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from getpass import getpass
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from authapi.authenticator import CredentialInput
from authapi.config import get_settings
from authapi.dependencies import get_authenticator

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create an account")
    parser.add_argument("username", type=str, help="Username for the new account")
    parser.add_argument(
        "--password-stdin",
        action="store_true",
        help="Read the password from stdin instead of prompting",
    )
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level.upper())

    if args.password_stdin:
        password = sys.stdin.readline().rstrip("\n")
    else:
        password = getpass("Password: ")
        if password != getpass("Repeat password: "):
            print("Passwords do not match", file=sys.stderr)
            return 1

    result = asyncio.run(
        get_authenticator().validate_registration(
            CredentialInput(username=args.username, password=password)
        )
    )
    if not result.ok:
        for error in result.errors:
            print(f"{error.field}: {error.message}", file=sys.stderr)
        return 1

    print(f"Created account {result.account.account_id} ({result.account.username})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
