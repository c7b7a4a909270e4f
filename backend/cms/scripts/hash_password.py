from __future__ import annotations

import argparse
import getpass

from backend.cms.services.auth_service import DEFAULT_ITERATIONS, hash_password


def main() -> None:
    ap = argparse.ArgumentParser(
        description="Print a password hash for the ADMIN_PASSWORD_HASH setting."
    )
    ap.add_argument("password", nargs="?", help="plaintext password; prompted for when omitted")
    ap.add_argument("--iterations", type=int, default=DEFAULT_ITERATIONS)
    args = ap.parse_args()

    password = args.password
    if password is None:
        password = getpass.getpass("Password: ")
        if password != getpass.getpass("Repeat: "):
            ap.error("passwords do not match")
    if not password:
        ap.error("password must not be empty")
    print(hash_password(password, iterations=args.iterations))


if __name__ == "__main__":
    main()
