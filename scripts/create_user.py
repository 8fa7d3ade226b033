import argparse
import getpass
import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from userdesk.database import Database, resolve_database_path
from userdesk.errors import UserdeskError
from userdesk.users import UserRepository


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a userdesk user")
    parser.add_argument("username", help="Unique alphanumeric username")
    parser.add_argument("email", help="Unique email address")
    parser.add_argument(
        "--db",
        dest="db_path",
        default=None,
        help="Path to the SQLite database (defaults to USERDESK_DB_PATH or data/userdesk.sqlite3)",
    )
    return parser.parse_args()


def prompt_for_password() -> str:
    for _ in range(3):
        password = getpass.getpass("Password: ")
        confirm = getpass.getpass("Confirm password: ")
        if password != confirm:
            print("Passwords do not match. Try again.", file=sys.stderr)
            continue
        return password
    raise SystemExit("Failed to set password after three attempts.")


def main() -> int:
    args = parse_args()
    password = prompt_for_password()

    db_env = args.db_path or os.getenv("USERDESK_DB_PATH")
    db_path = resolve_database_path(db_env)

    database = Database(db_path)
    database.initialize()
    repository = UserRepository(database)

    try:
        user = repository.create(
            {"username": args.username.strip(), "email": args.email.strip(), "password": password}
        )
    except UserdeskError as exc:  # validation, duplicates
        print(f"Error: {exc.message}", file=sys.stderr)
        return 1

    print(f"Created user #{user.id}: {user.username} <{user.email}>")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
