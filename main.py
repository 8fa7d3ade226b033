"""Command-line interface for the userdesk service."""

from __future__ import annotations
import argparse
import logging
import sys
from getpass import getpass
from pathlib import Path
from typing import Sequence

from userdesk.config import ServiceConfig, load_config
from userdesk.database import Database
from userdesk.errors import UserdeskError
from userdesk.users import UserRepository
from userdesk.validation import PASSWORD_MAX_LENGTH, PASSWORD_MIN_LENGTH

logger = logging.getLogger("userdesk.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Userdesk service utilities")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML configuration file (defaults to USERDESK_CONFIG or config/userdesk.yaml)",
    )
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    subparsers.add_parser("init-db", help="Initialise the user database")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP service")
    serve_parser.add_argument("--host", default=None, help="Bind address (default: from configuration)")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: from configuration, 8000)",
    )

    subparsers.add_parser("admin", help="Launch the interactive administration console")

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "admin", "init-db"}

    # Global options may precede the subcommand.
    index = 0
    while index < len(args_list):
        if args_list[index] == "--config":
            index += 2
        elif args_list[index].startswith("--config="):
            index += 1
        else:
            break

    if index >= len(args_list):
        args_list = [*args_list, "serve"]
    else:
        first = args_list[index]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = [*args_list[:index], "serve", *args_list[index:]]

    return parser.parse_args(args_list)


def _initialise_database(config: ServiceConfig) -> Database:
    database = Database(config.database_path)
    database.initialize()
    logger.info("Database initialised at %s", config.database_path)
    return database


def _serve(*, config: ServiceConfig, database: Database, host: str | None, port: int | None) -> None:
    from userdesk.application import create_application
    import uvicorn

    bind_host = host or config.host
    bind_port = port or config.port
    logger.info("Starting userdesk on http://%s:%s", bind_host, bind_port)

    app = create_application(config=config, database=database)
    uvicorn.run(app, host=bind_host, port=bind_port, log_level=config.log_level.lower())


def _run_admin_cli(repository: UserRepository) -> None:
    """Provide an interactive console for administrators."""

    print("Userdesk Administration Console")
    print("Press Ctrl+C at any time to exit.\n")

    try:
        while True:
            print("Select an option:")
            print("  1) List all users")
            print("  2) Add a new user")
            print("  3) Delete a user")
            print("  4) Exit")

            choice = input("Enter choice [1-4]: ").strip()

            if choice == "1":
                _list_users(repository)
            elif choice == "2":
                _add_user(repository)
            elif choice == "3":
                _delete_user(repository)
            elif choice == "4":
                print("Goodbye!")
                return
            else:
                print("Invalid selection. Please choose a number from the menu.\n")

            print()
    except KeyboardInterrupt:
        print("\nExiting administration console.")


def _list_users(repository: UserRepository) -> None:
    users = repository.find_all()
    if not users:
        print("No users are currently registered.")
        return

    print(f"{len(users)} user(s) found:")
    print(f"{'ID':>4}  {'Username':<30}  {'Email':<32}  Created")
    print("-" * 90)
    for user in sorted(users, key=lambda item: item.id):
        created = user.created_at.strftime("%Y-%m-%d %H:%M:%S %Z")
        print(f"{user.id:>4}  {user.username:<30}  {user.email:<32}  {created}")


def _add_user(repository: UserRepository) -> None:
    print("\nCreate a new user (leave the username blank to cancel).")
    username = input("Username: ").strip()
    if not username:
        print("User creation cancelled.")
        return

    email = input("Email address: ").strip()

    password = _prompt_for_password()
    if password is None:
        print("Aborted creating user.")
        return

    try:
        user = repository.create({"username": username, "email": email, "password": password})
    except UserdeskError as exc:
        print(f"Failed to create user: {exc.message}")
        return

    print(f"Created user #{user.id}: {user.username} <{user.email}>")


def _delete_user(repository: UserRepository) -> None:
    raw = input("User ID to delete: ").strip()
    try:
        user_id = int(raw)
    except ValueError:
        print("User IDs are numeric.")
        return

    if repository.delete_user(user_id):
        print(f"Deleted user #{user_id}.")
    else:
        print(f"No user with ID {user_id} exists.")


def _prompt_for_password() -> str | None:
    for _ in range(3):
        password = getpass(f"Password ({PASSWORD_MIN_LENGTH}-{PASSWORD_MAX_LENGTH} characters): ")
        if not PASSWORD_MIN_LENGTH <= len(password) <= PASSWORD_MAX_LENGTH:
            print("Password length is out of range. Please try again.")
            continue
        confirmation = getpass("Confirm password: ")
        if password != confirmation:
            print("Passwords do not match. Please try again.")
            continue
        return password
    return None


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    config = load_config(Path(args.config).expanduser() if args.config else None)

    logging.basicConfig(level=config.log_level_value, format="%(asctime)s [%(levelname)s] %(message)s")

    database = _initialise_database(config)

    if args.command == "serve":
        _serve(config=config, database=database, host=args.host, port=args.port)
    elif args.command == "admin":
        _run_admin_cli(UserRepository(database))
    elif args.command == "init-db":
        print("Database initialisation complete.")


if __name__ == "__main__":
    main()
