"""
Command-line entry point.

Resolves the connection configuration from the environment, opens the
database (with mutual TLS unless ``DB_SKIP_TLS`` is set), pings it, and runs
one of the user commands:

- ``list`` (default): print every user
- ``add NAME``: insert a user
- ``rename OLD NEW``: rename users called OLD
- ``delete NAME``: delete users called NAME
- ``init-schema``: create the ``user`` table and its trigger

Environment contract: see `mycrud.database.config.config`. The log level is
read from ``MYCRUD_LOG_LEVEL`` (default ``INFO``).

Any configuration or connection failure is logged and ends the process with
exit status 1.
"""

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from mycrud.crypt.trust import TLSRegistry
from mycrud.database.config.config import db_conf_from_env
from mycrud.database.config.connection_engine import open_engine
from mycrud.database.core.funcs import add_user, init_schema, list_users, remove_user, rename_user
from mycrud.errors import MycrudError

logger = logging.getLogger("mycrud")

LOG_LEVEL_ENV = "MYCRUD_LOG_LEVEL"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mycrud",
        description=(
            "Create, read, update and delete users over a mutually authenticated "
            "MySQL connection. Connection settings come from DB_* env vars."
        ),
    )
    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("list", help="Print every user (default).")

    add = subparsers.add_parser("add", help="Insert a user.")
    add.add_argument("name")

    rename = subparsers.add_parser("rename", help="Rename users matching OLD.")
    rename.add_argument("old_name", metavar="OLD")
    rename.add_argument("new_name", metavar="NEW")

    delete = subparsers.add_parser("delete", help="Delete users by name.")
    delete.add_argument("name")

    subparsers.add_parser("init-schema", help="Create the user table and trigger.")
    return parser


def _configure_logging() -> None:
    level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _run_command(args: argparse.Namespace, engine) -> None:
    command = args.command or "list"
    if command == "list":
        for user in list_users():
            print(user)
    elif command == "add":
        count = add_user(args.name)
        print(f"added {count} user(s) named {args.name!r}")
    elif command == "rename":
        count = rename_user(args.old_name, args.new_name)
        print(f"renamed {count} user(s) from {args.old_name!r} to {args.new_name!r}")
    elif command == "delete":
        count = remove_user(args.name)
        print(f"deleted {count} user(s) named {args.name!r}")
    elif command == "init-schema":
        init_schema(engine)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the CLI; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    _configure_logging()

    registry = TLSRegistry()
    try:
        conf = db_conf_from_env(registry)
        engine = open_engine(conf, registry)
    except MycrudError as e:
        logger.error("%s", e)
        return 1

    try:
        _run_command(args, engine)
    except SQLAlchemyError as e:
        logger.error("%s failed: %s", args.command or "list", e)
        return 1
    finally:
        engine.dispose()

    logger.info("connection to db successful")
    return 0


if __name__ == "__main__":
    sys.exit(main())
