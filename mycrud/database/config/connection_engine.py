"""
Connection Engine (SQLAlchemy + PyMySQL)

Purpose
-------
Centralizes database initialization for the application:
- Builds the SQLAlchemy connection URL from a resolved `ConnectionConfig`.
- Resolves the TLS trust profile by key and hands its `SSLContext` to PyMySQL.
- Creates the Engine and pings the server before handing it out.
- Defines shared MetaData, the Declarative Base for ORM models, and the
  session factory used by the transaction helpers.

Notes
-----
- Uses `URL.create(...)` so credentials never pass through string formatting.
- The session time zone is pinned to UTC with an init command.
- When `parse_time` is off, DATE/DATETIME/TIMESTAMP/TIME columns come back
  as strings instead of Python temporal objects.
- All ORM models must inherit from `declarativeBase`.
"""

import logging
from typing import Optional

from pymysql.constants import FIELD_TYPE
from pymysql.converters import conversions
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.schema import MetaData

from mycrud.crypt.trust import TLSRegistry
from mycrud.database.config.config import ConnectionConfig
from mycrud.errors import DatabaseConnectionError, TLSRegistrationError

logger = logging.getLogger(__name__)

DRIVER_NAME = "mysql+pymysql"
DEFAULT_PORT = 3306

_TEMPORAL_FIELD_TYPES = (
    FIELD_TYPE.DATE,
    FIELD_TYPE.DATETIME,
    FIELD_TYPE.TIMESTAMP,
    FIELD_TYPE.TIME,
)

# --------------------------------------------------------------------
# Metadata object: stores schema-level information about tables,
# constraints, indexes, etc. Shared across all models.
# --------------------------------------------------------------------
metadata = MetaData()

# --------------------------------------------------------------------
# Declarative Base: root class for ORM models.
# --------------------------------------------------------------------
declarativeBase = declarative_base(metadata=metadata)

# --------------------------------------------------------------------
# Session factory: bound to an engine by `open_engine`.
# --------------------------------------------------------------------
SessionFactory = sessionmaker()


def split_addr(addr: str) -> tuple[str, int]:
    """
    Split a `host:port` address. IPv6 hosts may be bracketed
    (``[::1]:3306``); a missing port defaults to 3306.
    """
    if addr.startswith("["):
        host, _, rest = addr[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif addr.count(":") == 1:
        host, port = addr.split(":")
    else:
        host, port = addr, ""
    if not port:
        return host or "localhost", DEFAULT_PORT
    try:
        return host or "localhost", int(port)
    except ValueError:
        raise DatabaseConnectionError(f"invalid port in address '{addr}'") from None


def build_url(config: ConnectionConfig) -> URL:
    """Construct the SQLAlchemy URL for ``config``."""
    host, port = split_addr(config.addr)
    return URL.create(
        drivername=DRIVER_NAME,
        username=config.user,
        password=config.password,
        host=host,
        port=port,
        database=config.db_name,
    )


def build_connect_args(config: ConnectionConfig, registry: Optional[TLSRegistry] = None) -> dict:
    """
    Driver keyword arguments for PyMySQL.

    Raises
    ------
    TLSRegistrationError
        If the config names a trust profile the registry does not hold.
    """
    connect_args: dict = {"init_command": "SET time_zone = '+00:00'"}
    if not config.parse_time:
        conv = dict(conversions)
        for field_type in _TEMPORAL_FIELD_TYPES:
            conv.pop(field_type, None)
        connect_args["conv"] = conv
    if config.tls_key is not None:
        if registry is None:
            raise TLSRegistrationError(f"trust profile '{config.tls_key}' requested without a registry")
        connect_args["ssl"] = registry.get(config.tls_key).context
    return connect_args


def ping(engine: Engine) -> None:
    """Run a trivial statement to prove the server is reachable."""
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def open_engine(config: ConnectionConfig, registry: Optional[TLSRegistry] = None) -> Engine:
    """
    Create the Engine for ``config``, ping the server, and bind the
    session factory to it.

    Parameters
    ----------
    config : ConnectionConfig
        Resolved connection parameters.
    registry : TLSRegistry, optional
        Registry holding the trust profile named by ``config.tls_key``.

    Returns
    -------
    Engine
        A live engine.

    Raises
    ------
    DatabaseConnectionError
        If the engine cannot be created or the ping fails.
    """
    connect_args = build_connect_args(config, registry)
    try:
        engine = create_engine(build_url(config), connect_args=connect_args)
    except SQLAlchemyError as e:
        raise DatabaseConnectionError(f"open engine: {e}") from e

    try:
        ping(engine)
    except SQLAlchemyError as e:
        engine.dispose()
        raise DatabaseConnectionError(f"open engine ping: {e}") from e

    SessionFactory.configure(bind=engine)
    logger.info(
        "Connected to %s/%s as %s (tls=%s)",
        config.addr,
        config.db_name,
        config.user,
        "on" if config.tls_enabled else "off",
    )
    return engine
