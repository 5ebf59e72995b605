"""
User ORM Model
==============

The ``User`` ORM model maps to the ``user`` table: a generated identifier,
creation/update timestamps, and a free-text name.

Key features
~~~~~~~~~~~~
- ``CHAR(128)`` identifier assigned by the ``init_uuid`` trigger on MySQL
- ``cat`` / ``uat`` timestamps maintained by the database
- Trigger DDL attached to the table so ``metadata.create_all`` installs it

"""

import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import CHAR, DDL, TEXT, TIMESTAMP, FetchedValue, event, func
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql.expression import ColumnElement

from mycrud.database.config.connection_engine import declarativeBase


def _new_id() -> str:
    # Overwritten by the init_uuid trigger where it exists.
    return str(uuid.uuid4())


class _TouchedTimestamp(ColumnElement):
    """`CURRENT_TIMESTAMP` default that MySQL also refreshes on every update."""

    type = TIMESTAMP()
    inherit_cache = True


@compiles(_TouchedTimestamp)
def _compile_touched_timestamp(element, compiler, **kw):
    return "CURRENT_TIMESTAMP"


@compiles(_TouchedTimestamp, "mysql")
def _compile_touched_timestamp_mysql(element, compiler, **kw):
    return "CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP"


class User(declarativeBase):
    """
    ORM model for the `user` table.

    Attributes
    ----------
    id : str
        Identifier generated on insert.
    created_at : datetime
        Row creation time (column ``cat``).
    updated_at : datetime
        Last modification time (column ``uat``).
    name : str, optional
        Name of the user.
    """

    __tablename__ = "user"

    id: Mapped[str] = mapped_column(CHAR(128), primary_key=True, default=_new_id)
    """Identifier of the user."""

    created_at: Mapped[datetime] = mapped_column(
        "cat", TIMESTAMP, server_default=func.current_timestamp()
    )
    """Creation timestamp, defaults to the server's current time."""

    updated_at: Mapped[datetime] = mapped_column(
        "uat",
        TIMESTAMP,
        server_default=_TouchedTimestamp(),
        server_onupdate=FetchedValue(),
        onupdate=func.current_timestamp(),
    )
    """Refreshed on every update."""

    name: Mapped[Optional[str]] = mapped_column(TEXT)
    """Name of the user."""

    def __str__(self) -> str:
        return (
            f"{{id:{self.id} createdAt:{self.created_at} "
            f"updatedAt:{self.updated_at} name:{self.name}}}"
        )


# --------------------------------------------------------------------
# MySQL assigns the identifier server side, mirroring the documented schema:
#   create trigger init_uuid before insert on user
#     for each row set new.id = uuid();
# --------------------------------------------------------------------
event.listen(
    User.__table__,
    "after_create",
    DDL("CREATE TRIGGER init_uuid BEFORE INSERT ON `user` FOR EACH ROW SET NEW.id = uuid()").execute_if(
        dialect="mysql"
    ),
)
