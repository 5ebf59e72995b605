"""
Service-layer operations on users.

All functions are wrapped with the `@transactional` decorator, which manages
SQLAlchemy sessions and transactions automatically. Each function accepts (and
uses) an injected `session: Session` provided by the decorator.
"""

import logging

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from mycrud.database.config.connection_engine import metadata
from mycrud.database.daos.user_dao import UserDao
from mycrud.database.entities.user import User
from mycrud.database.helpers.transactionManagement import transactional

logger = logging.getLogger(__name__)


def init_schema(engine: Engine) -> None:
    """
    Create the ``user`` table (and, on MySQL, its ``init_uuid`` trigger)
    if it does not exist yet.
    """
    metadata.create_all(engine, tables=[User.__table__])
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


@transactional
def list_users(session: Session) -> list[User]:
    """Return every user, oldest first."""
    users = UserDao().fetchUsers(session)
    # Detach loaded rows so they stay readable after the session closes.
    session.expunge_all()
    return users


@transactional
def add_user(name: str, session: Session) -> int:
    """Insert a user called ``name``; returns the inserted row count."""
    return UserDao().createUser(session, name)


@transactional
def rename_user(old_name: str, new_name: str, session: Session) -> int:
    """Rename users called ``old_name``; returns the updated row count."""
    return UserDao().updateUserName(session, old_name, new_name)


@transactional
def remove_user(name: str, session: Session) -> int:
    """Delete users called ``name``; returns the deleted row count."""
    return UserDao().deleteUser(session, name)
