"""
User DAO

Purpose
-------
Thin data-access layer for the `User` ORM entity. Provides the four
statements the CLI needs:
- List every user in insertion order
- Insert a user by name
- Rename a user matching an old name
- Delete a user by name

Design
------
- The DAO expects an active SQLAlchemy `Session` supplied by the caller.
- Statements are issued with Core `insert`/`update`/`delete` so the
  database-side trigger and timestamp defaults stay authoritative.
- Commit/rollback is the caller's responsibility (see `@transactional`).

Usage
-----
.. code-block:: python

    from mycrud.database.config.connection_engine import SessionFactory
    from mycrud.database.daos.user_dao import UserDao

    dao = UserDao()
    with SessionFactory() as session:
        dao.createUser(session, "ada")
        dao.updateUserName(session, "ada", "grace")
        users = dao.fetchUsers(session)
        dao.deleteUser(session, "grace")
        session.commit()

Error Handling
--------------
- Each method logs the failure with the method name and re-raises.
"""

import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.orm import Session

from mycrud.database.entities.user import User

logger = logging.getLogger(__name__)


class UserDao:
    """
    Data Access Object (DAO) for managing User entities.
    """

    def fetchUsers(self, session: Session) -> list[User]:
        """
        Fetch every user, oldest first.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.

        Returns
        -------
        list[User]
            All users ordered by creation time.
        """
        try:
            return list(session.scalars(select(User).order_by(User.created_at)))
        except Exception as e:
            logger.error("Error in UserDao.fetchUsers. Error Message: %s", e)
            raise

    def createUser(self, session: Session, name: str) -> int:
        """
        Insert a user. The identifier and timestamps are assigned on insert.

        Parameters
        ----------
        session : Session
            Active SQLAlchemy session.
        name : str
            Name of the new user.

        Returns
        -------
        int
            Number of rows inserted.
        """
        try:
            result = session.execute(insert(User).values(name=name))
            return result.rowcount
        except Exception as e:
            logger.error("Error in UserDao.createUser. Error Message: %s", e)
            raise

    def updateUserName(self, session: Session, old_name: str, new_name: str) -> int:
        """
        Rename every user called ``old_name``.

        Returns
        -------
        int
            Number of rows updated.
        """
        try:
            result = session.execute(
                update(User).where(User.name == old_name).values(name=new_name)
            )
            return result.rowcount
        except Exception as e:
            logger.error("Error in UserDao.updateUserName. Error Message: %s", e)
            raise

    def deleteUser(self, session: Session, name: str) -> int:
        """
        Delete every user called ``name``.

        Returns
        -------
        int
            Number of rows deleted.
        """
        try:
            result = session.execute(delete(User).where(User.name == name))
            return result.rowcount
        except Exception as e:
            logger.error("Error in UserDao.deleteUser. Error Message: %s", e)
            raise
