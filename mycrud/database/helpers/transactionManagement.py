"""
Database Transaction Management
===============================

This module provides utilities for managing SQLAlchemy database sessions
using Python context variables and a decorator-based transaction wrapper.

It allows seamless propagation of a database session across function calls
without explicitly threading it through arguments. Functions can be safely
decorated with ``@transactional`` to ensure they run inside a managed
transactional context.

Key features
~~~~~~~~~~~~
- Context variable to store the active session
- Implicit reuse of existing sessions
- Automatic commit and rollback handling
- Clean session closure after execution

The session factory is bound to an engine by
`mycrud.database.config.connection_engine.open_engine`.
"""

import contextvars
import logging
from functools import wraps

from mycrud.database.config.connection_engine import SessionFactory

logger = logging.getLogger(__name__)

db_session_context = contextvars.ContextVar("db_session_context", default=None)
"""Context variable storing the active SQLAlchemy session."""


def transactional(func):
    """
    Decorator to wrap functions in a managed SQLAlchemy transaction.

    - If a session already exists in context, it is reused.
    - Otherwise, a new session is created, committed, and closed.
    - On errors, the session is rolled back and closed.

    Parameters
    ----------
    func : callable
        The function to wrap. It must accept a `session` keyword argument.

    Returns
    -------
    callable
        The wrapped function, executed within a database transaction.
    """
    @wraps(func)
    def wrap_func(*args, **kwargs):
        session = db_session_context.get()
        if session is not None:
            return func(*args, session=session, **kwargs)

        session = SessionFactory()
        token = db_session_context.set(session)
        try:
            result = func(*args, session=session, **kwargs)
            session.commit()
        except Exception:
            logger.debug("Rolling back transaction in %s", func.__name__)
            session.rollback()
            raise
        finally:
            session.close()
            db_session_context.reset(token)

        return result

    return wrap_func
