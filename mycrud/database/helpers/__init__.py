"""
The `helpers` package provides utilities that support database operations.

Contents
--------
- transactionManagement
    * `db_session_context` — context variable holding the active session
    * `@transactional` — runs a function in a managed transaction, reusing
      an active session or creating, committing and closing a new one
"""
