"""
DAOs Package — Data Access Layer (SQLAlchemy 2.0)
=================================================

Conventions
-----------
- Session lifecycle (open/commit/rollback) is handled by callers
- DAOs surface exceptions so upper layers decide error policy

Contents
--------
- UserDao
    * Lists users in insertion order
    * Inserts a user by name
    * Renames users by old name
    * Deletes users by name
"""
