"""
Entities Package — SQLAlchemy 2.0 ORM Models (MySQL)
====================================================

Contents
--------
- User
    * `id` CHAR(128), assigned by the `init_uuid` trigger
    * `cat` / `uat` creation and update timestamps
    * `name` free text
"""
