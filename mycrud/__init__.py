"""
mycrud — user CRUD over a mutually authenticated MySQL connection.

Packages
--------
- crypt:
    TLS trust profiles (CA bundle + client key pair) and their registry.
- database:
    Configuration, connection engine, entities, DAOs and service functions.
- main:
    The command-line entry point.
"""

__version__ = "0.1.0"
