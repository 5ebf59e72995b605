"""
The `config` package provides two core building blocks for establishing database connections.

Contents:
    - config: Configuration layer - typed settings loaded from `DB_*` environment variables (with .env support), resolved into an immutable `ConnectionConfig`
    - connection_engine: Database layer - SQLAlchemy bootstrap that builds the PyMySQL URL and TLS arguments from that configuration, creates and pings the Engine, and owns the shared MetaData, declarative base and session factory
"""
