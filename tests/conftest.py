"""Shared fixtures for the test suite."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

from mycrud.database.config.connection_engine import SessionFactory
from mycrud.database.core.funcs import init_schema

FIXTURES = Path(__file__).parent / "fixtures"

DB_ENV_VARS = (
    "DB_USER",
    "DB_PASS",
    "DB_ADDR",
    "DB_NAME",
    "DB_SKIP_TLS",
    "DB_CA_CERT_PATH",
    "DB_CLIENT_CERT_PATH",
    "DB_CLIENT_KEY_PATH",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Strip DB_* variables and run away from any stray .env file."""

    for name in DB_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def ca_path() -> str:
    return str(FIXTURES / "ca.pem")


@pytest.fixture
def client_cert_path() -> str:
    return str(FIXTURES / "client-cert.pem")


@pytest.fixture
def client_key_path() -> str:
    return str(FIXTURES / "client-key.pem")


@pytest.fixture
def engine(tmp_path: Path) -> Engine:
    """SQLite engine with the user table created and the session factory bound."""

    engine = create_engine(f"sqlite:///{tmp_path / 'mycrud.db'}")
    init_schema(engine)
    SessionFactory.configure(bind=engine)
    yield engine
    engine.dispose()
