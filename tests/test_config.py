"""Tests for resolving the connection configuration from the environment."""

from __future__ import annotations

import itertools

import pytest
from pydantic import ValidationError

from mycrud.crypt import trust
from mycrud.crypt.trust import TLSRegistry
from mycrud.database.config.config import ConnectionConfig, DatabaseSettings, db_conf_from_env
from mycrud.errors import MissingEnvironmentError, TrustFileError

OVERRIDES = {
    "DB_USER": ("user", "app"),
    "DB_PASS": ("password", "s3cret"),
    "DB_ADDR": ("addr", "db.internal:3307"),
    "DB_NAME": ("db_name", "inventory"),
}

DEFAULTS = {"user": "root", "password": "", "addr": "localhost:3306", "db_name": "mycrud"}


def _resolve(registry: TLSRegistry | None = None) -> ConnectionConfig:
    return db_conf_from_env(registry if registry is not None else TLSRegistry(), DatabaseSettings(_env_file=None))


def test_skip_tls_only_uses_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_SKIP_TLS", "1")
    registry = TLSRegistry()

    conf = _resolve(registry)

    assert conf.user == "root"
    assert conf.password == ""
    assert conf.addr == "localhost:3306"
    assert conf.db_name == "mycrud"
    assert conf.net == "tcp"
    assert conf.loc == "UTC"
    assert conf.parse_time is True
    assert conf.tls_key is None
    assert conf.tls_enabled is False
    assert len(registry) == 0


@pytest.mark.parametrize(
    "present",
    [combo for n in range(len(OVERRIDES) + 1) for combo in itertools.combinations(OVERRIDES, n)],
)
def test_overrides_follow_presence(monkeypatch: pytest.MonkeyPatch, present: tuple[str, ...]) -> None:
    monkeypatch.setenv("DB_SKIP_TLS", "")
    for name in present:
        monkeypatch.setenv(name, OVERRIDES[name][1])

    conf = _resolve()

    for name, (field, value) in OVERRIDES.items():
        expected = value if name in present else DEFAULTS[field]
        assert getattr(conf, field) == expected


def test_empty_values_still_override(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_SKIP_TLS", "")
    monkeypatch.setenv("DB_USER", "")
    monkeypatch.setenv("DB_NAME", "")

    conf = _resolve()

    assert conf.user == ""
    assert conf.db_name == ""
    assert conf.addr == "localhost:3306"


@pytest.mark.parametrize("value", ["", "0", "false", "yes"])
def test_skip_tls_presence_disables_tls(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("DB_SKIP_TLS", value)
    monkeypatch.setenv("DB_CA_CERT_PATH", "/does/not/exist/ca.pem")
    monkeypatch.setenv("DB_CLIENT_CERT_PATH", "/does/not/exist/cert.pem")
    monkeypatch.setenv("DB_CLIENT_KEY_PATH", "/does/not/exist/key.pem")

    conf = _resolve()

    assert conf.tls_key is None


@pytest.mark.parametrize(
    ("present", "missing"),
    [
        ((), "DB_CA_CERT_PATH"),
        (("DB_CLIENT_CERT_PATH", "DB_CLIENT_KEY_PATH"), "DB_CA_CERT_PATH"),
        (("DB_CA_CERT_PATH",), "DB_CLIENT_CERT_PATH"),
        (("DB_CA_CERT_PATH", "DB_CLIENT_KEY_PATH"), "DB_CLIENT_CERT_PATH"),
        (("DB_CA_CERT_PATH", "DB_CLIENT_CERT_PATH"), "DB_CLIENT_KEY_PATH"),
    ],
)
def test_missing_path_names_the_variable(
    monkeypatch: pytest.MonkeyPatch, present: tuple[str, ...], missing: str
) -> None:
    # Paths point nowhere: reaching the loader would raise TrustFileError instead.
    for name in present:
        monkeypatch.setenv(name, f"/does/not/exist/{name.lower()}.pem")

    with pytest.raises(MissingEnvironmentError) as excinfo:
        _resolve()

    assert excinfo.value.variable == missing
    assert str(excinfo.value) == f"{missing} is required and was not set"


def test_missing_path_skips_file_io(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, ...]] = []
    monkeypatch.setattr(trust, "_read_bytes", lambda path: calls.append((path,)))
    monkeypatch.setenv("DB_CA_CERT_PATH", "/tmp/ca.pem")

    with pytest.raises(MissingEnvironmentError):
        _resolve()

    assert calls == []


def test_tls_paths_load_trust_profile(
    monkeypatch: pytest.MonkeyPatch, ca_path: str, client_cert_path: str, client_key_path: str
) -> None:
    monkeypatch.setenv("DB_CA_CERT_PATH", ca_path)
    monkeypatch.setenv("DB_CLIENT_CERT_PATH", client_cert_path)
    monkeypatch.setenv("DB_CLIENT_KEY_PATH", client_key_path)
    monkeypatch.setenv("DB_USER", "app")
    registry = TLSRegistry()

    conf = _resolve(registry)

    assert conf.tls_key == "custom"
    assert conf.tls_enabled is True
    assert conf.user == "app"
    assert "custom" in registry


def test_unreadable_ca_surfaces_file_error(
    monkeypatch: pytest.MonkeyPatch, client_cert_path: str, client_key_path: str
) -> None:
    monkeypatch.setenv("DB_CA_CERT_PATH", "/does/not/exist/ca.pem")
    monkeypatch.setenv("DB_CLIENT_CERT_PATH", client_cert_path)
    monkeypatch.setenv("DB_CLIENT_KEY_PATH", client_key_path)

    with pytest.raises(TrustFileError):
        _resolve()


def test_settings_read_dotenv_file(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".env").write_text("DB_SKIP_TLS=\nDB_NAME=from_dotenv\n")

    conf = db_conf_from_env(TLSRegistry())

    assert conf.db_name == "from_dotenv"
    assert conf.tls_key is None


def test_connection_config_is_immutable() -> None:
    conf = ConnectionConfig()

    with pytest.raises(ValidationError):
        conf.user = "someone"  # type: ignore[misc]


def test_lowercase_names_are_not_the_variables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("db_skip_tls", "1")
    monkeypatch.setenv("db_user", "intruder")
    monkeypatch.setenv("Db_Name", "elsewhere")

    with pytest.raises(MissingEnvironmentError) as excinfo:
        _resolve()

    assert excinfo.value.variable == "DB_CA_CERT_PATH"


def test_lowercase_override_is_ignored(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DB_SKIP_TLS", "1")
    monkeypatch.setenv("db_user", "intruder")

    conf = _resolve()

    assert conf.user == "root"
