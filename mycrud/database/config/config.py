"""
Configuration — Pydantic v2 Settings (env / .env)
=================================================

Purpose
-------
Resolves the parameters needed to open the MySQL connection:
- Pydantic v2 `BaseSettings` reads the ``DB_*`` variables from the
  environment, falling back to a `.env` file.
- `db_conf_from_env` turns those settings into an immutable
  `ConnectionConfig`, loading the TLS trust profile unless ``DB_SKIP_TLS``
  is present.

Load Order & Behavior
---------------------
- A variable that is present overrides its default even when empty;
  only absence keeps the default.
- ``DB_SKIP_TLS`` disables TLS by presence alone, whatever its value.
- Without ``DB_SKIP_TLS`` the three certificate paths are required and are
  checked in order: CA cert, client cert, client key.
- Names are matched case-sensitively: `db_skip_tls` is not `DB_SKIP_TLS`.
- `extra="ignore"`: unknown env vars are ignored (not an error).

Usage
-----
from mycrud.crypt.trust import TLSRegistry
from mycrud.database.config.config import db_conf_from_env

registry = TLSRegistry()
conf = db_conf_from_env(registry)

Security
--------
- Never commit secrets or the `.env` file to source control.
- Prefer runtime environment variables in production (K8s/Secrets Manager/etc.).
"""

import logging
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from mycrud.crypt.trust import TLSRegistry, tls_config
from mycrud.errors import MissingEnvironmentError

logger = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    """
    Raw database settings loaded from environment variables or a `.env` file.
    Optional fields stay ``None`` when the variable is absent, so presence
    can be told apart from an empty value.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    DB_USER: Optional[str] = Field(None, description="Database username credential.")
    DB_PASS: Optional[str] = Field(None, description="Database password credential.")
    DB_ADDR: Optional[str] = Field(None, description="Server address as `host:port`.")
    DB_NAME: Optional[str] = Field(None, description="Name of the application’s database.")
    DB_SKIP_TLS: Optional[str] = Field(None, description="Any value disables the TLS requirement.")
    DB_CA_CERT_PATH: Optional[str] = Field(None, description="Path to the PEM CA bundle.")
    DB_CLIENT_CERT_PATH: Optional[str] = Field(None, description="Path to the PEM client certificate.")
    DB_CLIENT_KEY_PATH: Optional[str] = Field(None, description="Path to the PEM client private key.")


class ConnectionConfig(BaseModel):
    """
    Resolved, immutable parameters for opening the database connection.
    """

    model_config = ConfigDict(frozen=True)

    user: str = Field("root", description="Database username.")
    password: str = Field("", description="Database password.")
    net: Literal["tcp"] = Field("tcp", description="Network transport.")
    addr: str = Field("localhost:3306", description="Server address as `host:port`.")
    db_name: str = Field("mycrud", description="Database name.")
    loc: Literal["UTC"] = Field("UTC", description="Session time zone.")
    parse_time: bool = Field(True, description="Convert DATE/DATETIME/TIMESTAMP values to Python types.")
    tls_key: Optional[str] = Field(None, description="Trust profile key; `None` disables TLS.")

    @property
    def tls_enabled(self) -> bool:
        return self.tls_key is not None


def db_conf_from_env(registry: TLSRegistry, settings: Optional[DatabaseSettings] = None) -> ConnectionConfig:
    """
    Resolve a `ConnectionConfig` from the environment.

    Parameters
    ----------
    registry : TLSRegistry
        Registry that receives the trust profile when TLS is required.
    settings : DatabaseSettings, optional
        Pre-loaded settings; read from the environment when omitted.

    Returns
    -------
    ConnectionConfig
        The resolved configuration.

    Raises
    ------
    MissingEnvironmentError
        If TLS is required and one of the certificate paths is unset.
    TrustConfigError
        If the trust profile cannot be loaded or registered.
    """
    if settings is None:
        settings = DatabaseSettings()

    overrides = {
        "user": settings.DB_USER,
        "password": settings.DB_PASS,
        "addr": settings.DB_ADDR,
        "db_name": settings.DB_NAME,
    }
    values = {field: value for field, value in overrides.items() if value is not None}

    if settings.DB_SKIP_TLS is not None:
        logger.warning("DB_SKIP_TLS is set; connecting without TLS")
        return ConnectionConfig(**values)

    ca_cert_path = settings.DB_CA_CERT_PATH
    if ca_cert_path is None:
        raise MissingEnvironmentError("DB_CA_CERT_PATH")
    client_cert_path = settings.DB_CLIENT_CERT_PATH
    if client_cert_path is None:
        raise MissingEnvironmentError("DB_CLIENT_CERT_PATH")
    client_key_path = settings.DB_CLIENT_KEY_PATH
    if client_key_path is None:
        raise MissingEnvironmentError("DB_CLIENT_KEY_PATH")

    tls_key = tls_config(registry, ca_cert_path, client_cert_path, client_key_path)
    return ConnectionConfig(tls_key=tls_key, **values)
