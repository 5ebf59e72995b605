"""
Trust Profiles — mutual TLS material for the database connection
================================================================

Purpose
-------
Loads the certificate authority bundle and the client certificate/key pair
named by the environment, assembles them into an `ssl.SSLContext`, and
registers the result under a lookup key in a `TLSRegistry`. The connection
engine later resolves that key to hand the context to the MySQL driver.

Load Order & Behavior
---------------------
1. Read the CA bundle as raw bytes.
2. Extract every PEM ``CERTIFICATE`` block. Blocks that do not decode are
   skipped; the bundle is rejected only when nothing usable remains.
3. Load the client certificate and private key as a pair.
4. Register the profile under ``TLS_CONFIG_KEY`` (last write wins).

Errors
------
- TrustFileError: a file is missing or unreadable.
- CertificateParseError: the CA bundle holds no valid certificate.
- KeyPairError: the client certificate/key are malformed or do not match.
- TLSRegistrationError: the key is reserved or unknown.
"""

import logging
import re
import ssl
from dataclasses import dataclass
from pathlib import Path

from mycrud.errors import (
    CertificateParseError,
    KeyPairError,
    TLSRegistrationError,
    TrustFileError,
)

logger = logging.getLogger(__name__)

TLS_CONFIG_KEY = "custom"
"""Lookup key the trust profile is registered under."""

RESERVED_TLS_KEYS = frozenset({"1", "true", "TRUE", "True", "0", "false", "FALSE", "False"})
"""Boolean spellings the driver's `tls` parameter already gives a meaning to."""

RESERVED_TLS_MODES = frozenset({"skip-verify", "preferred"})
"""TLS modes reserved regardless of case."""

_PEM_CERT_RE = re.compile(
    r"-----BEGIN CERTIFICATE-----\r?\n.*?-----END CERTIFICATE-----",
    re.DOTALL,
)


@dataclass(frozen=True)
class TrustProfile:
    """
    A named bundle of trusted roots plus a client certificate/key pair.

    Attributes
    ----------
    key : str
        Registry lookup key.
    context : ssl.SSLContext
        Client context with the CA roots and client chain loaded.
    ca_count : int
        Number of CA certificates accepted from the bundle.
    """

    key: str
    context: ssl.SSLContext
    ca_count: int


class TLSRegistry:
    """
    Registry of trust profiles keyed by name.

    Owned by the caller and threaded from the configuration resolver to the
    connection engine. Registering an existing key replaces the profile.
    """

    def __init__(self):
        self._profiles: dict[str, TrustProfile] = {}

    def register(self, profile: TrustProfile) -> None:
        """
        Register ``profile`` under its key, replacing any previous entry.

        Raises
        ------
        TLSRegistrationError
            If the key is empty or reserved by the driver.
        """
        if not profile.key:
            raise TLSRegistrationError("trust profile key must not be empty")
        if profile.key in RESERVED_TLS_KEYS or profile.key.lower() in RESERVED_TLS_MODES:
            raise TLSRegistrationError(f"key '{profile.key}' is reserved")
        if profile.key in self._profiles:
            logger.debug("Replacing trust profile %r", profile.key)
        self._profiles[profile.key] = profile

    def get(self, key: str) -> TrustProfile:
        """
        Return the profile registered under ``key``.

        Raises
        ------
        TLSRegistrationError
            If nothing is registered under ``key``.
        """
        try:
            return self._profiles[key]
        except KeyError:
            raise TLSRegistrationError(f"no trust profile registered under '{key}'") from None

    def __contains__(self, key: object) -> bool:
        return key in self._profiles

    def __len__(self) -> int:
        return len(self._profiles)


def _read_bytes(path: str) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise TrustFileError(path, e) from e


def load_root_certificates(context: ssl.SSLContext, pem: bytes) -> int:
    """
    Add every decodable PEM certificate in ``pem`` to ``context``.

    Parameters
    ----------
    context : ssl.SSLContext
        Context whose verify locations receive the certificates.
    pem : bytes
        Concatenated PEM-encoded certificates.

    Returns
    -------
    int
        Number of certificates accepted.

    Raises
    ------
    CertificateParseError
        If no certificate could be loaded.
    """
    count = 0
    for block in _PEM_CERT_RE.findall(pem.decode("latin-1")):
        try:
            der = ssl.PEM_cert_to_DER_cert(block)
            context.load_verify_locations(cadata=der)
        except (ValueError, ssl.SSLError) as e:
            logger.debug("Skipping undecodable CA certificate: %s", e)
            continue
        count += 1
    if count == 0:
        raise CertificateParseError("trusted conn with DB not established, cannot parse cert PEM")
    return count


def _refuse_passphrase():
    raise KeyPairError("client private key is encrypted; only unencrypted keys are supported")


def load_key_pair(context: ssl.SSLContext, cert_path: str, key_path: str) -> None:
    """
    Load the client certificate/key pair into ``context``.

    Raises
    ------
    TrustFileError
        If either file cannot be read.
    KeyPairError
        If the material is malformed or encrypted, or the key does not match the certificate.
    """
    # Read first so access errors carry the offending path.
    _read_bytes(cert_path)
    _read_bytes(key_path)
    try:
        context.load_cert_chain(certfile=cert_path, keyfile=key_path, password=_refuse_passphrase)
    except ssl.SSLError as e:
        raise KeyPairError(
            f"cannot load client key pair ({cert_path}, {key_path}): {e.reason or e}"
        ) from e
    except OSError as e:
        # Both files were readable above; OpenSSL reports bad material through errno too.
        raise KeyPairError(f"cannot load client key pair ({cert_path}, {key_path}): {e}") from e


def tls_config(
    registry: TLSRegistry,
    ca_cert_path: str,
    client_cert_path: str,
    client_key_path: str,
) -> str:
    """
    Build and register the trust profile for the database connection.

    Parameters
    ----------
    registry : TLSRegistry
        Registry that receives the profile.
    ca_cert_path : str
        Path to the CA bundle used to verify the server.
    client_cert_path : str
        Path to the client certificate presented to the server.
    client_key_path : str
        Path to the client private key.

    Returns
    -------
    str
        The key the profile was registered under. Pass it to the
        connection engine to enable TLS.
    """
    pem = _read_bytes(ca_cert_path)
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    ca_count = load_root_certificates(context, pem)
    load_key_pair(context, client_cert_path, client_key_path)

    profile = TrustProfile(key=TLS_CONFIG_KEY, context=context, ca_count=ca_count)
    registry.register(profile)
    logger.info("Registered trust profile %r with %d CA certificate(s)", profile.key, ca_count)
    return profile.key
