"""
Exception hierarchy shared across the application.

Every failure raised while resolving configuration, loading TLS material,
or opening the database connection derives from `MycrudError`, so the CLI
can log a single message and exit without a traceback.

Hierarchy
---------
- MycrudError
    - ConfigurationError
        - MissingEnvironmentError
    - TrustConfigError
        - TrustFileError
        - CertificateParseError
        - KeyPairError
        - TLSRegistrationError
    - DatabaseConnectionError
"""


class MycrudError(Exception):
    """Base class for all application errors."""


class ConfigurationError(MycrudError):
    """Raised when the connection configuration cannot be resolved."""


class MissingEnvironmentError(ConfigurationError):
    """
    Raised when a required environment variable is absent.

    Attributes
    ----------
    variable : str
        Name of the missing environment variable.
    """

    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"{variable} is required and was not set")


class TrustConfigError(MycrudError):
    """Raised when the TLS trust profile cannot be assembled."""


class TrustFileError(TrustConfigError):
    """Raised when certificate or key material cannot be read from disk."""

    def __init__(self, path: str, cause: OSError):
        self.path = path
        super().__init__(f"cannot read {path}: {cause.strerror or cause}")


class CertificateParseError(TrustConfigError):
    """Raised when the CA bundle yields no usable certificate."""


class KeyPairError(TrustConfigError):
    """Raised when the client certificate/key pair is malformed or mismatched."""


class TLSRegistrationError(TrustConfigError):
    """Raised when a trust profile cannot be registered or looked up."""


class DatabaseConnectionError(MycrudError):
    """Raised when the database cannot be opened or does not answer a ping."""
