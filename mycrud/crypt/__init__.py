"""
The `crypt` package provides the TLS material that secures the database
connection.

Contents
--------
- trust
    * `tls_config` — loads the CA bundle and the client certificate/key pair
      and registers the resulting trust profile
    * `TLSRegistry` — explicit registry of trust profiles, looked up by key
      when the connection engine is built
    * `TrustProfile` — an `ssl.SSLContext` with its registry key
"""
