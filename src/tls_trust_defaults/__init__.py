# tls_trust_defaults/__init__.py
"""
TLS Trust Defaults - default trust store resolution for TLS runtimes.

Builds a trust store from the platform's default CA locations and installs it
as the default for TLS contexts created without an explicit store. Replaces
startup-time patching of a TLS library's global defaults with an explicit,
thread-safe initialization call.

Quick Start:
    >>> from tls_trust_defaults import (
    ...     build_http_client,
    ...     ensure_default_trust_store,
    ...     load_config,
    ...     setup_logger,
    ... )
    >>>
    >>> config = load_config('config/trust_config.yaml')
    >>> setup_logger(config=config.logging)
    >>> ensure_default_trust_store(config.trust_store)  # before any TLS use
    >>>
    >>> with build_http_client() as client:
    ...     client.get('https://example.com')

Features:
    - Platform default paths (SSL_CERT_FILE / SSL_CERT_DIR aware)
    - Optional extra CA bundles and the certifi bundle
    - Immutable stores; contexts never re-read files on disk
    - One-time, lock-guarded installation with ordering checks
    - Version-gated override policy for affected OpenSSL releases
    - truststore (OS-native verification) and httpx integration
"""

__version__ = '0.1.0'

from tls_trust_defaults.client import build_async_http_client, build_http_client
from tls_trust_defaults.common import setup_logger
from tls_trust_defaults.config import TrustConfig, TrustStoreConfig, load_config
from tls_trust_defaults.defaults import GLOBAL_TLS_DEFAULTS, GlobalTlsDefaults
from tls_trust_defaults.errors import (
    ConfigLockedError,
    StoreInitError,
    TrustStoreError,
)
from tls_trust_defaults.models import TrustAnchor, TrustStore
from tls_trust_defaults.resolver import TrustStoreResolver, ensure_default_trust_store

__all__: list[str] = [
    'GLOBAL_TLS_DEFAULTS',
    'ConfigLockedError',
    'GlobalTlsDefaults',
    'StoreInitError',
    'TrustAnchor',
    'TrustConfig',
    'TrustStore',
    'TrustStoreConfig',
    'TrustStoreError',
    'TrustStoreResolver',
    '__version__',
    'build_async_http_client',
    'build_http_client',
    'ensure_default_trust_store',
    'load_config',
    'setup_logger',
]
