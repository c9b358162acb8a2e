# tls_trust_defaults/client.py
"""
HTTP client integration.

httpx builds its own SSLContext unless one is passed as `verify`. These
helpers pass a context created from GlobalTlsDefaults, so HTTP traffic uses
the installed default trust store like every other TLS consumer.
"""

import logging
from ssl import SSLContext
from typing import Any

import httpx

from tls_trust_defaults.defaults import GLOBAL_TLS_DEFAULTS, GlobalTlsDefaults
from tls_trust_defaults.models import TrustStore

__all__: list[str] = ['build_async_http_client', 'build_http_client']

logger: logging.Logger = logging.getLogger(__name__)


def _client_context(
    defaults: GlobalTlsDefaults | None,
    store: TrustStore | None,
    use_truststore: bool,
) -> SSLContext:
    target_defaults: GlobalTlsDefaults = (
        defaults if defaults is not None else GLOBAL_TLS_DEFAULTS
    )
    return target_defaults.create_client_context(store, use_truststore=use_truststore)


def build_http_client(
    defaults: GlobalTlsDefaults | None = None,
    store: TrustStore | None = None,
    use_truststore: bool = False,
    **client_kwargs: Any,
) -> httpx.Client:
    """
    Create an httpx.Client that verifies servers against the default store.

    Args:
        defaults: Defaults to read; the process-wide instance when omitted.
        store: Explicit store for this client instead of the default.
        use_truststore: Use truststore for OS-native verification.
        **client_kwargs: Passed through to httpx.Client (timeout, limits, ...).
            `verify` is not accepted.

    Returns:
        A configured httpx.Client. The caller owns and closes it.

    Raises:
        TypeError: If `verify` is passed in client_kwargs.
    """
    if 'verify' in client_kwargs:
        raise TypeError('verify is derived from the trust store and cannot be passed')

    ssl_context: SSLContext = _client_context(defaults, store, use_truststore)
    logger.debug('Creating httpx.Client with trust-store SSLContext')
    return httpx.Client(verify=ssl_context, **client_kwargs)


def build_async_http_client(
    defaults: GlobalTlsDefaults | None = None,
    store: TrustStore | None = None,
    use_truststore: bool = False,
    **client_kwargs: Any,
) -> httpx.AsyncClient:
    """Async counterpart of build_http_client."""
    if 'verify' in client_kwargs:
        raise TypeError('verify is derived from the trust store and cannot be passed')

    ssl_context: SSLContext = _client_context(defaults, store, use_truststore)
    logger.debug('Creating httpx.AsyncClient with trust-store SSLContext')
    return httpx.AsyncClient(verify=ssl_context, **client_kwargs)
