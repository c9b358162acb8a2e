# tls_trust_defaults/common/ssl_context.py
"""
SSLContext factories backed by a TrustStore.

Client contexts use PROTOCOL_TLS_CLIENT, which turns on hostname checking and
CERT_REQUIRED. Server contexts use PROTOCOL_TLS_SERVER; the store is loaded so
that client certificates can be verified once the caller sets verify_mode.

With `use_truststore=True`, the client context is a `truststore.SSLContext`:
the operating system's verifier runs (Windows/macOS keychains, corporate
proxy roots) and the store's anchors are added on top of it.
"""

import ssl
from ssl import SSLContext

import truststore

from tls_trust_defaults.models import TrustStore

__all__: list[str] = [
    'build_client_ssl_context',
    'build_server_ssl_context',
]


def _load_store(ssl_context: SSLContext, store: TrustStore) -> None:
    # load_verify_locations rejects empty cadata
    if store.anchor_count:
        ssl_context.load_verify_locations(cadata=store.cadata)


def build_client_ssl_context(
    store: TrustStore,
    use_truststore: bool = False,
) -> SSLContext:
    """
    Create a client SSLContext that trusts exactly the anchors in `store`.

    Args:
        store: Trust anchors to verify servers against.
        use_truststore: Build a truststore.SSLContext so the OS verifier also
            participates.

    Returns:
        SSLContext ready for `wrap_socket` / `wrap_bio` or an HTTP client.

    Raises:
        ssl.SSLError: If OpenSSL rejects the anchor data.
    """
    ssl_context: SSLContext
    if use_truststore:
        ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    else:
        ssl_context = SSLContext(ssl.PROTOCOL_TLS_CLIENT)

    _load_store(ssl_context, store)
    return ssl_context


def build_server_ssl_context(store: TrustStore) -> SSLContext:
    """Create a server SSLContext with `store` loaded for client-cert checks."""
    ssl_context = SSLContext(ssl.PROTOCOL_TLS_SERVER)
    _load_store(ssl_context, store)
    return ssl_context
