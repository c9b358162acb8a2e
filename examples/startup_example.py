#!/usr/bin/env python3
"""
Startup sequence example for tls_trust_defaults.

Shows the intended order: load config, configure logging, install the
default trust store, and only then open TLS connections.
"""

import logging
import sys

from tls_trust_defaults import (
    GlobalTlsDefaults,
    TrustStoreError,
    TrustStoreResolver,
    build_http_client,
    ensure_default_trust_store,
    load_config,
    setup_logger,
)

logger: logging.Logger = logging.getLogger(__name__)


def example_1_process_wide_defaults() -> None:
    """Install the process-wide default store and use it for HTTP traffic."""
    config = load_config('config/trust_config.yaml')
    setup_logger(config=config.logging)

    try:
        store = ensure_default_trust_store(config.trust_store)
    except TrustStoreError as error:
        # Never continue without trust anchors.
        logger.critical('Trust store initialization failed: %s', error)
        sys.exit(1)

    if store is not None:
        print(f'Default trust store has {store.anchor_count} anchors')

    with build_http_client(timeout=10.0) as client:
        response = client.get('https://www.python.org')
        print(f'Status: {response.status_code}')


def example_2_explicit_defaults() -> None:
    """Library-style usage: an explicit defaults object instead of the global."""
    defaults = GlobalTlsDefaults()
    resolver = TrustStoreResolver(defaults=defaults)

    store = resolver.build_default_store()
    resolver.install_as_default(store)

    ssl_context = resolver.create_client_context()
    print(f'Context trusts {len(ssl_context.get_ca_certs())} CA certificates')
    print(defaults)


if __name__ == '__main__':
    example_1_process_wide_defaults()
    example_2_explicit_defaults()
