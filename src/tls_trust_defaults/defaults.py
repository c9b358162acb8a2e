# tls_trust_defaults/defaults.py
"""
Process-wide default trust store and the TLS context factory that reads it.

GlobalTlsDefaults is an explicit object: libraries and tests should create and
pass their own instance. `GLOBAL_TLS_DEFAULTS` is the single process-wide
instance used when none is passed.

Ordering Requirement:
---------------------
The default store must be installed before the first TLS context is created
from it. Creating a context without an explicit store locks the defaults;
from then on only an equivalent store may be installed again, anything else
raises ConfigLockedError. This turns "install happens-before first handshake"
from a load-order convention into a checked invariant.

Thread Safety:
--------------
All state is guarded by one re-entrant lock. `install_once` runs its factory
under that lock, so racing callers produce exactly one install.
"""

import logging
import ssl
import threading
import weakref
from collections.abc import Callable
from ssl import SSLContext

from tls_trust_defaults.common.ssl_context import (
    build_client_ssl_context,
    build_server_ssl_context,
)
from tls_trust_defaults.errors import ConfigLockedError, StoreInitError
from tls_trust_defaults.models import TrustStore

__all__: list[str] = ['GLOBAL_TLS_DEFAULTS', 'GlobalTlsDefaults']

logger: logging.Logger = logging.getLogger(__name__)


class GlobalTlsDefaults:
    """
    Holder of the default TrustStore for contexts built without one.

    A fresh instance holds no store, meaning contexts fall back to the ssl
    library's own defaults (`ssl.create_default_context()`).

    Example:
        >>> defaults = GlobalTlsDefaults()
        >>> defaults.install(store)
        >>> context = defaults.create_client_context()
        >>> defaults.store_for(context) == store
        True
    """

    def __init__(self, initial_store: TrustStore | None = None) -> None:
        self._lock: threading.RLock = threading.RLock()
        self._store: TrustStore | None = initial_store
        self._locked: bool = False
        self._initialized: bool = False
        self._install_count: int = 0
        self._context_stores: weakref.WeakKeyDictionary[SSLContext, TrustStore | None] = (
            weakref.WeakKeyDictionary()
        )

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def store(self) -> TrustStore | None:
        """The installed default store, or None for the library default."""
        with self._lock:
            return self._store

    @property
    def is_locked(self) -> bool:
        with self._lock:
            return self._locked

    @property
    def is_initialized(self) -> bool:
        """True once `install_once` has completed."""
        with self._lock:
            return self._initialized

    @property
    def install_count(self) -> int:
        """Number of installs that actually changed the default store."""
        with self._lock:
            return self._install_count

    # -------------------------------------------------------------------------
    # Installation
    # -------------------------------------------------------------------------

    def install(self, store: TrustStore) -> None:
        """
        Replace the default store.

        Installing a store equal to the current one is a no-op, even when
        locked. A different store replaces the current one (last write wins).

        Args:
            store: The store new contexts should trust by default.

        Raises:
            StoreInitError: If `store` holds no trust anchors.
            ConfigLockedError: If a context has already been built from these
                defaults and `store` differs from the installed one.
        """
        if store.anchor_count == 0:
            error_message: str = 'Refusing to install a trust store with no anchors'
            logger.error(error_message)
            raise StoreInitError(error_message)

        with self._lock:
            if self._store == store:
                logger.debug('Default trust store unchanged: %s', store.describe())
                return

            if self._locked:
                error_message = (
                    'Default trust store is locked: a TLS context has already '
                    'been created from it'
                )
                logger.error(error_message)
                raise ConfigLockedError(error_message)

            self._store = store
            self._install_count += 1

        logger.info('Installed default trust store: %s', store.describe())

    def install_once(
        self,
        factory: Callable[[], TrustStore | None],
    ) -> TrustStore | None:
        """
        Run `factory` and install its store, at most once per instance.

        The first caller runs the factory while holding the lock; concurrent
        and later callers block until it finishes, then get the installed
        store. If the factory raises, nothing is recorded and the next caller
        tries again. A factory returning None marks the defaults initialized
        without installing anything.

        Returns:
            The default store after initialization, or None.
        """
        with self._lock:
            if self._initialized:
                return self._store

            store: TrustStore | None = factory()
            if store is not None:
                self.install(store)
            self._initialized = True
            return self._store

    def lock(self) -> None:
        """Forbid replacing the default store from now on."""
        with self._lock:
            if not self._locked:
                logger.debug('Default trust store locked')
            self._locked = True

    # -------------------------------------------------------------------------
    # Context Construction
    # -------------------------------------------------------------------------

    def _resolve(self, store: TrustStore | None) -> TrustStore | None:
        # Only contexts that read the default lock it.
        if store is not None:
            return store
        with self._lock:
            self._locked = True
            return self._store

    def create_client_context(
        self,
        store: TrustStore | None = None,
        use_truststore: bool = False,
    ) -> SSLContext:
        """
        Build a client SSLContext.

        Args:
            store: Explicit store; overrides the default for this context only.
            use_truststore: Use truststore for OS-native verification.

        Returns:
            A new context trusting the explicit store, else the installed
            default, else the ssl library defaults.
        """
        resolved_store: TrustStore | None = self._resolve(store)

        ssl_context: SSLContext
        if resolved_store is None:
            logger.debug('No default trust store installed; using library defaults')
            ssl_context = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)
        else:
            ssl_context = build_client_ssl_context(resolved_store, use_truststore)

        self._remember(ssl_context, resolved_store)
        return ssl_context

    def create_server_context(self, store: TrustStore | None = None) -> SSLContext:
        """Build a server SSLContext; store resolution as for client contexts."""
        resolved_store: TrustStore | None = self._resolve(store)

        ssl_context: SSLContext
        if resolved_store is None:
            ssl_context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
        else:
            ssl_context = build_server_ssl_context(resolved_store)

        self._remember(ssl_context, resolved_store)
        return ssl_context

    def _remember(self, ssl_context: SSLContext, store: TrustStore | None) -> None:
        with self._lock:
            self._context_stores[ssl_context] = store

    def store_for(self, ssl_context: SSLContext) -> TrustStore | None:
        """
        Return the store a context was built with.

        Raises:
            KeyError: If the context was not created by this instance.
        """
        with self._lock:
            return self._context_stores[ssl_context]

    def __repr__(self) -> str:
        with self._lock:
            store_text: str = self._store.describe() if self._store else 'library default'
            return f'GlobalTlsDefaults(store={store_text}, locked={self._locked})'


GLOBAL_TLS_DEFAULTS: GlobalTlsDefaults = GlobalTlsDefaults()
