# tls_trust_defaults/resolver.py
"""
Trust store resolution and installation.

TrustStoreResolver builds a TrustStore from the platform's default trust
anchor locations (plus any configured extras) and installs it as the default
store of a GlobalTlsDefaults instance, so that TLS contexts created afterwards
without an explicit store trust it.

Startup Usage:
--------------
Call `ensure_default_trust_store()` once from the application's startup
sequence, before any TLS connection is opened:

    >>> from tls_trust_defaults import ensure_default_trust_store, load_config
    >>> config = load_config()
    >>> ensure_default_trust_store(config.trust_store)

Failures raise StoreInitError and must abort startup. There is no fallback to
an empty or partial store.
"""

import logging
import re
import ssl
from pathlib import Path
from ssl import SSLContext

import certifi

from tls_trust_defaults.config import TrustStoreConfig
from tls_trust_defaults.defaults import GLOBAL_TLS_DEFAULTS, GlobalTlsDefaults
from tls_trust_defaults.errors import StoreInitError
from tls_trust_defaults.models import (
    TrustAnchor,
    TrustStore,
    render_distinguished_name,
)
from tls_trust_defaults.policy import should_override_default_store

__all__: list[str] = ['TrustStoreResolver', 'ensure_default_trust_store']

logger: logging.Logger = logging.getLogger(__name__)

# c_rehash / openssl rehash certificate links: <8 hex digits>.<n>
# CRL links use '.r<n>' and are skipped.
_HASHED_CERT_NAME: re.Pattern[str] = re.compile(r'^[0-9a-f]{8}\.\d+$')


def _hashed_certificate_entries(capath: Path) -> list[Path]:
    return sorted(
        entry
        for entry in capath.iterdir()
        if _HASHED_CERT_NAME.match(entry.name) and entry.is_file()
    )


def _load_hashed_directory(probe_context: SSLContext, capath: Path) -> None:
    """
    Load every hashed certificate entry of `capath` into `probe_context`.

    An unreadable or unparsable entry is skipped with a warning, as OpenSSL's
    own capath lookup would skip it. Failing to list the directory itself
    still raises OSError.
    """
    for entry in _hashed_certificate_entries(capath):
        try:
            probe_context.load_verify_locations(cafile=str(entry))
        except OSError as error:
            logger.warning('Skipping unreadable CA directory entry %s: %s', entry, error)


def _anchors_from_context(probe_context: SSLContext) -> list[TrustAnchor]:
    # Both calls walk the same X509_STORE, so entries line up pairwise.
    der_certificates: list[bytes] = probe_context.get_ca_certs(binary_form=True)
    decoded_certificates: list[dict] = probe_context.get_ca_certs()

    return [
        TrustAnchor.from_der(
            der,
            subject=render_distinguished_name(decoded.get('subject', ())),
        )
        for der, decoded in zip(der_certificates, decoded_certificates, strict=True)
    ]


class TrustStoreResolver:
    """
    Builds the default TrustStore and installs it into GlobalTlsDefaults.

    Args:
        config: Anchor sources and override policy. Defaults to
            `TrustStoreConfig()` (platform paths, override always applied).
        defaults: Target defaults slot. Defaults to the process-wide
            GLOBAL_TLS_DEFAULTS.
    """

    def __init__(
        self,
        config: TrustStoreConfig | None = None,
        defaults: GlobalTlsDefaults | None = None,
    ) -> None:
        self._config: TrustStoreConfig = (
            config if config is not None else TrustStoreConfig()
        )
        self._defaults: GlobalTlsDefaults = (
            defaults if defaults is not None else GLOBAL_TLS_DEFAULTS
        )

    @property
    def config(self) -> TrustStoreConfig:
        return self._config

    @property
    def defaults(self) -> GlobalTlsDefaults:
        return self._defaults

    # -------------------------------------------------------------------------
    # Location Discovery
    # -------------------------------------------------------------------------

    def discover_default_locations(self) -> tuple[Path | None, Path | None]:
        """
        Return the (cafile, capath) pair the store is built from.

        Configured overrides win; otherwise `ssl.get_default_verify_paths()`
        is consulted, which reads SSL_CERT_FILE / SSL_CERT_DIR and reports
        None for locations that do not exist.
        """
        verify_paths = ssl.get_default_verify_paths()

        cafile: Path | None = self._config.cafile
        if cafile is None and verify_paths.cafile:
            cafile = Path(verify_paths.cafile)

        capath: Path | None = self._config.capath
        if capath is None and verify_paths.capath:
            capath = Path(verify_paths.capath)

        logger.debug('Default trust locations: cafile=%s, capath=%s', cafile, capath)
        return cafile, capath

    def _extra_sources(self) -> list[Path]:
        sources: list[Path] = list(self._config.extra_ca_bundles)
        if self._config.include_certifi:
            sources.append(Path(certifi.where()))
        return sources

    # -------------------------------------------------------------------------
    # Core Operations
    # -------------------------------------------------------------------------

    def build_default_store(self) -> TrustStore:
        """
        Build a new TrustStore from the platform default locations.

        Loads the default CA file, every hashed certificate entry of the
        default CA directory, then configured extra bundles and certifi.

        Returns:
            A store holding at least one anchor.

        Raises:
            StoreInitError: If no location is discoverable, a bundle cannot be
                read or parsed, or no anchors were found.
        """
        cafile, capath = self.discover_default_locations()
        sources: list[Path] = self._extra_sources()

        tried_locations: tuple[str, ...] = tuple(
            str(location) for location in (cafile, capath, *sources) if location
        )
        if not tried_locations:
            error_message: str = (
                'No default trust anchor locations found '
                '(check SSL_CERT_FILE / SSL_CERT_DIR or the OpenSSL installation)'
            )
            logger.error(error_message)
            raise StoreInitError(error_message)

        probe_context = SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        try:
            if cafile is not None:
                probe_context.load_verify_locations(cafile=str(cafile))
            if capath is not None:
                _load_hashed_directory(probe_context, capath)
            for source in sources:
                probe_context.load_verify_locations(cafile=str(source))
        # ssl.SSLError is an OSError subclass
        except OSError as error:
            error_message = f'Failed to load trust anchors: {error}'
            logger.error(error_message)
            raise StoreInitError(error_message, tried_locations) from error

        store = TrustStore(
            anchors=tuple(_anchors_from_context(probe_context)),
            cafile=cafile,
            capath=capath,
            sources=tuple(sources),
        )

        if store.anchor_count == 0:
            error_message = (
                f'No trust anchors found in: {", ".join(tried_locations)}'
            )
            logger.error(error_message)
            raise StoreInitError(error_message, tried_locations)

        logger.info('Built trust store: %s', store.describe())
        return store

    def install_as_default(self, store: TrustStore) -> None:
        """
        Make `store` the default for contexts created without one.

        Raises:
            ConfigLockedError: If a context was already created from the
                defaults and `store` differs from the installed store.
        """
        self._defaults.install(store)

    def ensure_default_trust_store(self) -> TrustStore | None:
        """
        Build and install the default store exactly once.

        Safe to call from many threads; only the first call builds and
        installs, the rest return the installed store.

        Returns:
            The installed default store, or None if the override policy
            declined and no store was installed before.

        Raises:
            StoreInitError: If the store cannot be built. The defaults are
                left untouched and a later call will try again.
        """
        return self._defaults.install_once(self._build_if_policy_allows)

    def _build_if_policy_allows(self) -> TrustStore | None:
        if not should_override_default_store(self._config):
            return None
        return self.build_default_store()

    def create_client_context(self, store: TrustStore | None = None) -> SSLContext:
        """Client context from the defaults, honouring `use_truststore`."""
        return self._defaults.create_client_context(
            store,
            use_truststore=self._config.use_truststore,
        )


def ensure_default_trust_store(
    config: TrustStoreConfig | None = None,
    defaults: GlobalTlsDefaults | None = None,
) -> TrustStore | None:
    """
    Startup entry point: build and install the default trust store once.

    Args:
        config: Trust store configuration; defaults to platform paths with the
            override always applied.
        defaults: Target defaults; the process-wide instance when omitted.

    Returns:
        The installed store, or None when the policy skipped the override.

    Raises:
        StoreInitError: If the platform trust anchors are unavailable.
    """
    return TrustStoreResolver(config, defaults).ensure_default_trust_store()
