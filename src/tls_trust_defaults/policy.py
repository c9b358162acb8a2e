# tls_trust_defaults/policy.py
"""
Decides whether the default-store override should be applied.

The override works around CRL verification failures seen with OpenSSL 3.6.0
when the library's own default store is used. Whether it stays on everywhere
or only on affected versions is an operational choice made in configuration.
"""

import logging
import ssl

from tls_trust_defaults.config import TrustStoreConfig

__all__: list[str] = ['is_affected_openssl', 'should_override_default_store']

logger: logging.Logger = logging.getLogger(__name__)


def is_affected_openssl(
    affected_versions: list[tuple[int, ...]],
    version_info: tuple[int, ...] | None = None,
) -> bool:
    """
    Return True if the OpenSSL version matches any affected version prefix.

    Args:
        affected_versions: Version prefixes, e.g. [(3, 6, 0)] or [(3, 6)].
        version_info: Version to check; defaults to `ssl.OPENSSL_VERSION_INFO`
            of the running interpreter.

    Example:
        >>> is_affected_openssl([(3, 6)], version_info=(3, 6, 1, 0, 15))
        True
    """
    if version_info is None:
        version_info = ssl.OPENSSL_VERSION_INFO

    return any(
        tuple(version_info[: len(prefix)]) == prefix for prefix in affected_versions
    )


def should_override_default_store(
    config: TrustStoreConfig,
    version_info: tuple[int, ...] | None = None,
) -> bool:
    """Apply `config.override_policy` to the running (or given) OpenSSL version."""
    if config.override_policy == 'always':
        return True
    if config.override_policy == 'never':
        logger.info('Default trust store override disabled by policy')
        return False

    affected: bool = is_affected_openssl(
        config.get_affected_version_tuples(), version_info
    )
    logger.info(
        'OpenSSL %s %s affected; default trust store override %s',
        ssl.OPENSSL_VERSION if version_info is None else version_info,
        'is' if affected else 'is not',
        'applied' if affected else 'skipped',
    )
    return affected
