# tls_trust_defaults/errors.py
"""
Exception hierarchy for trust-store resolution.

Both concrete errors are fatal configuration errors. Nothing in this package
retries them: a process that cannot establish its trust anchors must stop
before opening TLS connections rather than continue with a partial store.
"""

__all__: list[str] = [
    'ConfigLockedError',
    'StoreInitError',
    'TrustStoreError',
]


class TrustStoreError(Exception):
    """
    Base exception for trust-store failures.

    Catch this in the startup sequence to abort on any trust configuration
    problem.
    """


class StoreInitError(TrustStoreError):
    """
    Raised when a trust store cannot be built.

    Covers missing platform default locations, unreadable or malformed
    bundles, and stores that end up with no anchors at all.

    Attributes:
        locations: The locations that were tried, for diagnostics.
    """

    def __init__(self, message: str, locations: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.locations: tuple[str, ...] = locations


class ConfigLockedError(TrustStoreError):
    """
    Raised when the default trust store can no longer be replaced.

    The defaults lock once the first TLS context is built from them; swapping
    the store afterwards would leave earlier and later contexts disagreeing.
    """
