# tls_trust_defaults/models/trust_store.py
"""
Immutable trust store models.

A TrustStore captures its anchors as DER bytes at build time. Contexts built
from it load those bytes, never the files on disk, so a store keeps meaning
the same thing for as long as any context references it.
"""

import hashlib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__: list[str] = ['TrustAnchor', 'TrustStore', 'render_distinguished_name']


def render_distinguished_name(name: Iterable[Any]) -> str:
    """
    Render a name as returned by `SSLContext.get_ca_certs()` into a string.

    The ssl module represents a distinguished name as a tuple of relative
    distinguished names, each a tuple of (attribute, value) pairs.

    Example:
        >>> render_distinguished_name(((('commonName', 'Root CA'),),))
        'commonName=Root CA'
    """
    return ', '.join(
        f'{attribute}={value}'
        for relative_name in name
        for attribute, value in relative_name
    )


class TrustAnchor(BaseModel):
    """
    A single CA certificate held by a trust store.

    Attributes:
        subject: Rendered subject distinguished name.
        fingerprint_sha256: Lowercase hex SHA-256 of the DER encoding.
        der: Raw DER bytes of the certificate.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    subject: str
    fingerprint_sha256: str = Field(min_length=64, max_length=64)
    der: bytes = Field(repr=False)

    @classmethod
    def from_der(cls, der: bytes, subject: str = '') -> 'TrustAnchor':
        """Build an anchor from DER bytes, computing its fingerprint."""
        return cls(
            subject=subject,
            fingerprint_sha256=hashlib.sha256(der).hexdigest(),
            der=der,
        )


class TrustStore(BaseModel):
    """
    An ordered, de-duplicated set of trust anchors plus the lookup locations
    they were read from.

    Two stores compare equal when they hold the same anchors in the same order
    and were read from the same locations; installing an equal store over the
    current default is a no-op.

    Attributes:
        anchors: Trust anchors in the order OpenSSL reports them, unique by
            fingerprint.
        cafile: Default CA bundle file the store was built from, if any.
        capath: Default hashed CA directory the store was built from, if any.
        sources: Additional bundles appended after the platform defaults.
    """

    model_config = ConfigDict(extra='forbid', frozen=True)

    anchors: tuple[TrustAnchor, ...] = ()
    cafile: Path | None = None
    capath: Path | None = None
    sources: tuple[Path, ...] = ()

    @field_validator('anchors', mode='after')
    @classmethod
    def drop_duplicate_anchors(
        cls, anchors: tuple[TrustAnchor, ...]
    ) -> tuple[TrustAnchor, ...]:
        """Keep the first occurrence of each fingerprint, preserving order."""
        seen_fingerprints: set[str] = set()
        unique_anchors: list[TrustAnchor] = []
        for anchor in anchors:
            if anchor.fingerprint_sha256 in seen_fingerprints:
                continue
            seen_fingerprints.add(anchor.fingerprint_sha256)
            unique_anchors.append(anchor)
        return tuple(unique_anchors)

    @property
    def anchor_count(self) -> int:
        return len(self.anchors)

    @property
    def fingerprints(self) -> tuple[str, ...]:
        return tuple(anchor.fingerprint_sha256 for anchor in self.anchors)

    @property
    def cadata(self) -> bytes:
        """Concatenated DER anchors, as accepted by `load_verify_locations(cadata=...)`."""
        return b''.join(anchor.der for anchor in self.anchors)

    def contains(self, fingerprint_sha256: str) -> bool:
        """Return True if an anchor with this SHA-256 fingerprint is present."""
        return fingerprint_sha256.lower() in self.fingerprints

    def describe(self) -> str:
        """Short human-readable summary for log lines."""
        return (
            f'TrustStore(anchors={self.anchor_count}, cafile={self.cafile}, '
            f'capath={self.capath}, extra_sources={len(self.sources)})'
        )
