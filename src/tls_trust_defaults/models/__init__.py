# tls_trust_defaults/models/__init__.py

from tls_trust_defaults.models.trust_store import (
    TrustAnchor,
    TrustStore,
    render_distinguished_name,
)

__all__: list[str] = [
    'TrustAnchor',
    'TrustStore',
    'render_distinguished_name',
]
