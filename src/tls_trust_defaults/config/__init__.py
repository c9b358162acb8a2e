"""
Configuration Package for TLS Trust Defaults.

Exposes the configuration models and the loader function.
"""

from tls_trust_defaults.config.config_models import (
    LoggingConfig,
    OverridePolicy,
    TrustConfig,
    TrustStoreConfig,
)
from tls_trust_defaults.config.loader import load_config

__all__: list[str] = [
    'LoggingConfig',
    'OverridePolicy',
    'TrustConfig',
    'TrustStoreConfig',
    'load_config',
]
