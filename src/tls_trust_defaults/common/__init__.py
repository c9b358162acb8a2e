# tls_trust_defaults/common/__init__.py

from tls_trust_defaults.common.logger import setup_logger
from tls_trust_defaults.common.ssl_context import (
    build_client_ssl_context,
    build_server_ssl_context,
)

__all__: list[str] = [
    'build_client_ssl_context',
    'build_server_ssl_context',
    'setup_logger',
]
