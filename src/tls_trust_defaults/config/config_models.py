# tls_trust_defaults/config/config_models.py
"""
Configuration models for trust-store resolution.

This module provides the Pydantic models describing where trust anchors are
read from, when the default-store override is applied, and how the package
logs.

Design Decisions:
-----------------
- All models use `extra='forbid'` so that a misspelled key in the YAML file
  fails at load time instead of silently falling back to a default.

- No logging occurs within this module because the logging configuration itself
  is defined here. Logging must be configured by the caller after loading config.

- Every field has a default. An empty configuration file (or no file at all)
  reproduces the plain behaviour: platform default paths, override always
  applied, stdlib verification.

Usage:
------
    import yaml
    from tls_trust_defaults.config.config_models import TrustConfig

    with open('trust_config.yaml', 'r') as config_file:
        raw_config = yaml.safe_load(config_file)

    config = TrustConfig.model_validate(raw_config or {})
"""

import re
from pathlib import Path
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)

# =============================================================================
# Public API
# =============================================================================

__all__: list[str] = [
    'LogLevelName',
    'LoggingConfig',
    'OverridePolicy',
    'TrustConfig',
    'TrustStoreConfig',
]

# =============================================================================
# Type Aliases
# =============================================================================

# Valid logging level names recognized by Python's logging module.
LogLevelName = Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

LOG_LEVEL_NAME_TO_INT: dict[LogLevelName, int] = {
    'DEBUG': 10,
    'INFO': 20,
    'WARNING': 30,
    'ERROR': 40,
    'CRITICAL': 50,
}

# When the default-store override is applied:
#   always         - unconditionally (what the original startup patch did)
#   when_affected  - only on OpenSSL versions listed in affected_openssl_versions
#   never          - leave the library default untouched
OverridePolicy = Literal['always', 'when_affected', 'never']

_VERSION_PATTERN: re.Pattern[str] = re.compile(r'^\d+(\.\d+){0,2}$')


# =============================================================================
# Trust Store Configuration
# =============================================================================


class TrustStoreConfig(BaseModel):
    """Where trust anchors come from and when they replace the default store.

    Location Resolution:
        By default the platform locations reported by
        `ssl.get_default_verify_paths()` are used; those already honour the
        SSL_CERT_FILE and SSL_CERT_DIR environment variables. `cafile` and
        `capath` replace the platform values outright. `extra_ca_bundles` and
        the certifi bundle are appended after the platform anchors.

    Version Gating:
        The override was introduced for a CRL verification defect in a single
        OpenSSL release. `override_policy='when_affected'` restricts it to the
        versions listed in `affected_openssl_versions`. Versions are dotted
        prefixes: '3.6' matches every 3.6.x release, '3.6.0' only that one.

    Attributes:
        cafile: CA bundle file used instead of the platform default file.
        capath: Hashed CA directory used instead of the platform default.
        extra_ca_bundles: Additional PEM bundles appended to the store
            (e.g., an exported corporate proxy root).
        include_certifi: Append the Mozilla bundle shipped by certifi.
        use_truststore: Build client contexts with truststore so the OS
            verifier runs in addition to the store's anchors.
        override_policy: When the default-store override is applied.
        affected_openssl_versions: Version prefixes considered affected.
    """

    model_config = ConfigDict(extra='forbid')

    cafile: Path | None = Field(
        default=None,
        description='CA bundle file overriding the platform default file',
    )
    capath: Path | None = Field(
        default=None,
        description='Hashed CA directory overriding the platform default directory',
    )
    extra_ca_bundles: list[Path] = Field(
        default_factory=list,
        description='Additional PEM bundles appended after the platform anchors',
    )
    include_certifi: bool = Field(
        default=False,
        description='Append the certifi (Mozilla) CA bundle',
    )
    use_truststore: bool = Field(
        default=False,
        description='Use truststore for OS-native verification in client contexts',
    )
    override_policy: OverridePolicy = Field(
        default='always',
        description="'always', 'when_affected' or 'never'",
    )
    affected_openssl_versions: list[str] = Field(
        default_factory=lambda: ['3.6.0'],
        description='OpenSSL version prefixes that need the override',
    )

    @field_validator('cafile', 'extra_ca_bundles', mode='after')
    @classmethod
    def validate_bundle_files_exist(
        cls, bundle_value: Path | list[Path] | None
    ) -> Path | list[Path] | None:
        """Ensure every configured bundle path points at an existing file.

        Args:
            bundle_value: A single bundle path, a list of them, or None.

        Returns:
            The validated value, unchanged.

        Raises:
            ValueError: If a path is missing or is a directory.
        """
        if bundle_value is None:
            return None

        bundle_paths: list[Path] = (
            bundle_value if isinstance(bundle_value, list) else [bundle_value]
        )
        for bundle_path in bundle_paths:
            if not bundle_path.exists():
                raise ValueError(f'CA bundle file not found: {bundle_path}')
            if not bundle_path.is_file():
                raise ValueError(
                    f'CA bundle path must be a file, not directory: {bundle_path}'
                )

        return bundle_value

    @field_validator('capath', mode='after')
    @classmethod
    def validate_capath_is_directory(cls, capath: Path | None) -> Path | None:
        """Ensure the CA directory override exists and is a directory."""
        if capath is not None and not capath.is_dir():
            raise ValueError(f'CA directory not found or not a directory: {capath}')
        return capath

    @field_validator('affected_openssl_versions', mode='after')
    @classmethod
    def validate_version_prefixes(cls, versions: list[str]) -> list[str]:
        """Validate version prefixes are one to three dotted integers.

        Raises:
            ValueError: If any entry is not of the form 'X', 'X.Y' or 'X.Y.Z'.
        """
        for version in versions:
            if not _VERSION_PATTERN.match(version):
                raise ValueError(
                    f"OpenSSL version must look like '3', '3.6' or '3.6.0', got: {version!r}"
                )
        return versions

    def get_affected_version_tuples(self) -> list[tuple[int, ...]]:
        """Return affected versions as integer tuples for comparison."""
        return [
            tuple(int(part) for part in version.split('.'))
            for version in self.affected_openssl_versions
        ]


# =============================================================================
# Logging Configuration
# =============================================================================


class LoggingConfig(BaseModel):
    """Console and optional file logging for the package.

    Level names are case-insensitive in YAML ('info' and 'INFO' both work).
    File logging is on whenever `file_path` is set.

    Attributes:
        console_level: Minimum level for console output.
        file_path: Log file path; None disables file logging.
        file_level: Minimum level for the log file.
    """

    model_config = ConfigDict(extra='forbid')

    console_level: LogLevelName = Field(
        default='INFO',
        description='Console log level name',
    )
    file_path: Path | None = Field(
        default=None,
        description='Log file path; None disables file logging',
    )
    file_level: LogLevelName = Field(
        default='DEBUG',
        description='File log level name, used only when file_path is set',
    )

    @field_validator('console_level', 'file_level', mode='before')
    @classmethod
    def uppercase_level_name(cls, level_name: object) -> object:
        """Accept lowercase level names from YAML."""
        if isinstance(level_name, str):
            return level_name.upper()
        return level_name

    @property
    def console_level_number(self) -> int:
        return LOG_LEVEL_NAME_TO_INT[self.console_level]

    @property
    def file_level_number(self) -> int | None:
        """Numeric file level, or None when file logging is off."""
        if self.file_path is None:
            return None
        return LOG_LEVEL_NAME_TO_INT[self.file_level]


# =============================================================================
# Root Configuration
# =============================================================================


class TrustConfig(BaseModel):
    """Root configuration: trust store settings plus logging.

    Attributes:
        trust_store: Anchor sources, override policy and verification mode.
        logging: Console and file logging settings.
    """

    model_config = ConfigDict(extra='forbid')

    trust_store: TrustStoreConfig = Field(
        default_factory=TrustStoreConfig,
        description='Trust anchor sources and override policy',
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description='Application logging configuration',
    )
