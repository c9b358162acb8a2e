# tls_trust_defaults/config/loader.py
"""
Configuration Loading Logic.

Reads the YAML configuration file, parses it and validates it against
`TrustConfig`. Low-level I/O and parse errors are logged with context before
being raised to the caller.
"""

import logging
from pathlib import Path
from typing import Any

import yaml

from tls_trust_defaults.config.config_models import TrustConfig

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH: Path = Path('config/trust_config.yaml')


def load_config(config_path: Path | str | None = None) -> TrustConfig:
    """Load and validate trust configuration from a YAML file.

    Args:
        config_path: Path to the YAML configuration file. If None, defaults to
                    'config/trust_config.yaml' relative to the working directory.

    Returns:
        Validated TrustConfig instance. An empty file yields all defaults.

    Raises:
        FileNotFoundError: If the config file does not exist.
        yaml.YAMLError: If the file is not valid YAML.
        ValueError: If the top-level document is not a mapping, or if
            validation fails.

    Example:
        >>> config = load_config('config/trust_config.yaml')
        >>> config.trust_store.override_policy
        'always'
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH
        logger.debug('No config path provided, using default: %s', config_path)
    else:
        config_path = Path(config_path)

    logger.info('Loading trust configuration from: %s', config_path)

    if not config_path.exists():
        error_message: str = f'Configuration file not found: {config_path}'
        logger.error(error_message)
        raise FileNotFoundError(error_message)

    try:
        with Path.open(config_path, encoding='utf-8') as config_file:
            raw_config_data: Any = yaml.safe_load(config_file)
    except yaml.YAMLError as error:
        error_message = f'Failed to parse YAML configuration: {error}'
        logger.error(error_message)
        raise yaml.YAMLError(error_message) from error

    if raw_config_data is None:
        raw_config_data = {}

    if not isinstance(raw_config_data, dict):
        error_message = (
            'Configuration root must be a mapping, '
            f'got {type(raw_config_data).__name__}'
        )
        logger.error(error_message)
        raise ValueError(error_message)

    try:
        validated_config = TrustConfig(**raw_config_data)
    except ValueError as error:
        error_message = f'Configuration validation failed: {error}'
        logger.error(error_message)
        raise ValueError(error_message) from error

    logger.info('Configuration loaded and validated successfully')
    return validated_config
