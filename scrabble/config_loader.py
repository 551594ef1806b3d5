"""
config_loader.py - Load and manage configuration from YAML file.

Table name, version retention, loader batch size, HBase Thrift settings and
logging can be tuned by editing config.yaml without touching Python code.
The file location defaults to config.yaml at the project root and can be
overridden with the SCRABBLE_CONFIG environment variable.
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .constants import BATCH_SIZE, INPUT_ENCODING, INPUT_FILE_NAME, MAX_VERSIONS, TABLE_NAME

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'SCRABBLE_CONFIG'
DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / 'config.yaml'


class ConfigLoader:
    """Load and cache configuration from config.yaml."""

    _instance = None
    _config = None

    def __new__(cls):
        """Singleton pattern - return same instance."""
        if cls._instance is None:
            cls._instance = super(ConfigLoader, cls).__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize config loader."""
        if self._config is None:
            self.reload()

    def reload(self, config_path: Optional[Path] = None):
        """
        Load config from YAML file.

        Missing keys fall back to the built-in defaults; an unreadable or
        missing file leaves the defaults in place.
        """
        if config_path is None:
            config_path = Path(os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH))
        config_path = Path(config_path)

        config = self._get_default_config()

        if not config_path.exists():
            logger.warning(f"Config file not found at {config_path}, using defaults")
            self._config = config
            return

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Error loading config: {e}. Using defaults.")
            self._config = config
            return

        self._config = _merge(config, loaded)
        logger.debug(f"Configuration loaded from {config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get config value by dot-notation path.

        Args:
            key: Path to config value (e.g., 'store.thrift.transport')
            default: Default value if key not found

        Returns:
            Config value or default
        """
        parts = key.split('.')
        value = self._config

        for part in parts:
            if isinstance(value, dict):
                value = value.get(part)
                if value is None:
                    return default
            else:
                return default

        return value if value is not None else default

    def get_table_name(self) -> str:
        return self.get('store.table_name', TABLE_NAME)

    def get_max_versions(self) -> int:
        return int(self.get('store.max_versions', MAX_VERSIONS))

    def get_batch_size(self) -> int:
        return int(self.get('loader.batch_size', BATCH_SIZE))

    def get_thrift_options(self) -> Dict[str, Any]:
        """Keyword arguments for HBaseStore (happybase.Connection settings)."""
        thrift = self.get('store.thrift', {})
        options = {
            'transport': thrift.get('transport', 'buffered'),
            'protocol': thrift.get('protocol', 'binary'),
        }
        if thrift.get('timeout_ms') is not None:
            options['timeout'] = int(thrift['timeout_ms'])
        if thrift.get('table_prefix'):
            options['table_prefix'] = thrift['table_prefix']
        if thrift.get('scan_batch_size'):
            options['scan_batch_size'] = int(thrift['scan_batch_size'])
        return options

    def get_loader_options(self) -> Dict[str, Any]:
        return {
            'file_name': self.get('loader.file_name', INPUT_FILE_NAME),
            'batch_size': self.get_batch_size(),
            'encoding': self.get('loader.encoding', INPUT_ENCODING),
        }

    def get_logging_options(self) -> Dict[str, Any]:
        return self.get('logging', {})

    @staticmethod
    def _get_default_config() -> Dict[str, Any]:
        """
        Return default configuration if YAML file not found.
        This should match config.yaml defaults.
        """
        return {
            'store': {
                'table_name': TABLE_NAME,
                'max_versions': MAX_VERSIONS,
                'thrift': {
                    'timeout_ms': None,
                    'transport': 'buffered',
                    'protocol': 'binary',
                    'table_prefix': None,
                    'scan_batch_size': 1000,
                },
            },
            'loader': {
                'file_name': INPUT_FILE_NAME,
                'batch_size': BATCH_SIZE,
                'encoding': INPUT_ENCODING,
            },
            'logging': {
                'level': 'INFO',
                'log_dir': 'logs',
                'log_file': 'scrabble.log',
                'max_bytes': 5 * 1024 * 1024,
                'backup_count': 3,
            },
        }


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively overlay `override` onto `base`."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def get_config() -> ConfigLoader:
    """Get global config instance (singleton)."""
    return ConfigLoader()
