"""
Configuration Management for the PhenoGO Pipeline

This module provides environment-based configuration management with
validation. Values are resolved in order: defaults, ``PHENOGO_*``
environment variables, environment-specific overrides, an optional YAML run
file, then explicit overrides (usually from the command line).
"""

import os
from pathlib import Path
from typing import Dict, Any, List, Optional
from enum import Enum
import logging

import yaml

from .exceptions import ConfigurationError
from .report_writer import CHECKSUM_ALGORITHMS
from .retry import RetryConfig
from ..models.data_models import TermCategory

logger = logging.getLogger(__name__)

NCBI_EUTILS_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils"

# NCBI allows 3 requests/s without an API key and 10 requests/s with one
NCBI_INTERVAL_NO_KEY = 0.34
NCBI_INTERVAL_WITH_KEY = 0.11

GENE_ID_COLUMNS = ('db_object_id', 'db_object_symbol', 'synonym')


class Environment(Enum):
    """Deployment environments."""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() == 'true'


class Config:
    """
    Configuration manager with environment-based settings.

    Supports configuration via:
    1. Environment variables
    2. A YAML run file
    3. Explicit overrides
    4. Default values
    """

    def __init__(
        self,
        env: Optional[str] = None,
        config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize configuration.

        Args:
            env: Environment name (development, production, testing)
            config_file: Optional YAML file with run parameters
            overrides: Values taking precedence over everything else;
                ``None`` values are ignored
        """
        self.env = Environment(env or os.getenv('PHENOGO_ENV', 'development'))
        self.config_file = config_file
        self._config = self._load_config()

        if config_file:
            self._config.update(self._read_file(config_file))
        if overrides:
            self._config.update({k: v for k, v in overrides.items() if v is not None})

        self._validate()

    def _load_config(self) -> Dict[str, Any]:
        """Load configuration from environment."""
        config = {
            'environment': self.env.value,

            # Query
            'keyword': os.getenv('PHENOGO_KEYWORD'),
            'category': os.getenv('PHENOGO_CATEGORY', TermCategory.BIOLOGICAL_PROCESS.value),

            # Reference data
            'obo_path': os.getenv('PHENOGO_OBO_PATH'),
            'gaf_path': os.getenv('PHENOGO_GAF_PATH'),
            'xref_path': os.getenv('PHENOGO_XREF_PATH'),
            'xref_primary_column': os.getenv('PHENOGO_XREF_PRIMARY_COLUMN', 'LocusTag'),
            'xref_secondary_column': os.getenv('PHENOGO_XREF_SECONDARY_COLUMN', 'GeneID'),
            'gene_id_column': os.getenv('PHENOGO_GENE_ID_COLUMN', 'db_object_id'),
            'taxon': os.getenv('PHENOGO_TAXON'),
            'excluded_evidence': _env_list('PHENOGO_EXCLUDED_EVIDENCE', ''),
            'relation_types': _env_list('PHENOGO_RELATION_TYPES', 'part_of'),
            'include_ancestors': _env_bool('PHENOGO_INCLUDE_ANCESTORS', 'false'),

            # Output
            'output_dir': os.getenv('PHENOGO_OUTPUT_DIR', 'results'),
            'table_name': os.getenv('PHENOGO_TABLE_NAME', 'phenotype_genes.tsv'),
            'checksum_algorithm': os.getenv('PHENOGO_CHECKSUM_ALGORITHM', 'sha256'),
            'render_figures': _env_bool('PHENOGO_RENDER_FIGURES', 'true'),

            # Remote gene database
            'fetch_metadata': _env_bool('PHENOGO_FETCH_METADATA', 'true'),
            'ncbi_base_url': os.getenv('NCBI_BASE_URL', NCBI_EUTILS_URL),
            'ncbi_api_key': os.getenv('NCBI_API_KEY'),
            'ncbi_email': os.getenv('NCBI_EMAIL'),
            'ncbi_tool': os.getenv('NCBI_TOOL', 'phenogo'),
            'request_timeout': float(os.getenv('PHENOGO_REQUEST_TIMEOUT', '30')),
            'max_retries': int(os.getenv('PHENOGO_MAX_RETRIES', '3')),
            'retry_initial_wait': float(os.getenv('PHENOGO_RETRY_INITIAL_WAIT', '1.0')),
            'retry_max_wait': float(os.getenv('PHENOGO_RETRY_MAX_WAIT', '10.0')),
            'min_request_interval': None,

            # Logging
            'log_level': os.getenv('LOG_LEVEL', 'INFO'),
            'log_file': os.getenv('LOG_FILE'),
            'structured_logging': _env_bool('PHENOGO_STRUCTURED_LOGGING', 'false'),
        }

        if self.env == Environment.PRODUCTION:
            config.update(self._get_production_overrides())
        elif self.env == Environment.TESTING:
            config.update(self._get_testing_overrides())

        return config

    def _get_production_overrides(self) -> Dict[str, Any]:
        """Get production-specific configuration overrides."""
        return {
            'max_retries': 5,
            'retry_max_wait': 30.0,
            'structured_logging': True,
        }

    def _get_testing_overrides(self) -> Dict[str, Any]:
        """Get testing-specific configuration overrides."""
        return {
            'log_level': 'DEBUG',
            'request_timeout': 5.0,
            'max_retries': 1,
            'retry_initial_wait': 0.0,
            'min_request_interval': 0.0,
        }

    def _read_file(self, filepath: str) -> Dict[str, Any]:
        """Read a YAML run file."""
        path = Path(filepath)
        if not path.exists():
            raise ConfigurationError('config_file', f"Configuration file not found: {path}",
                                     config_file=str(path))
        try:
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError('config_file', f"Invalid YAML: {e}",
                                     config_file=str(path)) from e

        if not isinstance(data, dict):
            raise ConfigurationError('config_file', "Run file must contain a mapping",
                                     config_file=str(path))

        unknown = sorted(set(data) - set(self._config))
        if unknown:
            raise ConfigurationError(unknown[0], f"Unknown configuration keys: {', '.join(unknown)}",
                                     config_file=str(path))

        logger.info(f"Loaded run configuration from {path}")
        return data

    def _validate(self):
        """Validate configuration parameters."""
        errors = []

        valid_categories = [c.value for c in TermCategory]
        if self._config['category'] not in valid_categories:
            errors.append(("category", f"category must be one of {valid_categories}"))

        if self._config['gene_id_column'] not in GENE_ID_COLUMNS:
            errors.append(("gene_id_column", f"gene_id_column must be one of {list(GENE_ID_COLUMNS)}"))

        if self._config['checksum_algorithm'] not in CHECKSUM_ALGORITHMS:
            errors.append(("checksum_algorithm", f"Unsupported checksum algorithm: {self._config['checksum_algorithm']}"))

        if self._config['request_timeout'] <= 0:
            errors.append(("request_timeout", "request_timeout must be positive"))

        if self._config['max_retries'] < 1:
            errors.append(("max_retries", "max_retries must be at least 1"))

        if self._config['retry_initial_wait'] < 0 or self._config['retry_max_wait'] < 0:
            errors.append(("retry_initial_wait", "retry waits must not be negative"))

        interval = self._config['min_request_interval']
        if interval is not None and interval < 0:
            errors.append(("min_request_interval", "min_request_interval must not be negative"))

        for key in ('excluded_evidence', 'relation_types'):
            if not isinstance(self._config[key], (list, tuple)):
                errors.append((key, f"{key} must be a list"))

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(f"  - {msg}" for _, msg in errors)
            raise ConfigurationError(errors[0][0], error_msg, self.config_file)

        logger.debug(f"Configuration validated for {self.env.value} environment")

    def validate_for_run(self):
        """
        Check that everything a pipeline run needs is present.

        Raises:
            ConfigurationError: Listing every missing input
        """
        errors = []
        if not self._config['keyword']:
            errors.append(("keyword", "keyword is required"))
        for key in ('obo_path', 'gaf_path'):
            if not self._config[key]:
                errors.append((key, f"{key} is required"))
        if errors:
            raise ConfigurationError(
                errors[0][0],
                "Configuration incomplete:\n" + "\n".join(f"  - {msg}" for _, msg in errors),
                self.config_file
            )

    @property
    def request_interval(self) -> float:
        """Minimum seconds between two remote requests."""
        if self._config['min_request_interval'] is not None:
            return float(self._config['min_request_interval'])
        return NCBI_INTERVAL_WITH_KEY if self._config['ncbi_api_key'] else NCBI_INTERVAL_NO_KEY

    def retry_config(self) -> RetryConfig:
        """Build the retry configuration for remote lookups."""
        return RetryConfig(
            max_attempts=self._config['max_retries'],
            initial_wait=self._config['retry_initial_wait'],
            max_wait=self._config['retry_max_wait'],
        )

    @property
    def table_path(self) -> Path:
        return Path(self._config['output_dir']) / self._config['table_name']

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get configuration value using dict-like access."""
        return self._config[key]

    def __getattr__(self, key: str) -> Any:
        """Get configuration value using attribute access."""
        if key.startswith('_'):
            return object.__getattribute__(self, key)
        return self._config.get(key)

    def to_dict(self, redact_secrets: bool = True) -> Dict[str, Any]:
        """Export configuration as dictionary."""
        data = self._config.copy()
        if redact_secrets and data.get('ncbi_api_key'):
            data['ncbi_api_key'] = '***'
        return data

    def save_to_file(self, filepath: str):
        """Save configuration (secrets redacted) to a YAML file."""
        with open(filepath, 'w') as f:
            yaml.safe_dump(self.to_dict(), f, sort_keys=True)
        logger.info(f"Configuration saved to {filepath}")
