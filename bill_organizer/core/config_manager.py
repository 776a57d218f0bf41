"""
Configuration Manager

Handles loading and validating configuration from the JSON settings file
and environment variables, and builds the naming rule set.
"""

import json
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .naming_rules import DEFAULT_MINIMAL_CONTENT_MAX_WORDS, NamingRule, RuleSet

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = 'appsettings.json'
DEFAULT_FILE_EXTENSIONS = ['.pdf', '.jpg', '.jpeg', '.png', '.tif', '.tiff', '.txt']


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() == 'true'


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if not value:
        return default
    return [item.strip() for item in value.split(',') if item.strip()]


class ConfigurationManager:
    """Manages application configuration loading and validation."""

    @staticmethod
    def resolve_settings_path(settings_path: Optional[str] = None) -> Path:
        return Path(settings_path or os.getenv('BILL_ORGANIZER_SETTINGS', DEFAULT_SETTINGS_FILE))

    @staticmethod
    def load_configuration(settings_path: Optional[str] = None, base_path: Optional[str] = None) -> Dict[str, Any]:
        """
        Load configuration from the settings file, environment variables and defaults.

        Args:
            settings_path: JSON settings file; defaults to BILL_ORGANIZER_SETTINGS
            base_path: Directory to organize, overriding every other source
        """
        settings_file = ConfigurationManager.resolve_settings_path(settings_path)
        settings = ConfigurationManager.read_settings_file(settings_file)
        naming = settings.get('naming_rules', {})

        extensions = _env_list('FILE_EXTENSIONS', settings.get('file_extensions') or DEFAULT_FILE_EXTENSIONS)

        config = {
            'settings_file': str(settings_file),
            'paths': {
                'base_path': base_path or os.getenv('BASE_PATH') or settings.get('base_path'),
                'last_used_path': settings.get('last_used_path'),
            },
            'processing': {
                'file_extensions': [ext if ext.startswith('.') else f'.{ext}' for ext in (e.lower() for e in extensions)],
                'include_subdirectories': _env_bool(
                    'INCLUDE_SUBDIRECTORIES', settings.get('include_subdirectories', True)),
                'force_reprocess_already_named': _env_bool(
                    'FORCE_REPROCESS_ALREADY_NAMED', settings.get('force_reprocess_already_named', False)),
                'max_concurrent_processing': int(os.getenv(
                    'MAX_CONCURRENT_PROCESSING', settings.get('max_concurrent_processing', os.cpu_count() or 4))),
            },
            'ocr': {
                'tesseract_data_path': os.getenv('TESSERACT_DATA_PATH', settings.get('tesseract_data_path')),
                'tesseract_language': os.getenv('TESSERACT_LANGUAGE', settings.get('tesseract_language', 'spa')),
            },
            'naming': {
                'default_provider': naming.get('default_provider', 'servicio'),
                'default_payment_method': naming.get('default_payment_method', 'santander'),
                'minimal_content_max_words': int(os.getenv(
                    'NAMING_MINIMAL_CONTENT_MAX_WORDS',
                    naming.get('minimal_content_max_words', DEFAULT_MINIMAL_CONTENT_MAX_WORDS))),
                'rules': naming.get('rules', []),
            },
            'logging': {
                'level': os.getenv('LOG_LEVEL', settings.get('log_level', 'INFO')).upper(),
                'format': os.getenv('LOG_FORMAT', '%(asctime)s - %(name)s - %(levelname)s - %(message)s'),
                'file': os.getenv('LOG_FILE', 'bill_organizer.log'),
            },
            'output': {
                'save_results': _env_bool('SAVE_RESULTS', False),
                'results_directory': os.getenv('RESULTS_DIR', 'results'),
                # json, csv
                'export_format': os.getenv('EXPORT_FORMAT', 'json'),
            }
        }

        # Validate critical configuration
        ConfigurationManager._validate_configuration(config)

        logger.info("✅ Configuration loaded successfully")
        return config

    @staticmethod
    def read_settings_file(settings_file: Path) -> Dict[str, Any]:
        if not settings_file.exists():
            logger.warning(f"Settings file not found: {settings_file}, using environment and defaults")
            return {}

        try:
            with open(settings_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in settings file {settings_file}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Settings file {settings_file} must contain a JSON object")

        logger.debug(f"Found settings file at: {settings_file}")
        return data

    @staticmethod
    def _validate_configuration(config: Dict[str, Any]):
        """Validate that required configuration is present."""
        errors = []

        if not config['paths']['base_path']:
            errors.append("BASE_PATH is required (settings file, environment or command line)")

        if not config['processing']['file_extensions']:
            errors.append("FILE_EXTENSIONS must list at least one extension")

        if config['processing']['max_concurrent_processing'] < 1:
            errors.append("MAX_CONCURRENT_PROCESSING must be at least 1")

        naming = config['naming']
        if not naming['default_provider']:
            errors.append("naming_rules.default_provider is required")
        if not naming['default_payment_method']:
            errors.append("naming_rules.default_payment_method is required")
        if naming['minimal_content_max_words'] < 0:
            errors.append("naming_rules.minimal_content_max_words cannot be negative")

        for index, rule in enumerate(naming['rules']):
            label = rule.get('name') or f"#{index + 1}"
            if not rule.get('provider'):
                errors.append(f"Naming rule {label} has no provider")
            if not rule.get('keywords'):
                errors.append(f"Naming rule {label} has no keywords")
            forced_date = rule.get('forced_date')
            if forced_date:
                try:
                    datetime.strptime(forced_date, '%Y-%m-%d')
                except (TypeError, ValueError):
                    errors.append(f"Naming rule {label} has an invalid forced_date: {forced_date}")

        if errors:
            error_msg = "Configuration validation failed:\n" + \
                "\n".join(f"  - {error}" for error in errors)
            logger.error(error_msg)
            raise ValueError(error_msg)

    @staticmethod
    def build_rule_set(config: Dict[str, Any]) -> RuleSet:
        """Build the immutable rule set from the naming section."""
        naming = config['naming']
        return RuleSet.from_rules(
            (NamingRule.from_dict(rule) for rule in naming['rules']),
            default_provider=naming['default_provider'],
            default_payment_method=naming['default_payment_method'],
            minimal_content_max_words=naming['minimal_content_max_words'],
        )

    @staticmethod
    def save_last_used_path(settings_path: Optional[str], path: str) -> bool:
        """Remember the last organized directory in the settings file."""
        if not path:
            return False

        settings_file = ConfigurationManager.resolve_settings_path(settings_path)
        try:
            settings = {}
            if settings_file.exists():
                with open(settings_file, 'r', encoding='utf-8') as f:
                    settings = json.load(f)

            settings['last_used_path'] = str(path)

            with open(settings_file, 'w', encoding='utf-8') as f:
                json.dump(settings, f, indent=2, ensure_ascii=False)

            logger.info(f"Last used path '{path}' saved to {settings_file}")
            return True
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save last used path to {settings_file}: {e}")
            return False

    @staticmethod
    def setup_logging(config: Dict[str, Any]):
        """Setup logging configuration."""
        log_level = getattr(logging, config['logging']['level'], logging.INFO)
        log_format = config['logging']['format']

        logging.basicConfig(
            level=log_level,
            format=log_format,
            handlers=[
                logging.StreamHandler(),
                logging.FileHandler(config['logging']['file'], encoding='utf-8')
            ],
            force=True
        )

        # Set specific logger levels
        logging.getLogger('PIL').setLevel(logging.WARNING)

        logger.info(
            f"Logging configured at {config['logging']['level']} level")

    @staticmethod
    def get_environment_info() -> Dict[str, Any]:
        """Get information about the current environment."""
        return {
            'python_version': sys.version,
            'platform': os.name,
            'working_directory': os.getcwd(),
            'environment_variables': {
                key: value
                for key, value in os.environ.items()
                if key.startswith(('BASE_', 'FILE_', 'LOG_', 'MAX_', 'TESSERACT_', 'BILL_ORGANIZER_', 'NAMING_'))
            }
        }

    @staticmethod
    def create_sample_settings_file(filepath: str = 'appsettings.sample.json'):
        """Create a sample settings file with all configuration options."""
        sample = {
            'base_path': './comprobantes',
            'last_used_path': None,
            'file_extensions': DEFAULT_FILE_EXTENSIONS,
            'include_subdirectories': True,
            'force_reprocess_already_named': False,
            'max_concurrent_processing': 4,
            'tesseract_data_path': './tessdata',
            'tesseract_language': 'spa',
            'naming_rules': {
                'default_provider': 'servicio',
                'default_payment_method': 'santander',
                'minimal_content_max_words': DEFAULT_MINIMAL_CONTENT_MAX_WORDS,
                'rules': [
                    {
                        'name': 'AySA agua',
                        'keywords': ['aysa'],
                        'provider': 'aysa',
                    },
                    {
                        'name': 'Cuota escuela',
                        'keywords': ['gloria', 'cuota'],
                        'provider': 'gloria',
                        'payment_method': 'mercadopago',
                    },
                    {
                        'name': 'Recibo manual jardinero',
                        'keywords': ['jardin', 'recibi'],
                        'provider': 'jardinero',
                        'payment_method': 'efectivo',
                        'forced_date': '2025-01-01',
                    },
                ],
            },
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(sample, f, indent=2, ensure_ascii=False)

        logger.info(f"Sample settings file created: {filepath}")
