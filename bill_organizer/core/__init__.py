"""
Core processing modules for bill organization.

This package contains the core functionality for:
- Keyword rule matching of bill providers
- Date extraction from bill text and filenames
- Canonical filename generation and collision handling
- Year/month directory placement
- Content extraction and the concurrent file pipeline
"""

from .naming_rules import NamingRule, RuleSet
from .date_extractor import DateExtractor
from .file_operations import FileMoveGuard
from .filename_generator import FilenameGenerator
from .directory_organizer import DirectoryOrganizer
from .file_validator import FileValidator
from .file_service import FileService
from .config_manager import ConfigurationManager
from .result_handler import ResultHandler

__all__ = [
    'NamingRule',
    'RuleSet',
    'DateExtractor',
    'FileMoveGuard',
    'FilenameGenerator',
    'DirectoryOrganizer',
    'FileValidator',
    'FileService',
    'ConfigurationManager',
    'ResultHandler'
]
