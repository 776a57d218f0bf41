"""
File Validator

Pre-flight checks for the organizer: which files are candidates, which can
take the already-named fast path, and whether the configuration is usable.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

from .filename_generator import FilenameGenerator

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_BYTES = 50 * 1024 * 1024


class FileValidator:
    """Validates configuration and candidate files before processing."""

    def __init__(self, config: Dict[str, Any], filename_generator: FilenameGenerator):
        self.config = config
        self.filename_generator = filename_generator

    @property
    def _file_extensions(self):
        return [ext.lower() for ext in self.config.get('processing', {}).get('file_extensions', [])]

    def should_process_file(self, file_path: Union[str, Path, None]) -> bool:
        if not file_path or not Path(file_path).is_file():
            logger.warning(f"File does not exist or path is invalid: {file_path}")
            return False

        extension = Path(file_path).suffix.lower()
        if extension not in self._file_extensions:
            logger.debug(f"File extension {extension} not in configured extensions list")
            return False

        return True

    def should_skip_already_named_file(self, file_path: Union[str, Path]) -> bool:
        if self.config.get('processing', {}).get('force_reprocess_already_named', False):
            return False
        return self.filename_generator.is_already_named_filename(Path(file_path).stem)

    def validate_configuration(self) -> bool:
        base_path = self.config.get('paths', {}).get('base_path')
        if not base_path:
            logger.error("❌ Configuration error: base path is not set")
            return False

        if not Path(base_path).is_dir():
            logger.error(f"❌ Configuration error: base path does not exist: {base_path}")
            return False

        if not self._file_extensions:
            logger.error("❌ Configuration error: no file extensions configured")
            return False

        return True

    def validate_file_size(self, file_path: Union[str, Path]) -> None:
        """Warn about empty or very large files; never raises."""
        file_path = Path(file_path)
        try:
            size = file_path.stat().st_size
        except OSError as e:
            logger.warning(f"Could not validate file size for {file_path.name}: {e}")
            return

        if size > MAX_FILE_SIZE_BYTES:
            logger.warning(f"⚠️ Large file detected: {file_path.name} ({size // (1024 * 1024)} MB)")
        elif size == 0:
            logger.warning(f"⚠️ Empty file detected: {file_path.name}")
