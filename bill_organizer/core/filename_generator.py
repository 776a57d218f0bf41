"""
Filename Generator

Turns extracted document content into the canonical
``{provider}_{yyyy-MM-dd}_{payment}{ext}`` filename and hands out
collision-free target paths.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from .date_extractor import DateExtractor
from .file_operations import FileMoveGuard
from .naming_rules import RuleSet

logger = logging.getLogger(__name__)

CANONICAL_NAME_PATTERN = re.compile(r"^[a-zA-Z0-9_]+_\d{4}-\d{2}-\d{2}_[a-zA-Z0-9_]+$")

INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f\s]')


class FilenameGenerator:
    """Builds canonical filenames from content and resolves name collisions."""

    def __init__(
        self,
        rule_set: RuleSet,
        date_extractor: Optional[DateExtractor] = None,
        guard: Optional[FileMoveGuard] = None
    ):
        self.rule_set = rule_set
        self.date_extractor = date_extractor or DateExtractor()
        self.guard = guard or FileMoveGuard()

    def generate_filename(self, content: str, original_path: Union[str, Path]) -> str:
        """
        Generate the canonical filename for a document.

        Args:
            content: Extracted text of the document
            original_path: Current path, used for its extension

        Returns:
            Sanitized filename including the original extension
        """
        original_path = Path(original_path)

        date = self.date_extractor.extract_date_from_content(content)
        if not date:
            date = datetime.now().strftime('%Y-%m-%d')
            logger.warning(f"⚠️ Could not extract date from content for {original_path.name}, using today: {date}")

        generated = self.rule_set.generate_filename(content, date)
        return f"{self.cleanup_filename(generated)}{original_path.suffix}"

    @staticmethod
    def is_already_named_filename(filename_without_extension: Optional[str]) -> bool:
        """Whether a stem already follows provider_yyyy-MM-dd_payment."""
        if not filename_without_extension:
            return False
        return CANONICAL_NAME_PATTERN.match(filename_without_extension) is not None

    def generate_unique_filename(self, directory: Union[str, Path], base_filename: str) -> Path:
        """
        Return a path in ``directory`` for ``base_filename`` that does not collide.

        The path is reserved with an empty placeholder so no other caller can
        be handed the same name; ``rename_unique`` to it fills the placeholder.
        """
        return self.guard.claim_unique(directory, base_filename)

    def rename_unique(self, source: Union[str, Path], new_filename: str) -> Path:
        """Rename a file in place, suffixing the new name if it is taken."""
        source = Path(source)
        return self.guard.move_unique(source, source.parent, new_filename)

    @staticmethod
    def cleanup_filename(filename: Optional[str]) -> str:
        if not filename:
            return "unknown_file"

        filename = INVALID_FILENAME_CHARS.sub('_', filename)
        filename = re.sub(r'_{2,}', '_', filename)
        filename = filename.strip('_')

        return filename or "cleaned_file"
