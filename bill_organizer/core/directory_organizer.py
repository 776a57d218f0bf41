"""
Directory Organizer

Places files into the ``<base>/<YYYY>/<MM>_<mes>/`` hierarchy. Month folders
use Spanish month names and two-digit month numbers; this layout is read by
other tools and must stay exactly as produced here.
"""

import logging
import re
from datetime import datetime
from pathlib import Path
from types import MappingProxyType
from typing import Optional, Union

from .file_operations import FileMoveGuard

logger = logging.getLogger(__name__)

MONTH_NAMES = MappingProxyType({
    1: "enero", 2: "febrero", 3: "marzo", 4: "abril",
    5: "mayo", 6: "junio", 7: "julio", 8: "agosto",
    9: "septiembre", 10: "octubre", 11: "noviembre", 12: "diciembre",
})

UNKNOWN_MONTH = "unknown"

YEAR_FOLDER_PATTERN = re.compile(r"^\d{4}$")
MONTH_FOLDER_PATTERN = re.compile(r"^\d{2}_\w+$")


class DirectoryOrganizer:
    """Moves files into year/month folders under a base directory."""

    def __init__(self, base_path: Union[str, Path] = ".", guard: Optional[FileMoveGuard] = None):
        self.base_path = Path(base_path or ".")
        self.guard = guard or FileMoveGuard()

    @staticmethod
    def get_month_name(month_number: int) -> str:
        return MONTH_NAMES.get(month_number, UNKNOWN_MONTH)

    def month_folder_name(self, month_number: int) -> str:
        return f"{month_number:02d}_{self.get_month_name(month_number)}"

    @staticmethod
    def is_in_year_month_structure(directory_path: Union[str, Path]) -> bool:
        """True for a month folder inside a year folder, or for a year folder itself."""
        try:
            directory = Path(directory_path)
            is_year_folder = YEAR_FOLDER_PATTERN.match(directory.name) is not None
            is_month_folder = MONTH_FOLDER_PATTERN.match(directory.name) is not None
            parent_is_year = YEAR_FOLDER_PATTERN.match(directory.parent.name) is not None
            return (is_month_folder and parent_is_year) or is_year_folder
        except (TypeError, ValueError):
            return False

    def organize_file_into_directory_structure(self, file_path: Union[str, Path], date_str: Optional[str]) -> Path:
        """
        Move a file into the folder matching its date.

        Args:
            file_path: File to place
            date_str: Date in yyyy-MM-dd form

        Returns:
            Final path of the file; unchanged when the date is missing or
            invalid, or when the file is already in the right folder
        """
        file_path = Path(file_path)

        file_date = self._parse_date(date_str)
        if file_date is None:
            return file_path

        year_folder = f"{file_date.year:04d}"
        month_folder = self.month_folder_name(file_date.month)
        current_dir = file_path.parent

        if current_dir.name == month_folder and current_dir.parent.name == year_folder:
            logger.debug(f"{file_path.name} already in {year_folder}/{month_folder}")
            return file_path

        month_path = self._year_path(year_folder) / month_folder

        if self.is_in_year_month_structure(current_dir):
            logger.info(f"📂 Moving {file_path.name} from {current_dir.name} to {year_folder}/{month_folder}")
        else:
            logger.info(f"📂 Moving file to organized structure: {file_path.name} -> {year_folder}/{month_folder}")

        with self.guard.critical_section():
            self.guard.ensure_directory(month_path)
            new_path = self.guard.move_unique(file_path, month_path, file_path.name)

        if new_path.name != file_path.name:
            logger.info(f"Name taken in {month_folder}, stored as {new_path.name}")
        return new_path

    def _year_path(self, year_folder: str) -> Path:
        # A base path that is itself a year folder is never nested into
        resolved = self.base_path.resolve()
        if YEAR_FOLDER_PATTERN.match(resolved.name):
            if resolved.name == year_folder:
                return self.base_path
            return resolved.parent / year_folder
        return self.base_path / year_folder

    @staticmethod
    def _parse_date(date_str: Optional[str]) -> Optional[datetime]:
        if not date_str or not date_str.strip():
            return None
        try:
            return datetime.strptime(date_str.strip(), '%Y-%m-%d')
        except ValueError:
            logger.debug(f"Unparsable date '{date_str}', leaving file in place")
            return None
