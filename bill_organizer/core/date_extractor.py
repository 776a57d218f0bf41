"""
Date Extractor

Finds the governing date of a bill in its extracted text or in an already
canonical filename. Strategies are tried in a fixed priority order and the
first one that succeeds wins:

1. Spanish long-form dates ("8 de agosto de 2025")
2. Emission-date labels (EMISIÓN:, Fecha, FECHA:, emisión)
3. Due-date labels (vencimiento, Vto.)
4. The first bare numeric date in document order

Numeric dates are read day-first and normalized to ``yyyy-MM-dd`` with plain
string manipulation. An empty string means "no date found".
"""

import logging
import re
from types import MappingProxyType
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


SPANISH_MONTHS = MappingProxyType({
    "enero": "01", "febrero": "02", "marzo": "03", "abril": "04",
    "mayo": "05", "junio": "06", "julio": "07", "agosto": "08",
    "septiembre": "09", "octubre": "10", "noviembre": "11", "diciembre": "12",
})

SPANISH_DATE_PATTERN = re.compile(
    r"\b(\d{1,2})\s+de\s+(" + "|".join(SPANISH_MONTHS) + r")\s+de\s+(\d{4})\b",
    re.IGNORECASE
)

_NUMERIC = r"(\d{1,2}/\d{1,2}/\d{4})"

EMISSION_PATTERNS: Tuple[re.Pattern, ...] = tuple(
    re.compile(pattern, re.IGNORECASE) for pattern in (
        r"EMISI[ÓO]N:\s*" + _NUMERIC,
        r"Fecha\s+" + _NUMERIC,
        r"FECHA:\s*" + _NUMERIC,
        r"emisi[óo]n\s*" + _NUMERIC,
    )
)

DUE_DATE_PATTERNS: Tuple[re.Pattern, ...] = tuple(
    re.compile(pattern, re.IGNORECASE) for pattern in (
        r"vencimiento\s+" + _NUMERIC,
        r"Vto\.?\s*:?\s*" + _NUMERIC,
        r"vencimiento:\s*" + _NUMERIC,
    )
)

# Year-first alternative listed first so "2024-03-15" is never read as "24-03-15".
# Digit lookarounds instead of \b so "ref_2024-03-15" still matches.
GENERIC_DATE_PATTERN = re.compile(
    r"(?<!\d)(\d{4}-\d{1,2}-\d{1,2}|\d{1,2}[-/.]\d{1,2}[-/.]\d{2,4})(?!\d)"
)

FILENAME_DATE_PATTERN = re.compile(r"(\d{4}-\d{2}-\d{2})")

# Characters OCR engines commonly return in place of digits
OCR_DIGIT_SUBSTITUTIONS = MappingProxyType({
    "O": "0", "o": "0",
    "I": "1", "l": "1", "|": "1",
    "S": "5",
    "B": "8",
})

_OCR_DATE_TOKEN = re.compile(
    r"(?<![\w|])[0-9OoIl|SB]{1,4}[-/.][0-9OoIl|SB]{1,2}[-/.][0-9OoIl|SB]{2,4}(?![\w|])"
)

_SEPARATORS = re.compile(r"[-/.]")


class DateExtractor:
    """Extracts and normalizes bill dates from text and filenames."""

    def extract_date_from_content(self, content: Optional[str]) -> str:
        """
        Find the most relevant date in a document's text.

        Args:
            content: Extracted document text

        Returns:
            Date as yyyy-MM-dd, or an empty string when nothing was found
        """
        if not content:
            return ""

        spanish_date = self._find_spanish_date(content)
        if spanish_date:
            return spanish_date

        corrected = self.correct_ocr_digits(content)

        for label, patterns in (("emission", EMISSION_PATTERNS), ("due", DUE_DATE_PATTERNS)):
            for pattern in patterns:
                match = pattern.search(corrected)
                if match:
                    date = self.standardize_date(match.group(1))
                    logger.info(f"Using {label} date from content: {date} (found: '{match.group(0)}')")
                    return date

        match = GENERIC_DATE_PATTERN.search(corrected)
        if match:
            date = self.standardize_date(match.group(1))
            logger.info(f"Using generic date from content: {date} (found: '{match.group(0)}')")
            return date

        return ""

    def extract_date_from_filename(self, filename: Optional[str]) -> str:
        """Return the first yyyy-MM-dd token in a filename, or an empty string."""
        if not filename:
            return ""
        match = FILENAME_DATE_PATTERN.search(filename)
        return match.group(1) if match else ""

    @staticmethod
    def standardize_date(date_string: Optional[str]) -> str:
        """
        Normalize a numeric date to yyyy-MM-dd.

        Year-first input is kept in order; anything else is read as
        day/month/year. Two digit years below 50 belong to the 2000s.
        """
        if not date_string:
            return ""

        parts = _SEPARATORS.split(date_string.strip())
        if len(parts) != 3 or not all(p.isdigit() for p in parts):
            return date_string

        if len(parts[0]) == 4:
            year, month, day = parts
        else:
            day, month, year = parts
            if len(year) == 2:
                year = ("20" if int(year) < 50 else "19") + year

        return f"{year}-{month.zfill(2)}-{day.zfill(2)}"

    @staticmethod
    def correct_ocr_digits(content: str) -> str:
        """Replace OCR look-alike characters inside date-shaped tokens."""
        def _fix(match: re.Match) -> str:
            token = match.group(0)
            if sum(c.isdigit() for c in token) < 4:
                return token
            return "".join(OCR_DIGIT_SUBSTITUTIONS.get(c, c) for c in token)

        return _OCR_DATE_TOKEN.sub(_fix, content)

    @staticmethod
    def _find_spanish_date(content: str) -> str:
        match = SPANISH_DATE_PATTERN.search(content)
        if not match:
            return ""

        day, month_name, year = match.groups()
        month = SPANISH_MONTHS[month_name.lower()]
        date = f"{year}-{month}-{day.zfill(2)}"
        logger.info(f"Using Spanish date from content: {date} (found: '{match.group(0)}')")
        return date
