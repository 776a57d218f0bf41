"""
Content Extractors

Text sources for the naming pipeline. Each extractor declares which files it
can read and returns their text as a plain string; any failure is logged and
reported as an empty string so the caller simply skips the file.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import fitz  # PyMuPDF
import pytesseract
from PIL import Image

logger = logging.getLogger(__name__)


class ContentExtractor:
    """Base class for file content extractors."""

    supported_extensions: tuple = ()

    def can_process(self, file_path: Union[str, Path, None]) -> bool:
        if not file_path or not str(file_path).strip():
            return False
        return Path(file_path).suffix.lower() in self.supported_extensions

    def extract_content(self, file_path: Union[str, Path]) -> str:
        raise NotImplementedError


class PdfProcessor(ContentExtractor):
    """Reads embedded text from the first pages of a PDF."""

    supported_extensions = ('.pdf',)

    def __init__(self, max_pages: int = 3, minimum_characters: int = 100):
        self.max_pages = max_pages
        self.minimum_characters = minimum_characters

    def extract_content(self, file_path: Union[str, Path]) -> str:
        try:
            chunks: List[str] = []
            collected = 0
            with fitz.open(str(file_path)) as doc:
                for page_index in range(min(doc.page_count, self.max_pages)):
                    page_text = doc[page_index].get_text()
                    chunks.append(page_text)
                    collected += len(page_text)
                    # Bills carry their header on the first page
                    if collected > self.minimum_characters:
                        break
            return "".join(chunks)
        except Exception as e:
            logger.error(f"❌ Error extracting text from PDF {Path(file_path).name}: {e}")
            return ""


class ImageProcessor(ContentExtractor):
    """OCRs scanned images with the Tesseract engine."""

    supported_extensions = ('.jpg', '.jpeg', '.png', '.tif', '.tiff')

    def __init__(self, tesseract_data_path: Optional[str] = None, language: str = "spa"):
        self.tesseract_data_path = tesseract_data_path
        # Only the primary language is requested when several are configured
        self.language = (language or "eng").split('+')[0]
        self.ocr_available = self._check_tesseract()

    def _check_tesseract(self) -> bool:
        if self.tesseract_data_path and not Path(self.tesseract_data_path).is_dir():
            logger.warning(f"Tessdata directory does not exist: {self.tesseract_data_path}")

        try:
            version = pytesseract.get_tesseract_version()
            logger.info(f"Tesseract OCR is available (version {version})")
            return True
        except Exception as e:
            logger.warning(f"⚠️ Tesseract not available: {e}. Image files will be skipped.")
            return False

    def _tesseract_config(self) -> str:
        if self.tesseract_data_path:
            return f'--tessdata-dir "{self.tesseract_data_path}"'
        return ''

    def extract_content(self, file_path: Union[str, Path]) -> str:
        file_path = Path(file_path)
        if not self.ocr_available:
            logger.error(f"❌ Cannot OCR {file_path.name}: Tesseract is not available")
            return ""

        try:
            logger.info(f"🔍 Extracting text from image: {file_path.name}")
            with Image.open(file_path) as img:
                return pytesseract.image_to_string(
                    img.convert('RGB'),
                    lang=self.language,
                    config=self._tesseract_config()
                ) or ""
        except Exception as e:
            logger.error(f"❌ Failed to extract text from image {file_path.name}: {e}")
            return ""


class TextProcessor(ContentExtractor):
    """Reads the beginning of plain text files."""

    supported_extensions = ('.txt',)

    def __init__(self, max_characters: int = 1000):
        self.max_characters = max_characters

    def extract_content(self, file_path: Union[str, Path]) -> str:
        try:
            with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
                return f.read(self.max_characters)
        except OSError as e:
            logger.error(f"❌ Error reading text file {Path(file_path).name}: {e}")
            return ""


def create_default_extractors(config: Dict[str, Any]) -> List[ContentExtractor]:
    """Build the PDF, image and text extractors from configuration."""
    ocr_config = config.get('ocr', {})
    return [
        PdfProcessor(),
        ImageProcessor(
            tesseract_data_path=ocr_config.get('tesseract_data_path'),
            language=ocr_config.get('tesseract_language', 'spa')
        ),
        TextProcessor(),
    ]
