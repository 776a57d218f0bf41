"""
File Service

Orchestrates a run over the configured base directory: discovers candidate
files, extracts their content, renames them to the canonical convention and
places them into the year/month hierarchy. Files are processed concurrently
with a bounded pool; a failure on one file never stops the others.
"""

import asyncio
import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .content_extractors import ContentExtractor, create_default_extractors
from .date_extractor import DateExtractor
from .directory_organizer import DirectoryOrganizer
from .file_operations import FileMoveGuard
from .file_validator import FileValidator
from .filename_generator import FilenameGenerator
from .naming_rules import RuleSet

logger = logging.getLogger(__name__)


class FileService:
    """Runs the classify, date, name and place pipeline over a directory."""

    def __init__(
        self,
        config: Dict[str, Any],
        rule_set: RuleSet,
        extractors: Optional[Sequence[ContentExtractor]] = None
    ):
        self.config = config
        self.processing_config = config.get('processing', {})
        self.base_path = Path(config.get('paths', {}).get('base_path') or '.')

        # One guard shared by every component that moves files
        self.guard = FileMoveGuard()
        self.date_extractor = DateExtractor()
        self.filename_generator = FilenameGenerator(rule_set, self.date_extractor, self.guard)
        self.directory_organizer = DirectoryOrganizer(self.base_path, self.guard)
        self.validator = FileValidator(config, self.filename_generator)
        self.extractors = list(extractors) if extractors is not None else create_default_extractors(config)

    def discover_files(self) -> List[Path]:
        """List candidate files under the base path."""
        if self.processing_config.get('include_subdirectories', True):
            candidates = self.base_path.rglob('*')
        else:
            candidates = self.base_path.iterdir()
        return sorted(p for p in candidates if p.is_file() and self.validator.should_process_file(p))

    async def process_files(self) -> List[Dict[str, Any]]:
        """
        Process every candidate file under the base path.

        Returns:
            One result record per processed file
        """
        if not self.validator.validate_configuration():
            return []

        start = time.time()
        files = self.discover_files()
        max_concurrency = max(1, int(self.processing_config.get('max_concurrent_processing', 4)))

        logger.info(
            f"🚀 Starting to process {len(files)} files in {self.base_path} "
            f"with max concurrency {max_concurrency}"
        )

        semaphore = asyncio.Semaphore(max_concurrency)
        loop = asyncio.get_running_loop()
        processed = 0

        async def process_with_semaphore(file_path: Path) -> Dict[str, Any]:
            nonlocal processed
            async with semaphore:
                result = await loop.run_in_executor(None, self.process_file, file_path)
            processed += 1
            if processed % 10 == 0:
                logger.debug(f"Processed {processed}/{len(files)} files")
            return result

        results = await asyncio.gather(*(process_with_semaphore(f) for f in files))

        elapsed = time.time() - start
        failed = len([r for r in results if r['status'] == 'failed'])
        logger.info(
            f"✅ Finished processing {len(results)} files in {elapsed:.2f}s "
            f"({len(results) - failed} ok, {failed} failed)"
        )
        return list(results)

    def process_file(self, file_path: Path) -> Dict[str, Any]:
        """Run the full pipeline for one file, recording the outcome."""
        file_path = Path(file_path)
        started = time.time()
        result = {
            'source': str(file_path),
            'final_path': str(file_path),
            'status': 'skipped',
            'filename': file_path.name,
            'date': '',
            'error': None,
            'timestamp': datetime.now().isoformat(),
            'processing_time': 0.0,
        }

        try:
            logger.info(f"🔄 Processing file: {file_path.name}")
            self.validator.validate_file_size(file_path)

            if self.validator.should_skip_already_named_file(file_path):
                logger.info(f"File already follows naming convention, organizing: {file_path.name}")
                date_str = self.date_extractor.extract_date_from_filename(file_path.stem)
                new_path = self.directory_organizer.organize_file_into_directory_structure(file_path, date_str)
                result.update(status='already_named', final_path=str(new_path), date=date_str)
                return result

            extractor = next((e for e in self.extractors if e.can_process(file_path)), None)
            if extractor is None:
                logger.warning(f"No processor available for file type: {file_path.name}")
                return result

            content = extractor.extract_content(file_path)
            if not content or not content.strip():
                logger.warning(f"⚠️ No content extracted from file: {file_path.name}")
                return result

            new_filename = self.filename_generator.generate_filename(content, file_path)
            date_str = self.date_extractor.extract_date_from_filename(Path(new_filename).stem)

            if new_filename.lower() == file_path.name.lower():
                logger.info(f"File already has an appropriate name: {file_path.name}")
                current_path = file_path
                status = 'organized'
            else:
                current_path = self.filename_generator.rename_unique(file_path, new_filename)
                logger.info(f"✏️ Renaming: {file_path.name} -> {current_path.name}")
                status = 'renamed'

            final_path = self.directory_organizer.organize_file_into_directory_structure(current_path, date_str)
            result.update(status=status, final_path=str(final_path), filename=final_path.name, date=date_str)

        except Exception as e:
            logger.error(f"❌ Error processing file {file_path.name}: {e}", exc_info=True)
            result.update(status='failed', error=str(e))

        finally:
            result['processing_time'] = time.time() - started
            logger.debug(f"Completed {file_path.name} in {result['processing_time'] * 1000:.0f}ms")

        return result
