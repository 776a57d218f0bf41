"""
Result Handler

Saves the per-file outcomes of a run as a JSON or CSV report.
"""

import csv
import json
import logging
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CSV_FIELDS = ['source', 'final_path', 'status', 'filename', 'date', 'error', 'timestamp', 'processing_time']


class ResultHandler:
    """Handles saving of batch processing results."""

    def __init__(self, config: Dict[str, Any]):
        """Initialize result handler with configuration."""
        self.output_config = config.get('output', {})
        self.results_dir = Path(self.output_config.get('results_directory', 'results'))
        self.save_enabled = self.output_config.get('save_results', False)
        self.export_format = self.output_config.get('export_format', 'json').lower()

        if self.save_enabled:
            self.results_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def summarize(results: List[Dict[str, Any]]) -> Dict[str, int]:
        """Count results by status."""
        counts = Counter(r.get('status', 'unknown') for r in results)
        summary = {'total_files': len(results)}
        summary.update(sorted(counts.items()))
        return summary

    def save_batch_results(self, results: List[Dict[str, Any]]) -> Optional[str]:
        """Save batch processing results; returns the report path."""
        if not self.save_enabled or not results:
            return None

        try:
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')

            if self.export_format == 'csv':
                return self._save_batch_csv(results, timestamp)
            if self.export_format != 'json':
                logger.warning(f"Unsupported export format: {self.export_format}, using json")
            return self._save_batch_json(results, timestamp)

        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save batch results: {e}")
            return None

    def _save_batch_json(self, results: List[Dict[str, Any]], timestamp: str) -> str:
        filepath = self.results_dir / f"{timestamp}_batch_results.json"

        batch_data = {
            'batch_info': dict(timestamp=timestamp, **self.summarize(results)),
            'results': results,
        }

        with open(filepath, 'w', encoding='utf-8') as f:
            json.dump(batch_data, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"📄 Batch results saved: {filepath}")
        return str(filepath)

    def _save_batch_csv(self, results: List[Dict[str, Any]], timestamp: str) -> str:
        filepath = self.results_dir / f"{timestamp}_batch_results.csv"

        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=CSV_FIELDS, extrasaction='ignore')
            writer.writeheader()
            writer.writerows(results)

        logger.info(f"📊 Batch results saved: {filepath}")
        return str(filepath)
