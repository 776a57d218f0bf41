"""
File Operations

Serialized filesystem mutations. Every "check target, create folder, pick a
free name, move" sequence runs inside one ``FileMoveGuard`` critical section
shared by all workers, so two files racing for the same destination can never
both be given the same name.
"""

import logging
import re
import shutil
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def next_available_path(directory: PathLike, filename: str) -> Path:
    """
    Return ``directory/filename`` or, when taken, the next ``stem_<N>ext``.

    N is one more than the highest numeric suffix already present for the
    stem; a lone ``stem.ext`` counts as N = 1, so the first copy is ``_2``.
    Callers must hold the guard while acting on the result.
    """
    directory = Path(directory)
    target = directory / filename
    if not target.exists():
        return target

    stem = Path(filename).stem
    extension = Path(filename).suffix
    suffix_pattern = re.compile(r"^" + re.escape(stem) + r"_(\d+)$")

    highest = 1
    for entry in directory.iterdir():
        if entry.suffix != extension:
            continue
        match = suffix_pattern.match(entry.stem)
        if match:
            highest = max(highest, int(match.group(1)))

    return directory / f"{stem}_{highest + 1}{extension}"


class FileMoveGuard:
    """Mutual exclusion domain for directory creation and unique-name moves."""

    def __init__(self):
        self._lock = threading.RLock()
        # Empty placeholder files handed out by claim_unique, not yet filled
        self._claimed = set()

    @contextmanager
    def critical_section(self) -> Iterator[None]:
        with self._lock:
            yield

    def ensure_directory(self, directory: PathLike) -> Path:
        """Create a directory if missing; a concurrent creation is not an error."""
        directory = Path(directory)
        with self._lock:
            if not directory.is_dir():
                logger.info(f"📁 Creating folder: {directory}")
                try:
                    directory.mkdir(parents=True, exist_ok=True)
                except FileExistsError:
                    logger.debug(f"Folder appeared concurrently: {directory}")
        return directory

    def move_unique(self, source: PathLike, target_directory: PathLike, filename: str) -> Path:
        """
        Move ``source`` into ``target_directory`` under ``filename`` or the
        next free suffixed variant, never overwriting an existing file.

        Returns:
            Final path of the moved file
        """
        source = Path(source)
        with self._lock:
            target_directory = self.ensure_directory(target_directory)
            requested = (target_directory / filename).resolve()
            if requested == source.resolve():
                return source

            if requested in self._claimed:
                # The caller reserved this name earlier; fill the placeholder
                self._claimed.discard(requested)
                target = target_directory / filename
                target.unlink(missing_ok=True)
            else:
                target = next_available_path(target_directory, filename)
            shutil.move(str(source), str(target))
        return target

    def claim_unique(self, directory: PathLike, filename: str) -> Path:
        """
        Reserve a free name in ``directory`` by creating it as an empty file.

        Concurrent callers always receive distinct paths. A later
        ``move_unique`` to the reserved name replaces the placeholder.
        """
        with self._lock:
            directory = self.ensure_directory(directory)
            target = next_available_path(directory, filename)
            with open(target, 'x'):
                pass
            self._claimed.add(target.resolve())
        return target
