"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Audio file discovery and metadata extraction.
Features:
- Recursively scans one or more root directories with os.walk
- Applies extension and size filters
- Reads duration and tags with mutagen in a thread pool
- Files whose metadata cannot be read are logged and dropped
"""

import os
import time
import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Callable

from mutagen import File as MutagenFile, MutagenError

from dupetracks.core.interfaces import AudioScanner
from dupetracks.core.models import AudioFile, MatchConfig, Stage

logger = logging.getLogger(__name__)


def read_metadata(path: Path, size_bytes: int) -> Optional[AudioFile]:
    """
    Build an AudioFile from the container metadata.
    Bitrate is derived from file size and duration (kbps), which also
    gives a meaningful number for lossless containers.
    Returns None when mutagen does not recognise the file.
    """
    audio = MutagenFile(str(path), easy=True)
    if audio is None:
        logger.debug(f"Unrecognised audio format: {path}")
        return None

    duration = None
    info = getattr(audio, "info", None)
    length = getattr(info, "length", None)
    if length:
        duration = float(length)

    bitrate = None
    if duration and duration > 0:
        bitrate = int(size_bytes * 8 / duration / 1000)

    return AudioFile(
        path=str(path),
        size_bytes=size_bytes,
        file_name=path.name,
        duration_secs=duration,
        bitrate=bitrate,
        artist=_first_tag(audio, "artist"),
        title=_first_tag(audio, "title"),
        album=_first_tag(audio, "album"),
    )


def _first_tag(audio, key: str) -> Optional[str]:
    values = audio.get(key)
    if not values:
        return None
    return str(values[0])


class AudioScannerImpl(AudioScanner):
    """
    Scans directories recursively and extracts metadata of audio files.

    Attributes:
        roots: Directories to scan
        extensions: Allowed audio extensions (e.g., [".mp3", ".flac"])
        min_size: Minimum file size in bytes (optional)
        max_size: Maximum file size in bytes (optional)
        workers: Threads used for metadata extraction
    """

    def __init__(
        self,
        roots: List[str],
        extensions: Optional[List[str]] = None,
        min_size: Optional[int] = None,
        max_size: Optional[int] = None,
        workers: Optional[int] = None,
        progress_interval: int = 100
    ):
        self.roots = roots
        self.extensions = [ext.lower() for ext in extensions] if extensions else list(MatchConfig.DEFAULT_AUDIO_EXTENSIONS)
        self.min_size = min_size
        self.max_size = max_size
        self.workers = workers or MatchConfig.default_workers()
        self.progress_interval = progress_interval

    def scan(self,
             progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[AudioFile]:
        """
        Returns descriptors for all readable audio files under the roots.
        Raises RuntimeError if a root does not exist or is not a directory.
        """
        logger.debug(f"Roots: {self.roots}")
        logger.debug(f"Filters: min_size={self.min_size}, max_size={self.max_size}, extensions={self.extensions}")

        start_time = time.time()
        candidates = self.collect_candidates()
        logger.info(f"Found {len(candidates)} potential audio files")

        if not candidates:
            return []

        total = len(candidates)
        found_files = []
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            results = executor.map(lambda item: self._process_file(*item), candidates)
            for processed, file in enumerate(results, 1):
                if file is not None:
                    found_files.append(file)
                if processed % self.progress_interval == 0 or processed == total:
                    logger.info(f"Progress: {processed}/{total} files ({processed / total * 100:.1f}%)")
                    if progress_callback:
                        progress_callback(Stage.SCANNING.value, processed, total)

        logger.debug(f"Total scan time: {time.time() - start_time:.2f} seconds")
        logger.info(f"Scan completed. {len(found_files)} valid audio files.")
        return found_files

    def collect_candidates(self) -> List[tuple]:
        """
        Walk all roots and return (path, size) for files passing the filters.
        A file reachable from several roots is listed once.
        """
        seen = set()
        candidates = []
        for root in self.roots:
            root_path = Path(root)
            if not root_path.exists():
                error_msg = f"Directory does not exist: {root}"
                logger.error(error_msg)
                raise RuntimeError(error_msg)
            if not root_path.is_dir():
                error_msg = f"Not a directory: {root}"
                logger.error(error_msg)
                raise RuntimeError(error_msg)

            logger.info(f"Scanning directory structure: {root_path.resolve()}")
            for dirpath, dirs, files in os.walk(str(root_path)):
                dirs.sort()
                for filename in sorted(files):
                    path = Path(dirpath) / filename
                    size = self._filter_file(path)
                    if size is None:
                        continue
                    key = str(path.resolve())
                    if key in seen:
                        continue
                    seen.add(key)
                    candidates.append((path, size))
        return candidates

    def _filter_file(self, path: Path) -> Optional[int]:
        """Returns the file size if the file passes all filters, else None."""
        if not self._extension_passes(path):
            logger.debug(f"Skipping non-audio file: {path}")
            return None

        try:
            if path.is_symlink():
                logger.debug(f"Skipping symbolic link: {path}")
                return None
            size = path.stat().st_size
        except (OSError, PermissionError) as e:
            logger.debug(f"Could not get size of {path}: {e}")
            return None

        if size == 0:
            logger.debug(f"Skipping zero-byte file: {path}")
            return None

        if not self._size_passes(size):
            logger.debug(f"Skipping {path} (size {size} bytes outside range)")
            return None
        return size

    @staticmethod
    def _process_file(path: Path, size: int) -> Optional[AudioFile]:
        try:
            file = read_metadata(path, size)
        except (MutagenError, OSError, ValueError) as e:
            logger.warning(f"Error processing file {path}: {e}")
            return None

        if file is not None:
            logger.debug(
                f"Processed file: {file.file_name} (Size: {file.size_bytes} bytes, "
                f"Duration: {file.duration_secs}s, Bitrate: {file.bitrate}kbps)"
            )
        return file

    def _size_passes(self, size: int) -> bool:
        if self.min_size is not None and size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True

    def _extension_passes(self, path: Path) -> bool:
        return path.suffix.lower() in self.extensions
