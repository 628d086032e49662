"""
Unified command orchestrators, used by the CLI and by library callers.
Pure Python, no terminal I/O.
"""
import time
import logging
from typing import List, Optional, Callable, Tuple

from dupetracks.core.models import (
    AudioFile, DuplicateGroup, DuplicateResults, MatchStats, ScanParams, BitrateStats, Stage)
from dupetracks.core.scanner import AudioScannerImpl
from dupetracks.core.scheduler import ConcurrentPairScheduler, pair_count
from dupetracks.core.grouper import MatchGrouperImpl
from dupetracks.core.bitrate import BitrateAnalyzer

logger = logging.getLogger(__name__)


class DuplicateScanCommand:
    """
    Orchestrates the duplicate workflow:
    1. Scan the input directories and read metadata
    2. Compare every pair of files concurrently
    3. Fold matches into keeper groups

    Usage:
        params = ScanParams(roots=["~/Music"], workers=8)
        command = DuplicateScanCommand()
        results, groups, stats = command.execute(params, progress_callback=printer)
    """

    def __init__(self, scheduler: ConcurrentPairScheduler = None, grouper: MatchGrouperImpl = None):
        self._scheduler = scheduler
        self._grouper = grouper or MatchGrouperImpl()
        self._files: List[AudioFile] = []

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[DuplicateResults, List[DuplicateGroup], MatchStats]:
        """
        Run scan → match → group.

        Args:
            params: Validated scan parameters
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None

        Returns:
            Tuple of (results, groups, statistics)

        Raises:
            RuntimeError: If a root is invalid or no audio files were found
        """
        stats = MatchStats()
        total_start = time.time()

        start = time.time()
        scanner = AudioScannerImpl(
            roots=params.roots,
            extensions=params.extensions,
            min_size=params.min_size_bytes,
            max_size=params.max_size_bytes,
            workers=params.workers,
        )
        self._files = scanner.scan(progress_callback=progress_callback)
        stats.update_stage(Stage.SCANNING.value, time.time() - start)

        if not self._files:
            raise RuntimeError("No audio files found matching filters")

        start = time.time()
        scheduler = self._scheduler or ConcurrentPairScheduler(workers=params.workers)
        results = scheduler.find_all_matches(self._files, progress_callback=progress_callback)
        stats.update_stage(Stage.MATCHING.value, time.time() - start)

        start = time.time()
        groups = self._grouper.group(results.matches)
        stats.update_stage(Stage.GROUPING.value, time.time() - start)

        stats.files_scanned = results.total_files_scanned
        stats.pairs_total = pair_count(len(self._files))
        stats.pairs_compared = stats.pairs_total
        stats.matches_found = results.match_count
        stats.groups_found = len(groups)
        stats.workers = scheduler.workers
        stats.total_time = time.time() - total_start

        logger.info(f"Found {len(groups)} groups of duplicates")
        return results, groups, stats

    def get_files(self) -> List[AudioFile]:
        """Get scanned files after execution."""
        return self._files.copy()


class BitrateCommand:
    """Scan the input directories and compute the bitrate distribution."""

    def execute(
            self,
            params: ScanParams,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None
    ) -> Tuple[BitrateStats, List[AudioFile]]:
        scanner = AudioScannerImpl(
            roots=params.roots,
            extensions=params.extensions,
            min_size=params.min_size_bytes,
            max_size=params.max_size_bytes,
            workers=params.workers,
        )
        files = scanner.scan(progress_callback=progress_callback)
        if not files:
            raise RuntimeError("No audio files found matching filters")
        return BitrateAnalyzer.analyze(files), files
