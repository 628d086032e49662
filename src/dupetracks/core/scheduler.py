"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scheduler.py
Concurrent all-pairs scheduler.

The pair space {(i, j) : i < j} is split by row: worker k owns rows
k, k + W, k + 2W, ... for W workers. Interleaving keeps the slices balanced
(row i holds n - i - 1 pairs) and makes them disjoint, so every pair is
evaluated exactly once and the input list is only ever read.

Each slice returns its own match list; lists are merged as futures complete,
so the final order of matches varies between runs while the set does not.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Optional, Callable

from dupetracks.core.interfaces import PairScheduler, PairMatcher
from dupetracks.core.matcher import DuplicateMatcher
from dupetracks.core.models import (
    AudioFile, DuplicateMatch, DuplicateResults, MatchConfig, Stage)

logger = logging.getLogger(__name__)


class ProgressCounter:
    """
    Thread-safe counter of evaluated pairs, created per scan.
    Only used for progress reporting.
    """

    def __init__(self, total: int = 0):
        self.total = total
        self._value = 0
        self._lock = threading.Lock()

    def increment(self, amount: int = 1) -> int:
        """Adds amount and returns the new value."""
        with self._lock:
            self._value += amount
            return self._value

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


def pair_count(n: int) -> int:
    """Size of the pair space for n files."""
    return n * (n - 1) // 2


def partition_rows(n: int, workers: int) -> List[range]:
    """
    Interleaved row slices for the pair space of n files.
    The last row has no pairs, so only rows 0..n-2 are distributed.
    """
    rows = max(n - 1, 0)
    slice_count = max(1, min(workers, rows))
    return [range(k, rows, slice_count) for k in range(slice_count)]


class ConcurrentPairScheduler(PairScheduler):
    """
    Runs a PairMatcher over every unordered pair using a fixed-size thread pool.
    """

    def __init__(self, matcher: PairMatcher = None, workers: Optional[int] = None,
                 progress_interval: int = MatchConfig.PROGRESS_LOG_INTERVAL):
        self.matcher = matcher or DuplicateMatcher()
        self.workers = workers or MatchConfig.default_workers()
        self.progress_interval = progress_interval

    def find_all_matches(
        self,
        files: List[AudioFile],
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> DuplicateResults:
        """
        Compare every pair of files and collect the matches.
        progress_callback is invoked from worker threads.
        """
        if not files:
            logger.info("No files to analyze")
            return DuplicateResults(matches=[], total_files_scanned=0)

        n = len(files)
        counter = ProgressCounter(total=pair_count(n))
        slices = partition_rows(n, self.workers)

        logger.info(
            f"Starting duplicate analysis with {n} files "
            f"({counter.total} pairs) using {len(slices)} workers"
        )

        matches: List[DuplicateMatch] = []
        with ThreadPoolExecutor(max_workers=len(slices)) as executor:
            futures = [
                executor.submit(self._process_rows, files, rows, counter, progress_callback)
                for rows in slices
            ]
            for future in as_completed(futures):
                matches.extend(future.result())

        logger.info(f"Found {len(matches)} duplicate matches")
        return DuplicateResults(matches=matches, total_files_scanned=n)

    def _process_rows(
        self,
        files: List[AudioFile],
        rows: range,
        counter: ProgressCounter,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[DuplicateMatch]:
        """Evaluate pairs (i, j) for every i in rows and every j > i."""
        found = []
        n = len(files)
        for i in rows:
            file1 = files[i]
            for j in range(i + 1, n):
                match = self.matcher.match_pair(file1, files[j])
                if match is not None:
                    logger.debug(
                        f"Found duplicate: keep {match.higher_quality.file_name}, "
                        f"drop {match.lower_quality.file_name} | "
                        f"{match.match_reason} | {match.quality_difference}"
                    )
                    found.append(match)

            row_pairs = n - i - 1
            processed = counter.increment(row_pairs)
            self._report_progress(processed, row_pairs, counter.total, progress_callback)
        return found

    def _report_progress(
        self,
        processed: int,
        step: int,
        total: int,
        progress_callback: Optional[Callable[[str, int, object], None]]
    ) -> None:
        # Log whenever an interval boundary was crossed by this step
        crossed = processed // self.progress_interval > (processed - step) // self.progress_interval
        if crossed or processed == total:
            logger.info(f"Progress: processed {processed}/{total} pair comparisons")
        if progress_callback:
            progress_callback(Stage.MATCHING.value, processed, total)


def find_all_matches(files: List[AudioFile], workers: Optional[int] = None) -> DuplicateResults:
    """Convenience wrapper around ConcurrentPairScheduler with the default matcher."""
    return ConcurrentPairScheduler(workers=workers).find_all_matches(files)
