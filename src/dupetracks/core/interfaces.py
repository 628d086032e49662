"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate matching system.

Key Components:
---------------
- AudioScanner: Interface for scanning directories into AudioFile descriptors.
- PairMatcher: Interface for deciding whether two files are the same recording.
- PairScheduler: Interface for running a matcher over every pair of a collection.
- MatchGrouper: Interface for folding pairwise matches into keeper groups.
"""

from typing import Protocol, List, Optional, Callable
from dupetracks.core.models import (
    AudioFile,
    DuplicateMatch,
    DuplicateResults,
    DuplicateGroup,
)


class AudioScanner(Protocol):
    """Interface for collecting audio file metadata from the file system."""
    def scan(
        self,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[AudioFile]:
        """
        Scan the configured directories.

        Args:
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            Descriptors of every file whose metadata could be read.
        """
        ...


class PairMatcher(Protocol):
    """
    Interface for a pure, side-effect free pair predicate.
    Must return the same verdict regardless of argument order.
    """
    def match_pair(self, file1: AudioFile, file2: AudioFile) -> Optional[DuplicateMatch]:
        ...


class PairScheduler(Protocol):
    """Interface for evaluating every unordered pair of a collection."""
    def find_all_matches(
        self,
        files: List[AudioFile],
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> DuplicateResults:
        """
        Args:
            files: Read-only collection of descriptors.
            progress_callback: Optional callback (stage, pairs_done, pairs_total).

        Returns:
            DuplicateResults; match order is unspecified.
        """
        ...


class MatchGrouper(Protocol):
    """Interface for turning pairwise matches into groups with a single keeper."""
    def group(self, matches: List[DuplicateMatch]) -> List[DuplicateGroup]:
        ...
