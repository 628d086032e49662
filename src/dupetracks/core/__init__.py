"""
Core matching engine: scanner, title normalizer, version classifier,
quality comparator, pair matcher and concurrent scheduler.

This package contains the performance-critical foundation of dupetracks:
- AudioScannerImpl: recursive directory traversal with mutagen metadata extraction
- normalize_title: "Artist - Title (Version)" filename parsing
- classify_version / versions_equivalent: version annotation heuristics
- compare_quality: bitrate/format/size quality decision
- DuplicateMatcher: pure pairwise duplicate predicate
- ConcurrentPairScheduler: thread pool over the all-pairs space
- MatchGrouperImpl: keeper groups from pairwise matches
- BitrateAnalyzer: bitrate distribution statistics

No file operations beyond reading metadata, suitable for CLI and library usage.
"""

from .models import (
    AudioFile, ParsedTitle, VersionType, DuplicateMatch, DuplicateResults,
    DuplicateGroup, BitrateCategory, BitrateStats, MatchStats, MatchConfig,
    ScanParams, Stage)
from .normalizer import normalize_title, normalize_artist, extract_version
from .versions import classify_version, versions_equivalent, VERSION_MARKERS
from .quality import compare_quality
from .matcher import DuplicateMatcher
from .scheduler import ConcurrentPairScheduler, ProgressCounter, find_all_matches
from .grouper import MatchGrouperImpl
from .bitrate import BitrateAnalyzer
from .scanner import AudioScannerImpl

__all__ = [
    "AudioFile",
    "ParsedTitle",
    "VersionType",
    "DuplicateMatch",
    "DuplicateResults",
    "DuplicateGroup",
    "BitrateCategory",
    "BitrateStats",
    "MatchStats",
    "MatchConfig",
    "ScanParams",
    "Stage",
    "normalize_title",
    "normalize_artist",
    "extract_version",
    "classify_version",
    "versions_equivalent",
    "VERSION_MARKERS",
    "compare_quality",
    "DuplicateMatcher",
    "ConcurrentPairScheduler",
    "ProgressCounter",
    "find_all_matches",
    "MatchGrouperImpl",
    "BitrateAnalyzer",
    "AudioScannerImpl",
]
