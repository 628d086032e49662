"""
dupetracks finds duplicate music recordings by filename and keeps the best copy.

Core features:
- "Artist - Title (Version)" filename normalization with version-aware matching
- Quality comparison by format, bitrate and size
- Concurrent all-pairs matching across the whole collection
- Relocation of lower-quality copies to a folder or the system trash (via send2trash)
- CSV reports and bitrate distribution analysis
"""

# Get version
try:
    from importlib.metadata import version as _version
    __version__ = _version("dupetracks")
except Exception:
    import tomllib
    from pathlib import Path

    with open(Path(__file__).resolve().parents[2] / "pyproject.toml", "rb") as f:
        __version__ = tomllib.load(f)["project"]["version"]

# Public API: only what users should import directly
from dupetracks.commands import DuplicateScanCommand, BitrateCommand
from dupetracks.core import (
    AudioFile, DuplicateMatch, DuplicateResults, DuplicateGroup, ScanParams,
    normalize_title, classify_version, versions_equivalent, compare_quality,
    DuplicateMatcher, ConcurrentPairScheduler, find_all_matches)
from dupetracks.utils.convert_utils import ConvertUtils
from dupetracks.services import DuplicateService, FileService, ReportService

__all__ = [
    "DuplicateScanCommand",
    "BitrateCommand",
    "AudioFile",
    "DuplicateMatch",
    "DuplicateResults",
    "DuplicateGroup",
    "ScanParams",
    "normalize_title",
    "classify_version",
    "versions_equivalent",
    "compare_quality",
    "DuplicateMatcher",
    "ConcurrentPairScheduler",
    "find_all_matches",
    "ConvertUtils",
    "DuplicateService",
    "FileService",
    "ReportService",
    "__version__",
]
