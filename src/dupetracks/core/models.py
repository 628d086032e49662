"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for audio file scanning, duplicate matching and bitrate analysis.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, FrozenSet
import os
from enum import Enum

from dupetracks.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class Stage(str, Enum):
    SCANNING = "scanning"
    MATCHING = "matching"
    GROUPING = "grouping"

    @classmethod
    def get_all(cls):
        return [cls.SCANNING, cls.MATCHING, cls.GROUPING]


class BitrateCategory(Enum):
    """
    Bitrate buckets used by the bitrate distribution report.
    Declared from best to worst; the declaration order is the report order.
    """
    HIGH_RES = "high-res"
    LOSSLESS = "lossless"
    HIGH = "high"
    STANDARD = "standard"
    LOW = "low"
    UNKNOWN = "unknown"

    @staticmethod
    def from_bitrate(bitrate: int) -> "BitrateCategory":
        """Map a bitrate in kbps to its category. 401-699 kbps falls into UNKNOWN."""
        if bitrate >= 1500:
            return BitrateCategory.HIGH_RES
        if 700 <= bitrate <= 1499:
            return BitrateCategory.LOSSLESS
        if 256 <= bitrate <= 400:  # wide range to catch VBR variations
            return BitrateCategory.HIGH
        if 160 <= bitrate <= 255:
            return BitrateCategory.STANDARD
        if 64 <= bitrate <= 159:
            return BitrateCategory.LOW
        return BitrateCategory.UNKNOWN

    @property
    def display_name(self) -> str:
        """Human-readable name for reports."""
        mapping = {
            BitrateCategory.HIGH_RES: "High-Resolution (1500+ kbps)",
            BitrateCategory.LOSSLESS: "Lossless (700-1499 kbps)",
            BitrateCategory.HIGH: "High Bitrate (256-400 kbps)",
            BitrateCategory.STANDARD: "Standard Bitrate (160-255 kbps)",
            BitrateCategory.LOW: "Low Bitrate (64-159 kbps)",
            BitrateCategory.UNKNOWN: "Other",
        }
        return mapping.get(self, self.value)

    def __str__(self) -> str:
        return self.display_name


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class AudioFile:
    """
    Immutable descriptor of one audio file, produced by the scanner.
    The matching engine only reads it.
    """
    path: str
    size_bytes: int
    file_name: Optional[str] = None
    duration_secs: Optional[float] = None
    bitrate: Optional[int] = None  # kbps
    artist: Optional[str] = None
    title: Optional[str] = None
    album: Optional[str] = None

    def __post_init__(self):
        """Derive file_name from path if not provided."""
        if self.file_name is None:
            object.__setattr__(self, "file_name", os.path.basename(self.path))

    def __repr__(self):
        return f"<AudioFile name={self.file_name}, size={self.size_bytes}, bitrate={self.bitrate}>"


@dataclass(frozen=True)
class ParsedTitle:
    """Canonical (artist, title, version) triple derived from a filename."""
    artist: str
    title: str
    version: Optional[str] = None


@dataclass(frozen=True)
class VersionType:
    """
    Classification of a version annotation.
    An empty marker set means the annotation carries no version information.
    """
    markers: FrozenSet[str] = frozenset()

    @property
    def is_none(self) -> bool:
        return not self.markers

    def shares_markers(self, other: "VersionType") -> bool:
        return bool(self.markers & other.markers)

    def __repr__(self):
        if self.is_none:
            return "<VersionType None>"
        return f"<VersionType markers={sorted(self.markers)}>"


@dataclass(frozen=True)
class DuplicateMatch:
    """One confirmed duplicate pair. The winner is always higher_quality."""
    higher_quality: AudioFile
    lower_quality: AudioFile
    match_reason: str
    quality_difference: str


@dataclass
class DuplicateResults:
    """
    Output of a full pair scan.
    The order of matches depends on worker scheduling and must not be relied upon.
    """
    matches: List[DuplicateMatch] = field(default_factory=list)
    total_files_scanned: int = 0

    @property
    def match_count(self) -> int:
        return len(self.matches)

    def __repr__(self):
        return f"<DuplicateResults matches={len(self.matches)}, scanned={self.total_files_scanned}>"


@dataclass
class DuplicateGroup:
    """
    A keeper file and every lower-quality copy linked to it by matches.
    """
    original: AudioFile
    duplicates: List[AudioFile] = field(default_factory=list)

    @property
    def duplicate_count(self) -> int:
        return len(self.duplicates)

    def __repr__(self):
        return f"<DuplicateGroup original={self.original.file_name}, duplicates={len(self.duplicates)}>"


@dataclass
class BitrateStats:
    file_count: int = 0
    category_distribution: Dict[BitrateCategory, int] = field(default_factory=dict)
    average_bitrate: float = 0.0
    min_bitrate: int = 0
    max_bitrate: int = 0

    @property
    def files_with_bitrate(self) -> int:
        return sum(self.category_distribution.values())

    def percentage(self, category: BitrateCategory) -> float:
        total = self.files_with_bitrate
        if total == 0:
            return 0.0
        return round(self.category_distribution.get(category, 0) / total * 100.0, 1)

    def print_summary(self) -> str:
        lines = [
            "Bitrate Analysis Summary:",
            f"Total files: {self.file_count}",
            f"Files with valid bitrate: {self.files_with_bitrate}",
            f"Average bitrate: {self.average_bitrate:.1f} kbps",
            f"Min bitrate: {self.min_bitrate} kbps",
            f"Max bitrate: {self.max_bitrate} kbps",
            "",
            "Bitrate Distribution:",
        ]
        for category in BitrateCategory:
            count = self.category_distribution.get(category, 0)
            if count:
                lines.append(f"{category.display_name}: {count} files ({self.percentage(category):.1f}%)")
        return "\n".join(lines)


class MatchStats:
    """
    Statistics collected during a duplicate scan.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.files_scanned: int = 0
        self.pairs_total: int = 0
        self.pairs_compared: int = 0
        self.matches_found: int = 0
        self.groups_found: int = 0
        self.workers: int = 0
        self.stage_times: Dict[str, float] = {}

    def update_stage(self, stage_name: str, duration: float) -> None:
        self.stage_times[stage_name] = self.stage_times.get(stage_name, 0.0) + duration

    def print_summary(self) -> str:
        lines = [
            "📊 Duplicate Scan Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            f"Files scanned: {self.files_scanned}",
            f"Pairs compared: {self.pairs_compared}/{self.pairs_total} ({self.workers} workers)",
            f"Duplicate matches: {self.matches_found}",
            f"Duplicate groups: {self.groups_found}",
        ]
        for stage, duration in self.stage_times.items():
            lines.append(f"{stage}: {duration:.3f}s")
        return "\n".join(lines)


class MatchConfig:
    LOSSLESS_EXTENSIONS = (".flac",)
    DEFAULT_AUDIO_EXTENSIONS = (".mp3", ".wav", ".flac")
    PROGRESS_LOG_INTERVAL = 1000  # pairs between progress log lines
    YEAR_DIGIT_THRESHOLD = 4

    @staticmethod
    def default_workers() -> int:
        return os.cpu_count() or 1


@dataclass
class ScanParams:
    """Parameters for a duplicate or bitrate scan, validated on creation."""
    roots: List[str]
    output_dir: Optional[str] = None
    extensions: List[str] = field(default_factory=lambda: list(MatchConfig.DEFAULT_AUDIO_EXTENSIONS))
    min_size_bytes: int = 0
    max_size_bytes: Optional[int] = None
    workers: int = field(default_factory=MatchConfig.default_workers)
    dry_run: bool = False
    use_trash: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.roots or not all(self.roots):
            raise ValueError("At least one input directory is required")

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_size_bytes is not None and self.max_size_bytes < self.min_size_bytes:
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        # Normalize extensions: ensure they start with dot and are lowercase
        normalized = []
        for ext in self.extensions:
            ext = ext.strip().lower()
            if ext and not ext.startswith('.'):
                ext = f".{ext}"
            if ext:
                normalized.append(ext)
        self.extensions = normalized or list(MatchConfig.DEFAULT_AUDIO_EXTENSIONS)

    @staticmethod
    def from_human_readable(
            roots: List[str],
            output_dir: Optional[str] = None,
            min_size_str: str = "0",
            max_size_str: Optional[str] = None,
            extensions_str: str = "",
            workers: Optional[int] = None,
            dry_run: bool = False,
            use_trash: bool = False,
    ) -> 'ScanParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        min_size = ConvertUtils.human_to_bytes(min_size_str)
        max_size = ConvertUtils.human_to_bytes(max_size_str) if max_size_str else None

        ext_list = [
            ext.strip() for ext in extensions_str.split(",") if ext.strip()
        ] if extensions_str else []

        return ScanParams(
            roots=roots,
            output_dir=output_dir,
            extensions=ext_list,
            min_size_bytes=min_size,
            max_size_bytes=max_size,
            workers=workers or MatchConfig.default_workers(),
            dry_run=dry_run,
            use_trash=use_trash,
        )
