"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/versions.py
Classifies version annotations ("Radio Edit", "2017", "Club Mix") and decides
whether two annotations describe the same release.
"""

from typing import Optional
from functools import lru_cache
from dupetracks.core.models import VersionType, MatchConfig

VERSION_MARKERS = (
    # Remix and edit types
    "remix", "mix", "rmx", "rework", "edit", "reconstruction",
    "bootleg", "mashup", "flip", "recut", "reprise",
    # Version types
    "version", "radio", "club", "special", "extended",
    # DJ markers
    "dj", "vs", "presents",
    # Release types
    "remaster", "master", "remastered",
    # Mix types
    "dub", "instrumental", "acapella", "acoustic", "live",
    # Length markers
    "long", "short", "full", "cut", "original",
    # Regional markers
    "us", "uk", "euro", "italian", "spanish", "dutch",
    # Combinations
    "radio edit", "club mix", "dance mix", "extended mix",
)

YEAR_MARKER = "year"

NO_VERSION = VersionType()


@lru_cache(maxsize=8192)
def classify_version(annotation: Optional[str]) -> VersionType:
    """
    Classify a raw version annotation.

    Every marker contained in the lower-cased text is collected. Text without
    any marker but with at least four ASCII digits is treated as a release
    year. Anything else carries no version information.

    Examples:
        None            → VersionType()
        "Radio Edit"    → {"radio", "edit", "radio edit"}
        "2017"          → {"year"}
        "feat. Someone" → VersionType()
    """
    if annotation is None:
        return NO_VERSION

    text = annotation.lower()
    found = frozenset(marker for marker in VERSION_MARKERS if marker in text)
    if found:
        return VersionType(found)

    digits = sum(1 for c in text if c.isascii() and c.isdigit())
    if digits >= MatchConfig.YEAR_DIGIT_THRESHOLD:
        return VersionType(frozenset({YEAR_MARKER}))

    return NO_VERSION


def versions_equivalent(version1: Optional[str], version2: Optional[str]) -> bool:
    """
    True if two annotations can be treated as the same release.

    - neither side has version info: equivalent
    - both sides have markers: equivalent if they share one, or the text is identical
    - only one side has markers: never equivalent, so an alternate mix is not
      merged into a plain release
    """
    v1 = classify_version(version1)
    v2 = classify_version(version2)

    if v1.is_none and v2.is_none:
        return True
    if v1.is_none or v2.is_none:
        return False
    return version1 == version2 or v1.shares_markers(v2)
