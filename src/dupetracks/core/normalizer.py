"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/normalizer.py
Parses "Artist - Title (Version)" style filenames into a canonical triple.
"""

import re
from functools import lru_cache
from typing import Optional, Tuple
from dupetracks.core.models import ParsedTitle
from dupetracks.core.versions import classify_version

# Pre-compiled regex patterns
_PATTERN_TRACK_NUMBER = re.compile(r'^\d+\.?\s*')
_PATTERN_BRACKETS = re.compile(r'[\[\]]')

ARTIST_TITLE_SEPARATOR = " - "


def normalize_artist(artist: str) -> str:
    """
    Normalize an artist field so that credit order and spelling of
    featuring credits do not matter.

    Examples:
        "A, B"            → "a, b"
        "B, A"            → "a, b"
        "A (UK), B"       → "a, b"
        "A feat. B"       → "a featuring b"
    """
    normalized = (
        artist.lower()
        .replace("feat.", "featuring")
        .replace("ft.", "featuring")
        .replace(" x ", " featuring ")
    )

    names = [name.strip().split("(")[0].strip() for name in normalized.split(",")]
    names.sort()
    return ", ".join(names)


def extract_version(text: str) -> Tuple[str, Optional[str]]:
    """
    Split a trailing parenthetical off a title.

    The last '(' and the first ')' after it delimit the annotation.
    Only an annotation carrying version information is split off:
    "Track (Radio Edit)" gives ("Track", "radio edit"), while
    "Symphony (Pt. 2)" stays whole as ("Symphony (Pt. 2)", None).
    Returns (title, version); version is lower-cased or None.
    """
    start = text.rfind("(")
    if start == -1:
        return text.strip(), None

    end = text.find(")", start + 1)
    if end == -1 or not start < end:
        return text.strip(), None

    version = text[start + 1:end].strip().lower()
    if classify_version(version).is_none:
        return text.strip(), None
    return text[:start].strip(), version


@lru_cache(maxsize=8192)
def normalize_title(file_name: str) -> ParsedTitle:
    """
    Parse a filename into a ParsedTitle.

    Normalization rules:
    - Drop the extension (text after the last dot)
    - Remove square brackets, turn underscores into spaces
    - Drop a leading track number: "03. ", "12 "
    - Split artist and title on " - "; without a separator the whole
      cleaned name is used as both artist and title
    - Artist credits are lower-cased, sorted and comma-joined
    - A trailing parenthetical with version markers on the title becomes the version

    Examples:
        "01. DJ Snake - Title Track.mp3" → ("dj snake", "title track", None)
        "Artist - Track (Radio Edit).flac" → ("artist", "track", "radio edit")
        "Just A Name.mp3" → ("just a name", "just a name", None)
    """
    dot = file_name.rfind(".")
    without_ext = file_name[:dot] if dot != -1 else file_name

    clean_name = _PATTERN_BRACKETS.sub("", without_ext).replace("_", " ").strip()
    without_number = _PATTERN_TRACK_NUMBER.sub("", clean_name, count=1)

    parts = without_number.split(ARTIST_TITLE_SEPARATOR)
    if len(parts) < 2:
        whole = without_number.strip().lower()
        return ParsedTitle(artist=whole, title=whole, version=None)

    artist = normalize_artist(parts[0].strip())
    title, version = extract_version(ARTIST_TITLE_SEPARATOR.join(parts[1:]))

    return ParsedTitle(artist=artist, title=title.lower(), version=version)
