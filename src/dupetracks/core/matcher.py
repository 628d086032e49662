"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/matcher.py
Pairwise duplicate matcher: exact artist/title match plus compatible versions.
"""

from typing import Optional, Callable, Tuple
from dupetracks.core.interfaces import PairMatcher
from dupetracks.core.models import AudioFile, DuplicateMatch, ParsedTitle
from dupetracks.core.normalizer import normalize_title
from dupetracks.core.versions import versions_equivalent
from dupetracks.core.quality import compare_quality


class DuplicateMatcher(PairMatcher):
    """
    Decides whether two files hold the same recording.
    Holds no mutable state, so one instance can be shared by all workers.
    """

    def __init__(self, comparator: Callable[[AudioFile, AudioFile], Tuple[bool, str]] = None):
        self.comparator = comparator or compare_quality

    def match_pair(self, file1: AudioFile, file2: AudioFile) -> Optional[DuplicateMatch]:
        """
        Returns a DuplicateMatch with the better file first, or None.
        """
        # Canonical order: (a, b) and (b, a) get the same verdict and winner
        file1, file2 = sorted((file1, file2), key=lambda f: (f.path, f.file_name))

        parsed1 = normalize_title(file1.file_name)
        parsed2 = normalize_title(file2.file_name)

        if parsed1.artist != parsed2.artist or parsed1.title != parsed2.title:
            return None

        if not versions_equivalent(parsed1.version, parsed2.version):
            return None

        file1_better, quality_difference = self.comparator(file1, file2)
        higher, lower = (file1, file2) if file1_better else (file2, file1)

        return DuplicateMatch(
            higher_quality=higher,
            lower_quality=lower,
            match_reason=self.format_reason(parsed1),
            quality_difference=quality_difference,
        )

    @staticmethod
    def format_reason(parsed: ParsedTitle) -> str:
        version_info = f" ({parsed.version})" if parsed.version else ""
        return f"Exact title match: '{parsed.artist} - {parsed.title}{version_info}'"
