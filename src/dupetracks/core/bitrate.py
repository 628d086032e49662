"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/bitrate.py
Bitrate distribution analysis over a scanned collection.
"""

import logging
from typing import List
from dupetracks.core.models import AudioFile, BitrateCategory, BitrateStats

logger = logging.getLogger(__name__)


class BitrateAnalyzer:
    """Buckets files by bitrate and computes summary statistics."""

    @staticmethod
    def analyze(files: List[AudioFile]) -> BitrateStats:
        """
        Files without a known bitrate count towards file_count only.
        Min and max are 0 when no file has a bitrate.
        """
        logger.info(f"Starting bitrate analysis of {len(files)} files")

        bitrates = [f.bitrate for f in files if f.bitrate is not None]
        distribution = {}
        for bitrate in bitrates:
            category = BitrateCategory.from_bitrate(bitrate)
            distribution[category] = distribution.get(category, 0) + 1
            logger.debug(f"{bitrate} kbps → {category.display_name}")

        stats = BitrateStats(
            file_count=len(files),
            category_distribution=distribution,
            average_bitrate=sum(bitrates) / len(bitrates) if bitrates else 0.0,
            min_bitrate=min(bitrates) if bitrates else 0,
            max_bitrate=max(bitrates) if bitrates else 0,
        )

        logger.info(f"Bitrate analysis done: {len(bitrates)}/{len(files)} files with a known bitrate")
        return stats
