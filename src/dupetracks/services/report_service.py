"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
CSV reports for duplicate groups, duplicate matches and bitrate distribution.
"""
import csv
import logging
from pathlib import Path
from typing import List

from dupetracks.core.models import BitrateCategory, BitrateStats, DuplicateGroup, DuplicateMatch
from dupetracks.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

GROUP_REPORT_HEADER = [
    "Original File",
    "Original Size (bytes)",
    "Original Bitrate",
    "Duplicate Files",
    "Duplicate Sizes",
    "Duplicate Bitrates",
]

MATCH_REPORT_HEADER = [
    "Higher Quality File",
    "Lower Quality File",
    "Match Reason",
    "Quality Difference",
]

BITRATE_REPORT_HEADER = ["Category", "File Count", "Percentage"]


class ReportService:

    @staticmethod
    def write_group_report(groups: List[DuplicateGroup], output_path: str) -> Path:
        """One row per group: keeper details plus comma-joined duplicate details."""
        path = Path(output_path)
        try:
            with path.open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(GROUP_REPORT_HEADER)
                for group in groups:
                    writer.writerow([
                        group.original.file_name,
                        str(group.original.size_bytes),
                        ConvertUtils.bitrate_to_human(group.original.bitrate),
                        ", ".join(d.file_name for d in group.duplicates),
                        ", ".join(str(d.size_bytes) for d in group.duplicates),
                        ", ".join(ConvertUtils.bitrate_to_human(d.bitrate) for d in group.duplicates),
                    ])
        except OSError as e:
            raise RuntimeError(f"Failed to write report {path}: {e}") from e

        logger.info(f"Duplicate report generated: {path}")
        return path

    @staticmethod
    def write_match_report(matches: List[DuplicateMatch], output_path: str) -> Path:
        """One row per match, ordered by the higher-quality path."""
        path = Path(output_path)
        ordered = sorted(matches, key=lambda m: (m.higher_quality.path, m.lower_quality.path))
        try:
            with path.open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(MATCH_REPORT_HEADER)
                for match in ordered:
                    writer.writerow([
                        match.higher_quality.path,
                        match.lower_quality.path,
                        match.match_reason,
                        match.quality_difference,
                    ])
        except OSError as e:
            raise RuntimeError(f"Failed to write report {path}: {e}") from e

        logger.info(f"Match report generated: {path}")
        return path

    @staticmethod
    def write_bitrate_report(stats: BitrateStats, output_path: str) -> Path:
        """Distribution rows followed by a summary block."""
        path = Path(output_path)
        try:
            with path.open("w", newline="", encoding="utf-8") as f:
                writer = csv.writer(f)
                writer.writerow(BITRATE_REPORT_HEADER)
                for category in BitrateCategory:
                    count = stats.category_distribution.get(category, 0)
                    if count:
                        writer.writerow([category.display_name, str(count), f"{stats.percentage(category):.1f}%"])

                writer.writerow(["", "", ""])
                writer.writerow(["Summary", "", ""])
                writer.writerow(["Total Files", str(stats.file_count), ""])
                writer.writerow(["Average Bitrate", f"{stats.average_bitrate:.1f} kbps", ""])
                writer.writerow(["Min Bitrate", f"{stats.min_bitrate} kbps", ""])
                writer.writerow(["Max Bitrate", f"{stats.max_bitrate} kbps", ""])
        except OSError as e:
            raise RuntimeError(f"Failed to write report {path}: {e}") from e

        logger.info(f"Bitrate report generated: {path}")
        return path
