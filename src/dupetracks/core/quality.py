"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/quality.py
Decides which of two copies of the same recording is the better one.
"""

from typing import Tuple
from dupetracks.core.models import AudioFile, MatchConfig
from dupetracks.utils.convert_utils import ConvertUtils


def is_lossless(file: AudioFile) -> bool:
    return file.file_name.lower().endswith(MatchConfig.LOSSLESS_EXTENSIONS)


def compare_quality(file1: AudioFile, file2: AudioFile) -> Tuple[bool, str]:
    """
    Compare two files known to hold the same recording.

    Decision order:
    1. Both bitrates known and different: a lossless container wins over a
       lossy one regardless of the numbers, otherwise the higher bitrate wins.
    2. Sizes differ: the larger file wins.
    3. Nothing differs: the first argument is kept.

    Returns:
        (file1_is_better, explanation)
    """
    b1, b2 = file1.bitrate, file2.bitrate
    if b1 is not None and b2 is not None and b1 != b2:
        lossless1, lossless2 = is_lossless(file1), is_lossless(file2)
        if lossless1 and not lossless2:
            file1_better = True
        elif lossless2 and not lossless1:
            file1_better = False
        else:
            file1_better = b1 > b2
        return file1_better, f"Bitrate difference: {b1} vs {b2} kbps"

    if file1.size_bytes != file2.size_bytes:
        size1_mb = ConvertUtils.bytes_to_megabytes(file1.size_bytes)
        size2_mb = ConvertUtils.bytes_to_megabytes(file2.size_bytes)
        return (
            file1.size_bytes > file2.size_bytes,
            f"Size difference: {size1_mb:.2f} MB vs {size2_mb:.2f} MB",
        )

    return True, "Files are identical in size and bitrate"
