"""
Shared fixtures for duplicate music finder tests.
Builds AudioFile descriptors in memory and fakes mutagen for scanner-level tests,
so no real audio files are needed.
"""
import pytest
from pathlib import Path
from types import SimpleNamespace
from typing import Dict, Optional
from unittest import mock
import sys

# Add src/ to sys.path so 'dupetracks' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from dupetracks.core.models import AudioFile


def make_file(name: str, bitrate: Optional[int] = None, size: int = 1_000_000,
              directory: str = "/music") -> AudioFile:
    """Descriptor for a file that never touches the disk."""
    return AudioFile(path=f"{directory}/{name}", size_bytes=size, bitrate=bitrate)


class FakeAudio:
    """Minimal stand-in for a mutagen EasyID3-style file object."""

    def __init__(self, length: Optional[float], tags: Optional[Dict[str, list]] = None):
        self.info = SimpleNamespace(length=length)
        self._tags = tags or {}

    def get(self, key, default=None):
        return self._tags.get(key, default)


@pytest.fixture
def audio_factory():
    """Factory for in-memory AudioFile descriptors."""
    return make_file


@pytest.fixture
def fake_mutagen():
    """
    Patches mutagen.File as used by the scanner.

    Every file is reported as 1 second long, so the derived bitrate is
    size * 8 / 1000 kbps (40_000 bytes → 320 kbps). Register per-file
    overrides in the returned dict:
        durations["name.mp3"] = 2.0      # other duration
        durations["name.mp3"] = None     # unrecognised format
        durations["name.mp3"] = OSError  # raise while reading
    """
    durations: Dict[str, object] = {}

    def fake_file(path, easy=False):
        name = Path(path).name
        duration = durations.get(name, 1.0)
        if isinstance(duration, type) and issubclass(duration, Exception):
            raise duration(f"cannot read {name}")
        if duration is None:
            return None
        return FakeAudio(duration, {"title": [Path(path).stem]})

    with mock.patch("dupetracks.core.scanner.MutagenFile", side_effect=fake_file):
        yield durations


@pytest.fixture
def music_library(tmp_path) -> Dict[str, Path]:
    """
    Small library on disk (sizes chosen for the 1-second fake duration):
    - the same track as 320 kbps MP3 and as 128 kbps MP3 in different folders
    - a radio edit and a club mix of another track (distinct releases)
    - one unique track
    - a text file that the extension filter must skip
    """
    files = {}
    library = tmp_path / "library"
    (library / "albums").mkdir(parents=True)
    (library / "singles").mkdir()

    files["hq"] = library / "albums" / "01. DJ Snake - Title Track.mp3"
    files["hq"].write_bytes(b"A" * 40_000)  # 320 kbps
    files["lq"] = library / "singles" / "DJ Snake - Title Track.mp3"
    files["lq"].write_bytes(b"B" * 16_000)  # 128 kbps

    files["radio"] = library / "singles" / "Artist - Track (Radio Edit).mp3"
    files["radio"].write_bytes(b"C" * 32_000)
    files["club"] = library / "singles" / "Artist - Track (Club Mix).mp3"
    files["club"].write_bytes(b"D" * 32_000)

    files["unique"] = library / "albums" / "Someone - Unrelated Song.mp3"
    files["unique"].write_bytes(b"E" * 24_000)

    files["notes"] = library / "notes.txt"
    files["notes"].write_text("not audio")

    files["root"] = library
    return files
