"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/file_service.py
Relocation of lower-quality duplicates: move into a directory or to the system trash.
"""
import shutil
import logging
from pathlib import Path
from send2trash import send2trash

logger = logging.getLogger(__name__)


class FileService:
    """
    File operations used on confirmed duplicates.
    All failures are raised as RuntimeError with the original error chained.
    """

    @staticmethod
    def ensure_directory(directory: str) -> Path:
        """Creates the directory (and parents) if needed."""
        path = Path(directory)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RuntimeError(f"Failed to create directory {path}: {e}") from e
        return path

    @staticmethod
    def unique_destination(dest_dir: Path, file_name: str) -> Path:
        """
        Destination path inside dest_dir that does not exist yet.
        On collision: "<stem>_duplicate_<n><suffix>" with the lowest free n.
        """
        destination = dest_dir / file_name
        if not destination.exists():
            return destination

        stem, suffix = Path(file_name).stem, Path(file_name).suffix
        counter = 1
        while (dest_dir / f"{stem}_duplicate_{counter}{suffix}").exists():
            counter += 1
        return dest_dir / f"{stem}_duplicate_{counter}{suffix}"

    @staticmethod
    def move_to_directory(file_path: str, dest_dir: str) -> Path:
        """Moves a file into dest_dir, never overwriting. Returns the new path."""
        path = Path(file_path)
        if not path.exists():
            raise RuntimeError(f"File not found: {path}")

        target_dir = FileService.ensure_directory(dest_dir)
        destination = FileService.unique_destination(target_dir, path.name)
        try:
            shutil.move(str(path), str(destination))
        except (OSError, shutil.Error) as e:
            raise RuntimeError(f"Failed to move {path.name}: {e}") from e

        logger.debug(f"Moved {path} -> {destination}")
        return destination

    @staticmethod
    def move_to_trash(file_path: str):
        """Moves a file to the system trash."""
        path = Path(file_path).resolve()

        if not path.exists():
            raise RuntimeError(f"File not found: {path}")

        try:
            send2trash(str(path))
        except Exception as e:
            raise RuntimeError(f"Failed to move to trash: {e}") from e
        logger.debug(f"Trashed {path}")
