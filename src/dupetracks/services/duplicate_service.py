from typing import List
from dupetracks.core.models import DuplicateGroup


class DuplicateService:
    @staticmethod
    def files_to_relocate(groups: List[DuplicateGroup]) -> List[str]:
        """
        Paths of every non-keeper file across all groups.
        The keeper (group.original) is never included.
        """
        files_to_move = []
        for group in groups:
            for file in group.duplicates:
                files_to_move.append(file.path)
        return files_to_move

    @staticmethod
    def calculate_space_savings(groups: List[DuplicateGroup], file_paths: List[str]) -> int:
        """Total bytes freed by relocating file_paths."""
        total_bytes = 0
        selected = set(file_paths)
        for group in groups:
            for file in group.duplicates:
                if file.path in selected:
                    total_bytes += file.size_bytes
        return total_bytes
