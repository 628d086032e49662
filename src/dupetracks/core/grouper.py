"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Folds pairwise duplicate matches into groups with a single keeper.
"""

from typing import List, Dict, Set, Callable, Tuple
from collections import defaultdict
from dupetracks.core.interfaces import MatchGrouper
from dupetracks.core.models import AudioFile, DuplicateGroup, DuplicateMatch
from dupetracks.core.quality import compare_quality


class MatchGrouperImpl(MatchGrouper):
    """
    Turns the match graph (files are nodes, matches are edges) into keeper groups.

    Matching is not transitive: "Radio Edit" matches "Radio Mix" and
    "Radio Mix" matches "Club Mix", while "Radio Edit" and "Club Mix" are
    distinct releases. A file therefore only becomes a duplicate of a keeper
    it matched directly. Within each connected component the best file that
    still has an unassigned neighbour becomes a keeper, takes its direct
    matches as duplicates, and the rest of the component is grouped again.
    Files whose remaining neighbours are all taken stay where they are.
    """

    def __init__(self, comparator: Callable[[AudioFile, AudioFile], Tuple[bool, str]] = None):
        self.comparator = comparator or compare_quality

    def group(self, matches: List[DuplicateMatch]) -> List[DuplicateGroup]:
        """
        Returns groups sorted by keeper path, duplicates sorted by path.
        Output does not depend on the order of matches.
        """
        files: Dict[str, AudioFile] = {}
        neighbours: Dict[str, Set[str]] = defaultdict(set)
        for match in matches:
            higher, lower = match.higher_quality, match.lower_quality
            files[higher.path] = higher
            files[lower.path] = lower
            neighbours[higher.path].add(lower.path)
            neighbours[lower.path].add(higher.path)

        groups = []
        for component in self._components(neighbours):
            groups.extend(self._split_component(component, files, neighbours))

        groups.sort(key=lambda g: g.original.path)
        return groups

    @staticmethod
    def _components(neighbours: Dict[str, Set[str]]) -> List[List[str]]:
        """Connected components of the match graph, each as a sorted path list."""
        seen: Set[str] = set()
        components = []
        for start in sorted(neighbours):
            if start in seen:
                continue
            seen.add(start)
            stack, component = [start], []
            while stack:
                path = stack.pop()
                component.append(path)
                for other in neighbours[path]:
                    if other not in seen:
                        seen.add(other)
                        stack.append(other)
            components.append(sorted(component))
        return components

    def _split_component(self, component: List[str], files: Dict[str, AudioFile],
                         neighbours: Dict[str, Set[str]]) -> List[DuplicateGroup]:
        remaining = set(component)
        groups = []
        while True:
            candidates = [files[p] for p in component if p in remaining and neighbours[p] & remaining]
            if not candidates:
                return groups

            keeper = self.pick_keeper(candidates)
            duplicate_paths = sorted(neighbours[keeper.path] & remaining)
            groups.append(DuplicateGroup(
                original=keeper,
                duplicates=[files[p] for p in duplicate_paths],
            ))
            remaining.difference_update(duplicate_paths)
            remaining.discard(keeper.path)

    def pick_keeper(self, members: List[AudioFile]) -> AudioFile:
        """Fold the comparator over members in the given order; ties keep the earlier file."""
        keeper = members[0]
        for candidate in members[1:]:
            keeper_better, _ = self.comparator(keeper, candidate)
            if not keeper_better:
                keeper = candidate
        return keeper
