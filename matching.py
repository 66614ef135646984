"""
Bipartite matching between trees and placed tents.
"""
from typing import Dict, Iterable, List, Optional, Set

from grid import Coord, Puzzle


class TreeTentMatcher:
    """
    Augmenting-path (Kuhn) matching of trees to orthogonally adjacent tents.
    Each tree needs its own tent; a tent may serve at most one tree.
    """

    def __init__(self, puzzle: Puzzle, tents: Iterable[Coord]):
        self.puzzle = puzzle
        self.trees: List[Coord] = list(puzzle.tree_list)
        tent_set = set(tents)

        # tree index -> adjacent placed tents
        self.adj: List[List[Coord]] = [
            [n for n in puzzle.orthogonal_neighbors(tx, ty) if n in tent_set]
            for tx, ty in self.trees
        ]
        self.match_tent: Dict[Coord, int] = {}

    def _augment(self, tree_idx: int, seen: Set[Coord]) -> bool:
        """Try to find an augmenting path starting at tree_idx."""
        for tent in self.adj[tree_idx]:
            if tent in seen:
                continue
            seen.add(tent)

            current = self.match_tent.get(tent)
            if current is None or self._augment(current, seen):
                self.match_tent[tent] = tree_idx
                return True
        return False

    def is_perfect(self) -> bool:
        """
        Return True if every tree can be matched to a distinct tent.
        Rebuilds the matching from scratch on each call.
        """
        self.match_tent = {}

        # Quick fail: a tree with no adjacent tent can never be matched
        if any(not options for options in self.adj):
            return False

        for i in range(len(self.trees)):
            if not self._augment(i, set()):
                return False
        return True

    def matching(self) -> Optional[Dict[Coord, Coord]]:
        """Return one tree -> tent pairing, or None if no perfect matching exists."""
        if not self.is_perfect():
            return None
        return {self.trees[i]: tent for tent, i in self.match_tent.items()}


def has_perfect_matching(puzzle: Puzzle, tents: Iterable[Coord]) -> bool:
    """Check whether all trees pair 1-1 with some of the given tents."""
    return TreeTentMatcher(puzzle, tents).is_perfect()
