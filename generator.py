"""
Puzzle generator for Tents.
Works in reverse: plant a valid tent layout first, derive the trees and
counts from it, then optionally verify the result has a unique solution.
"""
import logging
import random
from dataclasses import dataclass
from typing import Dict, Optional, Set, Tuple

from grid import Cell, CellGrid, Coord, Puzzle
from solver import verify_puzzle_uniqueness

logger = logging.getLogger(__name__)


@dataclass
class GenerationStats:
    """Statistics for puzzle generation."""
    attempts: int = 0
    unique_found: int = 0
    short_layouts: int = 0
    multiple_solutions: int = 0


def default_tree_count(width: int, height: int) -> int:
    # Roughly one tent per five cells, as on common puzzle sites
    return max(1, (width * height) // 5)


def plant_layout(
    width: int,
    height: int,
    tree_count: int,
    rng: random.Random
) -> Optional[Dict[Coord, Coord]]:
    """
    Place tree_count non-touching tents, each with its own orthogonal tree.
    Returns a tent -> tree mapping, or None if the random pass fell short.
    """
    board = Puzzle(width, height, frozenset(), [0] * height, [0] * width)
    cells = [(x, y) for y in range(height) for x in range(width)]
    rng.shuffle(cells)

    pairs: Dict[Coord, Coord] = {}
    trees: Set[Coord] = set()

    for cell in cells:
        if len(pairs) == tree_count:
            break
        if cell in trees or cell in pairs:
            continue
        if any(n in pairs for n in board.all_neighbors(*cell)):
            continue

        tree_options = [n for n in board.orthogonal_neighbors(*cell)
                        if n not in trees and n not in pairs]
        if not tree_options:
            continue

        tree = rng.choice(tree_options)
        pairs[cell] = tree
        trees.add(tree)

    if len(pairs) < tree_count:
        return None
    return pairs


def build_puzzle(width: int, height: int, pairs: Dict[Coord, Coord],
                 name: str = "") -> Tuple[Puzzle, CellGrid]:
    """Derive the puzzle and its solution grid from a tent -> tree layout."""
    row_counts = [0] * height
    col_counts = [0] * width
    for x, y in pairs:
        row_counts[y] += 1
        col_counts[x] += 1

    puzzle = Puzzle(
        width=width,
        height=height,
        trees=frozenset(pairs.values()),
        row_counts=row_counts,
        col_counts=col_counts,
        name=name,
    )

    solution = [[Cell.EMPTY] * width for _ in range(height)]
    for x, y in puzzle.cells():
        solution[y][x] = Cell.TENT if (x, y) in pairs else Cell.GRASS
    return puzzle, solution


def generate_puzzle(
    width: int,
    height: int,
    tree_count: Optional[int] = None,
    rng: Optional[random.Random] = None,
    unique: bool = False,
    max_attempts: int = 500,
    stats: Optional[GenerationStats] = None,
    name: str = "",
) -> Optional[Tuple[Puzzle, CellGrid]]:
    """
    Generate a puzzle with a known solution.
    Returns (puzzle, solution) or None if max_attempts ran out.
    """
    if tree_count is None:
        tree_count = default_tree_count(width, height)
    if rng is None:
        rng = random.Random()
    if stats is None:
        stats = GenerationStats()

    for _ in range(max_attempts):
        stats.attempts += 1
        pairs = plant_layout(width, height, tree_count, rng)
        if pairs is None:
            stats.short_layouts += 1
            continue

        puzzle, solution = build_puzzle(width, height, pairs, name)
        if not unique:
            return puzzle, solution

        is_unique, count = verify_puzzle_uniqueness(puzzle)
        logger.debug("Attempt %d: %d solution(s)", stats.attempts, count)
        if is_unique:
            stats.unique_found += 1
            return puzzle, solution
        stats.multiple_solutions += 1

    logger.warning("No puzzle found after %d attempts", stats.attempts)
    return None
