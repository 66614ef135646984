#!/usr/bin/env python3
"""
Tents Puzzle Solver

Solves, checks and generates Tents ("Tents and Trees") puzzles.
Puzzle files are either backend JSON or a text board (see puzzle_parser).

Usage:
    python main.py solve board.txt          # Complete the board
    python main.py check board.txt          # Is this board solved?
    python main.py hint board.txt           # Suggest one move
    python main.py generate --size 8x8      # Make a new puzzle
    python main.py render board.txt -o out.pdf
"""

import argparse
import json
import logging
import random
import re
import sys

from checker import check_solved, compute_errors
from generator import GenerationStats, generate_puzzle
from grid import Cell, PuzzleError, copy_grid, tent_positions
from hints import NoSolutionError, hint
from matching import TreeTentMatcher
from puzzle_parser import format_board, load_puzzle_file, puzzle_to_json
from renderer import PuzzleRenderer
from solver import TentSolver


def parse_size(text: str):
    match = re.fullmatch(r"\s*(\d+)\s*x\s*(\d+)\s*", text)
    if not match:
        raise argparse.ArgumentTypeError(f"size must look like 8x8, not {text!r}")
    width, height = int(match.group(1)), int(match.group(2))
    if width < 1 or height < 1:
        raise argparse.ArgumentTypeError("size must be positive")
    return width, height


def cmd_solve(args) -> int:
    puzzle, grid = load_puzzle_file(args.file)
    solver = TentSolver(puzzle, max_solutions=2 if args.check_unique else 1,
                        timeout=args.timeout)
    result = solver.run(grid)

    if result.solution is None:
        print(result.message if result.status != "no-solution"
              else "No solution found from current state.")
        return 1

    print(format_board(puzzle, result.solution), end="")
    print(f"\n{result.message} ({result.duration_ms} ms, {result.steps} steps)")
    return 0


def cmd_check(args) -> int:
    puzzle, grid = load_puzzle_file(args.file)

    if check_solved(puzzle, grid):
        print("✓ Solved!")
        pairs = TreeTentMatcher(puzzle, tent_positions(puzzle, grid)).matching()
        for tree, tent in sorted(pairs.items(), key=lambda p: (p[0][1], p[0][0])):
            print(f"  tree {tree} -> tent {tent}")
        return 0

    print("✗ Not solved")
    errors = compute_errors(puzzle, grid)
    if errors.touching_tents:
        print(f"  Touching tents: {sorted(errors.touching_tents)}")
    if errors.orphan_tents:
        print(f"  Tents without a tree: {sorted(errors.orphan_tents)}")
    if errors.bad_rows:
        print(f"  Rows off count: {sorted(errors.bad_rows)}")
    if errors.bad_cols:
        print(f"  Columns off count: {sorted(errors.bad_cols)}")
    return 1


def cmd_hint(args) -> int:
    puzzle, grid = load_puzzle_file(args.file)
    rng = random.Random(args.seed) if args.seed is not None else None

    try:
        move = hint(puzzle, grid, rng)
    except NoSolutionError as e:
        print(e)
        return 1

    if move is None:
        print("No hint available (you're already aligned with a solution).")
    else:
        print(move)
    return 0


def cmd_generate(args) -> int:
    width, height = args.size
    rng = random.Random(args.seed)
    stats = GenerationStats()

    result = generate_puzzle(width, height, tree_count=args.trees, rng=rng,
                             unique=args.unique, stats=stats)
    if result is None:
        print(f"✗ No puzzle found after {stats.attempts} attempts")
        print(f"  (Short layouts: {stats.short_layouts}, Multiple: {stats.multiple_solutions})")
        return 1

    puzzle, solution = result
    if args.unique:
        print(f"✓ Found unique puzzle after {stats.attempts} attempts!")

    if args.output:
        with open(args.output, 'w') as f:
            json.dump(puzzle_to_json(puzzle), f, indent=2)
        print(f"Saved puzzle to: {args.output}")

    blank = copy_grid(solution)
    for x, y in puzzle.cells():
        blank[y][x] = Cell.EMPTY
    print(format_board(puzzle, blank), end="")
    if args.show_solution:
        print()
        print(format_board(puzzle, solution), end="")
    return 0


def cmd_render(args) -> int:
    puzzle, grid = load_puzzle_file(args.file)
    renderer = PuzzleRenderer(puzzle)
    if not renderer.render(args.output, grid=grid, include_solution=not args.no_solution):
        print("No solution found from current state; solution page skipped.")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Tents Puzzle Solver",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py solve board.txt               # Complete a board
  python main.py solve puzzle.json --unique    # Also report multiple solutions
  python main.py check board.txt               # Check a finished board
  python main.py hint board.txt                # Suggest one move
  python main.py generate --size 8x8 --unique  # New puzzle with one solution
  python main.py render board.txt -o out.pdf   # Printable worksheet
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('solve', help='Complete a board into a full solution')
    p.add_argument('file')
    p.add_argument('--timeout', type=float, default=None,
                   help='Give up after this many seconds (default: $TENTS_SOLVER_TIMEOUT)')
    p.add_argument('--unique', dest='check_unique', action='store_true',
                   help='Keep searching to detect a second solution')
    p.set_defaults(func=cmd_solve)

    p = sub.add_parser('check', help='Check whether a board is solved')
    p.add_argument('file')
    p.set_defaults(func=cmd_check)

    p = sub.add_parser('hint', help='Suggest a single move')
    p.add_argument('file')
    p.add_argument('--seed', type=int, default=None, help='Pick a random move with this seed')
    p.set_defaults(func=cmd_hint)

    p = sub.add_parser('generate', help='Generate a new puzzle')
    p.add_argument('--size', type=parse_size, default=(8, 8), help='WIDTHxHEIGHT (default: 8x8)')
    p.add_argument('--trees', type=int, default=None, help='Number of trees')
    p.add_argument('--unique', action='store_true', help='Require a unique solution')
    p.add_argument('--seed', type=int, default=None, help='Random seed')
    p.add_argument('--output', '-o', default=None, help='Save the puzzle as JSON')
    p.add_argument('--show-solution', action='store_true', help='Also print the solution')
    p.set_defaults(func=cmd_generate)

    p = sub.add_parser('render', help='Render a printable PDF')
    p.add_argument('file')
    p.add_argument('--output', '-o', default='puzzle.pdf', help='Output PDF (default: puzzle.pdf)')
    p.add_argument('--no-solution', action='store_true', help='Skip the solution page')
    p.set_defaults(func=cmd_render)

    args = parser.parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    try:
        return args.func(args)
    except (PuzzleError, OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
