from grid import Cell, Puzzle, empty_grid
from renderer import PuzzleRenderer


def test_render_pdf(small_puzzle, tmp_path, capsys):
    out = tmp_path / "small.pdf"
    assert PuzzleRenderer(small_puzzle).render(str(out))
    assert out.read_bytes().startswith(b"%PDF")
    assert f"Saved puzzle to: {out}" in capsys.readouterr().out


def test_render_board_without_solution(small_puzzle, tmp_path):
    grid = empty_grid(small_puzzle)
    grid[0][0] = Cell.TENT
    grid[1][0] = Cell.GRASS
    out = tmp_path / "board.pdf"
    assert PuzzleRenderer(small_puzzle).render(str(out), grid=grid, include_solution=False)
    assert out.read_bytes().startswith(b"%PDF")


def test_render_unsolvable_still_writes(small_puzzle, tmp_path):
    grid = empty_grid(small_puzzle)
    grid[1][1] = Cell.TENT
    out = tmp_path / "stuck.pdf"
    assert not PuzzleRenderer(small_puzzle).render(str(out), grid=grid)
    assert out.exists()


def test_cell_size_shrinks_for_large_grids(small_puzzle):
    renderer = PuzzleRenderer(small_puzzle)
    assert renderer.cell_size() == PuzzleRenderer.CELL_SIZE

    big = Puzzle(40, 40, frozenset(), [0] * 40, [0] * 40)
    assert PuzzleRenderer(big).cell_size() < PuzzleRenderer.CELL_SIZE
