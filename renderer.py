"""
PDF worksheet renderer for Tents puzzles using fpdf2.
"""
from typing import Optional, Tuple
from fpdf import FPDF
import math

from grid import Cell, CellGrid, Puzzle, copy_grid, empty_grid
from solver import solve


class PuzzleRenderer:
    """Renders a puzzle (and optionally its solution) to a printable PDF."""

    CELL_SIZE = 14  # Max cell size in mm; shrunk to fit large grids
    MARGIN = 25     # Printer safety margin in mm
    COUNT_GUTTER = 10  # Space for the hint numbers left of and above the grid

    PAGE_W, PAGE_H = 216, 279  # Letter portrait, mm

    BACKGROUND = (235, 240, 225)
    GRID_LINE = (150, 160, 140)
    GRASS = (200, 225, 170)
    TRUNK = (120, 80, 45)
    CANOPY = (60, 130, 60)
    TENT_FILL = (230, 120, 60)
    TENT_EDGE = (150, 70, 30)
    TEXT = (40, 40, 40)

    def __init__(self, puzzle: Puzzle):
        self.puzzle = puzzle
        self.pdf = FPDF(orientation='P', unit='mm', format='letter')
        self.pdf.set_auto_page_break(auto=False)

    def _draw_rounded_rect(self, x: float, y: float, w: float, h: float,
                           r: float, fill: bool = True, stroke: bool = True):
        """Draw a rectangle with rounded corners using arc segments."""
        r = min(r, w / 2, h / 2)

        points = []
        steps = 6  # Segments per corner
        corners = [
            (x + r, y + r, math.pi),              # top-left
            (x + w - r, y + r, 3 * math.pi / 2),  # top-right
            (x + w - r, y + h - r, 0),            # bottom-right
            (x + r, y + h - r, math.pi / 2),      # bottom-left
        ]
        for cx, cy, start in corners:
            for i in range(steps + 1):
                angle = start + (math.pi / 2) * (i / steps)
                points.append((cx + r * math.cos(angle), cy + r * math.sin(angle)))

        style = ''
        if fill and stroke:
            style = 'DF'
        elif fill:
            style = 'F'
        elif stroke:
            style = 'D'

        self.pdf.polygon(points, style=style)

    def cell_size(self) -> float:
        """Largest cell size (mm) that fits the grid on the page."""
        usable_w = self.PAGE_W - 2 * self.MARGIN - self.COUNT_GUTTER
        usable_h = self.PAGE_H - 2 * self.MARGIN - self.COUNT_GUTTER - 20
        return min(self.CELL_SIZE, usable_w / self.puzzle.width, usable_h / self.puzzle.height)

    def draw_tree(self, x: float, y: float, size: float):
        """Trunk plus round canopy, centered in the cell at (x, y)."""
        self.pdf.set_fill_color(*self.TRUNK)
        self.pdf.rect(x + size * 0.44, y + size * 0.55, size * 0.12, size * 0.3, style='F')

        self.pdf.set_fill_color(*self.CANOPY)
        r = size * 0.28
        self.pdf.ellipse(x + size / 2 - r, y + size * 0.42 - r, r * 2, r * 2, style='F')

    def draw_tent(self, x: float, y: float, size: float):
        """Triangle tent with a door line."""
        pad = size * 0.18
        apex = (x + size / 2, y + pad)
        left = (x + pad, y + size - pad)
        right = (x + size - pad, y + size - pad)

        self.pdf.set_fill_color(*self.TENT_FILL)
        self.pdf.set_draw_color(*self.TENT_EDGE)
        self.pdf.set_line_width(0.4)
        self.pdf.polygon([apex, right, left], style='DF')
        self.pdf.line(apex[0], apex[1], apex[0], y + size - pad)

    def draw_counts(self, x_start: float, y_start: float, size: float):
        """Hint numbers: columns above the grid, rows to its left."""
        font_size = max(7, int(size * 0.9))
        self.pdf.set_font('Helvetica', 'B', font_size)
        self.pdf.set_text_color(*self.TEXT)

        for x, count in enumerate(self.puzzle.col_counts):
            self.pdf.set_xy(x_start + x * size, y_start - self.COUNT_GUTTER)
            self.pdf.cell(size, self.COUNT_GUTTER, str(count), align='C')

        for y, count in enumerate(self.puzzle.row_counts):
            self.pdf.set_xy(x_start - self.COUNT_GUTTER, y_start + y * size)
            self.pdf.cell(self.COUNT_GUTTER, size, str(count), align='C')

    def draw_grid(self, x_start: float, y_start: float, grid: Optional[CellGrid] = None,
                  size: Optional[float] = None):
        """Draw the board with trees, and the tents/grass in grid if given."""
        if size is None:
            size = self.cell_size()
        width = self.puzzle.width * size
        height = self.puzzle.height * size

        padding = 2
        self.pdf.set_fill_color(*self.BACKGROUND)
        self._draw_rounded_rect(x_start - padding, y_start - padding,
                                width + padding * 2, height + padding * 2,
                                3, fill=True, stroke=False)

        self.pdf.set_draw_color(*self.GRID_LINE)
        self.pdf.set_line_width(0.3)
        for y in range(self.puzzle.height):
            for x in range(self.puzzle.width):
                cx = x_start + x * size
                cy = y_start + y * size
                state = grid[y][x] if grid is not None else Cell.EMPTY

                if state == Cell.GRASS and not self.puzzle.is_tree(x, y):
                    self.pdf.set_fill_color(*self.GRASS)
                    self.pdf.rect(cx, cy, size, size, style='F')
                self.pdf.set_draw_color(*self.GRID_LINE)
                self.pdf.set_line_width(0.3)
                self.pdf.rect(cx, cy, size, size, style='D')

                if self.puzzle.is_tree(x, y):
                    self.draw_tree(cx, cy, size)
                elif state == Cell.TENT:
                    self.draw_tent(cx, cy, size)

        self.draw_counts(x_start, y_start, size)

    def _draw_page(self, title: str, grid: Optional[CellGrid]) -> Tuple[float, float]:
        self.pdf.add_page()

        self.pdf.set_font('Helvetica', 'B', 20)
        self.pdf.set_text_color(*self.TEXT)
        self.pdf.set_xy(0, 12)
        self.pdf.cell(self.PAGE_W, 10, title, align='C')

        size = self.cell_size()
        grid_w = self.puzzle.width * size
        x = max(self.MARGIN + self.COUNT_GUTTER, (self.PAGE_W - grid_w) / 2)
        y = self.MARGIN + self.COUNT_GUTTER + 10
        self.draw_grid(x, y, grid, size)
        return x, y

    def render(self, output_path: str, grid: Optional[CellGrid] = None,
               include_solution: bool = True) -> bool:
        """
        Render the puzzle to PDF. grid is the board to show on the first
        page (default: empty). Returns False if a solution page was asked
        for but the puzzle has no solution.
        """
        self.pdf = FPDF(orientation='P', unit='mm', format='letter')
        self.pdf.set_auto_page_break(auto=False)

        title = self.puzzle.name or f"Tents {self.puzzle.width}x{self.puzzle.height}"
        self._draw_page(title.upper(), grid)

        solved = True
        if include_solution:
            start = copy_grid(grid) if grid is not None else empty_grid(self.puzzle)
            solution = solve(self.puzzle, start)
            if solution is None:
                solved = False
            else:
                self._draw_page(f"{title.upper()} SOLUTION", solution)

        self.pdf.output(output_path)
        print(f"Saved puzzle to: {output_path}")
        return solved
