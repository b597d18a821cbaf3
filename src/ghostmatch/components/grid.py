from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

Token = Optional[str]
Position = Tuple[int, int]
Snapshot = Tuple[Tuple[Token, ...], ...]

EMPTY: Token = None


@dataclass(slots=True)
class Grid:
    """Row-major matrix of tokens stored on the board entity.

    ``(0, 0)`` is the top-left cell and gravity pulls toward larger row
    indices. Cells hold a token identifier or ``EMPTY`` while a cascade is in
    progress. Out-of-range coordinates raise ``IndexError``.
    """

    rows: int
    cols: int
    cells: List[List[Token]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.cells:
            self.cells = [[EMPTY] * self.cols for _ in range(self.rows)]
        elif len(self.cells) != self.rows or any(len(row) != self.cols for row in self.cells):
            raise ValueError(f"cells do not form a {self.rows}x{self.cols} matrix")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[Token]]) -> "Grid":
        if not rows:
            raise ValueError("at least one row is required")
        return cls(rows=len(rows), cols=len(rows[0]), cells=[list(row) for row in rows])

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def _require(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise IndexError(f"({row}, {col}) is outside the {self.rows}x{self.cols} grid")

    def get(self, row: int, col: int) -> Token:
        self._require(row, col)
        return self.cells[row][col]

    def set(self, row: int, col: int, token: Token) -> None:
        self._require(row, col)
        self.cells[row][col] = token

    @staticmethod
    def is_adjacent(a: Position, b: Position) -> bool:
        ar, ac = a
        br, bc = b
        return abs(ar - br) + abs(ac - bc) == 1

    def swap(self, a: Position, b: Position) -> None:
        self._require(*a)
        self._require(*b)
        (ar, ac), (br, bc) = a, b
        self.cells[ar][ac], self.cells[br][bc] = self.cells[br][bc], self.cells[ar][ac]

    def positions(self) -> Iterator[Position]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def tokens(self) -> List[Token]:
        """Flat row-major list of cell values."""
        return [token for row in self.cells for token in row]

    def fill(self, values: Iterable[Token]) -> None:
        """Write ``values`` back in row-major order."""
        values = list(values)
        if len(values) != self.rows * self.cols:
            raise ValueError(f"expected {self.rows * self.cols} values, got {len(values)}")
        for index, token in enumerate(values):
            self.cells[index // self.cols][index % self.cols] = token

    def empty_positions(self) -> List[Position]:
        return [pos for pos in self.positions() if self.cells[pos[0]][pos[1]] is EMPTY]

    def copy(self) -> "Grid":
        return Grid(rows=self.rows, cols=self.cols, cells=[list(row) for row in self.cells])

    def snapshot(self) -> Snapshot:
        return tuple(tuple(row) for row in self.cells)

    def load(self, snapshot: Sequence[Sequence[Token]]) -> None:
        """Replace the contents in place with a same-sized snapshot."""
        replacement = Grid.from_rows(snapshot)
        if (replacement.rows, replacement.cols) != (self.rows, self.cols):
            raise ValueError("snapshot dimensions do not match the grid")
        self.cells = replacement.cells
