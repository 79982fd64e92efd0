"""
Board model for the Spaces game.

A board is an N x N grid on which a piece starts on the bottom row and walks
one orthogonal step at a time to the goal row above row 0, while traps are
planted next to (or under) the piece. The move sequence is the source of
truth; the grid is derived from it (see grid_projector.py).

This module is the single source of truth for the data shapes and their
dict wire format, which is shared with the training pipeline:

    {"boardSize": 3,
     "grid": [["empty", "piece", "empty"], ...],
     "sequence": [{"position": {"row": 2, "col": 1}, "type": "piece", "order": 1}, ...]}
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, Tuple

# Board size constraints
MIN_BOARD_SIZE = 2
MAX_BOARD_SIZE = 99

# Virtual row above row 0, reached by the final move
GOAL_ROW = -1


class MoveKind(str, Enum):
    PIECE = 'piece'
    TRAP = 'trap'
    FINAL = 'final'  # goal reached


class CellState(str, Enum):
    EMPTY = 'empty'
    PIECE = 'piece'
    TRAP = 'trap'


@dataclass(frozen=True, order=True)
class Position:
    row: int
    col: int

    def __iter__(self):
        """Allow tuple unpacking: row, col = position"""
        return iter((self.row, self.col))

    def to_dict(self) -> Dict[str, int]:
        return {'row': self.row, 'col': self.col}

    @classmethod
    def from_dict(cls, data: Dict) -> 'Position':
        return cls(int(data['row']), int(data['col']))


@dataclass(frozen=True)
class Move:
    position: Position
    kind: MoveKind
    order: int

    def __post_init__(self):
        if self.kind == MoveKind.FINAL and self.position.row != GOAL_ROW:
            raise ValueError(
                f"Final move must be at row {GOAL_ROW}, got row {self.position.row}"
            )

    @classmethod
    def piece(cls, row: int, col: int, order: int) -> 'Move':
        return cls(Position(row, col), MoveKind.PIECE, order)

    @classmethod
    def trap(cls, row: int, col: int, order: int) -> 'Move':
        return cls(Position(row, col), MoveKind.TRAP, order)

    @classmethod
    def final(cls, col: int, order: int) -> 'Move':
        return cls(Position(GOAL_ROW, col), MoveKind.FINAL, order)

    def to_dict(self) -> Dict:
        return {
            'position': self.position.to_dict(),
            'type': self.kind.value,
            'order': self.order,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Move':
        return cls(
            Position.from_dict(data['position']),
            MoveKind(data['type']),
            int(data['order']),
        )


Sequence = Tuple[Move, ...]
Grid = Tuple[Tuple[CellState, ...], ...]


@dataclass(frozen=True)
class Board:
    size: int
    grid: Grid
    sequence: Sequence

    def to_dict(self) -> Dict:
        return {
            'boardSize': self.size,
            'grid': [[cell.value for cell in row] for row in self.grid],
            'sequence': [move.to_dict() for move in self.sequence],
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'Board':
        """Rebuild a Board from its wire dict. Raises on malformed input."""
        grid = tuple(tuple(CellState(cell) for cell in row) for row in data['grid'])
        sequence = tuple(Move.from_dict(m) for m in data['sequence'])
        return cls(int(data['boardSize']), grid, sequence)


def is_valid_board_size(size) -> bool:
    """Returns whether size is an integer board size within the supported range."""
    if isinstance(size, bool) or not isinstance(size, int):
        return False
    return MIN_BOARD_SIZE <= size <= MAX_BOARD_SIZE


def is_adjacent_orthogonal(a: Position, b: Position) -> bool:
    """Returns whether b is exactly one square up/down/left/right of a."""
    row_diff = abs(b.row - a.row)
    col_diff = abs(b.col - a.col)
    return (row_diff == 1 and col_diff == 0) or (row_diff == 0 and col_diff == 1)


def append_move(sequence: Iterable[Move], position: Position, kind: MoveKind) -> Sequence:
    """Return a new sequence with a move appended, numbered with the next order."""
    sequence = tuple(sequence)
    return sequence + (Move(position, MoveKind(kind), len(sequence) + 1),)
