"""
Move and board validation with user-facing messages.

Two layers:
  - real-time checks used while a board is built step by step
    (validate_interactive_move), which report every problem at once and
    never raise
  - validate_board(), a thin wrapper around playability.is_board_playable().
    It adds no rules of its own; its messages are hints only.
"""

from dataclasses import dataclass, field
from typing import Collection, List, Optional

from board_model import Board, MoveKind, Position, is_adjacent_orthogonal
from playability import is_board_playable

# Marks a message as a warning rather than a hard error
WARNING_PREFIX = '⚠️  '

OUT_OF_BOUNDS_ERROR = 'Position is out of bounds'
PIECE_NOT_ADJACENT_ERROR = 'Piece must move exactly 1 square orthogonally (up/down/left/right)'
PIECE_INTO_TRAP_ERROR = 'Piece cannot move into a trap'
TRAP_NOT_ADJACENT_ERROR = (
    'Trap must be placed adjacent to current position or at current position (supermove)'
)
SUPERMOVE_WARNING = WARNING_PREFIX + 'SUPERMOVE: Piece must move out of this space on the very next step'

BOARD_INVALID_HINTS = [
    'Board validation failed. Common issues:',
    '  - Diagonal or jump moves (only orthogonal moves allowed)',
    '  - Piece moving into a trap',
    '  - Trap placed non-adjacent to piece position',
    '  - Supermove without immediate piece movement',
    '  - Trap placed on row 0 (the row before the goal)',
    '  - More traps than board size - 1',
    '  - Sequence not ending at the goal, or grid not matching the sequence',
    '  - Invalid board size or out-of-bounds positions',
]


class InvalidBoardError(ValueError):
    """Raised by validate_board_or_throw() for a board the oracle rejects."""


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)

    @property
    def warnings(self) -> List[str]:
        return [e for e in self.errors if e.startswith(WARNING_PREFIX)]

    @property
    def hard_errors(self) -> List[str]:
        return [e for e in self.errors if not e.startswith(WARNING_PREFIX)]


def is_in_bounds(position: Position, size: int) -> bool:
    """Returns whether a position is on the board. Row -1 (the goal) is always accepted."""
    return -1 <= position.row < size and 0 <= position.col < size


def validate_interactive_move(
    current: Optional[Position],
    next_position: Position,
    kind: MoveKind,
    size: int,
    placed_traps: Collection[Position],
) -> ValidationResult:
    """
    Check a proposed move before it is appended to a sequence being built.

    All independent problems are collected. A supermove is valid but comes
    back with a warning (prefixed with WARNING_PREFIX), which does not count
    against `valid`.
    """
    errors = []

    if not is_in_bounds(next_position, size):
        errors.append(OUT_OF_BOUNDS_ERROR)

    if current is not None and kind == MoveKind.PIECE:
        if not is_adjacent_orthogonal(current, next_position):
            errors.append(PIECE_NOT_ADJACENT_ERROR)
        if next_position in placed_traps:
            errors.append(PIECE_INTO_TRAP_ERROR)

    if current is not None and kind == MoveKind.TRAP:
        same_position = next_position == current
        if not same_position and not is_adjacent_orthogonal(current, next_position):
            errors.append(TRAP_NOT_ADJACENT_ERROR)
        if same_position:
            errors.append(SUPERMOVE_WARNING)

    valid = not any(not e.startswith(WARNING_PREFIX) for e in errors)
    return ValidationResult(valid, errors)


def validate_board(board: Board) -> ValidationResult:
    """Run the canonical check and attach readable hints when it fails."""
    if is_board_playable(board):
        return ValidationResult(True, [])
    return ValidationResult(False, list(BOARD_INVALID_HINTS))


def validate_board_or_throw(board: Board) -> None:
    """Raise InvalidBoardError if the board is not playable."""
    result = validate_board(board)
    if not result.valid:
        raise InvalidBoardError('\n'.join(result.errors))
