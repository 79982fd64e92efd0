"""
Projects a move sequence onto the N x N grid.

The grid is a derived view: it is recomputed from the sequence whenever it
is needed. Traps always win over piece waypoints at the same cell, which is
how a supermove (trap planted under the piece) shows up on the board.
"""

from typing import Iterable, Optional

from board_model import Board, CellState, Grid, MoveKind, Position


def _on_grid(position: Position, size: int) -> bool:
    return 0 <= position.row < size and 0 <= position.col < size


def project_grid(sequence: Iterable, size: int) -> Grid:
    """Build the size x size cell grid for a sequence. Off-grid moves (the goal row) are skipped."""
    sequence = tuple(sequence)
    grid = [[CellState.EMPTY] * size for _ in range(size)]

    trap_cells = set()
    for move in sequence:
        if move.kind == MoveKind.TRAP and _on_grid(move.position, size):
            trap_cells.add(move.position)

    for move in sequence:
        if not _on_grid(move.position, size):
            continue
        row, col = move.position
        if move.position in trap_cells:
            grid[row][col] = CellState.TRAP
        elif move.kind == MoveKind.PIECE and grid[row][col] == CellState.EMPTY:
            grid[row][col] = CellState.PIECE

    return tuple(tuple(row) for row in grid)


def build_board(sequence: Iterable, size: int) -> Board:
    """Create a complete Board from a sequence."""
    sequence = tuple(sequence)
    return Board(size, project_grid(sequence, size), sequence)


def current_position(sequence: Iterable, step_number: int) -> Optional[Position]:
    """
    Position of the piece after the given (1-based) step.

    Trap and final moves are ignored. Step numbers past the end of the
    sequence are clamped to the last piece position; returns None when no
    piece move happened at or before the step.
    """
    moves_up_to_step = sorted(
        (move for move in sequence if move.order <= step_number),
        key=lambda move: move.order,
    )
    for move in reversed(moves_up_to_step):
        if move.kind == MoveKind.PIECE:
            return move.position
    return None
