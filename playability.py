"""
Canonical board legality check.

is_board_playable() is the single source of truth for whether a board can
be played. The training pipeline runs the identical rule set, so the rules
here are pinned: any change must land in both places at once, and the golden
corpus in tests/test_playability.py must keep passing unchanged.
"""

from board_model import GOAL_ROW, Board, CellState, MoveKind, is_adjacent_orthogonal


def is_board_playable(board: Board) -> bool:
    """
    Walk the sequence once and reject on the first broken rule.

    Rules:
      - piece moves are orthogonal single steps and never enter a trapped cell
      - traps sit next to the piece or under it (supermove), never on row 0
      - a supermove is immediately followed by a piece move that leaves the cell
      - at most size - 1 trap cells
      - the sequence ends with a final move at the goal row, right after a
        piece move on row 0, and the piece has visited every row
      - the grid matches the sequence
    """
    sequence = board.sequence
    size = board.size

    if not sequence:
        return False

    if len(board.grid) != size or any(len(row) != size for row in board.grid):
        return False

    current = None
    trap_cells = set()
    supermove_cell = None
    rows_with_piece = set()
    has_final = False
    last_index = len(sequence) - 1

    for i, move in enumerate(sequence):
        row, col = move.position

        if move.kind == MoveKind.FINAL:
            if row != GOAL_ROW or col < 0 or col >= size:
                return False
            if i != last_index:
                return False
            # Cannot reach the goal straight off a supermove
            if supermove_cell is not None:
                return False
            previous = sequence[i - 1] if i > 0 else None
            if previous is None or previous.kind != MoveKind.PIECE or previous.position.row != 0:
                return False
            has_final = True
            continue

        if row < 0 or row >= size or col < 0 or col >= size:
            return False

        content = board.grid[row][col]

        if move.kind == MoveKind.PIECE:
            # Trap overrides the piece waypoint in the grid
            if content != CellState.PIECE and content != CellState.TRAP:
                return False

            if supermove_cell is not None:
                if move.position == supermove_cell:
                    return False
                supermove_cell = None

            if current is not None:
                if not is_adjacent_orthogonal(current, move.position):
                    return False
                if move.position in trap_cells:
                    return False

            current = move.position
            rows_with_piece.add(row)

        elif move.kind == MoveKind.TRAP:
            if content != CellState.TRAP:
                return False
            if current is None:
                return False
            if row == 0:
                return False
            # Piece must move before another trap goes down
            if supermove_cell is not None:
                return False

            if move.position == current:
                supermove_cell = move.position
            elif not is_adjacent_orthogonal(current, move.position):
                return False

            trap_cells.add(move.position)

        else:
            return False

    if len(trap_cells) > size - 1:
        return False

    if supermove_cell is not None:
        return False

    if not has_final:
        return False

    for r in range(size):
        if r not in rows_with_piece:
            return False

    return True
