#!/usr/bin/env python3
"""
Tests for interactive move validation and the validate_board wrapper.
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from board_model import Move, MoveKind, Position
from grid_projector import build_board
from validation import (
    InvalidBoardError,
    SUPERMOVE_WARNING,
    WARNING_PREFIX,
    is_adjacent_orthogonal,
    is_in_bounds,
    validate_board,
    validate_board_or_throw,
    validate_interactive_move,
)


def _board(size, *moves):
    sequence = tuple(
        Move(Position(row, col), MoveKind(kind), i)
        for i, (kind, row, col) in enumerate(moves, start=1)
    )
    return build_board(sequence, size)


def test_adjacent_orthogonal():
    center = Position(1, 1)
    for other in (Position(0, 1), Position(2, 1), Position(1, 0), Position(1, 2)):
        assert is_adjacent_orthogonal(center, other), other
    for other in (Position(0, 0), Position(0, 2), Position(2, 0), Position(2, 2)):
        assert not is_adjacent_orthogonal(center, other), f"diagonal {other}"
    assert not is_adjacent_orthogonal(center, Position(3, 1))
    assert not is_adjacent_orthogonal(center, Position(1, 3))
    assert not is_adjacent_orthogonal(center, center)
    print("  PASS test_adjacent_orthogonal")


def test_adjacency_is_symmetric():
    positions = [Position(r, c) for r in range(-1, 4) for c in range(0, 4)]
    for a in positions:
        for b in positions:
            assert is_adjacent_orthogonal(a, b) == is_adjacent_orthogonal(b, a), (a, b)
    print("  PASS test_adjacency_is_symmetric")


def test_in_bounds():
    assert is_in_bounds(Position(0, 0), 3)
    assert is_in_bounds(Position(2, 2), 3)
    for col in range(3):
        assert is_in_bounds(Position(-1, col), 3)
    assert not is_in_bounds(Position(-2, 0), 3)
    assert not is_in_bounds(Position(3, 0), 3)
    assert not is_in_bounds(Position(0, -1), 3)
    assert not is_in_bounds(Position(0, 3), 3)
    assert is_in_bounds(Position(1, 1), 2)
    assert not is_in_bounds(Position(2, 2), 2)
    assert is_in_bounds(Position(4, 4), 5)
    assert not is_in_bounds(Position(5, 5), 5)
    print("  PASS test_in_bounds")


def test_interactive_piece_move_adjacent():
    result = validate_interactive_move(Position(1, 1), Position(1, 2), MoveKind.PIECE, 3, set())
    assert result.valid is True
    assert result.errors == []
    print("  PASS test_interactive_piece_move_adjacent")


def test_interactive_piece_move_diagonal():
    result = validate_interactive_move(Position(1, 1), Position(0, 0), MoveKind.PIECE, 3, set())
    assert result.valid is False
    assert any('orthogonally' in e for e in result.errors), result.errors
    print("  PASS test_interactive_piece_move_diagonal")


def test_interactive_piece_move_out_of_bounds():
    result = validate_interactive_move(Position(1, 1), Position(5, 5), MoveKind.PIECE, 3, set())
    assert result.valid is False
    assert 'Position is out of bounds' in result.errors
    # Non-adjacent too: every problem is reported
    assert len(result.errors) == 2, result.errors
    print("  PASS test_interactive_piece_move_out_of_bounds")


def test_interactive_piece_into_trap():
    traps = {Position(0, 1)}
    result = validate_interactive_move(Position(1, 1), Position(0, 1), MoveKind.PIECE, 3, traps)
    assert result.valid is False
    assert any('trap' in e for e in result.errors), result.errors
    print("  PASS test_interactive_piece_into_trap")


def test_interactive_trap_adjacent():
    result = validate_interactive_move(Position(1, 1), Position(1, 2), MoveKind.TRAP, 3, set())
    assert result.valid is True
    assert result.errors == []
    print("  PASS test_interactive_trap_adjacent")


def test_interactive_supermove_warns():
    result = validate_interactive_move(Position(1, 1), Position(1, 1), MoveKind.TRAP, 3, set())
    assert result.valid is True
    assert result.errors == [SUPERMOVE_WARNING]
    assert result.warnings == [SUPERMOVE_WARNING]
    assert result.hard_errors == []
    assert all(w.startswith(WARNING_PREFIX) for w in result.warnings)
    assert 'SUPERMOVE' in result.errors[0]
    print("  PASS test_interactive_supermove_warns")


def test_interactive_trap_not_adjacent():
    result = validate_interactive_move(Position(1, 1), Position(0, 0), MoveKind.TRAP, 3, set())
    assert result.valid is False
    assert any('adjacent' in e for e in result.errors), result.errors
    print("  PASS test_interactive_trap_not_adjacent")


def test_interactive_first_move_only_checks_bounds():
    result = validate_interactive_move(None, Position(1, 1), MoveKind.PIECE, 3, set())
    assert result.valid is True
    result = validate_interactive_move(None, Position(5, 5), MoveKind.PIECE, 3, set())
    assert result.valid is False
    assert result.errors == ['Position is out of bounds']
    print("  PASS test_interactive_first_move_only_checks_bounds")


def test_validate_board_valid():
    board = _board(
        3,
        ('piece', 2, 2),
        ('piece', 2, 1),
        ('piece', 1, 1),
        ('piece', 1, 0),
        ('piece', 0, 0),
        ('final', -1, 0),
    )
    result = validate_board(board)
    assert result.valid is True
    assert result.errors == []
    validate_board_or_throw(board)
    print("  PASS test_validate_board_valid")


def test_validate_board_invalid_has_hints():
    board = _board(
        2,
        ('piece', 1, 1),
        ('piece', 0, 0),
        ('final', -1, 0),
    )
    result = validate_board(board)
    assert result.valid is False
    assert len(result.errors) > 0
    try:
        validate_board_or_throw(board)
    except InvalidBoardError as e:
        assert 'Board validation failed' in str(e)
    else:
        assert False, "Expected InvalidBoardError"
    print("  PASS test_validate_board_invalid_has_hints")


if __name__ == '__main__':
    print("Running validation tests...")
    test_adjacent_orthogonal()
    test_adjacency_is_symmetric()
    test_in_bounds()
    test_interactive_piece_move_adjacent()
    test_interactive_piece_move_diagonal()
    test_interactive_piece_move_out_of_bounds()
    test_interactive_piece_into_trap()
    test_interactive_trap_adjacent()
    test_interactive_supermove_warns()
    test_interactive_trap_not_adjacent()
    test_interactive_first_move_only_checks_bounds()
    test_validate_board_valid()
    test_validate_board_invalid_has_hints()
    print("\nAll validation tests passed!")
