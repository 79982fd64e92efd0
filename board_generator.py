"""
Legal board generator for the Spaces game.

Enumerates boards for a given size with depth-first search and backtracking,
spreading the result budget across starting columns so that the boards do
not all start in the same corner. Every finished candidate goes through the
canonical check in playability.py before it is kept.

Visited cells and trap cells are integer bitsets (bit row * size + col), so
each branch of the search owns its own copy for free.

Usage:
    from board_generator import generate_all_boards, generate_with_cache
    boards = generate_all_boards(3, limit=200)
    boards = generate_with_cache(4, limit=1000)  # cached across runs
"""

import math
import random

from board_model import (
    GOAL_ROW,
    MAX_BOARD_SIZE,
    MIN_BOARD_SIZE,
    Move,
    MoveKind,
    Position,
    append_move,
    is_valid_board_size,
)
from board_cache import board_cache
from grid_projector import build_board
from playability import is_board_playable

# Steps: (row_delta, col_delta). Forward is toward row 0; the piece never steps back.
PIECE_STEPS = [(-1, 0), (0, -1), (0, 1)]
# (0, 0) plants the trap under the piece (supermove)
TRAP_STEPS = PIECE_STEPS + [(0, 0)]

# Progress callback fires after every Nth accepted board
PROGRESS_INTERVAL = 50

# Above this size generate_with_cache() samples instead of enumerating
EXHAUSTIVE_MAX_SIZE = 5

SAMPLING_TRAP_PROBABILITY = 0.25
SAMPLING_ATTEMPTS_PER_BOARD = 200


def _cell_bit(row, col, size):
    return 1 << (row * size + col)


def _check_size(size):
    if not is_valid_board_size(size):
        raise ValueError(
            f"Invalid board size {size!r}: must be between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}"
        )


def estimate_search_space(size):
    """Very rough estimate of how many legal boards exist for a size (exponential, base 15)."""
    return 15 ** (size - 1)


def generate_all_boards(size, limit=500, progress_callback=None):
    """
    Exhaustive DFS over legal move sequences.

    Returns at most `limit` boards, with ceil(limit / size) allowed per
    starting column. Optional progress_callback(accepted) is called after
    every PROGRESS_INTERVAL accepted boards.
    """
    _check_size(size)
    if limit <= 0:
        return []

    per_column = math.ceil(limit / size)
    start_row = size - 1
    accepted = 0

    def dfs(row, col, sequence, visited, traps, last_move_was_trap, reached_goal_row, found):
        nonlocal accepted

        if len(found) >= per_column:
            return

        if row == GOAL_ROW:
            final_sequence = append_move(sequence, Position(GOAL_ROW, col), MoveKind.FINAL)
            board = build_board(final_sequence, size)
            if is_board_playable(board):
                found.append(board)
                accepted += 1
                if progress_callback and accepted % PROGRESS_INTERVAL == 0:
                    progress_callback(accepted)
            return

        # On row 0 the only move left is onto the goal
        if reached_goal_row:
            dfs(GOAL_ROW, col, sequence, visited, traps, False, True, found)
            return

        for dr, dc in PIECE_STEPS:
            if len(found) >= per_column:
                return
            to_r, to_c = row + dr, col + dc
            if to_r < 0 or to_r >= size or to_c < 0 or to_c >= size:
                continue
            bit = _cell_bit(to_r, to_c, size)
            if visited & bit:
                continue
            dfs(
                to_r, to_c,
                append_move(sequence, Position(to_r, to_c), MoveKind.PIECE),
                visited | bit, traps,
                False, to_r == 0,
                found,
            )

        # After a trap the piece has to move
        if last_move_was_trap:
            return

        for dr, dc in TRAP_STEPS:
            if len(found) >= per_column:
                return
            to_r, to_c = row + dr, col + dc
            if to_r < 0 or to_r >= size or to_c < 0 or to_c >= size:
                continue
            if to_r == 0:
                continue
            bit = _cell_bit(to_r, to_c, size)
            if traps & bit:
                continue
            dfs(
                row, col,
                append_move(sequence, Position(to_r, to_c), MoveKind.TRAP),
                visited, traps | bit,
                True, False,
                found,
            )

    boards = []
    for start_col in range(size):
        column_boards = []
        start = (Move.piece(start_row, start_col, 1),)
        dfs(start_row, start_col, start, _cell_bit(start_row, start_col, size), 0, False, False, column_boards)
        boards.extend(column_boards)
        if len(boards) >= limit:
            break

    return boards[:limit]


def _sample_candidate(size, start_col, rng):
    """Draw one random candidate board using the same move rules as the DFS."""
    row, col = size - 1, start_col
    sequence = (Move.piece(row, col, 1),)
    visited = _cell_bit(row, col, size)
    traps = 0
    last_move_was_trap = False

    while row != 0:
        piece_options = []
        for dr, dc in PIECE_STEPS:
            to_r, to_c = row + dr, col + dc
            if 0 <= to_r < size and 0 <= to_c < size and not visited & _cell_bit(to_r, to_c, size):
                piece_options.append((to_r, to_c))

        trap_options = []
        if not last_move_was_trap:
            for dr, dc in TRAP_STEPS:
                to_r, to_c = row + dr, col + dc
                if 0 < to_r < size and 0 <= to_c < size and not traps & _cell_bit(to_r, to_c, size):
                    trap_options.append((to_r, to_c))

        if trap_options and (not piece_options or rng.random() < SAMPLING_TRAP_PROBABILITY):
            to_r, to_c = rng.choice(trap_options)
            sequence = append_move(sequence, Position(to_r, to_c), MoveKind.TRAP)
            traps |= _cell_bit(to_r, to_c, size)
            last_move_was_trap = True
        elif piece_options:
            to_r, to_c = rng.choice(piece_options)
            sequence = append_move(sequence, Position(to_r, to_c), MoveKind.PIECE)
            visited |= _cell_bit(to_r, to_c, size)
            row, col = to_r, to_c
            last_move_was_trap = False
        else:
            return None

    return build_board(append_move(sequence, Position(GOAL_ROW, col), MoveKind.FINAL), size)


def generate_boards_with_sampling(size, limit, progress_callback=None, seed=None, max_attempts=None):
    """
    Randomized generator for sizes where enumeration is impractical.

    Same contract as generate_all_boards(): every board passes the canonical
    check, no duplicates, at most ceil(limit / size) per starting column and
    `limit` overall. Each column gives up after max_attempts draws (default
    SAMPLING_ATTEMPTS_PER_BOARD per wanted board). Deterministic for a seed.
    """
    _check_size(size)
    if limit <= 0:
        return []

    rng = random.Random(seed)
    per_column = math.ceil(limit / size)
    if max_attempts is None:
        max_attempts = per_column * SAMPLING_ATTEMPTS_PER_BOARD

    boards = []
    seen = set()
    accepted = 0

    for start_col in range(size):
        column_boards = []
        attempts = 0
        while len(column_boards) < per_column and attempts < max_attempts:
            attempts += 1
            board = _sample_candidate(size, start_col, rng)
            if board is None or board.sequence in seen:
                continue
            if not is_board_playable(board):
                continue
            seen.add(board.sequence)
            column_boards.append(board)
            accepted += 1
            if progress_callback and accepted % PROGRESS_INTERVAL == 0:
                progress_callback(accepted)

        boards.extend(column_boards)
        if len(boards) >= limit:
            break

    return boards[:limit]


def generate_with_cache(size, limit=500, force=False, progress_callback=None, cache=None):
    """
    Return boards for (size, limit), from the cache when possible.

    Generates on a miss (or when force is set) and writes the result back.
    A failing cache never fails generation.
    """
    if cache is None:
        cache = board_cache

    if not force:
        cached = cache.load(size, limit)
        if cached is not None:
            return cached

    if size <= EXHAUSTIVE_MAX_SIZE:
        boards = generate_all_boards(size, limit, progress_callback)
    else:
        boards = generate_boards_with_sampling(size, limit, progress_callback)

    cache.save(size, limit, boards)
    return boards
