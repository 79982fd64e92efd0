#!/usr/bin/env python3
"""
Generate legal opponent boards for a board size and cache them.

Usage:
    python3 generate_boards.py --size 3                     # up to 500 boards
    python3 generate_boards.py --size 4 --limit 2000        # bigger budget
    python3 generate_boards.py --size 3 --force             # ignore the cache
    python3 generate_boards.py --size 3 --output out.json   # export as a collection
    python3 generate_boards.py --size 3 --add-to deck.json  # append new boards to a collection
    python3 generate_boards.py --size 2 --view              # print the boards
    python3 generate_boards.py --size 3 --info              # show cached snapshot only
    python3 generate_boards.py --list deck.json --compact   # list a collection
    python3 generate_boards.py --list deck.json --index 4   # show one board of a collection
"""

import argparse
import os
import sys
import time

from board_cache import DynamoBoardCache, board_cache
from board_collection import (
    add_board_to_collection,
    collection_from_boards,
    create_collection,
    find_duplicate_board,
    get_board_by_index,
    load_collection,
    save_collection,
)
from board_generator import estimate_search_space, generate_with_cache
from board_model import MAX_BOARD_SIZE, MIN_BOARD_SIZE, Board, MoveKind, is_valid_board_size

DEFAULT_LIMIT = 500


def render_board(board):
    """
    Draw a board as a bordered text grid.

    Cells show the step number with a marker: "1●" piece, "2X" trap,
    "4●,5X" supermove (piece step 4, trap under it at step 5).
    """
    moves_by_cell = {}
    for move in board.sequence:
        if move.kind == MoveKind.FINAL or move.position.row < 0:
            continue
        moves_by_cell.setdefault(tuple(move.position), []).append(move)

    cells = []
    for row in range(board.size):
        row_cells = []
        for col in range(board.size):
            moves = sorted(moves_by_cell.get((row, col), []), key=lambda m: m.order)
            piece = next((m for m in moves if m.kind == MoveKind.PIECE), None)
            trap = next((m for m in moves if m.kind == MoveKind.TRAP), None)
            if piece and trap:
                content = f"{piece.order}●,{trap.order}X"
            elif piece:
                content = f"{piece.order}●"
            elif trap:
                content = f"{trap.order}X"
            else:
                content = ''
            row_cells.append(content)
        cells.append(row_cells)

    width = max([3] + [len(c) for row in cells for c in row])
    border = '─' * (width + 2)
    lines = ['┌' + '┬'.join([border] * board.size) + '┐']
    for row, row_cells in enumerate(cells):
        lines.append('│ ' + ' │ '.join(c.center(width) for c in row_cells) + ' │')
        if row < board.size - 1:
            lines.append('├' + '┼'.join([border] * board.size) + '┤')
    lines.append('└' + '┴'.join([border] * board.size) + '┘')
    return '\n'.join(lines)


def view_boards(boards, page_size=5):
    """Print boards a page at a time, asking before each new page."""
    index = 0
    while index < len(boards):
        end = min(index + page_size, len(boards))
        for i in range(index, end):
            print(f"Board {i + 1}/{len(boards)}:")
            print(render_board(boards[i]))
            print()

        if end >= len(boards):
            print("Viewed all boards")
            break

        answer = input(f"View next {min(page_size, len(boards) - end)} boards? [Y/n] ")
        if answer.strip().lower() in ('n', 'no'):
            print(f"Stopped at board {end}/{len(boards)}")
            break
        index = end


def save_to_output_file(boards, output_path, size):
    collection = collection_from_boards(
        boards,
        name=f"Generated Boards (Size {size})",
        description=f"All possible legal opponent boards for size {size}",
    )
    save_collection(output_path, collection)
    print(f"  Saved {len(boards)} boards to {output_path}")


def add_to_collection(boards, collection_path, size):
    """
    Append boards that are not already in the collection (created if missing).

    Returns (added, skipped).
    """
    if not os.path.exists(collection_path):
        create_collection(
            collection_path,
            name=f"Boards (Size {size})",
            description=f"Generated opponent boards for size {size}",
        )
    collection = load_collection(collection_path)

    added = skipped = 0
    for board in boards:
        if find_duplicate_board(collection, board) != -1:
            skipped += 1
            continue
        collection = add_board_to_collection(collection_path, board)
        added += 1

    print(f"  Added {added} boards to {collection_path} ({skipped} already present)")
    return added, skipped


def list_collection(collection_path, compact=False, index=None):
    """Print a collection's boards, or only the one at `index`. Returns an exit status."""
    try:
        collection = load_collection(collection_path)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    if collection.get('name'):
        print(f"Name: {collection['name']}")
    if collection.get('description'):
        print(f"Description: {collection['description']}")
    print(f"Total boards: {len(collection['boards'])}")
    print()

    entries = collection['boards']
    if index is not None:
        entry = get_board_by_index(collection, index)
        if entry is None:
            print(f"No board with index {index} in {collection_path}")
            return 1
        entries = [entry]

    if not entries:
        print("No boards in collection")
        return 0

    for entry in entries:
        if compact:
            name = entry.get('name') or '(unnamed)'
            tags = f" [{', '.join(entry['tags'])}]" if entry.get('tags') else ''
            print(f"[{entry['index']}] {name}{tags}")
        else:
            print(f"─── Board {entry['index']} ───")
            print(render_board(Board.from_dict(entry)))
            print()
    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate legal boards for a board size')
    parser.add_argument('--size', type=int, default=None,
                        help=f'Board size ({MIN_BOARD_SIZE}-{MAX_BOARD_SIZE}), required unless --list')
    parser.add_argument('--limit', type=int, default=DEFAULT_LIMIT,
                        help=f'Maximum number of boards (default: {DEFAULT_LIMIT})')
    parser.add_argument('--force', action='store_true',
                        help='Regenerate even if a cached result exists')
    parser.add_argument('--output', type=str, default=None,
                        help='Also save the boards to this collection file')
    parser.add_argument('--add-to', type=str, default=None,
                        help='Append boards not already present to this collection file')
    parser.add_argument('--view', action='store_true',
                        help='Print the boards as grids')
    parser.add_argument('--page-size', type=int, default=5,
                        help='Boards per page with --view (default: 5)')
    parser.add_argument('--info', action='store_true',
                        help='Show the cached snapshot for size/limit and exit')
    parser.add_argument('--list', type=str, default=None, metavar='COLLECTION',
                        help='List the boards in a collection file and exit')
    parser.add_argument('--index', type=int, default=None,
                        help='With --list, show only the board with this index')
    parser.add_argument('--compact', action='store_true',
                        help='With --list, show index, name and tags only')
    args = parser.parse_args(argv)

    if args.list:
        return list_collection(args.list, compact=args.compact, index=args.index)

    if args.size is None or not is_valid_board_size(args.size):
        print(f"Invalid board size. Must be between {MIN_BOARD_SIZE} and {MAX_BOARD_SIZE}.")
        return 1
    if args.limit < 1:
        print("Invalid limit. Must be at least 1.")
        return 1

    size, limit = args.size, args.limit

    if isinstance(board_cache, DynamoBoardCache) and not args.info:
        print("Initializing board cache table...")
        board_cache.create_table_if_not_exists()

    boards = None
    if args.info or not args.force:
        info = board_cache.info(size, limit)
        if info is not None:
            print(f"Cache already exists for size {size} with limit {limit}")
            print(f"  Cached: {info['timestamp']}")
            print(f"  Count: {info['count']} boards")
            if not args.info:
                print("Use --force to regenerate")
            boards = info['boards']
        elif args.info:
            print(f"No cached boards for size {size} with limit {limit}")
            return 0

    if boards is None:
        estimate = estimate_search_space(size)
        print(f"Estimated search space: ~{estimate:,} boards")
        if estimate > limit:
            print(f"  Generating up to {limit:,} boards (limited by --limit)")

        print(f"\nGenerating boards for size {size}...", flush=True)

        def progress(count):
            print(f"  Generated {count}/{limit} boards...", flush=True)

        start = time.monotonic()
        boards = generate_with_cache(size, limit, force=args.force, progress_callback=progress)
        elapsed = time.monotonic() - start

        print(f"Generated {len(boards)} boards in {elapsed:.2f}s")
        print(f"  Cached to: {board_cache.location(size, limit)}")

    if args.output:
        save_to_output_file(boards, args.output, size)

    if args.add_to:
        add_to_collection(boards, args.add_to, size)

    if args.view:
        view_boards(boards, args.page_size)

    return 0


if __name__ == '__main__':
    sys.exit(main())
