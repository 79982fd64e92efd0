"""
Board collections: named JSON files holding hand-built or exported boards.

File format:
    {"name": ..., "description": ..., "createdAt": ISO-8601,
     "boards": [{<board wire dict>, "index": 0, "name": ..., "tags": [...], "createdAt": ...}]}
"""

import json
import os
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from board_model import Board


def load_collection(file_path: str) -> Dict[str, Any]:
    """Load a collection. Raises FileNotFoundError or ValueError for a missing or malformed file."""
    try:
        with open(file_path, 'r', encoding='utf-8') as f:
            collection = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Collection file not found: {file_path}")

    if not isinstance(collection, dict) or not isinstance(collection.get('boards'), list):
        raise ValueError('Invalid collection format: missing boards array')
    return collection


def save_collection(file_path: str, collection: Dict[str, Any]) -> None:
    directory = os.path.dirname(file_path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(file_path, 'w', encoding='utf-8') as f:
        json.dump(collection, f, indent=2, ensure_ascii=False)


def _board_entry(board: Board, index: int, name: Optional[str] = None,
                 tags: Optional[List[str]] = None) -> Dict[str, Any]:
    entry = board.to_dict()
    entry['index'] = index
    if name:
        entry['name'] = name
    if tags:
        entry['tags'] = list(tags)
    entry['createdAt'] = datetime.now().isoformat()
    return entry


def create_collection(file_path: str, name: Optional[str] = None,
                      description: Optional[str] = None) -> Dict[str, Any]:
    """Create an empty collection file. Raises FileExistsError if it is already there."""
    if os.path.exists(file_path):
        raise FileExistsError(f"Collection file already exists: {file_path}")

    collection = {
        'name': name,
        'description': description,
        'createdAt': datetime.now().isoformat(),
        'boards': [],
    }
    save_collection(file_path, collection)
    return collection


def collection_from_boards(boards: Iterable[Board], name: Optional[str] = None,
                           description: Optional[str] = None) -> Dict[str, Any]:
    """Wrap a list of boards (e.g. a generation run) as a collection, indexed from 0."""
    return {
        'name': name,
        'description': description,
        'createdAt': datetime.now().isoformat(),
        'boards': [_board_entry(board, i) for i, board in enumerate(boards)],
    }


def add_board_to_collection(file_path: str, board: Board, name: Optional[str] = None,
                            tags: Optional[List[str]] = None) -> Dict[str, Any]:
    """Append a board under the next free index and save. Returns the updated collection."""
    collection = load_collection(file_path)
    indexes = [entry['index'] for entry in collection['boards']]
    next_index = max(indexes) + 1 if indexes else 0

    collection['boards'].append(_board_entry(board, next_index, name, tags))
    save_collection(file_path, collection)
    return collection


def get_board_by_index(collection: Dict[str, Any], index: int) -> Optional[Dict[str, Any]]:
    for entry in collection['boards']:
        if entry.get('index') == index:
            return entry
    return None


def find_duplicate_board(collection: Dict[str, Any], board: Board) -> int:
    """Index of an entry with exactly the same sequence, or -1."""
    sequence = [move.to_dict() for move in board.sequence]
    for entry in collection['boards']:
        if entry.get('boardSize') != board.size:
            continue
        if entry.get('sequence') == sequence:
            return entry['index']
    return -1
