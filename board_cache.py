"""
Cache for generated board lists, keyed by (size, limit).

Each entry is a snapshot {size, limit, count, timestamp, boards}. Two
backends share the same four operations (exists / load / save / info):

  - FileBoardCache: one JSON file per key under BOARD_CACHE_DIR (default)
  - DynamoBoardCache: one DynamoDB item per key; boards are stored as compact
    sequence strings, compressed, and their grids are re-derived on load

Cache problems are never fatal: lookups that fail are reported and treated
as a miss, so callers just regenerate.
"""

import base64
import boto3
import json
import os
import tempfile
import zlib
from datetime import datetime, timezone
from typing import Dict, List, Optional
from botocore.exceptions import ClientError
from dotenv import load_dotenv

from board_model import Board, Move, MoveKind, Position
from grid_projector import build_board

load_dotenv()

_KIND_CODES = {MoveKind.PIECE: 'p', MoveKind.TRAP: 't', MoveKind.FINAL: 'f'}
_CODE_KINDS = {code: kind for kind, code in _KIND_CODES.items()}


def _cache_key(size: int, limit: int) -> str:
    return f"size-{size}-limit-{limit}"


def compress_sequence(sequence) -> str:
    """
    Compress a move sequence into "p2,1|t1,1|p1,0|f-1,0".
    Each move is a kind letter plus row,col; the order is the position in the string.
    """
    return '|'.join(
        f"{_KIND_CODES[move.kind]}{move.position.row},{move.position.col}"
        for move in sequence
    )


def decompress_sequence(compressed: str):
    """Decompress a compact sequence string back into a tuple of moves. Raises ValueError on bad input."""
    if not compressed:
        return ()
    moves = []
    for order, token in enumerate(compressed.split('|'), start=1):
        kind = _CODE_KINDS.get(token[:1])
        if kind is None:
            raise ValueError(f"Unknown move code in {token!r}")
        row, col = token[1:].split(',')
        moves.append(Move(Position(int(row), int(col)), kind, order))
    return tuple(moves)


def compress_boards(boards: List[Board]) -> str:
    """Pack boards of one size into a single compressed, base64 string."""
    raw = '\n'.join(compress_sequence(board.sequence) for board in boards)
    return base64.b64encode(zlib.compress(raw.encode('utf-8'))).decode('ascii')


def decompress_boards(compressed: str, size: int) -> List[Board]:
    raw = zlib.decompress(base64.b64decode(compressed)).decode('utf-8')
    if not raw:
        return []
    return [build_board(decompress_sequence(line), size) for line in raw.split('\n')]


def _snapshot(size: int, limit: int, boards: List[Board]) -> Dict:
    return {
        'size': size,
        'limit': limit,
        'count': len(boards),
        'timestamp': datetime.now(timezone.utc).isoformat(),
        'boards': list(boards),
    }


class FileBoardCache:
    def __init__(self, cache_dir: Optional[str] = None):
        self.cache_dir = cache_dir or os.getenv('BOARD_CACHE_DIR', tempfile.gettempdir())

    def path_for(self, size: int, limit: int) -> str:
        return os.path.join(self.cache_dir, f"spaces-game-boards-{_cache_key(size, limit)}.json")

    def _read(self, size: int, limit: int) -> Optional[Dict]:
        path = self.path_for(size, limit)
        if not os.path.exists(path):
            return None
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            data['boards'] = [Board.from_dict(b) for b in data['boards']]
            return data
        except (OSError, ValueError, KeyError, TypeError) as e:
            print(f"Board cache read error ({path}): {e}")
            return None

    def exists(self, size: int, limit: int) -> bool:
        return os.path.exists(self.path_for(size, limit))

    def load(self, size: int, limit: int) -> Optional[List[Board]]:
        """Return cached boards, or None on a miss (missing, unreadable, or keyed differently)."""
        data = self._read(size, limit)
        if data is None:
            return None
        if data.get('size') != size or data.get('limit') != limit:
            return None
        return data['boards']

    def save(self, size: int, limit: int, boards: List[Board]) -> bool:
        """Write (or overwrite) the snapshot for a key. Returns False if the write failed."""
        path = self.path_for(size, limit)
        snapshot = _snapshot(size, limit, boards)
        snapshot['boards'] = [board.to_dict() for board in boards]
        try:
            os.makedirs(self.cache_dir, exist_ok=True)
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(snapshot, f, indent=2)
            return True
        except OSError as e:
            print(f"Board cache write error ({path}): {e}")
            return False

    def info(self, size: int, limit: int) -> Optional[Dict]:
        """Return the full snapshot for a key, or None."""
        return self._read(size, limit)

    def location(self, size: int, limit: int) -> str:
        return self.path_for(size, limit)


class DynamoBoardCache:
    def __init__(self, table=None, dynamodb=None):
        self.table_name = os.getenv('BOARD_CACHE_TABLE_NAME', 'spaces-game-board-cache')
        self.dynamodb = dynamodb
        if table is None:
            if self.dynamodb is None:
                self.dynamodb = boto3.resource('dynamodb')
            table = self.dynamodb.Table(self.table_name)
        self.table = table

    def create_table_if_not_exists(self):
        """Create the DynamoDB table if it doesn't exist."""
        try:
            self.table.load()
        except ClientError as e:
            if e.response['Error']['Code'] == 'ResourceNotFoundException':
                if self.dynamodb is None:
                    self.dynamodb = boto3.resource('dynamodb')
                self.table = self.dynamodb.create_table(
                    TableName=self.table_name,
                    KeySchema=[
                        {
                            'AttributeName': 'cache_key',
                            'KeyType': 'HASH'
                        }
                    ],
                    AttributeDefinitions=[
                        {
                            'AttributeName': 'cache_key',
                            'AttributeType': 'S'
                        }
                    ],
                    BillingMode='PAY_PER_REQUEST'
                )
                self.table.meta.client.get_waiter('table_exists').wait(
                    TableName=self.table_name
                )
            else:
                raise e

    def _get_item(self, size: int, limit: int) -> Optional[Dict]:
        try:
            response = self.table.get_item(Key={'cache_key': _cache_key(size, limit)})
            return response.get('Item')
        except Exception as e:
            print(f"Board cache lookup error: {e}")
            return None

    def _item_to_snapshot(self, item: Dict) -> Optional[Dict]:
        try:
            # Numbers come back from DynamoDB as Decimal
            size = int(item['size'])
            return {
                'size': size,
                'limit': int(item['limit']),
                'count': int(item['count']),
                'timestamp': item['timestamp'],
                'boards': decompress_boards(item['boards'], size),
            }
        except Exception as e:
            print(f"Board cache decode error: {e}")
            return None

    def exists(self, size: int, limit: int) -> bool:
        return self._get_item(size, limit) is not None

    def load(self, size: int, limit: int) -> Optional[List[Board]]:
        """Return cached boards, or None on a miss (missing, unreadable, or keyed differently)."""
        item = self._get_item(size, limit)
        if item is None:
            return None
        snapshot = self._item_to_snapshot(item)
        if snapshot is None:
            return None
        if snapshot['size'] != size or snapshot['limit'] != limit:
            return None
        return snapshot['boards']

    def save(self, size: int, limit: int, boards: List[Board]) -> bool:
        """Write (or overwrite) the snapshot for a key. Returns False if the write failed."""
        snapshot = _snapshot(size, limit, boards)
        try:
            self.table.put_item(Item={
                'cache_key': _cache_key(size, limit),
                'size': size,
                'limit': limit,
                'count': snapshot['count'],
                'timestamp': snapshot['timestamp'],
                'boards': compress_boards(boards),
            })
            return True
        except Exception as e:
            print(f"Board cache write error: {e}")
            return False

    def info(self, size: int, limit: int) -> Optional[Dict]:
        """Return the full snapshot for a key, or None."""
        item = self._get_item(size, limit)
        if item is None:
            return None
        return self._item_to_snapshot(item)

    def location(self, size: int, limit: int) -> str:
        return f"dynamodb://{self.table_name}/{_cache_key(size, limit)}"


def get_board_cache(backend: Optional[str] = None):
    """Build the cache backend named by `backend` or BOARD_CACHE_BACKEND ('file' or 'dynamodb')."""
    backend = (backend or os.getenv('BOARD_CACHE_BACKEND', 'file')).lower()
    if backend == 'dynamodb':
        return DynamoBoardCache()
    if backend == 'file':
        return FileBoardCache()
    raise ValueError(f"Unknown board cache backend: {backend!r}")


board_cache = get_board_cache()
