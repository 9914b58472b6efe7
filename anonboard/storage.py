from __future__ import annotations

import copy
import logging
from typing import Dict, Optional

from .errors import NotFound
from .models import Board

logger = logging.getLogger(__name__)


class Storage:
    """In-memory store of board aggregates keyed by board name.

    Every load hands out a private copy, and ``save_board`` replaces the
    stored aggregate wholesale: concurrent writers to one board race and the
    last save wins.
    """

    def __init__(self) -> None:
        self.boards: Dict[str, Board] = {}

    def find_board(self, name: str) -> Optional[Board]:
        board = self.boards.get(name)
        return copy.deepcopy(board) if board is not None else None

    def get_board(self, name: str) -> Board:
        board = self.find_board(name)
        if board is None:
            raise NotFound("board")
        return board

    def get_or_create_board(self, name: str) -> Board:
        board = self.find_board(name)
        if board is None:
            board = self.save_board(Board(name=name))
            logger.info("Created board %r", name)
        return board

    def save_board(self, board: Board) -> Board:
        stored = self.boards.get(board.name)
        board.version = stored.version + 1 if stored is not None else 1
        self.boards[board.name] = copy.deepcopy(board)
        return board
