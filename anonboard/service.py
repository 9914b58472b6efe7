from __future__ import annotations

import logging
from typing import List

from . import config
from .auth import hash_password, verify_password
from .errors import DeleteResult, NotFound
from .listing import summarize_board, thread_detail
from .models import Board, Reply, Thread
from .schemas import ThreadDetail, ThreadSummary
from .utils import new_id, now_utc

logger = logging.getLogger(__name__)


def _thread_of(board: Board, thread_id: str) -> Thread:
    thread = board.find_thread(thread_id)
    if thread is None:
        logger.debug("Thread %s not found on board %r", thread_id, board.name)
        raise NotFound("thread")
    return thread


def _reply_of(thread: Thread, reply_id: str) -> Reply:
    reply = thread.find_reply(reply_id)
    if reply is None:
        logger.debug("Reply %s not found in thread %s", reply_id, thread.id)
        raise NotFound("reply")
    return reply


class BoardService:
    """Thread and reply operations over a board aggregate store.

    Each mutation loads the board, changes the loaded copy and saves the
    whole aggregate back.
    """

    def __init__(self, store) -> None:
        self.store = store

    # === Listings ===

    def list_board(self, board_name: str) -> List[ThreadSummary]:
        return summarize_board(self.store.find_board(board_name))

    def list_thread(self, board_name: str, thread_id: str) -> ThreadDetail:
        return thread_detail(self.store.get_board(board_name), thread_id)

    # === Threads ===

    def create_thread(self, board_name: str, text: str, password: str) -> Thread:
        board = self.store.get_or_create_board(board_name)
        now = now_utc()
        thread = Thread(
            id=new_id(),
            text=text,
            created_on=now,
            bumped_on=now,
            delete_password=hash_password(password),
        )
        board.threads.append(thread)
        self.store.save_board(board)
        logger.info("Created thread %s on board %r", thread.id, board_name)
        return thread

    def report_thread(self, board_name: str, thread_id: str) -> None:
        board = self.store.get_board(board_name)
        thread = _thread_of(board, thread_id)
        thread.reported = True
        self.store.save_board(board)
        logger.info("Reported thread %s on board %r", thread_id, board_name)

    def delete_thread(self, board_name: str, thread_id: str, password: str) -> DeleteResult:
        board = self.store.get_board(board_name)
        thread = _thread_of(board, thread_id)
        if not verify_password(password, thread.delete_password):
            logger.info("Incorrect password deleting thread %s", thread_id)
            return DeleteResult.INCORRECT_PASSWORD
        board.remove_thread(thread_id)
        self.store.save_board(board)
        logger.info("Deleted thread %s from board %r", thread_id, board_name)
        return DeleteResult.SUCCESS

    # === Replies ===

    def create_reply(self, board_name: str, thread_id: str, text: str, password: str) -> Thread:
        board = self.store.get_board(board_name)
        thread = _thread_of(board, thread_id)
        reply = Reply(
            id=new_id(),
            text=text,
            created_on=now_utc(),
            delete_password=hash_password(password),
        )
        thread.replies.append(reply)
        thread.bumped_on = reply.created_on
        self.store.save_board(board)
        logger.info("Created reply %s in thread %s", reply.id, thread_id)
        return thread

    def report_reply(self, board_name: str, thread_id: str, reply_id: str) -> None:
        board = self.store.get_board(board_name)
        reply = _reply_of(_thread_of(board, thread_id), reply_id)
        reply.reported = True
        self.store.save_board(board)
        logger.info("Reported reply %s in thread %s", reply_id, thread_id)

    def delete_reply(self, board_name: str, thread_id: str, reply_id: str, password: str) -> DeleteResult:
        """Redact a reply in place; its slot in the thread is kept."""
        board = self.store.get_board(board_name)
        reply = _reply_of(_thread_of(board, thread_id), reply_id)
        if not verify_password(password, reply.delete_password):
            logger.info("Incorrect password deleting reply %s", reply_id)
            return DeleteResult.INCORRECT_PASSWORD
        reply.text = config.DELETED_REPLY_TEXT
        self.store.save_board(board)
        logger.info("Redacted reply %s in thread %s", reply_id, thread_id)
        return DeleteResult.SUCCESS
