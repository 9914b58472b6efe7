"""Read-only projections of a board for the listing endpoints.

Nothing here writes back to the store, and the public views never carry
``delete_password`` or ``reported``.
"""
from __future__ import annotations

from typing import List

from . import config
from .errors import NotFound
from .models import Board, Reply, Thread
from .schemas import ReplyFull, ReplyOut, ThreadDetail, ThreadFull, ThreadSummary


def reply_out(reply: Reply) -> ReplyOut:
    return ReplyOut(id=reply.id, text=reply.text, created_on=reply.created_on)


def thread_summary(thread: Thread, reply_limit: int = config.THREAD_REPLY_PREVIEW) -> ThreadSummary:
    recent = sorted(thread.replies, key=lambda r: r.created_on, reverse=True)[:reply_limit]
    return ThreadSummary(
        id=thread.id,
        text=thread.text,
        created_on=thread.created_on,
        bumped_on=thread.bumped_on,
        replies=[reply_out(r) for r in recent],
        replycount=len(thread.replies),
    )


def summarize_board(
    board: Board | None,
    thread_limit: int = config.BOARD_THREAD_LIMIT,
    reply_limit: int = config.THREAD_REPLY_PREVIEW,
) -> List[ThreadSummary]:
    """Most recently bumped threads first, each with its latest replies."""
    if board is None:
        return []
    threads = sorted(board.threads, key=lambda t: t.bumped_on, reverse=True)[:thread_limit]
    return [thread_summary(t, reply_limit) for t in threads]


def thread_detail(board: Board, thread_id: str) -> ThreadDetail:
    thread = board.find_thread(thread_id)
    if thread is None:
        raise NotFound("thread")
    return ThreadDetail(
        id=thread.id,
        text=thread.text,
        created_on=thread.created_on,
        bumped_on=thread.bumped_on,
        replies=[reply_out(r) for r in thread.replies],
    )


def thread_full(thread: Thread) -> ThreadFull:
    return ThreadFull(
        id=thread.id,
        text=thread.text,
        created_on=thread.created_on,
        bumped_on=thread.bumped_on,
        reported=thread.reported,
        delete_password=thread.delete_password,
        replies=[
            ReplyFull(
                id=r.id,
                text=r.text,
                created_on=r.created_on,
                reported=r.reported,
                delete_password=r.delete_password,
            )
            for r in thread.replies
        ],
    )
