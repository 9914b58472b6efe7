from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import JSON, DateTime, Integer, String, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from .errors import NotFound, OperationFailed
from .models import Board, thread_from_doc, thread_to_doc
from .utils import now_utc

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class BoardRecord(Base):
    """One row per board; threads and replies live in the JSON document."""

    __tablename__ = "boards"
    name: Mapped[str] = mapped_column(String(255), primary_key=True)
    threads: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    version: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


def make_engine(url: str):
    kwargs: dict[str, Any] = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # a single shared connection keeps the in-memory database alive
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def _to_board(record: BoardRecord) -> Board:
    return Board(
        name=record.name,
        threads=[thread_from_doc(doc) for doc in record.threads or []],
        version=record.version,
    )


class SqlStorage:
    """Board aggregates persisted through SQLAlchemy.

    Same contract as :class:`anonboard.storage.Storage`; database errors
    surface as :class:`OperationFailed`.
    """

    def __init__(self, url: str) -> None:
        self.engine = make_engine(url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.init_db()

    def init_db(self) -> None:
        try:
            Base.metadata.create_all(bind=self.engine)
        except SQLAlchemyError as exc:
            raise OperationFailed("could not create tables") from exc

    def find_board(self, name: str) -> Optional[Board]:
        try:
            with self.SessionLocal() as session:
                record = session.get(BoardRecord, name)
                return _to_board(record) if record is not None else None
        except SQLAlchemyError as exc:
            logger.error("Failed to load board %r: %s", name, exc)
            raise OperationFailed("could not load board") from exc

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
        documents = [thread_to_doc(t) for t in board.threads]
        try:
            with self.SessionLocal() as session:
                record = session.get(BoardRecord, board.name)
                if record is None:
                    record = BoardRecord(name=board.name, threads=documents, version=1)
                    session.add(record)
                else:
                    record.threads = documents
                    record.version = record.version + 1
                session.commit()
                board.version = record.version
        except SQLAlchemyError as exc:
            logger.error("Failed to save board %r: %s", board.name, exc)
            raise OperationFailed("could not save board") from exc
        return board
