from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# === Domain objects stored inside a board aggregate ===


@dataclass
class Reply:
    id: str
    text: str
    created_on: datetime
    delete_password: str
    reported: bool = False


@dataclass
class Thread:
    id: str
    text: str
    created_on: datetime
    bumped_on: datetime
    delete_password: str
    reported: bool = False
    replies: List[Reply] = field(default_factory=list)

    def find_reply(self, reply_id: str) -> Optional[Reply]:
        for reply in self.replies:
            if reply.id == reply_id:
                return reply
        return None


@dataclass
class Board:
    name: str
    threads: List[Thread] = field(default_factory=list)
    version: int = 0

    def find_thread(self, thread_id: str) -> Optional[Thread]:
        for thread in self.threads:
            if thread.id == thread_id:
                return thread
        return None

    def remove_thread(self, thread_id: str) -> None:
        self.threads = [t for t in self.threads if t.id != thread_id]


# === Document form (what the stores persist) ===


def reply_to_doc(reply: Reply) -> Dict[str, Any]:
    return {
        "id": reply.id,
        "text": reply.text,
        "created_on": reply.created_on.isoformat(),
        "reported": reply.reported,
        "delete_password": reply.delete_password,
    }


def reply_from_doc(doc: Dict[str, Any]) -> Reply:
    return Reply(
        id=doc["id"],
        text=doc["text"],
        created_on=datetime.fromisoformat(doc["created_on"]),
        reported=doc.get("reported", False),
        delete_password=doc["delete_password"],
    )


def thread_to_doc(thread: Thread) -> Dict[str, Any]:
    return {
        "id": thread.id,
        "text": thread.text,
        "created_on": thread.created_on.isoformat(),
        "bumped_on": thread.bumped_on.isoformat(),
        "reported": thread.reported,
        "delete_password": thread.delete_password,
        "replies": [reply_to_doc(r) for r in thread.replies],
    }


def thread_from_doc(doc: Dict[str, Any]) -> Thread:
    return Thread(
        id=doc["id"],
        text=doc["text"],
        created_on=datetime.fromisoformat(doc["created_on"]),
        bumped_on=datetime.fromisoformat(doc["bumped_on"]),
        reported=doc.get("reported", False),
        delete_password=doc["delete_password"],
        replies=[reply_from_doc(r) for r in doc.get("replies", [])],
    )


# === Request schemas ===


class RequestBody(BaseModel):
    @field_validator("*")
    @classmethod
    def utf8_text(cls, value: Any) -> Any:
        # lone surrogates from JSON escapes cannot be written back out
        if isinstance(value, str):
            try:
                value.encode("utf-8")
            except UnicodeEncodeError:
                raise ValueError("not valid UTF-8 text")
        return value


class ThreadCreate(RequestBody):
    text: str
    delete_password: str = ""


class ThreadReport(RequestBody):
    report_id: str = Field(min_length=1)


class ThreadDelete(RequestBody):
    thread_id: str = Field(min_length=1)
    delete_password: str = ""


class ReplyCreate(RequestBody):
    thread_id: str = Field(min_length=1)
    text: str
    delete_password: str = ""


class ReplyReport(RequestBody):
    thread_id: str = Field(min_length=1)
    reply_id: str = Field(min_length=1)


class ReplyDelete(RequestBody):
    thread_id: str = Field(min_length=1)
    reply_id: str = Field(min_length=1)
    delete_password: str = ""
