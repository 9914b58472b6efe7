from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class Health(BaseModel):
    status: str = "ok"


class _Identified(BaseModel):
    # Clients address entities by ``_id``.
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")


# === Public views (listings) ===


class ReplyOut(_Identified):
    text: str
    created_on: datetime


class ThreadSummary(_Identified):
    text: str
    created_on: datetime
    bumped_on: datetime
    replies: list[ReplyOut]
    replycount: int


class ThreadDetail(_Identified):
    text: str
    created_on: datetime
    bumped_on: datetime
    replies: list[ReplyOut]


# === Full views (creation responses carry every stored field) ===


class ReplyFull(_Identified):
    text: str
    created_on: datetime
    reported: bool
    delete_password: str


class ThreadFull(_Identified):
    text: str
    created_on: datetime
    bumped_on: datetime
    reported: bool
    delete_password: str
    replies: list[ReplyFull]
