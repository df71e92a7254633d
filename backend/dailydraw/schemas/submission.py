from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field


class SubmitRequest(BaseModel):
    image_base64: str = Field(default="", description="PNG data URL or raw base64")


class SubmitResponse(BaseModel):
    status: Literal["ok"] = "ok"
    submission_id: str
    message: str = "Drawing submitted!"


class VoteRequest(BaseModel):
    submission_id: str = Field(min_length=1)


class VoteResponse(BaseModel):
    status: Literal["ok"] = "ok"
    vote_count: int


class SubmissionView(BaseModel):
    id: str
    username: str
    date: str
    timestamp: datetime
    image_url: str
    vote_count: int
    has_voted: bool = False


class SubmissionsResponse(BaseModel):
    status: Literal["ok"] = "ok"
    submissions: list[SubmissionView]
    date: str


class LeaderboardEntry(BaseModel):
    rank: int
    submission_id: str
    username: str
    vote_count: int
    image_url: str


class LeaderboardResponse(BaseModel):
    status: Literal["ok"] = "ok"
    entries: list[LeaderboardEntry]
    date: str


class WinnersResponse(BaseModel):
    status: Literal["ok"] = "ok"
    date: str
    closed: bool
    submission_ids: list[str] = Field(default_factory=list)
