from __future__ import annotations
from typing import Literal
from pydantic import BaseModel
from dailydraw.services.badges import BadgeTier


class PromptResponse(BaseModel):
    prompt: str
    date: str


class UserProfile(BaseModel):
    username: str
    win_count: int
    badge: BadgeTier
    has_submitted_today: bool
    date: str


class ProfileResponse(BaseModel):
    status: Literal["ok"] = "ok"
    profile: UserProfile


class InitResponse(BaseModel):
    type: Literal["init"] = "init"
    username: str
    prompt: str
    date: str
    profile: UserProfile
    has_submitted_prompt_today: bool
    is_moderator: bool
