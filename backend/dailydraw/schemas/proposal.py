from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel, Field
from dailydraw.models.proposal import ProposalStatus


class PromptSubmitRequest(BaseModel):
    text: str = ""


class PromptSubmitResponse(BaseModel):
    status: Literal["ok"] = "ok"
    prompt_id: str
    message: str = "Prompt submitted!"


class PromptVoteRequest(BaseModel):
    prompt_id: str = Field(min_length=1)


class PromptIdeaDisplay(BaseModel):
    id: str
    text: str
    created_by: str
    created_at: datetime
    status: ProposalStatus
    vote_count: int
    # vote_count plus the author's drawing wins
    effective_score: int
    has_voted: bool = False


class PromptListResponse(BaseModel):
    status: Literal["ok"] = "ok"
    prompts: list[PromptIdeaDisplay]
    date: str


class PromptTopResponse(BaseModel):
    status: Literal["ok"] = "ok"
    prompt: str | None
    date: str


class PromptOverrideRequest(BaseModel):
    prompt: str = ""


class AckResponse(BaseModel):
    status: Literal["ok"] = "ok"
    message: str
