from __future__ import annotations
from typing import Literal
from pydantic import BaseModel, Field


class RolloverResult(BaseModel):
    status: Literal["ok", "error"] = "ok"
    closed_day: str
    opened_day: str
    # None when the day was empty or already closed
    winners: list[str] | None = None
    opened: bool = False
    prompt: str | None = None
    post_id: str | None = None
    errors: list[str] = Field(default_factory=list)
