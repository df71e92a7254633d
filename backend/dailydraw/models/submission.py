from __future__ import annotations
from datetime import datetime
from pydantic import BaseModel, Field


class Submission(BaseModel):
    """Stored drawing. One per (username, date); never updated after creation."""

    id: str                 # "s<n>", assigned from the submission counter
    username: str
    date: str               # day key, e.g. '2025-01-10' (UTC)
    timestamp: datetime
    image_url: str          # data URL; the core never decodes it


class Placement(BaseModel):
    rank: int
    submission_id: str
    username: str
    vote_count: int


class WinRecord(BaseModel):
    date: str
    # [first, second, third]; '' for an empty slot
    submission_ids: list[str]
    # Filled by close_day only; the stored form is the id triple
    placements: list[Placement] = Field(default_factory=list)

    @property
    def placed(self) -> list[str]:
        return [s for s in self.submission_ids if s]
