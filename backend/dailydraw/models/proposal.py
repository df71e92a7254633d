from __future__ import annotations
from datetime import datetime
from typing import Literal
from pydantic import BaseModel

ProposalStatus = Literal["pending", "selected", "rejected", "used"]


class PromptProposal(BaseModel):
    id: str                 # "p<n>"
    text: str
    created_by: str
    created_at: datetime
    status: ProposalStatus = "pending"
    selected_for: str | None = None     # day key the prompt ran on, once used
