"""Logical key layout. Every key lives under the ``ddc:`` namespace."""
from __future__ import annotations

PREFIX = "ddc:"

# ---------- prompts ----------

# Legacy single-slot pointer, rewritten by every rollover
PROMPT_CURRENT = f"{PREFIX}prompt:current"
PROMPT_DATE = f"{PREFIX}prompt:date"
# Moderator override; empty string means cleared
PROMPT_OVERRIDE = f"{PREFIX}prompt:override"

def daily_prompt(day: str) -> str:
    return f"{PREFIX}currentDailyPrompt:{day}"

# ---------- submissions ----------

SUBMISSION_ID = f"{PREFIX}submission:id"

def submissions_for_day(day: str) -> str:
    return f"{PREFIX}submissions:{day}"

def submission(submission_id: str) -> str:
    return f"{PREFIX}submission:{submission_id}"

def user_submission(username: str, day: str) -> str:
    return f"{PREFIX}user_sub:{username}:{day}"

def votes(submission_id: str) -> str:
    return f"{PREFIX}votes:{submission_id}"

def user_vote_count(username: str, day: str) -> str:
    return f"{PREFIX}user_votes:{username}:{day}"

# ---------- results ----------

def winners(day: str) -> str:
    return f"{PREFIX}winners:{day}"

def user_wins(username: str) -> str:
    return f"{PREFIX}user_wins:{username}"

def day_closed(day: str) -> str:
    return f"{PREFIX}closed:{day}"

def day_opened(day: str) -> str:
    return f"{PREFIX}opened:{day}"

def daily_post(day: str) -> str:
    return f"{PREFIX}daily_post:{day}"

# ---------- prompt proposals ----------

PROPOSAL_ID = f"{PREFIX}promptIdCounter"
PROPOSALS_PENDING = f"{PREFIX}prompts:pending"

def proposal(proposal_id: str) -> str:
    return f"{PREFIX}prompt:{proposal_id}"

def proposal_votes(proposal_id: str) -> str:
    return f"{PREFIX}promptVotes:{proposal_id}"

def user_proposal(username: str, day: str) -> str:
    return f"{PREFIX}userPromptSub:{username}:{day}"

def user_proposal_vote_count(username: str, day: str) -> str:
    return f"{PREFIX}userPromptVotes:{username}:{day}"
