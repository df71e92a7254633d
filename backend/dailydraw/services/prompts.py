from __future__ import annotations
import json
from datetime import datetime, timezone as dt_tz
import structlog
from dailydraw import keys
from dailydraw.config import settings
from dailydraw.errors import (
    AlreadyProposedToday,
    AlreadyVoted,
    NotFound,
    NotPending,
    Profane,
    RateLimited,
    SelfVote,
    TooLong,
    TooShort,
)
from dailydraw.models.proposal import PromptProposal, ProposalStatus
from dailydraw.schemas.proposal import PromptIdeaDisplay
from dailydraw.services.daily_prompt import set_daily_prompt
from dailydraw.services.days import rotation_prompt
from dailydraw.services.ledger import win_count
from dailydraw.services.profanity import contains_profanity
from dailydraw.store import RankingStore

log = structlog.get_logger()

PROMPT_MIN_LENGTH = 5
PROMPT_MAX_LENGTH = 120

# ---------- helpers: records & pending index ----------

async def get_proposal(store: RankingStore, proposal_id: str) -> PromptProposal | None:
    raw = await store.get(keys.proposal(proposal_id))
    return PromptProposal.model_validate_json(raw) if raw else None

async def _save(store: RankingStore, p: PromptProposal) -> None:
    await store.set(keys.proposal(p.id), p.model_dump_json())

async def pending_ids(store: RankingStore) -> list[str]:
    raw = await store.get(keys.PROPOSALS_PENDING)
    return json.loads(raw) if raw else []

async def _add_pending(store: RankingStore, proposal_id: str) -> None:
    ids = await pending_ids(store)
    if proposal_id not in ids:
        ids.append(proposal_id)
        await store.set(keys.PROPOSALS_PENDING, json.dumps(ids))

async def _drop_pending(store: RankingStore, proposal_id: str) -> None:
    ids = [x for x in await pending_ids(store) if x != proposal_id]
    await store.set(keys.PROPOSALS_PENDING, json.dumps(ids))

async def has_proposed(store: RankingStore, username: str, day: str) -> bool:
    return bool(await store.get(keys.user_proposal(username, day)))

async def proposal_vote_count(store: RankingStore, proposal_id: str) -> int:
    return len(await store.hgetall(keys.proposal_votes(proposal_id)))

async def has_voted_on_proposal(store: RankingStore, proposal_id: str, username: str) -> bool:
    return bool(await store.hget(keys.proposal_votes(proposal_id), username))

# ---------- propose / vote ----------

def validate_text(text: str) -> str:
    cleaned = (text or "").strip()
    if len(cleaned) < PROMPT_MIN_LENGTH:
        raise TooShort(f"Prompt must be at least {PROMPT_MIN_LENGTH} characters")
    if len(cleaned) > PROMPT_MAX_LENGTH:
        raise TooLong(f"Prompt must be at most {PROMPT_MAX_LENGTH} characters")
    if contains_profanity(cleaned):
        raise Profane()
    return cleaned


async def propose(
    store: RankingStore,
    username: str,
    day: str,
    text: str,
    *,
    now: datetime | None = None,
) -> PromptProposal:
    cleaned = validate_text(text)
    if await has_proposed(store, username, day):
        raise AlreadyProposedToday()

    n = await store.increment(keys.PROPOSAL_ID)
    p = PromptProposal(
        id=f"p{n}",
        text=cleaned,
        created_by=username,
        created_at=now or datetime.now(dt_tz.utc),
    )
    await _save(store, p)
    await _add_pending(store, p.id)
    await store.set(keys.user_proposal(username, day), p.id)
    log.info("prompt_proposed", prompt_id=p.id, username=username, date=day)
    return p


async def vote_on_proposal(
    store: RankingStore,
    proposal_id: str,
    voter: str,
    day: str,
    *,
    limit: int | None = None,
) -> int:
    p = await get_proposal(store, proposal_id)
    if not p:
        raise NotFound("Prompt not found")
    if p.status != "pending":
        raise NotPending("Can only vote on pending prompts")
    if p.created_by == voter:
        raise SelfVote("Cannot vote for your own prompt")

    ceiling = limit if limit is not None else settings.max_prompt_votes_per_user_per_day
    count_key = keys.user_proposal_vote_count(voter, day)
    used = int(await store.get(count_key) or 0)
    if used >= ceiling:
        raise RateLimited()
    if await has_voted_on_proposal(store, proposal_id, voter):
        raise AlreadyVoted()

    await store.hset(keys.proposal_votes(proposal_id), voter, "1")
    await store.increment(count_key)
    count = await proposal_vote_count(store, proposal_id)
    log.info("prompt_vote_cast", prompt_id=proposal_id, voter=voter, date=day, vote_count=count)
    return count

# ---------- ranking ----------

async def effective_score(store: RankingStore, p: PromptProposal) -> int:
    """Raw votes plus the author's drawing wins (the win bonus)."""
    return await proposal_vote_count(store, p.id) + await win_count(store, p.created_by)


async def list_pending(store: RankingStore, viewer: str | None) -> list[PromptIdeaDisplay]:
    """Pending proposals, highest effective score first; ties keep submission order."""
    items: list[PromptIdeaDisplay] = []
    for pid in await pending_ids(store):
        p = await get_proposal(store, pid)
        if not p or p.status != "pending":
            continue
        votes = await proposal_vote_count(store, pid)
        items.append(PromptIdeaDisplay(
            id=p.id,
            text=p.text,
            created_by=p.created_by,
            created_at=p.created_at,
            status=p.status,
            vote_count=votes,
            effective_score=votes + await win_count(store, p.created_by),
            has_voted=await has_voted_on_proposal(store, pid, viewer) if viewer else False,
        ))
    # sorted() is stable, so equal scores stay in index order
    return sorted(items, key=lambda i: -i.effective_score)

# ---------- transitions ----------

async def _transition(store: RankingStore, p: PromptProposal, status: ProposalStatus, day: str | None = None) -> PromptProposal:
    updated = p.model_copy(update={"status": status, "selected_for": day or p.selected_for})
    await _save(store, updated)
    await _drop_pending(store, p.id)
    return updated


async def _promote(store: RankingStore, p: PromptProposal, day: str) -> PromptProposal:
    """pending -> used in a single record write; the text becomes `day`'s prompt."""
    used = await _transition(store, p, "used", day)
    await set_daily_prompt(store, day, p.text)
    log.info("prompt_selected", prompt_id=p.id, date=day, text=p.text)
    return used


async def _require_pending(store: RankingStore, proposal_id: str) -> PromptProposal:
    p = await get_proposal(store, proposal_id)
    if not p:
        raise NotFound("Prompt not found")
    if p.status != "pending":
        raise NotPending()
    return p


async def select_daily(store: RankingStore, day: str) -> str:
    """Promote the best pending proposal for `day`, or fall back to the rotation."""
    ranked = await list_pending(store, None)
    if not ranked:
        text = rotation_prompt(day)
        log.info("prompt_fallback", date=day, text=text)
        return text
    winner = await get_proposal(store, ranked[0].id)
    await _promote(store, winner, day)
    return winner.text


async def admin_select(store: RankingStore, proposal_id: str, day: str) -> PromptProposal:
    p = await _require_pending(store, proposal_id)
    return await _promote(store, p, day)


async def admin_reject(store: RankingStore, proposal_id: str) -> PromptProposal:
    p = await _require_pending(store, proposal_id)
    rejected = await _transition(store, p, "rejected")
    log.info("prompt_rejected", prompt_id=proposal_id)
    return rejected
