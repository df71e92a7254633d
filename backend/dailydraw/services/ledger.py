from __future__ import annotations
import json
from datetime import datetime, timezone as dt_tz
import structlog
from dailydraw import keys
from dailydraw.config import settings
from dailydraw.errors import (
    AlreadySubmittedToday,
    AlreadyVoted,
    CloseIncomplete,
    InvalidImage,
    NotFound,
    PayloadTooLarge,
    RateLimited,
    SelfVote,
)
from dailydraw.models.submission import Placement, Submission, WinRecord
from dailydraw.schemas.submission import LeaderboardEntry, SubmissionView
from dailydraw.store import RankingStore

log = structlog.get_logger()

PNG_DATA_URL = "data:image/png;base64,"
PODIUM_SIZE = 3

# ---------- helpers: reads ----------

async def _json_list(store: RankingStore, key: str) -> list[str]:
    raw = await store.get(key)
    return json.loads(raw) if raw else []

async def get_submission(store: RankingStore, submission_id: str) -> Submission | None:
    raw = await store.get(keys.submission(submission_id))
    return Submission.model_validate_json(raw) if raw else None

async def submission_ids_for_day(store: RankingStore, day: str) -> list[str]:
    return await _json_list(store, keys.submissions_for_day(day))

async def has_submitted(store: RankingStore, username: str, day: str) -> bool:
    return bool(await store.get(keys.user_submission(username, day)))

async def vote_count(store: RankingStore, submission_id: str) -> int:
    return len(await store.hgetall(keys.votes(submission_id)))

async def has_voted(store: RankingStore, submission_id: str, username: str) -> bool:
    return bool(await store.hget(keys.votes(submission_id), username))

async def win_count(store: RankingStore, username: str) -> int:
    raw = await store.get(keys.user_wins(username))
    return int(raw) if raw else 0

# ---------- submit / vote ----------

def sanitize_image(raw: str, max_length: int) -> str:
    """Accept a data URL or raw base64; return the bare base64 payload."""
    trimmed = (raw or "").strip()
    payload = trimmed.partition(",")[2] if trimmed.startswith("data:") else trimmed
    if not payload:
        raise InvalidImage()
    if len(payload) > max_length:
        raise PayloadTooLarge()
    return payload


async def submit(
    store: RankingStore,
    username: str,
    day: str,
    image_base64: str,
    *,
    now: datetime | None = None,
    max_image_length: int | None = None,
) -> Submission:
    payload = sanitize_image(image_base64, max_image_length or settings.max_image_base64_length)
    if await has_submitted(store, username, day):
        raise AlreadySubmittedToday()

    n = await store.increment(keys.SUBMISSION_ID)
    sub = Submission(
        id=f"s{n}",
        username=username,
        date=day,
        timestamp=now or datetime.now(dt_tz.utc),
        image_url=PNG_DATA_URL + payload,
    )
    ids = await submission_ids_for_day(store, day)
    ids.append(sub.id)
    await store.set(keys.submissions_for_day(day), json.dumps(ids))
    await store.set(keys.submission(sub.id), sub.model_dump_json())
    await store.set(keys.user_submission(username, day), sub.id)
    log.info("submission_created", submission_id=sub.id, username=username, date=day)
    return sub


async def list_for_day(store: RankingStore, day: str, viewer: str | None) -> list[SubmissionView]:
    out: list[SubmissionView] = []
    for sid in await submission_ids_for_day(store, day):
        sub = await get_submission(store, sid)
        if not sub:
            continue
        out.append(SubmissionView(
            **sub.model_dump(),
            vote_count=await vote_count(store, sid),
            has_voted=await has_voted(store, sid, viewer) if viewer else False,
        ))
    return out


async def vote(
    store: RankingStore,
    submission_id: str,
    voter: str,
    day: str,
    *,
    limit: int | None = None,
) -> int:
    """Record one vote and return the submission's new count."""
    sub = await get_submission(store, submission_id)
    if not sub:
        raise NotFound("Submission not found")
    if sub.username == voter:
        raise SelfVote("You cannot vote for your own submission")

    ceiling = limit if limit is not None else settings.max_votes_per_user_per_day
    count_key = keys.user_vote_count(voter, day)
    used = int(await store.get(count_key) or 0)
    if used >= ceiling:
        raise RateLimited()
    if await has_voted(store, submission_id, voter):
        raise AlreadyVoted()

    await store.hset(keys.votes(submission_id), voter, "1")
    await store.increment(count_key)
    count = await vote_count(store, submission_id)
    log.info("vote_cast", submission_id=submission_id, voter=voter, date=day, vote_count=count)
    return count

# ---------- ranking & close ----------

async def rank_day(store: RankingStore, day: str) -> list[tuple[Submission, int]]:
    """
    All submissions for `day` with live vote counts, best first.
    Ties go to the earlier submission; index position settles equal timestamps.
    """
    rows: list[tuple[int, Submission, int]] = []
    for pos, sid in enumerate(await submission_ids_for_day(store, day)):
        sub = await get_submission(store, sid)
        if sub:
            rows.append((pos, sub, await vote_count(store, sid)))
    rows.sort(key=lambda r: (-r[2], r[1].timestamp, r[0]))
    return [(sub, votes) for _pos, sub, votes in rows]


async def leaderboard(store: RankingStore, day: str) -> list[LeaderboardEntry]:
    ranked = await rank_day(store, day)
    return [
        LeaderboardEntry(
            rank=i + 1,
            submission_id=sub.id,
            username=sub.username,
            vote_count=votes,
            image_url=sub.image_url,
        )
        for i, (sub, votes) in enumerate(ranked[:PODIUM_SIZE])
    ]


async def get_winners(store: RankingStore, day: str) -> WinRecord | None:
    ids = await _json_list(store, keys.winners(day))
    return WinRecord(date=day, submission_ids=ids) if ids else None


async def close_day(store: RankingStore, day: str) -> WinRecord | None:
    """
    Persist the day's podium and credit each placed author one win.

    Returns None for a day without submissions or one already closed. The
    close marker is claimed with an atomic increment before anything is
    written, so a second run (or a concurrent one) never double-credits.
    A claimed day with no stored winners raises CloseIncomplete. Winners are
    written before any win is credited, so clearing the close marker makes
    such a day safe to close again.
    """
    ranked = await rank_day(store, day)
    if not ranked:
        log.info("day_close_skipped", date=day, reason="no_submissions")
        return None

    claim = await store.increment(keys.day_closed(day))
    if claim != 1:
        if not await store.get(keys.winners(day)):
            log.error("day_close_incomplete", date=day)
            raise CloseIncomplete(f"Close of {day} was claimed but no winners were recorded")
        log.info("day_close_skipped", date=day, reason="already_closed")
        return None

    top = ranked[:PODIUM_SIZE]
    ids = [sub.id for sub, _ in top] + [""] * (PODIUM_SIZE - len(top))
    await store.set(keys.winners(day), json.dumps(ids))

    for author in dict.fromkeys(sub.username for sub, _ in top):
        await store.increment(keys.user_wins(author))

    placements = [
        Placement(rank=i + 1, submission_id=sub.id, username=sub.username, vote_count=votes)
        for i, (sub, votes) in enumerate(top)
    ]
    log.info("day_closed", date=day, winners=ids)
    return WinRecord(date=day, submission_ids=ids, placements=placements)
