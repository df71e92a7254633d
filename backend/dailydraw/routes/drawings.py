from __future__ import annotations
from fastapi import APIRouter, Depends, Query
from dailydraw.auth_deps import get_clock, get_current_username, get_optional_username, get_store
from dailydraw.errors import InvalidDay
from dailydraw.schemas.profile import InitResponse, ProfileResponse, PromptResponse, UserProfile
from dailydraw.schemas.submission import (
    LeaderboardResponse,
    SubmissionsResponse,
    SubmitRequest,
    SubmitResponse,
    VoteRequest,
    VoteResponse,
    WinnersResponse,
)
from dailydraw.security import is_moderator
from dailydraw.services import ledger
from dailydraw.services.badges import badge_for_win_count
from dailydraw.services.daily_prompt import resolve_prompt
from dailydraw.services.days import Clock, parse_day
from dailydraw.services.prompts import has_proposed
from dailydraw.store import RankingStore

router = APIRouter(prefix="/api", tags=["drawings"])

DayParam = Query(default=None, description="YYYY-MM-DD (UTC); defaults to today")


def _day(day: str | None, clock: Clock) -> str:
    if not day:
        return clock.today()
    try:
        return parse_day(day).isoformat()
    except ValueError:
        raise InvalidDay()


async def _profile(store: RankingStore, username: str, day: str) -> UserProfile:
    wins = await ledger.win_count(store, username)
    return UserProfile(
        username=username,
        win_count=wins,
        badge=badge_for_win_count(wins),
        has_submitted_today=await ledger.has_submitted(store, username, day),
        date=day,
    )


@router.get("/init", response_model=InitResponse)
async def init(
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    username: str | None = Depends(get_optional_username),
):
    day = clock.today()
    name = username or "anonymous"
    return InitResponse(
        username=name,
        prompt=await resolve_prompt(store, day),
        date=day,
        profile=await _profile(store, name, day),
        has_submitted_prompt_today=await has_proposed(store, name, day) if username else False,
        is_moderator=is_moderator(username),
    )


@router.get("/prompt", response_model=PromptResponse)
async def current_prompt(store: RankingStore = Depends(get_store), clock: Clock = Depends(get_clock)):
    day = clock.today()
    return PromptResponse(prompt=await resolve_prompt(store, day), date=day)


@router.post("/submit", response_model=SubmitResponse)
async def submit_drawing(
    payload: SubmitRequest,
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    username: str = Depends(get_current_username),
):
    sub = await ledger.submit(store, username, clock.today(), payload.image_base64, now=clock.now())
    return SubmitResponse(submission_id=sub.id)


@router.get("/submissions", response_model=SubmissionsResponse)
async def list_submissions(
    day: str | None = DayParam,
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    username: str | None = Depends(get_optional_username),
):
    d = _day(day, clock)
    return SubmissionsResponse(submissions=await ledger.list_for_day(store, d, username), date=d)


@router.post("/vote", response_model=VoteResponse)
async def vote(
    payload: VoteRequest,
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    username: str = Depends(get_current_username),
):
    count = await ledger.vote(store, payload.submission_id.strip(), username, clock.today())
    return VoteResponse(vote_count=count)


@router.get("/leaderboard", response_model=LeaderboardResponse)
async def leaderboard(
    day: str | None = DayParam,
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
):
    d = _day(day, clock)
    return LeaderboardResponse(entries=await ledger.leaderboard(store, d), date=d)


@router.get("/winners/{day}", response_model=WinnersResponse)
async def winners(day: str, store: RankingStore = Depends(get_store), clock: Clock = Depends(get_clock)):
    d = _day(day, clock)
    record = await ledger.get_winners(store, d)
    if record is None:
        return WinnersResponse(date=d, closed=False)
    return WinnersResponse(date=d, closed=True, submission_ids=record.submission_ids)


@router.get("/profile", response_model=ProfileResponse)
async def profile(
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    username: str | None = Depends(get_optional_username),
):
    return ProfileResponse(profile=await _profile(store, username or "anonymous", clock.today()))
