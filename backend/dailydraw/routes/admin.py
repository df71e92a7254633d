from __future__ import annotations
from fastapi import APIRouter, Depends
from dailydraw.auth_deps import get_announcer, get_clock, get_store, require_moderator
from dailydraw.jobs.daily_rollover import create_post_for_day
from dailydraw.schemas.proposal import AckResponse, PromptOverrideRequest
from dailydraw.services.announcer import Announcer
from dailydraw.services.daily_prompt import resolve_prompt, set_override
from dailydraw.services.days import Clock
from dailydraw.store import RankingStore

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.post("/prompt-override", response_model=AckResponse)
async def prompt_override(
    payload: PromptOverrideRequest,
    store: RankingStore = Depends(get_store),
    _mod: str = Depends(require_moderator),
):
    text = await set_override(store, payload.prompt)
    if text:
        return AckResponse(message=f"Prompt set to: {text}")
    return AckResponse(message="Prompt override cleared; using default rotation.")


@router.post("/post")
async def create_post(
    store: RankingStore = Depends(get_store),
    announcer: Announcer = Depends(get_announcer),
    clock: Clock = Depends(get_clock),
    _mod: str = Depends(require_moderator),
):
    day = clock.today()
    prompt = await resolve_prompt(store, day)
    post_id = await create_post_for_day(store, announcer, prompt, day)
    return {"status": "ok", "post_id": post_id, "prompt": prompt, "date": day}
