from __future__ import annotations
from fastapi import APIRouter, Depends
from dailydraw.auth_deps import get_clock, get_current_username, get_optional_username, get_store, require_moderator
from dailydraw.errors import NotFound
from dailydraw.models.proposal import PromptProposal
from dailydraw.schemas.proposal import (
    AckResponse,
    PromptListResponse,
    PromptSubmitRequest,
    PromptSubmitResponse,
    PromptTopResponse,
    PromptVoteRequest,
)
from dailydraw.schemas.submission import VoteResponse
from dailydraw.services import prompts
from dailydraw.services.daily_prompt import daily_prompt_for
from dailydraw.services.days import Clock
from dailydraw.store import RankingStore

router = APIRouter(prefix="/api/prompt", tags=["prompts"])


@router.post("/submit", response_model=PromptSubmitResponse)
async def submit_prompt(
    payload: PromptSubmitRequest,
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    username: str = Depends(get_current_username),
):
    p = await prompts.propose(store, username, clock.today(), payload.text, now=clock.now())
    return PromptSubmitResponse(prompt_id=p.id)


@router.post("/vote", response_model=VoteResponse)
async def vote_prompt(
    payload: PromptVoteRequest,
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    username: str = Depends(get_current_username),
):
    count = await prompts.vote_on_proposal(store, payload.prompt_id.strip(), username, clock.today())
    return VoteResponse(vote_count=count)


@router.get("/list", response_model=PromptListResponse)
async def list_prompts(
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    username: str | None = Depends(get_optional_username),
):
    return PromptListResponse(prompts=await prompts.list_pending(store, username), date=clock.today())


@router.get("/top", response_model=PromptTopResponse)
async def top_prompt(store: RankingStore = Depends(get_store), clock: Clock = Depends(get_clock)):
    # Only the proposal promoted for today; overrides and rotation are not reported here
    day = clock.today()
    return PromptTopResponse(prompt=await daily_prompt_for(store, day), date=day)


@router.post("/admin/select", response_model=AckResponse)
async def admin_select(
    payload: PromptVoteRequest,
    store: RankingStore = Depends(get_store),
    clock: Clock = Depends(get_clock),
    _mod: str = Depends(require_moderator),
):
    await prompts.admin_select(store, payload.prompt_id.strip(), clock.today())
    return AckResponse(message="Prompt selected for today")


@router.post("/admin/reject", response_model=AckResponse)
async def admin_reject(
    payload: PromptVoteRequest,
    store: RankingStore = Depends(get_store),
    _mod: str = Depends(require_moderator),
):
    await prompts.admin_reject(store, payload.prompt_id.strip())
    return AckResponse(message="Prompt rejected")


@router.get("/{prompt_id}", response_model=PromptProposal)
async def get_prompt(prompt_id: str, store: RankingStore = Depends(get_store)):
    p = await prompts.get_proposal(store, prompt_id)
    if not p:
        raise NotFound("Prompt not found")
    return p
