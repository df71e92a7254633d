from __future__ import annotations
import asyncio
import structlog
from dailydraw import keys
from dailydraw.config import settings
from dailydraw.schemas.rollover import RolloverResult
from dailydraw.services.announcer import Announcer, build_announcer, format_winners_comment, post_title
from dailydraw.services.daily_prompt import daily_prompt_for, resolve_prompt, set_current_prompt
from dailydraw.services.days import Clock
from dailydraw.services.ledger import close_day
from dailydraw.services.prompts import select_daily
from dailydraw.store import RankingStore, build_store

log = structlog.get_logger()


async def create_post_for_day(store: RankingStore, announcer: Announcer, prompt: str, day: str) -> str:
    post_id = await announcer.create_post(post_title(prompt))
    await store.set(keys.daily_post(day), post_id)
    return post_id


async def _close_previous(store: RankingStore, announcer: Announcer, day: str, result: RolloverResult) -> None:
    record = await close_day(store, day)
    if record is None:
        return
    result.winners = record.submission_ids
    post_id = await store.get(keys.daily_post(day))
    if post_id and record.placements:
        await announcer.post_comment(post_id, format_winners_comment(day, record.placements))


async def _open_new(store: RankingStore, announcer: Announcer, day: str, result: RolloverResult) -> None:
    claim = await store.increment(keys.day_opened(day))
    if claim != 1:
        post_id = await store.get(keys.daily_post(day))
        if post_id:
            log.info("day_open_skipped", date=day, reason="already_opened")
            result.prompt = await resolve_prompt(store, day)
            result.post_id = post_id
            return
        # An earlier run claimed the day but never posted; finish the open
        log.warning("day_open_resumed", date=day)
        prompt = await daily_prompt_for(store, day) or await select_daily(store, day)
    else:
        prompt = await select_daily(store, day)
    await set_current_prompt(store, prompt, day)
    result.prompt = prompt
    result.opened = True
    result.post_id = await create_post_for_day(store, announcer, prompt, day)


async def run_rollover(store: RankingStore, announcer: Announcer, clock: Clock) -> RolloverResult:
    """
    Close yesterday, open today.

    Each phase is guarded by its own once-per-day claim, so reruns are no-ops.
    A rerun finishes an open whose post was never created, and reports a
    close that was claimed but never recorded.
    A failing close is logged and reported but the open phase still runs.
    """
    today = clock.today()
    result = RolloverResult(closed_day=clock.yesterday(), opened_day=today)
    structlog.contextvars.bind_contextvars(rollover_day=today)
    try:
        for phase, day, step in (
            ("close", result.closed_day, _close_previous),
            ("open", result.opened_day, _open_new),
        ):
            try:
                await step(store, announcer, day, result)
            except Exception as e:
                log.exception("rollover_phase_failed", phase=phase, date=day)
                result.errors.append(f"{phase}: {e}")
        result.status = "error" if result.errors else "ok"
        log.info("rollover_finished", status=result.status, winners=result.winners, prompt=result.prompt)
        return result
    finally:
        structlog.contextvars.unbind_contextvars("rollover_day")


async def _run() -> RolloverResult:
    store = build_store(settings.store_backend, settings.redis_url)
    try:
        return await run_rollover(store, build_announcer(), Clock())
    finally:
        await store.close()


def daily_rollover() -> dict:
    # RQ entry point (sync); run the async coroutine
    return asyncio.run(_run()).model_dump()
