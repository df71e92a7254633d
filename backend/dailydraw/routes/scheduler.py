from __future__ import annotations
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from redis import Redis
from rq import Queue
from dailydraw.auth_deps import get_announcer, get_clock, get_store, require_scheduler
from dailydraw.config import settings
from dailydraw.jobs.daily_rollover import daily_rollover, run_rollover
from dailydraw.services.announcer import Announcer
from dailydraw.services.days import Clock
from dailydraw.store import RankingStore

router = APIRouter(prefix="/internal/scheduler", tags=["scheduler"], dependencies=[Depends(require_scheduler)])

_queue: Queue | None = None

def get_queue() -> Queue:
    # RQ queue (lazy single instance)
    global _queue
    if _queue is None:
        _queue = Queue(settings.rq_queue, connection=Redis.from_url(settings.redis_url))
    return _queue


@router.post("/daily-rollover")
async def rollover_now(
    store: RankingStore = Depends(get_store),
    announcer: Announcer = Depends(get_announcer),
    clock: Clock = Depends(get_clock),
):
    """Cron target (00:01 UTC): close yesterday, open today."""
    result = await run_rollover(store, announcer, clock)
    return JSONResponse(result.model_dump(), status_code=200 if result.status == "ok" else 500)


@router.post("/daily-rollover/enqueue", status_code=202)
async def rollover_enqueue(queue: Queue = Depends(get_queue)):
    job = queue.enqueue(daily_rollover, job_timeout=300)
    return {"status": "queued", "job_id": job.id}
