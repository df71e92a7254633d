from __future__ import annotations
from typing import Awaitable, Callable
import structlog
from dailydraw import keys
from dailydraw.services.days import rotation_prompt
from dailydraw.store import RankingStore

log = structlog.get_logger()

Resolver = Callable[[RankingStore, str], Awaitable["str | None"]]


def _nonblank(value: str | None) -> str | None:
    return value if value else None


async def _override(store: RankingStore, day: str) -> str | None:
    return _nonblank(await store.get(keys.PROMPT_OVERRIDE))


async def _promoted_proposal(store: RankingStore, day: str) -> str | None:
    return _nonblank(await store.get(keys.daily_prompt(day)))


async def _legacy_pointer(store: RankingStore, day: str) -> str | None:
    return _nonblank(await store.get(keys.PROMPT_CURRENT))


# Evaluated in order; the first non-empty answer wins, else the rotation
RESOLVERS: list[tuple[str, Resolver]] = [
    ("override", _override),
    ("proposal", _promoted_proposal),
    ("current", _legacy_pointer),
]


async def resolve_prompt(store: RankingStore, day: str) -> str:
    """Today's drawing topic: override > promoted proposal > current pointer > rotation."""
    for source, resolver in RESOLVERS:
        text = await resolver(store, day)
        if text:
            log.debug("prompt_resolved", date=day, source=source)
            return text
    log.debug("prompt_resolved", date=day, source="rotation")
    return rotation_prompt(day)


async def daily_prompt_for(store: RankingStore, day: str) -> str | None:
    return await _promoted_proposal(store, day)


async def set_daily_prompt(store: RankingStore, day: str, text: str) -> None:
    await store.set(keys.daily_prompt(day), text)


async def set_override(store: RankingStore, text: str) -> str | None:
    """Set (or, with blank text, clear) the moderator override."""
    trimmed = (text or "").strip()
    await store.set(keys.PROMPT_OVERRIDE, trimmed)
    log.info("prompt_override_set" if trimmed else "prompt_override_cleared", prompt=trimmed or None)
    return trimmed or None


async def set_current_prompt(store: RankingStore, text: str, day: str) -> None:
    await store.set(keys.PROMPT_CURRENT, text)
    await store.set(keys.PROMPT_DATE, day)
