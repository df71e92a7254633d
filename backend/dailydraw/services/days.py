from __future__ import annotations
from datetime import date, datetime, timedelta, timezone as dt_tz

DEFAULT_PROMPTS = [
    "Draw your spirit animal",
    "Draw something that makes you happy",
    "Draw your favorite food",
    "Draw a dream you had",
    "Draw your superpower",
    "Draw something under the sea",
    "Draw your ideal vacation",
    "Draw a robot friend",
    "Draw something cozy",
    "Draw a portal to another world",
]


class Clock:
    """
    UTC clock handing out day keys.

    Pass ``fixed`` to pin "now" (tests, backfills):
        >>> Clock(fixed=datetime(2025, 1, 10, 0, 1, tzinfo=dt_tz.utc)).today()
        '2025-01-10'
    """

    def __init__(self, fixed: datetime | None = None):
        self._fixed = fixed

    def now(self) -> datetime:
        return self._fixed or datetime.now(dt_tz.utc)

    def today(self) -> str:
        return day_key(self.now())

    def yesterday(self) -> str:
        return previous_day(self.today())


def day_key(moment: datetime) -> str:
    return moment.astimezone(dt_tz.utc).date().isoformat()


def parse_day(day: str) -> date:
    return date.fromisoformat(day)


def previous_day(day: str) -> str:
    return (parse_day(day) - timedelta(days=1)).isoformat()


def day_of_year(day: str) -> int:
    """Zero-based: '2025-01-01' -> 0, '2025-12-31' -> 364."""
    d = parse_day(day)
    return (d - date(d.year, 1, 1)).days


def rotation_prompt(day: str) -> str:
    return DEFAULT_PROMPTS[day_of_year(day) % len(DEFAULT_PROMPTS)]
