from __future__ import annotations
import uuid
from typing import Protocol
import httpx
import structlog
from dailydraw.config import settings
from dailydraw.models.submission import Placement

log = structlog.get_logger()

POST_TITLE_PREFIX = "Daily Draw Challenge"


class Announcer(Protocol):
    async def create_post(self, title: str) -> str: ...
    async def post_comment(self, post_id: str, text: str) -> None: ...


class WebhookAnnouncer:
    """
    Talks to the hosting platform's posting bridge:
      POST {base}/posts                 {"title": ...}  -> {"id": ...}
      POST {base}/posts/{id}/comments   {"text": ...}
    """

    def __init__(self, base_url: str, token: str = "", timeout: float = 10.0, transport: httpx.AsyncBaseTransport | None = None):
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._base_url = base_url.rstrip("/")
        self._headers = headers
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url, headers=self._headers, timeout=self._timeout, transport=self._transport
        )

    async def create_post(self, title: str) -> str:
        async with self._client() as client:
            r = await client.post("/posts", json={"title": title})
            r.raise_for_status()
            post_id = r.json()["id"]
        log.info("post_created", post_id=post_id, title=title)
        return post_id

    async def post_comment(self, post_id: str, text: str) -> None:
        async with self._client() as client:
            r = await client.post(f"/posts/{post_id}/comments", json={"text": text})
            r.raise_for_status()
        log.info("comment_posted", post_id=post_id)


class RecordingAnnouncer:
    """Keeps posts in memory; used when no bridge is configured."""

    def __init__(self):
        self.posts: dict[str, str] = {}
        self.comments: list[tuple[str, str]] = []

    async def create_post(self, title: str) -> str:
        post_id = f"t3_{uuid.uuid4().hex[:8]}"
        self.posts[post_id] = title
        log.info("post_created", post_id=post_id, title=title, sink="memory")
        return post_id

    async def post_comment(self, post_id: str, text: str) -> None:
        self.comments.append((post_id, text))
        log.info("comment_posted", post_id=post_id, sink="memory")


def build_announcer() -> Announcer:
    if settings.announcer_url:
        return WebhookAnnouncer(settings.announcer_url, settings.announcer_token, settings.announcer_timeout_seconds)
    return RecordingAnnouncer()


def post_title(prompt: str) -> str:
    return f"{POST_TITLE_PREFIX}: {prompt}"


def format_winners_comment(day: str, placements: list[Placement]) -> str:
    lines = [
        f"## 🏆 {POST_TITLE_PREFIX} – Winners ({day})",
        "",
        "| Place | Artist | Votes |",
        "|:--|:--|:--|",
        *(f"| {p.rank} | u/{p.username} | {p.vote_count} |" for p in placements),
        "",
        "Great work everyone! See you tomorrow for the next prompt.",
    ]
    return "\n".join(lines)
