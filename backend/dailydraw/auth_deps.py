from __future__ import annotations
import jwt
from fastapi import Depends, Header, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from dailydraw.config import settings
from dailydraw.errors import Forbidden, Unauthenticated
from dailydraw.security import decode_token, is_moderator
from dailydraw.services.announcer import Announcer, build_announcer
from dailydraw.services.days import Clock
from dailydraw.store import RankingStore, build_store

security = HTTPBearer(auto_error=False)

# ---------- collaborators (overridable in tests) ----------

def get_store(request: Request) -> RankingStore:
    store = getattr(request.app.state, "store", None)
    if store is None:
        store = request.app.state.store = build_store(settings.store_backend, settings.redis_url)
    return store

def get_announcer(request: Request) -> Announcer:
    announcer = getattr(request.app.state, "announcer", None)
    if announcer is None:
        announcer = request.app.state.announcer = build_announcer()
    return announcer

def get_clock() -> Clock:
    return Clock()

# ---------- identity ----------

async def get_optional_username(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> str | None:
    if credentials is None:
        return None
    try:
        data = decode_token(credentials.credentials)
    except jwt.PyJWTError:
        raise Unauthenticated("Invalid token")
    if data.get("type") != "access" or not data.get("sub"):
        raise Unauthenticated("Wrong token type")
    return str(data["sub"])

async def get_current_username(username: str | None = Depends(get_optional_username)) -> str:
    if not username:
        raise Unauthenticated()
    return username

async def require_moderator(username: str = Depends(get_current_username)) -> str:
    if not is_moderator(username):
        raise Forbidden()
    return username

async def require_scheduler(x_scheduler_token: str | None = Header(default=None, alias="X-Scheduler-Token")) -> None:
    if not settings.scheduler_token:
        # Open only for local development
        if settings.environment != "dev":
            raise Forbidden("Scheduler token not configured")
        return
    if x_scheduler_token != settings.scheduler_token:
        raise Forbidden("Scheduler token required")
