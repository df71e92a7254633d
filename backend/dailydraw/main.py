from __future__ import annotations
import uuid
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dailydraw.config import settings
from dailydraw.errors import DailyDrawError
from dailydraw.logging_setup import configure_logging
from dailydraw.routes.system import router as system_router
from dailydraw.routes.drawings import router as drawings_router
from dailydraw.routes.prompts import router as prompts_router
from dailydraw.routes.admin import router as admin_router
from dailydraw.routes.scheduler import router as scheduler_router
from dailydraw.services.announcer import build_announcer
from dailydraw.store import build_store
import structlog

configure_logging()
log = structlog.get_logger()

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    app.state.store = build_store(settings.store_backend, settings.redis_url)
    app.state.announcer = build_announcer()
    log.info("startup", env=settings.environment, version=settings.app_version, git_sha=settings.git_sha, store=settings.store_backend)
    yield
    # Shutdown
    await app.state.store.close()
    log.info("shutdown")

app = FastAPI(
    title=f"{settings.app_display_name} API",
    version=settings.app_version,
    lifespan=lifespan,
    description=f"{settings.app_display_name} API: one drawing a day, community-voted prompts",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.environment == "dev" else settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(system_router)
app.include_router(drawings_router)
app.include_router(prompts_router)
app.include_router(admin_router)
app.include_router(scheduler_router)

@app.exception_handler(DailyDrawError)
async def domain_error(request: Request, exc: DailyDrawError):
    log.info("request_rejected", code=exc.code, status_code=exc.status_code, path=request.url.path)
    return JSONResponse(exc.to_dict(), status_code=exc.status_code)

@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    first = exc.errors()[0] if exc.errors() else {}
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    message = f"{field}: {first.get('msg', 'invalid')}" if field else "Invalid request"
    return JSONResponse({"status": "error", "code": "invalid_request", "message": message}, status_code=422)

@app.exception_handler(Exception)
async def unexpected_error(request: Request, exc: Exception):
    log.exception("unhandled_error", path=request.url.path)
    return JSONResponse({"status": "error", "code": "internal", "message": "Internal error"}, status_code=500)

@app.middleware("http")
async def add_request_id(request: Request, call_next):
    rid = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = rid
    structlog.contextvars.bind_contextvars(request_id=rid)
    response: Response = await call_next(request)
    response.headers["X-Request-ID"] = rid
    structlog.contextvars.clear_contextvars()
    return response
