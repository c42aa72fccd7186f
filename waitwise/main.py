from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
import logging

from waitwise import config, runtime
from waitwise.auth import require_token
from waitwise.errors import LLMError, NotFoundError, SearchUnavailableError, UpstreamError
from waitwise.routers import chat, parks, waits
from waitwise.scheduler import start_scheduler, stop_scheduler

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s  %(levelname)-8s  %(name)s — %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting WaitWise API...")
    await runtime.startup()
    start_scheduler()
    yield
    logger.info("Shutting down...")
    stop_scheduler()
    await runtime.shutdown()


app = FastAPI(
    title="WaitWise — Theme-Park Companion API",
    description=(
        "Live ride wait times and web-augmented answers for a theme-park companion app. "
        "Resolves park and ride names, caches upstream wait times briefly and falls back "
        "across several search providers."
    ),
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

protected = [Depends(require_token)]
app.include_router(parks.router, tags=["parks"], dependencies=protected)
app.include_router(waits.router, tags=["waits"], dependencies=protected)
app.include_router(chat.router, dependencies=protected)


# ──────────────────────────────────────────────
# Error mapping
# ──────────────────────────────────────────────

@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(UpstreamError)
async def upstream_handler(request: Request, exc: UpstreamError):
    logger.warning(f"Upstream error on {request.url.path}: {exc}")
    return JSONResponse(status_code=502, content={"detail": f"Wait-time provider unavailable ({exc})."})


@app.exception_handler(SearchUnavailableError)
async def search_unavailable_handler(request: Request, exc: SearchUnavailableError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(LLMError)
async def llm_handler(request: Request, exc: LLMError):
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.get("/", tags=["root"])
async def root():
    return {
        "api": "WaitWise Theme-Park Companion API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health", tags=["root"])
async def health():
    return {"status": "ok"}
