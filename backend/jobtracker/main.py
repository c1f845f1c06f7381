import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobtracker.config import settings
from jobtracker.routers import jobs, sessions, suggest
from jobtracker.services.session_service import session_registry

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger("jobtracker")

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: one pooled client shared by every upstream call
    app.state.http = httpx.AsyncClient(
        timeout=settings.upstream_timeout_seconds,
        headers={"User-Agent": settings.user_agent},
    )
    logger.info("Job search API started (upstream %s)", settings.jobsuche_base_url)
    yield
    # Shutdown: drop search sessions and close connections
    session_registry.clear()
    await app.state.http.aclose()


app = FastAPI(
    title="Job Tracker Search",
    description="Job offer search, pagination and autocomplete for the job application tracker",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(jobs.router, prefix=settings.api_prefix)
app.include_router(suggest.router, prefix=settings.api_prefix)
app.include_router(sessions.router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    return {"status": "ok", "version": VERSION}
