"""hookdash FastAPI backend: main application entry point."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hookdash import config
from hookdash.routers.api import logs_router
from hookdash.routers.queries import query_router, tools_router
from hookdash.observability import initialize as initialize_observability, shutdown as shutdown_observability

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("hookdash")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown lifecycle."""
    logger.info("hookdash starting up (log dir: %s)", config.LOG_DIR)
    initialize_observability(app)

    yield

    logger.info("hookdash shutting down")
    shutdown_observability(app)


app = FastAPI(
    title="hookdash API",
    description="Session, tool, and skill analytics over agent hook event logs",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        config.FRONTEND_ORIGIN,
        f"http://localhost:{config.PORT}",
        f"http://127.0.0.1:{config.PORT}",
    ],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(logs_router)
app.include_router(query_router)
app.include_router(tools_router)


@app.get("/api/health")
def health():
    """Health check endpoint."""
    return {
        "status": "ok",
        "logDir": str(config.LOG_DIR),
        "logDirExists": config.LOG_DIR.is_dir(),
    }
