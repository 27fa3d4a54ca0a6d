"""FastAPI application — Overtime Compliance API."""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import router
from overtime_tool import __version__

logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:8501",
    "http://127.0.0.1:3000",
]


def allowed_origins(raw: str | None = None) -> list[str]:
    """Origins from a comma-separated ALLOWED_ORIGINS value; "*" allows any."""
    if raw is None:
        raw = os.environ.get("ALLOWED_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    if "*" in origins:
        return ["*"]
    return origins or list(DEFAULT_ORIGINS)


app = FastAPI(
    title="Overtime Compliance API",
    description="Jurisdiction-aware regular / overtime hour breakdowns for timesheets.",
    version=__version__,
)

ALLOWED_ORIGINS = allowed_origins()

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=ALLOWED_ORIGINS != ["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/")
async def root():
    return {
        "name": app.title,
        "version": __version__,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
