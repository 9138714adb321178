"""LotFit — FastAPI application entry point."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lotfit.config import settings
from lotfit.logging_utils import configure_logging
from lotfit.api.routes_site import router as site_router

__version__ = "0.1.0"

configure_logging(settings.log_level)

app = FastAPI(
    title=settings.app_name,
    version=__version__,
    description="Fit a house footprint inside a lot's setback envelope and FSR boundary.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(site_router, prefix="/api")


@app.get("/api/health")
async def health():
    return {"status": "ok", "version": __version__}
