from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.adapters.api.controllers.arrivals import router as arrivals_router
from src.adapters.api.controllers.riders import router as riders_router
from src.adapters.api.dependencies import get_refresh_service, get_session_registry


def _env_bool(name: str) -> bool:
    return (os.getenv(name) or "").strip().lower() in {"1", "true", "yes", "on"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    refresher = get_refresh_service()
    if not _env_bool("BUSETA_DISABLE_FEED_REFRESH"):
        refresher.start()
    try:
        yield
    finally:
        await get_session_registry().shutdown()
        await refresher.stop()


app = FastAPI(title="BusETA", lifespan=lifespan)
app.include_router(arrivals_router)
app.include_router(riders_router)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Keep API errors as JSON so clients can always decode them."""

    logging.getLogger("uvicorn.error").exception(
        "Unhandled exception", extra={"path": str(request.url.path)}
    )

    if _env_bool("BUSETA_REVEAL_ERRORS") or isinstance(exc, (RuntimeError, ValueError)):
        detail = str(exc) or exc.__class__.__name__
    else:
        detail = "Internal Server Error"

    return JSONResponse(status_code=500, content={"detail": detail})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
