import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shiftboard.api.rendering import error_body, resolve_locale
from shiftboard.api.routes import (
    auth,
    deadlines,
    manual_assignments,
    shifts,
    stats,
    swap_requests,
    users,
    week_requests,
)
from shiftboard.core.config import settings
from shiftboard.core.errors import ShiftboardError
from shiftboard.db import models  # noqa: F401  registers tables on Base.metadata
from shiftboard.db.database import Base, engine

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    Base.metadata.create_all(bind=engine)
    logger.info(f"Shiftboard started (env={settings.ENV}, catalog={settings.CATALOG_VARIANT})")
    yield


app = FastAPI(title="Shiftboard API", version="0.1.0", lifespan=lifespan)


@app.exception_handler(ShiftboardError)
async def shiftboard_error_handler(request: Request, exc: ShiftboardError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.code}")
    locale = resolve_locale(request.headers.get("accept-language"))
    return JSONResponse(status_code=exc.status_code, content=error_body(exc, locale))


app.include_router(auth.router, prefix="/api/v1")
app.include_router(users.router, prefix="/api/v1")
app.include_router(shifts.router, prefix="/api/v1")
app.include_router(week_requests.router, prefix="/api/v1")
app.include_router(swap_requests.router, prefix="/api/v1")
app.include_router(manual_assignments.router, prefix="/api/v1")
app.include_router(deadlines.router, prefix="/api/v1")
app.include_router(stats.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
