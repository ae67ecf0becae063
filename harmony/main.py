import logging

from fastapi import FastAPI, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from sqlalchemy import text

from harmony.db.base import get_db
from harmony.core.config import settings
from harmony.routers import rooms as rooms_router
from harmony.routers import decisions as decisions_router
from harmony.routers import motivation as motivation_router
from harmony.routers import history as history_router
from harmony.core.errors import (
    HarmonyException,
    harmony_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Harmony Progress API",
    description=(
        "**Progress & Motivation Engine** for a multi-methodology home "
        "organization practice.\n\n"
        "Scores keep/donate/discard decisions (Marie Kondo, Toyota 5S, Lean Six "
        "Sigma, Eastern philosophy), turns effort into levels, tracks streaks and "
        "keeps a 90-day history of room scores.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(HarmonyException, harmony_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(rooms_router.router)
app.include_router(decisions_router.router)
app.include_router(motivation_router.router)
app.include_router(history_router.router)


@app.get("/health", tags=["health"], summary="Health check")
def health(db: Session = Depends(get_db)):
    """
    Returns `{"status": "ok", "db": "ok"}` when both the API and the state
    store are reachable. Returns HTTP 503 if the DB is down.
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "ok"
    except Exception:
        db_status = "unreachable"

    if db_status != "ok":
        return JSONResponse(
            status_code=503,
            content={"status": "error", "db": db_status},
        )
    return {"status": "ok", "db": "ok", "env": settings.APP_ENV}
