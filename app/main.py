# File: app/main.py
# Project: community-reports-backend

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from slowapi import _rate_limit_exceeded_handler

from app.core.config import cors_origins_list, settings
from app.core.errors import InvalidTransition, StorageError, ValidationError
from app.core.ratelimit import limiter
from app.db.session import engine, init_db
from app.routers import auth, issues, leaderboard, dashboard

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        init_db(engine)
    yield
    engine.dispose()

app = FastAPI(title="Community Reports API", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_list(),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(ValidationError)
def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"detail": exc.message, "missing": exc.missing})

@app.exception_handler(StorageError)
def storage_error_handler(request: Request, exc: StorageError):
    return JSONResponse(
        status_code=503,
        content={"detail": f"{exc.message}. Please try again later."},
    )

@app.exception_handler(InvalidTransition)
def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"detail": exc.message})

@app.exception_handler(Exception)
def unexpected_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong. Please try again later."})

@app.get("/health")
def health():
    return {"ok": True}

app.include_router(auth.router)
app.include_router(issues.router)
app.include_router(leaderboard.router)
app.include_router(dashboard.router)
