# matchpoint/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from matchpoint.api.v1.api import api_router
from matchpoint.core.config import settings
from matchpoint.core.exceptions import MatchPointError
from matchpoint.core.kafka_producer import close_kafka_singleton
from matchpoint.core.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    logger.info(f"MatchPoint registration service starting up (env={settings.ENV})")
    yield
    close_kafka_singleton()
    logger.info("MatchPoint registration service shutting down")


app = FastAPI(
    title="MatchPoint Registration Service",
    version="1.0.0",
    description="""
        **MatchPoint Game Registration Service**

        Joins, waitlists and waitlist promotion for scheduled group games.

        ## Features

        * **Registration**: Join a game; confirmed while there is room, waitlisted after
        * **Waitlist Promotion**: Freed slots go to the highest-priority waitlisted players
        * **Priority Scoring**: Ranking from recent attendance in the game's group
        * **Game Lifecycle**: Upcoming, In Progress, Completed, Canceled

        ## Authentication

        All endpoints except `/health` require a JWT via the `Authorization: Bearer <token>` header.
        """,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(MatchPointError)
async def matchpoint_error_handler(request: Request, exc: MatchPointError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "MatchPoint Registration Service is running"}
