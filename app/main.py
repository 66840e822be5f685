"""FastAPI application entrypoint."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI

from app.adapters.inbound.http.error_handlers import register_error_handlers
from app.adapters.inbound.http.routes import router
from app.adapters.outbound.rate_limit import RedisRateLimiter
from app.infrastructure.wiring.container import get_container

# Load environment variables from .env file
load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Release the shared Redis connection on shutdown."""
    yield
    limiter = get_container().rate_limiter
    if isinstance(limiter, RedisRateLimiter):
        await limiter.close()


app = FastAPI(
    title="Wellness Group Sessions",
    description="Group session coordination: invites, admission, presence and lifecycle",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(router)
register_error_handlers(app)
