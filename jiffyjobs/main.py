from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jiffyjobs.application.use_cases.notifications import NotificationEmailThrottle
from jiffyjobs.config import get_settings
from jiffyjobs.infrastructure.database import engine, initialize_database
from jiffyjobs.infrastructure.rate_limit import MessageRateLimiter
from jiffyjobs.infrastructure.realtime import RealtimeGateway, RealtimePublisher
from jiffyjobs.interfaces.api.routes import register_routes


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create missing tables on startup and release pooled connections on shutdown."""

    initialize_database()
    yield
    await app.state.realtime_publisher.drain()
    engine.dispose()


def create_app() -> FastAPI:
    """Build the FastAPI application with its realtime gateway and limiters."""

    settings = get_settings()
    app = FastAPI(title="JiffyJobs Realtime", lifespan=lifespan)

    gateway = RealtimeGateway()
    app.state.realtime_gateway = gateway
    app.state.realtime_publisher = RealtimePublisher(gateway)
    app.state.message_rate_limiter = MessageRateLimiter(
        settings.message_rate_limit, settings.message_rate_window_seconds
    )
    # Email is optional; without SendGrid credentials notifications are in-app only.
    app.state.email_throttle = (
        NotificationEmailThrottle(settings.email_throttle_minutes * 60)
        if settings.sendgrid_api_key
        else None
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)
    return app
