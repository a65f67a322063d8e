"""StocMed - FastAPI Backend"""
import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from stocmed.api import drugs, pharmacy, health
from stocmed.core.config import settings
from stocmed.core.database import engine
from stocmed.core.errors import register_error_handlers
from stocmed.core.limiter import limiter
from stocmed.core.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup - initialize database
    from stocmed.core.database import init_db
    await init_db()

    if settings.SEED_SAMPLE_DATA:
        from stocmed.services.seed_service import seed_data
        await seed_data()

    logger.info("StocMed API started (%s)", settings.ENVIRONMENT)
    yield
    # Shutdown
    await engine.dispose()


configure_logging()

app = FastAPI(
    title="StocMed API",
    description="Find medication in stock at nearby pharmacies",
    version="1.0.0",
    lifespan=lifespan,
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Routes
app.include_router(health.router, tags=["Health"])
app.include_router(drugs.router, prefix="/api/v1/drugs", tags=["Drugs"])
app.include_router(pharmacy.router, prefix="/api/v1/pharmacy", tags=["Pharmacy"])
