import logging
import os
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException

# Load env from backend/.env
backend_dir = os.path.dirname(os.path.abspath(__file__))
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv(dotenv_path=os.path.join(backend_dir, ".env"))

# Import after dotenv is loaded
from backend.core.config import settings, validate_config  # noqa: E402
from backend.core.database import create_all_tables, get_database_url  # noqa: E402
from backend.core.errors import (  # noqa: E402
    AppError,
    app_error_handler,
    http_error_handler,
    request_validation_error_handler,
    unhandled_exception_handler,
)
from backend.core.logging import configure_logging  # noqa: E402
from backend.core.middleware.request_id import RequestIdMiddleware  # noqa: E402
from backend.core.rate_limit import FixedWindowLimiter, parse_limit  # noqa: E402
from backend.core.validation import validate_env  # noqa: E402
from backend.api import admin, ai, checkins, coach, domains, grounding, health, momentum, stats  # noqa: E402
from backend.features.admin.service import config_service  # noqa: E402

configure_logging(settings.ENV)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))

logger = logging.getLogger("compoundverse")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting CompoundVerse backend...")
    app.state.startup_time = time.time()
    # Defaults are applied once, here
    config_service.get_config()
    if get_database_url():
        create_all_tables()
    try:
        yield
    finally:
        logger.info("Stopping CompoundVerse backend...")


app = FastAPI(title="CompoundVerse - Backend", lifespan=lifespan)

app.state.ai_rate_limiter = FixedWindowLimiter(parse_limit(settings.AI_RATE_LIMIT_PER_MINUTE) or 20)

# Middlewares
app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(domains.router)
app.include_router(checkins.router)
app.include_router(momentum.router)
app.include_router(grounding.router)
app.include_router(stats.router)
app.include_router(coach.router)
app.include_router(ai.router)
app.include_router(admin.router)
app.include_router(health.router)
app.include_router(health.root_router)
