"""
Taskboard - weekly task board with priority capacity rules and text sync.
"""

from fastapi import FastAPI
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError

from taskboard.config import get_settings
from taskboard.database import close_db, init_db
from taskboard.routes import tasks, weeks, exchange
from taskboard.exceptions import register_exception_handlers
from taskboard.logging_config import setup_logging, get_logger

# Initialize logging
setup_logging()
logger = get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    logger.info(f"Starting {settings.app_name} API...")
    try:
        await init_db()
        logger.info("Database initialized")
    except (SQLAlchemyError, OSError):
        logger.exception("Database unavailable; the board will start empty and changes will not persist")
    yield
    await close_db()
    logger.info(f"Shutting down {settings.app_name} API...")


app = FastAPI(
    title=settings.app_name,
    description="Weekly task board with priority capacity rules and plain-text export/import",
    version="0.1.0",
    lifespan=lifespan,
)

# Register custom exception handlers
register_exception_handlers(app)

# Include routers
app.include_router(tasks.router, prefix="/tasks", tags=["Tasks"])
app.include_router(weeks.router, prefix="/weeks", tags=["Weeks"])
app.include_router(exchange.router, prefix="/exchange", tags=["Export/Import"])


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
