import asyncio
import contextlib
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

import structlog
from dotenv import load_dotenv
from fastapi import Depends, FastAPI
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from spotfeed.database import AsyncSessionLocal, close_db, get_db
from spotfeed.logging_config import setup_logging
from spotfeed.services.expire_sweeper import expire_sweeper_loop

# Load environment variables
load_dotenv()

# Environment variable parsing
ENV = os.getenv("ENV")
ENV_IS_PROD = ENV == "prod"
COMMIT_HASH = os.getenv("COMMIT_HASH")
if not COMMIT_HASH and ENV_IS_PROD:
    raise ValueError("COMMIT_HASH is required for production environments")

APP_ADDR = os.getenv("HOST", "0.0.0.0")
APP_PORT = int(os.getenv("PORT", "8000"))
EXPIRE_SWEEP_INTERVAL_SECONDS = float(os.getenv("EXPIRE_SWEEP_INTERVAL_SECONDS", "300"))

setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Start the expiry sweeper on startup; stop it and the engine on shutdown."""
    sweeper: Optional[asyncio.Task] = None
    if EXPIRE_SWEEP_INTERVAL_SECONDS > 0:
        sweeper = asyncio.create_task(
            expire_sweeper_loop(AsyncSessionLocal, EXPIRE_SWEEP_INTERVAL_SECONDS)
        )
    yield
    if sweeper is not None:
        sweeper.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await sweeper
    await close_db()


app = FastAPI(
    title="Spot Feed",
    description="Location-based ephemeral group chat data service",
    version=COMMIT_HASH or "dev",
    lifespan=lifespan,
)


@app.get("/health")
async def health_check(db: AsyncSession = Depends(get_db)) -> Dict[str, Optional[str]]:
    """Health check endpoint with database connectivity."""
    try:
        result = await db.execute(text("SELECT 1"))
        db_status = "connected" if result.scalar() == 1 else "error"
    except Exception:
        logger.warning("health_check_database_unavailable", exc_info=True)
        db_status = "disconnected"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "database": db_status,
        "environment": ENV,
        "version": COMMIT_HASH,
    }


# If run directly, start the server
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=APP_ADDR, port=APP_PORT)
