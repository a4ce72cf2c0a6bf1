"""Periodic expiry sweep.

Each pass deactivates joints past their expiry and purges OTP codes that can
no longer be used. Every service replica may run the loop; both steps are
conditional writes, so overlapping passes are harmless.
"""

import asyncio
from datetime import datetime, timezone
from typing import Dict, Optional

import structlog
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from spotfeed.services.joint_lifecycle_service import JointLifecycleService
from spotfeed.services.otp_service import OtpService

logger = structlog.get_logger(__name__)


async def run_expire_sweep(
    session_factory: async_sessionmaker[AsyncSession],
    now: Optional[datetime] = None,
) -> Dict[str, int]:
    """Run one sweep pass and return what it changed."""
    now = now or datetime.now(timezone.utc)
    async with session_factory() as session:
        expired = await JointLifecycleService(session).expire_sweep(now)
        purged = await OtpService(session).purge_stale_codes(now)

    logger.debug("expire_sweep_finished", joints_expired=expired, otp_purged=purged)
    return {"joints_expired": expired, "otp_codes_purged": purged}


async def expire_sweeper_loop(
    session_factory: async_sessionmaker[AsyncSession], interval_seconds: float
) -> None:
    """Background task that sweeps every `interval_seconds` until cancelled."""
    logger.info("expire_sweeper_started", interval_seconds=interval_seconds)
    while True:
        try:
            await run_expire_sweep(session_factory)
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.error("expire_sweep_failed", exc_info=True)

        await asyncio.sleep(interval_seconds)
