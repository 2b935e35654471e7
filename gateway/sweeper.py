"""
Background maintenance: pending credential expiry and idle session cleanup.
"""
import asyncio
import logging

from credentials import CredentialStore
from protocol import SessionRouter

logger = logging.getLogger(__name__)


async def sweep_once(store: CredentialStore, session_router: SessionRouter) -> None:
    await store.sweep_expired()
    await session_router.sweep_idle()


async def run_sweeper(store: CredentialStore, session_router: SessionRouter, interval: float) -> None:
    """Run ``sweep_once`` every ``interval`` seconds until cancelled"""
    logger.debug(f"Sweeper started (interval {interval}s)")
    while True:
        await asyncio.sleep(interval)
        try:
            await sweep_once(store, session_router)
        except Exception:
            logger.exception("Sweep failed")
