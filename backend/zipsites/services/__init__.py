"""Business logic services — singleton registry."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from zipsites.config import settings

if TYPE_CHECKING:
    from zipsites.services.sweeper import SweepScheduler

logger = logging.getLogger(__name__)

_sweeper: SweepScheduler | None = None


async def init_services() -> None:
    """Create and start background services."""
    global _sweeper

    from zipsites.services.sweeper import SweepScheduler

    if settings.sweep_interval_minutes > 0:
        _sweeper = SweepScheduler()
        _sweeper.start()
    else:
        logger.warning(
            "Orphan sweeper disabled (ZIPSITES_SWEEP_INTERVAL_MINUTES=0) — "
            "objects of failed uploads are never reclaimed"
        )


async def shutdown_services() -> None:
    """Stop background services."""
    global _sweeper
    if _sweeper:
        await _sweeper.stop()
        _sweeper = None

