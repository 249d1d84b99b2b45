"""Keyboard bindings for the two time dials."""

import logging
from typing import Callable, Dict, Optional

from planet_sim.physics.scheduler import TickScheduler

logger = logging.getLogger(__name__)

KEY_BINDINGS: Dict[str, Callable[[TickScheduler], float]] = {
    "]": TickScheduler.increase_ticks_per_second,
    "[": TickScheduler.decrease_ticks_per_second,
    "+": TickScheduler.increase_seconds_per_tick,
    "=": TickScheduler.increase_seconds_per_tick,
    "-": TickScheduler.decrease_seconds_per_tick,
}


def handle_key(scheduler: TickScheduler, key: Optional[str]) -> bool:
    """Apply the intent bound to `key`, if any.

    Returns:
        True if the key was bound
    """
    action = KEY_BINDINGS.get(key) if key else None
    if action is None:
        return False
    action(scheduler)
    logger.debug("Key %r -> %g ticks/s, %g s/tick", key, scheduler.ticks_per_second, scheduler.seconds_per_tick)
    return True
