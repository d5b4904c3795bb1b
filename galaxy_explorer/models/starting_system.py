"""Spawn point selection for a new game."""

from __future__ import annotations

import logging
import random
from typing import Sequence

from ..constants import MIN_STARTING_DESTINATIONS
from .events import get_system_market_info
from .galaxy import BlackHole, StarSystem
from .navigation import can_jump
from .ships import ShipStats

logger = logging.getLogger(__name__)


def offers_services(system: StarSystem) -> bool:
    market = get_system_market_info(system)
    return market is not None and (market.has_market or market.has_repair)


def _has_destinations(
    system: StarSystem,
    candidates: Sequence[StarSystem | BlackHole],
    stats: ShipStats,
    needed: int,
) -> bool:
    # Stops counting as soon as enough destinations are found
    found = 0
    for other in candidates:
        if can_jump(system, other, stats):
            found += 1
            if found >= needed:
                return True
    return False


def select_starting_system(
    all_systems: Sequence[StarSystem],
    stats: ShipStats,
    all_black_holes: Sequence[BlackHole] = (),
    rng: random.Random | None = None,
) -> StarSystem | None:
    """Pick a start that has services and somewhere to go.

    Prefers systems with a market or repair dock and at least three jump
    destinations, then any system with three destinations, then any system
    at all. Returns None only when there are no systems.
    """
    if not all_systems:
        return None
    if rng is None:
        rng = random.Random()

    destinations = (*all_systems, *all_black_holes)
    connected: dict[str, bool] = {}

    def well_connected(system: StarSystem) -> bool:
        if system.id not in connected:
            connected[system.id] = _has_destinations(
                system, destinations, stats, MIN_STARTING_DESTINATIONS,
            )
        return connected[system.id]

    serviced = [s for s in all_systems if offers_services(s) and well_connected(s)]
    if serviced:
        return rng.choice(serviced)

    reachable = [s for s in all_systems if well_connected(s)]
    if reachable:
        logger.info("no serviced starting system found, relaxing to any connected system")
        return rng.choice(reachable)

    logger.warning("no well connected starting system found, picking any system")
    return rng.choice(list(all_systems))
