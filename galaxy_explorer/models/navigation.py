"""Jump reachability and scanner coverage.

Nothing here is cached: every query is recomputed from the current ship
stats, the explored set and the travel history, so results always reflect
the latest upgrades and exploration.
"""

from __future__ import annotations

from typing import Collection, Iterable, Sequence

from pygame.math import Vector3

from ..constants import (
    BLACK_HOLE_BOOST_RADIUS,
    GALAXY_WIDTH,
    JUMP_RANGE_DIVISOR,
    LONG_RANGE_TECH_LEVEL,
)
from .galaxy import BlackHole, SpaceEntity, StarSystem
from .ships import ShipStats


def max_jump_distance(stats: ShipStats) -> float:
    """Tech level 10 reaches 1/16th of the galaxy width."""
    return (stats.tech_level / 10) * (GALAXY_WIDTH / JUMP_RANGE_DIVISOR)


def scanner_range(stats: ShipStats) -> float:
    """Scanner coverage as a share of the jump range."""
    return (stats.scanners / 100) * max_jump_distance(stats)


def distance_between(a: SpaceEntity, b: SpaceEntity) -> float:
    return Vector3(a.position).distance_to(Vector3(b.position))


def _is_known(
    entity: SpaceEntity | None,
    all_systems: Sequence[StarSystem],
    all_black_holes: Sequence[BlackHole],
) -> bool:
    if entity is None:
        return False
    pool: Iterable[SpaceEntity] = all_black_holes if entity.is_black_hole else all_systems
    return any(candidate.id == entity.id for candidate in pool)


def can_jump(
    from_entity: SpaceEntity | None,
    to_entity: SpaceEntity,
    stats: ShipStats,
    explored_ids: Collection[str] = frozenset(),
    travel_history: Collection[str] = (),
) -> bool:
    """Whether the ship may jump directly from one entity to another."""
    if from_entity is None or to_entity.id == from_entity.id:
        return False

    # Previously visited or explored destinations are always reachable
    if to_entity.id in travel_history:
        return True
    if to_entity.id in explored_ids:
        return True

    # Black hole to black hole travel ignores distance entirely
    if from_entity.is_black_hole and to_entity.is_black_hole:
        return True

    return distance_between(from_entity, to_entity) <= max_jump_distance(stats)


def get_jumpable_system_ids(
    from_entity: SpaceEntity | None,
    all_systems: Sequence[StarSystem],
    stats: ShipStats,
    explored_ids: Collection[str] = frozenset(),
    travel_history: Collection[str] = (),
    all_black_holes: Sequence[BlackHole] = (),
) -> list[str]:
    """Ids of every system and black hole reachable in one jump."""
    if not _is_known(from_entity, all_systems, all_black_holes):
        return []
    explored = set(explored_ids)
    history = set(travel_history)
    return [
        entity.id
        for entity in (*all_systems, *all_black_holes)
        if can_jump(from_entity, entity, stats, explored, history)
    ]


def get_scanner_range_system_ids(
    from_entity: SpaceEntity | None,
    all_systems: Sequence[StarSystem],
    stats: ShipStats,
    all_black_holes: Sequence[BlackHole] = (),
) -> list[str]:
    """Ids within scanner range, whose points of interest are revealed."""
    if not _is_known(from_entity, all_systems, all_black_holes):
        return []
    radius = scanner_range(stats)
    return [
        entity.id
        for entity in (*all_systems, *all_black_holes)
        if entity.id != from_entity.id and distance_between(from_entity, entity) <= radius
    ]


def get_black_hole_link_ids(
    from_entity: SpaceEntity | None,
    all_black_holes: Sequence[BlackHole],
    stats: ShipStats,
) -> list[str]:
    """Long-range black hole lanes, drawn separately from ordinary jump lanes.

    Only ships at LONG_RANGE_TECH_LEVEL or above see them.
    """
    if from_entity is None or stats.tech_level < LONG_RANGE_TECH_LEVEL:
        return []
    reach = max_jump_distance(stats)
    return [
        black_hole.id
        for black_hole in all_black_holes
        if black_hole.id != from_entity.id and distance_between(from_entity, black_hole) <= reach
    ]


def jump_boost_candidates(
    from_entity: SpaceEntity | None,
    all_systems: Sequence[StarSystem],
    all_black_holes: Sequence[BlackHole],
) -> list[StarSystem]:
    """Systems near another black hole, reachable by a black hole jump boost."""
    if from_entity is None or not from_entity.is_black_hole:
        return []
    anchors = [Vector3(bh.position) for bh in all_black_holes if bh.id != from_entity.id]
    return [
        system
        for system in all_systems
        if any(anchor.distance_to(Vector3(system.position)) <= BLACK_HOLE_BOOST_RADIUS for anchor in anchors)
    ]
