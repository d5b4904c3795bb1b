"""Galaxy Explorer — headless game session.

Holds the state a front end needs between turns (galaxy, ship, position,
travel history and exploration progress) and routes every player action to
the model functions that implement it.
"""

from __future__ import annotations

import logging
import random
from pathlib import Path

from .constants import (
    CENTRAL_BLACK_HOLE_ID,
    COMBAT_REPAIR_COST,
    DEFAULT_BINARY_FREQUENCY,
    DEFAULT_NUM_BLACK_HOLES,
    DEFAULT_NUM_SYSTEMS,
    DEFAULT_TRINARY_FREQUENCY,
    NEW_GALAXY_SEED_RANGE,
    REPAIR_COST,
)
from .models.events import MarketInfo, get_system_market_info
from .models.exploration import ExplorationResult, ExplorationTracker, LogEntry
from .models.galaxy import Galaxy, SpaceEntity, StarSystem, generate_galaxy
from .models.navigation import (
    can_jump,
    get_black_hole_link_ids,
    get_jumpable_system_ids,
    get_scanner_range_system_ids,
    jump_boost_candidates,
)
from .models.save import SaveData, SaveLoadError, load_game, save_game
from .models.ships import (
    ShipStats,
    apply_black_hole_jump_damage,
    apply_exploration_event,
    generate_starship,
    repair_system,
    sell_cargo,
    upgrade_system,
)
from .models.starting_system import select_starting_system

logger = logging.getLogger(__name__)


class GameSession:
    """One player's game: the galaxy plus everything that changes as they play."""

    def __init__(
        self,
        num_systems: int = DEFAULT_NUM_SYSTEMS,
        num_black_holes: int = DEFAULT_NUM_BLACK_HOLES,
        binary_frequency: float = DEFAULT_BINARY_FREQUENCY,
        trinary_frequency: float = DEFAULT_TRINARY_FREQUENCY,
        rng: random.Random | None = None,
        save_path: Path | None = None,
    ) -> None:
        self.num_systems = num_systems
        self.num_black_holes = num_black_holes
        self.binary_frequency = binary_frequency
        self.trinary_frequency = trinary_frequency
        self.rng = rng if rng is not None else random.Random()
        self.save_path = save_path

        self.galaxy: Galaxy | None = None
        self.stats: ShipStats | None = None
        self.current_system_id: str | None = None
        self.travel_history: list[str] = []
        self.tracker = ExplorationTracker(rng=self.rng)
        self.game_over = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def seed(self) -> int | None:
        return self.galaxy.seed if self.galaxy is not None else None

    @property
    def explored_ids(self) -> frozenset[str]:
        return self.tracker.explored_ids

    @property
    def current_entity(self) -> SpaceEntity | None:
        if self.galaxy is None or self.current_system_id is None:
            return None
        return self.galaxy.get_entity(self.current_system_id)

    def market_info(self) -> MarketInfo | None:
        entity = self.current_entity
        return get_system_market_info(entity) if entity is not None else None

    def has_repair_facilities(self) -> bool:
        entity = self.current_entity
        if entity is None:
            return False
        market = get_system_market_info(entity)
        if market is not None and market.has_repair:
            return True
        return "space-station" in getattr(entity, "special_features", ())

    def has_market(self) -> bool:
        market = self.market_info()
        return market is not None and market.has_market

    def jumpable_ids(self) -> list[str]:
        if self.galaxy is None or self.stats is None:
            return []
        return get_jumpable_system_ids(
            self.current_entity,
            self.galaxy.star_systems,
            self.stats,
            self.explored_ids,
            self.travel_history,
            self.galaxy.black_holes,
        )

    def scanner_ids(self) -> list[str]:
        if self.galaxy is None or self.stats is None:
            return []
        return get_scanner_range_system_ids(
            self.current_entity, self.galaxy.star_systems, self.stats, self.galaxy.black_holes,
        )

    def black_hole_link_ids(self) -> list[str]:
        if self.galaxy is None or self.stats is None:
            return []
        return get_black_hole_link_ids(self.current_entity, self.galaxy.black_holes, self.stats)

    # ------------------------------------------------------------------
    # Game lifecycle
    # ------------------------------------------------------------------

    def _generate(self, seed: object) -> Galaxy:
        return generate_galaxy(
            seed,
            self.num_systems,
            self.num_black_holes,
            self.binary_frequency,
            self.trinary_frequency,
        )

    def _reset_navigation(self, start_id: str | None) -> None:
        self.current_system_id = start_id
        self.travel_history = [start_id] if start_id else []
        self.tracker.restore([start_id] if start_id else [])

    def _place_ship(self) -> StarSystem | None:
        start = select_starting_system(
            self.galaxy.star_systems, self.stats, self.galaxy.black_holes, rng=self.rng,
        )
        self._reset_navigation(start.id if start is not None else None)
        return start

    def new_game(self, seed: object = None, stats: ShipStats | None = None) -> StarSystem | None:
        """Generate a galaxy and a ship, then place the ship at a starting system."""
        self.galaxy = self._generate(seed)
        if stats is None:
            stats = generate_starship(self.rng.randrange(NEW_GALAXY_SEED_RANGE)).stats
        self.stats = stats
        self.game_over = False
        start = self._place_ship()
        logger.info(
            "new game in galaxy %d starting at %s",
            self.galaxy.seed, start.id if start is not None else "nowhere",
        )
        return start

    def _check_destroyed(self) -> None:
        if self.stats is not None and self.stats.is_destroyed and not self.game_over:
            self.game_over = True
            logger.warning("ship lost (hull %d, crew %d)", self.stats.hull, self.stats.crew)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def _arrive(self, target_id: str) -> None:
        self.current_system_id = target_id
        self.tracker.mark_explored(target_id)
        if target_id not in self.travel_history:
            self.travel_history.append(target_id)

    def jump_to_system(self, target_id: str) -> bool:
        """Jump to a system or black hole if it is in reach."""
        if self.galaxy is None or self.stats is None or self.game_over:
            return False
        target = self.galaxy.get_entity(target_id)
        if target is None:
            logger.warning("unknown jump target %s", target_id)
            return False
        if not can_jump(self.current_entity, target, self.stats, self.explored_ids, self.travel_history):
            logger.info("%s is out of jump range", target_id)
            return False
        self._arrive(target_id)
        logger.info("jumped to %s", target_id)
        return True

    def black_hole_jump_boost(self) -> str | None:
        """Slingshot from the current black hole to a random system near another.

        The ship takes jump damage; returns the destination id, or None when
        not at a black hole, no destination exists or the ship is lost on the way.
        """
        if self.galaxy is None or self.stats is None or self.game_over:
            return None
        candidates = [
            system
            for system in jump_boost_candidates(
                self.current_entity, self.galaxy.star_systems, self.galaxy.black_holes,
            )
            if system.id != self.current_system_id
        ]
        if not candidates:
            logger.info("no jump boost destination near %s", self.current_system_id)
            return None

        self.stats = apply_black_hole_jump_damage(self.stats, self.rng)
        self._check_destroyed()
        if self.game_over:
            return None
        target = self.rng.choice(candidates)
        self._arrive(target.id)
        logger.info("jump boost to %s", target.id)
        return target.id

    def jump_to_new_galaxy(self, seed: int | None = None) -> int | None:
        """Leave through the galactic core for a fresh galaxy. Ship stats are kept."""
        if self.galaxy is None or self.stats is None or self.game_over:
            return None
        if self.current_system_id != CENTRAL_BLACK_HOLE_ID:
            return None
        if seed is None:
            seed = self.rng.randrange(NEW_GALAXY_SEED_RANGE)
        self.galaxy = self._generate(seed)
        self._place_ship()
        logger.info("jumped to new galaxy %d", self.galaxy.seed)
        return self.galaxy.seed

    # ------------------------------------------------------------------
    # Exploration
    # ------------------------------------------------------------------

    def begin_exploration(self) -> ExplorationResult | None:
        entity = self.current_entity
        if entity is None or self.game_over:
            return None
        return self.tracker.begin_exploration(entity)

    def continue_exploration(self) -> ExplorationResult | None:
        entity = self.current_entity
        if entity is None or self.game_over:
            return None
        return self.tracker.continue_exploration(entity)

    def complete_exploration(self) -> LogEntry | None:
        """Log the pending event and apply its outcome to the ship."""
        entity = self.current_entity
        if entity is None or self.stats is None:
            return None
        entry = self.tracker.complete_current_exploration(entity)
        if entry is not None:
            self.stats = apply_exploration_event(self.stats, entry.event, self.rng)
            self._check_destroyed()
        return entry

    def reset_exploration(self, system_id: str | None = None) -> bool:
        if self.galaxy is None:
            return False
        entity = self.galaxy.get_entity(system_id or self.current_system_id or "")
        if entity is None:
            return False
        self.tracker.reset_exploration(entity)
        return True

    # ------------------------------------------------------------------
    # Ship services
    # ------------------------------------------------------------------

    def repair(self, target: str = "hull", cost: int | None = None) -> bool:
        """Repair at the current system. Returns True if anything changed."""
        if self.stats is None or not self.has_repair_facilities():
            return False
        if cost is None:
            cost = COMBAT_REPAIR_COST if target == "combat" else REPAIR_COST
        before = self.stats
        self.stats = repair_system(self.stats, target, cost)
        return self.stats != before

    def sell_cargo(self, amount: int) -> int:
        """Sell cargo, at market prices when the system has a market. Returns credits earned."""
        if self.stats is None:
            return 0
        before = self.stats.credits
        self.stats = sell_cargo(self.stats, amount, at_market=self.has_market(), rng=self.rng)
        return self.stats.credits - before

    def upgrade_system(self, stat: str, cost: int, amount: int) -> bool:
        if self.stats is None:
            return False
        before = self.stats
        self.stats = upgrade_system(self.stats, stat, cost, amount)
        return self.stats != before

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self) -> Path | None:
        if self.galaxy is None or self.stats is None:
            return None
        data = SaveData(
            stats=self.stats,
            galaxy_seed=self.galaxy.seed,
            current_system_id=self.current_system_id,
            explored_system_ids=sorted(self.explored_ids),
            travel_history=list(self.travel_history),
        )
        return save_game(data, self.save_path)

    def load(self) -> bool:
        """Restore a saved game. On any failure the current game is left as is."""
        try:
            data = load_game(self.save_path)
        except SaveLoadError as e:
            logger.error("failed to load save: %s", e)
            return False
        if data is None:
            logger.info("no saved game found")
            return False

        self.galaxy = self._generate(data.galaxy_seed)
        self.stats = data.stats
        self.current_system_id = data.current_system_id
        self.travel_history = list(data.travel_history)
        self.tracker.restore(data.explored_system_ids)
        self.game_over = False
        logger.info("resumed game in galaxy %d at %s", data.galaxy_seed, data.current_system_id)
        return True
