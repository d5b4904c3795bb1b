"""Per-system exploration progress and the exploration log.

Each system yields a limited number of exploration events, derived from how
many celestial bodies it holds. The tracker moves a system from unexplored
through partially explored to fully explored, and keeps a reverse-chronological
log of every completed event.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from ..states import ExplorationState
from .events import ExplorationEvent, generate_exploration_event
from .galaxy import SpaceEntity, count_celestial_bodies

logger = logging.getLogger(__name__)

EventGenerator = Callable[[SpaceEntity, Optional[random.Random]], ExplorationEvent]


def max_explorations_for(system: SpaceEntity) -> int:
    """At least one exploration, and at least two when there is more than one body."""
    body_count = count_celestial_bodies(system)
    maximum = max(1, body_count)
    if body_count > 1:
        maximum = max(2, maximum)
    return maximum


@dataclass
class ExplorationStatus:
    system_id: str
    explorations_completed: int
    max_explorations: int

    @property
    def state(self) -> ExplorationState:
        return ExplorationState.from_counts(self.explorations_completed, self.max_explorations)

    @property
    def fully_explored(self) -> bool:
        return self.explorations_completed >= self.max_explorations

    @property
    def remaining(self) -> int:
        return max(0, self.max_explorations - self.explorations_completed)


@dataclass(frozen=True)
class LogEntry:
    """A completed exploration recorded in the log."""

    sequence: int
    system_id: str
    system_name: str
    event: ExplorationEvent


@dataclass(frozen=True)
class ExplorationResult:
    """Outcome of beginning or continuing an exploration."""

    system_id: str
    event: Optional[ExplorationEvent]
    can_continue: bool
    fully_explored: bool


class ExplorationTracker:
    """Tracks exploration status, pending events and the log for one game.

    All mutations take the tracker's lock, so concurrent calls for the same
    system can never push its completed count past the maximum.
    """

    def __init__(
        self,
        rng: random.Random | None = None,
        event_generator: EventGenerator = generate_exploration_event,
    ) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._generate_event = event_generator
        self._lock = threading.Lock()
        self._statuses: dict[str, ExplorationStatus] = {}
        self._pending: dict[str, ExplorationEvent] = {}
        self._explored: set[str] = set()
        self._log: list[LogEntry] = []  # newest first
        self._sequence = 0

    # -- queries -----------------------------------------------------------

    def _status(self, system: SpaceEntity) -> ExplorationStatus:
        status = self._statuses.get(system.id)
        if status is None:
            status = ExplorationStatus(system.id, 0, max_explorations_for(system))
            self._statuses[system.id] = status
        return status

    def get_status(self, system: SpaceEntity) -> ExplorationStatus:
        """Snapshot of a system's progress."""
        with self._lock:
            status = self._status(system)
            return ExplorationStatus(status.system_id, status.explorations_completed, status.max_explorations)

    def get_state(self, system: SpaceEntity) -> ExplorationState:
        return self.get_status(system).state

    def pending_event(self, system_id: str) -> ExplorationEvent | None:
        with self._lock:
            return self._pending.get(system_id)

    def is_explored(self, system_id: str) -> bool:
        with self._lock:
            return system_id in self._explored

    @property
    def explored_ids(self) -> frozenset[str]:
        with self._lock:
            return frozenset(self._explored)

    @property
    def log(self) -> tuple[LogEntry, ...]:
        with self._lock:
            return tuple(self._log)

    def log_for(self, system_id: str) -> list[LogEntry]:
        with self._lock:
            return [entry for entry in self._log if entry.system_id == system_id]

    # -- transitions -------------------------------------------------------

    def _roll_event(self, system: SpaceEntity) -> ExplorationResult:
        status = self._status(system)
        if status.fully_explored:
            logger.debug("%s is fully explored", system.id)
            return ExplorationResult(system.id, None, can_continue=False, fully_explored=True)

        event = self._generate_event(system, self._rng)
        self._pending[system.id] = event
        can_continue = status.explorations_completed + 1 < status.max_explorations
        return ExplorationResult(system.id, event, can_continue=can_continue, fully_explored=False)

    def begin_exploration(self, system: SpaceEntity) -> ExplorationResult:
        """Generate an event for the system and hold it as pending."""
        with self._lock:
            result = self._roll_event(system)
        if result.event is not None:
            logger.info("exploring %s: %s", system.id, result.event.title)
        return result

    def continue_exploration(self, system: SpaceEntity) -> ExplorationResult:
        """Replace the pending event with a fresh one, without logging it."""
        with self._lock:
            return self._roll_event(system)

    def complete_current_exploration(self, system: SpaceEntity) -> LogEntry | None:
        """Log the pending event and count it towards the system's total."""
        with self._lock:
            event = self._pending.pop(system.id, None)
            if event is None:
                return None
            status = self._status(system)
            if status.fully_explored:
                return None
            status.explorations_completed += 1
            self._explored.add(system.id)
            self._sequence += 1
            entry = LogEntry(self._sequence, system.id, system.name, event)
            self._log.insert(0, entry)
            completed, maximum = status.explorations_completed, status.max_explorations
        logger.info("completed exploration %d/%d of %s", completed, maximum, system.id)
        return entry

    def mark_explored(self, system_id: str) -> None:
        """Flag a system as explored without logging an event (after a jump)."""
        with self._lock:
            self._explored.add(system_id)

    def reset_exploration(self, system: SpaceEntity) -> None:
        """Forget all progress on one system. Travel history is not affected."""
        with self._lock:
            self._statuses.pop(system.id, None)
            self._pending.pop(system.id, None)
            self._explored.discard(system.id)
            self._log = [entry for entry in self._log if entry.system_id != system.id]
        logger.info("reset exploration of %s", system.id)

    def restore(self, explored_ids: Iterable[str]) -> None:
        """Start over with the given explored set, as after loading a save."""
        with self._lock:
            self._statuses.clear()
            self._pending.clear()
            self._log.clear()
            self._explored = set(explored_ids)
            self._sequence = 0
