"""Exploration state management for Galaxy Explorer."""

import enum


class ExplorationState(enum.Enum):
    """Per-system exploration progress."""

    UNEXPLORED = "unexplored"
    PARTIALLY_EXPLORED = "partially_explored"
    FULLY_EXPLORED = "fully_explored"

    @classmethod
    def from_counts(cls, completed: int, maximum: int) -> "ExplorationState":
        if completed <= 0:
            return cls.UNEXPLORED
        if completed >= maximum:
            return cls.FULLY_EXPLORED
        return cls.PARTIALLY_EXPLORED
