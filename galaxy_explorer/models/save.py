"""Save / load game state to JSON.

Uses platformdirs for cross-platform save location:
  Linux:   ~/.local/share/galaxy_explorer/save.json
  macOS:   ~/Library/Application Support/galaxy_explorer/save.json
  Windows: C:/Users/.../AppData/Local/galaxy_explorer/save.json

Galaxy is regenerated from seed; only the ship and navigation state is
persisted. Keys are camelCase to stay readable by older saves.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_data_dir

from ..constants import SAVE_APP_NAME, SAVE_FILE_NAME
from .ships import ShipStats

logger = logging.getLogger(__name__)

SAVE_DIR = Path(user_data_dir(SAVE_APP_NAME))
SAVE_FILE = SAVE_DIR / SAVE_FILE_NAME
SAVE_VERSION = 1


class SaveLoadError(ValueError):
    """Raised when save data exists but cannot be understood."""


# ── Ship stats ────────────────────────────────────────────────────────

_STAT_KEYS = {
    "name": "name",
    "tech_level": "techLevel",
    "shields": "shields",
    "hull": "hull",
    "combat_power": "combatPower",
    "diplomacy": "diplomacy",
    "scanners": "scanners",
    "cargo": "cargo",
    "credits": "credits",
    "crew": "crew",
    "max_crew": "maxCrew",
    "max_shields": "maxShields",
    "max_hull": "maxHull",
    "max_combat_power": "maxCombatPower",
    "max_scanners": "maxScanners",
    "max_cargo": "maxCargo",
}

# Older saves may omit these; the dataclass defaults apply
_OPTIONAL_STATS = {"name", "max_shields", "max_hull", "max_combat_power", "max_scanners", "max_cargo"}


def stats_to_dict(stats: ShipStats) -> dict:
    return {key: getattr(stats, attr) for attr, key in _STAT_KEYS.items()}


def stats_from_dict(d: dict) -> ShipStats:
    if not isinstance(d, dict):
        raise SaveLoadError("ship stats must be an object")
    kwargs = {}
    for attr, key in _STAT_KEYS.items():
        if key not in d:
            if attr in _OPTIONAL_STATS:
                continue
            raise SaveLoadError(f"ship stats missing {key!r}")
        value = d[key]
        if attr == "name":
            if not isinstance(value, str):
                raise SaveLoadError("ship name must be a string")
        elif isinstance(value, bool) or not isinstance(value, (int, float)):
            raise SaveLoadError(f"ship stat {key!r} must be a number")
        else:
            value = int(value)
        kwargs[attr] = value
    try:
        return ShipStats(**kwargs)
    except ValueError as e:
        raise SaveLoadError(f"invalid ship stats: {e}") from e


# ── Save data ─────────────────────────────────────────────────────────

@dataclass
class SaveData:
    """Everything needed to resume a game."""

    stats: ShipStats
    galaxy_seed: int
    current_system_id: str | None = None
    explored_system_ids: list[str] = field(default_factory=list)
    travel_history: list[str] = field(default_factory=list)
    timestamp: int = field(default_factory=lambda: int(time.time() * 1000))

    def to_dict(self) -> dict:
        return {
            "version": SAVE_VERSION,
            "stats": stats_to_dict(self.stats),
            "currentSystemId": self.current_system_id,
            "exploredSystemIds": list(self.explored_system_ids),
            "travelHistory": list(self.travel_history),
            "galaxySeed": self.galaxy_seed,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "SaveData":
        if not isinstance(d, dict):
            raise SaveLoadError("save data must be an object")
        try:
            stats = stats_from_dict(d["stats"])
            seed = d["galaxySeed"]
            current = d.get("currentSystemId")
            explored = d.get("exploredSystemIds", [])
            history = d.get("travelHistory", [])
            timestamp = d.get("timestamp", 0)
        except KeyError as e:
            raise SaveLoadError(f"save data missing {e.args[0]!r}") from e

        if isinstance(seed, bool) or not isinstance(seed, int):
            raise SaveLoadError("galaxySeed must be an integer")
        if current is not None and not isinstance(current, str):
            raise SaveLoadError("currentSystemId must be a string or null")
        for name, ids in (("exploredSystemIds", explored), ("travelHistory", history)):
            if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
                raise SaveLoadError(f"{name} must be a list of ids")
        if isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise SaveLoadError("timestamp must be a number")

        return cls(
            stats=stats,
            galaxy_seed=seed,
            current_system_id=current,
            explored_system_ids=list(explored),
            travel_history=list(history),
            timestamp=int(timestamp),
        )


def parse_save_data(text: str) -> SaveData:
    """Parse save JSON, raising SaveLoadError on anything malformed."""
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise SaveLoadError(f"save file is not valid JSON: {e}") from e
    return SaveData.from_dict(data)


# ── Top-level API ─────────────────────────────────────────────────────

def save_game(data: SaveData, path: Path | None = None) -> Path:
    """Serialize game state to JSON and return the save path."""
    path = path or SAVE_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data.to_dict(), indent=2))
    logger.info("saved game to %s", path)
    return path


def load_game(path: Path | None = None) -> SaveData | None:
    """Deserialize game state from JSON. Returns None if no save exists."""
    path = path or SAVE_FILE
    if not path.exists():
        return None
    try:
        text = path.read_text()
    except OSError as e:
        raise SaveLoadError(f"could not read {path}: {e}") from e
    data = parse_save_data(text)
    logger.info("loaded game from %s", path)
    return data


def has_save(path: Path | None = None) -> bool:
    """Check if a save file exists."""
    return (path or SAVE_FILE).exists()


def delete_save(path: Path | None = None) -> None:
    """Remove the save file if it exists."""
    path = path or SAVE_FILE
    if path.exists():
        path.unlink()
