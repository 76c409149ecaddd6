# src/flipsphere/progress.py
"""
Saved progress and the gateways that store it.

The record is written as one flat JSON object. Gateways raise
PersistenceUnavailable on any storage failure; callers decide whether to
care (the session never does, see safe_load/safe_save).
"""
from __future__ import annotations
import json
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional, Set, Tuple, Union

from .config import DEFAULT_SKIN, WIDTH, HEIGHT

logger = logging.getLogger(__name__)


class PersistenceUnavailable(Exception):
    """Progress storage could not be read or written."""


@dataclass
class ProgressRecord:
    level_index: int = 0
    session_score: int = 0
    total_coins: int = 0
    levels_unlocked: int = 1
    furthest_level_reached: int = 0
    actor_position: Tuple[float, float] = (WIDTH / 4, HEIGHT / 2)
    gravity_sign: int = 1
    equipped_skin: str = DEFAULT_SKIN
    purchased_skins: Set[str] = field(default_factory=lambda: {DEFAULT_SKIN})

    def copy(self) -> "ProgressRecord":
        return replace(self, purchased_skins=set(self.purchased_skins))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level_index,
            "score": self.session_score,
            "total_coins": self.total_coins,
            "levels_unlocked": self.levels_unlocked,
            "furthest_level": self.furthest_level_reached,
            "player_x": float(self.actor_position[0]),
            "player_y": float(self.actor_position[1]),
            "gravity": self.gravity_sign,
            "equipped_skin": self.equipped_skin,
            "purchased_skins": sorted(self.purchased_skins),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProgressRecord":
        """Missing keys fall back to defaults; wrong types are a storage error."""
        d = cls()
        try:
            return cls(
                level_index=int(data.get("level", d.level_index)),
                session_score=int(data.get("score", d.session_score)),
                total_coins=int(data.get("total_coins", d.total_coins)),
                levels_unlocked=int(data.get("levels_unlocked", d.levels_unlocked)),
                furthest_level_reached=int(data.get("furthest_level", d.furthest_level_reached)),
                actor_position=(float(data.get("player_x", d.actor_position[0])),
                                float(data.get("player_y", d.actor_position[1]))),
                gravity_sign=1 if int(data.get("gravity", d.gravity_sign)) >= 0 else -1,
                equipped_skin=str(data.get("equipped_skin", d.equipped_skin)),
                purchased_skins={str(s) for s in data.get("purchased_skins", d.purchased_skins)},
            )
        except (TypeError, ValueError) as e:
            raise PersistenceUnavailable(f"malformed progress record: {e}") from e


class ProgressGateway:
    """Storage interface: load() returns a record (defaults if none saved)."""

    def load(self) -> ProgressRecord:
        raise NotImplementedError

    def save(self, record: ProgressRecord) -> None:
        raise NotImplementedError


class MemoryGateway(ProgressGateway):
    def __init__(self, record: Optional[ProgressRecord] = None):
        self._data: Optional[Dict[str, Any]] = record.to_dict() if record is not None else None
        self.saves = 0

    def load(self) -> ProgressRecord:
        if self._data is None:
            return ProgressRecord()
        return ProgressRecord.from_dict(self._data)

    def save(self, record: ProgressRecord) -> None:
        self._data = record.to_dict()
        self.saves += 1


class JsonFileGateway(ProgressGateway):
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def load(self) -> ProgressRecord:
        if not self.path.exists():
            return ProgressRecord()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise PersistenceUnavailable(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceUnavailable(f"{self.path} does not hold a progress record")
        return ProgressRecord.from_dict(data)

    def save(self, record: ProgressRecord) -> None:
        try:
            self.path.write_text(json.dumps(record.to_dict(), indent=2), encoding="utf-8")
        except OSError as e:
            raise PersistenceUnavailable(f"cannot write {self.path}: {e}") from e


def safe_load(gateway: ProgressGateway) -> ProgressRecord:
    try:
        return gateway.load()
    except PersistenceUnavailable as e:
        logger.warning("progress not loaded, using defaults: %s", e)
        return ProgressRecord()


def safe_save(gateway: ProgressGateway, record: ProgressRecord) -> bool:
    try:
        gateway.save(record)
    except PersistenceUnavailable as e:
        logger.warning("progress not saved: %s", e)
        return False
    return True
