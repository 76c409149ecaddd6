# src/tests/conftest.py
from __future__ import annotations
from typing import List, Optional

import pytest
from pygame.math import Vector2

from flipsphere.level import LevelLayout, Platform, Collectible, Portal
from flipsphere.player import Actor
from flipsphere.progress import MemoryGateway, ProgressRecord
from flipsphere.session import LevelSession, SessionContext

SPAWN = (100.0, 300.0)


def make_session(seed: int = 1, level: int = 1, record: Optional[ProgressRecord] = None) -> LevelSession:
    session = LevelSession(SessionContext.seeded(seed), MemoryGateway(record))
    session.load_level(level)
    return session


def stage(session: LevelSession,
          platforms: Optional[List[Platform]] = None,
          coins=(),
          portal=None,
          actor_at=SPAWN) -> LevelSession:
    """Swap in a hand-built layout: actor resting on a full-width floor by default."""
    if platforms is None:
        platforms = [Platform(0, 320, 800, 50)]
    session.layout = LevelLayout(
        level_index=session.level_index,
        actor_spawn=Vector2(actor_at),
        platforms=platforms,
        collectibles=[Collectible(pos=Vector2(c)) for c in coins],
        portal=None if portal is None else Portal(pos=Vector2(portal)),
    )
    session.actor = Actor.spawn(actor_at)
    session.particles.clear()
    return session


@pytest.fixture
def session() -> LevelSession:
    return make_session()
