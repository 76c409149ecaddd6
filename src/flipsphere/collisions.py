# src/flipsphere/collisions.py
from __future__ import annotations
from typing import Iterable, List, Optional

from .config import HEIGHT, FALL_MARGIN
from .level import Collectible, Portal
from .player import Actor


def circles_touch(a_pos, a_radius: float, b_pos, b_radius: float) -> bool:
    """Squared-distance test, no sqrt."""
    dx = a_pos[0] - b_pos[0]
    dy = a_pos[1] - b_pos[1]
    reach = a_radius + b_radius
    return dx * dx + dy * dy <= reach * reach


def touched_coins(actor: Actor, coins: Iterable[Collectible]) -> List[Collectible]:
    """Uncollected coins the actor overlaps. Collected coins never match again."""
    return [c for c in coins
            if not c.collected and circles_touch(actor.pos, actor.radius, c.pos, c.radius)]


def portal_reached(actor: Actor, portal: Optional[Portal], coins: Iterable[Collectible]) -> bool:
    """The portal only counts once every coin is collected."""
    if portal is None:
        return False
    if not all(c.collected for c in coins):
        return False
    return circles_touch(actor.pos, actor.radius, portal.pos, portal.radius)


def fell_out(actor: Actor, screen_h: float = HEIGHT) -> bool:
    return actor.pos.y < -FALL_MARGIN or actor.pos.y > screen_h + FALL_MARGIN
