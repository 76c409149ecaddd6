# src/flipsphere/env/observations.py
from __future__ import annotations
from typing import Optional, Sequence, Tuple

import numpy as np

from flipsphere.config import WIDTH, HEIGHT, PLAYER_SPEED, FALL_MARGIN
from flipsphere.session import RenderSnapshot, PlatformView

OBS_SIZE = 14
VY_SCALE = 20.0   # |vy| beyond this reads as +-1

OBS_LOW = np.array([0.0, 0.0, -1.0, -1.0, -1.0, 0.0, 0.0,
                    -1.0, -1.0, -1.0, -1.0, 0.0, 0.0, 0.0], dtype=np.float32)
OBS_HIGH = np.array([1.0] * OBS_SIZE, dtype=np.float32)


def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def _surface_gaps(platforms: Sequence[PlatformView], x: float, y: float, radius: float,
                  grav: int) -> Tuple[Optional[float], Optional[float]]:
    """
    Free distance from the sphere to the nearest platform face on the gravity
    side ("floor") and on the opposite side ("ceiling"), under column x.
    """
    below: Optional[float] = None
    above: Optional[float] = None
    for p in platforms:
        if not (p.x <= x < p.x + p.width):
            continue
        if p.y >= y:
            d = p.y - (y + radius)
            below = d if below is None or d < below else below
        elif p.y + p.height <= y:
            d = (y - radius) - (p.y + p.height)
            above = d if above is None or d < above else above
    return (below, above) if grav > 0 else (above, below)


def build_observation(snap: RenderSnapshot, width: float = WIDTH, height: float = HEIGHT) -> np.ndarray:
    """
    Returns a fixed (14,) float32 vector:
      [ x_norm, y_norm, vx_norm, vy_norm, grav, on_ground, coins_left,
        coin_dx, coin_dy, portal_dx, portal_dy, portal_active,
        floor_gap, ceiling_gap ]
    - x_norm/y_norm in [0,1] (y spans the fall margins)
    - deltas to the nearest coin / the portal in [-1,1], 0 when absent
    - gaps normalized by screen height; sentinel 1.0 when nothing is there
    """
    a = snap.actor
    hud = snap.hud

    x_norm = _clamp(a.x / width, 0.0, 1.0)
    y_norm = _clamp((a.y + FALL_MARGIN) / (height + 2 * FALL_MARGIN), 0.0, 1.0)
    vx_norm = _clamp(a.vx / PLAYER_SPEED, -1.0, 1.0)
    vy_norm = _clamp(a.vy / VY_SCALE, -1.0, 1.0)
    grav = 1.0 if hud.gravity_sign > 0 else -1.0
    on_ground = 1.0 if a.on_ground else 0.0
    coins_left = 0.0 if hud.items_total == 0 else (hud.items_total - hud.items_collected) / hud.items_total

    coin_dx = coin_dy = 0.0
    if snap.coins:
        near = min(snap.coins, key=lambda c: (c.x - a.x) ** 2 + (c.y - a.y) ** 2)
        coin_dx = _clamp((near.x - a.x) / width, -1.0, 1.0)
        coin_dy = _clamp((near.y - a.y) / height, -1.0, 1.0)

    portal_dx = portal_dy = portal_active = 0.0
    if snap.portal is not None:
        portal_dx = _clamp((snap.portal.x - a.x) / width, -1.0, 1.0)
        portal_dy = _clamp((snap.portal.y - a.y) / height, -1.0, 1.0)
        portal_active = 1.0 if snap.portal.active else 0.0

    floor, ceiling = _surface_gaps(snap.platforms, a.x, a.y, a.radius, hud.gravity_sign)
    floor_gap = 1.0 if floor is None else _clamp(floor / height, 0.0, 1.0)
    ceiling_gap = 1.0 if ceiling is None else _clamp(ceiling / height, 0.0, 1.0)

    feats = [x_norm, y_norm, vx_norm, vy_norm, grav, on_ground, coins_left,
             coin_dx, coin_dy, portal_dx, portal_dy, portal_active,
             floor_gap, ceiling_gap]
    return np.clip(np.asarray(feats, dtype=np.float32), OBS_LOW, OBS_HIGH)
