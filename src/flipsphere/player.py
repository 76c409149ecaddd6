# src/flipsphere/player.py
from __future__ import annotations
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, Iterable, List, Optional, Tuple

from pygame.math import Vector2

from .config import (
    WIDTH, GRAVITY, PLAYER_RADIUS, PLAYER_SPEED, JUMP_POWER, TRAIL_LENGTH, COLOR_FG,
)
from .level import Platform


@dataclass
class Contact:
    """One platform contact resolved this tick."""
    platform: Platform
    landed: bool          # True when the actor now rests on the gravity-side face
    impact_vy: float      # vertical speed just before the snap
    point: Vector2        # contact point on the platform face


@dataclass
class Actor:
    """
    Player sphere under signed gravity:
    - grav_dir = +1 means gravity pulls down
    - grav_dir = -1 means gravity pulls up
    Positions are the sphere's center.
    """
    pos: Vector2
    vel: Vector2 = field(default_factory=Vector2)
    radius: float = PLAYER_RADIUS
    speed: float = PLAYER_SPEED
    jump_power: float = JUMP_POWER
    on_ground: bool = False
    color: Tuple[int, int, int] = COLOR_FG
    trail: Deque[Vector2] = field(default_factory=lambda: deque(maxlen=TRAIL_LENGTH))

    @classmethod
    def spawn(cls, at, color: Tuple[int, int, int] = COLOR_FG) -> "Actor":
        return cls(pos=Vector2(at), color=color)

    def jump(self, grav_dir: int) -> bool:
        """Jump away from the gravity side; only from a surface the resolver confirmed last tick."""
        if self.on_ground:
            self.vel.y = self.jump_power * grav_dir
            return True
        return False

    def update_physics(self, move_x: int, grav_dir: int,
                       gravity: float = GRAVITY, screen_w: float = WIDTH):
        """One Euler step. move_x is -1, 0 or +1; no horizontal inertia."""
        self.trail.append(Vector2(self.pos))

        self.vel.y += gravity * grav_dir
        self.vel.x = move_x * self.speed

        self.pos += self.vel

        if self.pos.x - self.radius < 0:
            self.pos.x = self.radius
            self.vel.x = 0.0
        elif self.pos.x + self.radius > screen_w:
            self.pos.x = screen_w - self.radius
            self.vel.x = 0.0

        # re-asserted by the resolver later this tick
        self.on_ground = False

    def overlaps(self, p: Platform) -> bool:
        return (self.pos.y + self.radius > p.y and self.pos.y - self.radius < p.bottom
                and self.pos.x + self.radius > p.x and self.pos.x - self.radius < p.right)

    def resolve_platform(self, p: Platform, grav_dir: int) -> Optional[Contact]:
        """
        Vertical-only resolution against one platform.
        The face gravity pulls toward is the floor: landing there sets on_ground.
        Hitting the opposite face only stops vertical motion.
        """
        if not self.overlaps(p):
            return None

        vy = self.vel.y
        falling_onto_top = vy > 0 and self.pos.y - self.radius < p.y
        rising_into_bottom = vy < 0 and self.pos.y + self.radius > p.bottom

        if grav_dir > 0:
            floor_hit, ceiling_hit = falling_onto_top, rising_into_bottom
        else:
            floor_hit, ceiling_hit = rising_into_bottom, falling_onto_top

        # grav +1 checks the top face first, grav -1 the bottom face
        if floor_hit:
            landed = True
            on_top = grav_dir > 0
        elif ceiling_hit:
            landed = False
            on_top = grav_dir < 0
        else:
            return None

        if on_top:
            self.pos.y = p.y - self.radius
            point = Vector2(self.pos.x, p.y)
        else:
            self.pos.y = p.bottom + self.radius
            point = Vector2(self.pos.x, p.bottom)
        self.vel.y = 0.0
        if landed:
            self.on_ground = True
        return Contact(platform=p, landed=landed, impact_vy=vy, point=point)

    def resolve_collisions_with_platforms(self, platforms: Iterable[Platform], grav_dir: int) -> List[Contact]:
        contacts = []
        for p in platforms:
            c = self.resolve_platform(p, grav_dir)
            if c is not None:
                contacts.append(c)
        return contacts
