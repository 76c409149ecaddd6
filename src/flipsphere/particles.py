# src/flipsphere/particles.py
from __future__ import annotations
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from pygame.math import Vector2

from .config import (
    PARTICLE_SPEED, PARTICLE_LIFE_MIN, PARTICLE_LIFE_MAX,
    PARTICLE_SIZE_MIN, PARTICLE_SIZE_MAX, PARTICLE_CAP,
)


@dataclass
class Particle:
    pos: Vector2
    vel: Vector2
    lifetime: int
    size: int
    color: Tuple[int, int, int]


class ParticlePool:
    """
    Short-lived visual feedback. A particle spawned with lifetime L survives
    L-1 ticks and is gone after the L-th.
    """
    def __init__(self, rng: Optional[random.Random] = None, cap: int = PARTICLE_CAP):
        self.rng = rng if rng is not None else random.Random()
        self.cap = cap
        self.particles: List[Particle] = []

    def __len__(self) -> int:
        return len(self.particles)

    def spawn(self, pos, color: Tuple[int, int, int], count: int):
        rng = self.rng
        for _ in range(count):
            self.particles.append(Particle(
                pos=Vector2(pos),
                vel=Vector2(rng.uniform(-PARTICLE_SPEED, PARTICLE_SPEED),
                            rng.uniform(-PARTICLE_SPEED, PARTICLE_SPEED)),
                lifetime=rng.randint(PARTICLE_LIFE_MIN, PARTICLE_LIFE_MAX),
                size=rng.randint(PARTICLE_SIZE_MIN, PARTICLE_SIZE_MAX),
                color=color,
            ))
        # oldest go first when over the cap
        overflow = len(self.particles) - self.cap
        if overflow > 0:
            del self.particles[:overflow]

    def tick(self):
        alive = 0
        for p in self.particles:
            p.lifetime -= 1
            p.pos += p.vel
            if p.lifetime > 0:
                self.particles[alive] = p
                alive += 1
        del self.particles[alive:]

    def clear(self):
        self.particles.clear()
