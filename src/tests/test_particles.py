# src/tests/test_particles.py
from __future__ import annotations
import random

from pygame.math import Vector2

from flipsphere.config import (
    PARTICLE_SPEED, PARTICLE_LIFE_MIN, PARTICLE_LIFE_MAX, PARTICLE_SIZE_MIN, PARTICLE_SIZE_MAX,
)
from flipsphere.particles import ParticlePool

WHITE = (255, 255, 255)


def test_particle_lives_exactly_its_lifetime():
    pool = ParticlePool(random.Random(3))
    pool.spawn((10, 10), WHITE, 1)
    life = pool.particles[0].lifetime

    for _ in range(life - 1):
        pool.tick()
        assert len(pool) == 1
    pool.tick()
    assert len(pool) == 0


def test_spawn_ranges():
    pool = ParticlePool(random.Random(11))
    pool.spawn(Vector2(50, 60), WHITE, 200)
    assert len(pool) == 200
    for p in pool.particles:
        assert p.pos == Vector2(50, 60)
        assert -PARTICLE_SPEED <= p.vel.x <= PARTICLE_SPEED
        assert -PARTICLE_SPEED <= p.vel.y <= PARTICLE_SPEED
        assert PARTICLE_LIFE_MIN <= p.lifetime <= PARTICLE_LIFE_MAX
        assert PARTICLE_SIZE_MIN <= p.size <= PARTICLE_SIZE_MAX
        assert p.color == WHITE


def test_spawned_particles_do_not_share_position():
    pool = ParticlePool(random.Random(2))
    origin = Vector2(5, 5)
    pool.spawn(origin, WHITE, 2)
    pool.tick()
    assert origin == Vector2(5, 5)
    assert pool.particles[0].pos is not pool.particles[1].pos


def test_pool_only_grows_on_spawn():
    pool = ParticlePool(random.Random(8))
    pool.spawn((0, 0), WHITE, 30)
    pool.spawn((100, 100), WHITE, 15)
    sizes = [len(pool)]
    for _ in range(PARTICLE_LIFE_MAX + 2):
        pool.tick()
        sizes.append(len(pool))
    assert all(b <= a for a, b in zip(sizes, sizes[1:]))
    assert sizes[-1] == 0


def test_tick_moves_particles():
    pool = ParticlePool(random.Random(4))
    pool.spawn((100, 100), WHITE, 1)
    p = pool.particles[0]
    vel = Vector2(p.vel)
    pool.tick()
    assert p.pos == Vector2(100, 100) + vel


def test_cap_drops_oldest():
    pool = ParticlePool(random.Random(1), cap=10)
    pool.spawn((0, 0), WHITE, 8)
    pool.spawn((500, 500), (1, 2, 3), 8)
    assert len(pool) == 10
    assert sum(1 for p in pool.particles if p.color == (1, 2, 3)) == 8


if __name__ == "__main__":
    import pytest
    raise SystemExit(pytest.main([__file__, "-q"]))
