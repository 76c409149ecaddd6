# src/tests/test_env.py
"""
Quick tests for SphereEnv (Gymnasium environment).

Usage (from repo root):
  python -m pytest src/tests/test_env.py
"""
from __future__ import annotations
from typing import List, Tuple

import numpy as np
import pytest
import gymnasium as gym
from gymnasium.utils.env_checker import check_env

from flipsphere.env import SphereEnv
from flipsphere.env.observations import OBS_SIZE, _surface_gaps
from flipsphere.session import PlatformView
from flipsphere.env.sphere_env import FLIP, NOOP


@pytest.mark.parametrize("frame_skip", (1, 4))
def test_api_check(frame_skip):
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = SphereEnv(frame_skip=frame_skip)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def test_smoke_rollout():
    """Short random rollout: no crashes, obs in space, reward type, proper terminations."""
    env = SphereEnv(frame_skip=4, start_level=1)
    env.action_space.seed(0)
    try:
        obs, info = env.reset(seed=11)
        assert obs.shape == (OBS_SIZE,) and obs.dtype == np.float32
        assert env.observation_space.contains(obs)
        assert info["level"] == 1

        for t in range(300):
            obs, r, term, trunc, info = env.step(env.action_space.sample())
            assert isinstance(r, float)
            assert env.observation_space.contains(obs), f"step {t}: observation out of bounds"
            if term or trunc:
                assert info["phase"] in ("game_over", "level_complete") or trunc
                break
    finally:
        env.close()


def test_same_seed_same_trajectory():
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    actions = np.random.default_rng(7).integers(0, 5, size=120)

    def rollout() -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = SphereEnv(frame_skip=2)
        traj = []
        try:
            env.reset(seed=123, options={"level": 2})
            for a in actions:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), r, term, trunc))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    a, b = rollout(), rollout()
    assert len(a) == len(b)
    for (oa, ra, ta, ua), (ob, rb, tb, ub) in zip(a, b):
        np.testing.assert_array_equal(oa, ob)
        assert (ra, ta, ua) == (rb, tb, ub)


def test_flip_action_changes_gravity_feature():
    env = SphereEnv(frame_skip=1)
    try:
        obs, _ = env.reset(seed=3, options={"level": 0})
        assert obs[4] == 1.0
        obs, *_ = env.step(FLIP)
        if env.session.phase.value == "playing":
            assert obs[4] == -1.0
            obs, *_ = env.step(NOOP)
            assert obs[4] == -1.0
    finally:
        env.close()


def test_time_limit_truncates():
    env = SphereEnv(frame_skip=4, time_limit_seconds=0.2)
    try:
        env.reset(seed=1)
        done = False
        steps = 0
        while not done:
            _, _, term, trunc, _ = env.step(NOOP)
            steps += 1
            done = term or trunc
        assert steps <= env.time_limit_decisions
    finally:
        env.close()


def test_registered_id():
    env = gym.make("FlipSphere-v0", frame_skip=2)
    try:
        obs, _ = env.reset(seed=0)
        assert obs.shape == (OBS_SIZE,)
    finally:
        env.close()


def test_surface_gaps_follow_gravity():
    green = (0, 200, 0)
    floor = PlatformView(0, 320, 800, 50, green, False)
    ceiling = PlatformView(50, 200, 200, 50, green, False)
    off_column = PlatformView(500, 100, 100, 20, green, False)
    plats = [floor, ceiling, off_column]

    assert _surface_gaps(plats, 100, 300, 20, 1) == (0, 30)
    assert _surface_gaps(plats, 100, 300, 20, -1) == (30, 0)
    assert _surface_gaps([off_column], 100, 300, 20, 1) == (None, None)


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-q"]))
