# src/flipsphere/env/sphere_env.py
from __future__ import annotations
from typing import Any, Dict, Optional

import numpy as np
import gymnasium as gym
import pygame

from flipsphere.config import WIDTH, HEIGHT, FPS
from flipsphere.progress import MemoryGateway
from flipsphere.render import Renderer, surface_to_array
from flipsphere.session import LevelSession, SessionContext, InputState, Phase
from flipsphere.env.observations import build_observation, OBS_LOW, OBS_HIGH

NOOP, LEFT, RIGHT, JUMP, FLIP = range(5)

COIN_REWARD = 1.0
COMPLETE_REWARD = 10.0
FALL_PENALTY = -5.0
STEP_PENALTY = -0.001


class SphereEnv(gym.Env):
    """
    Flip Sphere Gymnasium environment (vector observations).
    - Simulation ticks at 60 Hz, one physics step per tick.
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Observation: shape (14,), float32, see build_observation.
    - Episode ends when the level is completed or the sphere falls out.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 60.0,
                 start_level: int = 0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.start_level = int(start_level)

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        # Actions: 0 NOOP, 1 LEFT, 2 RIGHT, 3 JUMP, 4 FLIP
        self.action_space = gym.spaces.Discrete(5)
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[LevelSession] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.renderer: Optional[Renderer] = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)

        # An explicit seed drives the layout directly; otherwise draw one from np_random
        if seed is not None:
            level_seed = int(seed)
        else:
            level_seed = int(self.np_random.integers(0, 2**31 - 1))
        level = int((options or {}).get("level", self.start_level))

        ctx = SessionContext.seeded(level_seed, width=WIDTH, height=HEIGHT)
        self.session = LevelSession(ctx, MemoryGateway())
        self.session.load_level(level)

        self.timestep = 0
        self.current_seed = level_seed

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), self._info()

    def step(self, action):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "call reset() first"

        action = int(action)
        inp = InputState(
            move_left=(action == LEFT),
            move_right=(action == RIGHT),
            jump=(action == JUMP),
            flip_gravity=(action == FLIP),   # edge: consumed by the first sub-step
        )

        reward = 0.0
        for _ in range(self.frame_skip):
            out = self.session.tick(inp)
            reward += STEP_PENALTY + COIN_REWARD * len(out.collected)
            if out.completed:
                reward += COMPLETE_REWARD
            if out.fell_off:
                reward += FALL_PENALTY
            if self.session.phase is not Phase.PLAYING:
                break

        self.timestep += 1
        terminated = self.session.phase in (Phase.GAME_OVER, Phase.LEVEL_COMPLETE)
        truncated = bool(self.time_limit_decisions is not None
                         and self.timestep >= self.time_limit_decisions and not terminated)

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), float(reward), bool(terminated), truncated, self._info()

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        ctx = self.session.ctx
        return build_observation(self.session.snapshot(), ctx.width, ctx.height)

    def _info(self) -> Dict[str, Any]:
        s = self.session
        return {
            "seed": self.current_seed,
            "timestep": self.timestep,
            "level": s.level_index,
            "score": s.score,
            "coins_left": sum(1 for c in s.layout.collectibles if not c.collected),
            "phase": s.phase.value,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return None

        if self.renderer is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Flip Sphere (env)")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.renderer = Renderer(self.screen)

        if self.render_mode == "human":
            # keep the OS from flagging the window as hung
            pygame.event.pump()

        snap = self.session.snapshot()
        self.renderer.draw_world(snap)
        self.renderer.draw_fade(snap.fade_alpha)

        if self.render_mode == "human":
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None
        return surface_to_array(self.screen)

    def close(self):
        if self.renderer is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.renderer = None
