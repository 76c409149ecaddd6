# src/flipsphere/level.py
from __future__ import annotations
import logging
import math
import random
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pygame
from pygame.math import Vector2

from .config import (
    WIDTH, HEIGHT, BASE_PLATFORM_H, BASE_SHRINK_PER_LEVEL, BASE_MIN_W,
    PLATFORM_MIN_W, PLATFORM_W_SPAN, PLATFORM_W_SHRINK, PLATFORM_MIN_H, PLATFORM_MAX_H,
    PLATFORM_TOP_MARGIN, PLATFORM_BOTTOM_MARGIN, MOVE_RANGE_MIN, MOVE_RANGE_MAX,
    LEVEL_BRACKETS, LATE_BASE_COUNT, LATE_MOVING_CHANCE, LATE_MAX_SPEED,
    COINS_BASE, COINS_PER_LEVEL, COIN_ATTEMPTS, COIN_RELAX_AFTER, COIN_LIFT, COIN_BAND,
    COIN_SIDE_SLACK, COIN_MARGIN_X, COIN_MARGIN_TOP, COIN_MARGIN_BOTTOM,
    COIN_RADIUS, COIN_HOVER_SPEED, COIN_HOVER_AMPLITUDE,
    PORTAL_RADIUS, PORTAL_SPIN_SPEED, PORTAL_LIFT, PORTAL_FALLBACK_Y,
    COLOR_GREEN, COLOR_BLUE, COLOR_PURPLE,
)

logger = logging.getLogger(__name__)

Color = Tuple[int, int, int]


class GenerationExhausted(Exception):
    """A collectible slot found no valid spot within its attempt budget."""


@dataclass
class Platform:
    x: float
    y: float
    width: float
    height: float
    color: Color = COLOR_GREEN
    platform_type: str = "static"   # "static" or "moving"
    axis: str = "horizontal"        # "horizontal" or "vertical"
    move_speed: float = 0.0
    move_range: float = 0.0
    direction: int = 1
    origin_x: float = 0.0
    origin_y: float = 0.0

    def __post_init__(self):
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"platform needs a positive size, got {self.width}x{self.height}")
        self.origin_x = float(self.x)
        self.origin_y = float(self.y)

    @property
    def moving(self) -> bool:
        return self.platform_type == "moving"

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(int(self.x), int(self.y), int(self.width), int(self.height))

    def update(self):
        """Back-and-forth oscillation around the origin; turns once past the range."""
        if not self.moving:
            return
        if self.axis == "vertical":
            self.y += self.move_speed * self.direction
            if abs(self.y - self.origin_y) > self.move_range:
                self.direction *= -1
        else:
            self.x += self.move_speed * self.direction
            if abs(self.x - self.origin_x) > self.move_range:
                self.direction *= -1

    def contains_point(self, x: float, y: float) -> bool:
        return self.x < x < self.right and self.y < y < self.bottom


@dataclass
class Collectible:
    pos: Vector2
    radius: float = COIN_RADIUS
    collected: bool = False
    hover_phase: float = 0.0

    @property
    def hover_offset(self) -> float:
        return math.sin(self.hover_phase) * COIN_HOVER_AMPLITUDE

    def update(self):
        if not self.collected:
            self.hover_phase += COIN_HOVER_SPEED


@dataclass
class Portal:
    pos: Vector2
    radius: float = PORTAL_RADIUS
    spin: float = 0.0

    def update(self):
        self.spin += PORTAL_SPIN_SPEED


@dataclass
class LevelLayout:
    level_index: int
    actor_spawn: Vector2
    platforms: List[Platform] = field(default_factory=list)
    collectibles: List[Collectible] = field(default_factory=list)
    portal: Optional[Portal] = None
    skipped_collectibles: int = 0

    def all_collected(self) -> bool:
        return all(c.collected for c in self.collectibles)


def level_parameters(level_index: int) -> Tuple[int, float, int]:
    """(platform_count, moving_chance, max_speed) for a level."""
    if level_index < len(LEVEL_BRACKETS):
        return LEVEL_BRACKETS[level_index]
    return LATE_BASE_COUNT + level_index, LATE_MOVING_CHANCE, LATE_MAX_SPEED


def base_platform_width(level_index: int, width: int = WIDTH) -> int:
    if level_index == 0:
        return width
    return max(BASE_MIN_W, width - BASE_SHRINK_PER_LEVEL * level_index)


def platform_palette(level_index: int) -> List[Color]:
    def chan(v: int) -> int:
        return max(0, min(255, v))
    return [
        COLOR_GREEN,
        COLOR_BLUE,
        COLOR_PURPLE,
        (chan(50 + level_index * 30), chan(200 - level_index * 20), chan(100 + level_index * 30)),
        (chan(200 - level_index * 15), chan(50 + level_index * 30), 150),
    ]


class LevelGen:
    """
    Builds one LevelLayout per call. Deterministic for a given rng stream:
    every random draw goes through self.rng in a fixed order.
    """
    def __init__(self, rng: Optional[random.Random] = None, width: int = WIDTH, height: int = HEIGHT):
        self.rng = rng if rng is not None else random.Random()
        self.width = width
        self.height = height

    def generate(self, level_index: int) -> LevelLayout:
        layout = LevelLayout(
            level_index=level_index,
            actor_spawn=Vector2(self.width / 4, self.height / 2),
        )
        layout.platforms.append(self._base_platform(level_index))

        count, moving_chance, max_speed = level_parameters(level_index)
        palette = platform_palette(level_index)
        for _ in range(count):
            layout.platforms.append(self._create_platform(level_index, moving_chance, max_speed, palette))

        requested = COINS_BASE + COINS_PER_LEVEL * level_index
        for slot in range(requested):
            try:
                layout.collectibles.append(self._place_coin(layout.platforms))
            except GenerationExhausted:
                layout.skipped_collectibles += 1
                logger.debug("level %d: coin slot %d skipped after %d attempts",
                             level_index, slot, COIN_ATTEMPTS)

        if level_index > 0:
            layout.portal = self._place_portal(layout.platforms)

        logger.debug("level %d generated: %d platforms, %d/%d coins",
                     level_index, len(layout.platforms), len(layout.collectibles), requested)
        return layout

    def _base_platform(self, level_index: int) -> Platform:
        w = base_platform_width(level_index, self.width)
        return Platform(
            x=(self.width - w) / 2,
            y=self.height - BASE_PLATFORM_H,
            width=w,
            height=BASE_PLATFORM_H,
            color=COLOR_GREEN,
        )

    def _create_platform(self, level_index: int, moving_chance: float, max_speed: int,
                         palette: List[Color]) -> Platform:
        rng = self.rng
        span = max(1, PLATFORM_W_SPAN + 1 - level_index * PLATFORM_W_SHRINK)
        w = PLATFORM_MIN_W + rng.randrange(span)
        h = rng.randint(PLATFORM_MIN_H, PLATFORM_MAX_H)
        x = rng.randrange(max(1, self.width - w))
        y = PLATFORM_TOP_MARGIN + rng.randrange(max(1, self.height - PLATFORM_BOTTOM_MARGIN))

        moving = rng.random() < moving_chance
        speed = rng.randint(1, max_speed) if moving else 0
        vertical = rng.random() > 0.5 if moving else False
        color = rng.choice(palette)
        move_range = rng.randint(MOVE_RANGE_MIN, MOVE_RANGE_MAX)

        return Platform(
            x=float(x),
            y=float(y),
            width=float(w),
            height=float(h),
            color=color,
            platform_type="moving" if moving else "static",
            axis="vertical" if vertical else "horizontal",
            move_speed=float(speed),
            move_range=float(move_range),
        )

    def _place_coin(self, platforms: List[Platform]) -> Collectible:
        """Rejection sampling: prefer spots just above a platform, never inside one."""
        rng = self.rng
        for attempt in range(COIN_ATTEMPTS):
            x = COIN_MARGIN_X + rng.randrange(self.width - 2 * COIN_MARGIN_X)
            y = COIN_MARGIN_TOP + rng.randrange(self.height - COIN_MARGIN_TOP - COIN_MARGIN_BOTTOM)

            near_top = any(
                abs(y - (p.y - COIN_LIFT)) < COIN_BAND
                and p.x - COIN_SIDE_SLACK < x < p.right + COIN_SIDE_SLACK
                for p in platforms
            )
            inside = any(p.contains_point(x, y) for p in platforms)

            if (near_top or attempt > COIN_RELAX_AFTER) and not inside:
                return Collectible(pos=Vector2(x, y))
        raise GenerationExhausted(f"no free spot after {COIN_ATTEMPTS} attempts")

    def _place_portal(self, platforms: List[Platform]) -> Portal:
        # highest platform (smallest y) in the upper half of the screen
        for p in sorted(platforms, key=lambda p: p.y):
            if p.y < self.height / 2:
                return Portal(pos=Vector2(p.x + p.width / 2, p.y - PORTAL_LIFT))
        return Portal(pos=Vector2(self.width / 2, PORTAL_FALLBACK_Y))


def generate(level_index: int, rng: random.Random, width: int = WIDTH, height: int = HEIGHT) -> LevelLayout:
    return LevelGen(rng, width, height).generate(level_index)
