# src/flipsphere/session.py
"""
Level session: the per-frame simulation and its lifecycle.

One LevelSession owns the current layout, the actor, the particle pool and
the session flags. The host calls tick() once per frame; everything that
happened during that tick comes back as a TickOutcome instead of being
polled from flags.
"""
from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field, fields
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

from pygame.math import Vector2

from .collisions import touched_coins, portal_reached, fell_out
from .config import (
    WIDTH, HEIGHT, GRAVITY, HARD_LANDING_VY, COIN_SCORE,
    LANDING_PARTICLES, COIN_PARTICLES, FLIP_PARTICLES, PORTAL_PARTICLES,
    FADE_STEP, FADE_MAX, LEVEL_INTRO_TICKS, COLOR_YELLOW, COLOR_CYAN,
)
from .level import LevelGen, LevelLayout
from .particles import ParticlePool
from .player import Actor
from .progress import ProgressGateway, ProgressRecord, MemoryGateway, safe_load, safe_save
from .shop import ShopCatalog, PurchaseResult, purchase, equip

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    LOADING = "loading"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    LEVEL_COMPLETE = "level_complete"
    TRANSITIONING = "transitioning"


class Fade(str, Enum):
    NONE = "none"
    OUT = "fade_out"
    IN = "fade_in"


@dataclass
class SessionContext:
    """Per-run mutable values shared by the session and its host."""
    width: int = WIDTH
    height: int = HEIGHT
    gravity: float = GRAVITY
    grav_dir: int = 1
    running: bool = True
    rng: random.Random = field(default_factory=random.Random)

    @classmethod
    def seeded(cls, seed: Optional[int], **kwargs) -> "SessionContext":
        return cls(rng=random.Random(seed), **kwargs)


EDGE_INPUTS = ("flip_gravity", "pause", "toggle_help", "retry")


@dataclass
class InputState:
    """
    Normalized input for one tick. move_left/move_right/jump are "held";
    flip_gravity/pause/toggle_help/retry are edges, cleared once handled.
    """
    move_left: bool = False
    move_right: bool = False
    jump: bool = False
    flip_gravity: bool = False
    pause: bool = False
    toggle_help: bool = False
    retry: bool = False

    def consume(self, name: str) -> bool:
        pressed = getattr(self, name)
        setattr(self, name, False)
        return pressed

    def clear(self):
        for f in fields(self):
            setattr(self, f.name, False)

    def clear_edges(self):
        """Drop edge presses nobody consumed this frame."""
        for name in EDGE_INPUTS:
            setattr(self, name, False)


@dataclass
class TickOutcome:
    collected: List[Vector2] = field(default_factory=list)
    landed: bool = False
    hard_landing: bool = False
    flipped: bool = False
    completed: bool = False
    fell_off: bool = False
    level_loaded: Optional[int] = None


# --- Read-only render views ---

class ActorView(NamedTuple):
    x: float
    y: float
    radius: float
    color: Tuple[int, int, int]
    trail: Tuple[Tuple[float, float], ...]
    on_ground: bool
    vx: float
    vy: float


class PlatformView(NamedTuple):
    x: float
    y: float
    width: float
    height: float
    color: Tuple[int, int, int]
    moving: bool


class CoinView(NamedTuple):
    x: float
    y: float
    radius: float
    hover_offset: float


class PortalView(NamedTuple):
    x: float
    y: float
    radius: float
    spin: float
    active: bool


class ParticleView(NamedTuple):
    x: float
    y: float
    size: int
    color: Tuple[int, int, int]
    lifetime: int


class Hud(NamedTuple):
    score: int
    total_coins: int
    level_index: int
    gravity_sign: int
    items_collected: int
    items_total: int


class RenderSnapshot(NamedTuple):
    phase: Phase
    actor: Optional[ActorView]
    platforms: Tuple[PlatformView, ...]
    coins: Tuple[CoinView, ...]
    portal: Optional[PortalView]
    particles: Tuple[ParticleView, ...]
    hud: Hud
    fade_alpha: int
    message_timer: int
    show_help: bool


class LevelSession:
    def __init__(self,
                 ctx: Optional[SessionContext] = None,
                 gateway: Optional[ProgressGateway] = None,
                 catalog: Optional[ShopCatalog] = None):
        self.ctx = ctx if ctx is not None else SessionContext()
        self.gateway = gateway if gateway is not None else MemoryGateway()
        self.catalog = catalog if catalog is not None else ShopCatalog()

        # Loaded once; persistent fields stay live in self.progress.
        # _saved is the last written record: the attempt "Continue" resumes.
        self.progress: ProgressRecord = safe_load(self.gateway)
        self._saved = self.progress.copy()

        self.level_gen = LevelGen(self.ctx.rng, self.ctx.width, self.ctx.height)
        self.particles = ParticlePool(self.ctx.rng)

        self.level_index: int = self.progress.level_index
        self.score: int = self.progress.session_score
        self.layout: Optional[LevelLayout] = None
        self.actor: Optional[Actor] = None

        self.phase = Phase.LOADING
        self.fade = Fade.NONE
        self.fade_alpha = 0
        self.message_timer = 0
        self.show_help = False

        self._build_level(self.level_index)

    # -------------------- Level lifecycle --------------------

    def _build_level(self, index: int):
        """Fresh layout and actor; gravity and session score start over."""
        self.level_index = index
        self.layout = self.level_gen.generate(index)
        self.actor = Actor.spawn(self.layout.actor_spawn, color=self.catalog.color(self.progress.equipped_skin))
        self.ctx.grav_dir = 1
        self.score = 0
        self.particles.clear()
        logger.debug("level %d loaded", index)

    def load_level(self, index: int):
        self._build_level(index)
        self.phase = Phase.PLAYING
        self.fade = Fade.NONE
        self.fade_alpha = 0
        self.message_timer = 0

    def start(self):
        """Menu "start": jump straight to the furthest level reached."""
        self.load_level(self.progress.furthest_level_reached)

    def resume(self):
        """Continue the saved attempt: saved level, actor position, gravity and score."""
        saved = self._saved
        self.load_level(saved.level_index)
        self.actor.pos = Vector2(saved.actor_position)
        self.ctx.grav_dir = saved.gravity_sign
        self.score = saved.session_score

    def select_level(self, index: int) -> bool:
        if not 0 <= index < self.progress.levels_unlocked:
            return False
        self.load_level(index)
        return True

    def retry(self) -> bool:
        if self.phase in (Phase.TRANSITIONING, Phase.LOADING):
            return False
        self.load_level(self.level_index)
        return True

    def advance(self) -> bool:
        """Leave a completed level: unlock the next one and start the fade."""
        if self.phase is not Phase.LEVEL_COMPLETE:
            return False
        self.progress.levels_unlocked = max(self.progress.levels_unlocked, self.level_index + 2)
        self.phase = Phase.TRANSITIONING
        self.fade = Fade.OUT
        self.fade_alpha = 0
        self.save()
        return True

    def return_to_menu(self):
        # store the attempt being left before the menu backdrop replaces it
        self.save()
        self._build_level(0)
        self.phase = Phase.LOADING
        self.fade = Fade.NONE
        self.fade_alpha = 0
        self.message_timer = 0
        self.show_help = False

    def quit(self):
        self.save()
        self.ctx.running = False

    def toggle_pause(self) -> bool:
        if self.phase is Phase.PLAYING:
            self.phase = Phase.PAUSED
        elif self.phase is Phase.PAUSED:
            self.phase = Phase.PLAYING
        else:
            return False
        return True

    # -------------------- Shop / persistence --------------------

    def purchase(self, skin_id: str) -> PurchaseResult:
        result = purchase(self.progress, skin_id, self.catalog)
        if result is PurchaseResult.OK:
            self.actor.color = self.catalog.color(skin_id)
            self.save()
        return result

    def equip(self, skin_id: str) -> bool:
        if not equip(self.progress, skin_id):
            return False
        self.actor.color = self.catalog.color(skin_id)
        self.save()
        return True

    def to_record(self) -> ProgressRecord:
        """
        Persistent fields from self.progress plus the attempt fields. On the
        menu there is no live attempt, so the last saved one is kept.
        """
        record = self.progress.copy()
        if self.phase is Phase.LOADING:
            attempt = self._saved
            record.level_index = attempt.level_index
            record.session_score = attempt.session_score
            record.actor_position = attempt.actor_position
            record.gravity_sign = attempt.gravity_sign
        elif self.phase is Phase.GAME_OVER:
            # a failed attempt continues from the level's spawn
            spawn = self.layout.actor_spawn
            record.level_index = self.level_index
            record.session_score = self.score
            record.actor_position = (float(spawn.x), float(spawn.y))
            record.gravity_sign = 1
        else:
            record.level_index = self.level_index
            record.session_score = self.score
            record.actor_position = (float(self.actor.pos.x), float(self.actor.pos.y))
            record.gravity_sign = self.ctx.grav_dir
        return record

    def save(self) -> bool:
        record = self.to_record()
        self._saved = record.copy()
        return safe_save(self.gateway, record)

    # -------------------- Per-frame --------------------

    def tick(self, inp: Optional[InputState] = None) -> TickOutcome:
        inp = inp if inp is not None else InputState()
        out = TickOutcome()

        if self.phase is Phase.TRANSITIONING:
            self._tick_fade(out)
        elif self.phase is Phase.PAUSED:
            if inp.consume("pause"):
                self.phase = Phase.PLAYING
            if inp.consume("toggle_help"):
                self.show_help = not self.show_help
        elif self.phase is Phase.GAME_OVER:
            if inp.consume("retry"):
                self.retry()
                out.level_loaded = self.level_index
        elif self.phase is Phase.PLAYING:
            self._simulate(inp, out)
        return out

    def _tick_fade(self, out: TickOutcome):
        if self.fade is Fade.OUT:
            self.fade_alpha = min(FADE_MAX, self.fade_alpha + FADE_STEP)
            if self.fade_alpha == FADE_MAX:
                # swap levels while the screen is fully covered
                self._build_level(self.level_index + 1)
                self.fade = Fade.IN
                out.level_loaded = self.level_index
                self.save()
        elif self.fade is Fade.IN:
            self.fade_alpha = max(0, self.fade_alpha - FADE_STEP)
            if self.fade_alpha == 0:
                self.fade = Fade.NONE
                self.phase = Phase.PLAYING
                self.message_timer = LEVEL_INTRO_TICKS

    def _simulate(self, inp: InputState, out: TickOutcome):
        ctx, actor, layout = self.ctx, self.actor, self.layout

        # jump reads on_ground from the previous tick's resolver
        if inp.jump:
            actor.jump(ctx.grav_dir)
        move_x = -1 if inp.move_left else (1 if inp.move_right else 0)
        actor.update_physics(move_x, ctx.grav_dir, ctx.gravity, ctx.width)

        for c in layout.collectibles:
            c.update()
        if layout.portal is not None:
            layout.portal.update()
        self.particles.tick()

        for p in layout.platforms:
            p.update()
            contact = actor.resolve_platform(p, ctx.grav_dir)
            if contact is None or not contact.landed:
                continue
            out.landed = True
            if abs(contact.impact_vy) > HARD_LANDING_VY:
                out.hard_landing = True
                self.particles.spawn(contact.point, p.color, LANDING_PARTICLES)

        for c in touched_coins(actor, layout.collectibles):
            c.collected = True
            self.score += COIN_SCORE
            self.progress.total_coins += COIN_SCORE
            self.particles.spawn(c.pos, COLOR_YELLOW, COIN_PARTICLES)
            out.collected.append(Vector2(c.pos))
        if out.collected:
            self.save()

        if self._completion_reached():
            self.phase = Phase.LEVEL_COMPLETE
            out.completed = True
            self.particles.spawn(actor.pos, COLOR_CYAN, PORTAL_PARTICLES)
            self.progress.furthest_level_reached = max(self.progress.furthest_level_reached, self.level_index)
            self.save()
        elif fell_out(actor, ctx.height):
            self.phase = Phase.GAME_OVER
            out.fell_off = True

        if self.phase is Phase.PLAYING:
            if inp.consume("flip_gravity"):
                ctx.grav_dir *= -1
                self.particles.spawn(actor.pos, actor.color, FLIP_PARTICLES)
                out.flipped = True
            if inp.consume("pause"):
                self.phase = Phase.PAUSED
        if inp.consume("toggle_help"):
            self.show_help = not self.show_help

        if self.message_timer > 0:
            self.message_timer -= 1

    def _completion_reached(self) -> bool:
        layout = self.layout
        if layout.portal is None:
            # the first level has no portal: collecting everything finishes it
            return layout.all_collected()
        return portal_reached(self.actor, layout.portal, layout.collectibles)

    # -------------------- Render contract --------------------

    def snapshot(self) -> RenderSnapshot:
        actor, layout = self.actor, self.layout
        collected = sum(1 for c in layout.collectibles if c.collected)
        portal = layout.portal
        return RenderSnapshot(
            phase=self.phase,
            actor=ActorView(
                actor.pos.x, actor.pos.y, actor.radius, actor.color,
                tuple((t.x, t.y) for t in actor.trail), actor.on_ground,
                actor.vel.x, actor.vel.y,
            ),
            platforms=tuple(PlatformView(p.x, p.y, p.width, p.height, p.color, p.moving)
                            for p in layout.platforms),
            coins=tuple(CoinView(c.pos.x, c.pos.y, c.radius, c.hover_offset)
                        for c in layout.collectibles if not c.collected),
            portal=None if portal is None else PortalView(
                portal.pos.x, portal.pos.y, portal.radius, portal.spin, layout.all_collected()),
            particles=tuple(ParticleView(p.pos.x, p.pos.y, p.size, p.color, p.lifetime)
                            for p in self.particles.particles),
            hud=Hud(self.score, self.progress.total_coins, self.level_index, self.ctx.grav_dir,
                    collected, len(layout.collectibles)),
            fade_alpha=self.fade_alpha,
            message_timer=self.message_timer,
            show_help=self.show_help,
        )
