# src/flipsphere/render.py
from __future__ import annotations
import math
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pygame

from .config import COLOR_BG, COLOR_FG, COLOR_YELLOW, COLOR_CYAN, COLOR_BLUE, COLOR_PURPLE
from .session import RenderSnapshot

Color = Tuple[int, int, int]


def _lighten(color: Color, amount: int) -> Color:
    return tuple(min(255, c + amount) for c in color)


class Button:
    def __init__(self, label: str, rect: pygame.Rect, color: Color, hover: Color, action: str):
        self.label = label
        self.rect = rect
        self.color = color
        self.hover = hover
        self.action = action

    def draw(self, surf: pygame.Surface, font: pygame.font.Font, mouse_pos):
        col = self.hover if self.rect.collidepoint(mouse_pos) else self.color
        pygame.draw.rect(surf, col, self.rect, border_radius=10)
        pygame.draw.rect(surf, COLOR_FG, self.rect, width=2, border_radius=10)
        txt = font.render(self.label, True, COLOR_FG)
        surf.blit(txt, (self.rect.centerx - txt.get_width() // 2, self.rect.centery - txt.get_height() // 2))


def button_column(width: int, top: int, entries: Sequence[Tuple[str, str, Color]],
                  w: int = 200, h: int = 50, gap: int = 20) -> List[Button]:
    """Vertically stacked, horizontally centered buttons: (label, action, color)."""
    buttons = []
    for i, (label, action, color) in enumerate(entries):
        rect = pygame.Rect((width - w) // 2, top + i * (h + gap), w, h)
        buttons.append(Button(label, rect, color, _lighten(color, 50), action))
    return buttons


class Renderer:
    """Draws a RenderSnapshot. Holds no game state of its own."""

    def __init__(self, surf: pygame.Surface):
        self.surf = surf
        self.font = pygame.font.SysFont("arial", 20)
        self.big_font = pygame.font.SysFont("arial", 48)

    def draw_world(self, snap: RenderSnapshot):
        surf = self.surf
        surf.fill(COLOR_BG)

        for p in snap.platforms:
            rect = pygame.Rect(int(p.x), int(p.y), max(1, int(p.width)), max(1, int(p.height)))
            pygame.draw.rect(surf, p.color, rect)
            pygame.draw.rect(surf, _lighten(p.color, 50), rect, width=2)
            if p.moving:
                for i in range(3):
                    pygame.draw.circle(surf, COLOR_FG, (rect.centerx, rect.centery - 10 + i * 10), 3)

        if snap.portal is not None:
            pt = snap.portal
            ring = COLOR_CYAN if pt.active else (70, 90, 110)
            for i in range(3):
                r = pt.radius - i * 5 + math.sin(pt.spin + i) * 5
                pygame.draw.circle(surf, (COLOR_CYAN, COLOR_BLUE, COLOR_PURPLE)[i] if pt.active else ring,
                                   (int(pt.x), int(pt.y)), max(1, int(r)), width=2)

        for c in snap.coins:
            center = (int(c.x), int(c.y + c.hover_offset))
            pygame.draw.circle(surf, COLOR_YELLOW, center, int(c.radius))
            pygame.draw.circle(surf, (255, 255, 200), (center[0] - 2, center[1] - 2), int(c.radius // 2))

        for p in snap.particles:
            pygame.draw.circle(surf, p.color, (int(p.x), int(p.y)), p.size)

        a = snap.actor
        if a is not None:
            n = len(a.trail)
            for i, (tx, ty) in enumerate(a.trail):
                r = int(a.radius * (i / n))
                if r > 0:
                    pygame.draw.circle(surf, _lighten(a.color, 50), (int(tx), int(ty)), r, width=1)
            pygame.draw.circle(surf, a.color, (int(a.x), int(a.y)), int(a.radius))
            pygame.draw.circle(surf, _lighten(a.color, 100), (int(a.x), int(a.y)), int(a.radius // 2))

        self._draw_hud(snap)

    def _draw_hud(self, snap: RenderSnapshot):
        hud = snap.hud
        w = self.surf.get_width()
        self.text(f"Score: {hud.score}", (10, 10))
        self.text(f"Coins: {hud.total_coins}", (10, 35))
        self.text(f"Level: {hud.level_index + 1}", (w - 120, 10))
        self.text(f"Gravity: {'↓' if hud.gravity_sign > 0 else '↑'}", (w - 120, 35))
        self.text(f"Items: {hud.items_collected}/{hud.items_total}", (w // 2 - 40, 10))
        if snap.message_timer > 0:
            msg = self.big_font.render(f"Level {hud.level_index + 1}", True, COLOR_FG)
            msg.set_alpha(int(255 * min(1.0, snap.message_timer / 60)))
            self.surf.blit(msg, ((w - msg.get_width()) // 2, self.surf.get_height() // 3))

    def draw_fade(self, alpha: int):
        if alpha <= 0:
            return
        veil = pygame.Surface(self.surf.get_size())
        veil.fill(COLOR_BG)
        veil.set_alpha(alpha)
        self.surf.blit(veil, (0, 0))

    def draw_overlay(self, title: str, lines: Sequence[str] = (), buttons: Sequence[Button] = (),
                     mouse_pos=(0, 0)):
        shade = pygame.Surface(self.surf.get_size(), pygame.SRCALPHA)
        shade.fill((0, 0, 0, 180))
        self.surf.blit(shade, (0, 0))
        w, h = self.surf.get_size()
        t = self.big_font.render(title, True, COLOR_FG)
        self.surf.blit(t, ((w - t.get_width()) // 2, h // 6))
        for i, line in enumerate(lines):
            txt = self.font.render(line, True, COLOR_FG)
            self.surf.blit(txt, ((w - txt.get_width()) // 2, h // 6 + 70 + i * 28))
        for b in buttons:
            b.draw(self.surf, self.font, mouse_pos)

    def text(self, msg: str, pos, color: Color = COLOR_FG):
        self.surf.blit(self.font.render(msg, True, color), pos)


def surface_to_array(surf: pygame.Surface):
    """(H, W, 3) uint8 frame, as gymnasium's rgb_array mode expects."""
    arr = pygame.surfarray.array3d(surf)  # (W, H, 3)
    return np.transpose(arr, (1, 0, 2))


def help_lines() -> List[str]:
    return [
        "LEFT/RIGHT - Move",
        "UP - Jump",
        "SPACE - Flip gravity",
        "P - Pause",
        "H - Show/hide controls",
        "R - Restart level (when game over)",
    ]


def pick(buttons: Sequence[Button], pos) -> Optional[Button]:
    for b in buttons:
        if b.rect.collidepoint(pos):
            return b
    return None
