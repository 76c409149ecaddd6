# src/flipsphere/game.py
import argparse
import logging

import pygame
from pygame import K_SPACE, K_ESCAPE, K_LEFT, K_RIGHT, K_UP, K_p, K_h, K_r

from .config import (
    WIDTH, HEIGHT, FPS, SAVE_PATH_DEFAULT, SEED_DEFAULT, LEVEL_SELECT_SLOTS,
    COLOR_YELLOW,
)
from .flow import FlowController, Screen
from .progress import JsonFileGateway
from .render import Renderer, button_column, help_lines, pick
from .session import LevelSession, SessionContext, InputState

logger = logging.getLogger(__name__)

MENU_GREEN = (50, 150, 50)
MENU_BLUE = (50, 50, 150)
MENU_NAVY = (50, 50, 100)
MENU_RED = (150, 50, 50)
MENU_ORANGE = (150, 100, 50)
MENU_GREY = (100, 100, 100)


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=SEED_DEFAULT,
                   help="Layout seed. Omit for a fresh random stream each launch.")
    p.add_argument("--save", type=str, default=SAVE_PATH_DEFAULT,
                   help="Progress file (JSON).")
    p.add_argument("--level", type=int, default=None,
                   help="Skip the menu and start on this (unlocked) level index.")
    p.add_argument("--verbose", action="store_true", help="Log level loads and save problems")
    return p.parse_args()


def _buttons_for(flow: FlowController):
    """Buttons shown on the current screen, as (title, lines, buttons)."""
    session = flow.session
    screen = flow.screen
    progress = session.progress
    top = HEIGHT // 2 - 30

    if screen is Screen.MENU:
        return "Flip Sphere", [f"Coins: {progress.total_coins}"], button_column(WIDTH, top - 70, [
            ("Start Game", "start", MENU_GREEN),
            ("Continue", "continue", MENU_GREEN),
            ("Level Select", "level_select", MENU_BLUE),
            ("Shop", "shop", MENU_ORANGE),
            ("Controls", "controls", MENU_NAVY),
            ("Quit Game", "quit", MENU_RED),
        ])
    if screen is Screen.LEVEL_SELECT:
        entries = []
        for i in range(LEVEL_SELECT_SLOTS):
            if i < progress.levels_unlocked:
                entries.append((f"Level {i + 1}", f"level:{i}", MENU_GREEN))
            else:
                entries.append(("Locked", f"level:{i}", MENU_GREY))
        entries.append(("Back", "back", MENU_NAVY))
        return "Select Level", [], button_column(WIDTH, HEIGHT // 4, entries, h=40, gap=12)
    if screen is Screen.SHOP:
        entries = []
        for skin in session.catalog.skins():
            if skin == progress.equipped_skin:
                label = f"{skin} (equipped)"
            elif skin in progress.purchased_skins:
                label = f"{skin} (owned)"
            else:
                label = f"{skin} - {session.catalog.price(skin)}"
            entries.append((label, f"buy:{skin}", session.catalog.color(skin)))
        entries.append(("Back", "back", MENU_NAVY))
        return "Shop", [f"Coins: {progress.total_coins}"], button_column(
            WIDTH, HEIGHT // 4, entries, w=260, h=40, gap=8)
    if screen is Screen.HELP:
        return "Controls", help_lines(), button_column(WIDTH, HEIGHT * 3 // 4, [("Back", "back", MENU_NAVY)])
    if screen is Screen.PAUSED:
        return "Paused", [], button_column(WIDTH, top, [
            ("Resume", "resume", MENU_GREEN),
            ("Controls", "controls", MENU_NAVY),
            ("Quit Game", "quit", MENU_RED),
        ])
    if screen is Screen.GAME_OVER:
        return "Game Over", [f"Total Coins: {progress.total_coins}", "Press R to retry"], button_column(
            WIDTH, top + 40, [
                ("Retry Level", "retry", MENU_ORANGE),
                ("Main Menu", "menu", MENU_BLUE),
            ])
    if screen is Screen.LEVEL_COMPLETE:
        return "Level Complete!", [f"Score: {session.score}"], button_column(WIDTH, top, [
            ("Next Level", "next", MENU_GREEN),
            ("Retry Level", "retry", MENU_ORANGE),
            ("Main Menu", "menu", MENU_BLUE),
        ])
    return None


def dispatch(flow: FlowController, action: str):
    if action == "start":
        flow.start_game()
    elif action == "continue":
        flow.continue_game()
    elif action == "level_select":
        flow.open_level_select()
    elif action == "shop":
        flow.open_shop()
    elif action == "controls":
        flow.open_help()
    elif action == "quit":
        flow.quit()
    elif action == "resume":
        flow.resume()
    elif action == "next":
        flow.next_level()
    elif action == "retry":
        flow.retry()
    elif action == "menu":
        flow.main_menu()
    elif action == "back":
        flow.back()
    elif action.startswith("level:"):
        flow.pick_level(int(action.split(":", 1)[1]))
    elif action.startswith("buy:"):
        skin = action.split(":", 1)[1]
        if not flow.session.equip(skin):
            flow.buy(skin)


def run():
    args = parse_args()
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    pygame.init()
    pygame.display.set_caption("Flip Sphere")
    screen = pygame.display.set_mode((WIDTH, HEIGHT))
    clock = pygame.time.Clock()
    renderer = Renderer(screen)

    ctx = SessionContext.seeded(args.seed, width=WIDTH, height=HEIGHT)
    session = LevelSession(ctx, JsonFileGateway(args.save))
    flow = FlowController(session)
    if args.level is not None and not flow.pick_level(args.level):
        logger.warning("level %d is locked, showing the menu", args.level)
    inp = InputState()

    while flow.running:
        clock.tick(FPS)
        clicked = None

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                # window close saves like any other quit
                flow.quit()
            elif event.type == pygame.KEYDOWN:
                if event.key == K_SPACE:
                    inp.flip_gravity = True
                elif event.key in (K_p, K_ESCAPE):
                    inp.pause = True
                elif event.key == K_h:
                    inp.toggle_help = True
                elif event.key == K_r:
                    inp.retry = True
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                clicked = event.pos

        if not flow.running:
            break

        keys = pygame.key.get_pressed()
        inp.move_left = bool(keys[K_LEFT])
        inp.move_right = bool(keys[K_RIGHT])
        inp.jump = bool(keys[K_UP])

        flow.tick(inp)
        inp.clear_edges()

        # --- Render ---
        snap = session.snapshot()
        renderer.draw_world(snap)
        renderer.draw_fade(snap.fade_alpha)

        ui = _buttons_for(flow)
        if ui is not None:
            title, lines, buttons = ui
            renderer.draw_overlay(title, lines, buttons, pygame.mouse.get_pos())
            if clicked is not None:
                hit = pick(buttons, clicked)
                if hit is not None:
                    dispatch(flow, hit.action)
        elif snap.show_help:
            renderer.draw_overlay("Controls", help_lines())
        elif flow.screen is Screen.PLAYING:
            renderer.text("SPACE flip | P pause | H help", (10, HEIGHT - 30), COLOR_YELLOW)

        pygame.display.flip()

    pygame.quit()


if __name__ == "__main__":
    run()
