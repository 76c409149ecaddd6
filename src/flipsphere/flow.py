# src/flipsphere/flow.py
from __future__ import annotations
from enum import Enum
from typing import Optional

from .session import LevelSession, InputState, Phase, TickOutcome
from .shop import PurchaseResult


class Screen(str, Enum):
    MENU = "menu"
    SHOP = "shop"
    LEVEL_SELECT = "level_select"
    HELP = "help"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"
    LEVEL_COMPLETE = "level_complete"


_GAMEPLAY_SCREENS = (Screen.PLAYING, Screen.PAUSED, Screen.GAME_OVER, Screen.LEVEL_COMPLETE)

_PHASE_SCREENS = {
    Phase.PLAYING: Screen.PLAYING,
    Phase.TRANSITIONING: Screen.PLAYING,
    Phase.PAUSED: Screen.PAUSED,
    Phase.GAME_OVER: Screen.GAME_OVER,
    Phase.LEVEL_COMPLETE: Screen.LEVEL_COMPLETE,
}


class FlowController:
    """
    Tracks the active screen and routes menu choices to the session.
    The session only ticks while a gameplay screen is up.
    """
    def __init__(self, session: LevelSession):
        self.session = session
        self.screen = Screen.MENU
        self._help_return = Screen.MENU

    def tick(self, inp: InputState) -> Optional[TickOutcome]:
        if self.screen not in _GAMEPLAY_SCREENS:
            return None
        out = self.session.tick(inp)
        self._sync()
        return out

    def _sync(self):
        self.screen = _PHASE_SCREENS.get(self.session.phase, Screen.MENU)

    # --- main menu ---
    def start_game(self):
        self.session.start()
        self._sync()

    def continue_game(self):
        self.session.resume()
        self._sync()

    def open_level_select(self):
        self.screen = Screen.LEVEL_SELECT

    def pick_level(self, index: int) -> bool:
        if not self.session.select_level(index):
            return False
        self._sync()
        return True

    def open_shop(self):
        self.screen = Screen.SHOP

    def buy(self, skin_id: str) -> PurchaseResult:
        return self.session.purchase(skin_id)

    def open_help(self):
        self._help_return = self.screen
        self.screen = Screen.HELP

    def back(self):
        """Leave a sub-screen (shop, level select, help)."""
        if self.screen is Screen.HELP:
            self.screen = self._help_return
        elif self.screen in (Screen.SHOP, Screen.LEVEL_SELECT):
            self.screen = Screen.MENU

    def quit(self):
        self.session.quit()

    # --- in-game choices ---
    def resume(self):
        if self.session.phase is Phase.PAUSED:
            self.session.toggle_pause()
            self._sync()

    def next_level(self) -> bool:
        ok = self.session.advance()
        self._sync()
        return ok

    def retry(self) -> bool:
        ok = self.session.retry()
        self._sync()
        return ok

    def main_menu(self):
        self.session.return_to_menu()
        self.screen = Screen.MENU

    @property
    def running(self) -> bool:
        return self.session.ctx.running
