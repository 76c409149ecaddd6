# src/tests/test_flow.py
from __future__ import annotations

import pytest

from flipsphere.flow import FlowController, Screen
from flipsphere.progress import MemoryGateway, ProgressRecord
from flipsphere.session import LevelSession, SessionContext, InputState, Phase
from flipsphere.shop import PurchaseResult


def _flow(record=None) -> FlowController:
    return FlowController(LevelSession(SessionContext.seeded(3), MemoryGateway(record)))


def test_menu_does_not_tick():
    flow = _flow()
    assert flow.screen is Screen.MENU
    assert flow.session.phase is Phase.LOADING
    assert flow.tick(InputState(move_right=True)) is None


def test_start_enters_play():
    flow = _flow(ProgressRecord(furthest_level_reached=2, levels_unlocked=3))
    flow.start_game()
    assert flow.screen is Screen.PLAYING
    assert flow.session.level_index == 2
    assert flow.tick(InputState()) is not None


def test_sub_screens_return_to_menu():
    flow = _flow(ProgressRecord(total_coins=100))
    flow.open_shop()
    assert flow.screen is Screen.SHOP
    assert flow.buy("red") is PurchaseResult.OK
    flow.back()
    assert flow.screen is Screen.MENU

    flow.open_level_select()
    assert not flow.pick_level(5)
    assert flow.screen is Screen.LEVEL_SELECT
    flow.back()
    assert flow.screen is Screen.MENU

    flow.open_help()
    flow.back()
    assert flow.screen is Screen.MENU


def test_pause_key_and_resume_button():
    flow = _flow()
    flow.pick_level(0)
    flow.tick(InputState(pause=True))
    assert flow.screen is Screen.PAUSED

    flow.open_help()
    assert flow.screen is Screen.HELP
    flow.back()
    assert flow.screen is Screen.PAUSED

    flow.resume()
    assert flow.screen is Screen.PLAYING


def test_main_menu_from_game():
    flow = _flow()
    flow.start_game()
    flow.main_menu()
    assert flow.screen is Screen.MENU
    assert flow.session.phase is Phase.LOADING
    assert flow.session.gateway.saves >= 1


def test_quit_stops_running():
    flow = _flow()
    assert flow.running
    flow.quit()
    assert not flow.running


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-q"]))
