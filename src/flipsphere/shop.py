# src/flipsphere/shop.py
from __future__ import annotations
from enum import Enum
from typing import Dict, Mapping, Tuple

from .config import SHOP_CATALOG, COLOR_FG
from .progress import ProgressRecord


class PurchaseResult(str, Enum):
    OK = "ok"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    ALREADY_OWNED = "already_owned"
    INVALID_SKIN = "invalid_skin"


class ShopCatalog:
    """Fixed skin id -> (price, color) table."""

    def __init__(self, entries: Mapping[str, Tuple[int, Tuple[int, int, int]]] = SHOP_CATALOG):
        self._entries: Dict[str, Tuple[int, Tuple[int, int, int]]] = dict(entries)

    def __contains__(self, skin_id: str) -> bool:
        return skin_id in self._entries

    def skins(self):
        return list(self._entries)

    def price(self, skin_id: str) -> int:
        return self._entries[skin_id][0]

    def color(self, skin_id: str) -> Tuple[int, int, int]:
        entry = self._entries.get(skin_id)
        return entry[1] if entry is not None else COLOR_FG


def purchase(record: ProgressRecord, skin_id: str, catalog: ShopCatalog) -> PurchaseResult:
    """Buy and equip a skin. Only an OK result changes the record."""
    if skin_id not in catalog:
        return PurchaseResult.INVALID_SKIN
    if skin_id in record.purchased_skins:
        return PurchaseResult.ALREADY_OWNED
    cost = catalog.price(skin_id)
    if record.total_coins < cost:
        return PurchaseResult.INSUFFICIENT_FUNDS
    record.total_coins -= cost
    record.purchased_skins.add(skin_id)
    record.equipped_skin = skin_id
    return PurchaseResult.OK


def equip(record: ProgressRecord, skin_id: str) -> bool:
    """Switch to an already owned skin."""
    if skin_id not in record.purchased_skins:
        return False
    record.equipped_skin = skin_id
    return True
