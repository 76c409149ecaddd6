# src/tests/test_shop.py
from __future__ import annotations

import pytest

from flipsphere.config import SHOP_CATALOG, DEFAULT_SKIN, COLOR_FG
from flipsphere.progress import ProgressRecord
from flipsphere.shop import ShopCatalog, PurchaseResult, purchase, equip

from conftest import make_session


@pytest.fixture
def catalog():
    return ShopCatalog()


def test_not_enough_coins_changes_nothing(catalog):
    record = ProgressRecord(total_coins=300)
    before = record.copy()

    assert catalog.price("gold") == 500
    assert purchase(record, "gold", catalog) is PurchaseResult.INSUFFICIENT_FUNDS
    assert record == before


def test_successful_purchase_deducts_and_equips(catalog):
    record = ProgressRecord(total_coins=250)
    assert purchase(record, "blue", catalog) is PurchaseResult.OK
    assert record.total_coins == 100
    assert record.purchased_skins == {DEFAULT_SKIN, "blue"}
    assert record.equipped_skin == "blue"


def test_exact_price_is_enough(catalog):
    record = ProgressRecord(total_coins=100)
    assert purchase(record, "red", catalog) is PurchaseResult.OK
    assert record.total_coins == 0


def test_owned_and_unknown_skins(catalog):
    record = ProgressRecord(total_coins=1000)
    assert purchase(record, DEFAULT_SKIN, catalog) is PurchaseResult.ALREADY_OWNED
    assert purchase(record, "rainbow", catalog) is PurchaseResult.INVALID_SKIN
    assert record.total_coins == 1000
    assert record.purchased_skins == {DEFAULT_SKIN}


def test_equip_requires_ownership():
    record = ProgressRecord()
    assert not equip(record, "red")
    assert record.equipped_skin == DEFAULT_SKIN

    record.purchased_skins.add("red")
    assert equip(record, "red")
    assert record.equipped_skin == "red"


def test_catalog_lookup(catalog):
    assert set(catalog.skins()) == set(SHOP_CATALOG)
    assert "pink" in catalog and "rainbow" not in catalog
    assert catalog.color("pink") == SHOP_CATALOG["pink"][1]
    assert catalog.color("rainbow") == COLOR_FG


def test_session_purchase_recolors_actor_and_saves():
    session = make_session(record=ProgressRecord(total_coins=400))
    saves = session.gateway.saves

    assert session.purchase("purple") is PurchaseResult.OK
    assert session.actor.color == SHOP_CATALOG["purple"][1]
    assert session.gateway.saves == saves + 1
    saved = session.gateway.load()
    assert saved.total_coins == 0
    assert "purple" in saved.purchased_skins and saved.equipped_skin == "purple"

    assert session.purchase("gold") is PurchaseResult.INSUFFICIENT_FUNDS
    assert session.gateway.saves == saves + 1

    assert session.equip(DEFAULT_SKIN)
    assert session.actor.color == SHOP_CATALOG[DEFAULT_SKIN][1]
    assert session.gateway.load().equipped_skin == DEFAULT_SKIN


def test_equipped_skin_survives_level_load():
    record = ProgressRecord(equipped_skin="orange", purchased_skins={"white", "orange"})
    session = make_session(record=record)
    assert session.actor.color == SHOP_CATALOG["orange"][1]
    session.load_level(2)
    assert session.actor.color == SHOP_CATALOG["orange"][1]


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__, "-q"]))
