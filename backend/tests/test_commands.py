"""
StockSession command tests against an in-memory store.

Each command must validate, mutate, persist and re-project as one unit;
rejected commands must leave both the ledger and the store untouched.
"""

import asyncio

import pytest

from core.commands import PLACEHOLDER_TARGET_MESSAGE, StockSession
from core.exceptions import (
    ConfirmationRequiredError,
    InsufficientStockError,
    InvalidQuantityError,
    InvalidTargetError,
    ValidationError,
)
from schemas.stock import AddStockForm, RecordSaleForm, StockItem


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def session(fake_store) -> StockSession:
    return run(StockSession.open(fake_store))


def add(session, name="Rice Bag", category="Grains", price="25000", quantity="10"):
    return run(session.add_stock(AddStockForm(name=name, category=category, price=price, quantity=quantity)))


def sell(session, item, quantity):
    return run(session.record_sale(RecordSaleForm(item=item, quantity=quantity)))


class TestOpen:

    def test_loads_stored_items(self, fake_store):
        fake_store.blob = b'[{"name":"Rice Bag","category":"Grains","price":25000,"quantity":10,"sold":4}]'
        session = run(StockSession.open(fake_store))
        assert len(session.ledger) == 1
        assert session.ledger[0].sold == 4

    def test_missing_store_starts_empty(self, session):
        assert len(session.ledger) == 0
        assert session.dashboard().table.empty

    def test_close_persists(self, fake_store, session):
        session.ledger.add_item("Salt", "", 300, 2)
        run(session.close())
        assert [i.name for i in fake_store.stored()] == ["Salt"]


class TestAddStock:

    def test_accepts_raw_text(self, session, fake_store):
        item, dashboard, failure = add(session, name="  Rice Bag  ", category=" Grains ")
        assert failure is None
        assert item == StockItem(name="Rice Bag", category="Grains", price=25000, quantity=10, sold=0)
        assert dashboard.stats.total_value == 250000
        assert dashboard.sale_targets.options[1].value == "0"
        assert fake_store.stored() == session.ledger.items

    def test_accepts_json_numbers(self, session):
        item, _, _ = add(session, price=12.5, quantity=4)
        assert item.price == 12.5
        assert item.quantity == 4

    @pytest.mark.parametrize("fields,field", [
        ({"name": "   "}, "name"),
        ({"name": None}, "name"),
        ({"price": "abc"}, "price"),
        ({"price": "0"}, "price"),
        ({"price": "-3"}, "price"),
        ({"price": None}, "price"),
        ({"price": "inf"}, "price"),
        ({"quantity": "0"}, "quantity"),
        ({"quantity": "2.5"}, "quantity"),
        ({"quantity": "ten"}, "quantity"),
    ])
    def test_rejects_invalid_input(self, session, fake_store, fields, field):
        with pytest.raises(ValidationError) as exc:
            add(session, **fields)
        assert exc.value.data["field"] == field
        assert len(session.ledger) == 0
        assert fake_store.saves == 0

    def test_persistence_failure_is_a_warning(self, session, fake_store):
        fake_store.fail_saves = True
        item, dashboard, failure = add(session)
        assert failure is not None
        assert failure.code == "PERSISTENCE_FAILURE"
        # in-memory ledger stays authoritative
        assert len(session.ledger) == 1
        assert dashboard.stats.total_stock == 10


class TestRecordSale:

    def test_rice_bag_scenario(self, session, fake_store):
        add(session)
        index, item, dashboard, failure = sell(session, "0", "3")
        assert (index, item.sold, failure) == (0, 3, None)
        assert dashboard.stats.stock_remaining == 7
        assert dashboard.stats.total_value == 175000
        assert fake_store.stored()[0].sold == 3

        with pytest.raises(InsufficientStockError):
            sell(session, "0", "8")
        assert session.ledger[0].sold == 3
        assert fake_store.stored()[0].sold == 3

    def test_integer_target(self, session):
        add(session)
        index, item, _, _ = sell(session, 0, 10)
        assert item.remaining == 0

    @pytest.mark.parametrize("target", ["placeholder-1", "placeholder-20"])
    def test_placeholder_targets_rejected(self, session, target):
        assert any(o.value == target for o in session.dashboard().sale_targets.options)
        with pytest.raises(InvalidTargetError) as exc:
            sell(session, target, "1")
        assert exc.value.message == PLACEHOLDER_TARGET_MESSAGE

    @pytest.mark.parametrize("target", ["", None, "1", "-1", "abc"])
    def test_unknown_targets_rejected(self, session, fake_store, target):
        add(session)
        saves = fake_store.saves
        with pytest.raises(InvalidTargetError):
            sell(session, target, "1")
        assert session.ledger[0].sold == 0
        assert fake_store.saves == saves

    @pytest.mark.parametrize("qty", ["", "abc", "0", "-2", "1.5", None])
    def test_invalid_quantity_rejected(self, session, qty):
        add(session)
        with pytest.raises(InvalidQuantityError):
            sell(session, "0", qty)
        assert session.ledger[0].sold == 0


class TestReset:

    def test_requires_confirmation(self, session, fake_store):
        add(session)
        with pytest.raises(ConfirmationRequiredError):
            run(session.reset(False))
        assert len(session.ledger) == 1
        assert fake_store.blob is not None

    def test_clears_ledger_and_store(self, session, fake_store):
        add(session)
        dashboard, failure = run(session.reset(True))
        assert failure is None
        assert len(session.ledger) == 0
        assert fake_store.blob is None
        assert dashboard.table.empty
        assert dashboard.stats.total_stock == 0
        assert len(dashboard.sale_targets.options) == 21

    def test_clear_failure_is_a_warning(self, session, fake_store):
        add(session)
        fake_store.fail_clears = True
        _, failure = run(session.reset(True))
        assert failure is not None
        assert len(session.ledger) == 0


def test_export_reflects_current_ledger(session):
    assert session.export() == "Item,Category,Price,Quantity,Sold,Remaining,Total Value"
    add(session)
    sell(session, "0", "3")
    assert session.export().splitlines()[1] == "Rice Bag,Grains,25000,10,3,7,175000"


def test_commands_are_serialized(fake_store):
    async def scenario():
        session = await StockSession.open(fake_store)
        await session.add_stock(AddStockForm(name="Rice Bag", price="1", quantity="100"))
        await asyncio.gather(*[
            session.record_sale(RecordSaleForm(item="0", quantity="1")) for _ in range(25)
        ])
        return session

    session = run(scenario())
    assert session.ledger[0].sold == 25
    assert fake_store.stored()[0].sold == 25


class TestValueBounds:

    @pytest.mark.parametrize("price,quantity", [
        ("1", "1" + "0" * 400),
        ("1e308", "10"),
    ])
    def test_rejects_overflowing_value(self, session, fake_store, price, quantity):
        with pytest.raises(ValidationError) as exc:
            add(session, price=price, quantity=quantity)
        assert exc.value.data["field"] == "quantity"
        assert len(session.ledger) == 0
        assert fake_store.saves == 0
        assert session.dashboard().stats.total_value == 0

    def test_rejects_overflowing_total(self, session, fake_store):
        add(session, price="1e308", quantity="1")
        with pytest.raises(ValidationError):
            add(session, name="Second", price="1e308", quantity="1")
        assert len(session.ledger) == 1
        assert len(fake_store.stored()) == 1

    def test_stored_overflowing_item_loads_empty(self, fake_store):
        fake_store.blob = (
            b'[{"name":"X","category":"","price":1,"quantity":1' + b"0" * 400 + b',"sold":0}]'
        )
        session = run(StockSession.open(fake_store))
        assert len(session.ledger) == 0
