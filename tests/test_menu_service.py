from decimal import Decimal

import pytest

from orderly_shared.errors import NotFoundError
from orderly_shared.services.menu_service import (
    create_menu_item,
    delete_menu_item,
    get_menu_item,
    list_menu_items,
    update_menu_item,
)
from orderly_shared.validation import ValidationError


def test_create_menu_item(db):
    item = create_menu_item({"name": "Nutella Waffle", "price": 149.5, "description": " "})
    assert item.price == Decimal("149.50")
    assert item.description is None
    assert get_menu_item(item.id).name == "Nutella Waffle"


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "price": "10"},
        {"name": "Free", "price": "-1"},
        {"name": "No price"},
        {"price": "10"},
        {"name": "Bad", "price": "ten"},
    ],
)
def test_invalid_menu_items_rejected(db, payload):
    with pytest.raises(ValidationError):
        create_menu_item(payload)


def test_partial_update_keeps_other_fields(menu_items):
    item = update_menu_item(menu_items["A"].id, {"price": "55"})
    assert item.price == Decimal("55.00")
    assert item.name == "Waffle A"


def test_name_and_price_cannot_be_cleared(menu_items):
    with pytest.raises(ValidationError):
        update_menu_item(menu_items["A"].id, {"price": None})
    with pytest.raises(ValidationError):
        update_menu_item(menu_items["A"].id, {"name": None})


def test_price_change_does_not_touch_existing_orders(place_order, menu_items):
    from orderly_shared.services.order_service import get_order

    order = place_order()
    update_menu_item(menu_items["A"].id, {"price": "99"})

    stored = get_order(order.id)
    assert stored.items[0].unit_price == Decimal("50.00")
    assert stored.total_amount == Decimal("130.00")


def test_delete_menu_item(menu_items):
    delete_menu_item(menu_items["B"].id)
    assert [item.id for item in list_menu_items()] == [menu_items["A"].id]
    with pytest.raises(NotFoundError):
        delete_menu_item(menu_items["B"].id)


def test_referenced_menu_item_cannot_be_deleted(place_order, menu_items):
    place_order()
    with pytest.raises(ValidationError):
        delete_menu_item(menu_items["A"].id)
