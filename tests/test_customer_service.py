import pytest

from orderly_shared.errors import NotFoundError
from orderly_shared.schemas import CustomerRecord
from orderly_shared.services.customer_service import (
    adjust_loyalty_points,
    delete_customer,
    display_label,
    get_customer,
    list_customers,
    search,
    upsert_customer,
)
from orderly_shared.validation import ValidationError

PEOPLE = [
    CustomerRecord(id="1", name="Meera Iyer", phone="9000011111", email="meera@example.com"),
    CustomerRecord(id="2", name="Karan", table_number="12"),
    CustomerRecord(id="3", phone="8000022222", table_number="3"),
]


@pytest.mark.parametrize("query", [None, "", "   "])
def test_empty_query_returns_everyone_in_order(query):
    assert search(PEOPLE, query) == PEOPLE


def test_search_is_case_insensitive_substring():
    assert [c.id for c in search(PEOPLE, "MEERA")] == ["1"]
    assert [c.id for c in search(PEOPLE, "example.com")] == ["1"]
    assert [c.id for c in search(PEOPLE, "2222")] == ["3"]
    assert [c.id for c in search(PEOPLE, "12")] == ["2"]
    assert search(PEOPLE, "zzz") == []


def test_display_label_falls_back_to_table():
    assert display_label(PEOPLE[0]) == "Meera Iyer"
    assert display_label(PEOPLE[2]) == "Table 3"


def test_create_and_update_customer(db):
    created = upsert_customer({"name": "  Dev ", "email": "DEV@Example.com"})
    assert created.name == "Dev"
    assert created.email == "dev@example.com"
    assert created.loyalty_points == 0

    updated = upsert_customer({"name": "Dev Patel", "table_number": "9"}, customer_id=created.id)
    assert updated.name == "Dev Patel"
    assert updated.email is None
    assert get_customer(created.id).table_number == "9"


def test_customer_without_any_field_is_allowed(db):
    assert upsert_customer({}).id


def test_invalid_email_rejected(db):
    with pytest.raises(ValidationError):
        upsert_customer({"email": "not-an-email"})


def test_update_unknown_customer(db):
    with pytest.raises(NotFoundError):
        upsert_customer({"name": "Ghost"}, customer_id="missing")


def test_loyalty_adjustments_never_go_negative(customer):
    assert adjust_loyalty_points(customer.id, 15).loyalty_points == 15
    assert adjust_loyalty_points(customer.id, -5).loyalty_points == 10
    with pytest.raises(ValidationError):
        adjust_loyalty_points(customer.id, -11)
    assert get_customer(customer.id).loyalty_points == 10


def test_delete_customer(customer):
    delete_customer(customer.id)
    assert list_customers() == []


def test_customer_with_orders_cannot_be_deleted(place_order, customer):
    place_order()
    with pytest.raises(ValidationError):
        delete_customer(customer.id)
