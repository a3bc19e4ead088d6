from datetime import datetime
from decimal import Decimal

import pytest

from orderly_shared.constants import OrderStatus
from orderly_shared.schemas import CustomerRecord, LineItemRecord, OrderRecord
from orderly_shared.services.bill_pdf_service import BillPDFService, bill_filename, generate_bill
from orderly_shared.services.order_service import advance_order
from orderly_shared.validation import ValidationError


def paid_order(**overrides):
    fields = {
        "id": "1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed",
        "customer_id": "c1",
        "status": OrderStatus.PAID,
        "total_amount": Decimal("130.00"),
        "created_at": datetime(2024, 3, 10, 19, 30),
        "customer": CustomerRecord(id="c1", table_number="4"),
        "items": [
            LineItemRecord(
                menu_item_id="a", menu_item_name="Waffle A", quantity=2, unit_price="50.00"
            ),
            LineItemRecord(
                menu_item_id="b", menu_item_name="Waffle B", quantity=1, unit_price="30.00"
            ),
        ],
    }
    fields.update(overrides)
    return OrderRecord(**fields)


def test_bill_is_a_pdf():
    pdf = BillPDFService().generate_pdf(paid_order())
    assert pdf.startswith(b"%PDF")
    assert len(pdf) > 500


def test_bill_filename_uses_short_id():
    assert bill_filename(paid_order()) == "bill-1b9d6bcd.pdf"


@pytest.mark.parametrize("status", [OrderStatus.PENDING, OrderStatus.READY])
def test_unpaid_orders_have_no_bill(status):
    with pytest.raises(ValidationError):
        BillPDFService().generate_pdf(paid_order(status=status))


def test_generate_bill_for_stored_order(place_order):
    order = place_order()
    with pytest.raises(ValidationError):
        generate_bill(order.id)

    advance_order(order.id)
    advance_order(order.id)
    pdf, filename = generate_bill(order.id, restaurant_name="Test Cafe")
    assert pdf.startswith(b"%PDF")
    assert filename == f"bill-{order.id[:8]}.pdf"


def test_markup_characters_in_free_text_are_escaped():
    customer = CustomerRecord(id="c1", name="Sam <b>VIP & Co", phone="<555>")
    service = BillPDFService(restaurant_name="Waffles & <Crepes>")
    pdf = service.generate_pdf(paid_order(customer=customer))
    assert pdf.startswith(b"%PDF")
