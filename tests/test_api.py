import pytest


@pytest.fixture
def seeded(client):
    a = client.post("/api/menu-items", json={"name": "Waffle A", "price": 50}).get_json()["data"]
    b = client.post("/api/menu-items", json={"name": "Waffle B", "price": 30}).get_json()["data"]
    customer = client.post(
        "/api/customers", json={"name": "Asha", "phone": "9876543210", "table_number": "4"}
    ).get_json()["data"]
    return {"A": a, "B": b, "customer": customer}


def create_order(client, seeded, **extra):
    payload = {
        "customer_id": seeded["customer"]["id"],
        "items": [
            {"menu_item_id": seeded["A"]["id"], "quantity": 2},
            {"menu_item_id": seeded["B"]["id"], "quantity": 1},
        ],
    }
    payload.update(extra)
    return client.post("/api/orders", json=payload)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_menu_crud(client):
    created = client.post("/api/menu-items", json={"name": "Classic", "price": "99.90"})
    assert created.status_code == 201
    item = created.get_json()["data"]
    assert item["price"] == 99.9

    listed = client.get("/api/menu-items").get_json()
    assert listed["status"] == "success"
    assert [row["id"] for row in listed["data"]] == [item["id"]]

    updated = client.put(f"/api/menu-items/{item['id']}", json={"name": "Classic Waffle"})
    assert updated.get_json()["data"]["name"] == "Classic Waffle"
    assert client.get("/api/menu-items").get_json()["data"][0]["name"] == "Classic Waffle"

    assert client.delete(f"/api/menu-items/{item['id']}").status_code == 200
    assert client.get("/api/menu-items").get_json()["data"] == []


def test_invalid_menu_item_is_400(client):
    response = client.post("/api/menu-items", json={"name": "Broken", "price": -5})
    assert response.status_code == 400
    body = response.get_json()
    assert body["status"] == "error"
    assert body["data"] is None


def test_customer_search(client, seeded):
    client.post("/api/customers", json={"name": "Vikram", "email": "vik@example.com"})

    everyone = client.get("/api/customers").get_json()["data"]
    assert len(everyone) == 2
    found = client.get("/api/customers?q=asha").get_json()["data"]
    assert [c["id"] for c in found] == [seeded["customer"]["id"]]
    assert found[0]["display_label"] == "Asha"


def test_loyalty_adjustment(client, seeded):
    url = f"/api/customers/{seeded['customer']['id']}/loyalty-points"
    assert client.post(url, json={"delta": 20}).get_json()["data"]["loyalty_points"] == 20
    assert client.post(url, json={"delta": -21}).status_code == 400


def test_order_preview_does_not_persist(client, seeded):
    response = client.post(
        "/api/orders/preview",
        json={"items": [{"menu_item_id": seeded["A"]["id"], "quantity": 3}]},
    )
    assert response.status_code == 200
    assert response.get_json()["data"]["total_amount"] == 150.0
    assert client.get("/api/orders").get_json()["data"] == []


def test_order_lifecycle(client, seeded):
    created = create_order(client, seeded)
    assert created.status_code == 201
    order = created.get_json()["data"]
    assert order["status"] == "pending"
    assert order["total_amount"] == 130.0
    assert [item["subtotal"] for item in order["items"]] == [100.0, 30.0]

    bill = client.get(f"/api/orders/{order['id']}/bill")
    assert bill.status_code == 400

    ready = client.post(f"/api/orders/{order['id']}/advance").get_json()["data"]
    assert ready["status"] == "ready"
    paid = client.patch(f"/api/orders/{order['id']}/status", json={"status": "paid"})
    assert paid.get_json()["data"]["status"] == "paid"

    again = client.post(f"/api/orders/{order['id']}/advance")
    assert again.status_code == 409
    assert again.get_json()["details"]["current_status"] == "paid"

    bill = client.get(f"/api/orders/{order['id']}/bill")
    assert bill.status_code == 200
    assert bill.mimetype == "application/pdf"
    assert bill.data.startswith(b"%PDF")
    assert f"bill-{order['id'][:8]}.pdf" in bill.headers["Content-Disposition"]


def test_order_needs_customer_and_items(client, seeded):
    no_customer = client.post(
        "/api/orders", json={"items": [{"menu_item_id": seeded["A"]["id"]}]}
    )
    assert no_customer.status_code == 400
    no_items = client.post("/api/orders", json={"customer_id": seeded["customer"]["id"]})
    assert no_items.status_code == 400
    bad_quantity = create_order(
        client, seeded, items=[{"menu_item_id": seeded["A"]["id"], "quantity": 0}]
    )
    assert bad_quantity.status_code == 400


def test_invalid_status_value_is_400(client, seeded):
    order = create_order(client, seeded).get_json()["data"]
    response = client.patch(f"/api/orders/{order['id']}/status", json={"status": "cancelled"})
    assert response.status_code == 400


def test_skipping_status_is_409(client, seeded):
    order = create_order(client, seeded).get_json()["data"]
    response = client.patch(f"/api/orders/{order['id']}/status", json={"status": "paid"})
    assert response.status_code == 409


def test_orders_list_refreshes_after_writes(client, seeded):
    assert client.get("/api/orders").get_json()["data"] == []
    order = create_order(client, seeded).get_json()["data"]
    assert [o["id"] for o in client.get("/api/orders").get_json()["data"]] == [order["id"]]

    client.delete(f"/api/orders/{order['id']}")
    assert client.get("/api/orders").get_json()["data"] == []
    assert client.get(f"/api/orders/{order['id']}").status_code == 404


def test_orders_filtered_by_day_and_query(client, seeded):
    order = create_order(client, seeded).get_json()["data"]
    day = order["created_at"][:10]

    hits = client.get(f"/api/orders?date={day}&q=9876").get_json()["data"]
    assert [o["id"] for o in hits] == [order["id"]]
    assert client.get(f"/api/orders?date={day}&q=zzz").get_json()["data"] == []
    assert client.get("/api/orders?date=yesterday").status_code == 400


def test_reports(client, seeded):
    order = create_order(client, seeded).get_json()["data"]
    client.post(f"/api/orders/{order['id']}/advance")
    client.post(f"/api/orders/{order['id']}/advance")
    create_order(client, seeded)

    daily = client.get("/api/reports/daily?days=7").get_json()["data"]
    assert len(daily) == 7
    assert daily[-1]["total_revenue"] == 130.0
    assert daily[-1]["order_count"] == 1

    monthly = client.get("/api/reports/monthly").get_json()["data"]
    assert monthly[0]["total_revenue"] == 130.0

    summary = client.get("/api/reports/summary").get_json()["data"]
    assert summary["total_orders"] == 2
    assert summary["total_revenue"] == 130.0

    assert client.get("/api/reports/daily?days=0").status_code == 400


def test_outlets(client, seeded):
    outlet = client.post("/api/outlets", json={"name": "MG Road"}).get_json()["data"]
    create_order(client, seeded, outlet_id=outlet["id"])
    create_order(client, seeded)

    assert [o["id"] for o in client.get("/api/outlets").get_json()["data"]] == [outlet["id"]]
    orders = client.get(f"/api/outlets/{outlet['id']}/orders").get_json()["data"]
    assert len(orders) == 1
    stats = client.get(f"/api/outlets/{outlet['id']}/statistics?days=7").get_json()["data"]
    assert len(stats["days"]) == 7
    assert stats["total_orders"] == 0
    assert client.get("/api/outlets/missing/orders").status_code == 404


def test_loyalty_settings(client):
    assert client.get("/api/loyalty-settings").get_json()["data"] == {
        "points_per_amount": 10,
        "amount_threshold": 100,
    }
    client.put("/api/loyalty-settings", json={"points_per_amount": 2, "amount_threshold": 20})
    assert client.get("/api/loyalty-settings").get_json()["data"]["points_per_amount"] == 2
    bad = client.put("/api/loyalty-settings", json={"points_per_amount": -1})
    assert bad.status_code == 400


def test_unknown_route_uses_error_envelope(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.get_json()["status"] == "error"


def test_bill_for_customer_name_with_markup(client, seeded):
    customer = client.post(
        "/api/customers", json={"name": "Sam <b>VIP", "phone": "R&D desk"}
    ).get_json()["data"]
    order = create_order(client, seeded, customer_id=customer["id"]).get_json()["data"]
    client.post(f"/api/orders/{order['id']}/advance")
    client.post(f"/api/orders/{order['id']}/advance")

    bill = client.get(f"/api/orders/{order['id']}/bill")
    assert bill.status_code == 200
    assert bill.data.startswith(b"%PDF")


@pytest.mark.parametrize("days", ["3651", "100000000", "-1", "abc"])
def test_report_window_is_bounded(client, days):
    outlet = client.post("/api/outlets", json={"name": "MG Road"}).get_json()["data"]

    assert client.get(f"/api/reports/daily?days={days}").status_code == 400
    stats = client.get(f"/api/outlets/{outlet['id']}/statistics?days={days}")
    assert stats.status_code == 400


def test_report_window_upper_limit_is_accepted(client):
    assert len(client.get("/api/reports/daily?days=3650").get_json()["data"]) == 3650


def test_search_without_date_looks_at_today(client, seeded):
    order = create_order(client, seeded).get_json()["data"]

    hits = client.get("/api/orders?q=asha").get_json()["data"]
    assert [o["id"] for o in hits] == [order["id"]]
    assert client.get("/api/orders?q=zzz").get_json()["data"] == []


def test_outlet_statistics_follow_the_current_day(client, seeded, monkeypatch):
    from datetime import timedelta

    from orderly_shared.datetime_utils import utcnow
    from orderly_staff.routes.api import outlets as outlets_api

    outlet = client.post("/api/outlets", json={"name": "MG Road"}).get_json()["data"]
    order = create_order(client, seeded, outlet_id=outlet["id"]).get_json()["data"]
    client.post(f"/api/orders/{order['id']}/advance")
    client.post(f"/api/orders/{order['id']}/advance")

    url = f"/api/outlets/{outlet['id']}/statistics?days=1"
    assert client.get(url).get_json()["data"]["total_orders"] == 1

    tomorrow = utcnow() + timedelta(days=1)
    monkeypatch.setattr(outlets_api, "utcnow", lambda: tomorrow)
    assert client.get(url).get_json()["data"]["total_orders"] == 0
