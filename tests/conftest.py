import pytest

from orderly_shared.config import load_config
from orderly_shared.db import dispose_engine, init_db, init_engine
from orderly_shared.models import Base
from orderly_shared.services.customer_service import upsert_customer
from orderly_shared.services.menu_service import create_menu_item
from orderly_shared.services.order_draft import OrderDraft


@pytest.fixture(autouse=True)
def test_env(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite:///:memory:")
    monkeypatch.setenv("DEBUG_MODE", "true")
    monkeypatch.setenv("SECRET_KEY", "test-secret-key-not-for-production")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")
    monkeypatch.delenv("REPORT_WINDOW_DAYS", raising=False)
    monkeypatch.delenv("CORS_ALLOWED_ORIGINS", raising=False)


@pytest.fixture
def db(test_env):
    """Fresh in-memory schema for each test."""
    dispose_engine()
    init_engine(load_config("orderly-test"))
    init_db(Base.metadata)
    yield
    dispose_engine()


@pytest.fixture
def app(db):
    from orderly_staff.app import create_app

    app = create_app({"TESTING": True})
    yield app
    app.extensions["query_cache"].disconnect_signals()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def menu_items(db):
    """Two menu items: A at 50.00 and B at 30.00."""
    return {
        "A": create_menu_item({"name": "Waffle A", "price": "50.00"}),
        "B": create_menu_item({"name": "Waffle B", "price": "30.00"}),
    }


@pytest.fixture
def customer(db):
    return upsert_customer({"name": "Asha Rao", "phone": "9876543210", "table_number": "4"})


@pytest.fixture
def place_order(menu_items, customer):
    """Commit an order of (menu key, quantity) pairs for the seeded customer."""

    def _place(lines=(("A", 2), ("B", 1)), customer_id=None, outlet_id=None):
        draft = OrderDraft(outlet_id=outlet_id)
        draft.select_customer(customer_id or customer.id)
        for key, quantity in lines:
            draft.add_line_item(menu_items[key].id, quantity)
        return draft.commit()

    return _place
