import itertools
import os
from datetime import datetime
from decimal import Decimal

import pytest

os.environ.setdefault("APP_ENV", "testing")

from bazaarbuddy import create_app  # noqa: E402
from bazaarbuddy.config import TestingConfig  # noqa: E402
from bazaarbuddy.models import db, User, Item, Order, OrderLine, OrderStatusLog  # noqa: E402
from bazaarbuddy.utils import create_access_token  # noqa: E402


@pytest.fixture(scope="session")
def app_instance():
    return create_app(TestingConfig)


@pytest.fixture(scope="function")
def app(app_instance):
    with app_instance.app_context():
        db.drop_all()
        db.create_all()
        yield app_instance
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope="function")
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(role="vendor", **kwargs):
        n = next(counter)
        user = User(
            name=kwargs.pop("name", f"{role.title()} {n}"),
            email=kwargs.pop("email", f"{role}{n}@example.test"),
            role=role,
            **kwargs,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_item(app):
    def _make(supplier, name="Tomato", price="50.00", stock=10, category="vegetables", unit="kg", **kwargs):
        item = Item(
            supplier_id=supplier.id,
            name=name,
            price=Decimal(price),
            stock=stock,
            category=category,
            unit=unit,
            **kwargs,
        )
        db.session.add(item)
        db.session.commit()
        return item

    return _make


@pytest.fixture
def auth_header(app):
    def _header(user):
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}

    return _header


@pytest.fixture
def record_sale(app):
    """Insert a historical order line for ``item`` at ``price`` on ``when``."""
    counter = itertools.count(1)

    def _record(vendor, item, price, when, quantity=1):
        if isinstance(when, str):
            when = datetime.fromisoformat(when)
        price = Decimal(str(price))
        order = Order(
            order_number=f"HIST-{next(counter)}",
            vendor_id=vendor.id,
            supplier_id=item.supplier_id,
            status="delivered",
            delivery_address="Stall 4, Market Road",
            total_amount=price * quantity,
            created_at=when,
        )
        order.lines.append(OrderLine(
            position=0,
            item_id=item.id,
            name=item.name,
            unit=item.unit,
            price=price,
            quantity=quantity,
            total=price * quantity,
        ))
        db.session.add(order)
        db.session.flush()
        db.session.add(OrderStatusLog(order_id=order.id, status="delivered", updated_by=vendor.id))
        db.session.commit()
        return order

    return _record
