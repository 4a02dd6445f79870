"""
Concurrent sales against a shared file database.

Each worker thread runs in its own app context (and therefore its own
session and connection) and all of them start selling at the same time.
"""

import threading

import pytest

from app import create_app
from models import db
from services import (
    InsufficientStockError, create_tenant, create_ingredient, create_product,
    get_ingredient, process_sale,
)

WORKERS = 8


@pytest.fixture
def shared_app(tmp_path):
    app = create_app(
        'testing',
        SQLALCHEMY_DATABASE_URI=f"sqlite:///{tmp_path / 'stock.db'}",
        SQLALCHEMY_ENGINE_OPTIONS={'connect_args': {'timeout': 30}},
    )
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


def setup_burger(app, sales_in_stock):
    """A burger needing 1 bun and 150 g of beef, with stock for `sales_in_stock` burgers."""
    with app.app_context():
        tenant = create_tenant('Burger Place', 'secret-456', 'hamburger')
        bun = create_ingredient(tenant.id, {'name': 'bun', 'unit': 'un', 'quantity': sales_in_stock})
        beef = create_ingredient(tenant.id, {'name': 'beef', 'unit': 'g', 'quantity': 150 * sales_in_stock})
        burger = create_product(tenant.id, {
            'name': 'Burger', 'price': 3200,
            'recipeLines': [
                {'ingredientId': bun.id, 'quantityRequired': 1},
                {'ingredientId': beef.id, 'quantityRequired': 150},
            ],
        })
        return tenant.id, burger.id, bun.id, beef.id


def run_concurrent_sales(app, tenant_id, product_id, count):
    barrier = threading.Barrier(count)
    outcomes = []

    def sell():
        with app.app_context():
            barrier.wait()
            try:
                process_sale(tenant_id, product_id, 1)
                outcomes.append('sold')
            except InsufficientStockError:
                outcomes.append('short')
            except Exception as e:
                outcomes.append(e)
            finally:
                db.session.remove()

    threads = [threading.Thread(target=sell) for _ in range(count)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=60)
    return outcomes


def remaining(app, tenant_id, *ingredient_ids):
    with app.app_context():
        return [get_ingredient(tenant_id, i).quantity for i in ingredient_ids]


def test_concurrent_sales_within_stock_all_succeed(shared_app):
    tenant_id, product_id, bun_id, beef_id = setup_burger(shared_app, WORKERS)

    outcomes = run_concurrent_sales(shared_app, tenant_id, product_id, WORKERS)

    assert outcomes.count('sold') == WORKERS
    assert remaining(shared_app, tenant_id, bun_id, beef_id) == [0, 0]


def test_concurrent_sales_never_oversell(shared_app):
    tenant_id, product_id, bun_id, beef_id = setup_burger(shared_app, WORKERS)

    outcomes = run_concurrent_sales(shared_app, tenant_id, product_id, WORKERS + 1)

    unexpected = [o for o in outcomes if o not in ('sold', 'short')]
    assert unexpected == []
    assert outcomes.count('sold') == WORKERS
    assert outcomes.count('short') == 1
    assert remaining(shared_app, tenant_id, bun_id, beef_id) == [0, 0]
