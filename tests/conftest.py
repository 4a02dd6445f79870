"""
Shared fixtures: an app on an in-memory database, tenants, and the
demo pizza (flour, cheese, sauce) used by most scenarios.
"""

import pytest

from app import create_app
from models import db
from services import create_tenant, create_ingredient, create_product, get_ingredient


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tenant_id(app):
    return create_tenant('Pizzaria Teste', 'secret-123', 'pizza').id


@pytest.fixture
def other_tenant_id(app):
    return create_tenant('Burger Place', 'secret-456', 'hamburger').id


@pytest.fixture
def pizza(tenant_id):
    """
    Pizza recipe: 300 g flour (0.5c/g), 200 g cheese (3c/g), 100 ml sauce (1.2c/ml).
    Production cost 870c, sale price 4500c.
    """
    flour = create_ingredient(tenant_id, {
        'name': 'flour', 'unit': 'g', 'quantity': 12000,
        'packageSize': 5000, 'packageLabel': 'bag', 'packagePrice': 2500,
    })
    cheese = create_ingredient(tenant_id, {
        'name': 'cheese', 'unit': 'g', 'quantity': 2000,
        'packageSize': 1000, 'packageLabel': 'block', 'packagePrice': 3000,
    })
    sauce = create_ingredient(tenant_id, {
        'name': 'sauce', 'unit': 'ml', 'quantity': 1000,
        'packageSize': 500, 'packageLabel': 'bottle', 'packagePrice': 600,
    })
    product = create_product(tenant_id, {
        'name': 'Pizza',
        'price': 4500,
        'recipeLines': [
            {'ingredientId': flour.id, 'quantityRequired': 300},
            {'ingredientId': cheese.id, 'quantityRequired': 200},
            {'ingredientId': sauce.id, 'quantityRequired': 100},
        ],
    })
    return {
        'tenant_id': tenant_id,
        'product_id': product.id,
        'flour': flour.id,
        'cheese': cheese.id,
        'sauce': sauce.id,
    }


def stock_of(tenant_id, ingredient_id):
    """Current committed quantity of an ingredient."""
    db.session.expire_all()
    return get_ingredient(tenant_id, ingredient_id).quantity


def stock_snapshot(tenant_id, ingredient_ids):
    return {ingredient_id: stock_of(tenant_id, ingredient_id) for ingredient_id in ingredient_ids}


@pytest.fixture
def stock(app):
    return stock_of


@pytest.fixture
def snapshot(app):
    return stock_snapshot
