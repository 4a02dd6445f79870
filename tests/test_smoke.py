"""
Smoke tests for the stock app.
Run with: python tests/test_smoke.py
"""

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

def test_app_imports():
    """Verify the app factory and db can be imported without errors."""
    from app import create_app, db
    assert callable(create_app)
    assert db is not None
    print("OK: App imports successfully")

def test_models_import():
    """Verify models can be imported."""
    from models import Tenant, Ingredient, Product, RecipeLine
    assert Tenant is not None
    assert Ingredient is not None
    assert Product is not None
    assert RecipeLine is not None
    print("OK: Models import successfully")

def test_services_import():
    """Verify the sale entry point and its errors can be imported."""
    from services import process_sale, InsufficientStockError, StockAppError
    assert callable(process_sale)
    assert issubclass(InsufficientStockError, StockAppError)
    print("OK: Services import successfully")

def test_constants_unchanged():
    """Verify critical constants have expected values."""
    from constants import VALID_BASE_UNITS, DEFAULT_MIN_STOCK_LEVEL, DEFAULT_PACKAGE_SIZE, CENTS_PER_UNIT

    # These values must not change
    assert VALID_BASE_UNITS == {'g', 'ml', 'un'}
    assert DEFAULT_MIN_STOCK_LEVEL == 10
    assert DEFAULT_PACKAGE_SIZE == 1
    assert CENTS_PER_UNIT == 100
    print("OK: Constants unchanged")

def test_app_runs():
    """Verify app can create test client."""
    from app import create_app
    app = create_app('testing')
    with app.test_client() as client:
        response = client.get('/health')
        assert response.status_code == 200
        print("OK: App serves health check")

def test_init_db_seeds_demo_pizzeria():
    """Verify init_db creates the demo tenant once, with stock and a costed pizza."""
    from app import create_app, init_db
    from models import db, Tenant
    from services import list_ingredients, list_products, compute_production_cost

    app = create_app('testing', SEED_DEMO_DATA=True)
    init_db(app)
    init_db(app)

    with app.app_context():
        tenants = db.session.execute(db.select(Tenant)).scalars().all()
        assert [t.name for t in tenants] == ['Demo Pizzeria']
        assert len(list_ingredients(tenants[0].id)) == 3
        [pizza] = list_products(tenants[0].id)
        assert round(compute_production_cost(pizza)) == 870
        db.drop_all()
    print("OK: Demo data seeded")

if __name__ == '__main__':
    print("Running smoke tests...\n")

    tests = [
        test_app_imports,
        test_models_import,
        test_services_import,
        test_constants_unchanged,
        test_app_runs,
        test_init_db_seeds_demo_pizzeria,
    ]

    failed = 0
    for test in tests:
        try:
            test()
        except Exception as e:
            print(f"FAIL: {test.__name__} - {e}")
            failed += 1

    print(f"\n{'='*40}")
    if failed:
        print(f"FAILED: {failed}/{len(tests)} tests")
        sys.exit(1)
    else:
        print(f"PASSED: {len(tests)}/{len(tests)} tests")
        sys.exit(0)
