import logging
import os
import sqlite3

from flask import Flask, Blueprint, jsonify, request
from flask_migrate import Migrate
from sqlalchemy import event
from werkzeug.exceptions import HTTPException

from config import get_config
from models import db, Tenant
from services import (
    StockAppError, ValidationError, NotFoundError, InsufficientStockError, InternalError,
    create_ingredient, list_ingredients, get_ingredient, restock_ingredient,
    update_ingredient_fields, delete_ingredient, inventory_summary, import_ingredients,
    ingredient_with_status,
    create_product, list_products, get_product, update_product, delete_product,
    product_with_recipe,
    process_sale, create_tenant,
)
from utils.tenant import resolve_tenant_id

logger = logging.getLogger(__name__)

migrate = Migrate()

api = Blueprint('api', __name__, url_prefix='/api')


def get_json_body():
    """Parsed JSON body of the request, or ValidationError."""
    data = request.get_json(silent=True)
    if data is None:
        raise ValidationError('Request body must be JSON')
    return data


# ============================================
# ROUTES - INGREDIENTS
# ============================================

@api.route('/ingredients', methods=['GET'])
def ingredients_list():
    tenant_id = resolve_tenant_id()
    return jsonify([ingredient_with_status(i) for i in list_ingredients(tenant_id)])


@api.route('/ingredients', methods=['POST'])
def ingredient_add():
    tenant_id = resolve_tenant_id()
    ingredient = create_ingredient(tenant_id, get_json_body())
    return jsonify(ingredient_with_status(ingredient)), 201


@api.route('/ingredients/<int:id>', methods=['GET'])
def ingredient_view(id):
    tenant_id = resolve_tenant_id()
    return jsonify(ingredient_with_status(get_ingredient(tenant_id, id)))


@api.route('/ingredients/<int:id>', methods=['PUT'])
def ingredient_edit(id):
    tenant_id = resolve_tenant_id()
    ingredient = update_ingredient_fields(tenant_id, id, get_json_body())
    return jsonify(ingredient_with_status(ingredient))


@api.route('/ingredients/<int:id>', methods=['DELETE'])
def ingredient_delete(id):
    tenant_id = resolve_tenant_id()
    delete_ingredient(tenant_id, id)
    return '', 204


@api.route('/ingredients/<int:id>/restock', methods=['POST'])
def ingredient_restock(id):
    tenant_id = resolve_tenant_id()
    data = get_json_body()
    ingredient = restock_ingredient(tenant_id, id, data.get('amount'), mode=data.get('mode', 'package'))
    return jsonify(ingredient_with_status(ingredient))


@api.route('/ingredients/import', methods=['POST'])
def ingredients_import():
    tenant_id = resolve_tenant_id()
    data = get_json_body()
    rows = data.get('ingredients') if isinstance(data, dict) else data
    if not isinstance(rows, list):
        raise ValidationError('ingredients must be a list', field='ingredients')
    report = import_ingredients(tenant_id, rows)
    status = 201 if report['created'] else 400
    return jsonify({
        'created': [ingredient_with_status(i) for i in report['created']],
        'errors': report['errors'],
    }), status


# ============================================
# ROUTES - PRODUCTS
# ============================================

@api.route('/products', methods=['GET'])
def products_list():
    tenant_id = resolve_tenant_id()
    return jsonify([product_with_recipe(p) for p in list_products(tenant_id)])


@api.route('/products', methods=['POST'])
def product_add():
    tenant_id = resolve_tenant_id()
    product = create_product(tenant_id, get_json_body())
    return jsonify(product_with_recipe(product)), 201


@api.route('/products/<int:id>', methods=['GET'])
def product_view(id):
    tenant_id = resolve_tenant_id()
    return jsonify(product_with_recipe(get_product(tenant_id, id)))


@api.route('/products/<int:id>', methods=['PUT'])
def product_edit(id):
    tenant_id = resolve_tenant_id()
    product = update_product(tenant_id, id, get_json_body())
    return jsonify(product_with_recipe(product))


@api.route('/products/<int:id>', methods=['DELETE'])
def product_delete(id):
    tenant_id = resolve_tenant_id()
    delete_product(tenant_id, id)
    return '', 204


# ============================================
# ROUTES - SALES
# ============================================

@api.route('/sales', methods=['POST'])
def sale_create():
    tenant_id = resolve_tenant_id()
    data = get_json_body()
    if not isinstance(data, dict):
        raise ValidationError('Request body must be an object')
    if data.get('productId') is None:
        raise ValidationError('productId is required', field='productId')
    if data.get('quantity') is None:
        raise ValidationError('quantity is required', field='quantity')

    try:
        result = process_sale(tenant_id, data['productId'], data['quantity'])
    except InsufficientStockError as e:
        return jsonify({
            'success': False,
            'message': e.message,
            'missingIngredients': e.missing_ingredients,
            'shortages': [s.to_dict() for s in e.shortages],
        }), e.status_code
    except NotFoundError as e:
        return jsonify({'success': False, 'message': e.message}), e.status_code
    return jsonify(result.to_dict())


# ============================================
# ROUTES - DASHBOARD
# ============================================

@api.route('/dashboard', methods=['GET'])
def dashboard():
    tenant_id = resolve_tenant_id()
    summary = inventory_summary(tenant_id)
    return jsonify({
        'productCount': summary['productCount'],
        'ingredientCount': summary['ingredientCount'],
        'lowStock': [ingredient_with_status(i) for i in summary['lowStock']],
        'topStock': [
            {'name': i.name, 'quantity': i.quantity, 'min': i.min_stock_level}
            for i in summary['topStock']
        ],
    })


# ============================================
# ERROR HANDLERS
# ============================================

def handle_app_error(error):
    return jsonify(error.to_dict()), error.status_code


def handle_http_error(error):
    return jsonify({'message': error.description}), error.code


def handle_unexpected_error(error):
    logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=error)
    internal = InternalError()
    return jsonify(internal.to_dict()), internal.status_code


# ============================================
# APPLICATION FACTORY
# ============================================

def set_sqlite_pragma(dbapi_connection, connection_record):
    if isinstance(dbapi_connection, sqlite3.Connection):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def configure_logging(app):
    logging.basicConfig(
        level=app.config.get('LOG_LEVEL', 'INFO'),
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))


def create_app(config_name=None, **overrides):
    """
    Build the Flask application.

    Args:
        config_name: development / production / testing (default: FLASK_ENV)
        overrides: config keys to set on top of the selected config class
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))
    app.config.update(overrides)

    configure_logging(app)

    db.init_app(app)
    with app.app_context():
        # Enable SQLite foreign key enforcement on every connection
        event.listen(db.engine, 'connect', set_sqlite_pragma)
    migrate.init_app(app, db)

    app.register_blueprint(api)
    app.register_error_handler(StockAppError, handle_app_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected_error)

    @app.route('/health')
    def health():
        return jsonify({'status': 'healthy'})

    @app.cli.command('init-db')
    def init_db_command():
        """Create tables and, if configured, seed the demo pizzeria."""
        init_db(app)
        print('Database initialized')

    return app


# ============================================
# INITIALIZE DATABASE
# ============================================

def seed_demo_data(tenant_id):
    """Demo pizzeria stock and one pizza, for a tenant with no ingredients yet."""
    if list_ingredients(tenant_id):
        return False

    logger.info("Seeding demo data for tenant %s", tenant_id)
    flour = create_ingredient(tenant_id, {
        'name': 'Wheat Flour', 'unit': 'g', 'quantity': 12000,
        'packageSize': 5000, 'packageLabel': 'bag', 'packagePrice': 2500,
    })
    cheese = create_ingredient(tenant_id, {
        'name': 'Mozzarella', 'unit': 'g', 'quantity': 2000,
        'packageSize': 1000, 'packageLabel': 'block', 'packagePrice': 3000,
    })
    sauce = create_ingredient(tenant_id, {
        'name': 'Tomato Sauce', 'unit': 'ml', 'quantity': 1000,
        'packageSize': 500, 'packageLabel': 'bottle', 'packagePrice': 600,
    })
    create_product(tenant_id, {
        'name': 'Pizza Mussarela',
        'price': 4500,
        'description': 'Classic mozzarella pizza',
        'recipeLines': [
            {'ingredientId': flour.id, 'quantityRequired': 300},
            {'ingredientId': cheese.id, 'quantityRequired': 200},
            {'ingredientId': sauce.id, 'quantityRequired': 100},
        ],
    })
    return True


def init_db(app):
    with app.app_context():
        db.create_all()

        if app.config.get('SEED_DEMO_DATA'):
            tenant = db.session.execute(db.select(Tenant).order_by(Tenant.id)).scalars().first()
            if tenant is None:
                tenant = create_tenant('Demo Pizzeria', os.environ.get('DEMO_CREDENTIAL', 'demo-pizzeria'), 'pizza')
            seed_demo_data(tenant.id)


if __name__ == '__main__':
    app = create_app()
    init_db(app)
    # host='0.0.0.0' allows access from other devices on the network
    app.run(debug=app.config.get('DEBUG', False), host='0.0.0.0', port=5000, use_reloader=False)
