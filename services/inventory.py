"""
Inventory Service

Tenant-scoped ingredient records and the stock mutation primitives.

All stock changes go through apply_stock_delta(), which issues a single
relative UPDATE guarded by `quantity + delta >= 0`. The read-then-write
pattern is never used for quantities, so concurrent adjustments cannot
lose updates or push stock below zero.
"""

import logging

from sqlalchemy import func, select, update

from constants import (
    VALID_BASE_UNITS, VALID_RESTOCK_MODES, DEFAULT_MIN_STOCK_LEVEL,
    DEFAULT_PACKAGE_SIZE, MAX_QUANTITY, MAX_PACKAGE_SIZE, MAX_PRICE_CENTS,
    MAX_NAME_LENGTH, MAX_LABEL_LENGTH
)
from models import db, Ingredient, Product, RecipeLine, Tenant
from .errors import (
    ValidationError, NotFoundError, InsufficientStockError,
    IngredientInUseError, StockAppError, Shortage
)
from .packaging import (
    base_units_from_packages, cost_per_base_unit, describe_packaged_stock,
    format_quantity, price_to_cents
)
from .unit_of_work import unit_of_work
from .validation import get_int, get_name, get_text, parse_int, reject_unknown

logger = logging.getLogger(__name__)

# Payload keys accepted on create; quantity is not editable afterwards
INGREDIENT_FIELDS = {
    'name', 'unit', 'quantity', 'packageSize', 'packageLabel',
    'packagePrice', 'minStockLevel',
}
INGREDIENT_UPDATE_FIELDS = INGREDIENT_FIELDS - {'quantity'}

TOP_STOCK_LIMIT = 10


# ============================================
# VALIDATION
# ============================================

def _validate_unit(data):
    unit = str(data.get('unit') or '').strip().lower()
    if not unit:
        raise ValidationError('unit is required', field='unit')
    if unit not in VALID_BASE_UNITS:
        raise ValidationError(f'Invalid unit: {unit}', field='unit')
    return unit


def validate_ingredient_fields(data, partial=False):
    """
    Validate an ingredient payload and map it to model attributes.

    Args:
        data: camelCase payload (name, unit, quantity, packageSize, ...)
        partial: only validate keys that are present (update)

    Returns:
        dict of model attribute -> value
    """
    reject_unknown(data, INGREDIENT_UPDATE_FIELDS if partial else INGREDIENT_FIELDS)
    fields = {}

    if not partial or 'name' in data:
        fields['name'] = get_name(data, 'name', MAX_NAME_LENGTH)
    if not partial or 'unit' in data:
        fields['unit'] = _validate_unit(data)
    if not partial:
        fields['quantity'] = get_int(data, 'quantity', default=0, min_val=0, max_val=MAX_QUANTITY)
    if not partial or 'packageSize' in data:
        fields['package_size'] = get_int(data, 'packageSize', default=DEFAULT_PACKAGE_SIZE,
                                         required=partial, min_val=1, max_val=MAX_PACKAGE_SIZE)
    if not partial or 'packageLabel' in data:
        fields['package_label'] = get_text(data, 'packageLabel', MAX_LABEL_LENGTH)
    if not partial or 'packagePrice' in data:
        fields['package_price'] = get_int(data, 'packagePrice', min_val=0, max_val=MAX_PRICE_CENTS)
    if not partial or 'minStockLevel' in data:
        fields['min_stock_level'] = get_int(data, 'minStockLevel', default=DEFAULT_MIN_STOCK_LEVEL,
                                            required=partial, min_val=0, max_val=MAX_QUANTITY)
    return fields


# ============================================
# QUERIES
# ============================================

def _ingredient_query(tenant_id):
    return select(Ingredient).where(Ingredient.tenant_id == tenant_id)


def _require_tenant(session, tenant_id):
    if session.get(Tenant, tenant_id) is None:
        raise NotFoundError(f'Tenant {tenant_id} not found')


def _get_for_tenant(session, tenant_id, ingredient_id):
    ingredient = session.execute(
        _ingredient_query(tenant_id).where(Ingredient.id == ingredient_id)
    ).scalar_one_or_none()
    if ingredient is None:
        raise NotFoundError(f'Ingredient {ingredient_id} not found')
    return ingredient


def list_ingredients(tenant_id):
    """All ingredients of the tenant, ordered by name."""
    return db.session.execute(
        _ingredient_query(tenant_id).order_by(Ingredient.name, Ingredient.id)
    ).scalars().all()


def get_ingredient(tenant_id, ingredient_id):
    return _get_for_tenant(db.session, tenant_id, ingredient_id)


def lock_ingredients(session, tenant_id, ingredient_ids):
    """
    Load and row-lock the given tenant ingredients, keyed by id.

    Rows are locked in id order so two transactions touching overlapping
    ingredient sets cannot deadlock. Missing ids are simply absent from
    the result. On SQLite FOR UPDATE is not rendered; the guarded UPDATE
    in apply_stock_delta() still keeps quantities consistent there.
    """
    if not ingredient_ids:
        return {}
    rows = session.execute(
        _ingredient_query(tenant_id)
        .where(Ingredient.id.in_(sorted(set(ingredient_ids))))
        .order_by(Ingredient.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).scalars().all()
    return {ingredient.id: ingredient for ingredient in rows}


# ============================================
# STOCK MUTATION
# ============================================

def apply_stock_delta(session, tenant_id, ingredient_id, delta):
    """
    Add `delta` base units to an ingredient inside the caller's transaction.

    Issues `UPDATE ... SET quantity = quantity + :delta WHERE quantity + :delta >= 0`
    so the check and the write are one atomic statement.

    Raises:
        NotFoundError: no such ingredient for this tenant
        InsufficientStockError: the result would be negative
    """
    result = session.execute(
        update(Ingredient)
        .where(
            Ingredient.id == ingredient_id,
            Ingredient.tenant_id == tenant_id,
            Ingredient.quantity + delta >= 0,
        )
        .values(quantity=Ingredient.quantity + delta)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 1:
        return

    ingredient = session.execute(
        _ingredient_query(tenant_id)
        .where(Ingredient.id == ingredient_id)
        .execution_options(populate_existing=True)
    ).scalar_one_or_none()
    if ingredient is None:
        raise NotFoundError(f'Ingredient {ingredient_id} not found')
    raise InsufficientStockError([
        Shortage(ingredient.id, ingredient.name, -delta, ingredient.quantity, ingredient.unit)
    ])


def adjust_stock(tenant_id, ingredient_id, delta):
    """
    Change an ingredient's stock by `delta` base units in its own transaction.

    Positive deltas restock. Negative deltas are reserved for sales, which
    run through services.sales so the whole recipe is deducted at once.

    Returns:
        The ingredient with its new quantity
    """
    delta = parse_int(delta, 'delta')
    with unit_of_work() as session:
        apply_stock_delta(session, tenant_id, ingredient_id, delta)
        ingredient = _get_for_tenant(session, tenant_id, ingredient_id)
        session.refresh(ingredient)
    logger.info("Stock of ingredient %s (tenant %s) changed by %+d", ingredient_id, tenant_id, delta)
    return ingredient


def restock_ingredient(tenant_id, ingredient_id, amount, mode='package'):
    """
    Add stock by whole packages or by raw base units.

    The package size is read under the row lock, in the same transaction
    as the increment.

    Args:
        amount: number of packages (mode='package') or base units (mode='unit')
        mode: 'package' or 'unit'
    """
    if mode not in VALID_RESTOCK_MODES:
        raise ValidationError(f'Invalid restock mode: {mode}', field='mode')
    amount = parse_int(amount, 'amount', min_val=1, max_val=MAX_QUANTITY)

    with unit_of_work() as session:
        ingredient = lock_ingredients(session, tenant_id, [ingredient_id]).get(ingredient_id)
        if ingredient is None:
            raise NotFoundError(f'Ingredient {ingredient_id} not found')
        if mode == 'unit':
            delta = amount
        else:
            delta = base_units_from_packages(amount, ingredient.package_size)
        if delta > MAX_QUANTITY:
            raise ValidationError(f'amount must be at most {MAX_QUANTITY} base units', field='amount')
        apply_stock_delta(session, tenant_id, ingredient_id, delta)
        session.refresh(ingredient)
    logger.info("Ingredient %s (tenant %s) restocked by %d %s(s): %+d",
                ingredient_id, tenant_id, amount, mode, delta)
    return ingredient


# ============================================
# CRUD
# ============================================

def create_ingredient(tenant_id, data):
    """
    Create an ingredient for the tenant.

    Raises:
        ValidationError: negative quantity, packageSize < 1, bad unit, ...
        NotFoundError: unknown tenant
    """
    fields = validate_ingredient_fields(data)
    with unit_of_work() as session:
        _require_tenant(session, tenant_id)
        ingredient = Ingredient(tenant_id=tenant_id, **fields)
        session.add(ingredient)
        session.flush()
        ingredient_id = ingredient.id
    logger.info("Ingredient %s created for tenant %s: %s", ingredient_id, tenant_id, fields['name'])
    return ingredient


def update_ingredient_fields(tenant_id, ingredient_id, data):
    """
    Edit non-stock fields (name, unit, packaging, price, threshold).

    Stock quantity is not accepted here; use restock_ingredient().
    """
    if 'quantity' in (data or {}):
        raise ValidationError('quantity cannot be edited directly, use a restock', field='quantity')
    fields = validate_ingredient_fields(data or {}, partial=True)
    with unit_of_work() as session:
        ingredient = _get_for_tenant(session, tenant_id, ingredient_id)
        for attr, value in fields.items():
            setattr(ingredient, attr, value)
    return ingredient


def delete_ingredient(tenant_id, ingredient_id):
    """
    Delete an ingredient that no recipe uses.

    Raises:
        IngredientInUseError: one or more products still list it in their recipe
    """
    with unit_of_work() as session:
        ingredient = _get_for_tenant(session, tenant_id, ingredient_id)
        product_names = session.execute(
            select(Product.name)
            .join(RecipeLine, RecipeLine.product_id == Product.id)
            .where(RecipeLine.ingredient_id == ingredient_id, Product.tenant_id == tenant_id)
            .order_by(Product.name)
        ).scalars().all()
        if product_names:
            raise IngredientInUseError(ingredient.name, product_names)
        name = ingredient.name
        session.delete(ingredient)
    logger.info("Ingredient %s deleted for tenant %s: %s", ingredient_id, tenant_id, name)


# ============================================
# STOCK STATUS
# ============================================

def is_low_stock(ingredient):
    """True when stock is at or below the alert threshold (<=, not <)."""
    threshold = ingredient.min_stock_level
    if threshold is None:
        threshold = DEFAULT_MIN_STOCK_LEVEL
    return ingredient.quantity <= threshold


def low_stock_ingredients(tenant_id):
    return [i for i in list_ingredients(tenant_id) if is_low_stock(i)]


def inventory_summary(tenant_id):
    """
    Dashboard numbers for a tenant.

    Returns:
        dict with productCount, ingredientCount, lowStock (ingredients at or
        below threshold) and topStock (10 largest stocks, by quantity)
    """
    ingredients = list_ingredients(tenant_id)
    product_count = db.session.execute(
        select(func.count(Product.id)).where(Product.tenant_id == tenant_id)
    ).scalar_one()

    top_stock = sorted(ingredients, key=lambda i: i.quantity, reverse=True)[:TOP_STOCK_LIMIT]
    return {
        'productCount': product_count,
        'ingredientCount': len(ingredients),
        'lowStock': [i for i in ingredients if is_low_stock(i)],
        'topStock': top_stock,
    }


# ============================================
# BULK IMPORT
# ============================================

def import_ingredients(tenant_id, rows):
    """
    Create ingredients from an external import, one row at a time.

    Rows are independent: each one is created in its own transaction and a
    bad row does not undo the rows before it. A row may give its package
    price in cents (packagePrice) or as a decimal amount (price).

    Returns:
        dict with 'created' (ingredients) and 'errors' (row index + message)
    """
    created = []
    errors = []
    for index, row in enumerate(rows):
        try:
            if not isinstance(row, dict):
                raise ValidationError('Row must be an object')
            row = dict(row)
            if 'price' in row:
                price = row.pop('price')
                if 'packagePrice' not in row:
                    try:
                        row['packagePrice'] = price_to_cents(price)
                    except (TypeError, ValueError, OverflowError):
                        raise ValidationError('price must be a number', field='price')
            created.append(create_ingredient(tenant_id, row))
        except StockAppError as e:
            logger.warning("Import row %d rejected for tenant %s: %s", index, tenant_id, e.message)
            errors.append({'row': index, 'message': e.message})
    logger.info("Imported %d of %d ingredients for tenant %s", len(created), len(rows), tenant_id)
    return {'created': created, 'errors': errors}


def ingredient_with_status(ingredient):
    """Serialize an ingredient with its low-stock flag, unit cost and display strings."""
    data = ingredient.to_dict()
    data['lowStock'] = is_low_stock(ingredient)
    data['costPerUnit'] = cost_per_base_unit(ingredient.package_price, ingredient.package_size)
    data['displayQuantity'] = format_quantity(ingredient.quantity, ingredient.unit)
    data['packageStatus'] = describe_packaged_stock(
        ingredient.quantity, ingredient.package_size, ingredient.unit, ingredient.package_label
    )
    return data
