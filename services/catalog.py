"""
Catalog Service

Products and their recipes (bill of materials), plus production cost
and margin calculations.

A product and its recipe lines are always written together in one
transaction: a product never exists with only part of its recipe.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from constants import MAX_NAME_LENGTH, MAX_DESCRIPTION_LENGTH, MAX_PRICE_CENTS, MAX_QUANTITY
from models import db, Ingredient, Product, RecipeLine, Tenant
from utils.sanitizer import sanitize_url
from .errors import ValidationError, NotFoundError
from .packaging import cost_per_base_unit
from .unit_of_work import unit_of_work
from .validation import get_int, get_name, get_text, parse_int, reject_unknown

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = {'name', 'description', 'price', 'imageUrl', 'recipeLines'}
RECIPE_LINE_FIELDS = {'ingredientId', 'quantityRequired'}


# ============================================
# VALIDATION
# ============================================

def validate_product_fields(data, partial=False):
    """Validate a product payload (without its recipe) and map it to model attributes."""
    reject_unknown(data, PRODUCT_FIELDS)
    fields = {}

    if not partial or 'name' in data:
        fields['name'] = get_name(data, 'name', MAX_NAME_LENGTH)
    if not partial or 'description' in data:
        fields['description'] = get_text(data, 'description', MAX_DESCRIPTION_LENGTH)
    if not partial or 'price' in data:
        fields['price'] = get_int(data, 'price', required=True, min_val=0, max_val=MAX_PRICE_CENTS)
    if not partial or 'imageUrl' in data:
        image_url = data.get('imageUrl')
        if image_url and not sanitize_url(image_url):
            raise ValidationError('imageUrl must be an http(s) URL', field='imageUrl')
        fields['image_url'] = sanitize_url(image_url) or None
    return fields


def validate_recipe_lines(lines):
    """
    Validate recipe lines and return them as (ingredient_id, quantity_required) pairs.

    Each ingredient may appear only once per recipe.
    """
    if lines is None:
        return []
    if not isinstance(lines, (list, tuple)):
        raise ValidationError('recipeLines must be a list', field='recipeLines')

    parsed = []
    seen = set()
    for index, line in enumerate(lines):
        if not isinstance(line, dict):
            raise ValidationError(f'recipeLines[{index}] must be an object', field='recipeLines')
        reject_unknown(line, RECIPE_LINE_FIELDS)
        ingredient_id = get_int(line, 'ingredientId', required=True, min_val=1)
        quantity_required = get_int(line, 'quantityRequired', required=True, min_val=1, max_val=MAX_QUANTITY)
        if ingredient_id in seen:
            raise ValidationError(f'Ingredient {ingredient_id} appears twice in the recipe', field='recipeLines')
        seen.add(ingredient_id)
        parsed.append((ingredient_id, quantity_required))
    return parsed


def _check_ingredients_belong_to_tenant(session, tenant_id, recipe):
    ids = {ingredient_id for ingredient_id, _ in recipe}
    if not ids:
        return
    found = set(session.execute(
        select(Ingredient.id).where(Ingredient.tenant_id == tenant_id, Ingredient.id.in_(ids))
    ).scalars().all())
    missing = sorted(ids - found)
    if missing:
        raise ValidationError(f'Unknown ingredient: {missing[0]}', field='recipeLines')


# ============================================
# QUERIES
# ============================================

def _product_query(tenant_id):
    return (
        select(Product)
        .where(Product.tenant_id == tenant_id)
        .options(selectinload(Product.recipe_lines).selectinload(RecipeLine.ingredient))
    )


def load_product(session, tenant_id, product_id):
    product = session.execute(
        _product_query(tenant_id).where(Product.id == product_id)
    ).scalar_one_or_none()
    if product is None:
        raise NotFoundError(f'Product {product_id} not found')
    return product


def list_products(tenant_id):
    """All products of the tenant with their recipe lines and ingredients loaded."""
    return db.session.execute(
        _product_query(tenant_id).order_by(Product.name, Product.id)
    ).scalars().all()


def get_product(tenant_id, product_id):
    return load_product(db.session, tenant_id, product_id)


# ============================================
# CRUD
# ============================================

def create_product(tenant_id, data, recipe_lines=None):
    """
    Create a product together with its recipe.

    Args:
        data: name, description, price (cents), imageUrl, optionally recipeLines
        recipe_lines: [{ingredientId, quantityRequired}, ...]; overrides data['recipeLines']

    Raises:
        ValidationError: bad fields, or a line names an ingredient the tenant
            does not own. Nothing is persisted in that case.
    """
    if recipe_lines is None:
        recipe_lines = data.get('recipeLines')
    fields = validate_product_fields(data)
    recipe = validate_recipe_lines(recipe_lines)

    with unit_of_work() as session:
        if session.get(Tenant, tenant_id) is None:
            raise NotFoundError(f'Tenant {tenant_id} not found')
        _check_ingredients_belong_to_tenant(session, tenant_id, recipe)

        product = Product(tenant_id=tenant_id, **fields)
        for ingredient_id, quantity_required in recipe:
            product.recipe_lines.append(
                RecipeLine(ingredient_id=ingredient_id, quantity_required=quantity_required)
            )
        session.add(product)
        session.flush()
        product_id = product.id

    logger.info("Product %s created for tenant %s: %s (%d recipe lines)",
                product_id, tenant_id, fields['name'], len(recipe))
    return get_product(tenant_id, product_id)


def update_product(tenant_id, product_id, data, recipe_lines=None):
    """
    Edit product fields; when a recipe is given it replaces the old one entirely.

    Recipes are never patched line by line.
    """
    if recipe_lines is None:
        recipe_lines = data.get('recipeLines')
    fields = validate_product_fields(data, partial=True)
    recipe = validate_recipe_lines(recipe_lines) if recipe_lines is not None else None

    with unit_of_work() as session:
        product = load_product(session, tenant_id, product_id)
        for attr, value in fields.items():
            setattr(product, attr, value)

        if recipe is not None:
            _check_ingredients_belong_to_tenant(session, tenant_id, recipe)
            # Flush the removals first so re-added ingredients don't hit the unique constraint
            product.recipe_lines.clear()
            session.flush()
            for ingredient_id, quantity_required in recipe:
                product.recipe_lines.append(
                    RecipeLine(ingredient_id=ingredient_id, quantity_required=quantity_required)
                )

    logger.info("Product %s updated for tenant %s", product_id, tenant_id)
    return get_product(tenant_id, product_id)


def delete_product(tenant_id, product_id):
    """Delete a product and all of its recipe lines in one transaction."""
    with unit_of_work() as session:
        product = load_product(session, tenant_id, product_id)
        name = product.name
        for line in list(product.recipe_lines):
            session.delete(line)
        session.delete(product)
    logger.info("Product %s deleted for tenant %s: %s", product_id, tenant_id, name)


# ============================================
# COSTING
# ============================================

def compute_line_cost(line):
    """
    Cost in cents of one recipe line for one unit of product.

    Lines whose ingredient is gone, or has no package price/size, cost 0.
    This hides missing price data rather than failing; the cost is a
    lower bound until every ingredient has a price.
    """
    ingredient = line.ingredient
    if ingredient is None:
        return 0.0
    return cost_per_base_unit(ingredient.package_price, ingredient.package_size) * line.quantity_required


def compute_production_cost(product):
    """Sum of the recipe line costs, in (fractional) cents."""
    return sum((compute_line_cost(line) for line in product.recipe_lines), 0.0)


def compute_margin(product):
    """
    Profit and margin of one unit.

    Returns:
        (profit_cents, margin_percent); margin is 0 when the price is 0
    """
    profit = product.price - compute_production_cost(product)
    margin = profit / product.price * 100 if product.price > 0 else 0.0
    return profit, margin


def product_with_recipe(product):
    """Serialize a product with its resolved recipe, cost and margin."""
    profit, margin = compute_margin(product)
    data = product.to_dict()
    data['recipeLines'] = [line.to_dict() for line in product.recipe_lines]
    data['productionCost'] = round(compute_production_cost(product), 2)
    data['profit'] = round(profit, 2)
    data['marginPercent'] = round(margin, 1)
    return data


def recipe_requirements(product, quantity):
    """Base units of each ingredient needed to make `quantity` units: {ingredient_id: amount}."""
    quantity = parse_int(quantity, 'quantity', min_val=1)
    needed = {}
    for line in product.recipe_lines:
        needed[line.ingredient_id] = needed.get(line.ingredient_id, 0) + line.quantity_required * quantity
    return needed
