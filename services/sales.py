"""
Sales Service

Processes a sale: deducts every ingredient of the product's recipe,
multiplied by the quantity sold, as one atomic transaction.

The sale runs in two passes inside a single transaction:

1. Validate: lock the recipe's ingredient rows and compare every
   requirement with the stock, collecting ALL shortages.
2. Apply: only when nothing is short, deduct each ingredient with a
   guarded relative UPDATE (quantity = quantity - needed).

Any error in either pass rolls the whole transaction back, so a sale
either deducts every ingredient or none of them.
"""

import logging

from constants import MAX_SALE_QUANTITY
from .catalog import load_product, recipe_requirements
from .errors import InsufficientStockError, NotFoundError, Shortage
from .inventory import apply_stock_delta, lock_ingredients
from .unit_of_work import unit_of_work
from .validation import parse_int

logger = logging.getLogger(__name__)


class SaleResult:
    """Outcome of a committed sale and the stock it consumed."""

    def __init__(self, product_id, product_name, quantity, deductions):
        self.product_id = product_id
        self.product_name = product_name
        self.quantity = quantity
        # [(ingredient_id, ingredient_name, amount, unit), ...]
        self.deductions = deductions

    @property
    def success(self):
        return True

    def to_dict(self):
        return {
            'success': True,
            'message': f'Sale recorded: {self.quantity} x {self.product_name}. Stock updated.',
            'productId': self.product_id,
            'quantity': self.quantity,
            'deductions': [
                {'ingredientId': ingredient_id, 'name': name, 'amount': amount, 'unit': unit}
                for ingredient_id, name, amount, unit in self.deductions
            ],
        }


def process_sale(tenant_id, product_id, quantity):
    """
    Sell `quantity` units of a product, deducting its recipe from stock.

    A product without recipe lines sells without touching stock.

    Raises:
        ValidationError: quantity is not an integer between 1 and MAX_SALE_QUANTITY
        NotFoundError: product not found for the tenant, or a recipe line
            points at an ingredient that no longer exists
        InsufficientStockError: one or more ingredients are short; lists all of them
    """
    quantity = parse_int(quantity, 'quantity', min_val=1, max_val=MAX_SALE_QUANTITY)
    product_id = parse_int(product_id, 'productId', min_val=1)

    try:
        with unit_of_work() as session:
            product = load_product(session, tenant_id, product_id)
            product_name = product.name
            needed = recipe_requirements(product, quantity)
            if not needed:
                logger.info("Sale of %d x product %s (tenant %s): no tracked ingredients",
                            quantity, product_id, tenant_id)
                return SaleResult(product_id, product_name, quantity, [])

            ingredients = lock_ingredients(session, tenant_id, needed.keys())

            # Pass 1: validate everything before touching any row
            shortages = []
            for ingredient_id in sorted(needed):
                ingredient = ingredients.get(ingredient_id)
                if ingredient is None:
                    raise NotFoundError(
                        f'Ingredient {ingredient_id} used by product "{product_name}" not found'
                    )
                if ingredient.quantity < needed[ingredient_id]:
                    shortages.append(Shortage(ingredient.id, ingredient.name, needed[ingredient_id],
                                              ingredient.quantity, ingredient.unit))
            if shortages:
                raise InsufficientStockError(shortages)

            # Pass 2: relative, guarded decrements
            deductions = []
            for ingredient_id in sorted(needed):
                ingredient = ingredients[ingredient_id]
                apply_stock_delta(session, tenant_id, ingredient_id, -needed[ingredient_id])
                deductions.append((ingredient_id, ingredient.name, needed[ingredient_id], ingredient.unit))
    except InsufficientStockError as e:
        logger.warning("Sale of %d x product %s rejected for tenant %s: %s",
                       quantity, product_id, tenant_id, e.shortages)
        raise

    logger.info("Sale of %d x product %s committed for tenant %s", quantity, product_id, tenant_id)
    return SaleResult(product_id, product_name, quantity, deductions)
