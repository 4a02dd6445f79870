"""
Services Package

Business logic modules for the stock application.
"""

from .errors import (
    StockAppError,
    ValidationError,
    IngredientInUseError,
    NotFoundError,
    StockError,
    InsufficientStockError,
    InternalError,
    Shortage,
)

from .packaging import (
    base_units_from_packages,
    cost_per_base_unit,
    price_to_cents,
    split_packages,
    format_quantity,
    describe_packaged_stock,
)

from .inventory import (
    create_ingredient,
    list_ingredients,
    get_ingredient,
    adjust_stock,
    restock_ingredient,
    update_ingredient_fields,
    delete_ingredient,
    is_low_stock,
    low_stock_ingredients,
    inventory_summary,
    import_ingredients,
    ingredient_with_status,
)

from .catalog import (
    create_product,
    list_products,
    get_product,
    update_product,
    delete_product,
    compute_production_cost,
    compute_margin,
    product_with_recipe,
)

from .sales import process_sale, SaleResult

from .tenants import create_tenant, get_tenant, verify_credential

__all__ = [
    # Errors
    'StockAppError',
    'ValidationError',
    'IngredientInUseError',
    'NotFoundError',
    'StockError',
    'InsufficientStockError',
    'InternalError',
    'Shortage',
    # Packaging
    'base_units_from_packages',
    'cost_per_base_unit',
    'price_to_cents',
    'split_packages',
    'format_quantity',
    'describe_packaged_stock',
    # Inventory
    'create_ingredient',
    'list_ingredients',
    'get_ingredient',
    'adjust_stock',
    'restock_ingredient',
    'update_ingredient_fields',
    'delete_ingredient',
    'is_low_stock',
    'low_stock_ingredients',
    'inventory_summary',
    'import_ingredients',
    'ingredient_with_status',
    # Catalog
    'create_product',
    'list_products',
    'get_product',
    'update_product',
    'delete_product',
    'compute_production_cost',
    'compute_margin',
    'product_with_recipe',
    # Sales
    'process_sale',
    'SaleResult',
    # Tenants
    'create_tenant',
    'get_tenant',
    'verify_credential',
]
