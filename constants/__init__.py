"""
Constants Package

Unit tables and validation whitelists shared across the application.
"""

from .units import (
    BASE_UNITS,
    COUNT_UNITS,
    DISPLAY_CONVERSIONS,
    DEFAULT_PACKAGE_SIZE,
    DEFAULT_PACKAGE_LABEL,
    PACKAGE_LABEL_PLURALS,
    CENTS_PER_UNIT,
)

from .validation import (
    VALID_BASE_UNITS,
    VALID_BUSINESS_TYPES,
    VALID_RESTOCK_MODES,
    DEFAULT_MIN_STOCK_LEVEL,
    MAX_QUANTITY,
    MAX_PACKAGE_SIZE,
    MAX_PRICE_CENTS,
    MAX_SALE_QUANTITY,
    MAX_NAME_LENGTH,
    MAX_LABEL_LENGTH,
    MAX_DESCRIPTION_LENGTH,
)
