"""
Validation Constants

Contains whitelist values and numeric bounds for validating user input
to prevent injection attacks and ensure data integrity.
"""

from .units import BASE_UNITS

# Valid values for the ingredient unit field (whitelist for security)
VALID_BASE_UNITS = BASE_UNITS

# Valid tenant business types
VALID_BUSINESS_TYPES = {'pizza', 'hamburger', 'restaurant'}

# Valid restock modes: by whole packages or by raw base units
VALID_RESTOCK_MODES = {'package', 'unit'}

# Default low-stock alert threshold in base units
DEFAULT_MIN_STOCK_LEVEL = 10

# Upper bounds for numeric fields
MAX_QUANTITY = 100_000_000
MAX_PACKAGE_SIZE = 1_000_000
MAX_PRICE_CENTS = 100_000_000
MAX_SALE_QUANTITY = 10_000

# Text length limits
MAX_NAME_LENGTH = 200
MAX_LABEL_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 2000
