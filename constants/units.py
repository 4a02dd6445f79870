"""
Unit Constants

Base units, display thresholds and packaging labels used by the
packaging model and stock display.
"""

# Base units (smallest tracked unit) an ingredient may be stocked in
BASE_UNITS = {'g', 'ml', 'un'}

# Units without a package breakdown in stock display
COUNT_UNITS = {'un'}

# Large-quantity display: base unit -> (display unit, threshold, divisor)
DISPLAY_CONVERSIONS = {
    'g': ('kg', 1000, 1000),
    'ml': ('L', 1000, 1000),
}

# Default package settings for new ingredients
DEFAULT_PACKAGE_SIZE = 1
DEFAULT_PACKAGE_LABEL = 'package'

# Irregular plurals for package labels (label -> plural)
PACKAGE_LABEL_PLURALS = {
    'box': 'boxes',
    'unit': 'units',
    'bag': 'bags',
    'bottle': 'bottles',
}

# Minor currency units per major unit (cents)
CENTS_PER_UNIT = 100
