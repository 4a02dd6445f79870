"""
Packaging Service

Pure conversions between packages and base units, per-unit costs and
stock display strings. No database access.
"""

import math

from constants import (
    COUNT_UNITS, DISPLAY_CONVERSIONS, DEFAULT_PACKAGE_LABEL,
    PACKAGE_LABEL_PLURALS, CENTS_PER_UNIT
)


def base_units_from_packages(packages, package_size):
    """Number of base units in `packages` packages of `package_size` each."""
    return packages * package_size


def cost_per_base_unit(package_price, package_size):
    """
    Cost in cents of one base unit.

    Returns 0.0 when the package price or size is unset (None or 0), so
    ingredients without a price simply add nothing to a production cost.
    The result is a float; callers needing whole cents must round.
    """
    if not package_price or not package_size:
        return 0.0
    return package_price / package_size


def price_to_cents(value):
    """
    Convert a decimal price entry (e.g. 25.5) to integer cents (2550).

    Accepts numbers or numeric strings, with either '.' or ',' as the
    decimal separator. Returns None for empty input.

    Raises:
        ValueError: not a number, or not finite (inf, nan)
    """
    if value is None or value == '':
        return None
    if isinstance(value, str):
        value = value.strip().replace(',', '.')
    amount = float(value) * CENTS_PER_UNIT
    if not math.isfinite(amount):
        raise ValueError(f'price must be a finite number: {value!r}')
    return int(round(amount))


def split_packages(quantity, package_size):
    """
    Split a stock quantity into sealed packages and the opened remainder.

    Returns:
        (full_packages, remainder) in packages and base units
    """
    if not package_size or package_size < 1:
        return 0, quantity
    return quantity // package_size, quantity % package_size


def format_quantity(quantity, unit):
    """
    Format a base-unit quantity for display.

    1000 or more grams/milliliters switch to kilograms/liters with two
    decimals: 1500 g -> '1.50 kg'. Everything else stays as-is: '300 g'.
    """
    conversion = DISPLAY_CONVERSIONS.get(unit)
    if conversion:
        display_unit, threshold, divisor = conversion
        if quantity >= threshold:
            return f"{quantity / divisor:.2f} {display_unit}"
    return f"{quantity} {unit}"


def pluralize_label(label):
    """Plural form of a package label: box -> boxes, bottle -> bottles."""
    if label in PACKAGE_LABEL_PLURALS:
        return PACKAGE_LABEL_PLURALS[label]
    if label.endswith(('s', 'x', 'ch', 'sh')):
        return label + 'es'
    return label + 's'


def describe_packaged_stock(quantity, package_size, unit, package_label=None):
    """
    Human description of stock as sealed packages plus the opened one.

    Examples:
        (2300, 1000, 'g', 'box') -> '2 boxes sealed and 300 g opened'
        (300, 1000, 'g', 'box')  -> '300 g opened'

    Returns None for count units ('un'), which have no package breakdown.
    """
    if unit in COUNT_UNITS:
        return None

    label = package_label or DEFAULT_PACKAGE_LABEL
    full_packages, remainder = split_packages(quantity, package_size)
    opened = format_quantity(remainder, unit)

    if full_packages == 0:
        return f"{opened} opened"

    package_text = f"1 {label}" if full_packages == 1 else f"{full_packages} {pluralize_label(label)}"
    return f"{package_text} sealed and {opened} opened"
