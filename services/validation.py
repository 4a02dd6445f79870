"""
Input Validation Helpers

Parse and bound-check request fields. Unlike lenient form parsing, every
helper here raises ValidationError instead of falling back to a default,
so bad input is rejected before any transaction is opened.
"""

from utils.sanitizer import sanitize_text, sanitize_name
from .errors import ValidationError


def parse_int(value, field, min_val=None, max_val=None):
    """
    Parse an integer field.

    Accepts ints, integral floats (3.0) and digit strings. Booleans and
    fractional numbers are rejected.
    """
    if isinstance(value, bool):
        raise ValidationError(f'{field} must be an integer', field=field)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValidationError(f'{field} must be a whole number', field=field)
        value = int(value)
    elif isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError:
            raise ValidationError(f'{field} must be an integer', field=field)
    elif not isinstance(value, int):
        raise ValidationError(f'{field} must be an integer', field=field)

    if min_val is not None and value < min_val:
        raise ValidationError(f'{field} must be at least {min_val}', field=field)
    if max_val is not None and value > max_val:
        raise ValidationError(f'{field} must be at most {max_val}', field=field)
    return value


def get_int(data, field, default=None, required=False, min_val=None, max_val=None):
    """Read an integer field from a payload dict, with an optional default."""
    value = data.get(field)
    if value is None or value == '':
        if required:
            raise ValidationError(f'{field} is required', field=field)
        return default
    return parse_int(value, field, min_val=min_val, max_val=max_val)


def get_name(data, field, max_length, required=True):
    """Read and sanitize a required display name."""
    name = sanitize_name(data.get(field))
    if not name:
        if required:
            raise ValidationError(f'{field} is required', field=field)
        return None
    if len(name) > max_length:
        raise ValidationError(f'{field} must be at most {max_length} characters', field=field)
    return name


def get_text(data, field, max_length):
    """Read optional free text. Empty input becomes None; over-long input is rejected."""
    text = sanitize_text(data.get(field))
    if not text:
        return None
    if len(text) > max_length:
        raise ValidationError(f'{field} must be at most {max_length} characters', field=field)
    return text


def reject_unknown(data, allowed):
    """Fail on payload keys that are not part of the contract."""
    if not isinstance(data, dict):
        raise ValidationError('Request body must be an object')
    unknown = sorted(set(data) - set(allowed))
    if unknown:
        raise ValidationError(f'Unknown field: {unknown[0]}', field=unknown[0])
