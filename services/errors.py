"""
Service Errors

Exception hierarchy raised by the inventory, catalog and sales services.
Each error knows the HTTP status it maps to and how to render itself as JSON.
"""


class StockAppError(Exception):
    """Base class for errors surfaced to API callers."""
    status_code = 500

    def __init__(self, message):
        super().__init__(message)
        self.message = message

    def to_dict(self):
        return {'message': self.message}


class ValidationError(StockAppError):
    """Raised when input is malformed or out of its allowed range."""
    status_code = 400

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field

    def to_dict(self):
        data = super().to_dict()
        if self.field:
            data['field'] = self.field
        return data


class IngredientInUseError(ValidationError):
    """Raised when deleting an ingredient that recipe lines still reference."""
    status_code = 409

    def __init__(self, ingredient_name, product_names):
        self.product_names = list(product_names)
        super().__init__(
            f'Ingredient "{ingredient_name}" is used by: {", ".join(self.product_names)}'
        )

    def to_dict(self):
        data = super().to_dict()
        data['products'] = self.product_names
        return data


class NotFoundError(StockAppError):
    """Raised when a tenant-scoped ingredient or product does not exist."""
    status_code = 404


class StockError(StockAppError):
    """Raised when stock cannot cover a requested operation."""
    status_code = 400


class InsufficientStockError(StockError):
    """
    Raised when a sale or deduction needs more stock than is available.

    Carries every short ingredient, not only the first one found, so the
    caller can show the operator the full list of missing ingredients.
    """

    def __init__(self, shortages):
        self.shortages = list(shortages)
        details = '; '.join(
            f'{s.name} (needed {s.needed}{s.unit}, available {s.available}{s.unit})'
            for s in self.shortages
        )
        super().__init__(f'Insufficient stock: {details}')

    @property
    def missing_ingredients(self):
        return [s.name for s in self.shortages]

    def to_dict(self):
        data = super().to_dict()
        data['missingIngredients'] = self.missing_ingredients
        data['shortages'] = [s.to_dict() for s in self.shortages]
        return data


class InternalError(StockAppError):
    """Raised for unexpected persistence failures. The message stays opaque."""
    status_code = 500

    def __init__(self, message='Internal error while processing the request'):
        super().__init__(message)


class Shortage:
    """One ingredient a sale cannot cover: how much was needed vs. available."""

    def __init__(self, ingredient_id, name, needed, available, unit=''):
        self.ingredient_id = ingredient_id
        self.name = name
        self.needed = needed
        self.available = available
        self.unit = unit

    @property
    def missing(self):
        return self.needed - self.available

    def to_dict(self):
        return {
            'ingredientId': self.ingredient_id,
            'name': self.name,
            'needed': self.needed,
            'available': self.available,
            'missing': self.missing,
            'unit': self.unit,
        }

    def __repr__(self):
        return f'Shortage({self.name!r}, needed={self.needed}, available={self.available})'
