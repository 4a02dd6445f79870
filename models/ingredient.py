"""
Ingredient Model

Raw materials tracked in stock, always in base units (g, ml, un).
"""

from .base import db


class Ingredient(db.Model):
    """
    Ingredient stocked in base units and bought in packages.

    Stock fields:
    - quantity: current stock in base units, never negative
    - min_stock_level: low-stock alert threshold in base units

    Packaging fields:
    - package_size: base units in one purchasable package (>= 1)
    - package_label: display name of the package (box, bottle...)
    - package_price: cost of one package in cents, NULL when unknown
    """
    __table_args__ = (
        db.CheckConstraint('quantity >= 0', name='ck_ingredient_quantity_non_negative'),
        db.CheckConstraint('package_size >= 1', name='ck_ingredient_package_size_positive'),
        db.CheckConstraint('package_price IS NULL OR package_price >= 0',
                           name='ck_ingredient_package_price_non_negative'),
    )

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenant.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    quantity = db.Column(db.Integer, nullable=False, default=0)
    unit = db.Column(db.String(10), nullable=False)

    package_size = db.Column(db.Integer, nullable=False, default=1)
    package_label = db.Column(db.String(50), nullable=True)
    package_price = db.Column(db.Integer, nullable=True)

    min_stock_level = db.Column(db.Integer, nullable=False, default=10)

    def to_dict(self):
        return {
            'id': self.id,
            'tenantId': self.tenant_id,
            'name': self.name,
            'quantity': self.quantity,
            'unit': self.unit,
            'packageSize': self.package_size,
            'packageLabel': self.package_label,
            'packagePrice': self.package_price,
            'minStockLevel': self.min_stock_level,
        }
