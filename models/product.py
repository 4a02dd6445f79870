"""
Product Models

Contains the Product and RecipeLine models: sellable items and the
bill of materials each one consumes from stock.
"""

from .base import db


class Product(db.Model):
    """Sellable item priced in cents, with its recipe."""
    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenant.id'), nullable=False, index=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    price = db.Column(db.Integer, nullable=False)
    image_url = db.Column(db.String(500), nullable=True)
    recipe_lines = db.relationship('RecipeLine', backref='product', lazy=True,
                                   cascade='all, delete-orphan', order_by='RecipeLine.id')

    __table_args__ = (
        db.CheckConstraint('price >= 0', name='ck_product_price_non_negative'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'tenantId': self.tenant_id,
            'name': self.name,
            'description': self.description,
            'price': self.price,
            'imageUrl': self.image_url,
        }


class RecipeLine(db.Model):
    """One unit of the product consumes quantity_required base units of the ingredient."""
    id = db.Column(db.Integer, primary_key=True)
    product_id = db.Column(db.Integer, db.ForeignKey('product.id', ondelete='CASCADE'), nullable=False, index=True)
    # No ondelete: deleting a referenced ingredient is refused by the inventory service
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id'), nullable=False, index=True)
    quantity_required = db.Column(db.Integer, nullable=False)
    ingredient = db.relationship('Ingredient')

    __table_args__ = (
        db.CheckConstraint('quantity_required > 0', name='ck_recipe_line_quantity_positive'),
        db.UniqueConstraint('product_id', 'ingredient_id', name='uq_recipe_line_product_ingredient'),
    )

    def to_dict(self):
        data = {
            'id': self.id,
            'productId': self.product_id,
            'ingredientId': self.ingredient_id,
            'quantityRequired': self.quantity_required,
            'ingredient': None,
        }
        if self.ingredient is not None:
            data['ingredient'] = {
                'id': self.ingredient.id,
                'name': self.ingredient.name,
                'unit': self.ingredient.unit,
            }
        return data
