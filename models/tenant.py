"""
Tenant Model

The owning scope for every ingredient and product record.
"""

from datetime import datetime, timezone

from .base import db


class Tenant(db.Model):
    """A business using the system (pizzeria, burger joint, restaurant)."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)

    # Werkzeug password hash, never the raw credential
    credential_hash = db.Column(db.String(255), nullable=False)

    # pizza / hamburger / restaurant
    business_type = db.Column(db.String(20), nullable=False, default='restaurant')

    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    ingredients = db.relationship('Ingredient', backref='tenant', lazy=True)
    products = db.relationship('Product', backref='tenant', lazy=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'businessType': self.business_type,
        }
