"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db

from .tenant import Tenant
from .ingredient import Ingredient
from .product import Product, RecipeLine

__all__ = [
    'db',
    'Tenant',
    'Ingredient',
    'Product',
    'RecipeLine',
]
