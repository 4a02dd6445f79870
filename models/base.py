"""
Database Base Module

Holds the shared Flask-SQLAlchemy instance. The tenant, ingredient and
product models all register on it; services open transactions through
its session. Kept in its own module so models and services can import
it without pulling in the app factory.
"""

from flask_sqlalchemy import SQLAlchemy

# Bound to the app in create_app()
db = SQLAlchemy()
