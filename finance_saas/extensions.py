from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate

"""
Flask Extensions - Initialized here, configured in finance_saas/__init__.py

Kept in a separate module so models, services and blueprints can import
them without importing the app factory (avoids circular imports).
"""
# Database ORM
# Usage: from finance_saas.extensions import db

db = SQLAlchemy()

# JWT Authentication - issues and verifies session tokens
# Usage: from finance_saas.extensions import jwt

jwt = JWTManager()

# Alembic migrations
migrate = Migrate()
