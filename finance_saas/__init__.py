import logging
import os

from flask import Flask, jsonify, send_from_directory
from flask_cors import CORS

from finance_saas.config import Config
from finance_saas.extensions import db, jwt, migrate
from finance_saas.errors import register_error_handlers
from finance_saas.celery_app import init_celery


def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    app.logger.setLevel(level)


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    configure_logging(app)

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    CORS(app)

    register_error_handlers(app)

    # Health check endpoint - register early so it's always available
    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"}), 200

    # Locally stored uploads (STORAGE_TYPE=local)
    @app.route('/uploads/<path:filename>', methods=['GET'])
    def uploaded_file(filename):
        return send_from_directory(os.path.abspath(app.config['UPLOAD_FOLDER']), filename)

    # Import models so metadata/migrations see every table
    from finance_saas import models  # noqa: F401

    # Register blueprints
    from finance_saas.api import auth
    app.register_blueprint(auth.bp, url_prefix='/api/auth')
    from finance_saas.api import transactions
    app.register_blueprint(transactions.bp, url_prefix='/api/transactions')
    from finance_saas.api import clients
    app.register_blueprint(clients.bp, url_prefix='/api/clients')
    from finance_saas.api import products
    app.register_blueprint(products.bp, url_prefix='/api/products')
    from finance_saas.api import categories
    app.register_blueprint(categories.bp, url_prefix='/api/categories')
    from finance_saas.api import service_orders
    app.register_blueprint(service_orders.bp, url_prefix='/api/service-orders')
    from finance_saas.api import recurring
    app.register_blueprint(recurring.bp, url_prefix='/api/recurring')
    from finance_saas.api import reports
    app.register_blueprint(reports.bp, url_prefix='/api/reports')
    from finance_saas.api import notifications
    app.register_blueprint(notifications.bp, url_prefix='/api/notifications')
    from finance_saas.api import audit
    app.register_blueprint(audit.bp, url_prefix='/api/audit')
    from finance_saas.api import tenant
    app.register_blueprint(tenant.bp, url_prefix='/api/tenant')
    from finance_saas.api import dashboard
    app.register_blueprint(dashboard.bp, url_prefix='/api/dashboard')
    from finance_saas.api import admin
    app.register_blueprint(admin.bp, url_prefix='/api/admin')
    from finance_saas.api import upload
    app.register_blueprint(upload.bp, url_prefix='/api/upload')

    # JWT error handlers, same {"message"} shape as every other error
    @jwt.unauthorized_loader
    def jwt_missing_token(err):
        return jsonify({"message": "Token não fornecido.", "details": err}), 401

    @jwt.invalid_token_loader
    def jwt_invalid_token(err):
        return jsonify({"message": "Token inválido.", "details": err}), 401

    @jwt.expired_token_loader
    def jwt_expired_token(header, payload):
        return jsonify({"message": "Token expirado."}), 401

    init_celery(app)

    return app
