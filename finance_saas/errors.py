"""
API error taxonomy.

Services raise these; the handlers registered by ``register_error_handlers``
turn them into JSON responses of the form ``{"message": ..., "details": ...}``.
"""
import logging

from flask import jsonify, current_app
from marshmallow import ValidationError as SchemaValidationError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from werkzeug.exceptions import HTTPException

logger = logging.getLogger(__name__)


class ApiError(Exception):
    status_code = 500
    default_message = 'Erro interno do servidor.'

    def __init__(self, message=None, details=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.details = details

    def to_dict(self):
        body = {"message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class ValidationError(ApiError):
    status_code = 400
    default_message = 'Dados inválidos.'


class AuthError(ApiError):
    status_code = 401
    default_message = 'Não autenticado.'


class AuthorizationError(ApiError):
    status_code = 403
    default_message = 'Acesso negado.'


class PlanLimitError(AuthorizationError):
    default_message = 'Limite do plano atingido. Faça um upgrade no plano.'


class NotFoundError(ApiError):
    status_code = 404
    default_message = 'Registro não encontrado.'


class ConflictError(ApiError):
    status_code = 409
    default_message = 'Conflito com dados existentes.'


class DatabaseBusyError(ApiError):
    status_code = 503
    default_message = 'Banco de dados ocupado, tente novamente em instantes.'


class UnexpectedError(ApiError):
    status_code = 500


def register_error_handlers(app):
    """Attach the JSON error handlers to the Flask app."""

    @app.errorhandler(ApiError)
    def handle_api_error(err):
        if err.status_code >= 500:
            current_app.logger.error("API error: %s", err.message)
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(SchemaValidationError)
    def handle_schema_error(err):
        return jsonify({"message": "Dados inválidos.", "details": err.messages}), 400

    @app.errorhandler(PoolTimeoutError)
    def handle_pool_timeout(err):
        current_app.logger.error("Database pool exhausted: %s", err)
        busy = DatabaseBusyError()
        return jsonify(busy.to_dict()), busy.status_code

    @app.errorhandler(HTTPException)
    def handle_http_exception(err):
        return jsonify({"message": err.description}), err.code

    @app.errorhandler(Exception)
    def handle_unexpected(err):
        current_app.logger.exception("Unhandled error: %s", err)
        body = {"message": UnexpectedError.default_message}
        if app.debug:
            body["details"] = str(err)
        return jsonify(body), 500
