# src/api/errors.py
# Exception hierarchy for the dashboard and the JSON error handlers that render it.

from flask import jsonify, request
from werkzeug.exceptions import HTTPException
from src.utils.logger import logger

# --- Application Exceptions ---

class ApiError(Exception):
    """Root of every error the dashboard reports to its callers as {"error": message}."""
    status_code = 500
    message = "Internal server error."

    def __init__(self, message=None, status_code=None, payload=None):
        super().__init__(message)
        if message is not None:
            self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.payload = payload

    def __str__(self):
        return self.message

    def to_dict(self):
        body = dict(self.payload or ())
        body['error'] = self.message
        return body

class ValidationError(ApiError):
    """Bad query parameters (year, period, invoice id)."""
    status_code = 400
    message = "Invalid request parameters."

class NotFoundError(ApiError):
    status_code = 404
    message = "Not found."

class ServiceError(ApiError):
    """A dashboard operation failed; the cause is folded into the message."""
    status_code = 500
    message = "The dashboard could not complete the request."

class ErpIntegrationError(ApiError):
    """Odoo answered with a fault, an HTTP error or not at all."""
    status_code = 502
    message = "Error communicating with Odoo."

class ErpAuthenticationError(ErpIntegrationError):
    """Odoo returned no uid for the configured login."""
    message = "Odoo authentication failed."

class ErpNotFoundError(NotFoundError):
    """A record the dashboard depends on (the configured customer) does not exist in Odoo."""
    message = "Record not found in Odoo."

class ConfigurationError(ApiError):
    """A required setting is missing or unusable."""
    status_code = 500
    message = "The dashboard is not configured correctly."


# --- Flask Error Handlers ---

def register_error_handlers(app):
    """Renders anything that escapes a route as a JSON error body."""

    @app.errorhandler(ApiError)
    def handle_api_error(error):
        logger.warning(f"{type(error).__name__} ({error.status_code}) on {request.path}: {error.message}")
        response = jsonify(error.to_dict())
        response.status_code = error.status_code
        return response

    @app.errorhandler(HTTPException)
    def handle_http_exception(error):
        logger.warning(f"HTTP {error.code} on {request.method} {request.path}: {error.description}")
        response = jsonify({"error": f"{error.name}: {error.description}"})
        response.status_code = error.code
        return response

    @app.errorhandler(Exception)
    def handle_unexpected_exception(error):
        logger.error(f"Unhandled exception on {request.path}: {error}", exc_info=True)
        response = jsonify({"error": f"Unexpected server error: {error}"})
        response.status_code = 500
        return response

    logger.info("JSON error handlers registered.")
