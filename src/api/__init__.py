# src/api/__init__.py
# Initializes the API layer and registers blueprints.

from flask import Flask
from .routes.odoo import odoo_bp
from .routes.dashboard import dashboard_bp
from .routes.pages import pages_bp

from src.utils.logger import logger

# Blueprints to register
# Add new blueprints here
BLUEPRINTS = [
    (odoo_bp, '/api/odoo'),
    (dashboard_bp, '/api/dashboard'),
    (pages_bp, '/'),
]

def register_blueprints(app: Flask):
    """
    Registers all defined blueprints with the Flask application.

    Args:
        app: The Flask application instance.
    """
    logger.info("Registering API blueprints...")
    for bp, prefix in BLUEPRINTS:
        app.register_blueprint(bp, url_prefix=prefix)
        logger.debug(f"Blueprint '{bp.name}' registered with prefix '{prefix}'.")
    logger.info("All API blueprints registered.")

__all__ = ["register_blueprints"]
