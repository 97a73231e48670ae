# src/app.py
from flask import Flask, jsonify
from flask_cors import CORS

from src.config import Config
from src.api import register_blueprints
from src.api.errors import register_error_handlers, ApiError, ConfigurationError
from src.utils.logger import logger, configure_logger

from src.services import (
    SalesStatsService,
    InvoiceLinesService,
    DashboardService,
    ReportService,
)

def create_app(config_object: Config, sales_stats_service: SalesStatsService = None,
               invoice_lines_service: InvoiceLinesService = None,
               report_service: ReportService = None) -> Flask:
    """
    Factory function to create and configure the Flask application.

    Services can be passed in (tests inject fakes); otherwise they are built
    from the configuration. The Odoo client is created lazily on first use,
    so missing ERP settings surface as request errors, not startup failures.

    Args:
        config_object: The configuration object for the application.

    Returns:
        The configured Flask application instance.
    """
    app = Flask("Sales-Dashboard")
    app.config.from_object(config_object)

    # --- Logging ---
    configure_logger(config_object.LOG_LEVEL)
    logger.info("Starting Flask application for the Odoo sales dashboard.")
    logger.info(f"Application name: {app.name}")
    logger.info(f"Debug mode: {app.config.get('APP_DEBUG')}")

    # --- Secret Key Check ---
    if not app.config.get('SECRET_KEY') or app.config.get('SECRET_KEY') == 'default_secret_key_change_me_in_env':
        logger.critical("SECURITY ALERT: SECRET_KEY is not set or is using the default value!")
        if not app.config.get('APP_DEBUG', False):
            raise ConfigurationError("SECRET_KEY must be set to a unique, secure value in production.")
        else:
            logger.warning("Using default/insecure SECRET_KEY in debug mode.")

    # --- CORS Configuration ---
    CORS(app, resources={r"/api/*": {"origins": "*"}})
    logger.info("CORS configured to allow all origins on /api/*.")

    # --- Dependency Injection (Service Instantiation) ---
    logger.info("Instantiating services...")
    try:
        stats_svc = sales_stats_service or SalesStatsService(config_object)
        lines_svc = invoice_lines_service or InvoiceLinesService(config_object)
        dashboard_svc = DashboardService(stats_svc, config_object)
        report_svc = report_service or ReportService()

        # Store service instances in app config
        app.config['sales_stats_service'] = stats_svc
        app.config['invoice_lines_service'] = lines_svc
        app.config['dashboard_service'] = dashboard_svc
        app.config['report_service'] = report_svc

        logger.info("Services instantiated and added to application config.")
    except Exception as service_init_err:
        logger.critical(f"Failed to instantiate services: {service_init_err}", exc_info=True)
        raise

    # --- Register Blueprints (API Routes) ---
    register_blueprints(app)

    # --- Register Error Handlers ---
    register_error_handlers(app)

    # --- Simple Health Check Endpoints ---
    @app.route('/health', methods=['GET'])
    def health_check():
        return jsonify({"status": "ok"}), 200

    @app.route('/health/erp', methods=['GET'])
    def erp_health_check():
        """Authenticates against Odoo without reading any data."""
        try:
            info = app.config['sales_stats_service'].odoo_client.check_connection()
            return jsonify({"status": "ok", "erp": info}), 200
        except ApiError as e:
            logger.error(f"ERP health check failed: {e.message}")
            return jsonify({"status": "error", "erp_error": e.message}), 503
        except Exception as e:
            logger.error(f"Unexpected error during ERP health check: {e}", exc_info=True)
            return jsonify({"status": "error", "erp_error": str(e)}), 503

    logger.info("Sales dashboard application configured successfully.")
    return app
