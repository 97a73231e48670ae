# run.py
# Entry point for running the Flask application.
import argparse
import sys
import traceback
from src.app import create_app
from src.utils.logger import logger
from src.config.settings import load_config
from src.erp_integration import OdooClient
from src.api.errors import ApiError

# Load configuration early
config = load_config()

def check_erp() -> int:
    """Authenticates against Odoo and reports the result. Returns the process exit code."""
    try:
        info = OdooClient.from_config(config).check_connection()
    except ApiError as e:
        logger.error(f"Odoo connection check failed: {e.message}")
        print(f"Odoo connection FAILED: {e.message}", file=sys.stderr)
        return 1
    print(f"Odoo connection OK: {info['url']} (db={info['db']}, uid={info['uid']})")
    return 0

if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Odoo sales dashboard server.")
    parser.add_argument('--check-erp', action='store_true',
                        help="Verify the Odoo credentials and exit.")
    args = parser.parse_args()

    if args.check_erp:
        sys.exit(check_erp())

    app = create_app(config)
    logger.info(f"Starting server on {config.APP_HOST}:{config.APP_PORT}")

    try:
        # Use waitress or gunicorn for production instead of app.run
        app.run(host=config.APP_HOST, port=config.APP_PORT, debug=config.APP_DEBUG)
    except Exception as e:
        logger.critical(f"Fatal error starting server: {e}", exc_info=True)
        logger.critical(f"Traceback: {traceback.format_exc()}")
        sys.exit(1)
