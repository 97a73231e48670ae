# src/api/routes/pages.py
# Server-rendered dashboard page.

from flask import Blueprint, request, render_template, current_app
from src.api.errors import ApiError, ServiceError
from src.utils.formatting import TEMPLATE_DIR, format_date, format_money
from src.utils.logger import logger

pages_bp = Blueprint('pages', __name__, template_folder=TEMPLATE_DIR)

@pages_bp.app_template_filter('money')
def money_filter(value, symbol=''):
    return format_money(value, symbol)

@pages_bp.app_template_filter('dmy')
def dmy_filter(value):
    return format_date(value)

@pages_bp.route('/', methods=['GET'])
def dashboard_page():
    """Renders the dashboard for ?year=&period= (data fetched once per page load)."""
    logger.info(f"Dashboard page request received: {dict(request.args)}")
    try:
        service = current_app.config.get('dashboard_service')
        if not service:
            raise ServiceError("Dashboard service is unavailable.", 503)
        fiscal_year, period = service.parse_selection(request.args.get('year'), request.args.get('period'))
        view = service.get_view(fiscal_year, period)
        return render_template('dashboard.html', view=view, error=None), 200
    except ApiError as e:
        logger.error(f"Dashboard page error: {e.message}")
        return render_template('dashboard.html', view=None, error=e.message), e.status_code
    except Exception as e:
        logger.error(f"Unexpected error rendering dashboard page: {e}", exc_info=True)
        return render_template('dashboard.html', view=None, error=str(e)), 500
