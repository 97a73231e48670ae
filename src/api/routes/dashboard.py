# src/api/routes/dashboard.py
# Period-filtered dashboard view (JSON) and its PDF export.

from typing import TYPE_CHECKING
from flask import Blueprint, request, jsonify, current_app, Response
from src.api.errors import ApiError, NotFoundError, ServiceError, ValidationError
from src.utils.logger import logger

if TYPE_CHECKING:
    from src.services import DashboardService, ReportService

dashboard_bp = Blueprint('dashboard', __name__)

def _get_dashboard_service() -> 'DashboardService':
    service = current_app.config.get('dashboard_service')
    if not service:
        logger.critical("DashboardService not found in application config!")
        raise ServiceError("Dashboard service is unavailable.", 503)
    return service

def _get_report_service() -> 'ReportService':
    service = current_app.config.get('report_service')
    if not service:
        logger.critical("ReportService not found in application config!")
        raise ServiceError("Report service is unavailable.", 503)
    return service

def _load_view():
    service = _get_dashboard_service()
    fiscal_year, period = service.parse_selection(request.args.get('year'), request.args.get('period'))
    return service.get_view(fiscal_year, period)

@dashboard_bp.route('/view', methods=['GET'])
def get_dashboard_view():
    """
    KPIs, chart series, location table and invoice list for one period.
    ---
    tags: [Dashboard]
    parameters:
      - in: query
        name: year
        schema: {type: integer}
        description: Financial year (named after the calendar year it starts in). Defaults to the current one.
      - in: query
        name: period
        schema: {type: string}
        description: "'year' for the whole financial year or a calendar month 1-12."
    responses:
      200:
        description: Dashboard view.
      400:
        description: Invalid year or period.
      404:
        description: Configured customer not found in Odoo.
      500:
        description: Configuration error or failure talking to Odoo.
    """
    logger.info(f"Dashboard view request received: {dict(request.args)}")
    try:
        return jsonify(_load_view()), 200
    except ValidationError as e:
        logger.warning(f"Validation error on dashboard view: {e.message}")
        return jsonify({"error": e.message}), 400
    except NotFoundError as e:
        logger.warning(f"Dashboard view - not found: {e.message}")
        return jsonify({"error": e.message}), 404
    except ApiError as e:
        logger.error(f"API error building dashboard view: {e.message}")
        return jsonify({"error": e.message}), e.status_code
    except Exception as e:
        logger.error(f"Unexpected error building dashboard view: {e}", exc_info=True)
        return jsonify({"error": f"An unexpected error occurred while building the dashboard: {e}"}), 500

@dashboard_bp.route('/report', methods=['GET'])
def export_report():
    """
    Downloads the filtered location table and invoice list as a PDF.
    ---
    tags: [Dashboard]
    parameters:
      - in: query
        name: year
        schema: {type: integer}
      - in: query
        name: period
        schema: {type: string}
    responses:
      200:
        description: PDF report.
        content:
          application/pdf:
            schema:
              type: string
              format: binary
      400:
        description: Invalid year or period.
      404:
        description: Configured customer not found in Odoo.
      500:
        description: Report generation or Odoo failure.
    """
    logger.info(f"Report export request received: {dict(request.args)}")
    try:
        view = _load_view()
        report_service = _get_report_service()
        pdf_bytes = report_service.render_pdf(view)
        filename = report_service.filename_for(view)
        return Response(
            pdf_bytes,
            mimetype='application/pdf',
            headers={
                'Content-Disposition': f'attachment; filename="{filename}"'
            }
        )
    except ValidationError as e:
        logger.warning(f"Validation error on report export: {e.message}")
        return jsonify({"error": e.message}), 400
    except NotFoundError as e:
        logger.warning(f"Report export - not found: {e.message}")
        return jsonify({"error": e.message}), 404
    except ApiError as e:
        logger.error(f"API error exporting report: {e.message}")
        return jsonify({"error": e.message}), e.status_code
    except Exception as e:
        logger.error(f"Unexpected error exporting report: {e}", exc_info=True)
        return jsonify({"error": f"An unexpected error occurred while generating the report: {e}"}), 500
