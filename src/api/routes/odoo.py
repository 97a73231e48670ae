# src/api/routes/odoo.py
# Read-only aggregation endpoint over the Odoo ERP: ?type=stats | ?type=invoice&id=<id>

from typing import TYPE_CHECKING
from flask import Blueprint, request, jsonify, current_app
from src.api.errors import ApiError, ConfigurationError, NotFoundError, ServiceError
from src.utils.logger import logger

if TYPE_CHECKING:
    from src.services import InvoiceLinesService, SalesStatsService

odoo_bp = Blueprint('odoo', __name__)

def _get_service(name: str):
    service = current_app.config.get(name)
    if not service:
        logger.critical(f"{name} not found in application config!")
        raise ServiceError("Dashboard service is unavailable.", 503)
    return service

@odoo_bp.route('', methods=['GET'])
def odoo_data():
    """
    Dashboard data straight from Odoo.
    ---
    tags: [Odoo]
    parameters:
      - in: query
        name: type
        schema:
          type: string
          enum: [stats, invoice]
        required: true
      - in: query
        name: id
        schema:
          type: integer
        required: false
        description: Invoice id (required when type=invoice).
    responses:
      200:
        description: Stats payload (type=stats) or list of invoice line items (type=invoice).
      400:
        description: Missing/invalid type or missing invoice id.
      404:
        description: Configured customer reference not found.
      500:
        description: Configuration error or failure talking to Odoo.
    """
    data_type = request.args.get('type')
    logger.info(f"Odoo data request received (type={data_type}).")

    if data_type == 'stats':
        return _stats()
    if data_type == 'invoice':
        return _invoice_items()
    return jsonify({"error": "Invalid type parameter"}), 400

def _stats():
    try:
        service: 'SalesStatsService' = _get_service('sales_stats_service')
        return jsonify(service.get_stats()), 200
    except NotFoundError as e:
        logger.warning(f"Stats request failed - not found: {e.message}")
        return jsonify({"error": e.message}), 404
    except ConfigurationError as e:
        logger.error(f"Stats request failed - configuration: {e.message}")
        return jsonify({"error": e.message}), 500
    except ApiError as e:
        logger.error(f"API error fetching stats: {e.message}")
        return jsonify({"error": e.message}), 500
    except Exception as e:
        logger.error(f"Unexpected error fetching stats: {e}", exc_info=True)
        return jsonify({"error": f"Failed to fetch Odoo data: {e}"}), 500

def _invoice_items():
    invoice_id_str = request.args.get('id')
    if not invoice_id_str:
        return jsonify({"error": "Missing invoice id"}), 400
    try:
        invoice_id = int(invoice_id_str)
    except (ValueError, TypeError):
        return jsonify({"error": "Query parameter 'id' must be an integer"}), 400

    try:
        service: 'InvoiceLinesService' = _get_service('invoice_lines_service')
        return jsonify(service.get_invoice_items(invoice_id)), 200
    except ApiError as e:
        logger.error(f"API error fetching invoice {invoice_id}: {e.message}")
        return jsonify({"error": e.message}), e.status_code
    except Exception as e:
        logger.error(f"Unexpected error fetching invoice {invoice_id}: {e}", exc_info=True)
        return jsonify({"error": str(e)}), 500
