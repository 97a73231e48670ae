# src/services/sales_stats_service.py
# Business logic for the "stats" operation: customer lookup, invoice fetch and aggregation by address.

from typing import Any, Dict, List, Optional

from src.config import Config
from src.domain.invoice import (
    INVOICE_FIELDS, MOVE_TYPE_CREDIT_NOTE, MOVE_TYPE_INVOICE, STATE_POSTED,
    AddressBucket, Invoice, OrderSummary,
)
from src.domain.partner import PARTNER_FIELDS, Partner
from src.erp_integration.odoo_client import OdooClient, OdooSession
from src.utils.logger import logger
from src.api.errors import ApiError, ConfigurationError, ErpNotFoundError, ServiceError


class SalesStatsService:
    """
    Builds the dashboard "stats" payload for the configured customer.
    One ERP session is opened per call and discarded afterwards.
    """

    def __init__(self, config: Config, odoo_client: Optional[OdooClient] = None):
        self.config = config
        self._odoo_client = odoo_client
        logger.info("SalesStatsService initialized.")

    @property
    def odoo_client(self) -> OdooClient:
        # Built lazily so missing ERP settings surface on the request, not at startup
        if self._odoo_client is None:
            self._odoo_client = OdooClient.from_config(self.config)
        return self._odoo_client

    def get_stats(self) -> Dict[str, Any]:
        """
        Returns customer name, KPIs, sales by delivery address and the invoice list.

        Raises:
            ConfigurationError: ODOO_CUSTOMER_REF is not set.
            ErpNotFoundError: No partner carries the configured reference.
            ServiceError: Anything else went wrong (message of the cause attached).
        """
        customer_ref = self.config.ODOO_CUSTOMER_REF
        if not customer_ref:
            logger.error("ODOO_CUSTOMER_REF is not configured.")
            raise ConfigurationError("Missing ODOO_CUSTOMER_REF environment variable")

        try:
            session = self.odoo_client.open_session()
            partner = self._find_customer(session, customer_ref)
            raw_invoices = self._fetch_invoices(session, partner.id)
            result = self.aggregate(partner, raw_invoices)
            logger.info(f"Stats built for '{partner.name}': {result['kpi']['orders']} document(s), revenue {result['kpi']['revenue']:.2f}")
            return result
        except (ConfigurationError, ErpNotFoundError):
            raise
        except ApiError as e:
            logger.error(f"Odoo fetch error: {e.message}")
            raise ServiceError(f"Failed to fetch Odoo data: {e.message}") from e
        except Exception as e:
            logger.error(f"Unexpected error building stats: {e}", exc_info=True)
            raise ServiceError(f"Failed to fetch Odoo data: {e}") from e

    def _find_customer(self, session: OdooSession, customer_ref: str) -> Partner:
        records = session.search_read('res.partner', [('ref', '=', customer_ref)], PARTNER_FIELDS)
        partner = Partner.from_dict(records[0]) if records else None
        if not partner:
            logger.warning(f"Customer with Ref {customer_ref} not found.")
            raise ErpNotFoundError(f"Customer with Ref {customer_ref} not found")
        logger.debug(f"Customer ref {customer_ref} resolved to partner {partner.id} ({partner.name}).")
        return partner

    def _fetch_invoices(self, session: OdooSession, partner_id: int) -> List[Dict[str, Any]]:
        # child_of pulls in the head office and every branch/contact below it
        domain = [
            ('partner_id', 'child_of', partner_id),
            ('move_type', 'in', [MOVE_TYPE_INVOICE, MOVE_TYPE_CREDIT_NOTE]),
            ('state', '=', STATE_POSTED),
            ('invoice_date', '>=', self.config.INVOICE_DATE_FROM),
        ]
        return session.search_read('account.move', domain, INVOICE_FIELDS, self.config.INVOICE_FETCH_LIMIT)

    def aggregate(self, partner: Partner, raw_invoices: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Folds raw account.move records into the stats payload."""
        refunds_reduce = self.config.REFUNDS_REDUCE_REVENUE
        total_revenue = 0.0
        sales_by_address: Dict[str, AddressBucket] = {}
        recent_invoices: List[Dict[str, Any]] = []

        for record in raw_invoices:
            invoice = Invoice.from_dict(record)
            if invoice is None:
                continue
            amount = invoice.signed_amount(refunds_reduce)
            total_revenue += amount

            bucket = sales_by_address.setdefault(invoice.address_key, AddressBucket())
            bucket.add(OrderSummary(
                id=invoice.id,
                name=invoice.name,
                date=invoice.invoice_date.isoformat() if invoice.invoice_date else None,
                amount=amount,
            ))
            recent_invoices.append({**record, "amount_total": amount})

        total_orders = len(recent_invoices)
        avg_order_value = total_revenue / total_orders if total_orders > 0 else 0

        return {
            "customer": partner.name,
            "kpi": {
                "revenue": total_revenue,
                "orders": total_orders,
                "items": 0,
                "avgOrderValue": avg_order_value,
            },
            "salesByAddress": {name: bucket.to_dict() for name, bucket in sales_by_address.items()},
            "recentInvoices": recent_invoices,
        }

