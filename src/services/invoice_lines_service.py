# src/services/invoice_lines_service.py
# Resolves the customer-visible lines of one invoice for the detail modal.

from typing import Any, Dict, List, Optional

from src.config import Config
from src.domain.invoice import INVOICE_LINE_FIELDS, NON_PRODUCT_DISPLAY_TYPES, InvoiceLine
from src.erp_integration.odoo_client import OdooClient, OdooSession
from src.utils.logger import logger
from src.api.errors import ErpIntegrationError


class InvoiceLinesService:
    """
    Line lookup with three fallbacks:

    1. the invoice's own invoice_line_ids,
    2. a server-side filtered search on account.move.line,
    3. an unfiltered search filtered here, for databases that reject (2).

    ERP failures never propagate: the caller gets an empty list.
    """

    def __init__(self, config: Config, odoo_client: Optional[OdooClient] = None):
        self.config = config
        self._odoo_client = odoo_client
        logger.info("InvoiceLinesService initialized.")

    @property
    def odoo_client(self) -> OdooClient:
        if self._odoo_client is None:
            self._odoo_client = OdooClient.from_config(self.config)
        return self._odoo_client

    def get_invoice_items(self, invoice_id: int) -> List[Dict[str, Any]]:
        """Returns the normalized line items of `invoice_id` ([] if none or on failure)."""
        try:
            session = self.odoo_client.open_session()
            raw_lines = self._resolve_lines(session, invoice_id)
        except Exception as e:
            logger.error(f"Invoice lines retrieval error for invoice {invoice_id}: {e}", exc_info=True)
            return []

        lines = [line for line in (InvoiceLine.from_dict(r) for r in raw_lines) if line is not None]
        items = [line.to_item() for line in lines]
        logger.info(f"Invoice {invoice_id}: {len(items)} line item(s).")
        return items

    def _resolve_lines(self, session: OdooSession, invoice_id: int) -> List[Dict[str, Any]]:
        line_ids = self._invoice_line_ids(session, invoice_id)
        if line_ids:
            logger.debug(f"Invoice {invoice_id}: reading {len(line_ids)} line(s) by id.")
            return session.search_read('account.move.line', [('id', 'in', line_ids)], INVOICE_LINE_FIELDS)

        try:
            return session.search_read('account.move.line', [
                ('move_id', '=', invoice_id),
                ('display_type', 'not in', list(NON_PRODUCT_DISPLAY_TYPES)),
                ('price_subtotal', '>', 0),
            ], INVOICE_LINE_FIELDS)
        except ErpIntegrationError as e:
            logger.warning(f"Server-side filtered line search failed for invoice {invoice_id}, filtering locally: {e}")

        raw_lines = session.search_read('account.move.line', [('move_id', '=', invoice_id)], INVOICE_LINE_FIELDS)
        kept = []
        for record in raw_lines:
            line = InvoiceLine.from_dict(record)
            if line is not None and line.is_displayable:
                kept.append(record)
        return kept

    def _invoice_line_ids(self, session: OdooSession, invoice_id: int) -> List[int]:
        rows = session.search_read('account.move', [('id', '=', invoice_id)], ['invoice_line_ids'])
        if rows and isinstance(rows[0].get('invoice_line_ids'), list):
            return rows[0]['invoice_line_ids']
        return []
