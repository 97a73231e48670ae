"""Tests for the invoice-detail line lookup and its fallbacks."""

import pytest

from src.api.errors import ErpIntegrationError
from src.services import InvoiceLinesService
from tests.conftest import FakeClient, FakeSession


PRODUCT_LINE = {"id": 1, "name": "[W-100] Widget", "product_id": [5, "Widget"], "quantity": 2.0,
                "price_unit": 10.0, "price_subtotal": 20.0, "discount": 0.0,
                "display_type": "product", "account_id": [40, "400000 Sales"]}
SECTION_LINE = {"id": 2, "name": "Deliveries", "product_id": False, "quantity": 0.0,
                "price_unit": 0.0, "price_subtotal": 0.0, "discount": 0.0,
                "display_type": "line_section", "account_id": False}
DISCOUNTED_LINE = {"id": 3, "name": "Service call", "product_id": [6, "Call-out"], "quantity": 1.0,
                   "price_unit": 80.0, "price_subtotal": False, "discount": 25.0,
                   "display_type": False, "account_id": [40, "400000 Sales"]}
TAX_LINE = {"id": 4, "name": "VAT 20%", "product_id": False, "quantity": 0.0,
            "price_unit": 0.0, "price_subtotal": 0.0, "discount": 0.0,
            "display_type": "tax", "account_id": [22, "VAT"]}


def lines_by_domain(domain):
    terms = {tuple(t[:2]): t[2] for t in domain}
    if ('id', 'in') in terms:
        return [line for line in (PRODUCT_LINE, DISCOUNTED_LINE) if line["id"] in terms[('id', 'in')]]
    return [PRODUCT_LINE, SECTION_LINE, DISCOUNTED_LINE, TAX_LINE]


class TestLineTiers:

    def test_uses_invoice_line_ids_first(self, config):
        session = FakeSession({
            'account.move': [{"id": 101, "invoice_line_ids": [1, 3]}],
            'account.move.line': lines_by_domain,
        })

        items = InvoiceLinesService(config, FakeClient(session)).get_invoice_items(101)

        assert [i["id"] for i in items] == [1, 3]
        model, domain, _, _ = session.calls[-1]
        assert model == 'account.move.line'
        assert domain == [('id', 'in', [1, 3])]

    def test_server_side_filter_when_no_line_ids(self, config):
        session = FakeSession({
            'account.move': [{"id": 101, "invoice_line_ids": []}],
            'account.move.line': [PRODUCT_LINE],
        })

        items = InvoiceLinesService(config, FakeClient(session)).get_invoice_items(101)

        assert [i["id"] for i in items] == [1]
        _, domain, _, _ = session.calls[-1]
        assert ('move_id', '=', 101) in domain
        assert ('display_type', 'not in', ['line_section', 'line_note']) in domain
        assert ('price_subtotal', '>', 0) in domain

    def test_local_filter_when_server_filter_is_rejected(self, config):
        def reject_filtered(domain):
            if len(domain) > 1:
                return ErpIntegrationError("Invalid field 'display_type'")
            return None

        session = FakeSession(
            {'account.move': [], 'account.move.line': lines_by_domain},
            failures={'account.move.line': reject_filtered},
        )

        items = InvoiceLinesService(config, FakeClient(session)).get_invoice_items(101)

        assert [i["id"] for i in items] == [1, 3]
        _, domain, _, _ = session.calls[-1]
        assert domain == [('move_id', '=', 101)]


class TestLineNormalisation:

    @pytest.fixture
    def items(self, config):
        session = FakeSession({
            'account.move': [{"id": 101, "invoice_line_ids": [1, 3]}],
            'account.move.line': lines_by_domain,
        })
        return InvoiceLinesService(config, FakeClient(session)).get_invoice_items(101)

    def test_product_line(self, items):
        assert items[0] == {
            "id": 1,
            "name": "Widget",
            "quantity": 2.0,
            "price_unit": "10.00",
            "price_subtotal": "20.00",
            "raw_subtotal": 20.0,
            "account_id": 40,
            "display_type": "product",
        }

    def test_missing_subtotal_is_computed_with_discount(self, items):
        assert items[1]["price_subtotal"] == "60.00"
        assert items[1]["display_type"] is None


class TestLineFailures:

    def test_no_lines(self, config):
        session = FakeSession({'account.move': [], 'account.move.line': []})
        assert InvoiceLinesService(config, FakeClient(session)).get_invoice_items(999) == []

    def test_erp_failure_returns_empty_list(self, config):
        client = FakeClient(error=ErpIntegrationError("Connection refused"))
        assert InvoiceLinesService(config, client).get_invoice_items(101) == []

    def test_missing_configuration_returns_empty_list(self, config):
        config.ODOO_URL = ''
        assert InvoiceLinesService(config).get_invoice_items(101) == []
