"""Shared fixtures: an in-memory Odoo session and an app wired with it."""

import pytest

from src.app import create_app
from src.config import Config
from src.services import InvoiceLinesService, ReportService, SalesStatsService


class FakeSession:
    """Answers search_read calls from canned data, keyed by model."""

    def __init__(self, data=None, failures=None):
        self.data = data or {}
        self.failures = failures or {}
        self.calls = []

    def search_read(self, model, domain, fields, limit=None):
        self.calls.append((model, [tuple(t) for t in domain], list(fields), limit))
        handler = self.failures.get(model)
        if handler is not None:
            error = handler(domain)
            if error is not None:
                raise error
        value = self.data.get(model, [])
        return value(domain) if callable(value) else list(value)


class FakeClient:
    """Stands in for OdooClient: every open_session() hands back the same FakeSession."""

    def __init__(self, session=None, error=None):
        self.session = session or FakeSession()
        self.error = error
        self.sessions_opened = 0

    def open_session(self):
        if self.error is not None:
            raise self.error
        self.sessions_opened += 1
        return self.session

    def check_connection(self):
        if self.error is not None:
            raise self.error
        return {"url": "https://odoo.test", "db": "test", "uid": 2}


@pytest.fixture
def config():
    cfg = Config()
    cfg.SECRET_KEY = 'test-secret'
    cfg.APP_DEBUG = True
    cfg.LOG_LEVEL = 'INFO'
    cfg.ODOO_URL = 'https://odoo.test'
    cfg.ODOO_DB = 'test'
    cfg.ODOO_USERNAME = 'api@test'
    cfg.ODOO_PASSWORD = 'secret'
    cfg.ODOO_CUSTOMER_REF = 'CUST001'
    cfg.INVOICE_DATE_FROM = '2026-01-01'
    cfg.INVOICE_FETCH_LIMIT = 1000
    cfg.FISCAL_YEAR_START_MONTH = 1
    cfg.ADDRESS_LABEL_WIDTH = 35
    cfg.REFUNDS_REDUCE_REVENUE = False
    cfg.CURRENCY_SYMBOL = '£'
    return cfg


@pytest.fixture
def partner_record():
    return {"id": 7, "name": "Acme Ltd", "ref": "CUST001", "parent_id": False, "child_ids": [8, 9]}


@pytest.fixture
def invoice_records():
    """Two invoices and a credit note in March 2026, one without a delivery address."""
    return [
        {"id": 101, "name": "INV/2026/0001", "invoice_date": "2026-03-02", "amount_total": 100.0,
         "amount_untaxed": 83.33, "amount_tax": 16.67, "partner_shipping_id": [8, "Acme Ltd, Leeds Depot"],
         "move_type": "out_invoice", "state": "posted"},
        {"id": 102, "name": "INV/2026/0002", "invoice_date": "2026-03-15", "amount_total": 50.0,
         "amount_untaxed": 41.67, "amount_tax": 8.33, "partner_shipping_id": [9, "Acme Ltd, York Store"],
         "move_type": "out_invoice", "state": "posted"},
        {"id": 103, "name": "RINV/2026/0001", "invoice_date": "2026-03-20", "amount_total": 30.0,
         "amount_untaxed": 25.0, "amount_tax": 5.0, "partner_shipping_id": False,
         "move_type": "out_refund", "state": "posted"},
    ]


@pytest.fixture
def odoo_session(partner_record, invoice_records):
    return FakeSession({
        'res.partner': [partner_record],
        'account.move': invoice_records,
    })


@pytest.fixture
def odoo_client(odoo_session):
    return FakeClient(odoo_session)


@pytest.fixture
def app(config, odoo_client):
    application = create_app(
        config,
        sales_stats_service=SalesStatsService(config, odoo_client),
        invoice_lines_service=InvoiceLinesService(config, odoo_client),
        report_service=ReportService(),
    )
    application.config['TESTING'] = True
    return application


@pytest.fixture
def client(app):
    return app.test_client()
