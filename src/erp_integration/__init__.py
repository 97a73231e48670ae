# src/erp_integration/__init__.py
# Makes 'erp_integration' a package. Exports the Odoo client classes.

from .odoo_client import OdooClient, OdooSession

__all__ = [
    "OdooClient",
    "OdooSession",
]
