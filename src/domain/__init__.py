# src/domain/__init__.py
# Makes 'domain' a package. Exports the ERP record dataclasses.

from .partner import Partner
from .invoice import Invoice, InvoiceLine, AddressBucket, OrderSummary

__all__ = [
    "Partner",
    "Invoice",
    "InvoiceLine",
    "AddressBucket",
    "OrderSummary",
]
