# src/domain/invoice.py
# Defines data models for customer invoices, credit notes and their lines (account.move / account.move.line).

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Dict, Any, List
from src.utils.data_conversion import many2one_id, many2one_name, odoo_str, parse_optional_date, safe_float
from src.utils.logger import logger

MOVE_TYPE_INVOICE = 'out_invoice'
MOVE_TYPE_CREDIT_NOTE = 'out_refund'
STATE_POSTED = 'posted'

# display_type values of lines that only structure the document
NON_PRODUCT_DISPLAY_TYPES = ('line_section', 'line_note')

INVOICE_FIELDS = [
    'name', 'invoice_date', 'amount_total', 'amount_untaxed', 'amount_tax',
    'partner_shipping_id', 'id', 'move_type', 'state',
]

INVOICE_LINE_FIELDS = [
    'id', 'name', 'product_id', 'quantity', 'price_unit', 'price_subtotal',
    'discount', 'display_type', 'account_id',
]

UNKNOWN_ADDRESS = 'Unknown'


@dataclass(frozen=True)
class Invoice:
    """A posted customer invoice or credit note."""
    id: int
    name: str
    move_type: str
    state: Optional[str] = None
    invoice_date: Optional[date] = None
    shipping_address_id: Optional[int] = None
    shipping_address_name: Optional[str] = None
    amount_total: float = 0.0
    amount_untaxed: float = 0.0
    amount_tax: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional['Invoice']:
        if not isinstance(data, dict) or 'id' not in data:
            logger.warning(f"Invalid data for Invoice.from_dict: {data!r}")
            return None
        return cls(
            id=data['id'],
            name=odoo_str(data.get('name')) or '',
            move_type=odoo_str(data.get('move_type')) or MOVE_TYPE_INVOICE,
            state=odoo_str(data.get('state')),
            invoice_date=parse_optional_date(data.get('invoice_date')),
            shipping_address_id=many2one_id(data.get('partner_shipping_id')),
            shipping_address_name=many2one_name(data.get('partner_shipping_id')),
            amount_total=safe_float(data.get('amount_total')),
            amount_untaxed=safe_float(data.get('amount_untaxed')),
            amount_tax=safe_float(data.get('amount_tax')),
        )

    @property
    def is_credit_note(self) -> bool:
        return self.move_type == MOVE_TYPE_CREDIT_NOTE

    @property
    def address_key(self) -> str:
        """Key of the sales-by-address bucket this document falls into."""
        return self.shipping_address_name or UNKNOWN_ADDRESS

    def signed_amount(self, refunds_reduce_revenue: bool = False) -> float:
        """
        The amount this document contributes to revenue.

        Every total, bucket and list entry goes through here, so the sign
        convention is applied exactly once: credit notes are negative when
        `refunds_reduce_revenue` is set and count at face value otherwise.
        """
        amount = abs(self.amount_total)
        if self.is_credit_note and refunds_reduce_revenue:
            return -amount
        return amount


@dataclass(frozen=True)
class OrderSummary:
    """One document inside a sales-by-address bucket."""
    id: int
    name: str
    date: Optional[str]
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "date": self.date, "amount": self.amount}


@dataclass
class AddressBucket:
    """Running aggregate for one delivery address. Rebuilt on every request."""
    count: int = 0
    total: float = 0.0
    orders: List[OrderSummary] = field(default_factory=list)

    def add(self, order: OrderSummary):
        self.count += 1
        self.total += order.amount
        self.orders.append(order)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "total": self.total,
            "orders": [o.to_dict() for o in self.orders],
        }


@dataclass(frozen=True)
class InvoiceLine:
    """A line of an invoice (account.move.line)."""
    id: int
    name: Optional[str] = None
    product_id: Optional[int] = None
    product_name: Optional[str] = None
    quantity: float = 0.0
    price_unit: float = 0.0
    discount: float = 0.0
    price_subtotal: Optional[float] = None
    display_type: Optional[str] = None
    account_id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional['InvoiceLine']:
        if not isinstance(data, dict) or 'id' not in data:
            logger.warning(f"Invalid data for InvoiceLine.from_dict: {data!r}")
            return None
        raw_subtotal = data.get('price_subtotal')
        return cls(
            id=data['id'],
            name=odoo_str(data.get('name')),
            product_id=many2one_id(data.get('product_id')),
            product_name=many2one_name(data.get('product_id')),
            quantity=safe_float(data.get('quantity')),
            price_unit=safe_float(data.get('price_unit')),
            discount=safe_float(data.get('discount')),
            # False means "not computed" in Odoo's wire format, 0.0 is a real value
            price_subtotal=None if raw_subtotal is None or raw_subtotal is False else safe_float(raw_subtotal),
            display_type=odoo_str(data.get('display_type')),
            account_id=many2one_id(data.get('account_id')),
        )

    @property
    def subtotal(self) -> float:
        if self.price_subtotal is not None:
            return self.price_subtotal
        return self.price_unit * self.quantity * (1 - self.discount / 100)

    @property
    def is_displayable(self) -> bool:
        """Customer-visible product line: not a section/note and with a positive subtotal."""
        if not self.product_id:
            return False
        if self.display_type in NON_PRODUCT_DISPLAY_TYPES:
            return False
        return self.subtotal > 0

    def to_item(self) -> Dict[str, Any]:
        """Shape sent to the invoice-detail modal."""
        subtotal = self.subtotal
        return {
            "id": self.id,
            "name": self.product_name or self.name or 'Item',
            "quantity": self.quantity,
            "price_unit": f"{self.price_unit:.2f}",
            "price_subtotal": f"{subtotal:.2f}",
            "raw_subtotal": subtotal,
            "account_id": self.account_id,
            "display_type": self.display_type,
        }

