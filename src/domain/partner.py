# src/domain/partner.py
# Odoo res.partner record as used by the dashboard.

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from src.utils.data_conversion import many2one_id, odoo_str
from src.utils.logger import logger

PARTNER_FIELDS = ['id', 'name', 'ref', 'parent_id', 'child_ids']

@dataclass(frozen=True)
class Partner:
    """A customer/contact. Branches point at their head office through parent_id."""
    id: int
    name: str
    ref: Optional[str] = None
    parent_id: Optional[int] = None
    child_ids: List[int] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional['Partner']:
        if not isinstance(data, dict) or 'id' not in data:
            logger.warning(f"Invalid data for Partner.from_dict: {data!r}")
            return None
        return cls(
            id=data['id'],
            name=odoo_str(data.get('name')) or '',
            ref=odoo_str(data.get('ref')),
            parent_id=many2one_id(data.get('parent_id')),
            child_ids=list(data.get('child_ids') or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "ref": self.ref,
            "parent_id": self.parent_id,
            "child_ids": list(self.child_ids),
        }
