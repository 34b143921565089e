"""
Helpers shared by the document services: header field parsing, contact
checks and construction of size-column line rows.
"""
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional, Set, Tuple

from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.exceptions import NotFoundError
from solestock.models import Contact, DocumentStatus
from solestock.services.size_matrix import GroupedLine, to_size_columns

logger = logging.getLogger(__name__)


def parse_date(value, field: str, required: bool = False) -> Optional[date]:
    """Parse an ISO date (YYYY-MM-DD) from a payload value."""
    if value is None or value == '':
        if required:
            raise ValueError(f'{field} is required')
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), '%Y-%m-%d').date()
    except ValueError:
        raise ValueError(f'{field} must be a date in YYYY-MM-DD format')


def parse_status(value, default: str = DocumentStatus.DRAFT.value) -> str:
    if value is None or value == '':
        return default
    status = str(value).strip().lower()
    if status not in DocumentStatus.values():
        raise ValueError(f'Invalid status: {value}')
    return status


def clean_text(value) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_id(value, field: str, required: bool = True) -> Optional[int]:
    if value is None or value == '':
        if required:
            raise ValueError(f'{field} is required')
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f'{field} must be an integer id')


def require_contact(session: Session, ctx: CompanyContext, contact_id: int, contact_type: str) -> Contact:
    """Fetch a contact of the given type that belongs to the company."""
    contact = session.query(Contact).filter(
        Contact.id == contact_id,
        Contact.company_id == ctx.company_id,
        Contact.contact_type == contact_type
    ).first()
    if not contact:
        raise NotFoundError(f'{contact_type.capitalize()} {contact_id} not found.')
    return contact


def get_scoped(session: Session, model, ctx: CompanyContext, document_id: int, label: str):
    """Fetch a company-owned document or raise NotFoundError."""
    document = session.query(model).filter(
        model.id == document_id,
        model.company_id == ctx.company_id
    ).first()
    if not document:
        raise NotFoundError(f'{label} {document_id} not found.')
    return document


def require_pairs(grouped_lines: Iterable[GroupedLine]) -> None:
    if not any(line.total_pairs > 0 for line in grouped_lines):
        raise ValueError('Add at least one line with a quantity')


def selected_keys(payload_lines) -> Set[Tuple[str, str]]:
    """(product_code, color) keys of the payload lines flagged discount_selected."""
    keys = set()
    for entry in payload_lines or []:
        if isinstance(entry, dict) and entry.get('discount_selected'):
            keys.add((str(entry.get('product_code') or '').strip(), str(entry.get('color') or '').strip()))
    return keys


def build_size_lines(line_model, grouped_lines: List[GroupedLine], taxed: bool = True,
                     discount_keys: Optional[Set[Tuple[str, str]]] = None) -> list:
    """
    One size-column row per grouped line, numbered 1..N in input order.

    Untaxed tables (return notes) carry no tax columns; their line_total is
    pairs * unit_price.
    """
    rows = []
    for line_no, grouped in enumerate(grouped_lines, start=1):
        values = to_size_columns(grouped)
        values.update(
            line_no=line_no,
            product_code=grouped.product_code,
            color=grouped.color,
            description=grouped.description or None,
            quantity=grouped.total_pairs,
            unit_price=grouped.unit_price,
        )
        if taxed:
            values.update(
                tax_rate=grouped.tax_rate,
                tax_amount=grouped.tax_amount,
                line_total=grouped.line_total,
            )
        else:
            values['line_total'] = grouped.subtotal
        if discount_keys is not None:
            values['discount_selected'] = grouped.key in discount_keys
        rows.append(line_model(**values))
    return rows


def replace_lines(document, new_lines: list) -> None:
    """
    Swap a document's lines for a freshly numbered set.

    The old rows are deleted as orphans and the new ones inserted when the
    caller commits, so the header update, the delete and the insert land in
    one transaction.
    """
    logger.debug(f"Replacing lines of {document!r}: {len(new_lines)} new lines")
    document.lines = new_lines
