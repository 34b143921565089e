"""Supplier bill service."""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.exceptions import BusinessLogicError
from solestock.models import Bill, BillLine, ContactType
from solestock.services.line_items import (
    build_size_lines, clean_text, get_scoped, parse_date, parse_id, parse_status,
    replace_lines, require_contact, require_pairs
)
from solestock.services.size_matrix import GroupedLine, grouped_from_row, grouped_to_dict, parse_grouped_lines
from solestock.services.stock_service import STOCK_IN, apply_document_stock
from solestock.services.totals import document_totals
from solestock.utils.formatters import iso_date, money
from solestock.utils.number_format import parse_decimal

logger = logging.getLogger(__name__)


def _save_bill(session: Session, ctx: CompanyContext, bill: Bill,
               grouped_lines: List[GroupedLine], discount: Decimal) -> None:
    """Totals, received stock and line replacement; the caller commits."""
    totals = document_totals(grouped_lines, discount)
    bill.subtotal = totals.subtotal
    bill.tax_total = totals.tax_total
    bill.discount = totals.discount
    bill.grand_total = totals.grand_total

    old_lines = [grouped_from_row(row) for row in bill.lines]
    apply_document_stock(session, ctx, old_lines, grouped_lines, STOCK_IN)
    replace_lines(bill, build_size_lines(BillLine, grouped_lines))


def create_bill(ctx: CompanyContext, payload: Dict[str, Any], session: Session) -> int:
    """
    Record a supplier bill.

    Args:
        payload: supplier_id, bill_no (the supplier's number), bill_date,
            due_date, supplier_ref, status, notes, discount and lines.

    Raises:
        ValueError: missing bill_no, invalid values or no pairs
        BusinessLogicError: the supplier already has a bill with that number
    """
    try:
        supplier_id = parse_id(payload.get('supplier_id'), 'supplier_id')
        require_contact(session, ctx, supplier_id, ContactType.SUPPLIER.value)

        bill_no = clean_text(payload.get('bill_no'))
        if not bill_no:
            raise ValueError('bill_no is required')

        grouped_lines = parse_grouped_lines(payload.get('lines'))
        require_pairs(grouped_lines)

        bill = Bill(
            company_id=ctx.company_id,
            supplier_id=supplier_id,
            bill_no=bill_no,
            bill_date=parse_date(payload.get('bill_date'), 'bill_date') or date.today(),
            due_date=parse_date(payload.get('due_date'), 'due_date'),
            supplier_ref=clean_text(payload.get('supplier_ref')),
            status=parse_status(payload.get('status')),
            notes=clean_text(payload.get('notes')),
        )
        session.add(bill)
        _save_bill(session, ctx, bill, grouped_lines, parse_decimal(payload.get('discount'), 'discount'))

        session.commit()
        logger.info(f"Created bill {bill.bill_no} (id={bill.id}) for supplier {supplier_id}")
        return bill.id

    except IntegrityError:
        session.rollback()
        raise BusinessLogicError(f"Bill {payload.get('bill_no')} already exists for this supplier.")
    except Exception:
        session.rollback()
        raise


def update_bill(ctx: CompanyContext, bill_id: int, payload: Dict[str, Any], session: Session) -> None:
    try:
        bill = get_scoped(session, Bill, ctx, bill_id, 'Bill')

        if 'supplier_id' in payload:
            supplier_id = parse_id(payload.get('supplier_id'), 'supplier_id')
            require_contact(session, ctx, supplier_id, ContactType.SUPPLIER.value)
            bill.supplier_id = supplier_id
        if 'bill_no' in payload:
            bill_no = clean_text(payload.get('bill_no'))
            if not bill_no:
                raise ValueError('bill_no is required')
            bill.bill_no = bill_no
        if 'bill_date' in payload:
            bill.bill_date = parse_date(payload.get('bill_date'), 'bill_date', required=True)
        if 'due_date' in payload:
            bill.due_date = parse_date(payload.get('due_date'), 'due_date')
        if 'supplier_ref' in payload:
            bill.supplier_ref = clean_text(payload.get('supplier_ref'))
        if 'status' in payload:
            bill.status = parse_status(payload.get('status'))
        if 'notes' in payload:
            bill.notes = clean_text(payload.get('notes'))

        discount = parse_decimal(payload['discount'], 'discount') if 'discount' in payload else bill.discount

        if 'lines' in payload:
            grouped_lines = parse_grouped_lines(payload.get('lines'))
            require_pairs(grouped_lines)
        else:
            grouped_lines = [grouped_from_row(row) for row in bill.lines]

        _save_bill(session, ctx, bill, grouped_lines, discount)

        session.commit()
        logger.info(f"Updated bill {bill.bill_no} (id={bill.id})")

    except IntegrityError:
        session.rollback()
        raise BusinessLogicError(f"Bill {payload.get('bill_no')} already exists for this supplier.")
    except Exception:
        session.rollback()
        raise


def delete_bill(ctx: CompanyContext, bill_id: int, session: Session) -> None:
    try:
        bill = get_scoped(session, Bill, ctx, bill_id, 'Bill')
        apply_document_stock(session, ctx, [grouped_from_row(row) for row in bill.lines], [], STOCK_IN)
        session.delete(bill)
        session.commit()
        logger.info(f"Deleted bill id={bill_id}")
    except Exception:
        session.rollback()
        raise


def bill_to_dict(bill: Bill, with_lines: bool = False) -> Dict[str, Any]:
    data = {
        'id': bill.id,
        'bill_no': bill.bill_no,
        'supplier_id': bill.supplier_id,
        'bill_date': iso_date(bill.bill_date),
        'due_date': iso_date(bill.due_date),
        'supplier_ref': bill.supplier_ref,
        'status': bill.status,
        'notes': bill.notes,
        'subtotal': str(bill.subtotal),
        'tax_total': str(bill.tax_total),
        'discount': str(bill.discount),
        'grand_total': str(bill.grand_total),
        'grand_total_display': money(bill.grand_total),
    }
    if with_lines:
        data['lines'] = [grouped_to_dict(grouped_from_row(row)) for row in bill.lines]
        data['total_pairs'] = sum(row.quantity for row in bill.lines)
    return data


def get_bill(ctx: CompanyContext, bill_id: int, session: Session) -> Dict[str, Any]:
    bill = get_scoped(session, Bill, ctx, bill_id, 'Bill')
    return bill_to_dict(bill, with_lines=True)


def list_bills(ctx: CompanyContext, session: Session, supplier_id: Optional[int] = None) -> List[Dict[str, Any]]:
    query = session.query(Bill).filter(Bill.company_id == ctx.company_id)
    if supplier_id:
        query = query.filter(Bill.supplier_id == supplier_id)
    bills = query.order_by(Bill.bill_date.desc(), Bill.id.desc()).all()
    return [bill_to_dict(bill) for bill in bills]
