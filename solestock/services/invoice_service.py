"""Sales invoice service: size-column lines with per-line tax and a percentage discount."""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.exceptions import BusinessLogicError
from solestock.models import ContactType, Invoice, InvoiceLine, SalesOrder
from solestock.services.line_items import (
    build_size_lines, clean_text, get_scoped, parse_date, parse_id, parse_status,
    replace_lines, require_contact, require_pairs, selected_keys
)
from solestock.services.numbering import generate_document_number
from solestock.services.order_service import get_order_for_conversion
from solestock.services.size_matrix import GroupedLine, grouped_from_row, grouped_to_dict, parse_grouped_lines
from solestock.services.stock_service import STOCK_OUT, apply_document_stock
from solestock.services.totals import document_totals, percentage_discount
from solestock.utils.formatters import iso_date, money
from solestock.utils.number_format import parse_decimal

logger = logging.getLogger(__name__)


def _save_invoice(session: Session, ctx: CompanyContext, invoice: Invoice,
                  grouped_lines: List[GroupedLine], discount_keys) -> None:
    """Recompute totals, move stock and replace the lines; the caller commits."""
    selected = [line for line in grouped_lines if line.key in discount_keys]
    discount = percentage_discount(selected, invoice.discount_percent)
    totals = document_totals(grouped_lines, discount)

    invoice.subtotal = totals.subtotal
    invoice.tax_total = totals.tax_total
    invoice.discount = totals.discount
    invoice.grand_total = totals.grand_total

    old_lines = [grouped_from_row(row) for row in invoice.lines]
    apply_document_stock(session, ctx, old_lines, grouped_lines, STOCK_OUT)
    replace_lines(invoice, build_size_lines(InvoiceLine, grouped_lines, discount_keys=discount_keys))


def create_invoice(ctx: CompanyContext, payload: Dict[str, Any], session: Session,
                   prefix: str = 'INV', width: int = 5) -> int:
    """
    Create a sales invoice.

    payload: customer_id, invoice_no (optional), invoice_date, due_date,
    status, notes, discount_percent, order_id (optional) and lines of
    {product_code, color, sizes, unit_price, tax_rate, discount_selected}.
    """
    try:
        customer_id = parse_id(payload.get('customer_id'), 'customer_id')
        require_contact(session, ctx, customer_id, ContactType.CUSTOMER.value)

        grouped_lines = parse_grouped_lines(payload.get('lines'))
        require_pairs(grouped_lines)

        invoice_no = clean_text(payload.get('invoice_no')) or generate_document_number(
            session, Invoice, Invoice.invoice_no, ctx.company_id, prefix, width
        )

        order_id = parse_id(payload.get('order_id'), 'order_id', required=False)
        if order_id is not None:
            get_scoped(session, SalesOrder, ctx, order_id, 'Order')

        invoice = Invoice(
            company_id=ctx.company_id,
            customer_id=customer_id,
            order_id=order_id,
            invoice_no=invoice_no,
            invoice_date=parse_date(payload.get('invoice_date'), 'invoice_date') or date.today(),
            due_date=parse_date(payload.get('due_date'), 'due_date'),
            status=parse_status(payload.get('status')),
            notes=clean_text(payload.get('notes')),
            discount_percent=parse_decimal(payload.get('discount_percent'), 'discount_percent'),
        )
        session.add(invoice)
        _save_invoice(session, ctx, invoice, grouped_lines, selected_keys(payload.get('lines')))

        session.commit()
        logger.info(f"Created invoice {invoice.invoice_no} (id={invoice.id})")
        return invoice.id

    except IntegrityError as e:
        session.rollback()
        raise BusinessLogicError(f'Could not save invoice: {e.orig}')
    except Exception:
        session.rollback()
        raise


def update_invoice(ctx: CompanyContext, invoice_id: int, payload: Dict[str, Any], session: Session) -> None:
    """Update an invoice header and replace its lines in one transaction."""
    try:
        invoice = get_scoped(session, Invoice, ctx, invoice_id, 'Invoice')

        if 'customer_id' in payload:
            customer_id = parse_id(payload.get('customer_id'), 'customer_id')
            require_contact(session, ctx, customer_id, ContactType.CUSTOMER.value)
            invoice.customer_id = customer_id
        if 'invoice_date' in payload:
            invoice.invoice_date = parse_date(payload.get('invoice_date'), 'invoice_date', required=True)
        if 'due_date' in payload:
            invoice.due_date = parse_date(payload.get('due_date'), 'due_date')
        if 'status' in payload:
            invoice.status = parse_status(payload.get('status'))
        if 'notes' in payload:
            invoice.notes = clean_text(payload.get('notes'))
        if 'discount_percent' in payload:
            invoice.discount_percent = parse_decimal(payload.get('discount_percent'), 'discount_percent')

        if 'lines' in payload:
            grouped_lines = parse_grouped_lines(payload.get('lines'))
            require_pairs(grouped_lines)
            discount_keys = selected_keys(payload.get('lines'))
        else:
            grouped_lines = [grouped_from_row(row) for row in invoice.lines]
            discount_keys = {(row.product_code, row.color) for row in invoice.lines if row.discount_selected}

        _save_invoice(session, ctx, invoice, grouped_lines, discount_keys)

        session.commit()
        logger.info(f"Updated invoice {invoice.invoice_no} (id={invoice.id})")

    except IntegrityError as e:
        session.rollback()
        raise BusinessLogicError(f'Could not save invoice: {e.orig}')
    except Exception:
        session.rollback()
        raise


def create_invoice_from_order(ctx: CompanyContext, order_id: int, payload: Dict[str, Any], session: Session,
                              prefix: str = 'INV', width: int = 5) -> int:
    """
    Invoice a sales order: its flat lines are regrouped into one invoice
    line per product and color. payload may set invoice_date, due_date,
    notes, discount_percent and a tax_rate applied to every line.
    """
    order, grouped_lines = get_order_for_conversion(ctx, order_id, session)
    tax_rate = payload.get('tax_rate')

    invoice_payload = {
        'customer_id': order.customer_id,
        'order_id': order.id,
        'notes': order.notes,
    }
    invoice_payload.update({k: v for k, v in payload.items() if k not in ('lines', 'tax_rate') and v is not None})
    invoice_payload['lines'] = [
        {
            'product_code': line.product_code,
            'color': line.color,
            'sizes': line.sizes,
            'unit_price': line.unit_price,
            'tax_rate': tax_rate,
        }
        for line in grouped_lines
    ]
    return create_invoice(ctx, invoice_payload, session, prefix=prefix, width=width)


def delete_invoice(ctx: CompanyContext, invoice_id: int, session: Session) -> None:
    try:
        invoice = get_scoped(session, Invoice, ctx, invoice_id, 'Invoice')
        apply_document_stock(session, ctx, [grouped_from_row(row) for row in invoice.lines], [], STOCK_OUT)
        session.delete(invoice)
        session.commit()
        logger.info(f"Deleted invoice id={invoice_id}")
    except Exception:
        session.rollback()
        raise


def invoice_to_dict(invoice: Invoice, with_lines: bool = False) -> Dict[str, Any]:
    data = {
        'id': invoice.id,
        'invoice_no': invoice.invoice_no,
        'customer_id': invoice.customer_id,
        'order_id': invoice.order_id,
        'invoice_date': iso_date(invoice.invoice_date),
        'due_date': iso_date(invoice.due_date),
        'status': invoice.status,
        'notes': invoice.notes,
        'discount_percent': str(invoice.discount_percent),
        'subtotal': str(invoice.subtotal),
        'tax_total': str(invoice.tax_total),
        'discount': str(invoice.discount),
        'grand_total': str(invoice.grand_total),
        'grand_total_display': money(invoice.grand_total),
    }
    if with_lines:
        lines = []
        for row in invoice.lines:
            line = grouped_to_dict(grouped_from_row(row))
            line['discount_selected'] = bool(row.discount_selected)
            lines.append(line)
        data['lines'] = lines
        data['total_pairs'] = sum(row.quantity for row in invoice.lines)
    return data


def get_invoice(ctx: CompanyContext, invoice_id: int, session: Session) -> Dict[str, Any]:
    invoice = get_scoped(session, Invoice, ctx, invoice_id, 'Invoice')
    return invoice_to_dict(invoice, with_lines=True)


def list_invoices(ctx: CompanyContext, session: Session, customer_id: Optional[int] = None) -> List[Dict[str, Any]]:
    query = session.query(Invoice).filter(Invoice.company_id == ctx.company_id)
    if customer_id:
        query = query.filter(Invoice.customer_id == customer_id)
    invoices = query.order_by(Invoice.created_at.desc(), Invoice.id.desc()).all()
    return [invoice_to_dict(invoice) for invoice in invoices]
