"""Sales order service: size-matrix orders stored as flat per-size lines."""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.exceptions import BusinessLogicError, NotFoundError
from solestock.models import ContactType, DocumentStatus, OrderTemplate, SalesOrder, SalesOrderLine
from solestock.services.line_items import (
    clean_text, get_scoped, parse_date, parse_id, parse_status, replace_lines, require_contact, require_pairs
)
from solestock.services.numbering import generate_document_number
from solestock.services.size_matrix import (
    GroupedLine, decode, encode, grouped_from_row, grouped_to_dict, parse_grouped_lines
)
from solestock.services.totals import document_totals
from solestock.utils.number_format import parse_decimal
from solestock.utils.formatters import iso_date, money

logger = logging.getLogger(__name__)


def _order_lines(grouped_lines: List[GroupedLine]) -> List[SalesOrderLine]:
    return [
        SalesOrderLine(
            line_no=line.line_no,
            description=line.description,
            product_code=line.product_code,
            color=line.color,
            size=line.size,
            quantity=line.quantity,
            unit_price=line.unit_price,
            line_total=line.line_total,
        )
        for line in encode(grouped_lines)
    ]


def _apply_totals(order: SalesOrder, grouped_lines: List[GroupedLine], discount: Decimal) -> None:
    totals = document_totals(grouped_lines, discount)
    order.subtotal = totals.subtotal
    order.tax_total = totals.tax_total
    order.discount = totals.discount
    order.grand_total = totals.grand_total


def _save_order(order: SalesOrder, grouped_lines: List[GroupedLine], discount: Decimal) -> None:
    """Header totals and line replacement for one save; the caller commits."""
    _apply_totals(order, grouped_lines, discount)
    replace_lines(order, _order_lines(grouped_lines))


def create_order(ctx: CompanyContext, payload: Dict[str, Any], session: Session,
                 prefix: str = 'SO', width: int = 5) -> int:
    """
    Create a sales order from grouped (size-matrix) lines.

    Args:
        ctx: company the order belongs to
        payload: Dictionary with:
            - customer_id: int
            - order_no: str | None (generated when missing)
            - order_date: 'YYYY-MM-DD' | None (today)
            - delivery_date, status, notes, terms
            - discount: flat document discount
            - lines: list of {product_code, color, sizes, unit_price}
        session: SQLAlchemy session

    Returns:
        order_id: ID of created order

    Raises:
        ValueError: For invalid payload values
        NotFoundError: When the customer does not belong to the company
    """
    try:
        customer_id = parse_id(payload.get('customer_id'), 'customer_id')
        require_contact(session, ctx, customer_id, ContactType.CUSTOMER.value)

        grouped_lines = parse_grouped_lines(payload.get('lines'), taxed=False)
        require_pairs(grouped_lines)

        order_no = clean_text(payload.get('order_no')) or generate_document_number(
            session, SalesOrder, SalesOrder.order_no, ctx.company_id, prefix, width
        )

        template_id = parse_id(payload.get('template_id'), 'template_id', required=False)
        if template_id is not None:
            get_scoped(session, OrderTemplate, ctx, template_id, 'Template')

        order = SalesOrder(
            company_id=ctx.company_id,
            customer_id=customer_id,
            order_no=order_no,
            order_date=parse_date(payload.get('order_date'), 'order_date') or date.today(),
            delivery_date=parse_date(payload.get('delivery_date'), 'delivery_date'),
            status=parse_status(payload.get('status')),
            notes=clean_text(payload.get('notes')),
            terms=clean_text(payload.get('terms')),
            template_id=template_id,
        )
        session.add(order)
        _save_order(order, grouped_lines, parse_decimal(payload.get('discount'), 'discount'))

        session.commit()
        logger.info(f"Created sales order {order.order_no} (id={order.id}) with {len(order.lines)} lines")
        return order.id

    except IntegrityError as e:
        session.rollback()
        raise BusinessLogicError(f'Could not save order: {e.orig}')
    except Exception:
        session.rollback()
        raise


def update_order(ctx: CompanyContext, order_id: int, payload: Dict[str, Any], session: Session) -> None:
    """
    Update an order header and replace all of its lines.

    Header update, line delete and line insert commit together; on any error
    the order keeps its previous header and lines.
    """
    try:
        order = get_scoped(session, SalesOrder, ctx, order_id, 'Order')

        if 'customer_id' in payload:
            customer_id = parse_id(payload.get('customer_id'), 'customer_id')
            require_contact(session, ctx, customer_id, ContactType.CUSTOMER.value)
            order.customer_id = customer_id
        if 'order_date' in payload:
            order.order_date = parse_date(payload.get('order_date'), 'order_date', required=True)
        if 'delivery_date' in payload:
            order.delivery_date = parse_date(payload.get('delivery_date'), 'delivery_date')
        if 'status' in payload:
            order.status = parse_status(payload.get('status'))
        if 'notes' in payload:
            order.notes = clean_text(payload.get('notes'))
        if 'terms' in payload:
            order.terms = clean_text(payload.get('terms'))

        discount = parse_decimal(payload['discount'], 'discount') if 'discount' in payload else order.discount

        if 'lines' in payload:
            grouped_lines = parse_grouped_lines(payload.get('lines'), taxed=False)
            require_pairs(grouped_lines)
            _save_order(order, grouped_lines, discount)
        else:
            _apply_totals(order, decode(order.lines), discount)

        session.commit()
        logger.info(f"Updated sales order {order.order_no} (id={order.id})")

    except IntegrityError as e:
        session.rollback()
        raise BusinessLogicError(f'Could not save order: {e.orig}')
    except Exception:
        session.rollback()
        raise


def create_order_from_template(ctx: CompanyContext, template_id: int, payload: Dict[str, Any], session: Session,
                               prefix: str = 'SO', width: int = 5) -> int:
    """
    Start a sales order from an order template's size matrix.

    payload may override customer_id, dates, notes and terms; the template's
    customer is used when none is given.
    """
    template = get_scoped(session, OrderTemplate, ctx, template_id, 'Template')

    grouped_lines = [grouped_from_row(row) for row in template.lines]
    order_payload = {
        'customer_id': payload.get('customer_id') or template.customer_id,
        'notes': template.notes,
        'terms': template.terms,
        'template_id': template.id,
    }
    order_payload.update({k: v for k, v in payload.items() if k != 'lines' and v is not None})
    order_payload['lines'] = [
        {
            'product_code': line.product_code,
            'color': line.color,
            'sizes': line.sizes,
            'unit_price': line.unit_price,
        }
        for line in grouped_lines
    ]

    if not order_payload.get('customer_id'):
        raise ValueError('customer_id is required')

    return create_order(ctx, order_payload, session, prefix=prefix, width=width)


def delete_order(ctx: CompanyContext, order_id: int, session: Session) -> None:
    try:
        order = get_scoped(session, SalesOrder, ctx, order_id, 'Order')
        session.delete(order)
        session.commit()
        logger.info(f"Deleted sales order id={order_id}")
    except IntegrityError:
        session.rollback()
        raise BusinessLogicError(f"Order {order_id} is referenced by an invoice and cannot be deleted.")
    except Exception:
        session.rollback()
        raise


def order_to_dict(order: SalesOrder, grouped_lines: Optional[List[GroupedLine]] = None) -> Dict[str, Any]:
    data = {
        'id': order.id,
        'order_no': order.order_no,
        'customer_id': order.customer_id,
        'order_date': iso_date(order.order_date),
        'delivery_date': iso_date(order.delivery_date),
        'status': order.status,
        'notes': order.notes,
        'terms': order.terms,
        'template_id': order.template_id,
        'subtotal': str(order.subtotal),
        'tax_total': str(order.tax_total),
        'discount': str(order.discount),
        'grand_total': str(order.grand_total),
        'grand_total_display': money(order.grand_total),
    }
    if grouped_lines is not None:
        data['lines'] = [grouped_to_dict(line) for line in grouped_lines]
        data['total_pairs'] = sum(line.total_pairs for line in grouped_lines)
    return data


def get_order(ctx: CompanyContext, order_id: int, session: Session) -> Dict[str, Any]:
    """Order header with its lines regrouped into a size matrix."""
    order = get_scoped(session, SalesOrder, ctx, order_id, 'Order')
    return order_to_dict(order, decode(order.lines))


def list_orders(ctx: CompanyContext, session: Session, status: Optional[str] = None) -> List[Dict[str, Any]]:
    query = session.query(SalesOrder).filter(SalesOrder.company_id == ctx.company_id)
    if status:
        if status not in DocumentStatus.values():
            raise ValueError(f'Invalid status: {status}')
        query = query.filter(SalesOrder.status == status)
    orders = query.order_by(SalesOrder.created_at.desc(), SalesOrder.id.desc()).all()
    return [order_to_dict(order) for order in orders]


def get_order_for_conversion(ctx: CompanyContext, order_id: int, session: Session):
    """Order and its decoded grouped lines, for building an invoice from it."""
    order = get_scoped(session, SalesOrder, ctx, order_id, 'Order')
    if order.status in (DocumentStatus.VOID.value, DocumentStatus.CANCELLED.value):
        raise BusinessLogicError(f'Order {order.order_no} is {order.status} and cannot be invoiced.')
    grouped_lines = decode(order.lines)
    if not grouped_lines:
        raise NotFoundError(f'Order {order.order_no} has no lines.')
    return order, grouped_lines
