"""Order template service: named size matrices that orders can start from."""
import logging
from typing import Any, Dict, List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.exceptions import BusinessLogicError
from solestock.models import ContactType, OrderTemplate, OrderTemplateLine
from solestock.services.line_items import (
    build_size_lines, clean_text, get_scoped, parse_id, replace_lines, require_contact
)
from solestock.services.size_matrix import grouped_from_row, grouped_to_dict, parse_grouped_lines
from solestock.services.totals import document_totals
from solestock.utils.formatters import iso_date

logger = logging.getLogger(__name__)


def _set_customer(session: Session, ctx: CompanyContext, template: OrderTemplate, value) -> None:
    customer_id = parse_id(value, 'customer_id', required=False)
    if customer_id is not None:
        require_contact(session, ctx, customer_id, ContactType.CUSTOMER.value)
    template.customer_id = customer_id


def create_template(ctx: CompanyContext, payload: Dict[str, Any], session: Session) -> int:
    """
    Save a template. Unlike documents, a template may hold rows without
    pairs; they keep their product and price for later orders.
    """
    try:
        template_name = clean_text(payload.get('template_name'))
        if not template_name:
            raise ValueError('template_name is required')

        template = OrderTemplate(
            company_id=ctx.company_id,
            template_name=template_name,
            notes=clean_text(payload.get('notes')),
            terms=clean_text(payload.get('terms')),
        )
        _set_customer(session, ctx, template, payload.get('customer_id'))
        template.lines = build_size_lines(OrderTemplateLine, parse_grouped_lines(payload.get('lines')))

        session.add(template)
        session.commit()
        logger.info(f"Created order template '{template.template_name}' (id={template.id})")
        return template.id

    except Exception:
        session.rollback()
        raise


def update_template(ctx: CompanyContext, template_id: int, payload: Dict[str, Any], session: Session) -> None:
    try:
        template = get_scoped(session, OrderTemplate, ctx, template_id, 'Template')

        if 'template_name' in payload:
            template_name = clean_text(payload.get('template_name'))
            if not template_name:
                raise ValueError('template_name is required')
            template.template_name = template_name
        if 'customer_id' in payload:
            _set_customer(session, ctx, template, payload.get('customer_id'))
        if 'notes' in payload:
            template.notes = clean_text(payload.get('notes'))
        if 'terms' in payload:
            template.terms = clean_text(payload.get('terms'))
        if 'lines' in payload:
            replace_lines(template, build_size_lines(OrderTemplateLine, parse_grouped_lines(payload.get('lines'))))

        session.commit()
        logger.info(f"Updated order template id={template.id}")

    except Exception:
        session.rollback()
        raise


def delete_template(ctx: CompanyContext, template_id: int, session: Session) -> None:
    try:
        template = get_scoped(session, OrderTemplate, ctx, template_id, 'Template')
        session.delete(template)
        session.commit()
        logger.info(f"Deleted order template id={template_id}")
    except IntegrityError:
        session.rollback()
        raise BusinessLogicError(f"Template {template_id} is used by existing orders and cannot be deleted.")
    except Exception:
        session.rollback()
        raise


def template_to_dict(template: OrderTemplate, with_lines: bool = False) -> Dict[str, Any]:
    data = {
        'id': template.id,
        'template_name': template.template_name,
        'customer_id': template.customer_id,
        'notes': template.notes,
        'terms': template.terms,
        'created_at': iso_date(template.created_at),
    }
    if with_lines:
        grouped_lines = [grouped_from_row(row) for row in template.lines]
        data['lines'] = [grouped_to_dict(line) for line in grouped_lines]
        data['totals'] = document_totals(grouped_lines).as_dict()
    return data


def get_template(ctx: CompanyContext, template_id: int, session: Session) -> Dict[str, Any]:
    """Template with its lines; totals are derived on read, never stored."""
    template = get_scoped(session, OrderTemplate, ctx, template_id, 'Template')
    return template_to_dict(template, with_lines=True)


def list_templates(ctx: CompanyContext, session: Session) -> List[Dict[str, Any]]:
    templates = (
        session.query(OrderTemplate)
        .filter(OrderTemplate.company_id == ctx.company_id)
        .order_by(OrderTemplate.template_name)
        .all()
    )
    return [template_to_dict(template) for template in templates]
