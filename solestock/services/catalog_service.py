"""Items and contacts used by the size-matrix editors; reads go through the cache."""
import logging
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.exceptions import BusinessLogicError
from solestock.models import Contact, ContactType, Item
from solestock.services.cache_service import get_cache
from solestock.services.line_items import clean_text, get_scoped
from solestock.utils.number_format import parse_decimal

logger = logging.getLogger(__name__)

ITEMS_MODULE = 'items'
CONTACTS_MODULE = 'contacts'


def _item_to_dict(item: Item) -> Dict[str, Any]:
    return {
        'id': item.id,
        'code': item.code,
        'name': item.name,
        'color': item.color,
        'sale_price': item.sale_price,
        'purchase_price': item.purchase_price,
        'active': bool(item.active),
    }


def _contact_to_dict(contact: Contact) -> Dict[str, Any]:
    return {
        'id': contact.id,
        'contact_type': contact.contact_type,
        'code': contact.code,
        'name': contact.name,
        'active': bool(contact.active),
    }


def list_items(ctx: CompanyContext, session: Session) -> List[Dict[str, Any]]:
    """Active items ordered by code and color."""
    def load():
        items = (
            session.query(Item)
            .filter(Item.company_id == ctx.company_id, Item.active.is_(True))
            .order_by(Item.code, Item.color)
            .all()
        )
        return [_item_to_dict(item) for item in items]

    ttl = current_app.config.get('CACHE_ITEMS_TTL', 300)
    return get_cache().memoize(ctx.company_id, ITEMS_MODULE, 'active', load, ttl=ttl)


def _apply_item_payload(item: Item, payload: Dict[str, Any], partial: bool) -> None:
    if not partial or 'code' in payload:
        code = clean_text(payload.get('code'))
        if not code:
            raise ValueError('code is required')
        item.code = code
    if not partial or 'name' in payload:
        name = clean_text(payload.get('name'))
        if not name:
            raise ValueError('name is required')
        item.name = name
    if not partial or 'color' in payload:
        item.color = clean_text(payload.get('color')) or ''
    if not partial or 'sale_price' in payload:
        item.sale_price = parse_decimal(payload.get('sale_price'), 'sale_price')
    if not partial or 'purchase_price' in payload:
        item.purchase_price = parse_decimal(payload.get('purchase_price'), 'purchase_price')
    if 'active' in payload:
        item.active = bool(payload.get('active'))


def save_item(ctx: CompanyContext, payload: Dict[str, Any], session: Session,
              item_id: Optional[int] = None) -> int:
    """Create an item, or update one when item_id is given."""
    try:
        if item_id is None:
            item = Item(company_id=ctx.company_id)
            _apply_item_payload(item, payload, partial=False)
            session.add(item)
        else:
            item = get_scoped(session, Item, ctx, item_id, 'Item')
            _apply_item_payload(item, payload, partial=True)

        session.commit()
        logger.info(f"Saved item {item.code}/{item.color} (id={item.id})")
    except IntegrityError:
        session.rollback()
        raise BusinessLogicError(
            f"An item with code {payload.get('code')} and color {payload.get('color') or '-'} already exists."
        )
    except Exception:
        session.rollback()
        raise

    get_cache().invalidate_module(ctx.company_id, ITEMS_MODULE)
    return item.id


def list_contacts(ctx: CompanyContext, session: Session, contact_type: Optional[str] = None) -> List[Dict[str, Any]]:
    """Active customers and/or suppliers ordered by name."""
    if contact_type and contact_type not in (t.value for t in ContactType):
        raise ValueError(f'Invalid contact type: {contact_type}')

    def load():
        query = session.query(Contact).filter(Contact.company_id == ctx.company_id, Contact.active.is_(True))
        if contact_type:
            query = query.filter(Contact.contact_type == contact_type)
        return [_contact_to_dict(contact) for contact in query.order_by(Contact.name).all()]

    return get_cache().memoize(ctx.company_id, CONTACTS_MODULE, contact_type or 'all', load)


def create_contact(ctx: CompanyContext, payload: Dict[str, Any], session: Session) -> int:
    try:
        name = clean_text(payload.get('name'))
        if not name:
            raise ValueError('name is required')
        contact_type = clean_text(payload.get('contact_type')) or ContactType.CUSTOMER.value
        if contact_type not in (t.value for t in ContactType):
            raise ValueError(f'Invalid contact type: {contact_type}')

        contact = Contact(
            company_id=ctx.company_id,
            contact_type=contact_type,
            code=clean_text(payload.get('code')),
            name=name,
        )
        session.add(contact)
        session.commit()
        logger.info(f"Created {contact_type} {contact.name} (id={contact.id})")
    except Exception:
        session.rollback()
        raise

    get_cache().invalidate_module(ctx.company_id, CONTACTS_MODULE)
    return contact.id
