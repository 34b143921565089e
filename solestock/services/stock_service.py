"""
Stock by size.

Document saves move stock through apply_document_stock inside the caller's
transaction: invoices take pairs out, bills and return notes put them back.
On update only the difference between the old and new lines is applied;
on delete the old lines are reversed in full. Lines whose code and color do
not match a catalog item carry no stock.
"""
import logging
from collections import defaultdict
from typing import Any, Dict, Iterable, List, Optional, Tuple

from sqlalchemy.orm import Session

from solestock.context import CompanyContext
from solestock.models import Item, StockBySize
from solestock.services.line_items import get_scoped, parse_id
from solestock.services.size_matrix import GroupedLine
from solestock.utils.number_format import parse_quantity
from solestock.utils.sizes import SIZE_RANGE, empty_sizes, is_valid_size

logger = logging.getLogger(__name__)

STOCK_OUT = -1
STOCK_IN = 1


def _pairs_by_key(grouped_lines: Iterable[GroupedLine]) -> Dict[Tuple[str, str, str], int]:
    pairs = defaultdict(int)
    for line in grouped_lines:
        for size, qty in line.sizes.items():
            if qty:
                pairs[(line.product_code, line.color, size)] += qty
    return pairs


def stock_deltas(old_lines: Iterable[GroupedLine], new_lines: Iterable[GroupedLine],
                 direction: int) -> Dict[Tuple[str, str, str], int]:
    """
    Net stock change per (product_code, color, size) when a document's
    lines go from old_lines to new_lines. direction is STOCK_IN or STOCK_OUT.
    """
    old_pairs = _pairs_by_key(old_lines)
    new_pairs = _pairs_by_key(new_lines)

    deltas = {}
    for key in set(old_pairs) | set(new_pairs):
        change = (new_pairs.get(key, 0) - old_pairs.get(key, 0)) * direction
        if change:
            deltas[key] = change
    return deltas


def _item_ids(session: Session, ctx: CompanyContext, keys) -> Dict[Tuple[str, str], int]:
    codes = {code for code, _color in keys}
    if not codes:
        return {}
    items = session.query(Item).filter(Item.company_id == ctx.company_id, Item.code.in_(codes)).all()
    return {(item.code, item.color or ''): item.id for item in items}


def _adjust(session: Session, ctx: CompanyContext, item_id: int, size: str, change: int) -> None:
    row = session.query(StockBySize).filter(
        StockBySize.company_id == ctx.company_id,
        StockBySize.item_id == item_id,
        StockBySize.size == size
    ).with_for_update().first()
    if row is None:
        row = StockBySize(company_id=ctx.company_id, item_id=item_id, size=size, quantity=0)
        session.add(row)
    row.quantity = (row.quantity or 0) + change


def apply_document_stock(session: Session, ctx: CompanyContext, old_lines: List[GroupedLine],
                         new_lines: List[GroupedLine], direction: int) -> int:
    """
    Move stock for a document whose lines change from old_lines to
    new_lines. Pass new_lines=[] when the document is deleted. Does not
    commit; returns the number of stock rows touched.
    """
    deltas = stock_deltas(old_lines, new_lines, direction)
    if not deltas:
        return 0

    item_ids = _item_ids(session, ctx, {(code, color) for code, color, _size in deltas})
    touched = 0
    for (code, color, size), change in sorted(deltas.items()):
        item_id = item_ids.get((code, color))
        if item_id is None:
            logger.debug(f"No catalog item for {code}/{color}; stock not moved")
            continue
        _adjust(session, ctx, item_id, size, change)
        touched += 1
    return touched


def _stock_rows(session: Session, ctx: CompanyContext, item_ids: List[int]) -> Dict[int, Dict[str, int]]:
    by_item = {item_id: empty_sizes() for item_id in item_ids}
    if not item_ids:
        return by_item
    rows = session.query(StockBySize).filter(
        StockBySize.company_id == ctx.company_id,
        StockBySize.item_id.in_(item_ids)
    ).all()
    for row in rows:
        if is_valid_size(row.size):
            by_item[row.item_id][row.size] = row.quantity or 0
    return by_item


def _stock_to_dict(item: Item, sizes: Dict[str, int]) -> Dict[str, Any]:
    return {
        'item_id': item.id,
        'code': item.code,
        'name': item.name,
        'color': item.color,
        'sizes': {size: sizes.get(size, 0) for size in SIZE_RANGE},
        'total_pairs': sum(sizes.values()),
    }


def list_stock(ctx: CompanyContext, session: Session, code: Optional[str] = None,
               color: Optional[str] = None) -> List[Dict[str, Any]]:
    """Stock per size of the company's active items, optionally for one code and/or color."""
    query = session.query(Item).filter(Item.company_id == ctx.company_id, Item.active.is_(True))
    if code:
        query = query.filter(Item.code == code)
    if color is not None:
        query = query.filter(Item.color == color)
    items = query.order_by(Item.code, Item.color).all()

    by_item = _stock_rows(session, ctx, [item.id for item in items])
    return [_stock_to_dict(item, by_item[item.id]) for item in items]


def get_item_stock(ctx: CompanyContext, item_id: int, session: Session) -> Dict[str, Any]:
    item = get_scoped(session, Item, ctx, item_id, 'Item')
    return _stock_to_dict(item, _stock_rows(session, ctx, [item.id])[item.id])


def adjust_stock(ctx: CompanyContext, payload: Dict[str, Any], session: Session) -> Dict[str, Any]:
    """
    Add (or with negative numbers, remove) pairs of one item by hand.

    payload: item_id and sizes ({"39": 5, "41": -2}); quantities are added
    to what is on hand.
    """
    try:
        item_id = parse_id(payload.get('item_id'), 'item_id')
        item = get_scoped(session, Item, ctx, item_id, 'Item')

        raw_sizes = payload.get('sizes') or {}
        if not isinstance(raw_sizes, dict):
            raise ValueError('sizes must be an object')

        changes = {}
        for size, qty in raw_sizes.items():
            size = str(size)
            if not is_valid_size(size):
                raise ValueError(f'Unknown size: {size!r}')
            change = parse_quantity(qty, f'size {size}', allow_negative=True)
            if change:
                changes[size] = change
        if not changes:
            raise ValueError('Enter a quantity for at least one size')

        for size, change in sorted(changes.items()):
            _adjust(session, ctx, item.id, size, change)

        session.commit()
        logger.info(f"Adjusted stock of item {item.code}/{item.color} (id={item.id}): {changes}")
    except Exception:
        session.rollback()
        raise

    return get_item_stock(ctx, item_id, session)
