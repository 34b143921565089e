"""
Size-matrix line codec.

Editors work with grouped lines: one row per product code and color with a
quantity per size. Sales orders store flat lines: one row per product, color
and size, identified by a "{code} - {color} - Size {size}" description and,
for rows written by this module, by explicit product_code/color/size fields.
Bills, invoices, return notes and templates store one row per grouped line
with a size_NN column per size; the column helpers below cover that layout.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from solestock.utils.sizes import SIZE_RANGE, SIZE_COLUMNS, empty_sizes, is_valid_size, size_column
from solestock.utils.number_format import parse_decimal, parse_quantity
from solestock.services import totals

DELIMITER = ' - '
SIZE_PREFIX = 'Size '


@dataclass
class GroupedLine:
    """One product variant (code + color) with a quantity per size."""

    product_code: str
    color: str = ''
    sizes: Dict[str, int] = field(default_factory=empty_sizes)
    unit_price: Decimal = Decimal('0')
    tax_rate: Decimal = Decimal('0')
    description: str = ''

    def __post_init__(self):
        filled = empty_sizes()
        for size, qty in (self.sizes or {}).items():
            if is_valid_size(size):
                qty = int(qty or 0)
                if qty < 0:
                    raise ValueError(f'Quantity for size {size} cannot be negative')
                filled[str(size)] = qty
        self.sizes = filled
        self.unit_price = Decimal(str(self.unit_price))
        self.tax_rate = Decimal(str(self.tax_rate))

    @property
    def key(self) -> Tuple[str, str]:
        return (self.product_code, self.color)

    @property
    def total_pairs(self) -> int:
        return totals.total_pairs(self.sizes)

    @property
    def subtotal(self) -> Decimal:
        return self.total_pairs * self.unit_price

    @property
    def tax_amount(self) -> Decimal:
        return self.subtotal * self.tax_rate / 100

    @property
    def line_total(self) -> Decimal:
        return self.subtotal + self.tax_amount

    def set_size(self, size, qty: int) -> None:
        """Set the quantity of one size."""
        size = str(size)
        if not is_valid_size(size):
            raise ValueError(f'Unknown size: {size!r}')
        if qty < 0:
            raise ValueError(f'Quantity for size {size} cannot be negative')
        self.sizes[size] = int(qty)


@dataclass
class PersistedLine:
    """A flat line: one product, color and size."""

    description: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal
    line_no: int
    document_id: Optional[int] = None
    product_code: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None


def describe(product_code: str, color: str, size: str) -> str:
    return f'{product_code}{DELIMITER}{color}{DELIMITER}{SIZE_PREFIX}{size}'


def parse_description(description: str) -> Tuple[str, str, str]:
    """
    Split a flat line description into (product_code, color, size).

    Only the first three parts count; anything after a third delimiter is
    ignored. A description without the delimiter comes back as the whole
    string for the product code with empty color and size.
    """
    parts = (description or '').split(DELIMITER)
    product_code = parts[0]
    color = parts[1] if len(parts) > 1 else ''
    size_text = parts[2] if len(parts) > 2 else ''
    if size_text.startswith(SIZE_PREFIX):
        size_text = size_text[len(SIZE_PREFIX):]
    return product_code, color, size_text.strip()


def _identity(line) -> Tuple[str, str, str]:
    if getattr(line, 'product_code', None):
        return line.product_code, line.color or '', str(line.size or '')
    return parse_description(line.description)


def decode(persisted_lines: Iterable) -> List[GroupedLine]:
    """
    Rebuild grouped lines from flat lines ordered by line number.

    Groups come out in first-seen order. Each group keeps the unit price of
    its first line. A repeated (code, color, size) replaces the earlier
    quantity instead of adding to it.
    """
    groups: Dict[Tuple[str, str], GroupedLine] = {}

    for line in persisted_lines:
        product_code, color, size = _identity(line)
        key = (product_code, color)

        group = groups.get(key)
        if group is None:
            group = GroupedLine(
                product_code=product_code,
                color=color,
                unit_price=line.unit_price if line.unit_price is not None else Decimal('0'),
            )
            groups[key] = group

        if is_valid_size(size):
            group.sizes[size] = int(line.quantity or 0)

    return list(groups.values())


def encode(grouped_lines: Iterable[GroupedLine], document_id: Optional[int] = None) -> List[PersistedLine]:
    """
    Flatten grouped lines into one line per non-zero size.

    Line numbers run 1..N over the output. Groups with no pairs produce no
    lines at all.
    """
    persisted = []
    line_no = 1

    for group in grouped_lines:
        for size in SIZE_RANGE:
            qty = group.sizes.get(size, 0)
            if qty > 0:
                persisted.append(PersistedLine(
                    description=describe(group.product_code, group.color, size),
                    quantity=qty,
                    unit_price=group.unit_price,
                    line_total=totals.line_total(qty, group.unit_price),
                    line_no=line_no,
                    document_id=document_id,
                    product_code=group.product_code,
                    color=group.color,
                    size=size,
                ))
                line_no += 1

    return persisted


def to_size_columns(grouped: GroupedLine) -> Dict[str, int]:
    """Size quantities keyed by column name (size_39 .. size_45)."""
    return {size_column(size): grouped.sizes.get(size, 0) for size in SIZE_RANGE}


def from_size_columns(row) -> Dict[str, int]:
    """Size quantities from a row (object or mapping) carrying size_NN columns."""
    sizes = {}
    for size, column in zip(SIZE_RANGE, SIZE_COLUMNS):
        if isinstance(row, dict):
            value = row.get(column)
        else:
            value = getattr(row, column, None)
        sizes[size] = int(value or 0)
    return sizes


def grouped_from_row(row) -> GroupedLine:
    """GroupedLine from a size-column line row."""
    return GroupedLine(
        product_code=row.product_code or '',
        color=row.color or '',
        sizes=from_size_columns(row),
        unit_price=row.unit_price if row.unit_price is not None else Decimal('0'),
        tax_rate=getattr(row, 'tax_rate', None) or Decimal('0'),
        description=getattr(row, 'description', None) or '',
    )


def parse_grouped_lines(payload_lines, taxed: bool = True) -> List[GroupedLine]:
    """
    Build grouped lines from a request payload.

    Each entry carries product_code, color, sizes ({"39": 2, ...}),
    unit_price and optionally tax_rate and description; tax_rate is ignored
    when taxed is False. Entries without a product code and without pairs
    are blank editor rows and are skipped.

    Raises:
        ValueError: for unknown sizes, negative or fractional quantities,
            invalid numbers, or two entries sharing a (product_code, color).
    """
    if payload_lines is None:
        return []
    if not isinstance(payload_lines, list):
        raise ValueError('lines must be a list')

    grouped = []
    seen = set()

    for index, entry in enumerate(payload_lines, start=1):
        if not isinstance(entry, dict):
            raise ValueError(f'Line {index} must be an object')

        product_code = str(entry.get('product_code') or '').strip()
        color = str(entry.get('color') or '').strip()

        raw_sizes = entry.get('sizes') or {}
        if not isinstance(raw_sizes, dict):
            raise ValueError(f'Line {index}: sizes must be an object')

        sizes = empty_sizes()
        for size, qty in raw_sizes.items():
            size = str(size)
            if not is_valid_size(size):
                raise ValueError(f'Line {index}: unknown size {size!r}')
            sizes[size] = parse_quantity(qty, f'line {index} size {size}')

        if not product_code and not any(sizes.values()):
            continue

        if not product_code:
            raise ValueError(f'Line {index}: product_code is required')

        key = (product_code, color)
        if key in seen:
            raise ValueError(f'Line {index}: duplicate product {product_code} in color {color or "-"}')
        seen.add(key)

        grouped.append(GroupedLine(
            product_code=product_code,
            color=color,
            sizes=sizes,
            unit_price=parse_decimal(entry.get('unit_price'), f'line {index} unit_price'),
            tax_rate=parse_decimal(entry.get('tax_rate'), f'line {index} tax_rate') if taxed else Decimal('0'),
            description=str(entry.get('description') or '').strip(),
        ))

    return grouped


def grouped_to_dict(grouped: GroupedLine) -> dict:
    """JSON-ready view of a grouped line, derived totals included."""
    return {
        'product_code': grouped.product_code,
        'color': grouped.color,
        'description': grouped.description,
        'sizes': dict(grouped.sizes),
        'total_pairs': grouped.total_pairs,
        'unit_price': str(grouped.unit_price),
        'tax_rate': str(grouped.tax_rate),
        'tax_amount': str(grouped.tax_amount),
        'line_total': str(grouped.line_total),
    }
