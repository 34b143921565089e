"""Derived totals for size-matrix documents and journal balance checks."""
from decimal import Decimal
from typing import Iterable, Mapping, NamedTuple

BALANCE_TOLERANCE = Decimal('0.01')

ZERO = Decimal('0')


class DocumentTotals(NamedTuple):
    subtotal: Decimal
    tax_total: Decimal
    discount: Decimal
    grand_total: Decimal

    def as_dict(self):
        return {
            'subtotal': str(self.subtotal),
            'tax_total': str(self.tax_total),
            'discount': str(self.discount),
            'grand_total': str(self.grand_total),
        }


def total_pairs(sizes: Mapping[str, int]) -> int:
    return sum(int(qty or 0) for qty in sizes.values())


def line_total(pairs: int, unit_price: Decimal, tax_rate: Decimal = ZERO) -> Decimal:
    """pairs * unit_price, plus tax_rate percent of that when the line is taxed."""
    subtotal = pairs * Decimal(str(unit_price))
    return subtotal + subtotal * Decimal(str(tax_rate)) / 100


def document_totals(lines: Iterable, discount: Decimal = ZERO) -> DocumentTotals:
    """
    Totals for a document made of grouped lines.

    subtotal is the pre-tax sum, so grand_total = subtotal + tax_total - discount
    counts each line's tax once. discount is a flat document-level amount.
    """
    subtotal = ZERO
    tax_total = ZERO
    for line in lines:
        subtotal += line.subtotal
        tax_total += line.tax_amount

    discount = Decimal(str(discount or 0))
    return DocumentTotals(
        subtotal=subtotal,
        tax_total=tax_total,
        discount=discount,
        grand_total=subtotal + tax_total - discount,
    )


def percentage_discount(lines: Iterable, percent: Decimal) -> Decimal:
    """Flat discount amount for a percentage applied to the given (selected) lines."""
    discountable = sum((line.subtotal for line in lines), ZERO)
    return discountable * Decimal(str(percent or 0)) / 100


def is_balanced(debits: Iterable[Decimal], credits: Iterable[Decimal]) -> bool:
    """True when total debits and credits agree within one cent."""
    total_debit = sum((Decimal(str(d or 0)) for d in debits), ZERO)
    total_credit = sum((Decimal(str(c or 0)) for c in credits), ZERO)
    return abs(total_debit - total_credit) <= BALANCE_TOLERANCE
