"""
Unit tests for derived totals, number parsing, formatting and document numbering.
"""

import pytest
from decimal import Decimal

from solestock.services.numbering import next_document_number
from solestock.services.size_matrix import GroupedLine
from solestock.services.totals import (
    document_totals, percentage_discount, is_balanced, line_total, total_pairs
)
from solestock.utils.formatters import money
from solestock.utils.number_format import parse_decimal, parse_quantity


class TestDocumentTotals:
    """grand_total = subtotal + tax_total - discount."""

    def test_untaxed_lines(self):
        lines = [
            GroupedLine(product_code='A1', sizes={'40': 2, '42': 1}, unit_price=10),
            GroupedLine(product_code='B2', sizes={'39': 3}, unit_price=15),
        ]

        totals = document_totals(lines)

        assert totals.subtotal == Decimal('75')
        assert totals.tax_total == Decimal('0')
        assert totals.grand_total == Decimal('75')

    def test_tax_is_counted_once(self):
        lines = [GroupedLine(product_code='A1', sizes={'40': 10}, unit_price=100, tax_rate=21)]

        totals = document_totals(lines, discount=Decimal('50'))

        assert totals.subtotal == Decimal('1000')
        assert totals.tax_total == Decimal('210')
        assert totals.grand_total == Decimal('1160')

    def test_percentage_discount_over_selected_lines(self):
        selected = [GroupedLine(product_code='A1', sizes={'40': 4}, unit_price=25)]

        assert percentage_discount(selected, Decimal('10')) == Decimal('10')
        assert percentage_discount([], Decimal('10')) == Decimal('0')

    def test_line_total_and_pairs(self):
        assert total_pairs({'39': 2, '40': None, '41': 3}) == 5
        assert line_total(3, Decimal('10'), Decimal('21')) == Decimal('36.3')
        assert line_total(3, Decimal('10')) == Decimal('30')

    def test_as_dict_is_json_ready(self):
        totals = document_totals([GroupedLine(product_code='A1', sizes={'40': 1}, unit_price='9.99')])

        assert totals.as_dict()['grand_total'] == '9.99'


class TestBalance:
    """Journal balance within one cent."""

    def test_balanced_within_tolerance(self):
        assert is_balanced([Decimal('100.00')], [Decimal('99.99')])
        assert is_balanced([Decimal('50'), Decimal('50')], [Decimal('100')])

    def test_unbalanced_beyond_tolerance(self):
        assert not is_balanced([Decimal('100.00')], [Decimal('99.98')])


class TestNumbering:
    """Next document number from the last one issued."""

    @pytest.mark.parametrize('last, prefix, width, expected', [
        (None, 'SO', 5, 'SO-00001'),
        ('SO-00041', 'SO', 5, 'SO-00042'),
        ('RN-0009', 'RN', 4, 'RN-0010'),
        ('JE-999', 'JE', 3, 'JE-1000'),
        ('MANUAL', 'INV', 5, 'INV-00001'),
        ('2024/17', 'INV', 5, 'INV-00018'),
    ])
    def test_next_document_number(self, last, prefix, width, expected):
        assert next_document_number(last, prefix, width) == expected


class TestNumberParsing:
    """Payload number parsing."""

    def test_blank_is_zero(self):
        assert parse_decimal(None) == Decimal('0')
        assert parse_decimal('  ') == Decimal('0')

    def test_float_goes_through_str(self):
        assert parse_decimal(0.1) == Decimal('0.1')

    @pytest.mark.parametrize('value', ['abc', 'NaN', 'Infinity', True, '-1'])
    def test_invalid_values(self, value):
        with pytest.raises(ValueError):
            parse_decimal(value, 'price')

    def test_negative_allowed_when_asked(self):
        assert parse_decimal('-5', allow_negative=True) == Decimal('-5')

    def test_quantity_must_be_whole(self):
        assert parse_quantity('3') == 3
        assert parse_quantity('3.0') == 3
        with pytest.raises(ValueError):
            parse_quantity('2.5')

    def test_negative_quantity_only_when_asked(self):
        with pytest.raises(ValueError):
            parse_quantity('-2')
        assert parse_quantity('-2', allow_negative=True) == -2


class TestFormatters:
    """Display formatting rounds at the edge only."""

    def test_money(self):
        assert money(1500) == '1,500.00'
        assert money(Decimal('1234.565')) == '1,234.57'
        assert money(None) == '-'
