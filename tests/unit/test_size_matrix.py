"""
Unit tests for the size-matrix line codec.
"""

import random

import pytest
from decimal import Decimal

from solestock.services.size_matrix import (
    GroupedLine, PersistedLine, decode, encode, describe, parse_description,
    parse_grouped_lines, to_size_columns, from_size_columns, grouped_from_row
)
from solestock.utils.sizes import SIZE_RANGE


def _persisted(description, quantity, unit_price='100', line_no=1):
    unit_price = Decimal(unit_price)
    return PersistedLine(
        description=description,
        quantity=quantity,
        unit_price=unit_price,
        line_total=quantity * unit_price,
        line_no=line_no,
    )


class TestEncode:
    """Grouped lines flattened into one line per size."""

    def test_encode_skips_zero_sizes(self):
        grouped = GroupedLine(product_code='A1', color='Red', sizes={'39': 2, '40': 0, '41': 3}, unit_price=100)

        lines = encode([grouped])

        assert len(lines) == 2
        assert lines[0].description == 'A1 - Red - Size 39'
        assert lines[0].quantity == 2
        assert lines[0].line_total == Decimal('200')
        assert lines[0].line_no == 1
        assert lines[1].description == 'A1 - Red - Size 41'
        assert lines[1].quantity == 3
        assert lines[1].line_total == Decimal('300')
        assert lines[1].line_no == 2

    def test_encode_drops_group_without_pairs(self):
        empty = GroupedLine(product_code='Z9', color='Blue', unit_price=50)
        full = GroupedLine(product_code='A1', color='Red', sizes={'42': 1}, unit_price=100)

        lines = encode([empty, full])

        assert [line.description for line in lines] == ['A1 - Red - Size 42']

    def test_line_numbers_run_across_groups(self):
        groups = [
            GroupedLine(product_code='A1', color='Red', sizes={'39': 1, '45': 1}, unit_price=10),
            GroupedLine(product_code='B2', color='Tan', sizes={'40': 4}, unit_price=20),
        ]

        lines = encode(groups, document_id=7)

        assert [line.line_no for line in lines] == [1, 2, 3]
        assert all(line.document_id == 7 for line in lines)
        assert [line.size for line in lines] == ['39', '45', '40']

    def test_structured_identity_is_written(self):
        lines = encode([GroupedLine(product_code='A1', color='Red', sizes={'43': 1}, unit_price=10)])

        assert (lines[0].product_code, lines[0].color, lines[0].size) == ('A1', 'Red', '43')


class TestDecode:
    """Flat lines regrouped into a size matrix."""

    def test_decode_single_line(self):
        grouped = decode([_persisted('A1 - Red - Size 39', 2)])

        assert len(grouped) == 1
        line = grouped[0]
        assert line.product_code == 'A1'
        assert line.color == 'Red'
        assert line.sizes['39'] == 2
        assert all(line.sizes[size] == 0 for size in SIZE_RANGE if size != '39')
        assert line.unit_price == Decimal('100')
        assert line.total_pairs == 2

    def test_duplicate_size_last_one_wins(self):
        grouped = decode([
            _persisted('A1 - Red - Size 39', 2, line_no=1),
            _persisted('A1 - Red - Size 39', 5, line_no=2),
        ])

        assert len(grouped) == 1
        assert grouped[0].sizes['39'] == 5

    def test_groups_keep_first_seen_order_and_first_price(self):
        grouped = decode([
            _persisted('B2 - Tan - Size 40', 1, unit_price='20', line_no=1),
            _persisted('A1 - Red - Size 41', 1, unit_price='10', line_no=2),
            _persisted('B2 - Tan - Size 42', 1, unit_price='99', line_no=3),
        ])

        assert [g.key for g in grouped] == [('B2', 'Tan'), ('A1', 'Red')]
        assert grouped[0].unit_price == Decimal('20')
        assert grouped[0].sizes['40'] == 1
        assert grouped[0].sizes['42'] == 1

    def test_round_trip_preserves_nonzero_sizes(self):
        original = [
            GroupedLine(product_code='A1', color='Red', sizes={'39': 2, '41': 3}, unit_price=100),
            GroupedLine(product_code='C3', color='White', sizes={'44': 6}, unit_price=55),
        ]

        rebuilt = decode(encode(original))

        assert [(g.key, g.sizes, g.unit_price) for g in rebuilt] == \
            [(g.key, g.sizes, g.unit_price) for g in original]

    def test_malformed_description_does_not_raise(self):
        grouped = decode([_persisted('free text line', 1)])

        assert grouped[0].product_code == 'free text line'
        assert grouped[0].color == ''
        assert grouped[0].total_pairs == 0

    def test_description_parts_after_the_third_are_ignored(self):
        assert parse_description('A1 - Red - Size 39 - x') == ('A1', 'Red', '39')
        assert parse_description('A1 - Navy - Blue - Size 40') == ('A1', 'Navy', 'Blue')
        assert parse_description(describe('A1', 'Red', '40')) == ('A1', 'Red', '40')

    def test_extra_description_parts_still_decode_the_size(self):
        grouped = decode([_persisted('A1 - Red - Size 39 - x', 2)])

        assert grouped[0].key == ('A1', 'Red')
        assert grouped[0].sizes['39'] == 2

    def test_structured_identity_survives_delimiter_in_code_and_color(self):
        original = [GroupedLine(product_code='A - 1', color='Navy - Blue', sizes={'40': 2}, unit_price=10)]

        rebuilt = decode(encode(original))

        assert [(g.key, g.sizes) for g in rebuilt] == [(('A - 1', 'Navy - Blue'), original[0].sizes)]


CODES = ('A1', 'B2', 'C - 3', 'Z9')
COLORS = ('', 'Red', 'Navy - Blue', 'Black')


def _random_lines(rng):
    keys = rng.sample([(code, color) for code in CODES for color in COLORS], rng.randint(1, 6))
    lines = []
    for code, color in keys:
        if rng.random() < 0.25:
            sizes = {}
        else:
            sizes = {size: rng.choice((0, 0, 1, 2, 5)) for size in SIZE_RANGE}
        unit_price = Decimal(rng.randint(0, 20000)) / 100
        lines.append(GroupedLine(product_code=code, color=color, sizes=sizes, unit_price=unit_price))
    return lines


@pytest.mark.parametrize('seed', range(25))
class TestCodecProperties:
    """Codec invariants over seeded random size matrices."""

    def test_pairs_are_conserved(self, seed):
        lines = _random_lines(random.Random(seed))

        encoded = encode(lines)

        assert sum(line.quantity for line in encoded) == sum(line.total_pairs for line in lines)

    def test_no_zero_quantity_lines(self, seed):
        encoded = encode(_random_lines(random.Random(seed)))

        assert all(line.quantity > 0 for line in encoded)

    def test_line_numbers_are_dense(self, seed):
        encoded = encode(_random_lines(random.Random(seed)))

        assert [line.line_no for line in encoded] == list(range(1, len(encoded) + 1))

    def test_sizes_ascend_within_a_group(self, seed):
        encoded = encode(_random_lines(random.Random(seed)))

        for key in {(line.product_code, line.color) for line in encoded}:
            sizes = [line.size for line in encoded if (line.product_code, line.color) == key]
            assert sizes == sorted(sizes, key=SIZE_RANGE.index)

    def test_round_trip_keeps_groups_with_pairs(self, seed):
        lines = _random_lines(random.Random(seed))

        rebuilt = decode(encode(lines))

        assert [(g.key, g.sizes, g.unit_price) for g in rebuilt] == \
            [(g.key, g.sizes, g.unit_price) for g in lines if g.total_pairs > 0]


class TestGroupedLine:
    """Derived values and size edits."""

    def test_set_size_recomputes_totals(self):
        line = GroupedLine(product_code='A1', color='Red', unit_price=Decimal('12.50'), tax_rate=Decimal('10'))

        line.set_size('40', 4)

        assert line.total_pairs == 4
        assert line.subtotal == Decimal('50.00')
        assert line.tax_amount == Decimal('5.000')
        assert line.line_total == Decimal('55.000')

    def test_set_size_rejects_unknown_size(self):
        line = GroupedLine(product_code='A1')

        with pytest.raises(ValueError):
            line.set_size('46', 1)

    def test_set_size_rejects_negative(self):
        line = GroupedLine(product_code='A1')

        with pytest.raises(ValueError):
            line.set_size('40', -1)

    def test_constructor_rejects_negative(self):
        with pytest.raises(ValueError):
            GroupedLine(product_code='A1', sizes={'40': -1})


class TestSizeColumns:
    """size_39 .. size_45 column layout."""

    def test_to_and_from_columns(self):
        line = GroupedLine(product_code='A1', color='Red', sizes={'39': 1, '45': 2})

        columns = to_size_columns(line)

        assert columns['size_39'] == 1
        assert columns['size_45'] == 2
        assert columns['size_42'] == 0
        assert from_size_columns(columns) == line.sizes

    def test_grouped_from_row_object(self):
        class Row:
            product_code = 'A1'
            color = None
            description = None
            size_39 = 3
            size_40 = None
            size_41 = 0
            size_42 = 0
            size_43 = 0
            size_44 = 0
            size_45 = 1
            unit_price = Decimal('8')
            tax_rate = None

        grouped = grouped_from_row(Row())

        assert grouped.color == ''
        assert grouped.total_pairs == 4
        assert grouped.tax_rate == Decimal('0')


class TestParseGroupedLines:
    """Payload validation for editor lines."""

    def test_blank_rows_are_skipped(self):
        lines = parse_grouped_lines([
            {'product_code': '', 'sizes': {}},
            {'product_code': 'A1', 'color': 'Red', 'sizes': {'40': '2'}, 'unit_price': '9.90', 'tax_rate': 21},
        ])

        assert len(lines) == 1
        assert lines[0].sizes['40'] == 2
        assert lines[0].unit_price == Decimal('9.90')
        assert lines[0].tax_rate == Decimal('21')

    def test_untaxed_ignores_tax_rate(self):
        lines = parse_grouped_lines(
            [{'product_code': 'A1', 'sizes': {'40': 1}, 'unit_price': 10, 'tax_rate': 21}], taxed=False
        )

        assert lines[0].tax_rate == Decimal('0')

    @pytest.mark.parametrize('entry', [
        {'product_code': 'A1', 'sizes': {'38': 1}},
        {'product_code': 'A1', 'sizes': {'40': -1}},
        {'product_code': 'A1', 'sizes': {'40': 1.5}},
        {'product_code': 'A1', 'sizes': {'40': 1}, 'unit_price': 'abc'},
        {'product_code': '', 'sizes': {'40': 1}},
    ])
    def test_invalid_entries_raise(self, entry):
        with pytest.raises(ValueError):
            parse_grouped_lines([entry])

    def test_duplicate_product_and_color_rejected(self):
        with pytest.raises(ValueError, match='duplicate'):
            parse_grouped_lines([
                {'product_code': 'A1', 'color': 'Red', 'sizes': {'40': 1}},
                {'product_code': 'A1', 'color': 'Red', 'sizes': {'41': 1}},
            ])
