"""Number parsing utilities for request payloads."""
from decimal import Decimal, InvalidOperation


def parse_decimal(value, field: str = 'value', allow_negative: bool = False) -> Decimal:
    """
    Parse a monetary or rate value coming from JSON into a Decimal.

    Accepts ints, floats, Decimals and numeric strings. Floats go through
    str() so 0.1 becomes Decimal('0.1') rather than its binary expansion.
    Empty strings and None parse as zero, matching the editors' blank inputs.

    Raises:
        ValueError: if the value is not a number or is negative when not allowed.
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return Decimal('0')

    if isinstance(value, bool):
        raise ValueError(f'Invalid number for {field}: {value!r}')

    try:
        decimal_value = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValueError(f'Invalid number for {field}: {value!r}')

    if not decimal_value.is_finite():
        raise ValueError(f'Invalid number for {field}: {value!r}')

    if decimal_value < 0 and not allow_negative:
        raise ValueError(f'{field} cannot be negative')

    return decimal_value


def parse_quantity(value, field: str = 'quantity', allow_negative: bool = False) -> int:
    """
    Parse a pair count. Quantities are whole numbers, non-negative unless
    allow_negative is set (stock adjustments).

    Raises:
        ValueError: for fractions, negatives or non-numeric input.
    """
    decimal_value = parse_decimal(value, field, allow_negative=allow_negative)
    if decimal_value != decimal_value.to_integral_value():
        raise ValueError(f'{field} must be a whole number')
    return int(decimal_value)
