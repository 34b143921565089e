"""Footwear size range shared by every size-matrix document."""
from typing import Dict

SIZE_RANGE = ('39', '40', '41', '42', '43', '44', '45')

SIZE_COLUMNS = tuple(f'size_{size}' for size in SIZE_RANGE)


def size_column(size: str) -> str:
    """Column name holding the quantity of a size (e.g. '39' -> 'size_39')."""
    if size not in SIZE_RANGE:
        raise ValueError(f'Unknown size: {size!r}')
    return f'size_{size}'


def is_valid_size(label) -> bool:
    return str(label) in SIZE_RANGE


def empty_sizes() -> Dict[str, int]:
    """A size mapping with every size of the range at zero."""
    return {size: 0 for size in SIZE_RANGE}
