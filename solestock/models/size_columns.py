"""Shared columns for lines that keep one quantity column per size."""
from sqlalchemy import Column, Integer, String, Numeric

from solestock.utils.sizes import SIZE_RANGE


class SizeColumnsMixin:
    """
    product_code, color and size_39 .. size_45 for grouped (one row per
    product and color) line tables.
    """

    product_code = Column(String(64), nullable=False)
    color = Column(String(64), nullable=False, default='')
    description = Column(String(255), nullable=True)
    size_39 = Column(Integer, nullable=False, default=0)
    size_40 = Column(Integer, nullable=False, default=0)
    size_41 = Column(Integer, nullable=False, default=0)
    size_42 = Column(Integer, nullable=False, default=0)
    size_43 = Column(Integer, nullable=False, default=0)
    size_44 = Column(Integer, nullable=False, default=0)
    size_45 = Column(Integer, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    unit_price = Column(Numeric(14, 2), nullable=False, default=0)
    line_total = Column(Numeric(14, 2), nullable=False, default=0)

    @property
    def sizes(self):
        return {size: getattr(self, f'size_{size}') or 0 for size in SIZE_RANGE}
