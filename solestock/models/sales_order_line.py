"""Sales Order Line model."""
from sqlalchemy import Column, BigInteger, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from solestock.database import Base, PrimaryKey


class SalesOrderLine(Base):
    """
    Sales Order Line: one product, color and size.

    description holds "{code} - {color} - Size {size}". product_code, color
    and size are filled for lines written by the codec; older rows may only
    carry the description.
    """

    __tablename__ = 'sales_order_line'

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    order_id = Column(BigInteger, ForeignKey('sales_order.id'), nullable=False)
    line_no = Column(Integer, nullable=False)
    description = Column(String(255), nullable=False)
    product_code = Column(String(64), nullable=True)
    color = Column(String(64), nullable=True)
    size = Column(String(8), nullable=True)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(14, 2), nullable=False)
    line_total = Column(Numeric(14, 2), nullable=False)

    # Relationships
    order = relationship('SalesOrder', back_populates='lines')

    def __repr__(self):
        return f"<SalesOrderLine(id={self.id}, line_no={self.line_no}, description='{self.description}', qty={self.quantity})>"
