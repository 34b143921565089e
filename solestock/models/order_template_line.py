"""Order Template Line model."""
from sqlalchemy import Column, BigInteger, Integer, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from solestock.database import Base, PrimaryKey
from solestock.models.size_columns import SizeColumnsMixin


class OrderTemplateLine(SizeColumnsMixin, Base):
    """Order Template Line (one product and color)."""

    __tablename__ = 'order_template_line'

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    template_id = Column(BigInteger, ForeignKey('order_template.id'), nullable=False)
    line_no = Column(Integer, nullable=False)
    tax_rate = Column(Numeric(6, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(14, 2), nullable=False, default=0)

    # Relationships
    template = relationship('OrderTemplate', back_populates='lines')

    def __repr__(self):
        return f"<OrderTemplateLine(id={self.id}, product='{self.product_code}', color='{self.color}')>"
