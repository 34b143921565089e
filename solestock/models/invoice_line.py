"""Sales Invoice Line model."""
from sqlalchemy import Column, BigInteger, Integer, Boolean, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from solestock.database import Base, PrimaryKey
from solestock.models.size_columns import SizeColumnsMixin


class InvoiceLine(SizeColumnsMixin, Base):
    """Sales Invoice Line (one product and color, taxed per line)."""

    __tablename__ = 'invoice_line'

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    invoice_id = Column(BigInteger, ForeignKey('invoice.id'), nullable=False)
    line_no = Column(Integer, nullable=False)
    tax_rate = Column(Numeric(6, 2), nullable=False, default=0)
    tax_amount = Column(Numeric(14, 2), nullable=False, default=0)
    discount_selected = Column(Boolean, nullable=False, default=False)

    # Relationships
    invoice = relationship('Invoice', back_populates='lines')

    def __repr__(self):
        return f"<InvoiceLine(id={self.id}, product='{self.product_code}', color='{self.color}', qty={self.quantity})>"
