"""Sales Order model."""
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey
from solestock.models.document_status import DocumentStatus


class SalesOrder(Base):
    """
    Sales Order.

    Lines are stored flat, one row per product, color and size; editors
    regroup them into a size matrix.
    """

    __tablename__ = 'sales_order'
    __table_args__ = (
        UniqueConstraint('company_id', 'order_no', name='uq_sales_order_company_no'),
    )

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    customer_id = Column(BigInteger, ForeignKey('contact.id'), nullable=False)
    order_no = Column(String(64), nullable=False)
    order_date = Column(Date, nullable=False)
    delivery_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=DocumentStatus.DRAFT.value)
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    subtotal = Column(Numeric(14, 2), nullable=False, default=0)
    tax_total = Column(Numeric(14, 2), nullable=False, default=0)
    discount = Column(Numeric(14, 2), nullable=False, default=0)
    grand_total = Column(Numeric(14, 2), nullable=False, default=0)
    template_id = Column(BigInteger, ForeignKey('order_template.id'), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    company = relationship('Company')
    customer = relationship('Contact')
    lines = relationship(
        'SalesOrderLine', back_populates='order',
        cascade='all, delete-orphan', order_by='SalesOrderLine.line_no'
    )

    def __repr__(self):
        return f"<SalesOrder(id={self.id}, order_no='{self.order_no}', total={self.grand_total})>"
