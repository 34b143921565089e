"""Sales Invoice model."""
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey
from solestock.models.document_status import DocumentStatus


class Invoice(Base):
    """
    Sales Invoice.

    discount is a flat amount derived from discount_percent applied to the
    lines flagged discount_selected.
    """

    __tablename__ = 'invoice'
    __table_args__ = (
        UniqueConstraint('company_id', 'invoice_no', name='uq_invoice_company_no'),
    )

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    customer_id = Column(BigInteger, ForeignKey('contact.id'), nullable=False)
    order_id = Column(BigInteger, ForeignKey('sales_order.id'), nullable=True)
    invoice_no = Column(String(64), nullable=False)
    invoice_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    status = Column(String(20), nullable=False, default=DocumentStatus.DRAFT.value)
    notes = Column(Text, nullable=True)
    discount_percent = Column(Numeric(6, 2), nullable=False, default=0)
    subtotal = Column(Numeric(14, 2), nullable=False, default=0)
    tax_total = Column(Numeric(14, 2), nullable=False, default=0)
    discount = Column(Numeric(14, 2), nullable=False, default=0)
    grand_total = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    company = relationship('Company')
    customer = relationship('Contact')
    order = relationship('SalesOrder')
    lines = relationship(
        'InvoiceLine', back_populates='invoice',
        cascade='all, delete-orphan', order_by='InvoiceLine.line_no'
    )

    def __repr__(self):
        return f"<Invoice(id={self.id}, invoice_no='{self.invoice_no}', total={self.grand_total})>"
