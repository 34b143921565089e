"""Supplier Bill model."""
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey
from solestock.models.document_status import DocumentStatus


class Bill(Base):
    """Supplier Bill. bill_no is the supplier's own number."""

    __tablename__ = 'bill'
    __table_args__ = (
        UniqueConstraint('company_id', 'supplier_id', 'bill_no', name='uq_bill_company_supplier_no'),
    )

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    supplier_id = Column(BigInteger, ForeignKey('contact.id'), nullable=False)
    bill_no = Column(String(50), nullable=False)
    bill_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=True)
    supplier_ref = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False, default=DocumentStatus.DRAFT.value)
    notes = Column(Text, nullable=True)
    subtotal = Column(Numeric(14, 2), nullable=False, default=0)
    tax_total = Column(Numeric(14, 2), nullable=False, default=0)
    discount = Column(Numeric(14, 2), nullable=False, default=0)
    grand_total = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    company = relationship('Company')
    supplier = relationship('Contact')
    lines = relationship(
        'BillLine', back_populates='bill',
        cascade='all, delete-orphan', order_by='BillLine.line_no'
    )

    def __repr__(self):
        return f"<Bill(id={self.id}, bill_no='{self.bill_no}', total={self.grand_total})>"
