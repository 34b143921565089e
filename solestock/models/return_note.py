"""Return Note model."""
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey
from solestock.models.document_status import DocumentStatus


class ReturnNote(Base):
    """Customer Return Note (goods sent back, untaxed)."""

    __tablename__ = 'return_note'
    __table_args__ = (
        UniqueConstraint('company_id', 'return_note_no', name='uq_return_note_company_no'),
    )

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    customer_id = Column(BigInteger, ForeignKey('contact.id'), nullable=False)
    return_note_no = Column(String(64), nullable=False)
    return_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=DocumentStatus.DRAFT.value)
    subtotal = Column(Numeric(14, 2), nullable=False, default=0)
    grand_total = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    company = relationship('Company')
    customer = relationship('Contact')
    lines = relationship(
        'ReturnNoteLine', back_populates='return_note',
        cascade='all, delete-orphan', order_by='ReturnNoteLine.line_no'
    )

    def __repr__(self):
        return f"<ReturnNote(id={self.id}, return_note_no='{self.return_note_no}', total={self.grand_total})>"
