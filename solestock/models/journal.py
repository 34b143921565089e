"""Journal Entry model."""
from sqlalchemy import Column, BigInteger, String, Numeric, DateTime, Date, Text, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey


class Journal(Base):
    """Manual journal entry; debits and credits must balance."""

    __tablename__ = 'journal'
    __table_args__ = (
        UniqueConstraint('company_id', 'journal_no', name='uq_journal_company_no'),
    )

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    journal_no = Column(String(64), nullable=False)
    journal_date = Column(Date, nullable=False)
    description = Column(Text, nullable=True)
    total_debit = Column(Numeric(14, 2), nullable=False, default=0)
    total_credit = Column(Numeric(14, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    company = relationship('Company')
    lines = relationship(
        'JournalLine', back_populates='journal',
        cascade='all, delete-orphan', order_by='JournalLine.line_no'
    )

    def __repr__(self):
        return f"<Journal(id={self.id}, journal_no='{self.journal_no}')>"
