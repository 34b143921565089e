"""Journal Line model."""
from sqlalchemy import Column, BigInteger, Integer, String, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from solestock.database import Base, PrimaryKey


class JournalLine(Base):
    """Journal Line: a debit or a credit against one account."""

    __tablename__ = 'journal_line'

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    journal_id = Column(BigInteger, ForeignKey('journal.id'), nullable=False)
    line_no = Column(Integer, nullable=False)
    account_code = Column(String(32), nullable=False)
    description = Column(String(255), nullable=True)
    debit = Column(Numeric(14, 2), nullable=False, default=0)
    credit = Column(Numeric(14, 2), nullable=False, default=0)

    # Relationships
    journal = relationship('Journal', back_populates='lines')

    def __repr__(self):
        return f"<JournalLine(id={self.id}, account='{self.account_code}', debit={self.debit}, credit={self.credit})>"
