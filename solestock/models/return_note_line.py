"""Return Note Line model."""
from sqlalchemy import Column, BigInteger, Integer, ForeignKey
from sqlalchemy.orm import relationship
from solestock.database import Base, PrimaryKey
from solestock.models.size_columns import SizeColumnsMixin


class ReturnNoteLine(SizeColumnsMixin, Base):
    """Return Note Line (one product and color)."""

    __tablename__ = 'return_note_line'

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    return_note_id = Column(BigInteger, ForeignKey('return_note.id'), nullable=False)
    line_no = Column(Integer, nullable=False)

    # Relationships
    return_note = relationship('ReturnNote', back_populates='lines')

    def __repr__(self):
        return f"<ReturnNoteLine(id={self.id}, product='{self.product_code}', color='{self.color}', qty={self.quantity})>"
