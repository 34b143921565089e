"""Stock By Size model."""
from sqlalchemy import Column, BigInteger, Integer, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey


class StockBySize(Base):
    """
    Pairs on hand of one item (code + color) in one size.

    Quantity may go below zero when more is invoiced than was received.
    """

    __tablename__ = 'stock_by_size'
    __table_args__ = (
        UniqueConstraint('company_id', 'item_id', 'size', name='uq_stock_company_item_size'),
    )

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    item_id = Column(BigInteger, ForeignKey('item.id'), nullable=False)
    size = Column(String(8), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    item = relationship('Item')

    def __repr__(self):
        return f"<StockBySize(item_id={self.item_id}, size='{self.size}', quantity={self.quantity})>"
