"""Item model - catalog reference data for the size-matrix editors."""
from sqlalchemy import Column, BigInteger, String, Boolean, Numeric, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey


class Item(Base):
    """
    Item (article number in one color).

    The same code can exist in several colors; (company, code, color) is unique.
    """

    __tablename__ = 'item'
    __table_args__ = (
        UniqueConstraint('company_id', 'code', 'color', name='uq_item_company_code_color'),
    )

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    code = Column(String(64), nullable=False)
    name = Column(String(200), nullable=False)
    color = Column(String(64), nullable=False, default='')
    sale_price = Column(Numeric(14, 2), nullable=False, default=0)
    purchase_price = Column(Numeric(14, 2), nullable=False, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    company = relationship('Company')

    def __repr__(self):
        return f"<Item(id={self.id}, code='{self.code}', color='{self.color}')>"
