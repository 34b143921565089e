"""Contact model - customers and suppliers."""
import enum
from sqlalchemy import Column, BigInteger, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey


class ContactType(enum.Enum):
    """Contact type enum."""
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class Contact(Base):
    """Customer or supplier referenced by documents."""

    __tablename__ = 'contact'

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    contact_type = Column(String(20), nullable=False, default=ContactType.CUSTOMER.value)
    code = Column(String(32), nullable=True)
    name = Column(String(200), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    company = relationship('Company')

    def __repr__(self):
        return f"<Contact(id={self.id}, type='{self.contact_type}', name='{self.name}')>"
