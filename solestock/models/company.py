"""Company model - the scoping unit every document belongs to."""
from sqlalchemy import Column, String, Boolean, DateTime
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey


class Company(Base):
    """Company (business using the ERP)."""

    __tablename__ = 'company'

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    def __repr__(self):
        return f"<Company(id={self.id}, name='{self.name}')>"
