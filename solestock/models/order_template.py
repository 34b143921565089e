"""Order Template model."""
from sqlalchemy import Column, BigInteger, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from solestock.database import Base, PrimaryKey


class OrderTemplate(Base):
    """Reusable size matrix that new sales orders can start from."""

    __tablename__ = 'order_template'

    id = Column(PrimaryKey, primary_key=True, autoincrement=True)
    company_id = Column(BigInteger, ForeignKey('company.id'), nullable=False)
    template_name = Column(String(200), nullable=False)
    customer_id = Column(BigInteger, ForeignKey('contact.id'), nullable=True)
    notes = Column(Text, nullable=True)
    terms = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    # Relationships
    company = relationship('Company')
    customer = relationship('Contact')
    lines = relationship(
        'OrderTemplateLine', back_populates='template',
        cascade='all, delete-orphan', order_by='OrderTemplateLine.line_no'
    )

    def __repr__(self):
        return f"<OrderTemplate(id={self.id}, name='{self.template_name}')>"
