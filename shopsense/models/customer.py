from sqlalchemy import JSON, Boolean, Column, DateTime, Text

from shopsense.database import Base


class Customer(Base):
    __tablename__ = "customers"

    id = Column(Text, primary_key=True)
    contact_id = Column(Text, nullable=False, unique=True)
    name = Column(Text)
    address = Column(Text)
    is_repeat_customer = Column(Boolean)
    # JSON lists are always reassigned, never mutated in place, so the ORM sees the change.
    vehicles = Column(JSON, nullable=False, default=list)
    service_history = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)
