from sqlalchemy import Column, DateTime, Float, Text

from shopsense.database import Base


class Quote(Base):
    __tablename__ = "quotes"

    id = Column(Text, primary_key=True)
    contact_id = Column(Text, nullable=False, index=True)
    customer_name = Column(Text)
    vehicle_info = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    labor_hours = Column(Float, nullable=False)
    labor_rate = Column(Float, nullable=False)
    parts_cost = Column(Float, nullable=False, default=0.0)
    total_cost = Column(Float, nullable=False)
    status = Column(Text, nullable=False)  # draft, sent, accepted, declined
    source = Column(Text, nullable=False, default="sms_conversation")
    created_at = Column(DateTime(timezone=True), nullable=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    accepted_at = Column(DateTime(timezone=True))

    @property
    def labor_cost(self) -> float:
        return (self.labor_hours or 0) * (self.labor_rate or 0)
