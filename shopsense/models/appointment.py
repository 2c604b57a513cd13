from sqlalchemy import Column, DateTime, Float, Text

from shopsense.database import Base


class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Text, primary_key=True)
    contact_id = Column(Text, nullable=False, index=True)
    customer_name = Column(Text)
    vehicle_info = Column(Text, nullable=False, default="")
    service_type = Column(Text, nullable=False, default="")
    date = Column(Text, nullable=False)  # YYYY-MM-DD
    time = Column(Text, nullable=False)  # HH:MM, 24h
    duration_hours = Column(Float, nullable=False, default=1.0)
    status = Column(Text, nullable=False)  # scheduled, confirmed, completed, cancelled
    quote_id = Column(Text)
    notes = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False)
