from sqlalchemy import JSON, Column, DateTime, Float, Text

from shopsense.database import Base


class TechSheet(Base):
    __tablename__ = "tech_sheets"

    id = Column(Text, primary_key=True)
    contact_id = Column(Text, index=True)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False)
    vehicle_info = Column(Text)
    customer_name = Column(Text)
    estimated_hours = Column(Float, nullable=False)
    difficulty = Column(Text, nullable=False)  # Easy, Medium, Hard
    tools = Column(JSON, nullable=False, default=list)
    parts = Column(JSON, nullable=False, default=list)
    safety_warnings = Column(JSON, nullable=False, default=list)
    steps = Column(JSON, nullable=False, default=list)
    tips = Column(JSON, nullable=False, default=list)
    generated_by = Column(Text, nullable=False)  # ai, template
    source = Column(Text, nullable=False)  # manual, quote
    source_quote_id = Column(Text)
    created_at = Column(DateTime(timezone=True), nullable=False)
