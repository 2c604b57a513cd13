from sqlalchemy import JSON, Boolean, Column, DateTime, Text

from shopsense.database import Base


class Message(Base):
    __tablename__ = "messages"

    id = Column(Text, primary_key=True)
    contact_id = Column(Text, nullable=False, index=True)
    body = Column(Text, nullable=False)
    direction = Column(Text, nullable=False)  # inbound, outbound
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    processed = Column(Boolean, nullable=False, default=False)
    read = Column(Boolean, nullable=False, default=False)
    derived_intent = Column(Text)
    derived_action = Column(Text)
    ai_reply_text = Column(Text)
    customer_data = Column(JSON)
