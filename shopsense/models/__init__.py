from shopsense.models.appointment import Appointment
from shopsense.models.customer import Customer
from shopsense.models.message import Message
from shopsense.models.quote import Quote
from shopsense.models.tech_sheet import TechSheet

__all__ = [
    "Message",
    "Customer",
    "Quote",
    "Appointment",
    "TechSheet",
]
