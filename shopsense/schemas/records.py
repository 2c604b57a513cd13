from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class CustomerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    phone_number: str = Field(validation_alias=AliasChoices("contact_id", "phone_number"))
    name: Optional[str] = None
    address: Optional[str] = None
    is_repeat_customer: Optional[bool] = None
    vehicles: list[dict] = []
    service_history: list[dict] = []
    created_at: datetime
    updated_at: datetime


class QuoteOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_phone: str = Field(validation_alias=AliasChoices("contact_id", "customer_phone"))
    customer_name: Optional[str] = None
    vehicle_info: str
    description: str
    labor_hours: float
    labor_rate: float
    labor_cost: float
    parts_cost: float
    total_cost: float
    status: str
    source: str
    created_at: datetime
    expires_at: datetime
    accepted_at: Optional[datetime] = None


class AppointmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    customer_phone: str = Field(validation_alias=AliasChoices("contact_id", "customer_phone"))
    customer_name: Optional[str] = None
    vehicle_info: str
    service_type: str
    date: str
    time: str
    duration_hours: float
    status: str
    quote_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime


class CustomerListResponse(BaseModel):
    customers: list[CustomerOut]


class QuoteListResponse(BaseModel):
    quotes: list[QuoteOut]


class AppointmentListResponse(BaseModel):
    appointments: list[AppointmentOut]
