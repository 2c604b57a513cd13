from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class TechSheetRequest(BaseModel):
    job_description: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("jobDescription", "job_description"),
    )
    vehicle_info: Optional[str] = Field(default=None, validation_alias=AliasChoices("vehicleInfo", "vehicle_info"))
    customer_name: Optional[str] = Field(default=None, validation_alias=AliasChoices("customerName", "customer_name"))


class TechSheetOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str
    vehicle_info: Optional[str] = None
    customer_name: Optional[str] = None
    estimated_time: float = Field(validation_alias=AliasChoices("estimated_hours", "estimated_time"))
    difficulty: str
    tools_required: list[str] = Field(validation_alias=AliasChoices("tools", "tools_required"))
    parts_needed: list[str] = Field(validation_alias=AliasChoices("parts", "parts_needed"))
    safety_warnings: list[str]
    step_by_step: list[str] = Field(validation_alias=AliasChoices("steps", "step_by_step"))
    tips: list[str]
    generated_by: str
    source: str
    quote_id: Optional[str] = Field(default=None, validation_alias=AliasChoices("source_quote_id", "quote_id"))
    created_at: datetime


class TechSheetListResponse(BaseModel):
    techSheets: list[TechSheetOut]
