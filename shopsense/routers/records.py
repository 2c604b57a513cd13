from fastapi import APIRouter, Depends, HTTPException, status

from shopsense.dependencies import get_services
from shopsense.logging_config import get_logger
from shopsense.schemas.records import (
    AppointmentListResponse,
    AppointmentOut,
    CustomerListResponse,
    CustomerOut,
    QuoteListResponse,
    QuoteOut,
)
from shopsense.schemas.tech_sheet import TechSheetListResponse, TechSheetOut, TechSheetRequest
from shopsense.services.container import ShopServices

logger = get_logger("records")

router = APIRouter(prefix="/api")


@router.get("/customers", response_model=CustomerListResponse)
async def list_customers(services: ShopServices = Depends(get_services)):
    customers = services.customers.list_customers()
    return CustomerListResponse(customers=[CustomerOut.model_validate(c) for c in customers])


@router.get("/quotes", response_model=QuoteListResponse)
async def list_quotes(services: ShopServices = Depends(get_services)):
    quotes = services.quotes.list_quotes()
    return QuoteListResponse(quotes=[QuoteOut.model_validate(q) for q in quotes])


@router.get("/appointments", response_model=AppointmentListResponse)
async def list_appointments(services: ShopServices = Depends(get_services)):
    appointments = services.appointments.list_appointments()
    return AppointmentListResponse(appointments=[AppointmentOut.model_validate(a) for a in appointments])


@router.get("/tech-sheets", response_model=TechSheetListResponse)
async def list_tech_sheets(services: ShopServices = Depends(get_services)):
    sheets = services.tech_sheets.list_tech_sheets()
    return TechSheetListResponse(techSheets=[TechSheetOut.model_validate(s) for s in sheets])


@router.post("/generate-tech-sheet", response_model=TechSheetOut)
async def generate_tech_sheet(payload: TechSheetRequest, services: ShopServices = Depends(get_services)):
    """Generate a tech sheet for a manual job. Falls back to the template if the model is unavailable."""
    job_description = (payload.job_description or "").strip()
    if not job_description:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Job description is required")

    sheet = await services.tech_sheets.generate(job_description, payload.vehicle_info, payload.customer_name)
    logger.info("Manual tech sheet generated", extra={"context": {"tech_sheet_id": sheet.id}})
    return TechSheetOut.model_validate(sheet)
