"""Time slot endpoints."""

from fastapi import APIRouter, HTTPException

from apps.api.schemas import SlotsRequest, SlotsResponse
from core.business_config import BusinessHours
from services.time_slots import is_business_hours_configured, slots_for_business


router = APIRouter(prefix="/schedule", tags=["schedule"])


@router.post("/slots", response_model=SlotsResponse)
async def available_slots(body: SlotsRequest):
    """
    Compute bookable slots for a service.

    Raises:
        HTTPException: 422 if opening/closing hours are not configured
    """
    if not is_business_hours_configured(body.opening_time, body.closing_time):
        raise HTTPException(status_code=422, detail="Business hours are not configured")

    hours = BusinessHours(
        opening_time=body.opening_time,
        closing_time=body.closing_time,
        slot_interval_minutes=body.slot_interval_minutes,
        prep_buffer_minutes=body.prep_buffer_minutes,
        cleanup_buffer_minutes=body.cleanup_buffer_minutes,
    )
    slots = slots_for_business(hours, body.existing_appointments, body.service_duration)
    return SlotsResponse(slots=slots)
