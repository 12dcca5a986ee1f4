"""Request and response bodies of the HTTP API."""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.enums import PaymentMethod
from domain.models import ExistingAppointment, ExtractedPaymentData, ValidationResult


class ExtractRequest(BaseModel):
    """Confirmation text to extract from."""

    message: str = Field(..., max_length=5000, description="Pasted confirmation text")
    preferred_method: Optional[PaymentMethod] = None


class ValidateRequest(ExtractRequest):
    """Confirmation text plus what the business expects."""

    expected_amount: Decimal = Field(..., gt=0, description="Service price (MZN)")
    expected_recipient: str = Field(..., min_length=1, description="Business mobile-money number")
    manual_code: Optional[str] = Field(None, max_length=64, description="Hand-corrected transaction code")


class ValidateResponse(BaseModel):
    """Extracted data and the verdict."""

    extracted: ExtractedPaymentData
    validation: ValidationResult


class ManualCodeRequest(BaseModel):
    """Hand-typed transaction code."""

    code: str = Field(..., max_length=64)


class InstructionsResponse(BaseModel):
    """Payment walk-through text."""

    instructions: str


class SlotsRequest(BaseModel):
    """Business hours, buffers and the day's agenda."""

    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    slot_interval_minutes: int = Field(default=30, gt=0, le=240)
    prep_buffer_minutes: int = Field(default=0, ge=0)
    cleanup_buffer_minutes: int = Field(default=0, ge=0)
    service_duration: int = Field(..., gt=0, le=24 * 60)
    existing_appointments: List[ExistingAppointment] = Field(default_factory=list)

    model_config = ConfigDict(str_strip_whitespace=True)


class SlotsResponse(BaseModel):
    """Available slot start times."""

    slots: List[str]


class WhatsAppLinkResponse(BaseModel):
    """wa.me deep link."""

    url: str
