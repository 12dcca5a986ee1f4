"""Payment confirmation parsing and validation endpoints."""

from typing import Optional

from fastapi import APIRouter, Query

from apps.api.schemas import (
    ExtractRequest,
    InstructionsResponse,
    ManualCodeRequest,
    ValidateRequest,
    ValidateResponse,
)
from domain.enums import PaymentMethod
from domain.models import ExtractedPaymentData, ManualCodeValidation
from services.manual_code_validator import validate_manual_code
from services.payment_code_extractor import extract_payment_data
from services.payment_instructions import get_payment_instructions
from services.payment_validation import validate_confirmation_text


router = APIRouter(prefix="/payments", tags=["payments"])


@router.post("/extract", response_model=ExtractedPaymentData)
async def extract(body: ExtractRequest):
    """
    Extract transaction code, amount and recipient from confirmation text.

    Fields that cannot be found come back as null; this never fails for
    unparseable text.
    """
    return extract_payment_data(body.message, body.preferred_method)


@router.post("/validate", response_model=ValidateResponse)
async def validate(body: ValidateRequest):
    """
    Extract and validate a confirmation against the expected amount and recipient.

    Args:
        body: Confirmation text, expected amount and recipient, optional manual code

    Returns:
        ValidateResponse with the extracted data and the verdict
    """
    extracted, validation = validate_confirmation_text(
        body.message,
        body.expected_amount,
        body.expected_recipient,
        preferred_method=body.preferred_method,
        manual_code=body.manual_code,
    )
    return ValidateResponse(extracted=extracted, validation=validation)


@router.post("/manual-code", response_model=ManualCodeValidation)
async def manual_code(body: ManualCodeRequest):
    """Check the format of a hand-typed transaction code."""
    return validate_manual_code(body.code)


@router.get("/instructions", response_model=InstructionsResponse)
async def instructions(
    method: PaymentMethod = Query(..., description="Payment method"),
    phone: Optional[str] = Query(None, description="Business number for the method"),
):
    """USSD walk-through for paying the business."""
    return InstructionsResponse(instructions=get_payment_instructions(method, phone))
