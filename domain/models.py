"""Domain models using Pydantic v2 for booking payment validation."""

from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StringConstraints,
    computed_field,
    field_serializer,
)

from .enums import Confidence, ConfirmationErrorCode, PaymentMethod, ValidationErrorCode


# "258" followed by the 9-digit national number, nothing else
NormalizedPhone = Annotated[str, StringConstraints(pattern=r"^258\d{9}$")]


class ExtractedCode(BaseModel):
    """Transaction code found in a confirmation message."""

    code: str = Field(..., min_length=1, description="Uppercased transaction identifier")
    method: PaymentMethod
    confidence: Confidence

    model_config = ConfigDict(frozen=True)


class ExtractedPaymentData(BaseModel):
    """Everything extracted from one confirmation message."""

    code: Optional[ExtractedCode] = None
    amount: Optional[Decimal] = Field(None, gt=0, description="Amount in MZN")
    phone: Optional[NormalizedPhone] = Field(None, description="Recipient phone")
    method: PaymentMethod = PaymentMethod.UNKNOWN

    model_config = ConfigDict(frozen=True)

    def with_code(self, code: Optional[ExtractedCode]) -> "ExtractedPaymentData":
        """Return a copy with the transaction code replaced."""
        return self.model_copy(update={"code": code})


class ValidationResult(BaseModel):
    """Verdict on extracted data against what the business expects."""

    has_code: bool
    has_amount: bool
    has_recipient: bool
    amount_matches: bool
    recipient_matches: bool
    error_message: Optional[str] = None
    error_code: Optional[ValidationErrorCode] = None

    model_config = ConfigDict(frozen=True)

    @computed_field
    @property
    def is_ready(self) -> bool:
        """True only when every check passed."""
        return (
            self.has_code
            and self.has_amount
            and self.has_recipient
            and self.amount_matches
            and self.recipient_matches
        )


class ManualCodeValidation(BaseModel):
    """Result of checking a hand-typed transaction code."""

    is_valid: bool
    method: Optional[PaymentMethod] = None

    model_config = ConfigDict(frozen=True)


class ExistingAppointment(BaseModel):
    """An appointment already occupying the professional's agenda."""

    appointment_time: str = Field(..., description="Start time (HH:MM)")
    duration: int = Field(..., ge=0, description="Duration in minutes")

    model_config = ConfigDict(str_strip_whitespace=True, from_attributes=True)


class ConfirmPaymentRequest(BaseModel):
    """Payload of the server-side validate-and-confirm RPC."""

    appointment_id: UUID
    barbershop_id: UUID
    payment_method: PaymentMethod
    phone_expected: NormalizedPhone
    amount_expected: Decimal = Field(..., gt=0)
    confirmation_text: str = Field(..., min_length=1)
    transaction_code: str = Field(..., min_length=1)
    amount_detected: Optional[Decimal] = None
    phone_detected: Optional[NormalizedPhone] = None
    max_hours: int = Field(default=2, ge=1)

    model_config = ConfigDict(frozen=True)

    @field_serializer("amount_expected", "amount_detected", when_used="json")
    def serialize_amount(self, value: Optional[Decimal]) -> Optional[float]:
        """The RPC takes numeric amounts, not strings."""
        return float(value) if value is not None else None

    def to_rpc_params(self) -> dict:
        """Parameters keyed the way the database function names them."""
        return {f"p_{key}": value for key, value in self.model_dump(mode="json").items()}


class ConfirmPaymentResponse(BaseModel):
    """Response of the confirm-payment RPC."""

    success: bool
    error: Optional[str] = None
    code: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def reason(self) -> Optional[ConfirmationErrorCode]:
        """Known rejection reason, or None for unrecognised codes."""
        if not self.code:
            return None
        try:
            return ConfirmationErrorCode(self.code)
        except ValueError:
            return None
