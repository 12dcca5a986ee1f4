"""Domain layer for booking payment validation."""

from .enums import (
    PaymentMethod,
    Confidence,
    ValidationErrorCode,
    ConfirmationErrorCode,
)
from .exceptions import PaymentError, PaymentNotReadyError
from .models import (
    NormalizedPhone,
    ExtractedCode,
    ExtractedPaymentData,
    ValidationResult,
    ManualCodeValidation,
    ExistingAppointment,
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
)

__all__ = [
    # Enums
    "PaymentMethod",
    "Confidence",
    "ValidationErrorCode",
    "ConfirmationErrorCode",
    # Exceptions
    "PaymentError",
    "PaymentNotReadyError",
    # Models
    "NormalizedPhone",
    "ExtractedCode",
    "ExtractedPaymentData",
    "ValidationResult",
    "ManualCodeValidation",
    "ExistingAppointment",
    "ConfirmPaymentRequest",
    "ConfirmPaymentResponse",
]
