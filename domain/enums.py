"""Domain enums for booking payment validation."""

from enum import Enum


class PaymentMethod(str, Enum):
    """Mobile-money provider."""

    MPESA = "mpesa"
    EMOLA = "emola"
    UNKNOWN = "unknown"


class Confidence(str, Enum):
    """Which tier of code pattern produced a match."""

    HIGH = "high"      # Exact provider grammar
    MEDIUM = "medium"  # Generic heuristic
    LOW = "low"


class ValidationErrorCode(str, Enum):
    """Client-side validation failures, in reporting priority order."""

    CODE_NOT_DETECTED = "CODE_NOT_DETECTED"
    AMOUNT_NOT_DETECTED = "AMOUNT_NOT_DETECTED"
    RECIPIENT_NOT_DETECTED = "RECIPIENT_NOT_DETECTED"
    AMOUNT_MISMATCH = "AMOUNT_MISMATCH"
    RECIPIENT_MISMATCH = "RECIPIENT_MISMATCH"


class ConfirmationErrorCode(str, Enum):
    """Reason codes returned by the confirm-payment RPC."""

    CODE_REUSED = "CODE_REUSED"
    ALREADY_CONFIRMED = "ALREADY_CONFIRMED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
