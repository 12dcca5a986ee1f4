"""
Anti-fraud validation of extracted payment data.

Compares what was extracted from a pasted confirmation with what the
business expects (service price, its mobile-money number) and produces the
verdict that gates the "confirm payment" action. This is a client-side
pre-filter; the confirm-payment RPC re-validates everything server-side.
"""

import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple, Union

from core.business_config import BusinessPaymentConfig
from core.settings import settings
from domain.enums import PaymentMethod, ValidationErrorCode
from domain.models import ExtractedPaymentData, ValidationResult
from services.manual_code_validator import manual_code_as_extracted
from services.payment_code_extractor import extract_payment_data
from services.phone_normalizer import format_phone_display, normalize_phone


logger = logging.getLogger(__name__)

AmountLike = Union[Decimal, int, float, str]


ERROR_MESSAGES = {
    ValidationErrorCode.CODE_NOT_DETECTED:
        "Código de transação não detectado. Cole a mensagem de confirmação completa.",
    ValidationErrorCode.AMOUNT_NOT_DETECTED:
        "Valor não detectado. Cole a mensagem completa.",
    ValidationErrorCode.RECIPIENT_NOT_DETECTED:
        "Destinatário não detectado. Cole a mensagem completa.",
    ValidationErrorCode.AMOUNT_MISMATCH:
        "O valor detectado ({detected} MT) não corresponde ao valor do serviço ({expected} MT).",
    ValidationErrorCode.RECIPIENT_MISMATCH:
        "O destinatário ({detected}) não corresponde ao número de pagamento do estabelecimento.",
}


def to_decimal(value: Optional[AmountLike]) -> Optional[Decimal]:
    """Convert an amount to Decimal; None when it is missing or not a number."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return result if result.is_finite() else None


def _format_amount(value: Optional[Decimal]) -> str:
    return f"{value:.2f}" if value is not None else "?"


def validate_payment_data(
    extracted: ExtractedPaymentData,
    expected_amount: Optional[AmountLike],
    expected_recipient: Optional[str],
    tolerance: Optional[Decimal] = None
) -> ValidationResult:
    """
    Validate extracted payment data against the business's expectations.

    Args:
        extracted: Output of extract_payment_data
        expected_amount: Service price
        expected_recipient: Business mobile-money number, in any format
        tolerance: Allowed absolute amount difference (strictly less than);
            defaults to settings.amount_tolerance

    Returns:
        ValidationResult; error_message describes the first failing check
        in the order code, amount, recipient, amount match, recipient match
    """
    tolerance = tolerance if tolerance is not None else settings.amount_tolerance
    expected = to_decimal(expected_amount)
    normalized_recipient = normalize_phone(expected_recipient)

    if normalized_recipient is None:
        logger.warning("Expected recipient is not a valid Mozambique number; recipient can never match")

    has_code = extracted.code is not None
    has_amount = extracted.amount is not None
    has_recipient = extracted.phone is not None

    amount_matches = (
        has_amount
        and expected is not None
        and abs(extracted.amount - expected) < tolerance
    )
    recipient_matches = (
        has_recipient
        and normalized_recipient is not None
        and extracted.phone == normalized_recipient
    )

    checks = (
        (has_code, ValidationErrorCode.CODE_NOT_DETECTED),
        (has_amount, ValidationErrorCode.AMOUNT_NOT_DETECTED),
        (has_recipient, ValidationErrorCode.RECIPIENT_NOT_DETECTED),
        (amount_matches, ValidationErrorCode.AMOUNT_MISMATCH),
        (recipient_matches, ValidationErrorCode.RECIPIENT_MISMATCH),
    )
    error_code = next((code for passed, code in checks if not passed), None)

    error_message = None
    if error_code is not None:
        error_message = ERROR_MESSAGES[error_code].format(
            detected=(
                _format_amount(extracted.amount)
                if error_code == ValidationErrorCode.AMOUNT_MISMATCH
                else format_phone_display(extracted.phone)
            ),
            expected=_format_amount(expected),
        )

    if error_code in (ValidationErrorCode.AMOUNT_MISMATCH, ValidationErrorCode.RECIPIENT_MISMATCH):
        logger.info(
            "Payment confirmation mismatch",
            extra={
                "error_code": error_code.value,
                "amount_detected": str(extracted.amount),
                "amount_expected": str(expected),
            }
        )

    return ValidationResult(
        has_code=has_code,
        has_amount=has_amount,
        has_recipient=has_recipient,
        amount_matches=bool(amount_matches),
        recipient_matches=bool(recipient_matches),
        error_message=error_message,
        error_code=error_code,
    )


def validate_confirmation_text(
    text: Optional[str],
    expected_amount: Optional[AmountLike],
    expected_recipient: Optional[str],
    preferred_method: Optional[PaymentMethod] = None,
    manual_code: Optional[str] = None,
    tolerance: Optional[Decimal] = None
) -> Tuple[ExtractedPaymentData, ValidationResult]:
    """
    Extract and validate a pasted confirmation in one step.

    When ``manual_code`` is given it replaces the extracted code; an
    invalid manual code leaves the data without a code.

    Returns:
        Tuple of (ExtractedPaymentData, ValidationResult)
    """
    extracted = extract_payment_data(text, preferred_method)

    if manual_code and manual_code.strip():
        fallback = extracted.method if extracted.method != PaymentMethod.UNKNOWN else preferred_method
        extracted = extracted.with_code(manual_code_as_extracted(manual_code, fallback))

    result = validate_payment_data(extracted, expected_amount, expected_recipient, tolerance)
    return extracted, result


# ============================================================================
# Service-Layer Hooks
# ============================================================================

class PaymentValidationService:
    """
    Validates confirmations for one business.
    Resolves the expected recipient from the method the client selected.
    """

    def __init__(self, config: BusinessPaymentConfig, tolerance: Optional[Decimal] = None):
        """Initialize the validation service."""
        self.config = config
        self.tolerance = tolerance

    def expected_recipient(self, method: Optional[PaymentMethod]) -> Optional[str]:
        """Normalized business number for ``method``, or None if not configured."""
        return normalize_phone(self.config.expected_recipient(method))

    def validate(
        self,
        text: Optional[str],
        service_price: AmountLike,
        selected_method: Optional[PaymentMethod],
        manual_code: Optional[str] = None
    ) -> Tuple[ExtractedPaymentData, ValidationResult]:
        """
        Validate a pasted confirmation for a service priced ``service_price``.

        Returns:
            Tuple of (ExtractedPaymentData, ValidationResult)
        """
        return validate_confirmation_text(
            text,
            service_price,
            self.config.expected_recipient(selected_method),
            preferred_method=selected_method,
            manual_code=manual_code,
            tolerance=self.tolerance,
        )
