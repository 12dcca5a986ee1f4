"""
Client side of the server-side validate-and-confirm payment RPC.

The server re-validates the confirmation and enforces one-time use of each
transaction code; it is the only authority on whether a booking is paid.
This module builds the request from a ready verdict, calls the RPC once and
maps its answer to what the client should show.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Protocol, Union
from uuid import UUID

from pydantic import ValidationError as PydanticValidationError

from core.settings import settings
from domain.enums import ConfirmationErrorCode, PaymentMethod
from domain.exceptions import PaymentNotReadyError
from domain.models import (
    ConfirmPaymentRequest,
    ConfirmPaymentResponse,
    ExtractedPaymentData,
    ValidationResult,
)
from services.manual_code_validator import clean_manual_code
from services.payment_validation import AmountLike, to_decimal
from services.phone_normalizer import normalize_phone


logger = logging.getLogger(__name__)


CONFIRMED_MESSAGE = "Pagamento aceite. Agora envie a confirmação no WhatsApp."
TRANSPORT_ERROR_MESSAGE = "Erro ao validar pagamento. Tente novamente."
GENERIC_REJECTION_MESSAGE = "Erro de validação"

REJECTION_MESSAGES = {
    ConfirmationErrorCode.CODE_REUSED:
        "Este código de transação já foi utilizado. Use um novo pagamento.",
    ConfirmationErrorCode.ALREADY_CONFIRMED:
        "Este agendamento já possui um pagamento confirmado.",
    ConfirmationErrorCode.VALIDATION_FAILED:
        "Validação falhou. Verifique os dados.",
}


class ConfirmPaymentTransport(Protocol):
    """Performs the RPC; raises on network or server errors."""

    async def confirm_payment(
        self, params: Dict[str, Any]
    ) -> Union[ConfirmPaymentResponse, Dict[str, Any]]:
        ...


@dataclass(frozen=True)
class ConfirmationOutcome:
    """What the client should do after the confirm call."""
    confirmed: bool
    retryable: bool
    user_message: str
    code: Optional[ConfirmationErrorCode] = None


def build_confirm_request(
    *,
    appointment_id: Union[UUID, str],
    barbershop_id: Union[UUID, str],
    confirmation_text: str,
    extracted: ExtractedPaymentData,
    validation: ValidationResult,
    expected_amount: AmountLike,
    expected_recipient: str,
    selected_method: Optional[PaymentMethod] = None,
    transaction_code: Optional[str] = None,
    max_hours: Optional[int] = None,
) -> ConfirmPaymentRequest:
    """
    Build the RPC payload from a ready verdict.

    Args:
        transaction_code: Code as finally shown to the client (possibly hand
            corrected); defaults to the extracted code

    Raises:
        PaymentNotReadyError: If the verdict is not ready or a required
            value is missing
    """
    if not validation.is_ready:
        raise PaymentNotReadyError(validation.error_message or "validation did not pass")

    code = clean_manual_code(transaction_code) or (extracted.code.code if extracted.code else "")
    if not code:
        raise PaymentNotReadyError("no transaction code")

    phone_expected = normalize_phone(expected_recipient)
    amount_expected = to_decimal(expected_amount)
    if phone_expected is None or amount_expected is None:
        raise PaymentNotReadyError("business payment settings are incomplete")

    method = extracted.method
    if method == PaymentMethod.UNKNOWN and selected_method is not None:
        method = selected_method

    return ConfirmPaymentRequest(
        appointment_id=appointment_id,
        barbershop_id=barbershop_id,
        payment_method=method,
        phone_expected=phone_expected,
        amount_expected=amount_expected,
        confirmation_text=confirmation_text,
        transaction_code=code,
        amount_detected=extracted.amount,
        phone_detected=extracted.phone,
        max_hours=max_hours if max_hours is not None else settings.confirm_max_hours,
    )


def outcome_from_response(response: ConfirmPaymentResponse) -> ConfirmationOutcome:
    """Map an RPC response to a client outcome."""
    if response.success:
        return ConfirmationOutcome(confirmed=True, retryable=False, user_message=CONFIRMED_MESSAGE)

    reason = response.reason
    if reason == ConfirmationErrorCode.VALIDATION_FAILED:
        message = response.error or REJECTION_MESSAGES[reason]
    elif reason is not None:
        message = REJECTION_MESSAGES[reason]
    else:
        message = response.error or GENERIC_REJECTION_MESSAGE

    return ConfirmationOutcome(confirmed=False, retryable=False, user_message=message, code=reason)


class PaymentConfirmationService:
    """
    Submits validated confirmations to the confirm-payment RPC.

    Each call to ``confirm`` calls the transport exactly once. A failed call
    is never reported as confirmed; resubmitting is safe because the server
    rejects reused transaction codes.
    """

    def __init__(self, transport: ConfirmPaymentTransport):
        """Initialize with the RPC transport."""
        self.transport = transport

    async def confirm(self, request: ConfirmPaymentRequest) -> ConfirmationOutcome:
        """
        Call the RPC and map its answer.

        Returns:
            ConfirmationOutcome; transport failures come back retryable
        """
        try:
            raw = await self.transport.confirm_payment(request.to_rpc_params())
            response = (
                raw if isinstance(raw, ConfirmPaymentResponse)
                else ConfirmPaymentResponse.model_validate(raw)
            )
        except PydanticValidationError:
            logger.exception("Malformed confirm-payment response")
            return ConfirmationOutcome(confirmed=False, retryable=True, user_message=TRANSPORT_ERROR_MESSAGE)
        except Exception:
            logger.exception("Confirm-payment call failed")
            return ConfirmationOutcome(confirmed=False, retryable=True, user_message=TRANSPORT_ERROR_MESSAGE)

        outcome = outcome_from_response(response)
        if outcome.confirmed:
            logger.info("Payment confirmed", extra={"appointment_id": str(request.appointment_id)})
        else:
            logger.warning(
                "Payment rejected by server",
                extra={
                    "appointment_id": str(request.appointment_id),
                    "code": response.code,
                }
            )
        return outcome
