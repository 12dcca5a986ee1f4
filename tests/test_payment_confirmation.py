"""
Tests for the confirm-payment RPC client.
The transport is faked; no network is involved.
"""

from uuid import UUID

import pytest
from pydantic import ValidationError

from domain.enums import ConfirmationErrorCode, PaymentMethod
from domain.exceptions import PaymentNotReadyError
from domain.models import ConfirmPaymentRequest, ConfirmPaymentResponse
from services.payment_confirmation import (
    CONFIRMED_MESSAGE,
    REJECTION_MESSAGES,
    TRANSPORT_ERROR_MESSAGE,
    PaymentConfirmationService,
    build_confirm_request,
    outcome_from_response,
)
from services.payment_validation import validate_confirmation_text


APPOINTMENT_ID = UUID("11111111-1111-4111-8111-111111111111")
BARBERSHOP_ID = UUID("22222222-2222-4222-8222-222222222222")


class FakeTransport:
    """Records calls and replies with a canned answer."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def confirm_payment(self, params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def ready_request(mpesa_message):
    """A confirm request built from a ready verdict."""
    extracted, validation = validate_confirmation_text(mpesa_message, 50, "841234567")
    return build_confirm_request(
        appointment_id=APPOINTMENT_ID,
        barbershop_id=BARBERSHOP_ID,
        confirmation_text=mpesa_message,
        extracted=extracted,
        validation=validation,
        expected_amount=50,
        expected_recipient="841234567",
    )


# ============================================================================
# Request Building Tests
# ============================================================================

@pytest.mark.unit
class TestBuildConfirmRequest:
    """Tests for build_confirm_request."""

    def test_fields(self, ready_request, mpesa_message):
        assert ready_request.transaction_code == "DAT2IVYA7R0"
        assert ready_request.payment_method == PaymentMethod.MPESA
        assert ready_request.phone_expected == "258841234567"
        assert ready_request.phone_detected == "258841234567"
        assert ready_request.confirmation_text == mpesa_message
        assert ready_request.max_hours == 2

    def test_rpc_params(self, ready_request):
        params = ready_request.to_rpc_params()
        assert params["p_appointment_id"] == str(APPOINTMENT_ID)
        assert params["p_barbershop_id"] == str(BARBERSHOP_ID)
        assert params["p_payment_method"] == "mpesa"
        assert params["p_transaction_code"] == "DAT2IVYA7R0"
        assert params["p_amount_expected"] == 50.0
        assert params["p_amount_detected"] == 50.0
        assert params["p_max_hours"] == 2

    def test_not_ready_raises(self, mpesa_message):
        extracted, validation = validate_confirmation_text(mpesa_message, 80, "841234567")
        with pytest.raises(PaymentNotReadyError) as exc_info:
            build_confirm_request(
                appointment_id=APPOINTMENT_ID,
                barbershop_id=BARBERSHOP_ID,
                confirmation_text=mpesa_message,
                extracted=extracted,
                validation=validation,
                expected_amount=80,
                expected_recipient="841234567",
            )
        assert "80.00" in exc_info.value.reason

    def test_hand_corrected_code_is_sent(self, mpesa_message):
        extracted, validation = validate_confirmation_text(mpesa_message, 50, "841234567")
        request = build_confirm_request(
            appointment_id=str(APPOINTMENT_ID),
            barbershop_id=str(BARBERSHOP_ID),
            confirmation_text=mpesa_message,
            extracted=extracted,
            validation=validation,
            expected_amount="50",
            expected_recipient="258841234567",
            transaction_code=" dat2ivya7r1 ",
            max_hours=4,
        )
        assert request.transaction_code == "DAT2IVYA7R1"
        assert request.appointment_id == APPOINTMENT_ID
        assert request.max_hours == 4

    def test_selected_method_used_when_unknown(self):
        text = "Transferiste 50.00MT para 841234567"
        extracted, validation = validate_confirmation_text(text, 50, "841234567", manual_code="DAT2IVYA7R0")
        extracted = extracted.model_copy(update={"method": PaymentMethod.UNKNOWN})
        request = build_confirm_request(
            appointment_id=APPOINTMENT_ID,
            barbershop_id=BARBERSHOP_ID,
            confirmation_text=text,
            extracted=extracted,
            validation=validation,
            expected_amount=50,
            expected_recipient="841234567",
            selected_method=PaymentMethod.EMOLA,
        )
        assert request.payment_method == PaymentMethod.EMOLA


# ============================================================================
# Response Mapping Tests
# ============================================================================

@pytest.mark.unit
class TestOutcomeFromResponse:
    """Tests for mapping RPC answers to client outcomes."""

    def test_success(self):
        outcome = outcome_from_response(ConfirmPaymentResponse(success=True))
        assert outcome.confirmed is True
        assert outcome.retryable is False
        assert outcome.user_message == CONFIRMED_MESSAGE

    def test_code_reused(self):
        outcome = outcome_from_response(
            ConfirmPaymentResponse(success=False, error="used", code="CODE_REUSED")
        )
        assert outcome.confirmed is False
        assert outcome.code == ConfirmationErrorCode.CODE_REUSED
        assert outcome.user_message == REJECTION_MESSAGES[ConfirmationErrorCode.CODE_REUSED]

    def test_already_confirmed_is_not_confirmed(self):
        outcome = outcome_from_response(
            ConfirmPaymentResponse(success=False, code="ALREADY_CONFIRMED")
        )
        assert outcome.confirmed is False
        assert outcome.retryable is False
        assert outcome.code == ConfirmationErrorCode.ALREADY_CONFIRMED

    def test_validation_failed_uses_server_text(self):
        outcome = outcome_from_response(
            ConfirmPaymentResponse(success=False, error="Valor divergente", code="VALIDATION_FAILED")
        )
        assert outcome.user_message == "Valor divergente"

    def test_validation_failed_without_text(self):
        outcome = outcome_from_response(ConfirmPaymentResponse(success=False, code="VALIDATION_FAILED"))
        assert outcome.user_message == REJECTION_MESSAGES[ConfirmationErrorCode.VALIDATION_FAILED]

    def test_unknown_code(self):
        outcome = outcome_from_response(ConfirmPaymentResponse(success=False, code="SOMETHING_ELSE"))
        assert outcome.code is None
        assert outcome.user_message == "Erro de validação"


# ============================================================================
# Service Tests
# ============================================================================

@pytest.mark.unit
class TestPaymentConfirmationService:
    """Tests for PaymentConfirmationService.confirm."""

    @pytest.mark.asyncio
    async def test_confirmed(self, ready_request):
        transport = FakeTransport(reply={"success": True, "error": None, "code": None})
        outcome = await PaymentConfirmationService(transport).confirm(ready_request)
        assert outcome.confirmed is True
        assert len(transport.calls) == 1
        assert transport.calls[0]["p_transaction_code"] == "DAT2IVYA7R0"

    @pytest.mark.asyncio
    async def test_response_model_accepted(self, ready_request):
        transport = FakeTransport(reply=ConfirmPaymentResponse(success=False, code="CODE_REUSED"))
        outcome = await PaymentConfirmationService(transport).confirm(ready_request)
        assert outcome.confirmed is False
        assert outcome.code == ConfirmationErrorCode.CODE_REUSED

    @pytest.mark.asyncio
    async def test_transport_error_is_retryable(self, ready_request):
        transport = FakeTransport(error=ConnectionError("offline"))
        outcome = await PaymentConfirmationService(transport).confirm(ready_request)
        assert outcome.confirmed is False
        assert outcome.retryable is True
        assert outcome.user_message == TRANSPORT_ERROR_MESSAGE
        assert len(transport.calls) == 1

    @pytest.mark.asyncio
    async def test_malformed_response_is_retryable(self, ready_request):
        transport = FakeTransport(reply={"error": "missing success"})
        outcome = await PaymentConfirmationService(transport).confirm(ready_request)
        assert outcome.confirmed is False
        assert outcome.retryable is True

    def test_request_rejects_bad_phone(self):
        """The wire model enforces the normalized phone shape."""
        with pytest.raises(ValidationError):
            ConfirmPaymentRequest(
                appointment_id=APPOINTMENT_ID,
                barbershop_id=BARBERSHOP_ID,
                payment_method=PaymentMethod.MPESA,
                phone_expected="841234567",
                amount_expected=50,
                confirmation_text="x",
                transaction_code="DAT2IVYA7R0",
            )
