"""Pytest configuration and fixtures for payment validation tests."""
from decimal import Decimal

import pytest

from core.business_config import BusinessHours, BusinessPaymentConfig
from domain.enums import Confidence, PaymentMethod
from domain.models import ExtractedCode, ExtractedPaymentData


BUSINESS_MPESA = "258841234567"


@pytest.fixture
def mpesa_message():
    """Typical M-Pesa transfer confirmation."""
    return (
        "Confirmado DAT2IVYA7R0. Transferiste 50.00MT e a taxa foi de 0.00MT "
        "para 258841234567 - BARBEARIA CENTRAL aos 12/1/26 as 10:15. "
        "O teu saldo M-Pesa e 1,250.00MT."
    )


@pytest.fixture
def emola_message():
    """Typical eMola transfer confirmation (no provider name in the text)."""
    return (
        "ID da transacao: PP260116.2026.W22156. Transferiste 20.00MT "
        "para 861234567, nome: SALAO BELEZA. Taxa: 0.00MT."
    )


@pytest.fixture
def payment_config():
    """Business with both mobile-money methods configured."""
    return BusinessPaymentConfig(
        mpesa_number="+258 84 123 4567",
        emola_number="86 123 4567",
        payment_methods_enabled=[PaymentMethod.MPESA, PaymentMethod.EMOLA],
        whatsapp_number="258851112222",
        payment_required=True,
    )


@pytest.fixture
def business_hours():
    """09:00-18:00, 30 minute slots, no buffers."""
    return BusinessHours(opening_time="09:00", closing_time="18:00", slot_interval_minutes=30)


@pytest.fixture
def make_extracted():
    """Factory for ExtractedPaymentData with sensible defaults."""
    def _make(code="DAT2IVYA7R0", amount="50.00", phone=BUSINESS_MPESA, method=PaymentMethod.MPESA):
        return ExtractedPaymentData(
            code=ExtractedCode(code=code, method=method, confidence=Confidence.HIGH) if code else None,
            amount=Decimal(amount) if amount is not None else None,
            phone=phone,
            method=method,
        )
    return _make
