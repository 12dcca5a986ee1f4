"""Tests for wa.me links and USSD payment instructions."""

import pytest

from core.business_config import BusinessPaymentConfig
from domain.enums import PaymentMethod
from integrations.whatsapp.links import (
    build_business_whatsapp_link,
    build_whatsapp_link,
    encode_uri_component,
)
from services.payment_instructions import get_payment_instructions


@pytest.mark.unit
class TestWhatsAppLinks:
    """Tests for build_whatsapp_link."""

    def test_link_with_normalized_phone(self):
        url = build_whatsapp_link("84 123 4567", "Olá")
        assert url == "https://wa.me/258841234567?text=Ol%C3%A1"

    def test_empty_message(self):
        assert build_whatsapp_link("+258841234567") == "https://wa.me/258841234567?text="

    def test_invalid_phone(self):
        assert build_whatsapp_link("0841234567", "hi") is None
        assert build_whatsapp_link(None, "hi") is None

    def test_encode_uri_component(self):
        assert encode_uri_component("a b&c=d\n") == "a%20b%26c%3Dd%0A"
        assert encode_uri_component("-_.!~*'()") == "-_.!~*'()"
        assert encode_uri_component("DAT2IVYA7R0 / 50 MT") == "DAT2IVYA7R0%20%2F%2050%20MT"

    def test_business_link(self, payment_config):
        url = build_business_whatsapp_link(payment_config, "Paguei")
        assert url == "https://wa.me/258851112222?text=Paguei"

    def test_business_without_whatsapp(self):
        assert build_business_whatsapp_link(BusinessPaymentConfig(), "Paguei") is None


@pytest.mark.unit
class TestPaymentInstructions:
    """Tests for get_payment_instructions."""

    def test_mpesa(self):
        text = get_payment_instructions(PaymentMethod.MPESA, "+258 84 123 4567")
        assert "*150#" in text
        assert "258841234567" in text

    def test_emola(self):
        text = get_payment_instructions(PaymentMethod.EMOLA, "86 123 4567")
        assert "*898#" in text
        assert "861234567" in text

    def test_unknown(self):
        assert get_payment_instructions(PaymentMethod.UNKNOWN, "841234567") == ""
        assert get_payment_instructions(None, "841234567") == ""
