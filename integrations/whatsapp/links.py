"""wa.me deep-link construction for Mozambique numbers."""

from typing import Optional
from urllib.parse import quote

from core.business_config import BusinessPaymentConfig
from services.phone_normalizer import normalize_phone


WA_ME_BASE_URL = "https://wa.me"

# Characters JavaScript's encodeURIComponent leaves unescaped
_URI_COMPONENT_SAFE = "-_.!~*'()"


def encode_uri_component(text: str) -> str:
    """
    Percent-encode text exactly like JavaScript's encodeURIComponent.

    Args:
        text: Message text (UTF-8, may contain emoji and newlines)

    Returns:
        Encoded string
    """
    return quote(text, safe=_URI_COMPONENT_SAFE)


def build_whatsapp_link(phone: Optional[str], message: str = "") -> Optional[str]:
    """
    Build a https://wa.me/<258XXXXXXXXX>?text=<message> link.

    Args:
        phone: Recipient number in any format
        message: Prefilled message text

    Returns:
        The link, or None if the phone does not normalize
    """
    normalized = normalize_phone(phone)
    if normalized is None:
        return None

    return f"{WA_ME_BASE_URL}/{normalized}?text={encode_uri_component(message or '')}"


def build_business_whatsapp_link(config: BusinessPaymentConfig, message: str = "") -> Optional[str]:
    """Link that opens a chat with the business's own WhatsApp number."""
    return build_whatsapp_link(config.whatsapp_number, message)
