"""
Mozambique phone number normalization.

Every number handled by the payment flow is canonicalised to
"258" + 9 digits. Anything that does not reduce to that shape is rejected
(None) rather than guessed at, so a malformed number can never produce a
false recipient match.
"""

import re
from typing import Optional


MOZ_COUNTRY_CODE = "258"
LOCAL_NUMBER_LENGTH = 9
NORMALIZED_LENGTH = len(MOZ_COUNTRY_CODE) + LOCAL_NUMBER_LENGTH

NORMALIZED_PHONE_PATTERN = re.compile(r'^258\d{9}$')
NON_DIGITS = re.compile(r'\D')


def normalize_phone(raw: Optional[str]) -> Optional[str]:
    """
    Normalize a Mozambique phone number to "258XXXXXXXXX".

    Args:
        raw: Phone as typed or pasted ("+258 84 123 4567", "841234567", ...)

    Returns:
        The 12-digit normalized number, or None if the input does not strip
        to exactly 9 digits or to 12 digits starting with 258.

    Examples:
        >>> normalize_phone("84 123 4567")
        '258841234567'
        >>> normalize_phone("+258841234567")
        '258841234567'
        >>> normalize_phone("0841234567") is None
        True
    """
    if not raw or not isinstance(raw, str):
        return None

    digits = NON_DIGITS.sub('', raw)

    if len(digits) == LOCAL_NUMBER_LENGTH:
        digits = MOZ_COUNTRY_CODE + digits
    elif len(digits) != NORMALIZED_LENGTH or not digits.startswith(MOZ_COUNTRY_CODE):
        return None

    if not NORMALIZED_PHONE_PATTERN.match(digits):
        return None

    return digits


def is_normalized_phone(value: Optional[str]) -> bool:
    """Check that a value already has the exact normalized shape."""
    return bool(value) and isinstance(value, str) and NORMALIZED_PHONE_PATTERN.match(value) is not None


def format_phone_display(phone: Optional[str]) -> str:
    """
    Render a phone for humans: "+258 84 123 4567".

    Values that do not normalize are returned unchanged (empty string for None).
    """
    normalized = normalize_phone(phone)
    if normalized is None:
        return phone or ""

    local = normalized[len(MOZ_COUNTRY_CODE):]
    return f"+{MOZ_COUNTRY_CODE} {local[:2]} {local[2:5]} {local[5:]}"
