"""
Format check for transaction codes typed by hand.

Works on a bare candidate string, independent of any message context, so a
client can correct a code the extractor missed or misread.
"""

import re
from typing import Optional

from domain.enums import Confidence, PaymentMethod
from domain.models import ExtractedCode, ManualCodeValidation


MIN_CODE_LENGTH = 10

EMOLA_EXACT = re.compile(r'^(?:PP|CI)\d{6}\.\d{4}\.[A-Z]\d{5}$')
EMOLA_LOOSE = re.compile(r'^(?:PP|CI)[A-Z0-9.]{6,}$')
MPESA_CODE = re.compile(r'^[A-Z0-9]{10,12}$')

INVALID = ManualCodeValidation(is_valid=False, method=None)


def clean_manual_code(code: Optional[str]) -> str:
    """Trim and upper-case a typed code."""
    if not code or not isinstance(code, str):
        return ""
    return code.strip().upper()


def validate_manual_code(code: Optional[str]) -> ManualCodeValidation:
    """
    Validate a manually entered transaction code.

    Checked in order, first match wins:
        1. exact eMola grammar (PP260116.2026.W22156) -> emola
        2. loose eMola grammar (PP/CI + 6 or more of A-Z, 0-9, '.') -> emola
        3. M-Pesa: 10-12 of A-Z/0-9 with a letter and a digit, no PP/CI prefix -> mpesa

    Anything shorter than 10 characters is invalid.
    """
    candidate = clean_manual_code(code)
    if len(candidate) < MIN_CODE_LENGTH:
        return INVALID

    if EMOLA_EXACT.match(candidate) or EMOLA_LOOSE.match(candidate):
        return ManualCodeValidation(is_valid=True, method=PaymentMethod.EMOLA)

    if (
        MPESA_CODE.match(candidate)
        and re.search(r'[A-Z]', candidate)
        and re.search(r'\d', candidate)
        and not candidate.startswith(("PP", "CI"))
    ):
        return ManualCodeValidation(is_valid=True, method=PaymentMethod.MPESA)

    return INVALID


def manual_code_as_extracted(
    code: Optional[str],
    fallback_method: Optional[PaymentMethod] = None
) -> Optional[ExtractedCode]:
    """
    Turn a valid hand-typed code into an ExtractedCode.

    The method is ``fallback_method`` (typically what the message or the
    booking flow says) when known, else the method implied by the format.

    Returns:
        ExtractedCode with high confidence, or None if the code is invalid
    """
    result = validate_manual_code(code)
    if not result.is_valid:
        return None

    method = fallback_method if fallback_method not in (None, PaymentMethod.UNKNOWN) else result.method
    return ExtractedCode(code=clean_manual_code(code), method=method, confidence=Confidence.HIGH)
