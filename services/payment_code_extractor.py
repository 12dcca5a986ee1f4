"""
Extraction of M-Pesa and eMola payment data from SMS/USSD confirmation text.

Pulls the transaction code, amount and recipient phone out of the message a
client pastes after paying. Patterns are fixed provider grammars tried in a
fixed priority order; the first hit wins.
"""

import logging
import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Tuple

from domain.enums import Confidence, PaymentMethod
from domain.models import ExtractedCode, ExtractedPaymentData
from services.phone_normalizer import normalize_phone


logger = logging.getLogger(__name__)


# ============================================================================
# Provider detection
# ============================================================================

MPESA_KEYWORDS = ("m-pesa", "mpesa")
EMOLA_KEYWORDS = ("e-mola", "emola")


def detect_payment_method(message: Optional[str]) -> PaymentMethod:
    """
    Detect the provider from keywords in the message.

    This looks only at provider names mentioned in the text, never at the
    shape of the transaction code.
    """
    text = (message or "").lower()
    if any(keyword in text for keyword in MPESA_KEYWORDS):
        return PaymentMethod.MPESA
    if any(keyword in text for keyword in EMOLA_KEYWORDS):
        return PaymentMethod.EMOLA
    return PaymentMethod.UNKNOWN


# ============================================================================
# Transaction codes
# ============================================================================

def _has_letter_and_digit(token: str) -> bool:
    return re.search(r'[A-Z]', token) is not None and re.search(r'\d', token) is not None


def _is_mpesa_candidate(token: str) -> bool:
    return _has_letter_and_digit(token) and not token.startswith(("PP", "CI"))


@dataclass(frozen=True)
class CodeRule:
    """
    One tier of the transaction-code grammar.

    ``upper_case_input`` rules run on the upper-cased message (exact eMola
    grammars). The others run on the message as written so that only tokens
    printed in capitals, like real codes, are considered.
    """
    name: str
    pattern: "re.Pattern[str]"
    confidence: Confidence
    method_hint: PaymentMethod
    group: int = 0
    upper_case_input: bool = True
    accept: Optional[Callable[[str], bool]] = None

    def find(self, message: str, upper_message: str) -> Optional[str]:
        """Return the first token this rule accepts, or None."""
        text = upper_message if self.upper_case_input else message
        for match in self.pattern.finditer(text):
            token = match.group(self.group)
            if self.accept is None or self.accept(token):
                return token
        return None


# Ordered by trust. Compiled patterns carry no match state, each call gets
# its own match objects.
CODE_RULES: Tuple[CodeRule, ...] = (
    CodeRule(
        name="emola_pp",
        pattern=re.compile(r'\bPP\d{6}\.\d{4}\.[A-Z]\d{5}\b'),
        confidence=Confidence.HIGH,
        method_hint=PaymentMethod.EMOLA,
    ),
    CodeRule(
        name="emola_ci",
        pattern=re.compile(r'\bCI\d{6}\.\d{4}\.[A-Z]\d{5}\b'),
        confidence=Confidence.HIGH,
        method_hint=PaymentMethod.EMOLA,
    ),
    CodeRule(
        name="mpesa_confirmado",
        pattern=re.compile(r'\b(?i:confirmado)\s+([A-Z0-9]{10,12})\b'),
        confidence=Confidence.HIGH,
        method_hint=PaymentMethod.MPESA,
        group=1,
        upper_case_input=False,
        accept=_has_letter_and_digit,
    ),
    CodeRule(
        name="emola_generic",
        pattern=re.compile(r'\b(?:PP|CI)[A-Z0-9.]{6,}\b'),
        confidence=Confidence.MEDIUM,
        method_hint=PaymentMethod.EMOLA,
        upper_case_input=False,
    ),
    CodeRule(
        name="mpesa_generic",
        pattern=re.compile(r'\b[A-Z0-9]{10,12}\b'),
        confidence=Confidence.MEDIUM,
        method_hint=PaymentMethod.MPESA,
        upper_case_input=False,
        accept=_is_mpesa_candidate,
    ),
)


def extract_transaction_code(message: Optional[str]) -> Optional[ExtractedCode]:
    """
    Extract the single best transaction code from a confirmation message.

    Rules are tried in CODE_RULES order and the first match is returned.
    The provider is the one named in the text when there is one, otherwise
    the provider implied by the matching rule.

    Args:
        message: Raw confirmation text

    Returns:
        ExtractedCode or None if no rule matched
    """
    if not message:
        return None

    upper_message = message.upper()
    detected = detect_payment_method(message)

    for rule in CODE_RULES:
        token = rule.find(message, upper_message)
        if token is None:
            continue

        method = detected if detected != PaymentMethod.UNKNOWN else rule.method_hint
        logger.debug("Transaction code matched rule %s", rule.name)
        return ExtractedCode(code=token.upper(), method=method, confidence=rule.confidence)

    return None


# ============================================================================
# Amounts
# ============================================================================

# Either thousands-grouped ("1.500,00", "1,500.00") or plain ("50", "50,00").
# The lookbehind keeps a match from starting in the middle of a number.
_NUMBER = r'(?<![\d.,])(\d{1,3}(?:[.,]\d{3})+(?:[.,]\d{1,2})?|\d+(?:[.,]\d{1,2})?)'
_CURRENCY = r'\s*(?:MZN|MTN|MT)\b'

AMOUNT_PATTERNS = (
    re.compile(
        r'\b(?:transferiste|recebeste|enviaste|valor|montante)\b[\s:]*(?:de\s+)?' + _NUMBER + _CURRENCY,
        re.IGNORECASE,
    ),
    re.compile(_NUMBER + _CURRENCY, re.IGNORECASE),
)

_DECIMAL_PART = re.compile(r'[.,](\d{1,2})$')


def parse_amount(token: str) -> Optional[Decimal]:
    """
    Parse an amount token, accepting comma or period as decimal separator.

    A trailing separator followed by 1-2 digits is the decimal part; any
    other separator groups thousands.

    Examples:
        >>> parse_amount("50,00")
        Decimal('50.00')
        >>> parse_amount("1.500,00")
        Decimal('1500.00')
    """
    if not token:
        return None

    decimal_match = _DECIMAL_PART.search(token)
    if decimal_match:
        whole = token[:decimal_match.start()]
        fraction = decimal_match.group(1)
    else:
        whole, fraction = token, ""

    whole = re.sub(r'[.,]', '', whole)
    if not whole.isdigit():
        return None

    try:
        return Decimal(f"{whole}.{fraction}" if fraction else whole)
    except InvalidOperation:
        return None


def extract_amount(message: Optional[str]) -> Optional[Decimal]:
    """
    Extract the paid amount (MT) from a confirmation message.

    Amounts introduced by a transfer keyword ("Transferiste 50.00MT") are
    preferred over any other MT-suffixed number.

    Returns:
        The first positive amount found, or None
    """
    if not message:
        return None

    for pattern in AMOUNT_PATTERNS:
        for match in pattern.finditer(message):
            value = parse_amount(match.group(1))
            if value is not None and value > 0:
                return value

    return None


# ============================================================================
# Recipient phone
# ============================================================================

RECIPIENT_PATTERN = re.compile(
    r'(?:\bpara|\bp/|\bdestino)[\s:]*'
    r'(\+?(?:258[\s-]?)?\d{2}[\s-]?\d{3}[\s-]?\d{4})(?!\d)',
    re.IGNORECASE,
)


def extract_recipient_phone(message: Optional[str]) -> Optional[str]:
    """
    Extract the recipient number that follows "para", "p/" or "destino".

    Returns:
        The first candidate that normalizes to "258XXXXXXXXX", or None
    """
    if not message:
        return None

    for match in RECIPIENT_PATTERN.finditer(message):
        phone = normalize_phone(match.group(1))
        if phone is not None:
            return phone

    return None


# ============================================================================
# Complete extraction
# ============================================================================

def extract_payment_data(
    message: Optional[str],
    preferred_method: Optional[PaymentMethod] = None
) -> ExtractedPaymentData:
    """
    Extract code, amount and recipient from a confirmation message.

    The result's method is the provider named in the text, else the
    provider of the extracted code, else ``preferred_method`` (the method
    the client selected), else unknown.

    Args:
        message: Raw confirmation text (untrusted, may contain anything)
        preferred_method: Method selected in the booking flow, if any

    Returns:
        A new ExtractedPaymentData; fields that were not found are None
    """
    message = message if isinstance(message, str) else ""

    code = extract_transaction_code(message)
    amount = extract_amount(message)
    phone = extract_recipient_phone(message)

    method = detect_payment_method(message)
    if method == PaymentMethod.UNKNOWN and code is not None:
        method = code.method
    if method == PaymentMethod.UNKNOWN and preferred_method is not None:
        method = preferred_method

    logger.debug(
        "Extracted payment data",
        extra={
            "has_code": code is not None,
            "amount": str(amount) if amount is not None else None,
            "has_phone": phone is not None,
            "method": method.value,
        }
    )

    return ExtractedPaymentData(code=code, amount=amount, phone=phone, method=method)
