"""
Business configuration read by the payment validator and slot calculator.
Mirrors the public barbershop record: payment numbers per method, WhatsApp
contact, opening hours and per-business buffers.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from core.settings import settings
from domain.enums import PaymentMethod


@dataclass(frozen=True)
class BusinessHours:
    """Opening hours and slot rules for a business."""
    opening_time: Optional[str] = None
    closing_time: Optional[str] = None
    slot_interval_minutes: int = field(default_factory=lambda: settings.default_slot_interval_minutes)
    prep_buffer_minutes: int = 0  # Blocked before each appointment
    cleanup_buffer_minutes: int = 0  # Blocked after each appointment

    def __post_init__(self):
        if self.slot_interval_minutes <= 0:
            raise ValueError("slot_interval_minutes must be positive")
        if self.prep_buffer_minutes < 0 or self.cleanup_buffer_minutes < 0:
            raise ValueError("buffer minutes cannot be negative")


@dataclass(frozen=True)
class BusinessPaymentConfig:
    """Mobile-money settings of a business."""
    mpesa_number: Optional[str] = None
    emola_number: Optional[str] = None
    payment_methods_enabled: List[PaymentMethod] = field(default_factory=list)
    whatsapp_number: Optional[str] = None
    payment_required: bool = False

    def expected_recipient(self, method: Optional[PaymentMethod]) -> str:
        """
        Raw recipient number the business registered for ``method``.

        Returns:
            The configured number, or an empty string when the method has
            no number (which never normalizes, so it never matches).
        """
        if method == PaymentMethod.MPESA and self.mpesa_number:
            return self.mpesa_number
        if method == PaymentMethod.EMOLA and self.emola_number:
            return self.emola_number
        return ""

    def accepts(self, method: PaymentMethod) -> bool:
        """Check if the business takes payments with ``method``."""
        return method in self.payment_methods_enabled and bool(self.expected_recipient(method))

    @property
    def requires_payment_confirmation(self) -> bool:
        """Payment must be confirmed before booking and at least one method can take it."""
        return self.payment_required and any(self.accepts(method) for method in self.payment_methods_enabled)


def business_from_record(record: Dict[str, Any]) -> Tuple[BusinessPaymentConfig, BusinessHours]:
    """
    Build (BusinessPaymentConfig, BusinessHours) from a public business row.

    Unknown payment methods in ``payment_methods_enabled`` are ignored.
    """
    methods = []
    for raw in record.get("payment_methods_enabled") or []:
        try:
            methods.append(PaymentMethod(str(raw).lower()))
        except ValueError:
            continue

    payment = BusinessPaymentConfig(
        mpesa_number=record.get("mpesa_number"),
        emola_number=record.get("emola_number"),
        payment_methods_enabled=methods,
        whatsapp_number=record.get("whatsapp_number"),
        payment_required=bool(record.get("payment_required", False)),
    )
    hours = BusinessHours(
        opening_time=record.get("opening_time"),
        closing_time=record.get("closing_time"),
        slot_interval_minutes=record.get("slot_interval_minutes") or settings.default_slot_interval_minutes,
        prep_buffer_minutes=record.get("prep_buffer_minutes") or 0,
        cleanup_buffer_minutes=record.get("cleanup_buffer_minutes") or 0,
    )
    return payment, hours
