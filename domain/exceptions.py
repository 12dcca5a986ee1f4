"""Exceptions raised for contract violations in the payment flow.

Extraction misses, malformed codes and mismatches are never raised; they are
reported in ValidationResult / ManualCodeValidation.
"""


class PaymentError(Exception):
    """Base class for payment flow errors."""


class PaymentNotReadyError(PaymentError):
    """A confirm request was built from a verdict that is not ready."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Payment is not ready for confirmation: {reason}")
