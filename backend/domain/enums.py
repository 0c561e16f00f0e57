"""
Domain enums for the payment lifecycle.
"""

from enum import Enum


class PaymentStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


class VerificationResult(str, Enum):
    """Outcome of verify_payment. Expected failures are results, not exceptions."""
    VERIFIED = "Verified"
    ALREADY_VERIFIED = "AlreadyVerified"
    SIGNATURE_MISMATCH = "SignatureMismatch"
    UNKNOWN_ORDER = "UnknownOrder"

    @property
    def is_success(self) -> bool:
        return self in (VerificationResult.VERIFIED, VerificationResult.ALREADY_VERIFIED)
