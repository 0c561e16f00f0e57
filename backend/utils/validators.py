"""
Input validation utilities.

Gateway identifiers are opaque, but Razorpay only ever issues short
alphanumeric ids with an underscore prefix ("order_…", "pay_…"), so
anything else in a path parameter is rejected before it reaches the DB.
"""
import re

from fastapi import Path

from domain.errors import ValidationError

_GATEWAY_ID = re.compile(r"^[A-Za-z0-9_]{1,64}$")
_CURRENCY = re.compile(r"^[A-Za-z]{3}$")


def validate_gateway_id(value: str, field: str = "orderId") -> str:
    """
    Validate a gateway-issued identifier.

    Raises:
        ValidationError(400) if the id is empty, too long or has odd characters
    """
    if not value or not _GATEWAY_ID.match(value):
        raise ValidationError("malformed gateway identifier", field=field)
    return value


def normalize_currency(value: str) -> str:
    """Uppercase a 3-letter currency code, rejecting anything else."""
    if not value or not _CURRENCY.match(value):
        raise ValidationError("must be a 3-letter currency code", field="currency")
    return value.upper()


def validated_order_id(order_id: str = Path(..., description="Gateway order id")) -> str:
    """FastAPI dependency for validating order id path parameters."""
    return validate_gateway_id(order_id)
