"""
Pydantic models for request/response validation.
"""
from datetime import datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ApiBase(BaseModel):
    """Shared base — allows construction by Python name or alias."""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


# ── Auth Models ─────────────────────────────────────────────────────

class CredentialsRequest(BaseModel):
    """Signup / login body."""
    email: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=1, max_length=128)


class LoginResponse(ApiBase):
    email: str
    access_token: str = Field(..., alias="accessToken")
    token_type: str = Field("Bearer", alias="tokenType")
    profile_pic: Optional[str] = Field(None, alias="profilePic")
    message: str = "Login successful"


class UpdateProfileRequest(ApiBase):
    email: str = Field(..., min_length=3, max_length=254)
    password: Optional[str] = Field(None, min_length=1, max_length=128)
    profile_pic: Optional[str] = Field(None, alias="profilePic", max_length=500)


# ── Payment Models ──────────────────────────────────────────────────

class PayerDetails(ApiBase):
    """Traveler or donor details."""
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=254)
    phone: Optional[str] = Field(None, max_length=32)


class CreateOrderRequest(ApiBase):
    """
    Checkout / donation order.

    `amount` is in major units (₹) and is converted to paise server-side.
    """
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    payer: Optional[PayerDetails] = Field(
        None,
        validation_alias=AliasChoices("payer", "donor"),
    )


class TravelOrderRequest(ApiBase):
    """Travel package booking order (amount in major units)."""
    package_name: str = Field(..., alias="packageName", min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    traveler: PayerDetails


class CreateOrderResponse(ApiBase):
    order_id: str = Field(..., alias="orderId")
    amount: int = Field(..., description="Minor currency units")
    currency: str
    key_id: str = Field(..., alias="keyId", description="Public gateway key for checkout")


class VerifyPaymentRequest(BaseModel):
    """Accepts both the short names and Razorpay checkout's callback names."""
    order_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("orderId", "razorpay_order_id"),
    )
    payment_id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        validation_alias=AliasChoices("paymentId", "razorpay_payment_id"),
    )
    signature: str = Field(
        ...,
        min_length=1,
        max_length=256,
        validation_alias=AliasChoices("signature", "razorpay_signature"),
    )


class VerifyPaymentResponse(BaseModel):
    status: Literal["Verified", "AlreadyVerified", "SignatureMismatch", "UnknownOrder"]
    message: str


class OrderStatusResponse(ApiBase):
    order_id: str = Field(..., alias="orderId")
    amount: int
    currency: str
    purpose: str
    package_name: Optional[str] = Field(None, alias="packageName")
    payment_status: str = Field(..., alias="paymentStatus")
    created_at: Optional[datetime] = Field(None, alias="createdAt")
    paid_at: Optional[datetime] = Field(None, alias="paidAt")


# ── Feedback & Chat Models ──────────────────────────────────────────

class FeedbackRequest(BaseModel):
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=254)
    message: str = Field(..., min_length=1, max_length=5000)


class ChatMessage(BaseModel):
    role: Literal["system", "user", "assistant"]
    content: str = Field(..., min_length=1, max_length=8000)


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(..., min_length=1, max_length=50)
    model: Optional[str] = Field(None, max_length=100)


class ChatResponse(BaseModel):
    reply: str
    model: str
