"""
Payment routes — order creation and payment verification.

Endpoints:
    POST /create-order            — checkout order (amount in ₹)
    POST /donation-order          — donation order (amount in ₹)
    POST /travel-order            — travel package booking (amount in ₹)
    POST /verify-payment          — verify checkout/donation payment
    POST /travel-verify-payment   — verify travel payment (RAZORPAY_SECRET)
    GET  /orders/{order_id}       — order status view

Verification answers with a flat {status, message} body:
    Verified / AlreadyVerified → 200
    SignatureMismatch          → 400
    UnknownOrder               → 404
"""
import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from config import settings
from deps import (
    get_checkout_payment_service,
    get_donation_payment_service,
    get_order_ledger,
    get_travel_payment_service,
)
from domain.constants import PURPOSE_CHECKOUT, PURPOSE_DONATION, PURPOSE_TRAVEL
from domain.enums import VerificationResult
from domain.errors import NotFoundError
from domain.responses import ERROR_RESPONSES
from middleware.rate_limit import rate_limit
from models import (
    CreateOrderRequest,
    CreateOrderResponse,
    OrderStatusResponse,
    PayerDetails,
    TravelOrderRequest,
    VerifyPaymentRequest,
    VerifyPaymentResponse,
)
from services.order_ledger import OrderLedger
from services.payment_service import OrderMetadata, PaymentService, to_minor_units
from utils.validators import normalize_currency, validated_order_id

logger = logging.getLogger(__name__)

router = APIRouter(tags=["payments"])

_VERIFY_FAILURE_CODES = {
    VerificationResult.SIGNATURE_MISMATCH: status.HTTP_400_BAD_REQUEST,
    VerificationResult.UNKNOWN_ORDER: status.HTTP_404_NOT_FOUND,
}

_VERIFY_MESSAGES = {
    VerificationResult.VERIFIED: "Payment verified successfully",
    VerificationResult.ALREADY_VERIFIED: "Payment was already verified",
    VerificationResult.SIGNATURE_MISMATCH: "Payment verification failed",
    VerificationResult.UNKNOWN_ORDER: "Invalid order",
}


def _metadata(purpose: str, payer: PayerDetails | None, package_name: str | None = None) -> OrderMetadata:
    payer = payer or PayerDetails()
    return OrderMetadata(
        purpose=purpose,
        package_name=package_name,
        payer_name=payer.name,
        payer_email=payer.email,
        payer_phone=payer.phone,
    )


def _verification_response(result: VerificationResult) -> JSONResponse:
    body = VerifyPaymentResponse(status=result.value, message=_VERIFY_MESSAGES[result])
    if result.is_success:
        status_code = status.HTTP_200_OK
    else:
        status_code = _VERIFY_FAILURE_CODES[result]
    return JSONResponse(status_code=status_code, content=body.model_dump())


# ── Order creation ──────────────────────────────────────────────────


@router.post("/create-order", response_model=CreateOrderResponse, responses=ERROR_RESPONSES)
async def create_order(
    req: CreateOrderRequest,
    payments: PaymentService = Depends(get_checkout_payment_service),
):
    """Create a checkout order. Amount is in major units and converted to paise."""
    result = await payments.create_order(
        to_minor_units(req.amount),
        normalize_currency(req.currency or settings.default_currency),
        _metadata(PURPOSE_CHECKOUT, req.payer),
    )
    return CreateOrderResponse(**result)


@router.post("/donation-order", response_model=CreateOrderResponse, responses=ERROR_RESPONSES)
async def create_donation_order(
    req: CreateOrderRequest,
    payments: PaymentService = Depends(get_donation_payment_service),
):
    """Create a donation order with optional donor details."""
    result = await payments.create_order(
        to_minor_units(req.amount),
        normalize_currency(req.currency or settings.default_currency),
        _metadata(PURPOSE_DONATION, req.payer),
    )
    return CreateOrderResponse(**result)


@router.post("/travel-order", response_model=CreateOrderResponse, responses=ERROR_RESPONSES)
async def create_travel_order(
    req: TravelOrderRequest,
    payments: PaymentService = Depends(get_travel_payment_service),
):
    """Book a travel package: mint a gateway order and record the traveler."""
    result = await payments.create_order(
        to_minor_units(req.amount),
        normalize_currency(req.currency or settings.default_currency),
        _metadata(PURPOSE_TRAVEL, req.traveler, package_name=req.package_name),
    )
    return CreateOrderResponse(**result)


# ── Verification ────────────────────────────────────────────────────


@router.post("/verify-payment", response_model=VerifyPaymentResponse)
async def verify_payment(
    req: VerifyPaymentRequest,
    payments: PaymentService = Depends(get_checkout_payment_service),
    _rate=Depends(rate_limit(max_requests=30, window_seconds=60)),
):
    """Verify a checkout or donation payment signature."""
    result = await payments.verify_payment(req.order_id, req.payment_id, req.signature)
    return _verification_response(result)


@router.post("/travel-verify-payment", response_model=VerifyPaymentResponse)
async def travel_verify_payment(
    req: VerifyPaymentRequest,
    payments: PaymentService = Depends(get_travel_payment_service),
    _rate=Depends(rate_limit(max_requests=30, window_seconds=60)),
):
    """Verify a travel booking payment signature."""
    result = await payments.verify_payment(req.order_id, req.payment_id, req.signature)
    return _verification_response(result)


# ── Status ──────────────────────────────────────────────────────────


@router.get("/orders/{order_id}", response_model=OrderStatusResponse)
async def get_order_status(
    order_id: str = Depends(validated_order_id),
    ledger: OrderLedger = Depends(get_order_ledger),
):
    """Current state of an order. Payer contact details are not exposed."""
    order = await ledger.find_by_order_id(order_id)
    if order is None:
        raise NotFoundError("Order", order_id)
    return OrderStatusResponse.model_validate(order)
