"""
Tests for the Razorpay gateway client wrapper (SDK mocked).
"""
import time
from unittest.mock import MagicMock, patch

import pytest
import requests

from domain.errors import GatewayError
from services.gateway_client import RazorpayGatewayClient, TimeoutSession


def _client_with(create) -> RazorpayGatewayClient:
    sdk = MagicMock()
    if callable(create) and not isinstance(create, MagicMock):
        sdk.order.create.side_effect = create
    else:
        sdk.order.create = create
    return RazorpayGatewayClient("rzp_test_key", "secret", timeout_seconds=0.5, client=sdk)


class TestCreateRemoteOrder:

    @pytest.mark.unit
    async def test_returns_gateway_order(self):
        create = MagicMock(return_value={"id": "order_abc", "amount": 50_000, "currency": "INR"})
        gateway = _client_with(create)

        order = await gateway.create_remote_order(50_000, "INR", receipt="order_rcptid_1", notes={"purpose": "travel"})

        assert order["id"] == "order_abc"
        create.assert_called_once_with(
            data={
                "amount": 50_000,
                "currency": "INR",
                "payment_capture": 1,
                "notes": {"purpose": "travel"},
                "receipt": "order_rcptid_1",
            }
        )

    @pytest.mark.unit
    async def test_sdk_error_becomes_gateway_error(self):
        create = MagicMock(side_effect=RuntimeError("BAD_REQUEST_ERROR: amount exceeds maximum"))
        gateway = _client_with(create)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.create_remote_order(50_000, "INR")

        assert exc_info.value.status_code == 502
        # Raw SDK text is not forwarded to callers
        assert "amount exceeds" not in exc_info.value.message
        assert exc_info.value.details == {"reason": "RuntimeError"}

    @pytest.mark.unit
    async def test_timeout_becomes_gateway_error(self):
        def slow_create(**kwargs):
            time.sleep(1.0)
            return {"id": "order_late"}

        gateway = _client_with(slow_create)

        with pytest.raises(GatewayError) as exc_info:
            await gateway.create_remote_order(50_000, "INR")

        assert "timed out" in exc_info.value.message

    @pytest.mark.unit
    @pytest.mark.parametrize("response", [{}, {"id": ""}, None, ["order_abc"]])
    async def test_malformed_response_rejected(self, response):
        gateway = _client_with(MagicMock(return_value=response))

        with pytest.raises(GatewayError):
            await gateway.create_remote_order(50_000, "INR")

    @pytest.mark.unit
    def test_key_id_exposed_secret_not(self):
        gateway = _client_with(MagicMock())
        assert gateway.key_id == "rzp_test_key"
        assert not any("secret" == str(v) for v in vars(gateway).values())


class TestTimeoutSession:

    @pytest.mark.unit
    def test_sdk_client_gets_timeout_session(self):
        gateway = RazorpayGatewayClient("rzp_test_key", "secret", timeout_seconds=3.0)

        session = gateway._client.session
        assert isinstance(session, TimeoutSession)
        assert session.timeout == 3.0

    @pytest.mark.unit
    def test_default_timeout_applied(self):
        session = TimeoutSession(2.5)
        with patch.object(requests.Session, "request", return_value="ok") as request:
            session.post("https://api.razorpay.com/v1/orders", json={"amount": 100})

        assert request.call_args.kwargs["timeout"] == 2.5

    @pytest.mark.unit
    def test_explicit_timeout_kept(self):
        session = TimeoutSession(2.5)
        with patch.object(requests.Session, "request", return_value="ok") as request:
            session.get("https://api.razorpay.com/v1/orders/order_1", timeout=9)

        assert request.call_args.kwargs["timeout"] == 9
