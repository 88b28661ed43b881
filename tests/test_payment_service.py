"""Tests for the payment link client.

Covers:
- Login once per client instance, token reused
- Payment link payload (fee, reference, shopper)
- Provider errors raised as PaymentApiError
"""

from unittest.mock import patch

import pytest
import requests

from app.services.errors import PaymentApiError
from app.services.payment_service import PaymentClient


class TestPaymentClient:

    @patch("app.services.payment_service.requests.post")
    def test_logs_in_then_creates_link(self, mock_post, settings, fake_response):
        mock_post.side_effect = [
            fake_response(201, {"token": "tok_abc"}),
            fake_response(201, {"id": "pl_1", "url": "https://pay.test/l/pl_1"}),
        ]

        link = PaymentClient(settings).create_payment_link(
            "Mary Jane Smith", "mary@example.com", 42
        )

        assert link["url"] == "https://pay.test/l/pl_1"
        login, create = mock_post.call_args_list
        assert login.args[0] == "https://pay.test/api/v1/authentication/login"
        assert login.kwargs["headers"]["x-client-id"] == "client_test"
        assert login.kwargs["headers"]["x-api-key"] == "key_test"
        assert create.args[0] == "https://pay.test/api/v1/pa/payment_links/create"
        assert create.kwargs["headers"]["Authorization"] == "Bearer tok_abc"

        payload = create.kwargs["json"]
        assert payload["amount"] == 100
        assert payload["currency"] == "USD"
        assert payload["reference"] == "LEAD-42"
        assert payload["reusable"] is False
        assert payload["shopper"] == {
            "email": "mary@example.com",
            "first_name": "Mary",
            "last_name": "Jane Smith",
        }

    @patch("app.services.payment_service.requests.post")
    def test_token_fetched_once_per_instance(self, mock_post, settings, fake_response):
        mock_post.return_value = fake_response(201, {"token": "tok_abc"})
        client = PaymentClient(settings)

        assert client.get_token() == "tok_abc"
        assert client.get_token() == "tok_abc"
        assert mock_post.call_count == 1

    @patch("app.services.payment_service.requests.post")
    def test_login_failure_raises(self, mock_post, settings, fake_response):
        mock_post.return_value = fake_response(401, {"message": "Invalid credentials"})

        with pytest.raises(PaymentApiError) as exc:
            PaymentClient(settings).create_payment_link("John Doe", "j@example.com", 1)

        assert exc.value.status_code == 401
        assert "Invalid credentials" in str(exc.value)
        assert mock_post.call_count == 1

    @patch("app.services.payment_service.requests.post")
    def test_network_error_raises(self, mock_post, settings):
        mock_post.side_effect = requests.Timeout("read timed out")

        with pytest.raises(PaymentApiError):
            PaymentClient(settings).get_token()
