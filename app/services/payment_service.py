"""Payment service — Airwallex payment links for the consultation fee.

Flow per request:
1. Log in with client ID + API key to obtain a short-lived bearer token
   (cached on the client instance, so at most one login per request)
2. Create a single-use payment link referencing the lead ("LEAD-<id>")
"""

import logging

import requests

from app.services.crm_service import split_name
from app.services.errors import PaymentApiError

logger = logging.getLogger(__name__)


class PaymentClient:
    def __init__(self, settings):
        self.settings = settings
        self._token = None

    def _post(self, path, headers, payload=None):
        url = f"{self.settings.payment_api_url}{path}"
        try:
            resp = requests.post(
                url, headers=headers, json=payload, timeout=self.settings.http_timeout
            )
        except requests.RequestException as e:
            raise PaymentApiError(f"Payment request failed: {e}") from e

        try:
            result = resp.json()
        except ValueError:
            result = {"raw": resp.text}

        if resp.status_code >= 400:
            message = (
                isinstance(result, dict) and result.get("message")
            ) or resp.text or "Payment API error"
            logger.error(f"Payment API error {resp.status_code} on {path}: {result}")
            raise PaymentApiError(message, status_code=resp.status_code, payload=result)
        return result

    def get_token(self):
        """Exchange client credentials for a bearer token (once per instance)."""
        if self._token:
            return self._token

        result = self._post(
            "/api/v1/authentication/login",
            headers={
                "Content-Type": "application/json",
                "x-client-id": self.settings.payment_client_id,
                "x-api-key": self.settings.payment_api_key,
            },
        )
        token = result.get("token")
        if not token:
            raise PaymentApiError("Login response did not include a token", payload=result)
        self._token = token
        return token

    def create_payment_link(self, name, email, lead_id):
        """Create a one-time consultation fee link for a lead. Returns the link dict."""
        token = self.get_token()
        first_name, last_name = split_name(name)
        fee = self.settings.consultation_fee

        payload = {
            "amount": fee,
            "currency": self.settings.consultation_currency,
            "title": "Web Design Consultation Fee",
            "description": (
                f"Non-refundable ${fee} consultation fee to schedule your "
                "discovery call with Advanced Marketing."
            ),
            "reusable": False,
            "reference": f"LEAD-{lead_id}",
            "shopper": {
                "email": email,
                "first_name": first_name,
                "last_name": last_name,
            },
            "collectable_shopper_info": {
                "phone_number": False,
                "shipping_address": False,
            },
        }

        link = self._post(
            "/api/v1/pa/payment_links/create",
            headers={
                "Authorization": f"Bearer {token}",
                "Content-Type": "application/json",
            },
            payload=payload,
        )
        logger.info(f"Payment link created: {link.get('id')} for lead {lead_id}")
        return link
