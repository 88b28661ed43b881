"""Exceptions raised by outbound API clients."""


class IntegrationError(Exception):
    """An outbound provider call failed (HTTP >= 400 or network error)."""

    provider = "integration"

    def __init__(self, message, status_code=None, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def __str__(self):
        if self.status_code:
            return f"{self.provider} error {self.status_code}: {self.message}"
        return f"{self.provider} error: {self.message}"


class CrmApiError(IntegrationError):
    provider = "CRM"


class PaymentApiError(IntegrationError):
    provider = "Payment provider"
