"""CRM service — GoHighLevel (LeadConnector) REST API calls.

Responsible for:
- Authenticated requests against the CRM API (bearer key + Version header)
- Creating contacts for landing-page leads
- Finding (by phone) or creating contacts for phone bookings
- Creating pipeline opportunities with a value estimated from the budget
- Creating calendar appointments

Errors are raised as CrmApiError. Whether a failure is fatal is decided by
the caller: the lead flow swallows it, the booking flow does not.
"""

import logging

import requests

from app.services.errors import CrmApiError

logger = logging.getLogger(__name__)

# Budget bucket -> estimated deal value (USD)
BUDGET_VALUES = {
    "1000-2500": 1500,
    "2500-5000": 3500,
    "5000+": 7500,
    "not-sure": 2500,
}
DEFAULT_OPPORTUNITY_VALUE = 2500

LEAD_SOURCE = "Advanced Marketing Landing Page"
PHONE_SOURCE = "Phone Call - Voice AI"
DEFAULT_APPOINTMENT_NOTES = "Booked via phone call with voice AI agent"


def split_name(name):
    """Split a full name into (first_name, last_name).

    "Mary Jane Smith" -> ("Mary", "Jane Smith"); "Madonna" -> ("Madonna", "").
    """
    parts = (name or "").split()
    if not parts:
        return "", ""
    return parts[0], " ".join(parts[1:])


def estimate_opportunity_value(budget):
    """Map a budget bucket label to an estimated monetary value."""
    return BUDGET_VALUES.get(budget, DEFAULT_OPPORTUNITY_VALUE)


def _error_message(payload, fallback):
    """Pull the provider's message out of an error body."""
    if isinstance(payload, dict):
        message = payload.get("message") or payload.get("error")
        if isinstance(message, list):
            message = "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return fallback


class CrmClient:
    """Thin client for the CRM REST API.

    One instance per request; holds no state beyond its settings.
    """

    def __init__(self, settings):
        self.settings = settings

    def _headers(self):
        return {
            "Authorization": f"Bearer {self.settings.crm_api_key}",
            "Content-Type": "application/json",
            "Version": self.settings.crm_api_version,
        }

    def request(self, path, method="GET", payload=None, params=None):
        """Perform an authenticated request and return the parsed JSON body.

        - HTTP status >= 400 raises CrmApiError with the provider's message.
        - A non-JSON success body is returned as {"raw": <text>}.
        - Network errors are re-raised as CrmApiError.
        """
        url = f"{self.settings.crm_api_url}{path}"

        try:
            resp = requests.request(
                method,
                url,
                headers=self._headers(),
                json=payload,
                params=params,
                timeout=self.settings.http_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"CRM request {method} {path} failed: {e}")
            raise CrmApiError(f"CRM request failed: {e}") from e

        try:
            result = resp.json()
        except ValueError:
            result = None

        if resp.status_code >= 400:
            logger.error(f"CRM API error {resp.status_code} on {method} {path}: {result or resp.text}")
            raise CrmApiError(
                _error_message(result, resp.text or "CRM API error"),
                status_code=resp.status_code,
                payload=result,
            )

        if result is None:
            logger.warning(f"CRM returned a non-JSON body for {method} {path}")
            return {"raw": resp.text}

        return result

    # ──────────────────────────────────────────────
    # Contacts
    # ──────────────────────────────────────────────

    def create_contact(self, lead_data):
        """Create a contact for a landing-page lead. Returns the contact dict (or None)."""
        first_name, last_name = split_name(lead_data.get("name"))
        budget = lead_data.get("budget")
        project = lead_data.get("project")

        payload = {
            "firstName": first_name,
            "lastName": last_name,
            "email": lead_data.get("email"),
            "phone": lead_data.get("phone"),
            "companyName": lead_data.get("company") or "",
            "locationId": self.settings.crm_location_id,
            "source": LEAD_SOURCE,
            "tags": [
                "web-design-lead",
                "pending-payment",
                f"budget-{budget}" if budget else "budget-unknown",
            ],
            "customFields": [
                {"key": "budget", "value": budget or "Not specified"},
                {"key": "project_details", "value": project or "Not provided"},
            ],
        }

        result = self.request("/contacts/", "POST", payload)
        contact = result.get("contact")
        logger.info(f"CRM contact created: {contact.get('id') if contact else None}")
        return contact

    def find_or_create_contact(self, name, email=None, phone=None):
        """Resolve a phone caller to a contact.

        Searches by phone first; the first match is updated in place and
        returned. Otherwise a new contact is created. The phone is sent
        as given, so "+1 555..." and "555..." are different numbers here.
        """
        first_name, last_name = split_name(name)
        payload = {
            "locationId": self.settings.crm_location_id,
            "firstName": first_name,
            "lastName": last_name,
            "email": email or "",
            "phone": phone or "",
            "source": PHONE_SOURCE,
            "tags": ["phone-lead", "voice-ai", "discovery-call-requested"],
        }

        if phone:
            found = self.request(
                "/contacts/search",
                "GET",
                params={"locationId": self.settings.crm_location_id, "phone": phone},
            )
            matches = found.get("contacts") or []
            if matches:
                existing = matches[0]
                logger.info(f"Found existing CRM contact: {existing.get('id')}")
                self.request(f"/contacts/{existing['id']}", "PUT", payload)
                return existing

        result = self.request("/contacts/", "POST", payload)
        contact = result.get("contact")
        if not contact or not contact.get("id"):
            raise CrmApiError("CRM did not return the created contact", payload=result)
        logger.info(f"CRM contact created: {contact['id']}")
        return contact

    # ──────────────────────────────────────────────
    # Opportunities & Appointments
    # ──────────────────────────────────────────────

    def create_opportunity(self, contact, budget=None):
        """Open a pipeline opportunity for a contact. Returns the opportunity dict (or None)."""
        if not contact or not contact.get("id"):
            return None

        name = (
            f"{self.settings.opportunity_brand} - "
            f"{contact.get('firstName') or ''} {contact.get('lastName') or ''}"
        ).strip()

        payload = {
            "pipelineId": self.settings.crm_pipeline_id,
            "locationId": self.settings.crm_location_id,
            "name": name,
            "pipelineStageId": self.settings.crm_pipeline_stage_id,
            "status": "open",
            "contactId": contact["id"],
            "monetaryValue": estimate_opportunity_value(budget),
            "source": "Landing Page",
        }

        result = self.request("/opportunities/", "POST", payload)
        opportunity = result.get("opportunity")
        logger.info(f"CRM opportunity created: {opportunity.get('id') if opportunity else None}")
        return opportunity

    def create_appointment(self, contact, start_time, end_time, notes=None):
        """Book a calendar appointment for a contact.

        start_time / end_time are timezone-aware datetimes.
        """
        title = (
            f"Discovery Call - {contact.get('firstName') or ''} "
            f"{contact.get('lastName') or ''}"
        ).strip()

        payload = {
            "locationId": self.settings.crm_location_id,
            "calendarId": self.settings.crm_calendar_id,
            "contactId": contact["id"],
            "title": title,
            "appointmentStatus": "confirmed",
            "startTime": start_time.isoformat(),
            "endTime": end_time.isoformat(),
            "notes": notes or DEFAULT_APPOINTMENT_NOTES,
        }

        logger.info(f"Creating appointment for contact {contact['id']} at {payload['startTime']}")
        result = self.request("/appointments/", "POST", payload)
        return result.get("appointment") or result
