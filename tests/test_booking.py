"""Tests for the voice-agent booking endpoint.

Covers:
- CORS preflight (Authorization allowed) and method handling
- Required name + phone, with a message phrased for speech
- Booking saved, contact resolved, appointment created
- Confirmation message wording
- Any failure -> 500 with hand-off message and diagnostic details
- CRM / calendar not configured -> saved, callback promised
"""

from unittest.mock import patch

import pytest

from app.models.lead import Lead
from app.services.errors import CrmApiError

URL = "/api/book-call"

BOOKING = {
    "name": "John Doe",
    "email": "john@example.com",
    "phone": "+15550100",
    "preferredDate": "2024-02-15",
    "preferredTime": "2pm",
    "notes": "Wants a bakery website",
}


class TestMethods:

    def test_preflight_allows_authorization_header(self, client):
        resp = client.options(URL)
        assert resp.status_code == 200
        assert resp.data == b""
        assert resp.headers["Access-Control-Allow-Origin"] == "*"
        assert resp.headers["Access-Control-Allow-Headers"] == "Content-Type, Authorization"

    def test_get_returns_405(self, client):
        resp = client.get(URL)
        assert resp.status_code == 405
        assert resp.get_json()["error"] == "Method not allowed"


class TestValidation:

    @pytest.mark.parametrize("field", ["name", "phone"])
    def test_missing_field_returns_spoken_400(self, field, client, app):
        payload = dict(BOOKING)
        del payload[field]

        resp = client.post(URL, json=payload)

        assert resp.status_code == 400
        body = resp.get_json()
        assert body["success"] is False
        assert body["message"] == "I need your name and phone number to book the appointment."
        with app.app_context():
            assert Lead.query.count() == 0

    def test_non_json_body_returns_400(self, client):
        resp = client.post(URL, data="name=John&phone=555")
        assert resp.status_code == 400

    def test_false_and_zero_are_not_values(self, client, app):
        resp = client.post(URL, json={"name": False, "phone": 0})

        assert resp.status_code == 400
        with app.app_context():
            assert Lead.query.count() == 0


@patch("app.services.booking_service.CrmClient.create_appointment")
@patch("app.services.booking_service.CrmClient.find_or_create_contact")
class TestBookCall:

    def test_books_requested_slot(self, mock_contact, mock_appt, client, app):
        mock_contact.return_value = {"id": "c_1", "firstName": "John", "lastName": "Doe"}
        mock_appt.return_value = {"id": "a_1", "startTime": "2024-02-15T14:00:00+00:00"}

        resp = client.post(URL, json=BOOKING)

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["success"] is True
        assert body["contactId"] == "c_1"
        assert body["appointmentId"] == "a_1"
        assert body["appointmentTime"] == "2024-02-15T14:00:00+00:00"
        assert body["leadId"] is not None
        assert body["message"] == (
            "Perfect! I've scheduled your discovery call for 2024-02-15 at 2pm. "
            "You'll receive a confirmation email shortly at john@example.com. "
            "Looking forward to speaking with you!"
        )

        mock_contact.assert_called_once_with(
            "John Doe", email="john@example.com", phone="+15550100"
        )
        contact, start, end = mock_appt.call_args.args
        assert start.isoformat() == "2024-02-15T14:00:00+00:00"
        assert (end - start).total_seconds() == 45 * 60
        assert mock_appt.call_args.kwargs["notes"] == "Wants a bakery website"

        with app.app_context():
            lead = Lead.query.one()
            assert lead.phone == "+15550100"
            assert lead.project_details == "Wants a bakery website"

    def test_without_email_or_slot(self, mock_contact, mock_appt, client, app):
        mock_contact.return_value = {"id": "c_1"}
        mock_appt.return_value = {"id": "a_1"}

        resp = client.post(URL, json={"name": "Madonna", "phone": "555-0100"})

        assert resp.status_code == 200
        body = resp.get_json()
        _, start, _ = mock_appt.call_args.args
        assert f"discovery call for {start:%Y-%m-%d} at 2:00 PM." in body["message"]
        assert "the email we have on file" in body["message"]
        assert body["appointmentTime"] is not None
        with app.app_context():
            assert Lead.query.one().email is None

    def test_date_only_speaks_booked_slot(self, mock_contact, mock_appt, client):
        mock_contact.return_value = {"id": "c_1"}
        mock_appt.return_value = {"id": "a_1"}
        payload = dict(BOOKING)
        del payload["preferredTime"]

        body = client.post(URL, json=payload).get_json()

        _, start, _ = mock_appt.call_args.args
        assert start.date().isoformat() != "2024-02-15"
        assert f"discovery call for {start:%Y-%m-%d} at 2:00 PM." in body["message"]
        assert "2024-02-15" not in body["message"]

    def test_crm_failure_returns_handoff_500(self, mock_contact, mock_appt, client, app):
        mock_contact.side_effect = CrmApiError("Unauthorized", status_code=401)

        resp = client.post(URL, json=BOOKING)

        assert resp.status_code == 500
        body = resp.get_json()
        assert body["success"] is False
        assert body["error"] == "Failed to book appointment"
        assert "transfer you to a team member" in body["message"]
        assert "Unauthorized" in body["details"]
        mock_appt.assert_not_called()
        # Booking is kept even though the CRM failed
        with app.app_context():
            assert Lead.query.count() == 1

    def test_appointment_failure_returns_handoff_500(self, mock_contact, mock_appt, client):
        mock_contact.return_value = {"id": "c_1"}
        mock_appt.side_effect = CrmApiError("slot unavailable", status_code=400)

        resp = client.post(URL, json=BOOKING)

        assert resp.status_code == 500
        assert "slot unavailable" in resp.get_json()["details"]

    def test_crm_not_configured_promises_callback(self, mock_contact, mock_appt,
                                                  client, app, monkeypatch):
        monkeypatch.setitem(app.config, "GHL_LOCATION_ID", None)

        resp = client.post(URL, json=BOOKING)

        assert resp.status_code == 200
        body = resp.get_json()
        assert body["contactId"] is None
        assert body["appointmentId"] is None
        assert "call you back" in body["message"]
        mock_contact.assert_not_called()
        with app.app_context():
            assert Lead.query.count() == 1

    def test_calendar_not_configured_skips_appointment(self, mock_contact, mock_appt,
                                                       client, app, monkeypatch):
        monkeypatch.setitem(app.config, "GHL_CALENDAR_ID", None)
        mock_contact.return_value = {"id": "c_1"}

        body = client.post(URL, json=BOOKING).get_json()

        assert body["contactId"] == "c_1"
        assert body["appointmentId"] is None
        mock_appt.assert_not_called()


class TestBookCallHttp:
    """End to end through the CRM client with requests mocked."""

    @patch("app.services.crm_service.requests.request")
    def test_unparseable_time_books_default_slot(self, mock_request, client, fake_response):
        mock_request.side_effect = [
            fake_response(200, {"contacts": [{"id": "c_9", "firstName": "John", "lastName": "Doe"}]}),
            fake_response(200, {"contact": {"id": "c_9"}}),
            fake_response(201, {"appointment": {"id": "a_9"}}),
        ]

        payload = dict(BOOKING, preferredTime="sometime in the afternoon")
        resp = client.post(URL, json=payload)

        assert resp.status_code == 200
        appt_payload = mock_request.call_args_list[2].kwargs["json"]
        assert "T14:00:00" in appt_payload["startTime"]
        assert "T14:45:00" in appt_payload["endTime"]
        assert appt_payload["title"] == "Discovery Call - John Doe"
        body = resp.get_json()
        booked_day = appt_payload["startTime"][:10]
        assert f"discovery call for {booked_day} at 2:00 PM." in body["message"]
        assert "sometime in the afternoon" not in body["message"]
        assert "2024-02-15" not in body["message"]
