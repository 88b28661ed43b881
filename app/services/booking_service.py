"""Booking service — discovery calls booked by the voice agent.

Unlike the lead form, every step here is on the critical path: the caller
is told the call is booked only if the CRM accepted it. Provider errors
propagate to the blueprint, which turns them into a hand-off response.
The booking itself is still saved first so it is never lost.
"""

import logging
from dataclasses import dataclass
from datetime import datetime

from app.models.lead import Lead
from app.services.crm_service import CrmClient
from app.services.lead_service import clean_value, save_lead
from app.services.scheduling import requested_start, resolve_appointment_window

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("name", "phone")
BOOKING_FIELDS = ("name", "email", "phone", "preferredDate", "preferredTime", "notes")


@dataclass
class Booking:
    lead: Lead
    start: datetime
    end: datetime
    requested: bool = False
    contact: dict | None = None
    appointment: dict | None = None

    @property
    def scheduled(self) -> bool:
        return self.appointment is not None


def clean_booking_data(data):
    return {field: clean_value(data.get(field)) for field in BOOKING_FIELDS}


def book_call(data, settings, now=None):
    """Save the booking, resolve the caller's contact, and create the appointment.

    With the CRM or calendar unconfigured the booking is saved but not
    scheduled; the confirmation then promises a callback instead.
    """
    lead = save_lead({
        "name": data["name"],
        "email": data.get("email"),
        "phone": data["phone"],
        "project": data.get("notes"),
    })

    preferred_date, preferred_time = data.get("preferredDate"), data.get("preferredTime")
    start, end = resolve_appointment_window(preferred_date, preferred_time, now=now)
    booking = Booking(
        lead=lead,
        start=start,
        end=end,
        requested=requested_start(preferred_date, preferred_time) is not None,
    )

    if not settings.crm_enabled:
        logger.info("CRM integration skipped - booking saved without appointment")
        return booking

    crm = CrmClient(settings)
    booking.contact = crm.find_or_create_contact(
        data["name"], email=data.get("email"), phone=data["phone"]
    )
    logger.info(f"Contact created/updated: {booking.contact.get('id')}")

    if not settings.calendar_enabled:
        logger.info("Calendar not configured - appointment skipped")
        return booking

    booking.appointment = crm.create_appointment(
        booking.contact, start, end, notes=data.get("notes")
    )
    logger.info(f"Appointment booked successfully: {booking.appointment.get('id')}")
    return booking


def spoken_time(start):
    """2:00 PM style, no leading zero."""
    return start.strftime("%I:%M %p").lstrip("0")


def confirmation_message(data, booking):
    """Sentence the voice agent reads back to the caller.

    The caller's own words are repeated only when their slot was booked;
    otherwise the default slot that was actually booked is read out.
    """
    if not booking.scheduled:
        return (
            "Thank you! I've passed your details to our team and someone will "
            "call you back shortly to confirm a time for your discovery call."
        )

    if booking.requested:
        when = f" for {data['preferredDate']} at {data['preferredTime']}"
    else:
        when = f" for {booking.start:%Y-%m-%d} at {spoken_time(booking.start)}"

    email = data.get("email") or "the email we have on file"
    return (
        f"Perfect! I've scheduled your discovery call{when}. You'll receive a "
        f"confirmation email shortly at {email}. Looking forward to speaking with you!"
    )
