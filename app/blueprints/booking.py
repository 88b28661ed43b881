"""Booking blueprint — /api/book-call

Webhook called by the conversational voice agent during a phone call.
Every message in the response body is spoken back to the caller, so
errors are phrased for speech and raw error text goes in `details` only.

Route Map:
  POST /api/book-call    — Save booking, resolve CRM contact, create appointment
  OPTIONS /api/book-call — CORS preflight
"""

import json
import logging

from flask import Blueprint, current_app, jsonify, request

from app.config import IntegrationSettings
from app.decorators import cors
from app.services.booking_service import (
    REQUIRED_FIELDS,
    book_call,
    clean_booking_data,
    confirmation_message,
)

booking_bp = Blueprint("booking", __name__, url_prefix="/api")

logger = logging.getLogger(__name__)


@booking_bp.route("/book-call", methods=["POST", "OPTIONS"])
@cors(allow_headers="Content-Type, Authorization")
def book():
    """
    Book a discovery call for a phone caller.

    Expects JSON (content type not enforced):
      { name, phone, email?, preferredDate?, preferredTime?, notes? }

    Returns: { success: true, message, leadId, contactId, appointmentId,
               appointmentTime } or { success: false, error, message }
    """
    raw = request.get_json(force=True, silent=True)
    data = clean_booking_data(raw if isinstance(raw, dict) else {})

    if any(not data.get(field) for field in REQUIRED_FIELDS):
        return jsonify(
            success=False,
            error="Name and phone number are required",
            message="I need your name and phone number to book the appointment.",
        ), 400

    logger.info(f"Received booking request: {json.dumps(data)}")

    try:
        settings = IntegrationSettings.from_config(current_app.config)
        booking = book_call(data, settings)
    except Exception as e:
        logger.error(f"Error processing booking: {e}")
        return jsonify(
            success=False,
            error="Failed to book appointment",
            message=(
                "I apologize, but I encountered an issue booking your appointment. "
                "Let me transfer you to a team member who can help you directly."
            ),
            details=str(e),
        ), 500

    return jsonify(
        success=True,
        message=confirmation_message(data, booking),
        leadId=booking.lead.id,
        contactId=booking.contact.get("id") if booking.contact else None,
        appointmentId=booking.appointment.get("id") if booking.appointment else None,
        appointmentTime=(
            booking.appointment.get("startTime") or booking.start.isoformat()
        ) if booking.scheduled else None,
    ), 200
