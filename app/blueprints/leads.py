"""Leads blueprint — /api/submit-lead

Public endpoint hit by the landing page form. No JavaScript required —
a plain <form> POST works, as does a JSON fetch().

Route Map:
  POST /api/submit-lead    — Save lead, sync to CRM, create payment link
  OPTIONS /api/submit-lead — CORS preflight
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from app.config import IntegrationSettings
from app.decorators import cors
from app.extensions import limiter
from app.services.lead_service import clean_lead_data, missing_fields, submit_lead

leads_bp = Blueprint("leads", __name__, url_prefix="/api")

logger = logging.getLogger(__name__)


@leads_bp.route("/submit-lead", methods=["POST", "OPTIONS"])
@limiter.limit("20 per hour", methods=["POST"])
@cors()
def submit():
    """
    Accept a lead form submission.

    Accepts both JSON and standard HTML form POST (application/x-www-form-urlencoded).

    Required fields: name, email, phone
    Optional fields: company, budget, project

    Returns: { success: true, lead_id, ... } or { success: false, error: "..." }
    """
    # --- Extract data from either JSON or form POST ---
    if request.is_json:
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            return jsonify(success=False, error="Invalid request."), 400
    else:
        data = request.form.to_dict()

    data = clean_lead_data(data)

    # --- Validate required fields ---
    missing = missing_fields(data)
    if missing:
        return jsonify(
            success=False,
            error=f"Missing required fields: {', '.join(missing)}.",
        ), 400

    settings = IntegrationSettings.from_config(current_app.config)

    # --- Save + integrations ---
    try:
        result = submit_lead(data, settings)
    except Exception as e:
        logger.error(f"Error saving lead: {e}")
        return jsonify(
            success=False,
            error="Failed to save your inquiry. Please try again.",
            details=str(e),
        ), 500

    if result.payment_required:
        message = (
            f"Please complete your ${settings.consultation_fee} consultation fee "
            "to secure your meeting slot."
        )
    else:
        message = "Thank you! We'll be in touch within 24 hours."

    return jsonify(
        success=True,
        message=message,
        lead_id=result.lead.id,
        ghl_contact_id=result.contact.get("id"),
        ghl_opportunity_id=result.opportunity.get("id"),
        payment_url=result.payment_url,
        payment_required=result.payment_required,
    ), 200
