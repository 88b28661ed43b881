"""Lead service — landing-page lead submissions.

Responsible for:
- Validating the submitted fields
- Saving the lead (the only step that can fail the request)
- Best-effort CRM contact + pipeline opportunity
- Best-effort consultation fee payment link

Every integration step after the database write returns an
IntegrationResult; a provider outage is logged and reported, never raised.
"""

import logging
from dataclasses import dataclass

from app.extensions import db
from app.models.lead import Lead
from app.services.crm_service import CrmClient
from app.services.payment_service import PaymentClient
from app.services.results import IntegrationResult

logger = logging.getLogger(__name__)

LEAD_FIELDS = ("name", "company", "email", "phone", "budget", "project")
REQUIRED_FIELDS = ("name", "email", "phone")


@dataclass
class LeadSubmission:
    lead: Lead
    contact: IntegrationResult
    opportunity: IntegrationResult
    payment_link: IntegrationResult

    @property
    def payment_url(self):
        return self.payment_link.get("url")

    @property
    def payment_required(self) -> bool:
        return self.payment_link.succeeded


def clean_value(value):
    """Strip strings and stringify numbers; blanks, booleans and 0 become None."""
    if isinstance(value, str):
        return value.strip() or None
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    return None


def clean_lead_data(data):
    """Keep the known fields, stripped; blanks become None."""
    return {field: clean_value(data.get(field)) for field in LEAD_FIELDS}


def missing_fields(data, required=REQUIRED_FIELDS):
    return [field for field in required if not data.get(field)]


def save_lead(data):
    """Insert the lead row and return it (committed)."""
    lead = Lead(
        name=data["name"],
        company=data.get("company"),
        email=data.get("email"),
        phone=data["phone"],
        budget=data.get("budget"),
        project_details=data.get("project"),
    )
    db.session.add(lead)
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    logger.info(f"Lead saved to DB: id={lead.id}")
    return lead


def _create_contact(crm, data, settings):
    if not settings.crm_enabled:
        logger.info("CRM integration skipped - missing API credentials")
        return IntegrationResult.skipped("CRM not configured")
    try:
        contact = crm.create_contact(data)
    except Exception as e:
        logger.error(f"CRM contact creation failed: {e}")
        return IntegrationResult.failed(str(e))
    if not contact or not contact.get("id"):
        return IntegrationResult.failed("CRM response did not include a contact")
    return IntegrationResult.ok(contact)


def _create_opportunity(crm, contact, data, settings):
    if not settings.pipeline_enabled:
        return IntegrationResult.skipped("Pipeline not configured")
    if not contact.succeeded:
        return IntegrationResult.skipped("No CRM contact")
    try:
        opportunity = crm.create_opportunity(contact.value, data.get("budget"))
    except Exception as e:
        logger.error(f"CRM opportunity creation failed: {e}")
        return IntegrationResult.failed(str(e))
    if not opportunity:
        return IntegrationResult.failed("CRM response did not include an opportunity")
    return IntegrationResult.ok(opportunity)


def _create_payment_link(data, lead, settings):
    if not settings.payments_enabled:
        logger.info("Payment integration skipped - missing API credentials")
        return IntegrationResult.skipped("Payments not configured")
    try:
        link = PaymentClient(settings).create_payment_link(
            data["name"], data.get("email"), lead.id
        )
    except Exception as e:
        logger.error(f"Payment link creation failed for lead {lead.id}: {e}")
        return IntegrationResult.failed(str(e))
    return IntegrationResult.ok(link)


def submit_lead(data, settings):
    """Save a validated lead, then run the optional integrations in order.

    The contact must exist before its opportunity, and the lead ID before
    the payment link. Database errors propagate to the caller.
    """
    lead = save_lead(data)

    crm = CrmClient(settings)
    contact = _create_contact(crm, data, settings)
    opportunity = _create_opportunity(crm, contact, data, settings)
    payment_link = _create_payment_link(data, lead, settings)

    return LeadSubmission(
        lead=lead,
        contact=contact,
        opportunity=opportunity,
        payment_link=payment_link,
    )
