"""Lead model.

One row per inbound submission: landing-page lead forms and phone-call
bookings from the voice agent. The row is written before any CRM or
payment integration runs, so a downstream outage never loses a lead.
"""

from app.extensions import db


class Lead(db.Model):
    __tablename__ = "leads"

    # -- Budget buckets offered by the landing page form --
    BUDGETS = [
        "1000-2500",
        "2500-5000",
        "5000+",
        "not-sure",
    ]

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    name = db.Column(db.String(255), nullable=False)
    company = db.Column(db.String(255), nullable=True)
    email = db.Column(
        db.String(255), nullable=True
    )  # required for form leads, optional for phone bookings
    phone = db.Column(db.String(50), nullable=False)
    budget = db.Column(db.String(50), nullable=True)  # one of BUDGETS, unvalidated
    project_details = db.Column(db.Text, nullable=True)
    created_at = db.Column(
        db.DateTime(timezone=True), server_default=db.func.now()
    )

    def __repr__(self):
        return f"<Lead {self.id} {self.name}>"
