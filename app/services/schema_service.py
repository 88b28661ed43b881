"""Schema bootstrap for the leads table.

Not part of request handling. Run once per database via `flask setup-db`
or `python setup_db.py`.
"""

import logging

import sqlalchemy

from app.extensions import db
from app.models.lead import Lead

logger = logging.getLogger(__name__)


def bootstrap_leads_table():
    """Create the leads table if absent, then confirm it via the catalog.

    Safe to run repeatedly. Returns True if the table exists afterwards.
    """
    Lead.__table__.create(bind=db.engine, checkfirst=True)
    exists = sqlalchemy.inspect(db.engine).has_table(Lead.__tablename__)
    logger.info(f"Leads table exists: {exists}")
    return exists
