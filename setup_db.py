#!/usr/bin/env python3
"""Create the leads table in the configured database.

Idempotent: an existing table is left untouched. After creating, the
database catalog is queried to confirm the table is there.

Usage:
    python3 setup_db.py
    flask setup-db        (same thing, via the Flask CLI)
"""

import sys
import os

# Ensure we can import the app
sys.path.insert(0, os.path.dirname(__file__))

# Load .env
from dotenv import load_dotenv
load_dotenv()


def setup():
    from app import create_app
    from app.services.schema_service import bootstrap_leads_table

    app = create_app(os.environ.get("FLASK_ENV", "production"))

    with app.app_context():
        print(f"\n  Database: {app.config['SQLALCHEMY_DATABASE_URI'] and 'configured' or 'NOT SET'}")
        try:
            exists = bootstrap_leads_table()
        except Exception as e:
            print(f"  Error: {e}\n")
            sys.exit(1)

        if exists:
            print("  Leads table created successfully!")
        print(f"  Table exists: {exists}\n")


if __name__ == "__main__":
    setup()
