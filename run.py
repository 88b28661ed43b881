"""Local development entry point.

Usage:
    python run.py                 (serves both endpoints on :5001)
    PORT=8888 python run.py

Endpoints:
    POST /api/submit-lead   — landing page lead form
    POST /api/book-call     — voice agent booking webhook
"""

import os

from dotenv import load_dotenv

load_dotenv()  # Load .env before anything else

from app import create_app  # noqa: E402

app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=int(os.environ.get("PORT", 5001)))
