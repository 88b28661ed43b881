"""
Custom route decorators for the public form endpoints.

- cors: answers CORS preflight (OPTIONS) with an empty 200 and adds
  permissive CORS headers to every response the view returns.
"""

from functools import wraps

from flask import make_response, request


def add_cors_headers(response, allow_headers="Content-Type"):
    """Add CORS headers so cross-origin JS submissions work."""
    response.headers["Access-Control-Allow-Origin"] = "*"
    response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = allow_headers
    return response


def cors(allow_headers="Content-Type"):
    """Handle preflight and decorate responses for a POST + OPTIONS route."""

    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            if request.method == "OPTIONS":
                return add_cors_headers(make_response("", 200), allow_headers)
            response = make_response(f(*args, **kwargs))
            return add_cors_headers(response, allow_headers)

        return decorated

    return decorator
