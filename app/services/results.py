"""Typed outcome of a best-effort integration step.

Optional integrations (CRM contact, opportunity, payment link) must never
block the lead from being saved. Instead of returning None on failure,
each step returns an IntegrationResult so callers can tell "not
configured" apart from "provider failed" apart from "succeeded".
"""

from dataclasses import dataclass
from typing import Any

OK = "ok"
SKIPPED = "skipped"
FAILED = "failed"


@dataclass(frozen=True)
class IntegrationResult:
    status: str
    value: Any = None
    reason: str | None = None

    @classmethod
    def ok(cls, value):
        return cls(status=OK, value=value)

    @classmethod
    def skipped(cls, reason):
        return cls(status=SKIPPED, reason=reason)

    @classmethod
    def failed(cls, reason):
        return cls(status=FAILED, reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.status == OK

    def get(self, key, default=None):
        """Read a field from the provider payload, or default if the step didn't succeed."""
        if not self.succeeded or not isinstance(self.value, dict):
            return default
        return self.value.get(key, default)
