# freelancy_api/auth/identity.py
"""
Verified caller identity.

A ``Principal`` is only ever built from claims of a token that passed
verification. It is INTERNAL ONLY: handlers use it for ownership decisions and
logging, and it is never read from, or echoed back into, request payloads.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol


def normalize_email(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip().lower()


@dataclass(frozen=True)
class Principal:
    """
    Attributes:
        uid: The identity provider's stable subject (``sub`` claim).
        email: Verified email, stripped and lower-cased. This is the ownership key.
        raw_claims: Decoded token claims for debugging/audit. Should NOT be used
                    for authorization decisions.
    """

    uid: str
    email: str
    raw_claims: dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Principal:
        return cls(
            uid=str(claims.get("sub") or ""),
            email=normalize_email(claims.get("email")),
            raw_claims=dict(claims),
        )

    def to_debug_dict(self) -> dict[str, Any]:
        """Safe subset for logs; excludes raw_claims."""
        return {"uid": self.uid, "email": self.email}


@dataclass(frozen=True)
class RequestContext:
    """
    Per-request value threaded through every protected handler call.
    """

    principal: Principal
    request_id: str


class IdentityVerifier(Protocol):
    """Anything that turns a bearer token into a verified Principal."""

    def verify(self, token: str) -> Principal: ...
