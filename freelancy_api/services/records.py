from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


# Keys a caller can never set inside the descriptive field map.
RESERVED_KEYS = frozenset({"_id", "id"})
JOB_SERVER_KEYS = frozenset({"email", "postedAt"})
ACCEPTED_TASK_SERVER_KEYS = frozenset({"acceptedByEmail", "acceptedAt", "jobId"})

# Column widths of the ownership and job reference columns.
MAX_EMAIL_LENGTH = 320
MAX_JOB_REF_LENGTH = 255


def clean_fields(data: dict[str, Any] | None, server_keys: frozenset[str]) -> dict[str, Any]:
    """Return the caller-supplied descriptive fields, minus reserved/server-owned keys."""
    if not data:
        return {}
    return {k: v for k, v in data.items() if k not in RESERVED_KEYS and k not in server_keys}


def as_utc(dt: datetime) -> datetime:
    # SQLite hands back naive datetimes even for timezone-aware columns.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class Job:
    id: str
    email: str
    posted_at: datetime
    fields: dict[str, Any] = field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        doc = dict(self.fields)
        doc.update(
            {
                "_id": self.id,
                "email": self.email,
                "postedAt": as_utc(self.posted_at).isoformat(),
            }
        )
        return doc


@dataclass(frozen=True)
class AcceptedTask:
    id: str
    accepted_by_email: str
    accepted_at: datetime
    job_id: str | None = None
    fields: dict[str, Any] = field(default_factory=dict)

    def to_document(self) -> dict[str, Any]:
        doc = dict(self.fields)
        doc.update(
            {
                "_id": self.id,
                "jobId": self.job_id,
                "acceptedByEmail": self.accepted_by_email,
                "acceptedAt": as_utc(self.accepted_at).isoformat(),
            }
        )
        return doc


# ---------------------------------------------------------------------------
# Write results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InsertResult:
    inserted_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"acknowledged": True, "insertedId": self.inserted_id}


@dataclass(frozen=True)
class UpdateResult:
    matched_count: int
    modified_count: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "acknowledged": True,
            "matchedCount": self.matched_count,
            "modifiedCount": self.modified_count,
        }


@dataclass(frozen=True)
class DeleteResult:
    deleted_count: int

    def to_dict(self) -> dict[str, Any]:
        return {"acknowledged": True, "deletedCount": self.deleted_count}


def is_valid_identifier(value: str | None) -> bool:
    """Store identifiers are 32 lowercase hex characters."""
    if not value or len(value) != 32:
        return False
    return all(c in "0123456789abcdef" for c in value)
