from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from freelancy_api.auth.identity import RequestContext, normalize_email
from freelancy_api.auth.ownership import Operation, ensure_access
from freelancy_api.core.errors import BadRequestError, NotFoundError
from freelancy_api.services.records import (
    JOB_SERVER_KEYS,
    MAX_EMAIL_LENGTH,
    RESERVED_KEYS,
    Job,
    clean_fields,
    is_valid_identifier,
)
from freelancy_api.services.store import ResourceStore

logger = logging.getLogger(__name__)


def get_job_or_404(store: ResourceStore, job_id: str) -> Job:
    if not is_valid_identifier(job_id):
        raise BadRequestError("invalid job id")
    job = store.get_job(job_id)
    if not job:
        raise NotFoundError("job not found")
    return job


def list_jobs(store: ResourceStore, email: str | None = None) -> list[dict[str, Any]]:
    owner = normalize_email(email) or None
    return [j.to_document() for j in store.list_jobs(email=owner)]


def get_job(store: ResourceStore, job_id: str) -> dict[str, Any]:
    return get_job_or_404(store, job_id).to_document()


def create_job(store: ResourceStore, ctx: RequestContext, data: dict[str, Any]) -> dict[str, Any]:
    """
    The owner is the ``email`` from the body, not the caller's identity;
    ``postedAt`` is always stamped here.
    """
    email = normalize_email(data.get("email"))
    if not email:
        raise BadRequestError("email is required")
    if len(email) > MAX_EMAIL_LENGTH:
        raise BadRequestError(f"email must be at most {MAX_EMAIL_LENGTH} characters")

    result = store.insert_job(
        email=email,
        posted_at=datetime.now(timezone.utc),
        fields=clean_fields(data, JOB_SERVER_KEYS),
    )
    logger.info(
        "Job %s created by %s (owner=%s) request_id=%s",
        result.inserted_id,
        ctx.principal.email,
        email,
        ctx.request_id,
    )
    return result.to_dict()


def update_job(
    store: ResourceStore,
    ctx: RequestContext,
    job_id: str,
    patch: dict[str, Any],
) -> dict[str, Any]:
    job = get_job_or_404(store, job_id)
    ensure_access(ctx.principal, job.email, Operation.UPDATE_JOB)

    immutable = sorted(k for k in patch if k in JOB_SERVER_KEYS or k in RESERVED_KEYS)
    if immutable:
        raise BadRequestError(f"cannot change {', '.join(immutable)}")

    result = store.update_job(job.id, patch)
    logger.info(
        "Job %s updated by %s fields=%s request_id=%s",
        job.id,
        ctx.principal.email,
        sorted(patch),
        ctx.request_id,
    )
    return result.to_dict()


def delete_job(
    store: ResourceStore,
    ctx: RequestContext,
    job_id: str,
    require_owner: bool = True,
) -> dict[str, Any]:
    job = get_job_or_404(store, job_id)
    if require_owner:
        ensure_access(ctx.principal, job.email, Operation.DELETE_JOB)

    result = store.delete_job(job.id)
    logger.info("Job %s deleted by %s request_id=%s", job.id, ctx.principal.email, ctx.request_id)
    return result.to_dict()
