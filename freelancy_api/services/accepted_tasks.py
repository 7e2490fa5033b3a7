from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from freelancy_api.auth.identity import RequestContext, normalize_email
from freelancy_api.auth.ownership import Operation, ensure_access
from freelancy_api.core.errors import BadRequestError, NotFoundError
from freelancy_api.services.records import (
    ACCEPTED_TASK_SERVER_KEYS,
    MAX_EMAIL_LENGTH,
    MAX_JOB_REF_LENGTH,
    clean_fields,
    is_valid_identifier,
)
from freelancy_api.services.store import ResourceStore

logger = logging.getLogger(__name__)


def list_accepted_tasks(
    store: ResourceStore,
    ctx: RequestContext,
    email: str | None = None,
    job_id: str | None = None,
) -> list[dict[str, Any]]:
    """
    Filters are AND-ed. Asking for someone else's tasks by ``email`` is
    forbidden; filtering only by ``job_id`` is not ownership-checked.
    """
    owner = None
    if email is not None and email.strip():
        ensure_access(ctx.principal, email, Operation.LIST_ACCEPTED_TASKS_BY_EMAIL, "forbidden access")
        owner = normalize_email(email)

    job_filter = job_id.strip() if job_id and job_id.strip() else None
    tasks = store.list_accepted_tasks(accepted_by_email=owner, job_id=job_filter)
    return [t.to_document() for t in tasks]


def create_accepted_task(
    store: ResourceStore,
    ctx: RequestContext,
    data: dict[str, Any],
) -> dict[str, Any]:
    """
    ``acceptedByEmail`` is always the verified caller, whatever the body says.
    The referenced job is not checked for existence.
    """
    job_id = data.get("jobId")
    if job_id is not None and not isinstance(job_id, str):
        raise BadRequestError("jobId must be a string")
    if job_id is not None and len(job_id) > MAX_JOB_REF_LENGTH:
        raise BadRequestError(f"jobId must be at most {MAX_JOB_REF_LENGTH} characters")
    if len(ctx.principal.email) > MAX_EMAIL_LENGTH:
        raise BadRequestError(f"email must be at most {MAX_EMAIL_LENGTH} characters")

    if data.get("acceptedByEmail") not in (None, ctx.principal.email):
        logger.warning(
            "Ignoring acceptedByEmail supplied by %s request_id=%s",
            ctx.principal.email,
            ctx.request_id,
        )

    result = store.insert_accepted_task(
        accepted_by_email=ctx.principal.email,
        accepted_at=datetime.now(timezone.utc),
        job_id=job_id,
        fields=clean_fields(data, ACCEPTED_TASK_SERVER_KEYS),
    )
    logger.info(
        "Accepted task %s created by %s job_id=%s request_id=%s",
        result.inserted_id,
        ctx.principal.email,
        job_id,
        ctx.request_id,
    )
    return result.to_dict()


def delete_accepted_task(store: ResourceStore, ctx: RequestContext, task_id: str) -> dict[str, Any]:
    if not is_valid_identifier(task_id):
        raise BadRequestError("invalid task id")

    task = store.get_accepted_task(task_id)
    if not task:
        raise NotFoundError("accepted task not found")
    ensure_access(ctx.principal, task.accepted_by_email, Operation.DELETE_ACCEPTED_TASK)

    result = store.delete_accepted_task(task.id)
    logger.info("Accepted task %s deleted by %s request_id=%s", task.id, ctx.principal.email, ctx.request_id)
    return result.to_dict()
