# freelancy_api/auth/ownership.py
"""
Ownership policy.

Pure decisions over a verified Principal and the owner field of a resource
that has already been fetched. No I/O: callers fetch first (404 on a missing
resource), then ask the policy (403 on denial).
"""
from __future__ import annotations

import enum
import logging

from freelancy_api.auth.identity import Principal, normalize_email
from freelancy_api.core.errors import ForbiddenError

logger = logging.getLogger(__name__)


class Operation(str, enum.Enum):
    UPDATE_JOB = "update_job"
    DELETE_JOB = "delete_job"
    DELETE_ACCEPTED_TASK = "delete_accepted_task"
    LIST_ACCEPTED_TASKS_BY_EMAIL = "list_accepted_tasks_by_email"


def may_access(principal: Principal, owner_email: str | None, operation: Operation) -> bool:
    """
    True when ``principal`` may perform ``operation`` on a resource owned by
    ``owner_email``.

    For LIST_ACCEPTED_TASKS_BY_EMAIL the owner is the requested ``email`` filter.
    An empty owner never matches, so records without an owner are unreachable.
    """
    owner = normalize_email(owner_email)
    if not owner or not principal.email:
        return False
    return principal.email == owner


def ensure_access(
    principal: Principal,
    owner_email: str | None,
    operation: Operation,
    message: str = "forbidden",
) -> None:
    if not may_access(principal, owner_email, operation):
        logger.info("Ownership check denied %s for %s", operation.value, principal.email)
        raise ForbiddenError(message)
