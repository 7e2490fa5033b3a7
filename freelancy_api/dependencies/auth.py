from __future__ import annotations

import logging

from fastapi import Depends, Header, Request
from fastapi.security.utils import get_authorization_scheme_param

from freelancy_api.auth.firebase import TokenVerificationError
from freelancy_api.auth.identity import IdentityVerifier, RequestContext
from freelancy_api.core.errors import UnauthorizedError
from freelancy_api.dependencies.request_id import get_correlation_id

logger = logging.getLogger(__name__)


def get_credential(authorization: str | None = Header(default=None)) -> str:
    # "<scheme> <token>"; the scheme itself is not checked.
    _scheme, token = get_authorization_scheme_param(authorization)
    return token.strip()


def get_verifier(request: Request) -> IdentityVerifier:
    return request.app.state.verifier


def require_request_context(
    token: str = Depends(get_credential),
    verifier: IdentityVerifier = Depends(get_verifier),
    request_id: str = Depends(get_correlation_id),
) -> RequestContext:
    """
    Validates:
      - Authorization: <scheme> <token>
      - token against the identity provider (single attempt)
    Returns:
      - RequestContext carrying the verified Principal

    Every failure answers the same 401 body; the cause is only logged.
    """
    if not token:
        logger.info("Missing credential request_id=%s", request_id)
        raise UnauthorizedError()

    try:
        principal = verifier.verify(token)
    except TokenVerificationError as exc:
        logger.warning("Invalid credential (%s): %s request_id=%s", type(exc).__name__, exc, request_id)
        raise UnauthorizedError()

    if not principal.email:
        logger.warning("Verified token carries no email request_id=%s", request_id)
        raise UnauthorizedError()

    return RequestContext(principal=principal, request_id=request_id)
