from __future__ import annotations

import json
from typing import Any, Callable

from fastapi import Depends, Request
from fastapi.exceptions import RequestValidationError
from pydantic import BaseModel, ValidationError

from freelancy_api.auth.identity import RequestContext
from freelancy_api.core.errors import BadRequestError
from freelancy_api.dependencies.auth import require_request_context


def authenticated_body(model: type[BaseModel]) -> Callable[..., Any]:
    """
    Build a dependency that reads the JSON body into ``model`` only after the
    caller has been authenticated, so anonymous requests get 401 whatever the
    body looks like.

    Unparseable JSON is a 400; JSON that does not fit ``model`` is a 422.
    """

    async def read_body(
        request: Request,
        ctx: RequestContext = Depends(require_request_context),  # noqa: ARG001
    ) -> BaseModel:
        raw = await request.body()
        try:
            data = json.loads(raw)
        except ValueError as exc:
            raise BadRequestError("invalid JSON body") from exc

        try:
            return model.model_validate(data)
        except ValidationError as exc:
            errors = [{**err, "loc": ("body", *err["loc"])} for err in exc.errors(include_url=False)]
            raise RequestValidationError(errors) from exc

    return read_body
