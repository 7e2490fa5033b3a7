import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from freelancy_api.auth.firebase import FirebaseTokenVerifier
from freelancy_api.auth.identity import IdentityVerifier
from freelancy_api.core.config import Settings, settings as default_settings
from freelancy_api.core.database import build_engine, build_session_factory, check_db_connection
from freelancy_api.core.errors import StoreError
from freelancy_api.routes.accepted_tasks import router as accepted_tasks_router
from freelancy_api.routes.jobs import router as jobs_router
from freelancy_api.services.store import ResourceStore, SqlResourceStore

logger = logging.getLogger(__name__)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    400: "BAD_REQUEST",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "VALIDATION_ERROR",
    500: "INTERNAL_ERROR",
}


def _error_code(status_code: int) -> str:
    return _ERROR_CODE_BY_STATUS.get(int(status_code), "HTTP_ERROR")


def http_exception_handler(request: Request, exc: StarletteHTTPException):  # noqa: ARG001
    detail = exc.detail
    message = detail if isinstance(detail, str) and detail else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": _error_code(exc.status_code), "message": message},
        headers=getattr(exc, "headers", None),
    )


def validation_exception_handler(request: Request, exc: RequestValidationError):  # noqa: ARG001
    return JSONResponse(
        status_code=422,
        content={
            "error": "VALIDATION_ERROR",
            "message": "Invalid request payload",
            "details": {"errors": exc.errors()},
        },
    )


def store_exception_handler(request: Request, exc: StoreError):  # noqa: ARG001
    # Logged with traceback by the store; the driver detail never reaches the client.
    return JSONResponse(
        status_code=500,
        content={"error": "INTERNAL_ERROR", "message": "internal server error"},
    )


def _build_sql_store(settings: Settings) -> SqlResourceStore:
    engine = build_engine(settings.database_url)
    store = SqlResourceStore(build_session_factory(engine))
    if not settings.is_prod:
        store.create_schema(engine)
    check_db_connection(engine)
    return store


def create_app(
    settings: Settings | None = None,
    store: ResourceStore | None = None,
    verifier: IdentityVerifier | None = None,
) -> FastAPI:
    """
    Build the API with explicitly constructed collaborators.

    Anything not passed in is built from ``settings``. The verifier is built
    before the app exists, so a bad FIREBASE_SERVICE_KEY fails startup rather
    than the first request.
    """
    settings = settings or default_settings

    if verifier is None:
        verifier = FirebaseTokenVerifier.from_settings(settings)
    if store is None:
        store = _build_sql_store(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Startup config: ENV=%s JOB_DELETE_REQUIRES_OWNER=%s store=%s",
            settings.ENV,
            settings.JOB_DELETE_REQUIRES_OWNER,
            type(store).__name__,
        )
        yield

    app = FastAPI(title="Freelancy API", lifespan=lifespan)
    app.state.settings = settings
    app.state.store = store
    app.state.verifier = verifier

    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StoreError, store_exception_handler)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS or ["*"],
        allow_credentials=bool(settings.CORS_ORIGINS),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(jobs_router)
    app.include_router(accepted_tasks_router)

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "server is running"

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    return app
