from fastapi import APIRouter, Depends

from freelancy_api.auth.identity import RequestContext
from freelancy_api.core.config import Settings
from freelancy_api.dependencies.auth import require_request_context
from freelancy_api.dependencies.app_state import get_settings, get_store
from freelancy_api.dependencies.body import authenticated_body
from freelancy_api.schemas.common import DeleteResultOut, InsertResultOut, UpdateResultOut
from freelancy_api.schemas.job import JobCreate, JobOut, JobUpdate
from freelancy_api.services import jobs as job_service
from freelancy_api.services.store import ResourceStore

router = APIRouter(prefix="/Jobs", tags=["jobs"])


@router.get("", response_model=list[JobOut])
def list_jobs(
    email: str | None = None,
    store: ResourceStore = Depends(get_store),
):
    return job_service.list_jobs(store, email=email)


@router.get("/{job_id}", response_model=JobOut)
def get_job(job_id: str, store: ResourceStore = Depends(get_store)):
    return job_service.get_job(store, job_id)


@router.post("", response_model=InsertResultOut)
def create_job(
    payload: JobCreate = Depends(authenticated_body(JobCreate)),
    ctx: RequestContext = Depends(require_request_context),
    store: ResourceStore = Depends(get_store),
):
    return job_service.create_job(store, ctx, payload.model_dump())


@router.patch("/{job_id}", response_model=UpdateResultOut)
def update_job(
    job_id: str,
    payload: JobUpdate = Depends(authenticated_body(JobUpdate)),
    ctx: RequestContext = Depends(require_request_context),
    store: ResourceStore = Depends(get_store),
):
    return job_service.update_job(store, ctx, job_id, payload.model_dump())


@router.delete("/{job_id}", response_model=DeleteResultOut)
def delete_job(
    job_id: str,
    ctx: RequestContext = Depends(require_request_context),
    store: ResourceStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    return job_service.delete_job(
        store,
        ctx,
        job_id,
        require_owner=settings.JOB_DELETE_REQUIRES_OWNER,
    )
