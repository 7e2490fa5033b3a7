from fastapi import APIRouter, Depends

from freelancy_api.auth.identity import RequestContext
from freelancy_api.dependencies.auth import require_request_context
from freelancy_api.dependencies.app_state import get_store
from freelancy_api.dependencies.body import authenticated_body
from freelancy_api.schemas.accepted_task import AcceptedTaskCreate, AcceptedTaskOut
from freelancy_api.schemas.common import DeleteResultOut, InsertResultOut
from freelancy_api.services import accepted_tasks as task_service
from freelancy_api.services.store import ResourceStore

router = APIRouter(
    prefix="/accepted-tasks",
    tags=["accepted-tasks"],
    dependencies=[Depends(require_request_context)],
)


@router.get("", response_model=list[AcceptedTaskOut])
def list_accepted_tasks(
    email: str | None = None,
    jobId: str | None = None,  # noqa: N803
    ctx: RequestContext = Depends(require_request_context),
    store: ResourceStore = Depends(get_store),
):
    return task_service.list_accepted_tasks(store, ctx, email=email, job_id=jobId)


@router.post("", response_model=InsertResultOut)
def create_accepted_task(
    payload: AcceptedTaskCreate = Depends(authenticated_body(AcceptedTaskCreate)),
    ctx: RequestContext = Depends(require_request_context),
    store: ResourceStore = Depends(get_store),
):
    return task_service.create_accepted_task(store, ctx, payload.model_dump())


@router.delete("/{task_id}", response_model=DeleteResultOut)
def delete_accepted_task(
    task_id: str,
    ctx: RequestContext = Depends(require_request_context),
    store: ResourceStore = Depends(get_store),
):
    return task_service.delete_accepted_task(store, ctx, task_id)
