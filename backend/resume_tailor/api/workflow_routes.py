from fastapi import APIRouter, Depends

from resume_tailor.models.workflow_models import WorkflowDefinition, WorkflowHealth
from resume_tailor.services.workflow_executor import WorkflowExecutor, list_workflows
from resume_tailor.utils.dependencies import get_workflow_executor

router = APIRouter()


@router.get("", response_model=list[WorkflowDefinition])
async def list_workflow_definitions():
    """The external workflows this service can call."""
    return list_workflows()


@router.get("/health", response_model=WorkflowHealth)
async def workflow_health(executor: WorkflowExecutor = Depends(get_workflow_executor)):
    """Whether the n8n service answers its health endpoint."""
    return await executor.health_check()
