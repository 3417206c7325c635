"""
Request-scoped helpers — build the workflow executor for a request.
"""

from __future__ import annotations

from fastapi import Header
from typing import Optional

from resume_tailor.config import settings
from resume_tailor.services.workflow_executor import WorkflowExecutor, WorkflowExecutorConfig


async def get_workflow_executor(
    x_workflow_key: Optional[str] = Header(None, alias="X-Workflow-Key"),
) -> WorkflowExecutor:
    """
    FastAPI dependency returning an executor configured from settings.

    An X-Workflow-Key header replaces the configured n8n API key for this request.
    """
    config = WorkflowExecutorConfig.from_settings(settings)
    if x_workflow_key:
        config = config.model_copy(update={"api_key": x_workflow_key})
    return WorkflowExecutor(config)
