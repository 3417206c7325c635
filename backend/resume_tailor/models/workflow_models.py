from pydantic import BaseModel
from typing import Any, Optional

from resume_tailor.models.base import CamelModel


class WorkflowDefinition(BaseModel):
    """One external n8n workflow, as registered in config.WORKFLOWS."""

    key: str
    id: str
    name: str
    description: str
    webhook_path: str
    input_schema: dict[str, str]
    output_schema: dict[str, str]
    timeout: float  # seconds


class WorkflowResponse(CamelModel):
    """Result of a workflow execution, remote or local fallback."""

    success: bool
    data: Any = None
    execution_id: str
    processing_time: int  # ms
    error: Optional[str] = None
    fallback: bool = False  # answered by a local heuristic, not the remote service


class WorkflowHealth(BaseModel):
    status: str  # "healthy" | "unhealthy"
    details: str
