"""
Workflow Executor — call external n8n workflows, retry, fall back locally.

Responsibilities:
  • Look up workflow definitions from config.WORKFLOWS
  • Validate input payloads against each workflow's declared schema
  • POST to base URL + webhook path with an optional Bearer key
  • Retry failed calls with linear backoff (backoff × attempt)
  • When every attempt fails, answer from a local heuristic where one exists

The executor never reads the environment itself; build it from an explicit
WorkflowExecutorConfig (see WorkflowExecutorConfig.from_settings).
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
import uuid
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Optional

import httpx
from pydantic import BaseModel

from resume_tailor.config import WORKFLOWS, Settings
from resume_tailor.models.workflow_models import WorkflowDefinition, WorkflowHealth, WorkflowResponse
from resume_tailor.services.keyword_analyzer import analyze_keyword_importance, extract_keywords

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


class WorkflowError(Exception):
    """A workflow call failed (transport, HTTP status, reply or output schema)."""


class WorkflowValidationError(WorkflowError, ValueError):
    """Unknown workflow or input that violates its schema; never retried."""


class WorkflowExecutorConfig(BaseModel):
    base_url: str = "http://localhost:5678"
    api_key: Optional[str] = None
    retries: int = 2
    backoff_seconds: float = 1.0
    health_timeout: float = 5.0

    @classmethod
    def from_settings(cls, settings: Settings) -> "WorkflowExecutorConfig":
        return cls(
            base_url=settings.n8n_webhook_url.rstrip("/"),
            api_key=settings.n8n_api_key,
            retries=settings.workflow_retries,
            backoff_seconds=settings.workflow_backoff_seconds,
            health_timeout=settings.workflow_health_timeout,
        )


# ── Registry ─────────────────────────────────────────────────────────────────


def get_workflow(workflow_key: str) -> WorkflowDefinition:
    entry = WORKFLOWS.get(workflow_key)
    if entry is None:
        raise WorkflowValidationError(f"Unknown workflow: {workflow_key}")
    return WorkflowDefinition(key=workflow_key, **entry)


def list_workflows() -> list[WorkflowDefinition]:
    return [get_workflow(key) for key in WORKFLOWS]


# ── Schema checks ────────────────────────────────────────────────────────────


def _matches_type(value: Any, type_name: str) -> bool:
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "string[]":
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    if type_name == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if type_name == "object":
        return isinstance(value, dict)
    return True


def validate_input(data: dict[str, Any], schema: dict[str, str]) -> None:
    """
    Check a payload against a workflow input schema.

    Types are "string", "string[]", "number" or "object"; a trailing "?"
    marks the field optional. None counts as absent.
    """
    for field, declared in schema.items():
        optional = declared.endswith("?")
        type_name = declared.rstrip("?")
        value = data.get(field)

        if value is None:
            if not optional:
                raise WorkflowValidationError(f"Missing required field: {field}")
            continue
        if not _matches_type(value, type_name):
            raise WorkflowValidationError(f"Field {field} must be of type {type_name}")


def validate_output(data: Any, schema: dict[str, str]) -> None:
    """Reply data must be an object; declared fields that are present must have the declared type."""
    if not isinstance(data, dict):
        raise WorkflowError("Workflow returned no data object")
    for field, declared in schema.items():
        value = data.get(field)
        if value is not None and not _matches_type(value, declared.rstrip("?")):
            raise WorkflowError(f"Workflow output field {field} is not of type {declared}")


# ── Executor ─────────────────────────────────────────────────────────────────


class WorkflowExecutor:
    """Stateless client for the external workflow service."""

    def __init__(
        self,
        config: WorkflowExecutorConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.config = config
        self._transport = transport
        self._sleep = sleep

    async def execute_workflow(
        self,
        workflow_key: str,
        data: dict[str, Any],
        timeout: Optional[float] = None,
        retries: Optional[int] = None,
    ) -> WorkflowResponse:
        """
        Run a workflow: attempt, retry after backoff × attempt, then fall back.

        Raises WorkflowValidationError for an unknown workflow or invalid input;
        every other failure ends in a local fallback (or success=False).
        """
        workflow = get_workflow(workflow_key)
        validate_input(data, workflow.input_schema)

        timeout = workflow.timeout if timeout is None else timeout
        retries = self.config.retries if retries is None else retries
        started = time.perf_counter()
        last_error: Optional[WorkflowError] = None

        for attempt in range(1, retries + 2):
            try:
                reply = await self._make_request(workflow, data, timeout)
                return WorkflowResponse(
                    success=True,
                    data=reply.get("data"),
                    execution_id=reply.get("executionId") or f"exec_{uuid.uuid4().hex[:12]}",
                    processing_time=_elapsed_ms(started),
                )
            except WorkflowError as e:
                last_error = e
                logger.warning(f"Workflow {workflow_key} attempt {attempt} failed: {e}")
                if attempt <= retries:
                    await self._sleep(self.config.backoff_seconds * attempt)

        logger.error(f"All attempts failed for workflow {workflow_key}, falling back to local processing")
        return fallback_to_local(workflow_key, data, last_error)

    async def _make_request(
        self,
        workflow: WorkflowDefinition,
        data: dict[str, Any],
        timeout: float,
    ) -> dict[str, Any]:
        url = f"{self.config.base_url}{workflow.webhook_path}"
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"

        body = {
            "workflowId": workflow.id,
            "data": data,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "requestId": f"req_{uuid.uuid4().hex[:12]}",
        }

        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=timeout) as client:
                resp = await client.post(url, json=body, headers=headers)
        except Exception as e:
            # covers socket errors raised outside httpx.HTTPError (bad port, invalid URL)
            raise WorkflowError(f"Request to {url} failed: {e!r}") from e

        if resp.status_code >= 400:
            raise WorkflowError(f"HTTP {resp.status_code}: {resp.reason_phrase}")

        try:
            reply = resp.json()
        except ValueError as e:
            raise WorkflowError("Workflow reply is not valid JSON") from e

        if not isinstance(reply, dict) or not reply.get("success"):
            error = reply.get("error") if isinstance(reply, dict) else None
            raise WorkflowError(error or "Workflow execution failed")

        validate_output(reply.get("data"), workflow.output_schema)
        return reply

    async def execute_batch(self, requests: list[tuple[str, dict[str, Any]]]) -> list[WorkflowResponse]:
        """Run workflows concurrently; one failure only degrades its own entry."""
        results = await asyncio.gather(
            *(self.execute_workflow(key, data) for key, data in requests),
            return_exceptions=True,
        )

        responses: list[WorkflowResponse] = []
        for index, result in enumerate(results):
            if isinstance(result, BaseException):
                logger.warning(f"Batch entry {index} failed: {result}")
                responses.append(WorkflowResponse(
                    success=False,
                    execution_id=f"batch_failed_{index}_{uuid.uuid4().hex[:8]}",
                    processing_time=0,
                    error=str(result),
                ))
            else:
                responses.append(result)
        return responses

    async def health_check(self) -> WorkflowHealth:
        url = f"{self.config.base_url}/healthz"
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self.config.health_timeout) as client:
                resp = await client.get(url)
        except Exception as e:
            return WorkflowHealth(status="unhealthy", details=f"Connection failed: {e!r}")

        if resp.is_success:
            return WorkflowHealth(status="healthy", details="n8n service is responsive")
        return WorkflowHealth(status="unhealthy", details=f"HTTP {resp.status_code}")


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


# ── Local fallbacks ──────────────────────────────────────────────────────────


def fallback_to_local(
    workflow_key: str,
    data: dict[str, Any],
    error: Optional[Exception],
) -> WorkflowResponse:
    handler = _FALLBACKS.get(workflow_key)
    if handler is None:
        return WorkflowResponse(
            success=False,
            execution_id=f"fallback_{uuid.uuid4().hex[:8]}",
            processing_time=0,
            error=f"No fallback available for workflow {workflow_key}: {error}",
            fallback=True,
        )

    started = time.perf_counter()
    result = handler(data)
    return WorkflowResponse(
        success=True,
        data=result,
        execution_id=f"local_{workflow_key.lower()}_{uuid.uuid4().hex[:8]}",
        processing_time=_elapsed_ms(started),
        fallback=True,
    )


def local_keyword_extraction(data: dict[str, Any]) -> dict[str, Any]:
    job_description = data.get("jobDescription") or ""
    analysis = analyze_keyword_importance(extract_keywords(job_description), job_description)
    return {
        "technicalKeywords": [k.keyword for k in analysis if k.category == "technical"],
        "softSkills": [k.keyword for k in analysis if k.category == "soft"],
        "requirements": [k.keyword for k in analysis if k.importance > 7],
        "priorities": {k.keyword: k.importance for k in analysis},
    }


def local_skill_matching(data: dict[str, Any]) -> dict[str, Any]:
    skills = data.get("candidateSkills") or []
    requirements = data.get("jobRequirements") or []

    def overlaps(a: str, b: str) -> bool:
        return a.lower() in b.lower() or b.lower() in a.lower()

    matched = [s for s in skills if any(overlaps(s, r) for r in requirements)]
    missing = [r for r in requirements if not any(overlaps(s, r) for s in skills)]
    score = len(matched) / len(requirements) * 100 if requirements else 100

    return {
        "matchScore": round(score),
        "matchedSkills": matched,
        "missingSkills": missing,
        "skillGaps": missing,
        "recommendations": [f"Consider adding {skill} to your skillset" for skill in missing],
    }


def local_content_optimization(data: dict[str, Any]) -> dict[str, Any]:
    content = data.get("sectionContent") or ""
    keywords = data.get("targetKeywords") or []

    word_count = len(content.split())
    hits = sum(len(re.findall(re.escape(k), content, re.I)) for k in keywords if k)
    density = hits / word_count * 100 if word_count else 0.0

    suggestions: list[str] = []
    if density < 2:
        suggestions.append("Consider adding more relevant keywords")
    if density > 5:
        suggestions.append("Reduce keyword density to avoid over-optimization")
    if len(content) < 100:
        suggestions.append("Consider expanding content with more details")

    return {
        "optimizedContent": content,
        "keywordDensity": round(density, 2),
        "readabilityScore": 75,
        "suggestions": suggestions,
    }


_FALLBACKS: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
    "KEYWORD_EXTRACTION": local_keyword_extraction,
    "SKILL_MATCHING": local_skill_matching,
    "CONTENT_OPTIMIZATION": local_content_optimization,
}
