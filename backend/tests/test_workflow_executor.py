import json
import unittest

import httpx

from resume_tailor.services.workflow_executor import (
    WorkflowExecutor,
    WorkflowExecutorConfig,
    WorkflowValidationError,
    list_workflows,
    local_content_optimization,
    validate_input,
)

SKILL_INPUT = {
    "candidateSkills": ["Python", "SQL"],
    "jobRequirements": ["python", "docker"],
    "industryContext": "tech",
}

SKILL_OUTPUT = {
    "matchScore": 80,
    "matchedSkills": ["Python"],
    "missingSkills": ["docker"],
    "skillGaps": ["docker"],
    "recommendations": ["Learn docker"],
}


class ExecutorTestCase(unittest.IsolatedAsyncioTestCase):
    """Executor wired to an in-memory transport and a recording sleep."""

    def setUp(self):
        self.requests: list[httpx.Request] = []
        self.sleeps: list[float] = []
        self.replies: list = []

    def make_executor(self, retries: int = 2) -> WorkflowExecutor:
        def handler(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
            if isinstance(reply, Exception):
                raise reply
            return reply

        async def sleep(seconds: float) -> None:
            self.sleeps.append(seconds)

        config = WorkflowExecutorConfig(base_url="http://n8n.test", api_key="secret", retries=retries)
        return WorkflowExecutor(config, transport=httpx.MockTransport(handler), sleep=sleep)


class ExecuteWorkflowTests(ExecutorTestCase):
    async def test_success(self):
        self.replies = [httpx.Response(200, json={"success": True, "data": SKILL_OUTPUT, "executionId": "exec_1"})]
        response = await self.make_executor().execute_workflow("SKILL_MATCHING", SKILL_INPUT)

        self.assertTrue(response.success)
        self.assertFalse(response.fallback)
        self.assertEqual(response.execution_id, "exec_1")
        self.assertEqual(response.data, SKILL_OUTPUT)

        request = self.requests[0]
        self.assertEqual(request.url.path, "/webhook/skill-matching")
        self.assertEqual(request.headers["Authorization"], "Bearer secret")
        body = json.loads(request.content)
        self.assertEqual(body["workflowId"], "skill-matching")
        self.assertEqual(body["data"], SKILL_INPUT)
        self.assertTrue(body["requestId"].startswith("req_"))

    async def test_retries_with_linear_backoff_then_falls_back(self):
        self.replies = [httpx.Response(500)]
        response = await self.make_executor().execute_workflow("SKILL_MATCHING", SKILL_INPUT)

        self.assertEqual(len(self.requests), 3)
        self.assertEqual(self.sleeps, [1.0, 2.0])
        self.assertTrue(response.success)
        self.assertTrue(response.fallback)
        self.assertEqual(response.data["matchScore"], 50)
        self.assertEqual(response.data["matchedSkills"], ["Python"])
        self.assertEqual(response.data["missingSkills"], ["docker"])

    async def test_unsuccessful_reply_is_retried(self):
        self.replies = [
            httpx.Response(200, json={"success": False, "error": "bad"}),
            httpx.Response(200, json={"success": True, "data": SKILL_OUTPUT}),
        ]
        response = await self.make_executor().execute_workflow("SKILL_MATCHING", SKILL_INPUT)

        self.assertTrue(response.success)
        self.assertFalse(response.fallback)
        self.assertEqual(len(self.requests), 2)
        self.assertEqual(self.sleeps, [1.0])

    async def test_output_type_mismatch_counts_as_failure(self):
        self.replies = [httpx.Response(200, json={"success": True, "data": {"matchScore": "high"}})]
        response = await self.make_executor().execute_workflow("SKILL_MATCHING", SKILL_INPUT, retries=0)
        self.assertTrue(response.fallback)
        self.assertEqual(self.sleeps, [])

    async def test_connection_error_falls_back(self):
        self.replies = [httpx.ConnectError("down")]
        response = await self.make_executor(retries=0).execute_workflow(
            "KEYWORD_EXTRACTION", {"jobDescription": "Python developer with Docker experience"},
        )
        self.assertTrue(response.success)
        self.assertTrue(response.fallback)
        self.assertIn("python", response.data["technicalKeywords"])

    async def test_non_httpx_transport_failure_falls_back(self):
        self.replies = [RuntimeError("socket gone")]
        response = await self.make_executor(retries=1).execute_workflow("SKILL_MATCHING", SKILL_INPUT)

        self.assertEqual(len(self.requests), 2)
        self.assertEqual(self.sleeps, [1.0])
        self.assertTrue(response.success)
        self.assertTrue(response.fallback)

    async def test_out_of_range_port_falls_back(self):
        executor = WorkflowExecutor(WorkflowExecutorConfig(base_url="http://localhost:99999", retries=0))
        response = await executor.execute_workflow("SKILL_MATCHING", SKILL_INPUT)

        self.assertTrue(response.success)
        self.assertTrue(response.fallback)
        self.assertEqual(response.data["matchedSkills"], ["Python"])

    async def test_no_fallback_available(self):
        self.replies = [httpx.Response(502)]
        response = await self.make_executor(retries=0).execute_workflow("BULLET_POINT_GENERATOR", {
            "originalBullet": "Built things",
            "role": "Engineer",
            "company": "Acme",
            "achievements": [],
            "targetKeywords": ["python"],
        })
        self.assertFalse(response.success)
        self.assertTrue(response.fallback)
        self.assertIn("No fallback", response.error)

    async def test_invalid_requests_are_never_sent(self):
        self.replies = [httpx.Response(200, json={"success": True, "data": {}})]
        executor = self.make_executor()

        with self.assertRaises(WorkflowValidationError):
            await executor.execute_workflow("NOPE", {})
        with self.assertRaises(WorkflowValidationError):
            await executor.execute_workflow("SKILL_MATCHING", {"candidateSkills": ["Python"]})

        self.assertEqual(self.requests, [])

    async def test_batch_isolates_failures(self):
        self.replies = [httpx.Response(200, json={"success": True, "data": SKILL_OUTPUT})]
        responses = await self.make_executor().execute_batch([("SKILL_MATCHING", SKILL_INPUT), ("NOPE", {})])

        self.assertTrue(responses[0].success)
        self.assertFalse(responses[1].success)
        self.assertEqual(responses[1].error, "Unknown workflow: NOPE")


class HealthCheckTests(ExecutorTestCase):
    async def test_healthy(self):
        self.replies = [httpx.Response(200)]
        health = await self.make_executor().health_check()
        self.assertEqual(health.status, "healthy")
        self.assertEqual(self.requests[0].url.path, "/healthz")

    async def test_unhealthy_status(self):
        self.replies = [httpx.Response(503)]
        health = await self.make_executor().health_check()
        self.assertEqual(health.status, "unhealthy")
        self.assertEqual(health.details, "HTTP 503")

    async def test_unreachable(self):
        self.replies = [httpx.ConnectError("down")]
        health = await self.make_executor().health_check()
        self.assertEqual(health.status, "unhealthy")
        self.assertTrue(health.details.startswith("Connection failed"))

    async def test_out_of_range_port(self):
        executor = WorkflowExecutor(WorkflowExecutorConfig(base_url="http://localhost:99999"))
        health = await executor.health_check()
        self.assertEqual(health.status, "unhealthy")
        self.assertTrue(health.details.startswith("Connection failed"))


class RegistryTests(unittest.TestCase):
    def test_six_workflows(self):
        keys = [w.key for w in list_workflows()]
        self.assertEqual(len(keys), 6)
        self.assertIn("COVER_LETTER_GENERATOR", keys)

    def test_optional_fields(self):
        schema = {"jobDescription": "string", "roleLevel": "string?"}
        validate_input({"jobDescription": "text", "roleLevel": None}, schema)
        with self.assertRaises(WorkflowValidationError):
            validate_input({"jobDescription": 3}, schema)

    def test_local_content_optimization(self):
        result = local_content_optimization({"sectionContent": "python " * 10, "targetKeywords": ["python"]})
        self.assertEqual(result["keywordDensity"], 100.0)
        self.assertIn("Reduce keyword density to avoid over-optimization", result["suggestions"])
        self.assertIn("Consider expanding content with more details", result["suggestions"])


if __name__ == "__main__":
    unittest.main()
