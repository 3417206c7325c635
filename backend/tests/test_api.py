import unittest
from unittest.mock import patch

import httpx
from fastapi.testclient import TestClient

from resume_tailor.main import app
from resume_tailor.services.workflow_executor import WorkflowExecutor, WorkflowExecutorConfig
from resume_tailor.utils.dependencies import get_workflow_executor
from tests.sample_data import SAMPLE_JOB, SAMPLE_RESUME


def stub_executor(status_code: int) -> WorkflowExecutor:
    """Executor whose workflow service always answers with `status_code`."""

    async def no_sleep(seconds: float) -> None:
        pass

    transport = httpx.MockTransport(lambda request: httpx.Response(status_code))
    return WorkflowExecutor(WorkflowExecutorConfig(retries=0), transport=transport, sleep=no_sleep)


def unreachable_executor() -> WorkflowExecutor:
    """Executor pointed at a port no socket can connect to."""

    async def no_sleep(seconds: float) -> None:
        pass

    config = WorkflowExecutorConfig(base_url="http://localhost:99999", retries=0)
    return WorkflowExecutor(config, sleep=no_sleep)


class ApiTestCase(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def tearDown(self):
        app.dependency_overrides.clear()


class AnalyzeEndpointTests(ApiTestCase):
    def test_missing_resume(self):
        response = self.client.post("/api/analyze", json={})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json(), {"error": "Resume text is required"})

    def test_analyze(self):
        response = self.client.post(
            "/api/analyze",
            json={"resumeText": SAMPLE_RESUME, "targetRole": "Software Engineer"},
        )
        self.assertEqual(response.status_code, 200)

        body = response.json()
        self.assertTrue(body["success"])
        data = body["data"]
        self.assertIn("passesATS", data)
        self.assertEqual(data["passesATS"], data["score"] >= 70)
        self.assertIn("keywordMatch", data["breakdown"])
        self.assertIn("structureScore", data["breakdown"])
        self.assertLessEqual(len(data["recommendations"]), 5)

    def test_internal_error(self):
        with patch("resume_tailor.api.analyze_routes.analyze_resume", side_effect=RuntimeError("boom")):
            response = self.client.post("/api/analyze", json={"resumeText": SAMPLE_RESUME})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Analysis failed", "message": "boom"})


class OptimizeEndpointTests(ApiTestCase):
    def test_missing_job_description(self):
        response = self.client.post("/api/optimize", json={"resumeText": SAMPLE_RESUME})
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Resume text and job description are required")

    def test_invalid_level(self):
        response = self.client.post("/api/optimize", json={
            "resumeText": SAMPLE_RESUME,
            "jobDescription": SAMPLE_JOB,
            "optimizationLevel": "extreme",
        })
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["error"], "Invalid request")

    def test_optimize_locally(self):
        response = self.client.post("/api/optimize", json={
            "resumeText": SAMPLE_RESUME,
            "jobDescription": SAMPLE_JOB,
        })
        self.assertEqual(response.status_code, 200)

        data = response.json()["data"]
        self.assertIn("docker", data["optimizedResume"])
        self.assertIsInstance(data["atsScore"], int)
        self.assertIsInstance(data["keyChanges"], list)
        impacts = [r["impact"] for r in data["recommendations"]]
        self.assertEqual(impacts, sorted(impacts, reverse=True))

    def test_ai_request_falls_back_when_service_down(self):
        app.dependency_overrides[get_workflow_executor] = lambda: stub_executor(503)
        response = self.client.post("/api/optimize", json={
            "resumeText": SAMPLE_RESUME,
            "jobDescription": SAMPLE_JOB,
            "useAI": True,
        })
        self.assertEqual(response.status_code, 200)
        self.assertIn("docker", response.json()["data"]["optimizedResume"])

    def test_ai_request_falls_back_when_service_unreachable(self):
        app.dependency_overrides[get_workflow_executor] = unreachable_executor
        response = self.client.post("/api/optimize", json={
            "resumeText": SAMPLE_RESUME,
            "jobDescription": SAMPLE_JOB,
            "useAI": True,
        })
        self.assertEqual(response.status_code, 200)
        self.assertIn("docker", response.json()["data"]["optimizedResume"])

    def test_internal_error(self):
        with patch("resume_tailor.api.optimize_routes.optimize_resume_for_job", side_effect=RuntimeError("boom")):
            response = self.client.post("/api/optimize", json={
                "resumeText": SAMPLE_RESUME,
                "jobDescription": SAMPLE_JOB,
            })
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Optimization failed", "message": "boom"})

    def test_describe(self):
        response = self.client.get("/api/optimize")
        self.assertEqual(response.status_code, 200)
        self.assertIn("POST /api/optimize", response.json()["endpoints"])


class PreviewEndpointTests(ApiTestCase):
    def test_preview(self):
        response = self.client.post("/api/preview", json={
            "resumeText": SAMPLE_RESUME,
            "jobDescription": SAMPLE_JOB,
        })
        self.assertEqual(response.status_code, 200)

        data = response.json()["data"]
        self.assertEqual(data["estimatedImpact"], data["projectedScore"] - data["currentScore"])
        self.assertLessEqual(len(data["missingKeywords"]), 10)

    def test_missing_fields(self):
        response = self.client.post("/api/preview", json={"jobDescription": SAMPLE_JOB})
        self.assertEqual(response.status_code, 400)

    def test_internal_error(self):
        with patch("resume_tailor.api.preview_routes.get_optimization_preview", side_effect=RuntimeError("boom")):
            response = self.client.post("/api/preview", json={
                "resumeText": SAMPLE_RESUME,
                "jobDescription": SAMPLE_JOB,
            })
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {"error": "Preview generation failed", "message": "boom"})


class WorkflowEndpointTests(ApiTestCase):
    def test_list(self):
        response = self.client.get("/api/workflows")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()), 6)

    def test_health(self):
        app.dependency_overrides[get_workflow_executor] = lambda: stub_executor(200)
        response = self.client.get("/api/workflows/health")
        self.assertEqual(response.json()["status"], "healthy")

        app.dependency_overrides[get_workflow_executor] = lambda: stub_executor(503)
        response = self.client.get("/api/workflows/health")
        self.assertEqual(response.json(), {"status": "unhealthy", "details": "HTTP 503"})

    def test_health_when_unreachable(self):
        app.dependency_overrides[get_workflow_executor] = unreachable_executor
        response = self.client.get("/api/workflows/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "unhealthy")

    def test_app_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["status"], "healthy")


if __name__ == "__main__":
    unittest.main()
