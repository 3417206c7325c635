import unittest
from unittest.mock import patch

from resume_tailor.models.optimize_models import OptimizationRequest
from resume_tailor.models.tailor_models import TailorSuggestion
from resume_tailor.services import resume_optimizer
from resume_tailor.services.resume_optimizer import (
    batch_optimize,
    compare_optimization_strategies,
    optimize_resume,
    quick_optimize,
    select_suggestions,
    strengthen_verbs,
)
from tests.sample_data import SAMPLE_JOB, SAMPLE_RESUME


def _suggestion(impact: int, kind: str = "rewrite") -> TailorSuggestion:
    return TailorSuggestion(
        section="skills", original=f"o{impact}", suggested=f"s{impact}", reason=f"r{impact}", impact=impact, kind=kind,
    )


class OptimizationLevelTests(unittest.TestCase):
    def setUp(self):
        self.suggestions = [
            _suggestion(20), _suggestion(15), _suggestion(13), _suggestion(10),
            _suggestion(8, "advisory"), _suggestion(-5, "advisory"),
        ]

    def test_basic(self):
        self.assertEqual([s.impact for s in select_suggestions(self.suggestions, "basic")], [15, 13])

    def test_standard(self):
        self.assertEqual([s.impact for s in select_suggestions(self.suggestions, "standard")], [20, 15, 13, 10])

    def test_aggressive_keeps_every_rewrite(self):
        self.assertEqual([s.impact for s in select_suggestions(self.suggestions, "aggressive")], [20, 15, 13, 10])

    def test_selection_copies(self):
        self.suggestions[0].applied = True
        selected = select_suggestions(self.suggestions, "standard")
        self.assertFalse(selected[0].applied)
        self.assertIsNot(selected[0], self.suggestions[0])

    def test_strengthen_verbs(self):
        self.assertEqual(
            strengthen_verbs("Worked on APIs and used Python; reused code"),
            "Developed APIs and utilized Python; reused code",
        )

    def test_strengthen_verbs_matches_leading_case(self):
        self.assertEqual(
            strengthen_verbs("- Responsible for budgets, Made dashboards and was involved in hiring"),
            "- Managed budgets, Created dashboards and was collaborated on hiring",
        )


class OptimizeResumeTests(unittest.TestCase):
    def test_standard_pipeline(self):
        result = optimize_resume(OptimizationRequest(resume_text=SAMPLE_RESUME, job_description=SAMPLE_JOB))

        improvements = result.improvements
        self.assertEqual(improvements.improvement, improvements.after_score - improvements.before_score)
        self.assertEqual(result.ats_analysis.score, improvements.after_score)
        self.assertEqual(result.original_resume, SAMPLE_RESUME)
        self.assertIn("docker", result.optimized_resume)
        self.assertEqual(result.processing_method, "local")
        self.assertLessEqual(len(improvements.key_changes), 5)

        impacts = [r.impact for r in result.recommendations]
        self.assertLessEqual(len(impacts), 6)
        self.assertEqual(impacts, sorted(impacts, reverse=True))

    def test_aggressive_adds_role_specific_advice(self):
        result = optimize_resume(OptimizationRequest(
            resume_text=SAMPLE_RESUME,
            job_description=SAMPLE_JOB,
            optimization_level="aggressive",
        ))
        self.assertLessEqual(len(result.recommendations), 8)
        self.assertIn(
            "Consider creating role-specific resume versions",
            [r.description for r in result.recommendations],
        )

    def test_quick_optimize(self):
        quick = quick_optimize(SAMPLE_RESUME, SAMPLE_JOB)
        self.assertGreaterEqual(quick.score, 0)
        self.assertLessEqual(quick.score, 100)
        self.assertNotEqual(quick.optimized_resume, SAMPLE_RESUME)


class BatchAndCompareTests(unittest.TestCase):
    def test_batch_failure_is_isolated(self):
        real = resume_optimizer.quick_optimize

        def flaky(resume_text, job_description):
            if job_description == "BROKEN":
                raise RuntimeError("boom")
            return real(resume_text, job_description)

        with patch.object(resume_optimizer, "quick_optimize", side_effect=flaky):
            entries = batch_optimize(SAMPLE_RESUME, [SAMPLE_JOB, "BROKEN"])

        self.assertEqual([e.job_index for e in entries], [0, 1])
        self.assertIsNone(entries[0].error)
        self.assertGreater(entries[0].match_percentage, 0)
        self.assertEqual(entries[1].error, "boom")
        self.assertEqual(entries[1].score, 0)
        self.assertEqual(entries[1].optimized_resume, SAMPLE_RESUME)

    def test_compare_strategies(self):
        comparison = compare_optimization_strategies(SAMPLE_RESUME, SAMPLE_JOB)
        self.assertIn(comparison.recommended_level, ("basic", "standard", "aggressive"))
        self.assertEqual(
            comparison.recommendation,
            f"Recommended strategy: {comparison.recommended_level} optimization",
        )
        self.assertEqual(comparison.aggressive.improvements.before_score, comparison.basic.improvements.before_score)


if __name__ == "__main__":
    unittest.main()
