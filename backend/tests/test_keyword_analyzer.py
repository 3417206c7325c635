import unittest

from resume_tailor.services.keyword_analyzer import (
    analyze_keyword_importance,
    calculate_keyword_density,
    calculate_keyword_importance,
    categorize_keyword,
    extract_keywords,
    extract_phrases_from_job_posting,
    generate_keyword_report,
    generate_local_optimization_suggestions,
    suggest_keyword_placements,
)
from tests.sample_data import SAMPLE_RESUME


class ExtractKeywordsTests(unittest.TestCase):
    def test_empty_and_whitespace_input(self):
        self.assertEqual(extract_keywords(""), [])
        self.assertEqual(extract_keywords("   \n\t "), [])

    def test_phrases_first_then_tokens(self):
        keywords = extract_keywords("Experience with Machine Learning and Python!")
        self.assertEqual(keywords, ["machine learning", "experience", "machine", "learning", "python"])

    def test_stop_words_and_short_tokens_dropped(self):
        keywords = extract_keywords("The API is in Go and it is on AWS")
        self.assertEqual(keywords, ["api", "aws"])

    def test_deduplicated(self):
        self.assertEqual(extract_keywords("python Python PYTHON"), ["python"])

    def test_stable_under_own_output(self):
        keywords = extract_keywords("Python developer building scalable services")
        self.assertEqual(extract_keywords(" ".join(keywords)), keywords)

    def test_keeps_dots_and_hyphens(self):
        keywords = extract_keywords("Node.js and front-end work")
        self.assertIn("node.js", keywords)
        self.assertIn("front-end", keywords)

    def test_job_posting_phrases(self):
        phrases = extract_phrases_from_job_posting("5+ years of experience required. Remote friendly.")
        self.assertEqual(phrases, ["5+ years of experience", "required", "remote"])


class KeywordImportanceTests(unittest.TestCase):
    def test_uncatalogued_keyword_defaults_to_five(self):
        self.assertEqual(calculate_keyword_importance("negotiation", "negotiation"), 5)

    def test_exact_catalog_weight(self):
        self.assertEqual(calculate_keyword_importance("javascript", "We use javascript."), 10)

    def test_partial_match_uses_fraction_of_weight(self):
        # "reactjs" contains "react" (9) -> 0.8 * 9 = 7.2 -> 7
        self.assertEqual(calculate_keyword_importance("reactjs", "reactjs"), 7)

    def test_context_boosts_and_cap(self):
        context = "JavaScript is required. 5 years of javascript experience. javascript daily."
        # 10 + 3 (required) + 2 (years) + 2 (frequency 3) = 17 -> capped
        self.assertEqual(calculate_keyword_importance("javascript", context), 15)

    def test_frequency_boost_is_bounded(self):
        context = " ".join(["negotiation"] * 10)
        self.assertEqual(calculate_keyword_importance("negotiation", context), 8)

    def test_categories(self):
        self.assertEqual(categorize_keyword("python"), "technical")
        self.assertEqual(categorize_keyword("managed"), "action")
        self.assertEqual(categorize_keyword("scrum master"), "certification")
        self.assertEqual(categorize_keyword("agile"), "industry")
        self.assertEqual(categorize_keyword("negotiation"), "soft")

    def test_analysis_sorted_and_context_limited(self):
        context = "Python here. Python there. Python again. Python once more. Negotiation too."
        analysis = analyze_keyword_importance(["negotiation", "python"], context)
        self.assertEqual([k.keyword for k in analysis], ["python", "negotiation"])
        self.assertEqual(len(analysis[0].context), 3)
        for item in analysis:
            self.assertGreaterEqual(item.importance, 0)
            self.assertLessEqual(item.importance, 15)


class KeywordReportTests(unittest.TestCase):
    def test_importance_weighted_match(self):
        report = generate_keyword_report("Python developer with Docker", "Python engineer")
        self.assertEqual([k.keyword for k in report.matching_keywords], ["python"])
        self.assertEqual({k.keyword for k in report.missing_keywords}, {"developer", "docker"})
        self.assertEqual(report.overall_match, round(10 / 23 * 100, 2))

    def test_empty_job_text(self):
        report = generate_keyword_report("", "Python engineer")
        self.assertEqual(report.overall_match, 0.0)
        self.assertEqual(report.job_keywords, [])

    def test_density(self):
        self.assertEqual(calculate_keyword_density("python is great python", "python"), 50.0)
        self.assertEqual(calculate_keyword_density("", "python"), 0.0)

    def test_placements_for_missing_technical_keyword(self):
        self.assertEqual(
            suggest_keyword_placements("docker", SAMPLE_RESUME),
            ["Add to Skills/Technical Skills section"],
        )

    def test_placements_fall_back_to_generic_hints(self):
        self.assertEqual(len(suggest_keyword_placements("negotiation", "Just a name")), 3)

    def test_local_section_suggestions(self):
        suggestions = generate_local_optimization_suggestions("Managed a team", ["python"], "experience")
        self.assertEqual(suggestions, [
            "Add these keywords: python",
            "Use bullet points for better readability",
            "Add quantifiable metrics and achievements",
        ])


if __name__ == "__main__":
    unittest.main()
