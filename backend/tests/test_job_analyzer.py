import unittest

from resume_tailor.services.job_analyzer import (
    COMPANY_NOT_FOUND,
    LOCATION_NOT_FOUND,
    TITLE_NOT_FOUND,
    analyze_job_posting,
    extract_company,
    extract_job_title,
    extract_location,
    extract_salary_range,
    requirement_priority,
)
from tests.sample_data import SAMPLE_JOB


class SampleJobAnalysisTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.result = analyze_job_posting(SAMPLE_JOB)

    def test_title_from_first_short_line(self):
        self.assertEqual(self.result.job_title, "Senior Software Engineer - Full Stack")

    def test_location_from_remote_marker(self):
        self.assertEqual(self.result.location.lower(), "remote")

    def test_requirements_tagged_by_section_header(self):
        requirements = self.result.requirements
        self.assertEqual(len(requirements), 12)
        self.assertEqual(requirements[0].requirement, "4+ years of software development experience")
        self.assertEqual(requirements[0].priority, "required")
        self.assertEqual(requirements[-1].requirement, "Background in agile methodologies")
        self.assertEqual(requirements[-1].priority, "preferred")

    def test_responsibilities_are_not_requirements(self):
        texts = [r.requirement for r in self.result.requirements]
        self.assertNotIn("Mentor junior developers", texts)

    def test_catalog_skills(self):
        skills = {s.skill for s in self.result.skills}
        for expected in ("python", "javascript", "react", "node.js", "aws", "docker", "kubernetes", "sql"):
            self.assertIn(expected, skills)
        self.assertNotIn("java", skills)
        importances = [s.importance for s in self.result.skills]
        self.assertEqual(importances, sorted(importances, reverse=True))
        self.assertTrue(all(0 <= i <= 15 for i in importances))

    def test_experience_and_seniority(self):
        self.assertEqual(self.result.experience.minimum_years, 4)
        self.assertEqual(self.result.experience.seniority_level, "senior")
        self.assertIn("software development", self.result.experience.relevant_fields)

    def test_salary_in_thousands(self):
        self.assertIsNotNone(self.result.salary)
        self.assertEqual(self.result.salary.min, 120000)
        self.assertEqual(self.result.salary.max, 160000)

    def test_benefits_job_type_and_keywords(self):
        self.assertIn("401k", self.result.benefits)
        self.assertIn("vision insurance", self.result.benefits)
        self.assertIn("remote work", self.result.benefits)
        self.assertEqual(self.result.job_type, "full-time")
        self.assertLessEqual(len(self.result.keywords), 50)
        self.assertIn("experience", self.result.keywords[:5])

    def test_analysis_score_in_range(self):
        self.assertGreater(self.result.analysis_score, 0)
        self.assertLessEqual(self.result.analysis_score, 100)

    def test_result_is_frozen(self):
        with self.assertRaises(Exception):
            self.result.job_title = "Changed"


class ExtractorTests(unittest.TestCase):
    def test_salary_per_year(self):
        salary = extract_salary_range("Pay: $120,000 - $160,000 per year")
        self.assertEqual(salary.min, 120000)
        self.assertEqual(salary.max, 160000)
        self.assertEqual(salary.currency, "USD")
        self.assertEqual(salary.period, "yearly")

    def test_salary_bare_k_range(self):
        salary = extract_salary_range("Compensation 90k - 110k plus bonus")
        self.assertEqual((salary.min, salary.max), (90000, 110000))

    def test_no_salary(self):
        self.assertIsNone(extract_salary_range("Competitive pay"))

    def test_labeled_fields(self):
        text = "Job Title: Data Engineer\nCompany: Acme Corp\nLocation: Austin, TX"
        self.assertEqual(extract_job_title(text), "Data Engineer")
        self.assertEqual(extract_company(text), "Acme Corp")
        self.assertEqual(extract_location(text), "Austin, TX")

    def test_company_from_join_phrase(self):
        self.assertEqual(extract_company("Come and join Globex Labs today"), "Globex Labs")

    def test_city_state_location(self):
        self.assertEqual(extract_location("We sit in Denver, CO near the park"), "Denver, CO")

    def test_sentinels(self):
        self.assertEqual(extract_job_title(""), TITLE_NOT_FOUND)
        self.assertEqual(extract_company("nothing here"), COMPANY_NOT_FOUND)
        self.assertEqual(extract_location("nothing here"), LOCATION_NOT_FOUND)

    def test_requirement_priority_vocabulary(self):
        self.assertEqual(requirement_priority("Preferred Qualifications"), "preferred")
        self.assertEqual(requirement_priority("Bonus points"), "nice-to-have")
        self.assertEqual(requirement_priority("Requirements"), "required")

    def test_never_raises_on_odd_input(self):
        result = analyze_job_posting("$$$ ### \n\n ••• 12k -")
        self.assertEqual(result.company, COMPANY_NOT_FOUND)
        self.assertEqual(result.requirements, [])


if __name__ == "__main__":
    unittest.main()
