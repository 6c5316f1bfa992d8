#!/usr/bin/env python3
"""
Test suite for reconciliation of judge verdicts into scores.
"""

import unittest

from engine.config_loader import ScoringConfig
from engine.exceptions import ReconciliationError
from engine.llm.schema_models import AlignmentStatus, AlignmentVerdict
from engine.requirements.models import Category, EXPERIENCE_REQUIREMENT_ID, Priority
from engine.scorer.models import MatchSource, ScoredAlignment
from engine.scorer.reconciliation import (
    RequirementIndex,
    aggregate,
    counted_max_score,
    reconcile,
    score_for_status,
    score_verdict,
)
from tests.fixtures.requirement_fixtures import (
    build_java_aws_model,
    build_java_cert_trio_model,
    build_java_degree_model,
    build_requirement_model,
    java_aligned_response,
    judge_response,
    verdict,
)


def _verdict(*args, **kwargs) -> AlignmentVerdict:
    return AlignmentVerdict.model_validate(verdict(*args, **kwargs))


class TestScoreForStatus(unittest.TestCase):
    """Points awarded per status."""

    def test_aligned_earns_full_points(self):
        self.assertEqual(score_for_status(AlignmentStatus.ALIGNED, 10), 10)

    def test_partial_earns_half_rounded_up(self):
        self.assertEqual(score_for_status(AlignmentStatus.PARTIALLY_ALIGNED, 10), 5)
        self.assertEqual(score_for_status(AlignmentStatus.PARTIALLY_ALIGNED, 5), 3)
        self.assertEqual(score_for_status(AlignmentStatus.PARTIALLY_ALIGNED, 0), 0)

    def test_not_aligned_and_not_mentioned_earn_nothing(self):
        self.assertEqual(score_for_status(AlignmentStatus.NOT_ALIGNED, 10), 0)
        self.assertEqual(score_for_status(AlignmentStatus.NOT_MENTIONED, 10), 0)

    def test_not_mentioned_leaves_denominator(self):
        self.assertEqual(counted_max_score(AlignmentStatus.NOT_MENTIONED, 5), 0)
        self.assertEqual(counted_max_score(AlignmentStatus.NOT_ALIGNED, 5), 5)


class TestRequirementIndex(unittest.TestCase):
    """Canonical lookup by id and description."""

    def setUp(self):
        self.index = RequirementIndex.build(build_requirement_model())

    def test_resolve_by_id(self):
        entry, source = self.index.resolve(_verdict("Technical Skills", "Java, five years", "Aligned",
                                                    requirement_id="tech-java"))

        self.assertEqual(source, MatchSource.ID)
        self.assertEqual(entry.points, 10)
        self.assertEqual(entry.category, Category.TECHNICAL_SKILLS)

    def test_resolve_by_description_when_id_missing(self):
        entry, source = self.index.resolve(_verdict("Technical Skills", "AWS", "Aligned", "NICE_TO_HAVE"))

        self.assertEqual(source, MatchSource.DESCRIPTION)
        self.assertEqual(entry.points, 5)

    def test_unknown_id_falls_back_to_description(self):
        with self.assertLogs("engine.scorer.reconciliation", level="WARNING") as logs:
            entry, source = self.index.resolve(_verdict("Technical Skills", "AWS", "Aligned", "NICE_TO_HAVE",
                                                        requirement_id="bogus"))

        self.assertTrue(any("bogus" in line for line in logs.output))

        self.assertEqual(source, MatchSource.DESCRIPTION)
        self.assertEqual(entry.requirement_ids, ["tech-aws"])

    def test_unmatched_verdict(self):
        entry, source = self.index.resolve(_verdict("Technical Skills", "Kotlin", "Aligned"))

        self.assertIsNone(entry)
        self.assertEqual(source, MatchSource.FALLBACK)

    def test_synthesized_experience_requirement_is_indexed(self):
        entry, _ = self.index.resolve(_verdict("Experience", "anything", "Aligned",
                                               requirement_id=EXPERIENCE_REQUIREMENT_ID))

        self.assertEqual(entry.points, 10)
        self.assertEqual(entry.priority, Priority.MUST_HAVE)
        self.assertEqual(entry.category, Category.EXPERIENCE)

    def test_any_group_by_summary_description(self):
        entry, source = self.index.resolve(_verdict(
            "Education", "BSc in Computer Science OR BEng in Software Engineering", "Aligned"
        ))

        self.assertEqual(source, MatchSource.DESCRIPTION)
        self.assertEqual(entry.points, 10)
        self.assertEqual(entry.requirement_ids, ["edu-bsc", "edu-beng"])

    def test_all_group_by_member_id_scores_the_group(self):
        entry, source = self.index.resolve(_verdict("Certifications", "certs", "Aligned", "NICE_TO_HAVE",
                                                    requirement_id="cert-cka"))

        self.assertEqual(source, MatchSource.ID)
        self.assertEqual(entry.points, 5)
        self.assertEqual(entry.requirement_ids, ["cert-aws", "cert-cka"])

    def test_group_member_by_own_description(self):
        entry, _ = self.index.resolve(_verdict("Certifications", "Certified Kubernetes Administrator",
                                               "Aligned", "NICE_TO_HAVE"))

        self.assertEqual(entry.points, 3)
        self.assertEqual(entry.requirement_ids, ["cert-cka"])


class TestScoreVerdict(unittest.TestCase):

    def setUp(self):
        self.model = build_requirement_model()
        self.index = RequirementIndex.build(self.model)

    def test_uses_edited_canonical_score(self):
        self.model.technical_skills.must_have[0].score = 20
        index = RequirementIndex.build(self.model)

        scored = score_verdict(_verdict("Technical Skills", "5 years Java", "Partially Aligned",
                                        requirement_id="tech-java"), index)

        self.assertEqual(scored.points, 20)
        self.assertEqual(scored.score, 10)
        self.assertEqual(scored.max_score, 20)
        self.assertEqual(scored.requirement_id, "tech-java")

    def test_zero_point_requirement_stays_zero(self):
        self.model.technical_skills.must_have[0].score = 0
        index = RequirementIndex.build(self.model)

        scored = score_verdict(_verdict("Technical Skills", "5 years Java", "Aligned",
                                        requirement_id="tech-java"), index)

        self.assertEqual(scored.score, 0)
        self.assertEqual(scored.max_score, 0)
        self.assertEqual(scored.matched_by, MatchSource.ID)

    def test_fallback_uses_priority_default(self):
        with self.assertLogs("engine.scorer.reconciliation", level="WARNING") as logs:
            must = score_verdict(_verdict("Technical Skills", "Kotlin", "Aligned"), self.index)
            nice = score_verdict(_verdict("Soft Skills", "Humor", "Partially Aligned", "NICE_TO_HAVE"), self.index)

        self.assertEqual((must.points, must.score, must.max_score), (10, 10, 10))
        self.assertEqual((nice.points, nice.score, nice.max_score), (5, 3, 5))
        self.assertEqual(must.matched_by, MatchSource.FALLBACK)
        self.assertTrue(any("Kotlin" in line for line in logs.output))

    def test_fallback_respects_configured_defaults(self):
        config = ScoringConfig(must_have_default=7, nice_to_have_default=2)

        scored = score_verdict(_verdict("Technical Skills", "Kotlin", "Aligned"), self.index, config)

        self.assertEqual(scored.points, 7)

    def test_group_verdict_keeps_echoed_id(self):
        scored = score_verdict(_verdict("Education", "degree", "Not Aligned", requirement_id="edu-beng"),
                               self.index)

        self.assertEqual(scored.requirement_id, "edu-beng")
        self.assertEqual(scored.max_score, 10)


class TestAggregate(unittest.TestCase):

    def _row(self, score, max_score):
        return ScoredAlignment("Technical Skills", "x", Priority.MUST_HAVE, AlignmentStatus.ALIGNED,
                               score=score, max_score=max_score, points=max_score)

    def test_percentage_rounded_to_two_places(self):
        self.assertEqual(aggregate([self._row(1, 3)]), (1, 3, 33.33))
        self.assertEqual(aggregate([self._row(2, 3)]), (2, 3, 66.67))

    def test_zero_when_nothing_awarded_or_possible(self):
        self.assertEqual(aggregate([self._row(0, 10)]), (0, 10, 0.0))
        self.assertEqual(aggregate([self._row(0, 0)]), (0, 0, 0.0))
        self.assertEqual(aggregate([]), (0, 0, 0.0))


class TestReconcile(unittest.TestCase):

    def test_aligned_plus_not_mentioned_scores_full(self):
        result = reconcile(build_java_aws_model(), java_aligned_response())

        self.assertEqual(result.candidate_score, 10)
        self.assertEqual(result.max_score, 10)
        self.assertEqual(result.alignment_score, 100.0)
        aws = result.alignment_details[1]
        self.assertEqual(aws.status, AlignmentStatus.NOT_MENTIONED)
        self.assertEqual(aws.points, 5)
        self.assertEqual(aws.max_score, 0)

    def test_aligned_plus_not_aligned_degree_scores_half(self):
        response = judge_response([
            verdict("Technical Skills", "5 years Java", "Aligned", requirement_id="tech-java"),
            verdict("Education", "BSc in Computer Science", "Not Aligned", requirement_id="edu-bsc"),
        ])

        result = reconcile(build_java_degree_model(), response)

        self.assertEqual((result.candidate_score, result.max_score), (10, 20))
        self.assertEqual(result.alignment_score, 50.0)

    def test_max_score_equals_sum_of_rows(self):
        model = build_requirement_model()
        response = judge_response([
            verdict("Responsibilities", "Design and operate backend services", "Partially Aligned",
                    requirement_id="resp-1"),
            verdict("Technical Skills", "5 years Java", "Aligned", requirement_id="tech-java"),
            verdict("Technical Skills", "AWS", "Not Mentioned", "NICE_TO_HAVE", requirement_id="tech-aws"),
            verdict("Experience", "5+ years in Backend Development, Distributed Systems", "Aligned",
                    requirement_id=EXPERIENCE_REQUIREMENT_ID),
            verdict("Education", "BSc in Computer Science OR BEng in Software Engineering", "Aligned"),
            verdict("Certifications", "AWS Solutions Architect AND Certified Kubernetes Administrator",
                    "Not Aligned", "NICE_TO_HAVE"),
            verdict("Soft Skills", "Negotiation", "Aligned", "NICE_TO_HAVE"),
        ])

        result = reconcile(model, response)

        self.assertEqual(result.max_score, sum(d.max_score for d in result.alignment_details))
        self.assertEqual(result.candidate_score, sum(d.score for d in result.alignment_details))
        # 5 + 10 + 0 + 10 + 10 + 0 + 5 (fallback) over 10 + 10 + 0 + 10 + 10 + 5 + 5
        self.assertEqual((result.candidate_score, result.max_score), (40, 50))
        self.assertEqual(result.alignment_score, 80.0)
        self.assertTrue(0 <= result.alignment_score <= 100)

    def test_per_member_verdicts_count_each_member_once(self):
        response = judge_response([
            verdict("Certifications", "Cert A", "Aligned", requirement_id="cert-a"),
            verdict("Certifications", "Cert B", "Aligned", requirement_id="cert-b"),
            verdict("Certifications", "Cert C", "Aligned", requirement_id="cert-c"),
            verdict("Technical Skills", "5 years Java", "Not Aligned", requirement_id="tech-java"),
        ])

        result = reconcile(build_java_cert_trio_model(), response)

        self.assertEqual([d.max_score for d in result.alignment_details], [10, 10, 10, 10])
        self.assertEqual((result.candidate_score, result.max_score), (30, 40))
        self.assertEqual(result.alignment_score, 75.0)

    def test_all_group_summary_scores_one_requirement(self):
        response = judge_response([
            verdict("Certifications", "Cert A AND Cert B AND Cert C", "Aligned", requirement_id="cert-a"),
            verdict("Technical Skills", "5 years Java", "Not Aligned", requirement_id="tech-java"),
        ])

        result = reconcile(build_java_cert_trio_model(), response)

        self.assertEqual((result.candidate_score, result.max_score), (10, 20))
        self.assertEqual(result.alignment_score, 50.0)

    def test_missing_details_is_an_error(self):
        with self.assertRaises(ReconciliationError):
            reconcile(build_java_aws_model(), judge_response(None))

    def test_empty_details_is_an_error(self):
        with self.assertRaises(ReconciliationError):
            reconcile(build_java_aws_model(), judge_response([]))

    def test_duplicate_verdicts_are_kept_as_rows(self):
        response = judge_response([
            verdict("Technical Skills", "5 years Java", "Aligned", requirement_id="tech-java"),
            verdict("Technical Skills", "5 years Java", "Aligned", requirement_id="tech-java"),
        ])

        result = reconcile(build_java_aws_model(), response)

        self.assertEqual(len(result.alignment_details), 2)
        self.assertEqual(result.max_score, 20)


if __name__ == '__main__':
    unittest.main()
