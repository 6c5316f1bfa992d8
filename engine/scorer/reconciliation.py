#!/usr/bin/env python3
"""
Reconciliation - Turn judge verdicts into deterministic scores.

The judge never scores. It echoes each requirement's id and description with
a status; this module ties each verdict back to a canonical requirement, awards
points by status and aggregates. The judge's single verdict for a requirement
group is trusted as-is: ANY/ALL satisfaction is not re-derived here.
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from engine.config_loader import ScoringConfig
from engine.exceptions import ReconciliationError
from engine.llm.schema_models import AlignmentStatus, AlignmentVerdict, JudgeResponse
from engine.requirements.models import Category, JobRequirementModel, Priority
from engine.scorer.models import MatchSource, ScoredAlignment
from engine.utils import round2

logger = logging.getLogger(__name__)


@dataclass
class IndexedRequirement:
    """One scoreable unit: a plain requirement, a group, or the synthesized experience requirement."""
    description: str
    points: int
    priority: Priority
    category: Category
    requirement_ids: List[str] = field(default_factory=list)


@dataclass
class ReconciliationResult:
    alignment_details: List[ScoredAlignment]
    candidate_score: int
    max_score: int
    alignment_score: float


class RequirementIndex:
    """
    Lookup of canonical requirements by id and by description.

    A group member's id resolves to the member when the verdict carries that
    member's own description, otherwise to the group it belongs to. A group is
    worth one requirement: its highest-scoring member. Later entries win on
    duplicate descriptions.
    """

    def __init__(self):
        self.by_id: Dict[str, IndexedRequirement] = {}
        self.by_description: Dict[str, IndexedRequirement] = {}
        self.group_by_member_id: Dict[str, IndexedRequirement] = {}

    def add(self, entry: IndexedRequirement) -> None:
        for requirement_id in entry.requirement_ids:
            self.by_id[requirement_id] = entry
        self.by_description[entry.description] = entry

    @classmethod
    def build(cls, model: JobRequirementModel) -> "RequirementIndex":
        index = cls()

        for category, bucket in model.flat_categories():
            for priority in Priority:
                for req in bucket.bucket(priority):
                    index.add(IndexedRequirement(req.description, req.score, priority, category, [req.id]))

        synthesized = model.experience.synthesized_requirement()
        if synthesized is not None:
            index.add(IndexedRequirement(
                synthesized.description, synthesized.score, Priority.MUST_HAVE,
                Category.EXPERIENCE, [synthesized.id]
            ))

        for category, priority, group in model.iter_groups():
            group_entry = IndexedRequirement(
                group.description, group.points, priority, category, group.requirement_ids
            )
            for req in group.requirements:
                index.add(IndexedRequirement(req.description, req.score, priority, category, [req.id]))
                index.group_by_member_id[req.id] = group_entry
            index.by_description[group.description] = group_entry

        return index

    def resolve(self, verdict: AlignmentVerdict) -> Tuple[Optional[IndexedRequirement], MatchSource]:
        """Match by echoed id first, then by exact description."""
        if verdict.requirement_id:
            entry = self.by_id.get(verdict.requirement_id)
            if entry is not None:
                group = self.group_by_member_id.get(verdict.requirement_id)
                if group is not None and verdict.requirement != entry.description:
                    return group, MatchSource.ID
                return entry, MatchSource.ID
            logger.warning(
                f"Judge echoed unknown requirement id '{verdict.requirement_id}'; "
                f"falling back to description matching"
            )

        entry = self.by_description.get(verdict.requirement)
        if entry is not None:
            return entry, MatchSource.DESCRIPTION
        return None, MatchSource.FALLBACK


def score_for_status(status: AlignmentStatus, points: int) -> int:
    """Full points for Aligned, half rounded up for Partially Aligned, else nothing."""
    if status == AlignmentStatus.ALIGNED:
        return points
    if status == AlignmentStatus.PARTIALLY_ALIGNED:
        return math.ceil(points / 2)
    return 0


def counted_max_score(status: AlignmentStatus, points: int) -> int:
    """A requirement the candidate's CV never addresses is left out of the denominator."""
    return 0 if status == AlignmentStatus.NOT_MENTIONED else points


def fallback_points(priority: Priority, config: ScoringConfig) -> int:
    return config.must_have_default if Priority(priority) is Priority.MUST_HAVE else config.nice_to_have_default


def score_verdict(
    verdict: AlignmentVerdict,
    index: RequirementIndex,
    config: Optional[ScoringConfig] = None
) -> ScoredAlignment:
    """Score a single verdict against the canonical index."""
    config = config or ScoringConfig()
    entry, source = index.resolve(verdict)

    if entry is None:
        points = fallback_points(verdict.priority, config)
        logger.warning(
            f"No canonical requirement matches '{verdict.requirement[:60]}' "
            f"({verdict.category}); using default of {points} points"
        )
        requirement_id = verdict.requirement_id
    else:
        points = entry.points
        requirement_id = entry.requirement_ids[0] if len(entry.requirement_ids) == 1 else verdict.requirement_id

    return ScoredAlignment(
        category=verdict.category,
        requirement=verdict.requirement,
        priority=verdict.priority,
        status=verdict.status,
        justification=verdict.justification,
        score=score_for_status(verdict.status, points),
        max_score=counted_max_score(verdict.status, points),
        points=points,
        requirement_id=requirement_id,
        matched_by=source,
    )


def aggregate(details: List[ScoredAlignment]) -> Tuple[int, int, float]:
    """
    Sum awarded and possible points.

    Returns: (candidate_score, max_score, alignment_score) where alignment_score
    is a 0-100 percentage rounded to 2 decimals, or 0 when nothing was awarded.
    """
    candidate_score = sum(d.score for d in details)
    max_score = sum(d.max_score for d in details)
    if candidate_score > 0 and max_score > 0:
        alignment_score = round2(candidate_score / max_score * 100)
    else:
        alignment_score = 0.0
    return candidate_score, max_score, alignment_score


def reconcile(
    model: JobRequirementModel,
    response: JudgeResponse,
    config: Optional[ScoringConfig] = None
) -> ReconciliationResult:
    """
    Reconcile one candidate's judge response against the requirement model.

    Raises:
        ReconciliationError: if the response carries no alignment details. An
            empty response is "no data", which is different from a zero score.
    """
    if not response.alignment_details:
        raise ReconciliationError(
            "CV analysis failed: the judge returned no alignment details. Please try again."
        )

    index = RequirementIndex.build(model)
    details = [score_verdict(v, index, config) for v in response.alignment_details]

    fallbacks = sum(1 for d in details if d.matched_by == MatchSource.FALLBACK)
    if fallbacks:
        logger.warning(f"{fallbacks} of {len(details)} verdicts fell back to default points")

    candidate_score, max_score, alignment_score = aggregate(details)
    return ReconciliationResult(details, candidate_score, max_score, alignment_score)
