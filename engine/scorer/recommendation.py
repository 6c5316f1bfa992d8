#!/usr/bin/env python3
"""
Recommendation Classifier - Map scored alignments to a recommendation tier.

Rules, first match wins:
1. A MUST_HAVE requirement in a gated category (Experience, Education) judged
   "Not Aligned" -> Not Recommended, whatever the aggregate score.
2. alignment_score >= strong threshold (85) -> Strongly Recommended
3. alignment_score >= reservations threshold (60) -> Recommended with Reservations
4. Otherwise -> Not Recommended
"""

from typing import List, Optional
import logging

from engine.config_loader import ScoringConfig
from engine.llm.schema_models import AlignmentStatus
from engine.requirements.models import Priority
from engine.scorer.models import Recommendation, ScoredAlignment

logger = logging.getLogger(__name__)


def _normalize_category(category: str) -> str:
    return (category or "").strip().lower()


def gated_failures(
    details: List[ScoredAlignment],
    config: Optional[ScoringConfig] = None
) -> List[ScoredAlignment]:
    """Mandatory core requirements the candidate was judged not to meet."""
    config = config or ScoringConfig()
    gated = {_normalize_category(c) for c in config.gated_categories}
    return [
        d for d in details
        if _normalize_category(d.category) in gated
        and d.priority == Priority.MUST_HAVE
        and d.status == AlignmentStatus.NOT_ALIGNED
    ]


def classify(
    details: List[ScoredAlignment],
    alignment_score: float,
    config: Optional[ScoringConfig] = None
) -> Recommendation:
    config = config or ScoringConfig()

    failures = gated_failures(details, config)
    if failures:
        logger.info(
            f"Recommendation gated by {len(failures)} missed mandatory requirement(s): "
            f"{', '.join(d.requirement[:40] for d in failures)}"
        )
        return Recommendation.NOT_RECOMMENDED

    if alignment_score >= config.strong_threshold:
        return Recommendation.STRONGLY_RECOMMENDED
    if alignment_score >= config.reservations_threshold:
        return Recommendation.RECOMMENDED_WITH_RESERVATIONS
    return Recommendation.NOT_RECOMMENDED
