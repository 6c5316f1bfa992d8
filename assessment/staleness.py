"""
Staleness Protocol - When a CandidateResult can be trusted.

Two independent flags:
- is_stale: set automatically when the requirement model changes after the
  result was computed.
- is_edited: set when a human overrides row statuses/scores after computation.

Transitions:
- any requirement mutation  -> every result in the session becomes stale
- successful re-assessment  -> is_stale=False, is_edited=False (overrides discarded)
- manual edit               -> is_stale=False, is_edited=True (aggregate and
                               recommendation recomputed, judge not contacted)
"""
import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, TYPE_CHECKING

from engine.config_loader import ScoringConfig
from engine.exceptions import ManualEditError
from engine.llm.schema_models import AlignmentStatus
from engine.requirements.editor import RequirementMutation
from engine.scorer.models import CandidateResult
from engine.scorer.reconciliation import aggregate, counted_max_score, score_for_status
from engine.scorer.recommendation import classify

if TYPE_CHECKING:
    from assessment.session import AssessmentSession, CandidateRecord

logger = logging.getLogger(__name__)


class ResultState(str, Enum):
    FRESH = "fresh"
    STALE = "stale"
    EDITED = "edited"


def result_state(result: CandidateResult) -> ResultState:
    if result.is_stale:
        return ResultState.STALE
    if result.is_edited:
        return ResultState.EDITED
    return ResultState.FRESH


def invalidate_session(session: "AssessmentSession", mutation: Optional[RequirementMutation] = None) -> int:
    """
    Mark every result in the session stale.

    Whether the edited requirement actually affects a given candidate is not
    considered. Returns the number of results marked.
    """
    session.revision += 1
    marked = 0
    for record in session.candidates:
        if record.result is not None:
            record.result.is_stale = True
            marked += 1
    session.summary = None

    reason = f"{mutation.kind.value} {mutation.requirement_id}" if mutation else "requirement model replaced"
    logger.info(f"Requirement model changed ({reason}); {marked} candidate result(s) marked stale")
    return marked


def accept_assessment(record: "CandidateRecord", result: CandidateResult, stale: bool = False) -> None:
    """
    Replace a record's result wholesale with a freshly computed one.

    stale is True when the requirement model changed while the judge call was
    in flight, in which case the new result is already outdated.
    """
    result.is_stale = stale
    result.is_edited = False
    record.result = result


@dataclass
class AlignmentEdit:
    """A human override for one ScoredAlignment row."""
    status: Optional[AlignmentStatus] = None
    score: Optional[int] = None


def apply_manual_edits(
    result: CandidateResult,
    edits: Dict[int, AlignmentEdit],
    config: Optional[ScoringConfig] = None
) -> CandidateResult:
    """
    Apply row overrides and recompute the aggregate and recommendation.

    Args:
        result: The current result (fresh or stale); left untouched
        edits: Row index -> override. A status without a score awards the
            points that status earns; an explicit score must lie within
            [0, points] and must be 0 for "Not Mentioned".
        config: Scoring thresholds

    Returns:
        A new CandidateResult with is_edited=True and is_stale=False

    Raises:
        ManualEditError: on an unknown row or an out-of-range score
    """
    details = result.alignment_details
    for row in edits:
        if not 0 <= row < len(details):
            raise ManualEditError(f"No alignment row {row} (result has {len(details)} rows)")

    new_details = []
    for i, detail in enumerate(details):
        edit = edits.get(i)
        if edit is None:
            new_details.append(dataclasses.replace(detail))
            continue

        status = AlignmentStatus(edit.status) if edit.status is not None else detail.status
        if edit.score is None:
            score = score_for_status(status, detail.points)
        else:
            score = edit.score
            upper = counted_max_score(status, detail.points)
            if not 0 <= score <= upper:
                raise ManualEditError(
                    f"Score {score} for '{detail.requirement[:40]}' must be between 0 and {upper}"
                )

        changed = status != detail.status or score != detail.score
        new_details.append(dataclasses.replace(
            detail,
            status=status,
            score=score,
            max_score=counted_max_score(status, detail.points),
            is_edited=detail.is_edited or changed,
        ))

    candidate_score, max_score, alignment_score = aggregate(new_details)
    recommendation = classify(new_details, alignment_score, config)

    logger.info(
        f"Manual edit of {result.candidate_name}: {result.alignment_score:.2f} -> {alignment_score:.2f} "
        f"({recommendation.value})"
    )
    return dataclasses.replace(
        result,
        alignment_details=new_details,
        candidate_score=candidate_score,
        max_score=max_score,
        alignment_score=alignment_score,
        recommendation=recommendation,
        is_edited=True,
        is_stale=False,
    )
