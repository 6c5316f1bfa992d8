#!/usr/bin/env python3
"""
Scoring Models - Data structures for reconciliation results.
"""

from dataclasses import dataclass, field, asdict, replace
from enum import Enum
from typing import List, Optional, Dict, Any

from engine.llm.schema_models import AlignmentStatus
from engine.requirements.models import Priority


class Recommendation(str, Enum):
    STRONGLY_RECOMMENDED = "Strongly Recommended"
    RECOMMENDED_WITH_RESERVATIONS = "Recommended with Reservations"
    NOT_RECOMMENDED = "Not Recommended"


class MatchSource(str, Enum):
    """How a verdict was tied back to a canonical requirement."""
    ID = "id"
    DESCRIPTION = "description"
    FALLBACK = "fallback"


@dataclass
class ScoredAlignment:
    """A judge verdict after deterministic point-value reconciliation."""
    category: str
    requirement: str
    priority: Priority
    status: AlignmentStatus
    justification: str = ""
    score: int = 0
    # Denominator contribution; 0 for "Not Mentioned"
    max_score: int = 0
    # Point value of the matched requirement, kept for audit
    points: int = 0
    requirement_id: Optional[str] = None
    matched_by: MatchSource = MatchSource.DESCRIPTION
    is_edited: bool = False

    @property
    def is_issue(self) -> bool:
        return self.status != AlignmentStatus.ALIGNED


@dataclass
class CandidateResult:
    """Complete assessment of one candidate against one requirement model."""
    candidate_name: str
    alignment_score: float
    candidate_score: int
    max_score: int
    recommendation: Recommendation
    alignment_details: List[ScoredAlignment] = field(default_factory=list)

    email: Optional[str] = None
    total_experience: Optional[str] = None
    experience_calculated_at: Optional[str] = None
    alignment_summary: str = ""
    strengths: List[str] = field(default_factory=list)
    weaknesses: List[str] = field(default_factory=list)
    interview_probes: List[str] = field(default_factory=list)
    processing_time: Optional[float] = None

    is_stale: bool = False
    is_edited: bool = False

    def to_dict(self, only_issues: bool = False) -> Dict[str, Any]:
        """Plain JSON-compatible dict with enum values unwrapped."""
        result = replace(self, alignment_details=issues_only(self.alignment_details)) if only_issues else self
        return asdict(
            result,
            dict_factory=lambda items: {k: (v.value if isinstance(v, Enum) else v) for k, v in items},
        )


def issues_only(details: List[ScoredAlignment]) -> List[ScoredAlignment]:
    """Rows whose status is anything other than Aligned."""
    return [d for d in details if d.is_issue]
