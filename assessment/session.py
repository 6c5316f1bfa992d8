"""
Assessment Session - One job description, its requirement model and the
candidates assessed against it.

Requirement edits go through the session so that every successful mutation
reaches the staleness protocol.
"""
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from engine.config_loader import ScoringConfig
from engine.llm.schema_models import CandidateProfile
from engine.requirements.editor import RequirementEditor, RequirementMutation
from engine.requirements.models import JobRequirementModel, Priority, Requirement
from engine.scorer.models import CandidateResult
from assessment.staleness import AlignmentEdit, apply_manual_edits, invalidate_session

logger = logging.getLogger(__name__)


class AssessmentStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    DONE = "done"
    ERROR = "error"


@dataclass
class CandidateRecord:
    """A candidate's CV and its latest result."""
    cv_name: str
    cv_text: str
    profile: Optional[CandidateProfile] = None
    result: Optional[CandidateResult] = None
    status: AssessmentStatus = AssessmentStatus.PENDING
    error: Optional[str] = None

    @property
    def display_name(self) -> str:
        if self.result is not None and self.result.candidate_name:
            return self.result.candidate_name
        if self.profile is not None and self.profile.name:
            return self.profile.name
        return self.cv_name

    @property
    def email(self) -> Optional[str]:
        if self.result is not None and self.result.email:
            return self.result.email
        return self.profile.email if self.profile is not None else None


@dataclass
class AssessmentSession:
    jd_name: str
    requirement_model: JobRequirementModel
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    candidates: List[CandidateRecord] = field(default_factory=list)
    # Batch summary cached by the caller; dropped whenever results go stale
    summary: Optional[Dict[str, Any]] = None
    created_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    # Bumped on every requirement-model change
    revision: int = 0
    id_factory: Optional[Callable[[], str]] = field(default=None, repr=False)

    @property
    def editor(self) -> RequirementEditor:
        return RequirementEditor(self.requirement_model, id_factory=self.id_factory)

    def _apply(self, mutation: RequirementMutation) -> RequirementMutation:
        invalidate_session(self, mutation)
        return mutation

    def add_requirement(self, description: str, priority: Priority, score: int) -> Requirement:
        return self._apply(self.editor.add_requirement(description, priority, score)).requirement

    def change_priority(self, requirement_id: str, new_priority: Priority) -> RequirementMutation:
        return self._apply(self.editor.change_priority(requirement_id, new_priority))

    def change_score(self, requirement_id: str, new_score: int) -> RequirementMutation:
        return self._apply(self.editor.change_score(requirement_id, new_score))

    def delete_requirement(self, requirement_id: str) -> RequirementMutation:
        return self._apply(self.editor.delete_requirement(requirement_id))

    def replace_requirement_model(self, model: JobRequirementModel) -> None:
        """Swap in a new requirement model (e.g. a re-extraction); every result goes stale."""
        self.requirement_model = model
        invalidate_session(self)

    def find_candidate(self, name: str) -> Optional[CandidateRecord]:
        for record in self.candidates:
            if record.display_name == name or record.cv_name == name:
                return record
        return None

    def has_email(self, email: Optional[str]) -> bool:
        if not email:
            return False
        email = email.lower()
        return any(record.email and record.email.lower() == email for record in self.candidates)

    def sort_candidates(self) -> None:
        """Best alignment first; candidates without a result go last."""
        self.candidates.sort(
            key=lambda r: r.result.alignment_score if r.result is not None else -1.0,
            reverse=True,
        )

    def stale_candidates(self) -> List[CandidateRecord]:
        return [r for r in self.candidates if r.result is not None and r.result.is_stale]

    def edit_result(
        self,
        name: str,
        edits: Dict[int, AlignmentEdit],
        config: Optional[ScoringConfig] = None
    ) -> CandidateResult:
        """Apply manual overrides to one candidate's result and store the replacement."""
        record = self.find_candidate(name)
        if record is None or record.result is None:
            raise KeyError(f"No assessed candidate named {name!r}")
        record.result = apply_manual_edits(record.result, edits, config)
        self.summary = None
        return record.result

    def to_dict(self, only_issues: bool = False) -> Dict[str, Any]:
        return {
            "id": self.id,
            "jdName": self.jd_name,
            "createdAt": self.created_at,
            "requirements": self.requirement_model.model_dump(mode="json", by_alias=True),
            "candidates": [
                {
                    "cvName": r.cv_name,
                    "status": r.status.value,
                    "error": r.error,
                    "analysis": r.result.to_dict(only_issues) if r.result is not None else None,
                }
                for r in self.candidates
            ],
        }
