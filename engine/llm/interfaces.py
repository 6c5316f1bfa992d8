"""
Judge Interfaces - Abstract bases for the external language-model collaborators.

Implementations are never called directly by the engine; every call is wrapped
in engine.llm.retry.invoke_with_retry.
"""
from abc import ABC, abstractmethod
from typing import Optional

from engine.llm.schema_models import CandidateProfile, JudgeResponse
from engine.requirements.models import JobRequirementModel


class AlignmentJudge(ABC):
    """
    Produces qualitative per-requirement verdicts for one candidate.
    """

    @abstractmethod
    async def assess(
        self,
        requirement_model: JobRequirementModel,
        cv_text: str,
        profile: Optional[CandidateProfile] = None
    ) -> JudgeResponse:
        """
        Judge a candidate's CV against the requirement model.

        Args:
            requirement_model: Current canonical requirements
            cv_text: Raw candidate text
            profile: Optional pre-parsed candidate data

        Raises:
            JudgeResponseError: when the model output cannot be parsed or validated
        """
        pass


class RequirementExtractor(ABC):
    """
    Structures raw job-description text into a JobRequirementModel.
    """

    @abstractmethod
    async def extract(self, job_description: str) -> JobRequirementModel:
        pass
