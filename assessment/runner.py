"""Sequential assessment runner.

Candidates are assessed one at a time against a session's requirement model.
A failure is scoped to its candidate: it is recorded in the BatchOutcome and
the batch moves on.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Tuple

import openai

from engine.config_loader import RetryConfig, ScoringConfig
from engine.exceptions import EngineException
from engine.llm.interfaces import AlignmentJudge
from engine.llm.retry import invoke_with_retry
from engine.llm.schema_models import CandidateProfile
from engine.requirements.models import JobRequirementModel
from engine.scorer.models import CandidateResult
from engine.scorer.reconciliation import reconcile
from engine.scorer.recommendation import classify
from engine.utils import round2, to_title_case
from assessment.session import AssessmentSession, AssessmentStatus, CandidateRecord
from assessment.staleness import accept_assessment

logger = logging.getLogger(__name__)

# Failures that end one candidate's assessment without stopping the batch
CANDIDATE_ERRORS = (EngineException, openai.OpenAIError)


@dataclass
class CandidateUpload:
    """Raw input for one candidate."""
    name: str
    cv_text: str
    profile: Optional[CandidateProfile] = None


@dataclass
class BatchOutcome:
    """Result of one batch (initial intake or re-assessment)."""
    succeeded: List[str] = field(default_factory=list)
    failed: List[Tuple[str, str]] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    execution_time: float = 0.0

    @property
    def success(self) -> bool:
        return not self.failed


class AssessmentRunner:
    """Runs the judge for candidates and turns its verdicts into results."""

    def __init__(
        self,
        judge: AlignmentJudge,
        scoring_config: Optional[ScoringConfig] = None,
        retry_config: Optional[RetryConfig] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.judge = judge
        self.scoring_config = scoring_config or ScoringConfig()
        self.retry_config = retry_config or RetryConfig()
        self._clock = clock
        self._sleep = sleep

    async def assess_candidate(
        self,
        model: JobRequirementModel,
        cv_text: str,
        profile: Optional[CandidateProfile] = None
    ) -> CandidateResult:
        """
        Assess one CV against a requirement model.

        Name, email and experience come from the parsed profile when one is
        supplied; the judge's values fill in only what the profile lacks.

        Raises:
            JudgeUnavailableError: the judge kept failing transiently
            ReconciliationError: the judge returned no alignment details
        """
        start = self._clock()

        response = await invoke_with_retry(
            lambda: self.judge.assess(model, cv_text, profile),
            operation_name="candidate assessment",
            config=self.retry_config,
            sleep=self._sleep,
        )
        reconciled = reconcile(model, response, self.scoring_config)
        recommendation = classify(
            reconciled.alignment_details, reconciled.alignment_score, self.scoring_config
        )

        name = response.candidate_name
        email = response.email
        total_experience = response.total_experience
        calculated_at = None
        if profile is not None:
            name = profile.name or name
            email = profile.email or email
            total_experience = profile.total_experience or total_experience
            calculated_at = profile.experience_calculated_at

        return CandidateResult(
            candidate_name=to_title_case(name),
            alignment_score=reconciled.alignment_score,
            candidate_score=reconciled.candidate_score,
            max_score=reconciled.max_score,
            recommendation=recommendation,
            alignment_details=reconciled.alignment_details,
            email=email,
            total_experience=total_experience,
            experience_calculated_at=calculated_at,
            alignment_summary=response.alignment_summary,
            strengths=list(response.strengths),
            weaknesses=list(response.weaknesses),
            interview_probes=list(response.interview_probes),
            processing_time=round2(self._clock() - start),
        )

    async def _assess_record(
        self,
        session: AssessmentSession,
        record: CandidateRecord
    ) -> Tuple[CandidateResult, bool]:
        """Assess a record against the session model; the flag is True if the model changed meanwhile."""
        revision = session.revision
        record.status = AssessmentStatus.PROCESSING
        result = await self.assess_candidate(session.requirement_model, record.cv_text, record.profile)
        return result, session.revision != revision

    async def run_batch(self, session: AssessmentSession, uploads: List[CandidateUpload]) -> BatchOutcome:
        """
        Assess new candidates one after another and add them to the session.

        Candidates whose email is already in the session are skipped, both
        before calling the judge (profile email) and after (judged email).
        """
        start_time = time.time()
        outcome = BatchOutcome()

        logger.info("=" * 60)
        logger.info(f"ASSESSING {len(uploads)} CANDIDATE(S) FOR {session.jd_name}")
        logger.info("=" * 60)

        for i, upload in enumerate(uploads, 1):
            if upload.profile is not None and session.has_email(upload.profile.email):
                logger.info(f"Skipping {upload.name}: {upload.profile.email} already assessed")
                outcome.skipped.append(upload.name)
                continue

            record = CandidateRecord(cv_name=upload.name, cv_text=upload.cv_text, profile=upload.profile)
            logger.info(f"[{i}/{len(uploads)}] Assessing {upload.name}")
            try:
                result, stale = await self._assess_record(session, record)
            except CANDIDATE_ERRORS as e:
                record.status = AssessmentStatus.ERROR
                record.error = str(e)
                outcome.failed.append((upload.name, str(e)))
                logger.error(f"Assessment of {upload.name} failed: {e}")
                continue

            if session.has_email(result.email):
                logger.info(f"Skipping {upload.name}: {result.email} already assessed")
                outcome.skipped.append(upload.name)
                continue

            accept_assessment(record, result, stale=stale)
            record.status = AssessmentStatus.DONE
            session.candidates.append(record)
            outcome.succeeded.append(record.display_name)
            logger.info(
                f"{record.display_name}: {result.alignment_score:.2f} ({result.recommendation.value})"
            )

        session.sort_candidates()
        if outcome.succeeded:
            session.summary = None
        outcome.execution_time = time.time() - start_time

        logger.info("=" * 60)
        logger.info(
            f"BATCH COMPLETED in {outcome.execution_time:.2f}s: {len(outcome.succeeded)} assessed, "
            f"{len(outcome.failed)} failed, {len(outcome.skipped)} skipped"
        )
        logger.info("=" * 60)
        return outcome

    async def reassess(
        self,
        session: AssessmentSession,
        names: Optional[List[str]] = None
    ) -> BatchOutcome:
        """
        Re-run the judge for existing candidates against the current model.

        Args:
            session: Session whose candidates are reassessed
            names: Candidates to reassess; defaults to every stale candidate

        A success replaces the result wholesale (stale and edited flags
        cleared). A failure keeps the previous result and marks the candidate
        as errored.
        """
        start_time = time.time()
        outcome = BatchOutcome()

        if names is None:
            targets = session.stale_candidates()
        else:
            targets = []
            for name in names:
                record = session.find_candidate(name)
                if record is None:
                    outcome.failed.append((name, "Candidate not found in session"))
                else:
                    targets.append(record)

        logger.info("=" * 60)
        logger.info(f"RE-ASSESSING {len(targets)} CANDIDATE(S) FOR {session.jd_name}")
        logger.info("=" * 60)

        for record in targets:
            name = record.display_name
            try:
                result, stale = await self._assess_record(session, record)
            except CANDIDATE_ERRORS as e:
                record.status = AssessmentStatus.ERROR
                record.error = str(e)
                outcome.failed.append((name, str(e)))
                logger.error(f"Re-assessment of {name} failed; keeping previous result: {e}")
                continue

            accept_assessment(record, result, stale=stale)
            record.status = AssessmentStatus.DONE
            record.error = None
            outcome.succeeded.append(record.display_name)

        session.sort_candidates()
        if outcome.succeeded:
            session.summary = None
        outcome.execution_time = time.time() - start_time

        logger.info(
            f"Re-assessment completed in {outcome.execution_time:.2f}s: "
            f"{len(outcome.succeeded)} updated, {len(outcome.failed)} failed"
        )
        return outcome
