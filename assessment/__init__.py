"""Assessment Module - Sessions, the staleness protocol and the sequential batch runner."""
from assessment.session import AssessmentSession, AssessmentStatus, CandidateRecord
from assessment.staleness import (
    AlignmentEdit, ResultState, result_state, invalidate_session, accept_assessment, apply_manual_edits
)
from assessment.runner import AssessmentRunner, BatchOutcome, CandidateUpload

__all__ = [
    'AssessmentSession', 'AssessmentStatus', 'CandidateRecord',
    'AlignmentEdit', 'ResultState', 'result_state', 'invalidate_session',
    'accept_assessment', 'apply_manual_edits',
    'AssessmentRunner', 'BatchOutcome', 'CandidateUpload'
]
