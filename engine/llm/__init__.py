"""LLM Module - Judge interfaces, resilient invocation and OpenAI adapters."""
from engine.llm.interfaces import AlignmentJudge, RequirementExtractor
from engine.llm.schema_models import AlignmentStatus, AlignmentVerdict, CandidateProfile, JudgeResponse
from engine.llm.retry import invoke_with_retry, is_transient
from engine.llm.openai_judge import OpenAIJudge, OpenAIRequirementExtractor

__all__ = [
    'AlignmentJudge', 'RequirementExtractor',
    'AlignmentStatus', 'AlignmentVerdict', 'CandidateProfile', 'JudgeResponse',
    'invoke_with_retry', 'is_transient',
    'OpenAIJudge', 'OpenAIRequirementExtractor'
]
