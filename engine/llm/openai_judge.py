"""
OpenAI Judge - Alignment judge and requirement extractor on an OpenAI-compatible API.

Both adapters make exactly one request per call; retries are applied by the
caller through engine.llm.retry.invoke_with_retry.
"""
from typing import Dict, Any, Optional, Tuple
import copy
import json
import logging

from openai import AsyncOpenAI
from pydantic import ValidationError

from engine.exceptions import JudgeResponseError
from engine.llm.interfaces import AlignmentJudge, RequirementExtractor
from engine.llm.schema_models import (
    CandidateProfile,
    JudgeResponse,
    JUDGE_RESPONSE_SCHEMA,
    REQUIREMENT_EXTRACTION_SCHEMA,
)
from engine.llm.system_prompts import (
    ALIGNMENT_JUDGE_SYSTEM_PROMPT,
    REQUIREMENT_EXTRACTION_SYSTEM_PROMPT,
)
from engine.requirements.models import JobRequirementModel

logger = logging.getLogger(__name__)


def _unwrap_schema_spec(spec: Dict[str, Any]) -> Tuple[str, bool, Dict[str, Any]]:
    """Unwrap a schema spec to extract name, strict flag, and raw JSON schema.

    Args:
        spec: Either a wrapped spec {'name': str, 'strict': bool, 'schema': {...}}
              or a raw JSON schema dict

    Returns:
        Tuple of (name, strict, raw_schema)
    """
    if isinstance(spec, dict) and "schema" in spec and "name" in spec:
        return spec.get("name", "structured_response"), bool(spec.get("strict", False)), spec["schema"]
    return "structured_response", False, spec


def _build_client(api_key: Optional[str], base_url: Optional[str]) -> AsyncOpenAI:
    client_kwargs = {}
    if api_key:
        client_kwargs['api_key'] = api_key
    if base_url:
        client_kwargs['base_url'] = base_url
    return AsyncOpenAI(**client_kwargs)


async def _complete_json(
    client: AsyncOpenAI,
    model: str,
    temperature: float,
    system_prompt: str,
    user_message: str,
    schema_spec: Dict[str, Any]
) -> Dict[str, Any]:
    """Run one JSON-schema-mode chat completion and decode the reply."""
    name, strict, raw_schema = _unwrap_schema_spec(schema_spec)
    runtime_schema = copy.deepcopy(raw_schema)

    # A broken schema is our bug, so this is a ValueError and is never retried
    if runtime_schema.get("type") != "object" or "properties" not in runtime_schema:
        raise ValueError(f"Not a valid JSON Schema object. Top-level keys: {list(runtime_schema.keys())}")

    response = await client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_message},
        ],
        temperature=temperature,
        response_format={
            "type": "json_schema",
            "json_schema": {
                "name": name,
                "schema": runtime_schema,
                "strict": strict,
            },
        },
    )

    try:
        content = response.choices[0].message.content
        data = json.loads(content)
    except (json.JSONDecodeError, IndexError, AttributeError, TypeError) as e:
        logger.error(f"Failed to parse structured response from {model}: {e}")
        raise JudgeResponseError(f"Schema validation failed: unparseable model output ({e})") from e

    if not isinstance(data, dict):
        raise JudgeResponseError(f"Schema validation failed: expected a JSON object, got {type(data).__name__}")
    return data


class OpenAIJudge(AlignmentJudge):
    """
    Alignment judge backed by an OpenAI-compatible chat completions API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.0,
        client: Optional[AsyncOpenAI] = None
    ):
        self.client = client or _build_client(api_key, base_url)
        self.model = model
        self.temperature = temperature

    def build_user_message(
        self,
        requirement_model: JobRequirementModel,
        cv_text: str,
        profile: Optional[CandidateProfile] = None
    ) -> str:
        parsed = profile.model_dump(mode="json", by_alias=True) if profile else None
        return (
            "Job Description Criteria (JSON):\n"
            f"{json.dumps(requirement_model.to_judge_payload(), indent=2)}\n"
            "---\n"
            "Candidate's Parsed CV Data (JSON):\n"
            f"{json.dumps(parsed, indent=2)}\n"
            "---\n"
            "Full CV Text:\n"
            f"{cv_text}\n"
        )

    async def assess(
        self,
        requirement_model: JobRequirementModel,
        cv_text: str,
        profile: Optional[CandidateProfile] = None
    ) -> JudgeResponse:
        data = await _complete_json(
            self.client,
            self.model,
            self.temperature,
            ALIGNMENT_JUDGE_SYSTEM_PROMPT,
            self.build_user_message(requirement_model, cv_text, profile),
            JUDGE_RESPONSE_SCHEMA,
        )

        try:
            judged = JudgeResponse.model_validate(data)
        except ValidationError as e:
            raise JudgeResponseError(f"Judge response schema validation failed: {e}") from e

        logger.info(
            f"Judge ({self.model}) returned {len(judged.alignment_details or [])} alignment details"
        )
        return judged


class OpenAIRequirementExtractor(RequirementExtractor):
    """
    Requirement extractor backed by an OpenAI-compatible chat completions API.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        temperature: float = 0.0,
        client: Optional[AsyncOpenAI] = None
    ):
        self.client = client or _build_client(api_key, base_url)
        self.model = model
        self.temperature = temperature

    async def extract(self, job_description: str) -> JobRequirementModel:
        data = await _complete_json(
            self.client,
            self.model,
            self.temperature,
            REQUIREMENT_EXTRACTION_SYSTEM_PROMPT,
            f"<JOB_DESCRIPTION>\n{job_description}\n</JOB_DESCRIPTION>\n\nExtract all requirements.",
            REQUIREMENT_EXTRACTION_SCHEMA,
        )

        try:
            model = JobRequirementModel.model_validate(data)
        except ValidationError as e:
            raise JudgeResponseError(f"Requirement extraction schema validation failed: {e}") from e
        return model.mark_extracted()
