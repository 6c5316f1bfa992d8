"""
Requirement extraction with a content-addressed cache in front of the extractor.
"""
import logging
from typing import Optional

from engine.cache.extraction_cache import ExtractionCache, make_cache_key
from engine.config_loader import RetryConfig
from engine.llm.interfaces import RequirementExtractor
from engine.llm.retry import invoke_with_retry
from engine.requirements.models import JobRequirementModel

logger = logging.getLogger(__name__)


async def extract_requirements(
    extractor: RequirementExtractor,
    job_description: str,
    cache: Optional[ExtractionCache] = None,
    retry_config: Optional[RetryConfig] = None
) -> JobRequirementModel:
    """
    Structure a job description, reusing a cached extraction of identical text.

    Each call returns an independent model, so edits to one session never
    leak into another session built from the same text.
    """
    key = make_cache_key(job_description)

    if cache is not None:
        cached = cache.get(key)
        if cached is not None:
            logger.info(f"Reusing cached requirement extraction {key[:16]}...")
            return JobRequirementModel.model_validate(cached)

    model = await invoke_with_retry(
        lambda: extractor.extract(job_description),
        operation_name="requirement extraction",
        config=retry_config,
    )

    if cache is not None:
        cache.set(key, model.model_dump(mode="json", by_alias=True))
    return model
