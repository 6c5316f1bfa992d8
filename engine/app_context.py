from dataclasses import dataclass
from typing import Optional

from engine.cache.extraction_cache import (
    ExtractionCache,
    InMemoryExtractionCache,
    RedisExtractionCache,
)
from engine.config_loader import AppConfig, CacheConfig, LlmConfig
from engine.llm.interfaces import AlignmentJudge, RequirementExtractor
from engine.llm.openai_judge import OpenAIJudge, OpenAIRequirementExtractor
from engine.requirements.extraction import extract_requirements
from engine.requirements.models import JobRequirementModel
from assessment.runner import AssessmentRunner


@dataclass
class AppContext:
    """Application context container that holds all wired dependencies.

    A single place where the cache, judge, extractor and runner are built
    from configuration. Tests build the same container with fakes.
    """
    config: AppConfig
    judge: AlignmentJudge
    extractor: RequirementExtractor
    runner: AssessmentRunner
    cache: Optional[ExtractionCache] = None

    @classmethod
    def build(cls, config: AppConfig) -> "AppContext":
        """Build an AppContext from config.

        Args:
            config: Loaded application configuration

        Returns:
            Fully wired AppContext instance
        """
        judge, extractor = cls._build_llm_adapters(config.llm)
        runner = AssessmentRunner(
            judge,
            scoring_config=config.scoring,
            retry_config=config.retry,
        )
        return cls(
            config=config,
            judge=judge,
            extractor=extractor,
            runner=runner,
            cache=cls._build_cache(config.cache),
        )

    @staticmethod
    def _build_llm_adapters(llm_config: LlmConfig):
        """Build the judge and extractor; they share one client when models share a provider."""
        judge = OpenAIJudge(
            api_key=llm_config.api_key,
            base_url=llm_config.base_url,
            model=llm_config.judge_model,
            temperature=llm_config.temperature,
        )
        extractor = OpenAIRequirementExtractor(
            model=llm_config.extraction_model,
            temperature=llm_config.temperature,
            client=judge.client,
        )
        return judge, extractor

    @staticmethod
    def _build_cache(cache_config: CacheConfig) -> ExtractionCache:
        """Build the extraction cache backend named in config."""
        if cache_config.backend == "redis":
            return RedisExtractionCache(
                redis_url=cache_config.redis_url,
                password=cache_config.password,
                ttl_seconds=cache_config.ttl_seconds,
            )
        return InMemoryExtractionCache(
            max_entries=cache_config.max_entries,
            ttl_seconds=cache_config.ttl_seconds,
        )

    async def extract(self, job_description: str) -> JobRequirementModel:
        """Structure a job description through the configured cache."""
        return await extract_requirements(
            self.extractor,
            job_description,
            cache=self.cache,
            retry_config=self.config.retry,
        )
