"""
Pytest configuration and fixtures.

This file provides pytest-specific configuration and fixtures.
Builders shared with non-pytest test classes live in tests/fixtures.
"""

import pytest

from engine.config_loader import RetryConfig, ScoringConfig
from tests.fixtures.requirement_fixtures import build_requirement_model
from tests.mocks.judge_mocks import RecordingSleep


@pytest.fixture
def requirement_model():
    """A fresh requirement model covering every category shape."""
    return build_requirement_model()


@pytest.fixture
def scoring_config():
    return ScoringConfig()


@pytest.fixture
def retry_config():
    return RetryConfig(max_attempts=3, base_delay_seconds=1.0)


@pytest.fixture
def fake_sleep():
    """Async sleep replacement that records delays instead of waiting."""
    return RecordingSleep()
