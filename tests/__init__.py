#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests run offline: the judge and extractor are scripted fakes
(tests/mocks/judge_mocks.py), the OpenAI client and Redis are mocked.

    # Run all tests
    python -m pytest tests/ -v

    # Run only the scorer tests
    python -m pytest tests/unit/engine/scorer -v
"""
