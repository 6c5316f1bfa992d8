#!/usr/bin/env python3
"""
Scoring Module - Deterministic reconciliation of judge verdicts.

Public API:
- reconcile: Judge response + requirement model -> scored details and aggregate
- classify: Scored details + aggregate -> recommendation tier
- CandidateResult / ScoredAlignment: result records

- models.py: Data structures (CandidateResult, ScoredAlignment, Recommendation)
- reconciliation.py: Canonical index, per-verdict scoring, aggregation
- recommendation.py: Tier classification with the mandatory-core gate
"""

from engine.scorer.models import (
    CandidateResult, ScoredAlignment, Recommendation, MatchSource, issues_only
)
from engine.scorer.reconciliation import (
    RequirementIndex, ReconciliationResult, reconcile, aggregate, score_for_status, score_verdict
)
from engine.scorer.recommendation import classify, gated_failures

__all__ = [
    'CandidateResult', 'ScoredAlignment', 'Recommendation', 'MatchSource', 'issues_only',
    'RequirementIndex', 'ReconciliationResult', 'reconcile', 'aggregate',
    'score_for_status', 'score_verdict',
    'classify', 'gated_failures'
]
