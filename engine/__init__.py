"""Alignment scoring and requirement reconciliation engine."""
