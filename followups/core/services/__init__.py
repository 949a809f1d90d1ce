"""
Core business logic services.

Layer-pure services that depend only on:
- followups/core/entities/*
- followups/core/interfaces/*
- followups/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor,
and the reference instant is always passed in by the caller.
"""

from followups.core.services.deduplicator import dedup_window_for, should_suppress
from followups.core.services.priority import (
    PRIORITY_RANK,
    due_soon_payment_priority,
    overdue_payment_priority,
    priority_rank,
    stale_contact_priority,
)
from followups.core.services.ranker import RankedSuggestions, rank_and_limit
from followups.core.services.signal_extractors import (
    extract_due_soon_payments,
    extract_overdue_payments,
    extract_stale_contacts,
)
from followups.core.services.suggestion_engine import (
    FollowUpSuggestionService,
    SuggestionEvaluation,
)
from followups.core.services.temporal import (
    days_between,
    days_from,
    is_within_trailing_window,
)

__all__ = [
    # Temporal rules
    "days_between",
    "days_from",
    "is_within_trailing_window",
    # Signal extractors
    "extract_overdue_payments",
    "extract_due_soon_payments",
    "extract_stale_contacts",
    # Deduplicator
    "should_suppress",
    "dedup_window_for",
    # Priority arbiter
    "PRIORITY_RANK",
    "priority_rank",
    "overdue_payment_priority",
    "due_soon_payment_priority",
    "stale_contact_priority",
    # Ranker
    "rank_and_limit",
    "RankedSuggestions",
    # Engine
    "FollowUpSuggestionService",
    "SuggestionEvaluation",
]
