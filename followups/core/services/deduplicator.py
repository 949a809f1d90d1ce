"""
Deduplicator.

Suppresses a candidate when a reminder of the same kind, for the same
client, was already created inside the rule's trailing window.
"""

from collections.abc import Iterable
from datetime import datetime

from followups.core.entities.policy import SuggestionPolicy
from followups.core.entities.reminder import Reminder
from followups.core.entities.suggestion import Suggestion, SuggestionRule
from followups.core.services.temporal import is_within_trailing_window


def dedup_window_for(rule: SuggestionRule | None, policy: SuggestionPolicy) -> int:
    """Trailing dedup window in days for a rule; rule-less suggestions use the follow-up window."""
    if rule == SuggestionRule.OVERDUE_PAYMENT:
        return policy.overdue_dedup_days
    if rule == SuggestionRule.DUE_SOON_PAYMENT:
        return policy.due_soon_dedup_days
    return policy.stale_contact_dedup_days


def _same_scope(candidate: Suggestion, reminder: Reminder) -> bool:
    if candidate.client_id is not None:
        return reminder.client_id == candidate.client_id
    if candidate.invoice_id is not None:
        return reminder.invoice_id == candidate.invoice_id
    # No attribution to match against: never deduplicated
    return False


def should_suppress(
    candidate: Suggestion,
    existing_reminders: Iterable[Reminder],
    now: datetime,
    window_days: int | None = None,
    policy: SuggestionPolicy | None = None,
) -> bool:
    """
    Whether an existing reminder already covers this candidate.

    Reminders in any status count, completed and cancelled included.
    Without an explicit ``window_days`` the window of the candidate's rule
    is used.
    """
    if window_days is None:
        window_days = dedup_window_for(candidate.rule, policy or SuggestionPolicy())
    return any(
        reminder.reminder_type == candidate.reminder_type
        and _same_scope(candidate, reminder)
        and is_within_trailing_window(reminder.created_at, now, window_days)
        for reminder in existing_reminders
    )
