"""
Priority arbiter.

Maps signal severity to a reminder priority:

    rule               condition                 priority
    overdue-payment    overdue > 7 days          urgent
    overdue-payment    overdue 0-7 days          high
    due-soon-payment   due within 3 days         medium
    stale-contact      silent > 30 days          high
    stale-contact      silent 15-30 days         medium

Day thresholds come from SuggestionPolicy.
"""

from followups.core.entities.policy import SuggestionPolicy
from followups.core.entities.reminder import ReminderPriority

PRIORITY_RANK: dict[ReminderPriority, int] = {
    ReminderPriority.URGENT: 0,
    ReminderPriority.HIGH: 1,
    ReminderPriority.MEDIUM: 2,
    ReminderPriority.LOW: 3,
}


def priority_rank(priority: ReminderPriority) -> int:
    """Sort rank of a priority, lower is more urgent."""
    return PRIORITY_RANK[priority]


def overdue_payment_priority(
    days_overdue: int, policy: SuggestionPolicy
) -> ReminderPriority:
    if days_overdue > policy.overdue_urgent_after_days:
        return ReminderPriority.URGENT
    return ReminderPriority.HIGH


def due_soon_payment_priority(
    days_until_due: int, policy: SuggestionPolicy
) -> ReminderPriority:
    return ReminderPriority.MEDIUM


def stale_contact_priority(
    days_silent: int, policy: SuggestionPolicy
) -> ReminderPriority:
    if days_silent > policy.stale_contact_high_after_days:
        return ReminderPriority.HIGH
    return ReminderPriority.MEDIUM
