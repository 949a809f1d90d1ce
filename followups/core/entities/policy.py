"""Thresholds and windows governing suggestion rules."""

from pydantic import BaseModel, ConfigDict, Field


class SuggestionPolicy(BaseModel):
    """
    Tunable thresholds for the follow-up suggestion rules.

    Defaults reproduce the production behaviour: overdue invoices escalate to
    urgent after a week, clients go stale after two weeks of silence and the
    suggestion list is capped at five entries.
    """

    model_config = ConfigDict(frozen=True)

    overdue_urgent_after_days: int = 7
    overdue_dedup_days: int = 7
    due_soon_window_days: int = 3
    due_soon_dedup_days: int = 3
    stale_contact_after_days: int = 14
    stale_contact_high_after_days: int = 30
    stale_contact_dedup_days: int = 7
    follow_up_delay_days: int = 1
    max_suggestions: int = Field(default=5, ge=1)
