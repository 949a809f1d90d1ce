"""Application use cases."""

from followups.application.use_cases.create_suggested_reminders import (
    CreateSuggestedRemindersUseCase,
    MaterializationOutcome,
    MaterializationResult,
    match_client_by_name,
)
from followups.application.use_cases.run_daily_suggestions import (
    DailyRunResult,
    RunDailySuggestionsUseCase,
)
from followups.application.use_cases.suggest_follow_ups import (
    SuggestFollowUpsUseCase,
    SuggestionResult,
)

__all__ = [
    "SuggestFollowUpsUseCase",
    "SuggestionResult",
    "CreateSuggestedRemindersUseCase",
    "MaterializationOutcome",
    "MaterializationResult",
    "match_client_by_name",
    "RunDailySuggestionsUseCase",
    "DailyRunResult",
]
