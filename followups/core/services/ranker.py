"""Suggestion ranker and limiter."""

from collections.abc import Iterable
from dataclasses import dataclass, field

from followups.config import get_logger
from followups.core.entities.suggestion import Suggestion
from followups.core.exceptions import InvalidSuggestionError
from followups.core.services.priority import priority_rank

logger = get_logger(__name__)


@dataclass
class RankedSuggestions:
    """Capped, ordered suggestions plus what was left out."""

    suggestions: list[Suggestion] = field(default_factory=list)
    invalid: int = 0
    truncated: int = 0


def _sort_key(suggestion: Suggestion) -> tuple:
    return (priority_rank(suggestion.priority), suggestion.due_date)


def rank_and_limit(candidates: Iterable[Suggestion], limit: int = 5) -> RankedSuggestions:
    """
    Order candidates by priority, then soonest due date, and keep ``limit``.

    Invalid candidates are dropped and counted. The sort is stable, so
    candidates equal on both keys keep their discovery order.
    """
    result = RankedSuggestions()
    valid: list[Suggestion] = []

    for candidate in candidates:
        try:
            candidate.require_valid()
        except InvalidSuggestionError as e:
            result.invalid += 1
            logger.debug("suggestion_dropped_invalid", **e.details)
            continue
        valid.append(candidate)

    ranked = sorted(valid, key=_sort_key)
    result.suggestions = ranked[:limit]
    result.truncated = max(len(ranked) - limit, 0)
    return result
