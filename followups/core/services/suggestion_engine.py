"""
Follow-up Suggestion Service.

Evaluates a user's clients, invoices and reminders on demand and returns
ranked reminder suggestions. Read-only: nothing is persisted here.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from followups.config import get_logger
from followups.core.entities.common import as_utc
from followups.core.entities.policy import SuggestionPolicy
from followups.core.entities.reminder import Reminder
from followups.core.entities.suggestion import Suggestion
from followups.core.exceptions import SourceReadError
from followups.core.interfaces.storage import IClientStore, IInvoiceStore, IReminderStore
from followups.core.services.deduplicator import should_suppress
from followups.core.services.ranker import rank_and_limit
from followups.core.services.signal_extractors import CLIENT_RULES, INVOICE_RULES

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class SuggestionEvaluation:
    """Outcome of one suggestion run for one user."""

    suggestions: list[Suggestion] = field(default_factory=list)
    candidates: int = 0
    suppressed: int = 0
    invalid: int = 0
    truncated: int = 0
    failed_sources: list[str] = field(default_factory=list)
    errors: list[SourceReadError] = field(default_factory=list)


class FollowUpSuggestionService:
    """
    Layer-pure service that turns store snapshots into suggestions.

    Depends only on core interfaces. A None client or invoice store skips
    the rules fed by it; a None reminder store means no dedup history.
    A failed read drops the rules that depend on that source, and since
    every rule needs the reminder history, a failed reminder read yields
    no suggestions at all.
    """

    def __init__(
        self,
        client_store: IClientStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        reminder_store: IReminderStore | None = None,
        policy: SuggestionPolicy | None = None,
    ) -> None:
        self._client_store = client_store
        self._invoice_store = invoice_store
        self._reminder_store = reminder_store
        self.policy = policy or SuggestionPolicy()

    async def evaluate(self, user_id: str, now: datetime) -> SuggestionEvaluation:
        """
        Run every rule for a user against a single reference instant.

        Args:
            user_id: Owner of the clients, invoices and reminders.
            now: Reference instant shared by every rule in the run.

        Returns:
            SuggestionEvaluation with the capped, ranked suggestions.
        """
        now = as_utc(now)
        result = SuggestionEvaluation()

        clients, invoices, reminders = await asyncio.gather(
            self._load(
                "clients",
                self._client_store.list_clients if self._client_store else None,
                user_id,
                result,
            ),
            self._load(
                "invoices",
                self._invoice_store.list_invoices if self._invoice_store else None,
                user_id,
                result,
            ),
            self._load(
                "reminders",
                self._reminder_store.list_reminders if self._reminder_store else None,
                user_id,
                result,
            ),
        )

        if "reminders" in result.failed_sources:
            logger.warning("suggestion_run_skipped", user_id=user_id, reason="no reminder history")
            return result
        history: list[Reminder] = reminders or []

        candidates: list[Suggestion] = []
        if invoices is not None:
            candidates.extend(self._apply(INVOICE_RULES, invoices, now, user_id))
        if clients is not None:
            candidates.extend(self._apply(CLIENT_RULES, clients, now, user_id))
        result.candidates = len(candidates)

        accepted: list[Suggestion] = []
        for candidate in candidates:
            if should_suppress(candidate, history, now, policy=self.policy):
                result.suppressed += 1
                continue
            accepted.append(candidate)

        ranked = rank_and_limit(accepted, limit=self.policy.max_suggestions)
        result.suggestions = ranked.suggestions
        result.invalid = ranked.invalid
        result.truncated = ranked.truncated

        logger.info(
            "suggestion_run_complete",
            user_id=user_id,
            candidates=result.candidates,
            suppressed=result.suppressed,
            invalid=result.invalid,
            returned=len(result.suggestions),
            failed_sources=result.failed_sources,
        )
        return result

    async def generate_suggestions(self, user_id: str, now: datetime) -> list[Suggestion]:
        """Convenience wrapper returning only the ranked suggestions."""
        evaluation = await self.evaluate(user_id, now)
        return evaluation.suggestions

    async def _load(
        self,
        source: str,
        loader: Callable[[str], Awaitable[list[T]]] | None,
        user_id: str,
        result: SuggestionEvaluation,
    ) -> list[T] | None:
        if loader is None:
            return None
        try:
            return await loader(user_id)
        except Exception as e:
            error = SourceReadError(source, user_id, str(e) or type(e).__name__)
            result.failed_sources.append(source)
            result.errors.append(error)
            logger.warning("suggestion_source_read_failed", **error.details, exc_info=True)
            return None

    def _apply(
        self,
        rules: Sequence[Callable[[Any, datetime, SuggestionPolicy], list[Suggestion]]],
        items: list[Any],
        now: datetime,
        user_id: str,
    ) -> list[Suggestion]:
        candidates: list[Suggestion] = []
        for rule in rules:
            try:
                candidates.extend(rule(items, now, self.policy))
            except Exception:
                logger.warning(
                    "suggestion_rule_failed",
                    rule=rule.__name__,
                    user_id=user_id,
                    exc_info=True,
                )
        return candidates
