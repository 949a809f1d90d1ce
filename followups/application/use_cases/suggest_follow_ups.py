"""
Suggest Follow-ups Use Case.

Runs the suggestion rules on demand and returns the ranked proposals
without persisting anything.
"""

from dataclasses import dataclass, field
from datetime import datetime

from followups.config import get_logger, get_settings
from followups.core.entities.common import as_utc
from followups.core.entities.policy import SuggestionPolicy
from followups.core.entities.reminder import ReminderType
from followups.core.entities.suggestion import Suggestion
from followups.core.interfaces.clock import IClock
from followups.core.interfaces.storage import IClientStore, IInvoiceStore, IReminderStore
from followups.core.services.suggestion_engine import FollowUpSuggestionService

logger = get_logger(__name__)


@dataclass
class SuggestionResult:
    """Result of a suggest-only run."""

    user_id: str
    generated_at: datetime
    suggestions: list[Suggestion] = field(default_factory=list)
    total_suggestions: int = 0
    candidates: int = 0
    suppressed: int = 0
    invalid: int = 0
    truncated: int = 0
    payment_suggestions: int = 0
    follow_up_suggestions: int = 0
    failed_sources: list[str] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        """Whether some source could not be read."""
        return bool(self.failed_sources)


class SuggestFollowUpsUseCase:
    """
    Use case that evaluates a user's data and returns reminder suggestions.

    Side-effect free, so it is safe to call repeatedly and concurrently.
    """

    def __init__(
        self,
        client_store: IClientStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        reminder_store: IReminderStore | None = None,
        clock: IClock | None = None,
        policy: SuggestionPolicy | None = None,
    ) -> None:
        self._client_store = client_store
        self._invoice_store = invoice_store
        self._rem_store = reminder_store
        self._clock = clock
        self._policy = policy

    async def _get_client_store(self) -> IClientStore:
        if self._client_store is None:
            from followups.infrastructure.storage.sqlite import get_client_store
            self._client_store = await get_client_store()
        return self._client_store

    async def _get_invoice_store(self) -> IInvoiceStore:
        if self._invoice_store is None:
            from followups.infrastructure.storage.sqlite import get_invoice_store
            self._invoice_store = await get_invoice_store()
        return self._invoice_store

    async def _get_rem_store(self) -> IReminderStore:
        if self._rem_store is None:
            from followups.infrastructure.storage.sqlite import get_reminder_store
            self._rem_store = await get_reminder_store()
        return self._rem_store

    def _get_clock(self) -> IClock:
        if self._clock is None:
            from followups.infrastructure.clock import SystemClock
            self._clock = SystemClock()
        return self._clock

    def _get_policy(self) -> SuggestionPolicy:
        if self._policy is None:
            self._policy = get_settings().followup.to_policy()
        return self._policy

    async def execute(self, user_id: str, now: datetime | None = None) -> SuggestionResult:
        """
        Produce the ranked suggestion list for a user.

        Args:
            user_id: Owner of the evaluated data.
            now: Reference instant; read from the clock when omitted.

        Returns:
            SuggestionResult with at most ``max_suggestions`` entries.
        """
        now = as_utc(now) if now is not None else self._get_clock().now()

        service = FollowUpSuggestionService(
            client_store=await self._get_client_store(),
            invoice_store=await self._get_invoice_store(),
            reminder_store=await self._get_rem_store(),
            policy=self._get_policy(),
        )
        evaluation = await service.evaluate(user_id, now)

        result = SuggestionResult(
            user_id=user_id,
            generated_at=now,
            suggestions=evaluation.suggestions,
            total_suggestions=len(evaluation.suggestions),
            candidates=evaluation.candidates,
            suppressed=evaluation.suppressed,
            invalid=evaluation.invalid,
            truncated=evaluation.truncated,
            failed_sources=list(evaluation.failed_sources),
        )

        for suggestion in result.suggestions:
            if suggestion.reminder_type == ReminderType.PAYMENT:
                result.payment_suggestions += 1
            elif suggestion.reminder_type == ReminderType.FOLLOW_UP:
                result.follow_up_suggestions += 1

        logger.info(
            "suggest_follow_ups_done",
            user_id=user_id,
            total=result.total_suggestions,
            payment=result.payment_suggestions,
            follow_up=result.follow_up_suggestions,
            partial=result.is_partial,
        )
        return result
