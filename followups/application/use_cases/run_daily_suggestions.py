"""
Run Daily Suggestions Use Case.

Scheduled entry point: evaluates suggestions, announces them with a single
summary notification and auto-creates only the urgent ones. Everything
below urgent stays a proposal awaiting the user.
"""

import asyncio
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime

from followups.application.locks import UserLockRegistry, get_user_lock_registry
from followups.application.use_cases.create_suggested_reminders import (
    CreateSuggestedRemindersUseCase,
    MaterializationResult,
)
from followups.application.use_cases.suggest_follow_ups import (
    SuggestFollowUpsUseCase,
    SuggestionResult,
)
from followups.config import get_logger, get_settings, run_context
from followups.core.entities.notification import Notification, NotificationType
from followups.core.entities.policy import SuggestionPolicy
from followups.core.entities.reminder import ReminderPriority
from followups.core.entities.suggestion import Suggestion
from followups.core.exceptions import PersistenceError
from followups.core.interfaces.clock import IClock
from followups.core.interfaces.storage import (
    IClientStore,
    IInvoiceStore,
    INotificationStore,
    IReminderStore,
)

logger = get_logger(__name__)


@dataclass
class DailyRunResult:
    """Outcome of one user's daily run."""

    user_id: str
    suggestions: list[Suggestion] = field(default_factory=list)
    summary_notification: Notification | None = None
    summary_error: PersistenceError | None = None
    materialization: MaterializationResult | None = None
    failed_sources: list[str] = field(default_factory=list)
    error: str | None = None

    @property
    def reminders_created(self) -> int:
        if self.materialization is None:
            return 0
        return self.materialization.reminders_created


class RunDailySuggestionsUseCase:
    """
    Use case for the scheduled suggestion run.

    Holds the user's lock from the reminder read through the last write so
    two runs in this process cannot both pass deduplication and create the
    same reminder.
    """

    def __init__(
        self,
        client_store: IClientStore | None = None,
        invoice_store: IInvoiceStore | None = None,
        reminder_store: IReminderStore | None = None,
        notification_store: INotificationStore | None = None,
        clock: IClock | None = None,
        policy: SuggestionPolicy | None = None,
        lock_registry: UserLockRegistry | None = None,
        auto_create_urgent: bool | None = None,
        max_concurrent_users: int | None = None,
    ) -> None:
        self._notification_store = notification_store
        self._clock = clock
        self._locks = lock_registry or get_user_lock_registry()

        if auto_create_urgent is None or max_concurrent_users is None:
            settings = get_settings().followup
            auto_create_urgent = (
                settings.auto_create_urgent if auto_create_urgent is None else auto_create_urgent
            )
            max_concurrent_users = max_concurrent_users or settings.max_concurrent_users
        self.auto_create_urgent = auto_create_urgent
        self.max_concurrent_users = max_concurrent_users

        self._suggest = SuggestFollowUpsUseCase(
            client_store=client_store,
            invoice_store=invoice_store,
            reminder_store=reminder_store,
            clock=clock,
            policy=policy,
        )
        self._create = CreateSuggestedRemindersUseCase(
            reminder_store=reminder_store,
            notification_store=notification_store,
            client_store=client_store,
            clock=clock,
            lock_registry=self._locks,
            policy=policy,
        )

    async def _get_notification_store(self) -> INotificationStore:
        if self._notification_store is None:
            from followups.infrastructure.storage.sqlite import get_notification_store
            self._notification_store = await get_notification_store()
        return self._notification_store

    def _get_now(self) -> datetime:
        if self._clock is None:
            from followups.infrastructure.clock import SystemClock
            self._clock = SystemClock()
        return self._clock.now()

    async def execute(self, user_id: str, now: datetime | None = None) -> DailyRunResult:
        """
        Run the daily suggestion pass for one user.

        Args:
            user_id: User to evaluate.
            now: Reference instant for the whole run; clock when omitted.

        Returns:
            DailyRunResult with the suggestions and what was materialized.
        """
        now = now or self._get_now()
        result = DailyRunResult(user_id=user_id)

        with run_context(user_id=user_id, run="daily"):
            async with self._locks.lock_for(user_id):
                suggested: SuggestionResult = await self._suggest.execute(user_id, now)
                result.suggestions = suggested.suggestions
                result.failed_sources = suggested.failed_sources

                if not suggested.suggestions:
                    logger.info("daily_suggestions_none")
                    return result

                await self._notify_summary(user_id, len(suggested.suggestions), now, result)

                if self.auto_create_urgent:
                    urgent = [
                        s for s in suggested.suggestions if s.priority == ReminderPriority.URGENT
                    ]
                    if urgent:
                        result.materialization = await self._create.materialize(
                            user_id, urgent, now
                        )

            logger.info(
                "daily_suggestions_done",
                suggestions=len(result.suggestions),
                reminders_created=result.reminders_created,
            )
        return result

    async def execute_many(
        self, user_ids: Iterable[str], now: datetime | None = None
    ) -> list[DailyRunResult]:
        """
        Run the daily pass for many users with bounded parallelism.

        A failure for one user is recorded on that user's result and does
        not affect the others. Results follow the input order.
        """
        now = now or self._get_now()
        semaphore = asyncio.Semaphore(self.max_concurrent_users)

        async def run_one(user_id: str) -> DailyRunResult:
            async with semaphore:
                try:
                    return await self.execute(user_id, now)
                except Exception as e:
                    logger.error("daily_run_failed", user_id=user_id, exc_info=True)
                    return DailyRunResult(user_id=user_id, error=str(e) or type(e).__name__)

        results = await asyncio.gather(*(run_one(user_id) for user_id in user_ids))
        logger.info(
            "daily_batch_done",
            users=len(results),
            failed=sum(1 for r in results if r.error is not None),
        )
        return list(results)

    async def _notify_summary(
        self, user_id: str, count: int, now: datetime, result: DailyRunResult
    ) -> None:
        notification_store = await self._get_notification_store()
        try:
            result.summary_notification = await notification_store.create(
                Notification(
                    user_id=user_id,
                    title="Reminder suggestions available",
                    message=f"{count} new reminder suggestions are ready for review.",
                    type=NotificationType.INFO,
                    created_at=now,
                )
            )
        except Exception as e:
            result.summary_error = PersistenceError("notification", str(e) or type(e).__name__)
            logger.warning(
                "summary_notification_failed",
                user_id=user_id,
                **result.summary_error.details,
                exc_info=True,
            )
