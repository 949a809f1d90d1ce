"""
Create Suggested Reminders Use Case.

Materializes accepted suggestions into reminders, each announced by a
notification. Every suggestion is its own unit of work: one failed write
never prevents the others.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime

from followups.application.locks import UserLockRegistry, get_user_lock_registry
from followups.config import get_logger, get_settings
from followups.core.entities.client import Client
from followups.core.entities.common import as_utc
from followups.core.entities.notification import (
    Notification,
    NotificationType,
    RelatedEntityType,
)
from followups.core.entities.policy import SuggestionPolicy
from followups.core.entities.reminder import Reminder, ReminderStatus
from followups.core.entities.suggestion import Suggestion
from followups.core.exceptions import (
    FollowUpError,
    InvalidSuggestionError,
    PersistenceError,
    SourceReadError,
)
from followups.core.interfaces.clock import IClock
from followups.core.interfaces.storage import (
    IClientStore,
    INotificationStore,
    IReminderStore,
)
from followups.core.services.deduplicator import should_suppress

logger = get_logger(__name__)


@dataclass
class MaterializationOutcome:
    """What happened to a single suggestion."""

    suggestion: Suggestion
    reminder: Reminder | None = None
    suppressed: bool = False
    notification: Notification | None = None
    error: FollowUpError | None = None
    notification_error: PersistenceError | None = None

    @property
    def created(self) -> bool:
        return self.reminder is not None


@dataclass
class MaterializationResult:
    """Per-item results of a create-from-suggestions batch."""

    outcomes: list[MaterializationOutcome] = field(default_factory=list)

    @property
    def created(self) -> list[Reminder]:
        """Reminders that were persisted, in input order."""
        return [o.reminder for o in self.outcomes if o.reminder is not None]

    @property
    def reminders_created(self) -> int:
        return len(self.created)

    @property
    def suppressed(self) -> int:
        return sum(1 for o in self.outcomes if o.suppressed)

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if o.reminder is None and not o.suppressed)

    @property
    def notifications_failed(self) -> int:
        return sum(1 for o in self.outcomes if o.notification_error is not None)


def match_client_by_name(suggestion: Suggestion, clients: Sequence[Client]) -> str | None:
    """
    Find the one client whose name appears in the suggestion text.

    Case-insensitive substring match over title and message. Returns None
    when no client or more than one client matches.
    """
    text = f"{suggestion.title}\n{suggestion.message}".casefold()
    matches = {
        client.id
        for client in clients
        if client.name.strip() and client.name.strip().casefold() in text
    }
    if len(matches) == 1:
        return matches.pop()
    return None


class CreateSuggestedRemindersUseCase:
    """
    Use case that persists suggestions as AI-suggested reminders.

    Client attribution uses the suggestion's ``client_id``. Suggestions
    supplied without a rule (edited or hand-built by the caller) may fall
    back to matching a client name in their text.
    """

    def __init__(
        self,
        reminder_store: IReminderStore | None = None,
        notification_store: INotificationStore | None = None,
        client_store: IClientStore | None = None,
        clock: IClock | None = None,
        lock_registry: UserLockRegistry | None = None,
        name_attribution_fallback: bool | None = None,
        policy: SuggestionPolicy | None = None,
    ) -> None:
        self._rem_store = reminder_store
        self._notification_store = notification_store
        self._client_store = client_store
        self._clock = clock
        self._locks = lock_registry or get_user_lock_registry()
        self._name_fallback = name_attribution_fallback
        self._policy = policy

    async def _get_rem_store(self) -> IReminderStore:
        if self._rem_store is None:
            from followups.infrastructure.storage.sqlite import get_reminder_store
            self._rem_store = await get_reminder_store()
        return self._rem_store

    async def _get_notification_store(self) -> INotificationStore:
        if self._notification_store is None:
            from followups.infrastructure.storage.sqlite import get_notification_store
            self._notification_store = await get_notification_store()
        return self._notification_store

    async def _get_client_store(self) -> IClientStore | None:
        if self._client_store is None:
            try:
                from followups.infrastructure.storage.sqlite import get_client_store
                self._client_store = await get_client_store()
            except Exception:
                return None
        return self._client_store

    def _get_now(self) -> datetime:
        if self._clock is None:
            from followups.infrastructure.clock import SystemClock
            self._clock = SystemClock()
        return self._clock.now()

    def _get_policy(self) -> SuggestionPolicy:
        if self._policy is None:
            self._policy = get_settings().followup.to_policy()
        return self._policy

    @property
    def name_attribution_fallback(self) -> bool:
        if self._name_fallback is None:
            self._name_fallback = get_settings().followup.name_attribution_fallback
        return self._name_fallback

    async def execute(
        self,
        user_id: str,
        suggestions: Sequence[Suggestion],
        now: datetime | None = None,
    ) -> MaterializationResult:
        """
        Persist suggestions for a user while holding the user's lock.

        Args:
            user_id: Owner of the new reminders.
            suggestions: Suggestions to materialize, in order.
            now: Creation instant for the reminders; clock when omitted.

        Returns:
            MaterializationResult with one outcome per suggestion.
        """
        async with self._locks.lock_for(user_id):
            return await self.materialize(user_id, suggestions, now)

    async def materialize(
        self,
        user_id: str,
        suggestions: Sequence[Suggestion],
        now: datetime | None = None,
    ) -> MaterializationResult:
        """
        Persist suggestions. The caller must hold the user's lock.

        The user's reminders are read once; a suggestion already covered by
        one of them, or by a reminder created earlier in this batch, is
        marked suppressed and not written. If the reminders cannot be read
        nothing is written.
        """
        now = as_utc(now) if now is not None else self._get_now()
        result = MaterializationResult()
        if not suggestions:
            return result

        rem_store = await self._get_rem_store()
        try:
            history = list(await rem_store.list_reminders(user_id))
        except Exception as e:
            error = SourceReadError("reminders", user_id, str(e) or type(e).__name__)
            logger.warning("materialize_history_read_failed", **error.details, exc_info=True)
            result.outcomes = [
                MaterializationOutcome(suggestion=s, error=error) for s in suggestions
            ]
            return result

        notification_store = await self._get_notification_store()
        clients = await self._load_clients_for_attribution(user_id, suggestions)
        policy = self._get_policy()

        for suggestion in suggestions:
            outcome = MaterializationOutcome(suggestion=suggestion)
            result.outcomes.append(outcome)

            try:
                suggestion.require_valid()
            except InvalidSuggestionError as e:
                outcome.error = e
                logger.warning("suggestion_rejected_invalid", user_id=user_id, **e.details)
                continue

            client_id = self._resolve_client_id(suggestion, clients)
            candidate = suggestion.model_copy(update={"client_id": client_id})
            if should_suppress(candidate, history, now, policy=policy):
                outcome.suppressed = True
                logger.info(
                    "suggestion_suppressed_duplicate",
                    user_id=user_id,
                    title=suggestion.title,
                    client_id=client_id,
                    reminder_type=suggestion.reminder_type.value,
                )
                continue

            reminder = Reminder(
                user_id=user_id,
                client_id=client_id,
                invoice_id=suggestion.invoice_id,
                title=suggestion.title,
                message=suggestion.message,
                due_date=suggestion.due_date,
                status=ReminderStatus.PENDING,
                priority=suggestion.priority,
                reminder_type=suggestion.reminder_type,
                ai_suggested=True,
                created_at=now,
                updated_at=now,
            )

            try:
                outcome.reminder = await rem_store.create(reminder)
            except Exception as e:
                outcome.error = PersistenceError("reminder", str(e) or type(e).__name__, suggestion.title)
                logger.warning(
                    "reminder_persist_failed",
                    user_id=user_id,
                    **outcome.error.details,
                    exc_info=True,
                )
                continue

            history.append(outcome.reminder)

            try:
                outcome.notification = await notification_store.create(
                    Notification(
                        user_id=user_id,
                        title="Suggested reminder created",
                        message=f"Suggested: {suggestion.title}",
                        type=NotificationType.REMINDER,
                        related_id=outcome.reminder.id,
                        related_type=RelatedEntityType.REMINDER,
                        created_at=now,
                    )
                )
            except Exception as e:
                outcome.notification_error = PersistenceError(
                    "notification", str(e) or type(e).__name__, suggestion.title
                )
                logger.warning(
                    "notification_persist_failed",
                    user_id=user_id,
                    reminder_id=outcome.reminder.id,
                    **outcome.notification_error.details,
                    exc_info=True,
                )

        logger.info(
            "suggested_reminders_created",
            user_id=user_id,
            requested=len(suggestions),
            created=result.reminders_created,
            suppressed=result.suppressed,
            failed=result.failed,
            notifications_failed=result.notifications_failed,
        )
        return result

    async def _load_clients_for_attribution(
        self, user_id: str, suggestions: Sequence[Suggestion]
    ) -> list[Client]:
        if not self.name_attribution_fallback:
            return []
        if not any(s.client_id is None and s.rule is None for s in suggestions):
            return []

        client_store = await self._get_client_store()
        if client_store is None:
            return []
        try:
            return await client_store.list_clients(user_id)
        except Exception:
            logger.warning("attribution_clients_read_failed", user_id=user_id, exc_info=True)
            return []

    @staticmethod
    def _resolve_client_id(suggestion: Suggestion, clients: Sequence[Client]) -> str | None:
        if suggestion.client_id is not None:
            return suggestion.client_id
        if suggestion.rule is not None or not clients:
            # Extractor output without a client stays unattributed
            return None
        return match_client_by_name(suggestion, clients)
