"""Tests for RunDailySuggestionsUseCase."""

import asyncio

import pytest

from followups.application.use_cases.run_daily_suggestions import RunDailySuggestionsUseCase
from followups.core.entities.notification import NotificationType
from followups.core.entities.reminder import ReminderPriority


@pytest.fixture
def make_uc(
    client_store, invoice_store, reminder_store, notification_store, clock, lock_registry
):
    def _make(**kwargs) -> RunDailySuggestionsUseCase:
        params = {
            "client_store": client_store,
            "invoice_store": invoice_store,
            "reminder_store": reminder_store,
            "notification_store": notification_store,
            "clock": clock,
            "lock_registry": lock_registry,
            "auto_create_urgent": True,
            "max_concurrent_users": 2,
        }
        params.update(kwargs)
        return RunDailySuggestionsUseCase(**params)

    return _make


class TestRunDailySuggestions:
    """Tests for the daily orchestration."""

    @pytest.mark.asyncio
    async def test_no_suggestions_no_writes(
        self, make_uc, reminder_store, notification_store, user_id
    ):
        result = await make_uc().execute(user_id)

        assert result.suggestions == []
        assert result.summary_notification is None
        assert result.reminders_created == 0
        notification_store.create.assert_not_called()
        reminder_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_summary_and_urgent_only(
        self,
        make_uc,
        client_store,
        invoice_store,
        reminder_store,
        notification_store,
        make_client,
        make_invoice,
        user_id,
    ):
        """Urgent suggestions become reminders; the rest wait for review."""
        client_store.list_clients.return_value = [make_client("Acme", days_since_contact=20)]
        invoice_store.list_invoices.return_value = [make_invoice(-10)]

        result = await make_uc().execute(user_id)

        assert len(result.suggestions) == 2
        summary = result.summary_notification
        assert summary.title == "Reminder suggestions available"
        assert summary.message == "2 new reminder suggestions are ready for review."
        assert summary.type == NotificationType.INFO

        assert result.reminders_created == 1
        [created] = result.materialization.created
        assert created.priority == ReminderPriority.URGENT
        assert created.ai_suggested is True
        assert reminder_store.create.await_count == 1
        # summary + one per created reminder
        assert notification_store.create.await_count == 2

    @pytest.mark.asyncio
    async def test_no_urgent_only_summary(
        self, make_uc, client_store, reminder_store, make_client, user_id
    ):
        client_store.list_clients.return_value = [make_client("Acme", days_since_contact=20)]

        result = await make_uc().execute(user_id)

        assert result.summary_notification is not None
        assert result.materialization is None
        reminder_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_auto_create_disabled(
        self, make_uc, invoice_store, reminder_store, make_invoice, user_id
    ):
        invoice_store.list_invoices.return_value = [make_invoice(-10)]

        result = await make_uc(auto_create_urgent=False).execute(user_id)

        assert len(result.suggestions) == 1
        reminder_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_summary_failure_does_not_block_creation(
        self, make_uc, invoice_store, notification_store, make_invoice, user_id
    ):
        invoice_store.list_invoices.return_value = [make_invoice(-10)]
        original = notification_store.create.side_effect
        calls = {"n": 0}

        def fail_first(notification):
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("notifications down")
            return original(notification)

        notification_store.create.side_effect = fail_first

        result = await make_uc().execute(user_id)

        assert result.summary_notification is None
        assert result.summary_error.code == "PERSISTENCE_FAILURE"
        assert result.reminders_created == 1

    @pytest.mark.asyncio
    async def test_second_run_is_deduplicated(
        self,
        make_uc,
        invoice_store,
        reminder_store,
        make_invoice,
        user_id,
    ):
        """Reminders created by the first run suppress the same candidate next time."""
        invoice_store.list_invoices.return_value = [make_invoice(-10)]
        history = []
        original = reminder_store.create.side_effect

        def record(reminder):
            saved = original(reminder)
            history.append(saved)
            return saved

        reminder_store.create.side_effect = record
        reminder_store.list_reminders.side_effect = lambda user_id: list(history)
        uc = make_uc()

        first = await uc.execute(user_id)
        second = await uc.execute(user_id)

        assert first.reminders_created == 1
        assert second.suggestions == []
        assert second.reminders_created == 0

    @pytest.mark.asyncio
    async def test_one_urgent_reminder_per_client(
        self, make_uc, invoice_store, reminder_store, make_invoice, user_id
    ):
        """Two urgent invoices for one client share a single payment reminder."""
        invoice_store.list_invoices.return_value = [
            make_invoice(-10, invoice_id="a"),
            make_invoice(-12, invoice_id="b"),
        ]

        result = await make_uc().execute(user_id)

        assert len(result.suggestions) == 2
        assert result.reminders_created == 1
        assert result.materialization.suppressed == 1
        assert reminder_store.create.await_count == 1

    @pytest.mark.asyncio
    async def test_failed_sources_reported(
        self, make_uc, reminder_store, notification_store, user_id
    ):
        reminder_store.list_reminders.side_effect = RuntimeError("gone")

        result = await make_uc().execute(user_id)

        assert result.failed_sources == ["reminders"]
        assert result.suggestions == []
        notification_store.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_settings_defaults(
        self, client_store, invoice_store, reminder_store, notification_store, clock,
        lock_registry, monkeypatch,
    ):
        from followups.config import reset_settings

        monkeypatch.setenv("FOLLOWUP_AUTO_CREATE_URGENT", "false")
        monkeypatch.setenv("FOLLOWUP_MAX_CONCURRENT_USERS", "7")
        reset_settings()

        uc = RunDailySuggestionsUseCase(
            client_store=client_store,
            invoice_store=invoice_store,
            reminder_store=reminder_store,
            notification_store=notification_store,
            clock=clock,
            lock_registry=lock_registry,
        )

        assert uc.auto_create_urgent is False
        assert uc.max_concurrent_users == 7


class TestRunDailyBatch:
    """Tests for execute_many."""

    @pytest.mark.asyncio
    async def test_runs_each_user_in_order(
        self, make_uc, invoice_store, make_invoice
    ):
        invoice_store.list_invoices.return_value = [make_invoice(-10)]

        results = await make_uc().execute_many(["u1", "u2", "u3"])

        assert [r.user_id for r in results] == ["u1", "u2", "u3"]
        assert all(r.reminders_created == 1 for r in results)
        assert all(r.error is None for r in results)

    @pytest.mark.asyncio
    async def test_one_user_failure_isolated(
        self, make_uc, invoice_store, notification_store, make_invoice, monkeypatch
    ):
        invoice_store.list_invoices.return_value = [make_invoice(-10)]
        uc = make_uc()
        original_execute = uc.execute

        async def execute(user_id, now=None):
            if user_id == "u2":
                raise RuntimeError("unexpected")
            return await original_execute(user_id, now)

        monkeypatch.setattr(uc, "execute", execute)

        results = await uc.execute_many(["u1", "u2", "u3"])

        assert [r.error for r in results] == [None, "unexpected", None]
        assert results[1].reminders_created == 0
        assert results[0].reminders_created == 1

    @pytest.mark.asyncio
    async def test_bounded_parallelism(self, make_uc, invoice_store):
        """No more than max_concurrent_users runs read at once."""
        active = {"now": 0, "peak": 0}

        async def list_invoices(user_id):
            active["now"] += 1
            active["peak"] = max(active["peak"], active["now"])
            await asyncio.sleep(0)
            active["now"] -= 1
            return []

        invoice_store.list_invoices.side_effect = list_invoices

        results = await make_uc(max_concurrent_users=2).execute_many(
            [f"u{i}" for i in range(6)]
        )

        assert len(results) == 6
        assert active["peak"] <= 2
