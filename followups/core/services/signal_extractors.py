"""
Signal extractors.

Each rule turns raw invoices or clients into zero or more Suggestion
candidates. Rules are independent and pure: they never look at existing
reminders (deduplication is a separate stage) and never read the clock.
"""

from collections.abc import Callable, Iterable
from datetime import datetime

from followups.core.entities.client import Client
from followups.core.entities.common import as_utc
from followups.core.entities.invoice import Invoice
from followups.core.entities.policy import SuggestionPolicy
from followups.core.entities.reminder import ReminderType
from followups.core.entities.suggestion import Suggestion, SuggestionRule
from followups.core.services.priority import (
    due_soon_payment_priority,
    overdue_payment_priority,
    stale_contact_priority,
)
from followups.core.services.temporal import days_between, days_from

InvoiceRule = Callable[[Iterable[Invoice], datetime, SuggestionPolicy], list[Suggestion]]
ClientRule = Callable[[Iterable[Client], datetime, SuggestionPolicy], list[Suggestion]]


def is_overdue(invoice: Invoice, now: datetime) -> bool:
    """Outstanding and past its due date."""
    return invoice.is_outstanding and invoice.due_date < as_utc(now)


def extract_overdue_payments(
    invoices: Iterable[Invoice],
    now: datetime,
    policy: SuggestionPolicy,
) -> list[Suggestion]:
    """One payment candidate per outstanding invoice past its due date."""
    suggestions: list[Suggestion] = []

    for invoice in invoices:
        if not is_overdue(invoice, now):
            continue

        days_overdue = days_between(invoice.due_date, now)
        suggestions.append(
            Suggestion(
                title="Follow up on overdue payment",
                message=(
                    f'Invoice for "{invoice.label}" is {days_overdue} days overdue. '
                    "Consider following up with the client."
                ),
                due_date=days_from(now, policy.follow_up_delay_days),
                priority=overdue_payment_priority(days_overdue, policy),
                reminder_type=ReminderType.PAYMENT,
                rule=SuggestionRule.OVERDUE_PAYMENT,
                client_id=invoice.client_id,
                invoice_id=invoice.id,
                details={"days_overdue": days_overdue},
            )
        )

    return suggestions


def extract_due_soon_payments(
    invoices: Iterable[Invoice],
    now: datetime,
    policy: SuggestionPolicy,
) -> list[Suggestion]:
    """
    Payment candidates for outstanding invoices falling due shortly.

    Covers invoices due between now and ``due_soon_window_days`` ahead;
    anything already overdue belongs to the overdue rule.
    """
    suggestions: list[Suggestion] = []

    for invoice in invoices:
        if not invoice.is_outstanding or is_overdue(invoice, now):
            continue

        days_since_due = days_between(invoice.due_date, now)
        if days_since_due < -policy.due_soon_window_days:
            continue

        # Whole days still to go: due in 6 hours reads as today
        days_until_due = days_between(now, invoice.due_date)
        when = "today" if days_until_due == 0 else f"in {days_until_due} days"
        suggestions.append(
            Suggestion(
                title="Payment reminder for upcoming due date",
                message=(
                    f'Invoice for "{invoice.label}" is due {when}. '
                    "Send a friendly reminder."
                ),
                due_date=invoice.due_date,
                priority=due_soon_payment_priority(days_until_due, policy),
                reminder_type=ReminderType.PAYMENT,
                rule=SuggestionRule.DUE_SOON_PAYMENT,
                client_id=invoice.client_id,
                invoice_id=invoice.id,
                details={"days_until_due": days_until_due},
            )
        )

    return suggestions


def extract_stale_contacts(
    clients: Iterable[Client],
    now: datetime,
    policy: SuggestionPolicy,
) -> list[Suggestion]:
    """Follow-up candidates for active clients not contacted recently."""
    suggestions: list[Suggestion] = []

    for client in clients:
        if not client.is_active:
            continue

        days_silent = days_between(client.contact_reference, now)
        if days_silent <= policy.stale_contact_after_days:
            continue

        suggestions.append(
            Suggestion(
                title=f"Follow up with {client.name}",
                message=(
                    f"It's been {days_silent} days since your last contact with "
                    f"{client.name}. Consider reaching out to maintain the relationship."
                ),
                due_date=days_from(now, policy.follow_up_delay_days),
                priority=stale_contact_priority(days_silent, policy),
                reminder_type=ReminderType.FOLLOW_UP,
                rule=SuggestionRule.STALE_CONTACT,
                client_id=client.id,
                details={"days_since_contact": days_silent},
            )
        )

    return suggestions


INVOICE_RULES: tuple[InvoiceRule, ...] = (
    extract_overdue_payments,
    extract_due_soon_payments,
)
CLIENT_RULES: tuple[ClientRule, ...] = (extract_stale_contacts,)
