# helpdesk/ticket/list_view.py
"""Ticket list page state.

The view is always in exactly one of the states below::

    Loading -> Populated | Empty | Errored
    Populated -> Detail        (select)
    Detail -> Loading          (back, followed by a re-fetch)
"""
import logging
from dataclasses import dataclass
from typing import Union

from sqlalchemy.exc import SQLAlchemyError

from helpdesk.core.auth import Actor
from helpdesk.core.config import get_settings
from helpdesk.core.notifications import Notification, Notifier, log_notification
from helpdesk.ticket.models import TicketStatus
from helpdesk.ticket.schemas import Badge, TicketListItem, TicketListOut, TicketSummary

log = logging.getLogger(__name__)

EMPTY_MESSAGE = "No tickets yet"
LOAD_FAILED = "Failed to load tickets."

CATEGORY_CLASSES = {
    "Account": "bg-blue-500 text-white",
    "Orders": "bg-purple-500 text-white",
    "Other": "bg-orange-500 text-white",
}
UNKNOWN_CATEGORY_CLASS = "bg-gray-500 text-white"


@dataclass(frozen=True)
class Loading:
    name = "loading"


@dataclass(frozen=True)
class Populated:
    tickets: tuple[TicketListItem, ...]
    name = "populated"


@dataclass(frozen=True)
class Empty:
    name = "empty"


@dataclass(frozen=True)
class Errored:
    notification: Notification
    name = "errored"


@dataclass(frozen=True)
class Detail:
    ticket: TicketListItem
    # the list the ticket was picked from
    snapshot: tuple[TicketListItem, ...]
    name = "detail"


ViewState = Union[Loading, Populated, Empty, Errored, Detail]


class InvalidTransition(RuntimeError):
    pass


def status_badge(status: str) -> Badge:
    if status == TicketStatus.OPEN.value:
        return Badge(label="Open", css_class="bg-green-500 text-white")
    if status == TicketStatus.CLOSED.value:
        return Badge(label="Closed", variant="destructive")
    return Badge(label=status, variant="outline")


def category_badge(category: str) -> Badge:
    return Badge(label=category, css_class=CATEGORY_CLASSES.get(category, UNKNOWN_CATEGORY_CLASS))


def truncate(text: str, length: int) -> str:
    if len(text) <= length:
        return text
    return text[:length].rstrip() + "…"


def summarize(ticket: TicketListItem, preview_length: int) -> TicketSummary:
    return TicketSummary(
        id=ticket.id,
        title=ticket.title,
        category_badge=category_badge(ticket.category),
        status_badge=status_badge(ticket.status),
        description_preview=truncate(ticket.description, preview_length),
        product_name=ticket.product_name,
        reply_count=ticket.reply_count or 0,
        created_on=ticket.created_at.date().isoformat(),
    )


class TicketListView:
    def __init__(self, repository, notify: Notifier = log_notification, preview_length: int | None = None):
        self.repository = repository
        self._notify = notify
        self.preview_length = preview_length or get_settings().DESCRIPTION_PREVIEW_LENGTH
        self.state: ViewState = Loading()

    @property
    def tickets(self) -> tuple[TicketListItem, ...]:
        if isinstance(self.state, Populated):
            return self.state.tickets
        if isinstance(self.state, Detail):
            return self.state.snapshot
        return ()

    @property
    def open_count(self) -> int:
        return sum(1 for t in self.tickets if t.status == TicketStatus.OPEN.value)

    @property
    def closed_count(self) -> int:
        return sum(1 for t in self.tickets if t.status == TicketStatus.CLOSED.value)

    def activate(self, actor: Actor | None) -> ViewState:
        """Load the list for ``actor``. Without an actor nothing is fetched."""
        if actor is None:
            return self.state
        return self.refresh()

    def refresh(self) -> ViewState:
        self.state = Loading()
        try:
            rows = self.repository.list_tickets()
        except SQLAlchemyError:
            log.exception("Error fetching tickets")
            notification = Notification.error(LOAD_FAILED)
            self._notify(notification)
            self.state = Errored(notification)
            return self.state

        tickets = tuple(sorted(rows, key=lambda t: t.created_at, reverse=True))
        self.state = Populated(tickets) if tickets else Empty()
        log.debug("Loaded %d tickets", len(tickets))
        return self.state

    def select(self, ticket_id: str) -> Detail:
        if not isinstance(self.state, Populated):
            raise InvalidTransition(f"cannot select a ticket while {self.state.name}")
        for ticket in self.state.tickets:
            if ticket.id == ticket_id:
                self.state = Detail(ticket=ticket, snapshot=self.state.tickets)
                return self.state
        raise LookupError(ticket_id)

    def back(self) -> ViewState:
        if not isinstance(self.state, Detail):
            raise InvalidTransition(f"cannot go back while {self.state.name}")
        self.state = Loading()
        return self.refresh()

    def summaries(self) -> list[TicketSummary]:
        return [summarize(t, self.preview_length) for t in self.tickets]

    def render(self, notification: Notification | None = None) -> TicketListOut:
        return TicketListOut(
            state=self.state.name,
            open_count=self.open_count,
            closed_count=self.closed_count,
            tickets=self.summaries(),
            empty_message=EMPTY_MESSAGE if isinstance(self.state, Empty) else None,
            notification=notification,
        )


__all__ = [
    "Detail",
    "Empty",
    "Errored",
    "InvalidTransition",
    "Loading",
    "Populated",
    "TicketListView",
    "ViewState",
    "category_badge",
    "status_badge",
]
