# helpdesk/ticket/workflow.py
"""Ticket creation: form state, validation and submission.

The workflow mirrors a creation dialog. The caller owns the ``open`` flag and
passes a setter for it plus a callback used to ask for a list refresh once a
ticket exists.
"""
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from helpdesk.core.auth import Actor
from helpdesk.core.notifications import Notification, Notifier, log_notification
from helpdesk.core.tasks import fire_and_forget
from helpdesk.ticket.models import TicketCategory, TicketStatus
from helpdesk.ticket.schemas import TicketCreate, TicketRecord
from helpdesk.user.schemas import UserRecord

log = logging.getLogger(__name__)

NO_PRODUCT = "none"
CATEGORIES = tuple(c.value for c in TicketCategory)

MISSING_FIELDS = "Please fill in all required fields."
NOT_LOGGED_IN = "You must be logged in to create a ticket."
CREATED = "Your ticket has been created successfully."


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


class SubmitOutcome(str, Enum):
    CREATED = "created"
    INVALID = "invalid"
    UNAUTHENTICATED = "unauthenticated"
    FAILED = "failed"


@dataclass
class SubmitResult:
    outcome: SubmitOutcome
    notification: Notification
    ticket_id: str | None = None


class TicketCreationWorkflow:
    def __init__(
        self,
        repository,
        *,
        open: bool = False,
        on_open_change: Callable[[bool], None] | None = None,
        on_ticket_created: Callable[[], None] | None = None,
        notify: Notifier = log_notification,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_id,
    ):
        self.repository = repository
        self.open = open
        self._on_open_change = on_open_change
        self._on_ticket_created = on_ticket_created
        self._notify = notify
        self._clock = clock
        self._id_factory = id_factory

        self.products: list = []
        self.loading = False
        self.reset()

    # form state

    def reset(self) -> None:
        self.title = ""
        self.description = ""
        self.category = ""
        self.product_id = ""

    def set_category(self, value: str) -> None:
        # values outside the enumeration never reach the form state
        if value == "" or value in CATEGORIES:
            self.category = value

    def set_product(self, value: str | None) -> None:
        self.product_id = "" if not value or value == NO_PRODUCT else value

    def fill(self, form: TicketCreate) -> None:
        self.title = form.title
        self.description = form.description
        self.set_category(form.category.value if form.category else "")
        self.set_product(form.product_id)

    @property
    def submit_disabled(self) -> bool:
        return self.loading

    # open / close

    def set_open(self, value: bool) -> None:
        was_open = self.open
        self.open = value
        if self._on_open_change is not None:
            self._on_open_change(value)
        if value and not was_open:
            self.load_products()

    def load_products(self) -> None:
        """Populate the optional product choice. Failures only get logged."""
        try:
            self.products = list(self.repository.list_available_products())
        except SQLAlchemyError:
            log.exception("Error fetching products")
            self.products = []

    # submission

    def _finish(self, outcome: SubmitOutcome, notification: Notification, ticket_id=None) -> SubmitResult:
        self._notify(notification)
        return SubmitResult(outcome=outcome, notification=notification, ticket_id=ticket_id)

    def submit(self, actor: Actor | None) -> SubmitResult:
        title = self.title.strip()
        description = self.description.strip()
        if not title or not description or not self.category:
            return self._finish(SubmitOutcome.INVALID, Notification.error(MISSING_FIELDS))

        if actor is None:
            return self._finish(SubmitOutcome.UNAUTHENTICATED, Notification.error(NOT_LOGGED_IN))

        self.loading = True
        try:
            now = self._clock()
            record = TicketRecord(
                id=self._id_factory(),
                user_id=actor.id,
                title=title,
                description=description,
                category=TicketCategory(self.category),
                product_id=self.product_id or None,
                status=TicketStatus.OPEN,
                created_at=now,
                updated_at=now,
            )
            log.debug("Creating ticket with data: %s", record.model_dump())

            try:
                ticket_id = self.repository.insert_ticket(record)
            except SQLAlchemyError as exc:
                log.exception("Ticket creation failed")
                reason = str(getattr(exc, "orig", None) or exc) or "Please try again."
                return self._finish(
                    SubmitOutcome.FAILED,
                    Notification.error(f"Failed to create ticket: {reason}"),
                )
            log.info("Ticket %s created for user %s", ticket_id, actor.id)

            fire_and_forget(lambda: self.repository.upsert_user(UserRecord.from_actor(actor)))
        finally:
            self.loading = False

        result = self._finish(SubmitOutcome.CREATED, Notification.success(CREATED), ticket_id)
        self.reset()
        self.set_open(False)
        if self._on_ticket_created is not None:
            self._on_ticket_created()
        return result


__all__ = [
    "NO_PRODUCT",
    "SubmitOutcome",
    "SubmitResult",
    "TicketCreationWorkflow",
]
