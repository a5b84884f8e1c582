# helpdesk/ticket/services.py
import logging
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from helpdesk.product.models import Product
from helpdesk.product import services as product_service
from helpdesk.ticket.models import Ticket, TicketReply, TicketStatus
from helpdesk.ticket.schemas import ReplyOut, TicketDetailOut, TicketListItem, TicketRecord
from helpdesk.user.models import User
from helpdesk.user.schemas import UserRecord

log = logging.getLogger(__name__)

_ON_CONFLICT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class TicketRepository:
    """Thin query layer over the tickets, users and products tables.

    Every write commits on success. On a database error the session is rolled
    back and the error re-raised unchanged; callers decide how to report it.
    """

    def __init__(self, db: Session):
        self.db = db

    def list_available_products(self) -> list[Product]:
        return product_service.get_available_products(self.db)

    def insert_ticket(self, record: TicketRecord) -> str:
        db_ticket = Ticket(**record.model_dump())
        try:
            self.db.add(db_ticket)
            self.db.commit()
            self.db.refresh(db_ticket)
        except SQLAlchemyError:
            self.db.rollback()
            raise
        return db_ticket.id

    def upsert_user(self, user: UserRecord) -> None:
        """Insert the user row; an existing row with the same id is left as is."""
        values = user.model_dump()
        dialect = self.db.get_bind().dialect.name
        try:
            insert = _ON_CONFLICT_INSERTS.get(dialect)
            if insert is not None:
                stmt = insert(User).values(**values).on_conflict_do_nothing(index_elements=[User.id])
                self.db.execute(stmt)
            elif self.db.get(User, user.id) is None:
                self.db.add(User(**values))
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise

    def _with_details(self):
        reply_count = func.count(TicketReply.id).label("reply_count")
        return (
            self.db.query(Ticket, Product.name.label("product_name"), reply_count)
            .outerjoin(Product, Ticket.product_id == Product.id)
            .outerjoin(TicketReply, TicketReply.ticket_id == Ticket.id)
            .group_by(Ticket.id, Product.name)
        )

    @staticmethod
    def _to_item(row) -> TicketListItem:
        ticket, product_name, reply_count = row
        item = TicketListItem.model_validate(ticket)
        item.product_name = product_name
        item.reply_count = reply_count or 0
        return item

    def list_tickets(self) -> list[TicketListItem]:
        """All tickets with product name and reply count, newest first."""
        rows = self._with_details().order_by(Ticket.created_at.desc()).all()
        return [self._to_item(row) for row in rows]

    def get_ticket(self, ticket_id: str) -> TicketDetailOut | None:
        row = self._with_details().filter(Ticket.id == ticket_id).first()
        if row is None:
            return None
        replies = (
            self.db.query(TicketReply)
            .filter(TicketReply.ticket_id == ticket_id)
            .order_by(TicketReply.created_at)
            .all()
        )
        return TicketDetailOut(
            **self._to_item(row).model_dump(),
            replies=[ReplyOut.model_validate(r) for r in replies],
        )

    def update_status(self, ticket_id: str, status: TicketStatus, now: datetime) -> bool:
        db_ticket = self.db.get(Ticket, ticket_id)
        if not db_ticket:
            return False
        db_ticket.status = TicketStatus(status).value
        db_ticket.updated_at = now
        try:
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            raise
        log.info("Ticket %s moved to %s", ticket_id, db_ticket.status)
        return True
