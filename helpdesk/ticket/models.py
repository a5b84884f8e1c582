# helpdesk/ticket/models.py
import enum

from sqlalchemy import Column, DateTime, ForeignKey, String, Text
from helpdesk.core.database import Base


class TicketCategory(str, enum.Enum):
    ACCOUNT = "Account"
    ORDERS = "Orders"
    OTHER = "Other"


class TicketStatus(str, enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(String(36), primary_key=True, index=True)
    # references the local users copy, which is written after the ticket
    user_id = Column(String(36), nullable=False, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)
    product_id = Column(String(36), ForeignKey("products.id"), nullable=True)
    status = Column(String, default=TicketStatus.OPEN.value, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class TicketReply(Base):
    __tablename__ = "ticket_replies"

    id = Column(String(36), primary_key=True, index=True)
    ticket_id = Column(String(36), ForeignKey("tickets.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), nullable=False)
    message = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
