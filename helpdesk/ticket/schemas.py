# helpdesk/ticket/schemas.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from helpdesk.core.notifications import Notification
from helpdesk.ticket.models import TicketCategory, TicketStatus


class TicketCreate(BaseModel):
    """Raw form input. Emptiness is checked by the creation workflow, not here."""

    title: str = ""
    description: str = ""
    category: TicketCategory | None = None
    product_id: str | None = None

    @field_validator("category", mode="before")
    @classmethod
    def blank_category_is_unset(cls, value):
        return None if value == "" else value


class TicketRecord(BaseModel):
    """Row written to the tickets table on creation."""

    model_config = ConfigDict(use_enum_values=True)

    id: str
    user_id: str
    title: str
    description: str
    category: TicketCategory
    product_id: str | None = None
    status: TicketStatus = TicketStatus.OPEN
    created_at: datetime
    updated_at: datetime


class TicketOut(BaseModel):
    id: str
    user_id: str
    title: str
    description: str
    category: str
    product_id: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class TicketListItem(TicketOut):
    product_name: str | None = None
    reply_count: int = 0


class ReplyOut(BaseModel):
    id: str
    user_id: str
    message: str
    created_at: datetime

    model_config = {"from_attributes": True}


class TicketDetailOut(TicketListItem):
    replies: list[ReplyOut] = []


class TicketStatusUpdate(BaseModel):
    status: TicketStatus


class TicketCreated(BaseModel):
    ticket_id: str
    notification: Notification
    refresh: bool


class Badge(BaseModel):
    label: str
    variant: str = "default"
    css_class: str | None = None


class TicketSummary(BaseModel):
    id: str
    title: str
    category_badge: Badge
    status_badge: Badge
    description_preview: str
    product_name: str | None = None
    reply_count: int = 0
    created_on: str


class TicketListOut(BaseModel):
    state: str
    open_count: int
    closed_count: int
    tickets: list[TicketSummary]
    empty_message: str | None = None
    notification: Notification | None = None
