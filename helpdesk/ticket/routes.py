# helpdesk/ticket/routes.py
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from helpdesk.core.auth import Actor, get_current_actor
from helpdesk.core.database import get_db
from helpdesk.core.notifications import NotificationCollector
from helpdesk.ticket.list_view import TicketListView
from helpdesk.ticket.schemas import (
    TicketCreate,
    TicketCreated,
    TicketDetailOut,
    TicketListOut,
    TicketStatusUpdate,
)
from helpdesk.ticket.services import TicketRepository
from helpdesk.ticket.workflow import SubmitOutcome, TicketCreationWorkflow, utcnow

log = logging.getLogger(__name__)

router = APIRouter(prefix="/tickets", tags=["Tickets"])

_FAILURE_STATUS = {
    SubmitOutcome.INVALID: 422,
    SubmitOutcome.UNAUTHENTICATED: 401,
    SubmitOutcome.FAILED: 502,
}


def require_actor(actor: Actor | None = Depends(get_current_actor)) -> Actor:
    if actor is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return actor


@router.post("/", response_model=TicketCreated, status_code=201)
def create(
    ticket: TicketCreate,
    db: Session = Depends(get_db),
    actor: Actor | None = Depends(get_current_actor),
):
    notifications = NotificationCollector()
    refresh_requests = []
    workflow = TicketCreationWorkflow(
        TicketRepository(db),
        open=True,
        on_ticket_created=lambda: refresh_requests.append(True),
        notify=notifications,
    )
    workflow.fill(ticket)
    result = workflow.submit(actor)
    if result.outcome is not SubmitOutcome.CREATED:
        raise HTTPException(
            status_code=_FAILURE_STATUS[result.outcome],
            detail=result.notification.model_dump(mode="json"),
        )
    return TicketCreated(
        ticket_id=result.ticket_id,
        notification=result.notification,
        refresh=bool(refresh_requests),
    )


@router.get("/", response_model=TicketListOut)
def list_all(db: Session = Depends(get_db), actor: Actor = Depends(require_actor)):
    notifications = NotificationCollector()
    view = TicketListView(TicketRepository(db), notify=notifications)
    view.activate(actor)
    return view.render(notification=notifications.last)


@router.get("/{ticket_id}", response_model=TicketDetailOut)
def get(ticket_id: str, db: Session = Depends(get_db), actor: Actor = Depends(require_actor)):
    ticket = TicketRepository(db).get_ticket(ticket_id)
    if not ticket:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return ticket


@router.put("/{ticket_id}/status", response_model=TicketDetailOut)
def update_status(
    ticket_id: str,
    payload: TicketStatusUpdate,
    db: Session = Depends(get_db),
    actor: Actor = Depends(require_actor),
):
    repository = TicketRepository(db)
    try:
        updated = repository.update_status(ticket_id, payload.status, utcnow())
    except SQLAlchemyError:
        log.exception("Status update failed for ticket %s", ticket_id)
        raise HTTPException(status_code=502, detail="Failed to update ticket")
    if not updated:
        raise HTTPException(status_code=404, detail="Ticket not found")
    return repository.get_ticket(ticket_id)
