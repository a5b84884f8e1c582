# tests/test_tickets.py
from datetime import datetime, timedelta, timezone

from sqlalchemy import text
from sqlalchemy.exc import OperationalError

from helpdesk.product.models import Product
from helpdesk.ticket.models import Ticket, TicketReply
from helpdesk.user.models import User


def _seed_ticket(db, ticket_id, created_at, status="open", product_id=None, title=None):
    db.add(Ticket(
        id=ticket_id,
        user_id="user-1",
        title=title or f"Ticket {ticket_id}",
        description="Body",
        category="Other",
        product_id=product_id,
        status=status,
        created_at=created_at,
        updated_at=created_at,
    ))
    db.commit()


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json()["status"] == "ok"


def test_products_lists_available_by_name(client, db_session):
    db_session.add_all([
        Product(id="p1", name="Widget", available=True),
        Product(id="p2", name="Gadget", available=True),
        Product(id="p3", name="Discontinued", available=False),
    ])
    db_session.commit()

    r = client.get("/products/")
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["Gadget", "Widget"]


def test_create_and_get_ticket(client, auth_headers):
    r = client.post(
        "/tickets/",
        json={"title": "Late delivery", "description": "Order has not arrived", "category": "Orders"},
        headers=auth_headers,
    )
    assert r.status_code == 201
    body = r.json()
    assert body["refresh"] is True
    assert body["notification"]["title"] == "Success"
    tid = body["ticket_id"]

    r2 = client.get(f"/tickets/{tid}", headers=auth_headers)
    assert r2.status_code == 200
    data = r2.json()
    assert data["title"] == "Late delivery"
    assert data["category"] == "Orders"
    assert data["product_id"] is None
    assert data["status"] == "open"
    assert data["user_id"] == "user-1"
    assert data["created_at"] == data["updated_at"]
    assert data["reply_count"] == 0
    assert data["replies"] == []


def test_create_with_none_product_stores_null(client, auth_headers):
    r = client.post(
        "/tickets/",
        json={"title": "T", "description": "D", "category": "Account", "product_id": "none"},
        headers=auth_headers,
    )
    assert r.status_code == 201
    data = client.get(f"/tickets/{r.json()['ticket_id']}", headers=auth_headers).json()
    assert data["product_id"] is None


def test_create_upserts_local_user(client, db_session, auth_headers):
    r = client.post(
        "/tickets/",
        json={"title": "T", "description": "D", "category": "Other"},
        headers=auth_headers,
    )
    assert r.status_code == 201

    user = db_session.get(User, "user-1")
    assert user.username == "alice"
    assert user.email == "alice@local.app"
    assert user.role == "customer"


def test_second_ticket_keeps_existing_user_row(client, db_session):
    first = {"X-User-Id": "user-2", "X-Username": "bob", "X-User-Email": "bob@example.com"}
    second = {"X-User-Id": "user-2", "X-Username": "bob", "X-User-Email": "changed@example.com"}
    payload = {"title": "T", "description": "D", "category": "Other"}

    assert client.post("/tickets/", json=payload, headers=first).status_code == 201
    assert client.post("/tickets/", json=payload, headers=second).status_code == 201

    db_session.expire_all()
    assert db_session.get(User, "user-2").email == "bob@example.com"


def test_create_validation_errors(client, auth_headers):
    # missing title
    r1 = client.post("/tickets/", json={"description": "no title", "category": "Other"}, headers=auth_headers)
    assert r1.status_code == 422
    assert r1.json()["detail"]["description"] == "Please fill in all required fields."

    # whitespace only description
    r2 = client.post("/tickets/", json={"title": "t", "description": "   ", "category": "Other"}, headers=auth_headers)
    assert r2.status_code == 422

    # category unset
    r3 = client.post("/tickets/", json={"title": "t", "description": "d", "category": ""}, headers=auth_headers)
    assert r3.status_code == 422
    assert r3.json()["detail"]["variant"] == "destructive"


def test_create_rejects_unknown_category(client, auth_headers):
    r = client.post("/tickets/", json={"title": "t", "description": "d", "category": "Billing"}, headers=auth_headers)
    assert r.status_code == 422


def test_create_requires_actor(client, db_session):
    r = client.post("/tickets/", json={"title": "t", "description": "d", "category": "Other"})
    assert r.status_code == 401
    assert r.json()["detail"]["description"] == "You must be logged in to create a ticket."
    assert db_session.query(Ticket).count() == 0


def test_list_requires_actor(client):
    assert client.get("/tickets/").status_code == 401


def test_list_empty_state(client, auth_headers):
    r = client.get("/tickets/", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["state"] == "empty"
    assert data["tickets"] == []
    assert data["open_count"] == 0
    assert data["closed_count"] == 0
    assert data["empty_message"] == "No tickets yet"
    assert data["notification"] is None


def test_list_newest_first_with_counts(client, db_session, auth_headers):
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    db_session.add(Product(id="p1", name="Widget", available=True))
    db_session.commit()
    _seed_ticket(db_session, "a", base, product_id="p1")
    _seed_ticket(db_session, "b", base + timedelta(days=2), status="closed")
    _seed_ticket(db_session, "c", base + timedelta(days=1))
    db_session.add_all([
        TicketReply(id="r1", ticket_id="a", user_id="agent", message="Looking", created_at=base),
        TicketReply(id="r2", ticket_id="a", user_id="agent", message="Fixed", created_at=base),
    ])
    db_session.commit()

    r = client.get("/tickets/", headers=auth_headers)
    assert r.status_code == 200
    data = r.json()
    assert data["state"] == "populated"
    assert [t["id"] for t in data["tickets"]] == ["b", "c", "a"]
    assert data["open_count"] == 2
    assert data["closed_count"] == 1

    oldest = data["tickets"][2]
    assert oldest["product_name"] == "Widget"
    assert oldest["reply_count"] == 2
    assert oldest["created_on"] == "2024-05-01"
    assert oldest["category_badge"]["css_class"] == "bg-orange-500 text-white"
    assert data["tickets"][0]["status_badge"] == {"label": "Closed", "variant": "destructive", "css_class": None}
    assert data["tickets"][1]["reply_count"] == 0


def test_get_not_found_returns_404(client, auth_headers):
    r = client.get("/tickets/does-not-exist", headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Ticket not found"


def test_detail_lists_replies_oldest_first(client, db_session, auth_headers):
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    _seed_ticket(db_session, "a", base)
    db_session.add_all([
        TicketReply(id="r2", ticket_id="a", user_id="agent", message="second", created_at=base + timedelta(hours=2)),
        TicketReply(id="r1", ticket_id="a", user_id="user-1", message="first", created_at=base + timedelta(hours=1)),
    ])
    db_session.commit()

    data = client.get("/tickets/a", headers=auth_headers).json()
    assert data["reply_count"] == 2
    assert [r["message"] for r in data["replies"]] == ["first", "second"]


def test_close_then_reopen_ticket(client, db_session, auth_headers):
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    _seed_ticket(db_session, "a", created)

    r = client.put("/tickets/a/status", json={"status": "closed"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["status"] == "closed"
    assert r.json()["updated_at"] != r.json()["created_at"]

    listing = client.get("/tickets/", headers=auth_headers).json()
    assert listing["open_count"] == 0
    assert listing["closed_count"] == 1

    r2 = client.put("/tickets/a/status", json={"status": "open"}, headers=auth_headers)
    assert r2.json()["status"] == "open"


def test_status_update_validation_and_404(client, db_session, auth_headers):
    _seed_ticket(db_session, "a", datetime(2024, 5, 1, tzinfo=timezone.utc))

    assert client.put("/tickets/a/status", json={"status": "pending"}, headers=auth_headers).status_code == 422
    r = client.put("/tickets/missing/status", json={"status": "closed"}, headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["detail"] == "Ticket not found"


def test_create_with_unknown_product_fails(client, db_session, auth_headers):
    r = client.post(
        "/tickets/",
        json={"title": "T", "description": "D", "category": "Orders", "product_id": "ghost"},
        headers=auth_headers,
    )
    assert r.status_code == 502
    assert r.json()["detail"]["description"].startswith("Failed to create ticket:")
    assert r.json()["detail"]["variant"] == "destructive"
    assert db_session.query(Ticket).count() == 0
    assert db_session.query(User).count() == 0


def test_create_when_store_rejects_insert(client, db_session, auth_headers, monkeypatch):
    def failing_commit():
        raise OperationalError("INSERT INTO tickets", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    r = client.post(
        "/tickets/",
        json={"title": "T", "description": "D", "category": "Other"},
        headers=auth_headers,
    )
    monkeypatch.undo()

    assert r.status_code == 502
    assert r.json()["detail"]["description"] == "Failed to create ticket: disk I/O error"
    assert db_session.query(Ticket).count() == 0


def test_replies_removed_with_their_ticket(db_session):
    created = datetime(2024, 5, 1, tzinfo=timezone.utc)
    _seed_ticket(db_session, "a", created)
    db_session.add(TicketReply(id="r1", ticket_id="a", user_id="agent", message="hi", created_at=created))
    db_session.commit()

    db_session.execute(text("DELETE FROM tickets WHERE id = 'a'"))
    db_session.commit()

    assert db_session.query(TicketReply).count() == 0
