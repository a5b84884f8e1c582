# helpdesk/user/models.py
from sqlalchemy import Column, String
from helpdesk.core.database import Base

class User(Base):
    """Local reference copy of an actor. Not the source of truth for identity."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    username = Column(String, nullable=False)
    email = Column(String, nullable=False)
    role = Column(String, nullable=False, default="customer")
