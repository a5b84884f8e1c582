# helpdesk/product/models.py
from sqlalchemy import Boolean, Column, String
from helpdesk.core.database import Base

class Product(Base):
    __tablename__ = "products"

    id = Column(String(36), primary_key=True, index=True)
    name = Column(String, index=True, nullable=False)
    available = Column(Boolean, default=True, nullable=False, index=True)
