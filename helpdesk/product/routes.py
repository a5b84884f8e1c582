# helpdesk/product/routes.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from helpdesk.core.database import get_db
from helpdesk.product.schemas import ProductOption
from helpdesk.product import services as product_service

router = APIRouter(prefix="/products", tags=["Products"])


@router.get("/", response_model=list[ProductOption])
def list_available(db: Session = Depends(get_db)):
    return product_service.get_available_products(db)
