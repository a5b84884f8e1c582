# helpdesk/product/services.py
from sqlalchemy.orm import Session
from helpdesk.product.models import Product

def get_available_products(db: Session) -> list[Product]:
    return (
        db.query(Product)
        .filter(Product.available.is_(True))
        .order_by(Product.name)
        .all()
    )
