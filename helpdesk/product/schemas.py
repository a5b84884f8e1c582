# helpdesk/product/schemas.py
from pydantic import BaseModel

class ProductOption(BaseModel):
    id: str
    name: str

    model_config = {"from_attributes": True}
