from decimal import Decimal
from pydantic import BaseModel

class PlanOut(BaseModel):
    plan_id: str
    name: str
    photo_allowance: int
    validity_days: int
    price: Decimal
    currency: str

    class Config:
        from_attributes = True
