"""Line item schemas."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InvoiceItemIn(BaseModel):
    id: Optional[str] = None
    description: str = ""
    translated_description: Optional[str] = None
    quantity: Decimal = Field(default=Decimal("1"), ge=0)
    unit: str = "pcs"
    rate: Decimal = Field(default=Decimal("0"), ge=0)


class InvoiceItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    description: str
    translated_description: Optional[str] = None
    quantity: Decimal
    unit: str
    rate: Decimal
    total: Decimal
