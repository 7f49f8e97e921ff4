"""Invoice schemas."""

from datetime import date as calendar_date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from backend.app.schemas.invoice_item import InvoiceItemIn, InvoiceItemRead


class InvoiceBase(BaseModel):
    invoice_number: Optional[str] = None
    party_name: str = ""
    date: Optional[calendar_date] = None
    tax_enabled: bool = True
    tags: List[str] = Field(default_factory=list)


class InvoiceCreate(InvoiceBase):
    items: List[InvoiceItemIn] = Field(default_factory=list)


class InvoiceUpdate(InvoiceBase):
    items: List[InvoiceItemIn]


class InvoiceRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    invoice_number: str
    party_name: str
    date: Optional[calendar_date]
    items: List[InvoiceItemRead]
    subtotal: Decimal
    tax_enabled: bool
    tax: Decimal
    total: Decimal
    tags: List[str]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
