"""In-memory document models: the invoice being edited and the template applied to it."""

import uuid
from datetime import date as calendar_date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Position = Literal["left", "center", "right"]
FooterDesign = Literal["simple", "detailed", "minimal"]


def new_id() -> str:
    return str(uuid.uuid4())


class LineItem(BaseModel):
    id: str = Field(default_factory=new_id)
    description: str = ""
    translated_description: Optional[str] = None
    quantity: Decimal = Decimal("1")
    unit: str = "pcs"
    rate: Decimal = Decimal("0")
    total: Decimal = Decimal("0")


class InvoiceDocument(BaseModel):
    id: str = Field(default_factory=new_id)
    invoice_number: str
    party_name: str = ""
    date: Optional[calendar_date] = None
    items: List[LineItem] = Field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    tax_enabled: bool = True
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    tags: List[str] = Field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TemplateColors(BaseModel):
    primary: str = "#1e3a8a"
    secondary: str = "#6b7280"
    table_background: str = "#f8f9fa"


class Watermark(BaseModel):
    text: Optional[str] = None
    enabled: bool = False


class TemplateToggles(BaseModel):
    show_tax: bool = True
    show_contact: bool = True
    show_logo: bool = True


class CompanyProfile(BaseModel):
    name: Optional[str] = None
    address: Optional[str] = None
    mobile: Optional[str] = None
    tax_id: Optional[str] = None


class FontSizes(BaseModel):
    header: int = 18
    body: int = 11
    footer: int = 9


class TemplateConfig(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(default_factory=new_id)
    name: str = "Default"
    colors: TemplateColors = Field(default_factory=TemplateColors)
    header_position: Position = "center"
    footer_design: FooterDesign = "simple"
    footer_position: Position = "center"
    footer_enabled: bool = True
    watermark: Watermark = Field(default_factory=Watermark)
    toggles: TemplateToggles = Field(default_factory=TemplateToggles)
    company_profile: CompanyProfile = Field(default_factory=CompanyProfile)
    logo_url: Optional[str] = None
    font_sizes: FontSizes = Field(default_factory=FontSizes)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TranslationEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    canonical_text: str
    translated_text: str
    mixed_script_text: Optional[str] = None


class ResolvedVariants(BaseModel):
    canonical: str
    translated: str
    mixed_script: Optional[str] = None
    source_language: Literal["english", "gujarati"] = "english"
