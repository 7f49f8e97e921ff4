"""Invoice template schemas."""

from typing import Optional

from pydantic import BaseModel, Field

from backend.app.schemas.document import (
    CompanyProfile,
    FontSizes,
    FooterDesign,
    Position,
    TemplateColors,
    TemplateToggles,
    Watermark,
)


class TemplateWrite(BaseModel):
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
