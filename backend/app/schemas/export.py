"""Share request/response schemas."""

from typing import Literal, Optional

from pydantic import BaseModel


class ShareRequest(BaseModel):
    template_id: Optional[str] = None
    language: Literal["en", "gu"] = "en"
    message_template: Optional[str] = None


class ShareRead(BaseModel):
    pdf_url: str
    message: str
    whatsapp_url: str
