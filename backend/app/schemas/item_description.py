"""Description cache schemas."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class DescriptionBase(BaseModel):
    canonical_text: str = Field(min_length=1)
    translated_text: Optional[str] = None
    mixed_script_text: Optional[str] = None


class DescriptionCreate(DescriptionBase):
    pass


class DescriptionUpdate(DescriptionBase):
    pass


class DescriptionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    canonical_text: str
    translated_text: str
    mixed_script_text: Optional[str] = None


class ResolveRequest(BaseModel):
    text: str = Field(min_length=1)


class ResolveResponse(BaseModel):
    """A failed translation comes back with the canonical text untouched and ``warning`` set."""

    canonical_text: str
    translated_text: Optional[str] = None
    mixed_script_text: Optional[str] = None
    entry_id: Optional[str] = None
    source_language: Literal["english", "gujarati"] = "english"
    warning: Optional[str] = None


class EnhanceRequest(BaseModel):
    text: str = Field(min_length=1)


class EnhanceResponse(BaseModel):
    text: str
    enhanced_text: Optional[str] = None
    warning: Optional[str] = None
