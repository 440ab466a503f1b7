"""
Domain models for documents and runtime chat settings
"""
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ModelKey(str, Enum):
    MISTRAL_7B = "mistral-7b"
    LLAMA_3_8B = "llama-3-8b"
    LLAMA_3_70B = "llama-3-70b"
    MIXTRAL_8X7B = "mixtral-8x7b"
    GEMMA_7B = "gemma-7b"


class ResponseStyle(str, Enum):
    CONCISE = "concise"
    BALANCED = "balanced"
    DETAILED = "detailed"
    EXPERT = "expert"


class DocumentRecord(BaseModel):
    """Metadata for one trained PDF. Never mutated after creation."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    name: str
    uploaded_at: datetime = Field(alias="uploadedAt")
    chunks: int = Field(ge=0)
    pages: int = Field(ge=0)
    size: int = Field(ge=0)


class RuntimeSettings(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
    )

    model: ModelKey = ModelKey.LLAMA_3_8B
    response_style: ResponseStyle = Field(default=ResponseStyle.BALANCED, alias="responseStyle")
    temperature: float = Field(default=0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(default=800, gt=0, alias="maxTokens")

    def to_api(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
