"""
Pydantic models for API requests and responses
"""
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HealthResponse(BaseModel):
    status: str
    message: str


class ErrorResponse(BaseModel):
    error: str


class TrainResponse(CamelModel):
    success: bool = True
    message: str
    chunks: int
    pages: int
    document_id: str = Field(alias="documentId")


class ChatRequest(BaseModel):
    question: Optional[str] = None


class ChatResponse(BaseModel):
    success: bool = True
    answer: str
    model: str
    style: str


class DeleteResponse(BaseModel):
    success: bool
    message: str


class StatsResponse(CamelModel):
    total_documents: int = Field(alias="totalDocuments")
    total_chunks: int = Field(alias="totalChunks")
    last_updated: Optional[datetime] = Field(default=None, alias="lastUpdated")
