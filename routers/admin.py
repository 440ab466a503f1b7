from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from core.errors import RAGServiceError, ValidationError
from dependencies.services import get_rag_service
from models.rag_model import DocumentRecord
from schemas.rag import DeleteResponse, ErrorResponse, StatsResponse, TrainResponse
from services.rag import RAGService

router = APIRouter()


@router.post(
    "/train",
    response_model=TrainResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 415: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def train_document(
    pdf: Optional[UploadFile] = File(None),
    settings_json: Optional[str] = Form(None, alias="settings"),
    rag_service: RAGService = Depends(get_rag_service),
):
    """
    Upload a PDF and add its chunks to the vector index.

    Multipart fields:
    - pdf: the PDF file (application/pdf, at most 10MB)
    - settings: optional JSON string merged into the chat settings
    """
    if pdf is None:
        raise ValidationError("No file uploaded")

    # Type is checked before the body is read
    rag_service.validate_upload(pdf.filename, pdf.content_type, pdf.size or 0)
    content = await pdf.read()

    result = await rag_service.train(pdf.filename, content, pdf.content_type, settings_json)

    return TrainResponse(
        success=True,
        message="Document trained successfully",
        chunks=result.chunks,
        pages=result.pages,
        document_id=result.document_id,
    )


@router.get("/documents", response_model=List[DocumentRecord])
async def list_documents(rag_service: RAGService = Depends(get_rag_service)):
    return await rag_service.list_documents()


@router.delete("/documents/{document_id}", response_model=DeleteResponse, responses={404: {"model": ErrorResponse}})
async def delete_document(document_id: str, rag_service: RAGService = Depends(get_rag_service)):
    await rag_service.delete_document(document_id)
    return DeleteResponse(success=True, message="Document deleted")


@router.get("/stats", response_model=StatsResponse)
async def get_stats(rag_service: RAGService = Depends(get_rag_service)):
    stats = await rag_service.stats()
    return StatsResponse(**stats)


@router.post("/settings")
async def update_settings(request: Request, rag_service: RAGService = Depends(get_rag_service)):
    """Merge a partial settings object into the current settings."""
    try:
        partial = await request.json()
    except Exception as e:
        raise RAGServiceError(f"Malformed settings body: {e}") from e

    updated = await rag_service.update_settings(partial)
    return {"success": True, "settings": updated.to_api()}


@router.get("/settings")
async def get_settings(rag_service: RAGService = Depends(get_rag_service)):
    return (await rag_service.get_settings()).to_api()
