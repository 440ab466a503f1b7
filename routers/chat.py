from fastapi import APIRouter, Depends

from dependencies.services import get_rag_service
from schemas.rag import ChatRequest, ChatResponse, ErrorResponse, HealthResponse
from services.rag import RAGService

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health():
    return HealthResponse(status="ok", message="Server is running")


@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
async def chat(
    payload: ChatRequest,
    rag_service: RAGService = Depends(get_rag_service),
):
    """
    Answer a question from the trained documents.

    Request body:
    ```json
    {
        "question": "What is alpha?"
    }
    ```

    Response:
    ```json
    {
        "success": true,
        "answer": "Alpha is ...",
        "model": "llama-3-8b",
        "style": "balanced"
    }
    ```
    """
    result = await rag_service.chat(payload.question)
    return ChatResponse(
        success=True,
        answer=result.answer,
        model=result.model,
        style=result.style,
    )
