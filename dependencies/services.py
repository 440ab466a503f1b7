from fastapi import Request

from services.rag import RAGService


def get_rag_service(request: Request) -> RAGService:
    """The service instance created by ``create_app`` for this process."""
    return request.app.state.rag_service
