from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from core.config import settings
from core.errors import RAGServiceError, RemoteCallError
from core.logger import get_logger, setup_logging

logger = get_logger(__name__)


def register_exception_handlers(application: FastAPI) -> None:
    """Every failure leaves the API as ``{"error": message}``."""

    @application.exception_handler(RAGServiceError)
    async def service_error_handler(request: Request, exc: RAGServiceError):
        if isinstance(exc, RemoteCallError):
            logger.error("%s %s failed (%s): %s", request.method, request.url.path, exc.kind, exc.message)
        elif exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @application.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        return JSONResponse(status_code=400, content={"error": f"Invalid request: {problems}"})

    @application.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(rag_service=None) -> FastAPI:
    setup_logging()

    application = FastAPI(
        title="PDF RAG Chatbot API",
        description="Train on PDF documents and answer questions about them",
        version="1.0.0",
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Services are imported lazily so tests can inject their own instance
    if rag_service is None:
        from services.rag import RAGService
        rag_service = RAGService.from_settings(settings)
    application.state.rag_service = rag_service

    register_exception_handlers(application)

    from routers.admin import router as admin_router
    from routers.chat import router as chat_router

    application.include_router(chat_router, prefix="/api", tags=["chat"])
    application.include_router(admin_router, prefix="/api", tags=["admin"])

    static_dir: Optional[str] = settings.STATIC_DIR
    if static_dir and Path(static_dir).is_dir():
        application.mount("/", StaticFiles(directory=static_dir, html=True), name="static")

    @application.on_event("startup")
    async def startup_event():
        logger.info("Server running on port %s", settings.PORT)
        logger.info("Admin panel: http://localhost:%s/admin.html", settings.PORT)
        logger.info("Chatbot: http://localhost:%s/index.html", settings.PORT)

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
