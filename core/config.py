from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional


class Settings(BaseSettings):
    app_name: str = "PDF RAG Chatbot API"
    environment: str = Field(default="development")

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "info"

    # Hosted inference (placeholder key fails at call time, not at startup)
    HUGGINGFACE_API_KEY: str = Field(default="hf_your_api_key_here")
    INFERENCE_BASE_URL: str = "https://router.huggingface.co/v1"
    EMBEDDING_BASE_URL: str = "https://router.huggingface.co/v1"
    REQUEST_TIMEOUT_SECONDS: float = 60.0

    # CORS
    cors_allow_origins: List[str] = Field(default_factory=lambda: ["*"])

    # Admin panel / chatbot pages
    STATIC_DIR: Optional[str] = "public"

    # File Upload Settings
    MAX_FILE_SIZE_MB: int = 10
    ALLOWED_CONTENT_TYPES: List[str] = ["application/pdf"]

    # RAG Settings
    CHUNK_SIZE: int = 1000
    CHUNK_OVERLAP: int = 200
    TOP_K_RESULTS: int = 3

    # Embedding Settings
    EMBEDDING_MODEL: str = "sentence-transformers/all-MiniLM-L6-v2"
    EMBEDDING_BATCH_SIZE: int = 100

    # Chat defaults (runtime-adjustable through /api/settings)
    DEFAULT_MODEL: str = "llama-3-8b"
    DEFAULT_RESPONSE_STYLE: str = "balanced"
    TEMPERATURE: float = 0.7
    MAX_TOKENS: int = 800

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
    }

    @property
    def max_file_size_bytes(self) -> int:
        return self.MAX_FILE_SIZE_MB * 1024 * 1024


settings = Settings()
