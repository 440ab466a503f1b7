"""
Service error taxonomy.

Every error carries the HTTP status it maps to at the request boundary, so
routers never translate exceptions themselves.
"""

class RAGServiceError(Exception):
    """Base class for errors surfaced to API clients as ``{"error": message}``."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RAGServiceError):
    status_code = 400


class PreconditionError(RAGServiceError):
    status_code = 400


class NotFoundError(RAGServiceError):
    status_code = 404


class PayloadTooLargeError(RAGServiceError):
    status_code = 413


class UnsupportedMediaError(RAGServiceError):
    status_code = 415


class ExtractionError(RAGServiceError):
    status_code = 500


class RemoteCallError(RAGServiceError):
    """A call to a hosted model failed.

    ``kind`` is one of ``auth``, ``rate_limit``, ``network``, ``timeout``,
    ``malformed_response`` or ``upstream`` and is only used for logging; the
    HTTP contract stays a plain 5xx.
    """

    status_code = 500

    def __init__(self, message: str, kind: str = "upstream"):
        super().__init__(message)
        self.kind = kind


class EmbeddingError(RemoteCallError):
    pass


class InferenceError(RemoteCallError):
    pass


class RemoteTimeoutError(RemoteCallError):
    status_code = 504

    def __init__(self, message: str):
        super().__init__(message, kind="timeout")
