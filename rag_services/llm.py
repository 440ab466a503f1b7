"""
LLM service for answer generation
"""
import asyncio
from typing import List, Optional

from core.config import settings
from core.errors import InferenceError
from core.logger import get_logger
from models.rag_model import ModelKey, ResponseStyle
from rag_services.client import build_client, classify_error

logger = get_logger(__name__)

DEFAULT_MODEL = ModelKey.LLAMA_3_8B
DEFAULT_STYLE = ResponseStyle.BALANCED

MODEL_MAP = {
    ModelKey.MISTRAL_7B: "mistralai/Mistral-7B-Instruct-v0.2",
    ModelKey.LLAMA_3_8B: "meta-llama/Llama-3-8b-chat-hf",
    ModelKey.LLAMA_3_70B: "meta-llama/Llama-3-70b-chat-hf",
    ModelKey.MIXTRAL_8X7B: "mistralai/Mixtral-8x7B-Instruct-v0.1",
    ModelKey.GEMMA_7B: "google/gemma-7b-it",
}

STYLE_PROMPTS = {
    ResponseStyle.CONCISE: "Provide a brief, direct answer.",
    ResponseStyle.BALANCED: "Provide a clear and informative answer with relevant details.",
    ResponseStyle.DETAILED: "Provide a comprehensive, detailed answer with examples and explanations.",
    ResponseStyle.EXPERT: "Provide an expert-level, in-depth analysis with technical details and context.",
}


def resolve_model(key: Optional[ModelKey]) -> str:
    """Hosted model id for ``key``; unknown or missing keys use llama-3-8b."""
    return MODEL_MAP.get(key, MODEL_MAP[DEFAULT_MODEL])


def resolve_style(style: Optional[ResponseStyle]) -> str:
    """Style instruction for ``style``; unknown styles use balanced."""
    return STYLE_PROMPTS.get(style, STYLE_PROMPTS[DEFAULT_STYLE])


class LLMService:
    """Handles answer generation using hosted chat models."""

    def __init__(self, base_url: Optional[str] = None):
        self._client = None
        self.base_url = base_url or settings.INFERENCE_BASE_URL

    def _ensure_client(self):
        if self._client is None:
            self._client = build_client(self.base_url)

    async def generate_answer(
        self,
        query: str,
        context: List[str],
        model: str,
        temperature: float,
        max_tokens: int,
    ) -> str:
        """Generate an answer for ``query`` grounded in the retrieved ``context``."""
        self._ensure_client()
        prompt = self._build_prompt(query, context)

        loop = asyncio.get_event_loop()
        try:
            response = await loop.run_in_executor(
                None,
                lambda: self._client.chat.completions.create(
                    model=model,
                    messages=[{"role": "user", "content": prompt}],
                    temperature=temperature,
                    max_tokens=max_tokens,
                ),
            )
            answer = response.choices[0].message.content
        except Exception as e:
            error = classify_error(e, InferenceError, "Inference request")
            logger.error("Inference failed (%s) for model %s: %s", error.kind, model, e)
            raise error from e

        if answer is None:
            raise InferenceError("Inference request returned no text", kind="malformed_response")
        return answer.strip()

    @staticmethod
    def _build_prompt(query: str, context: List[str]) -> str:
        """Build the prompt with the retrieved context."""
        context_text = "\n\n".join(context)

        return f"""Use the following pieces of context to answer the question at the end. If you don't know the answer, just say that you don't know, don't try to make up an answer.

{context_text}

{query}
Helpful Answer:"""
