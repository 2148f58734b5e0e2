import openai
from typing import Optional, Dict, Any, List
from app.core.config import settings
from app.core.exceptions import ExternalServiceError
import json
import logging
import time

logger = logging.getLogger(__name__)


class AIService:
    """Thin wrapper over the OpenAI chat completions API."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.model = model or settings.OPENAI_MODEL
        self.client = None
        if self.api_key:
            self.client = openai.OpenAI(api_key=self.api_key, timeout=settings.OPENAI_TIMEOUT_SECONDS)
        else:
            logger.warning("OPENAI_API_KEY not configured, AI features disabled")

    @property
    def is_available(self) -> bool:
        return self.client is not None

    def _complete(self, messages: List[Dict[str, str]], temperature: float, json_mode: bool = False):
        if not self.is_available:
            raise ExternalServiceError("AI service is not configured", unavailable=True)
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        try:
            return self.client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            logger.error(f"OpenAI request failed: {e}")
            raise ExternalServiceError("AI provider request failed", details=str(e))

    def chat_reply(self, system_prompt: str, history: List[Dict[str, str]], message: str) -> Dict[str, Any]:
        """Generate the assistant's next turn.

        ``history`` holds earlier turns as ``{"role": "user"|"assistant", "content": ...}``.
        Returns the reply text together with model / usage metadata.
        """
        started = time.monotonic()
        messages = [{"role": "system", "content": system_prompt}, *history, {"role": "user", "content": message}]
        response = self._complete(messages, temperature=0.7)

        content = response.choices[0].message.content
        if not content:
            raise ExternalServiceError("Empty response from AI provider")
        usage = getattr(response, "usage", None)
        return {
            "content": content.strip(),
            "model": getattr(response, "model", None) or self.model,
            "tokens": getattr(usage, "total_tokens", 0) if usage else 0,
            "processing_time_ms": int((time.monotonic() - started) * 1000),
        }

    def generate_financial_insights(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Produce a summary, insights and recommendations for a financial snapshot"""
        prompt = f"""
        You are a personal financial advisor. Analyse the user's financial snapshot below.

        Snapshot:
        {json.dumps(context, indent=2, default=str)}

        Respond with a JSON object containing:
        - summary: two or three sentences describing the user's overall financial health
        - insights: a list of short observations (savings rate, debt load, emergency fund coverage)
        - recommendations: a list of concrete, actionable next steps
        """
        response = self._complete(
            [
                {"role": "system", "content": "You are a financial planning expert. Always respond with valid JSON."},
                {"role": "user", "content": prompt},
            ],
            temperature=0.3,
            json_mode=True,
        )
        content = response.choices[0].message.content
        try:
            result = json.loads(content or "")
        except json.JSONDecodeError:
            raise ExternalServiceError("AI provider returned malformed JSON", details=content)
        if not isinstance(result, dict):
            raise ExternalServiceError("AI provider returned an unexpected JSON shape", details=content)

        return {
            "summary": str(result.get("summary") or ""),
            "insights": _as_text_list(result.get("insights")),
            "recommendations": _as_text_list(result.get("recommendations")),
            "model": getattr(response, "model", None) or self.model,
        }


def _as_text_list(value: Any) -> List[str]:
    # A lone string is one item, not a sequence of characters
    if value is None:
        return []
    if isinstance(value, (str, int, float)):
        return [str(value)]
    if isinstance(value, list):
        return [str(item) for item in value]
    raise ExternalServiceError("AI provider returned an unexpected JSON shape", details=str(value))


def get_ai_service() -> AIService:
    """FastAPI dependency; overridden in tests."""
    return AIService()
