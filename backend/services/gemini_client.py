# backend/services/gemini_client.py

import logging
from typing import List, Optional, Dict, Any

import httpx

from core.config import AppConfig
from core.prompt_architect import (
    SYSTEM_INSTRUCTION,
    SAFETY_SETTINGS,
    TOP_P,
    EXECUTION_TEMPERATURE,
    build_idea_prompt,
    get_temperature,
)
from models.session_models import Attachment, PromptStyle, CreativityLevel

logger = logging.getLogger(__name__)

GENERATE_FALLBACK = "Could not generate the prompt. Please try again."
EXECUTE_FALLBACK = "No response generated."


class GenerationServiceError(Exception):
    """Any failure talking to the generative-AI service. Categories are not distinguished."""


class GeminiClient:
    """
    Two single-shot calls against the Gemini generateContent endpoint.
    No retries, no streaming. The credential is passed per call.
    """

    def __init__(
        self,
        model: str = AppConfig.MODEL_NAME,
        base_url: str = AppConfig.API_BASE_URL,
        timeout: float = AppConfig.REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def generate_super_prompt(
        self,
        api_key: str,
        idea: str,
        style: PromptStyle,
        creativity: CreativityLevel,
        attachments: Optional[List[Attachment]] = None,
    ) -> str:
        """Multimodal request: one text part plus one inline part per attachment."""
        attachments = attachments or []
        parts: List[Dict[str, Any]] = [
            {"text": build_idea_prompt(idea, style, creativity, len(attachments))}
        ]
        for att in attachments:
            parts.append({"inlineData": {"mimeType": att.mime_type, "data": att.payload}})

        body = {
            "contents": [{"role": "user", "parts": parts}],
            "systemInstruction": {"parts": [{"text": SYSTEM_INSTRUCTION}]},
            "generationConfig": {"temperature": get_temperature(creativity), "topP": TOP_P},
            "safetySettings": SAFETY_SETTINGS,
        }
        text = await self._generate_content(api_key, body)
        return text or GENERATE_FALLBACK

    async def execute_prompt(self, api_key: str, super_prompt: str) -> str:
        """The super prompt is self-instructing, so no system instruction is sent."""
        body = {
            "contents": [{"role": "user", "parts": [{"text": super_prompt}]}],
            "generationConfig": {"temperature": EXECUTION_TEMPERATURE, "topP": TOP_P},
            "safetySettings": SAFETY_SETTINGS,
        }
        text = await self._generate_content(api_key, body)
        return text or EXECUTE_FALLBACK

    async def _generate_content(self, api_key: str, body: Dict[str, Any]) -> str:
        if not api_key:
            raise GenerationServiceError("API key not provided.")

        async with httpx.AsyncClient(transport=self.transport, timeout=self.timeout) as client:
            try:
                logger.info(f"Calling Gemini with model: {self.model}")
                response = await client.post(
                    self.endpoint,
                    headers={"x-goog-api-key": api_key},
                    json=body,
                )
            except httpx.HTTPError as e:
                logger.error(f"Transport error calling Gemini: {e}")
                raise GenerationServiceError(f"Gemini request failed: {e}") from e

        logger.info(f"Gemini response status: {response.status_code}")
        if response.status_code != 200:
            logger.error(f"Gemini error body: {response.text}")
            raise GenerationServiceError(f"Gemini returned {response.status_code}: {response.text}")

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationServiceError(f"Gemini returned a non-JSON body: {e}") from e
        return extract_text(data)


def extract_text(data: Any) -> str:
    """Joins the text parts of the first candidate. Returns "" when there are none."""
    if not isinstance(data, dict):
        raise GenerationServiceError("Malformed Gemini response.")
    candidates = data.get("candidates") or []
    if not candidates:
        return ""
    first = candidates[0] if isinstance(candidates[0], dict) else {}
    content = first.get("content") or {}
    parts = content.get("parts") or []
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict))
