# =============================================================================
# greenmaster_core/ai/gateway.py
# AI Gateway (OpenAI-compatible chat completions)
# =============================================================================
"""
AIGateway - the single "prompt in, text or structured JSON out" capability.

Works with any OpenAI-compatible endpoint (``base_url``). Every call goes
through the RetryPolicy; callers never retry themselves.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Union

import openai

from greenmaster_core.ai.retry import RetryPolicy, is_transient
from greenmaster_core.ai.shapes import OutputShape
from greenmaster_core.config import AppSettings
from greenmaster_core.errors import (
    AIContentBlockedError,
    AIGatewayError,
    AINotConfiguredError,
    AIRequestError,
    AIResponseFormatError,
    AIServiceUnavailableError,
)
from greenmaster_core.logging import LogContext

logger = logging.getLogger(__name__)

BLOCKED_FINISH_REASONS = ("content_filter", "safety")


@dataclass(frozen=True)
class Attachment:
    """A file sent alongside the prompt (PDF or image)."""
    data: bytes
    mime_type: str
    filename: str = "upload"

    def to_content_part(self) -> Dict[str, Any]:
        encoded = base64.b64encode(self.data).decode("ascii")
        data_url = f"data:{self.mime_type};base64,{encoded}"
        if self.mime_type.startswith("image/"):
            return {"type": "image_url", "image_url": {"url": data_url}}
        return {"type": "file", "file": {"filename": self.filename, "file_data": data_url}}


class AIGateway:
    """Text and structured generation with bounded retries."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: Optional[str] = None,
        model: str = "gpt-4o-mini",
        fast_model: Optional[str] = None,
        retry: Optional[RetryPolicy] = None,
        client=None,
    ):
        self.api_key = api_key
        self.base_url = base_url
        self.model = model
        self.fast_model = fast_model or model
        self.retry = retry or RetryPolicy()
        self._client = client

    @classmethod
    def from_settings(cls, settings: AppSettings, **kwargs) -> AIGateway:
        return cls(
            api_key=settings.ai_api_key,
            base_url=settings.ai_base_url,
            model=settings.ai_model,
            fast_model=settings.ai_fast_model,
            **kwargs,
        )

    @property
    def is_configured(self) -> bool:
        return self._client is not None or bool(self.api_key)

    @property
    def client(self):
        if self._client is None:
            if not self.api_key:
                raise AINotConfiguredError("API Key가 설정되지 않았습니다. 시스템 관리자에게 문의하세요.")
            self._client = openai.OpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    # =========================================================================
    # PUBLIC API
    # =========================================================================

    def generate_text(
        self,
        prompt: str,
        system: Optional[str] = None,
        fast: bool = False,
        temperature: float = 0.4,
        attachments: Optional[List[Attachment]] = None,
    ) -> str:
        """Free-form generation."""
        model = self.fast_model if fast else self.model
        messages = self._build_messages(prompt, system, attachments)
        return self._complete(messages, model, temperature)

    def generate_structured(
        self,
        prompt: str,
        shape: OutputShape,
        system: Optional[str] = None,
        fast: bool = False,
        temperature: float = 0.2,
        attachments: Optional[List[Attachment]] = None,
    ) -> Union[Dict[str, Any], List[Dict[str, Any]]]:
        """Generation whose output must parse as JSON conforming to ``shape``."""
        model = self.fast_model if fast else self.model
        full_prompt = f"{prompt}\n\n{shape.instructions()}"
        messages = self._build_messages(full_prompt, system, attachments)
        text = self._complete(messages, model, temperature)
        try:
            return shape.parse(text)
        except AIResponseFormatError as e:
            e.details.setdefault("model", model)
            logger.error(f"Structured response for {shape.name} rejected: {e.message}")
            raise

    # =========================================================================
    # INTERNALS
    # =========================================================================

    @staticmethod
    def _build_messages(
        prompt: str,
        system: Optional[str],
        attachments: Optional[List[Attachment]],
    ) -> List[Dict[str, Any]]:
        messages: List[Dict[str, Any]] = []
        if system:
            messages.append({"role": "system", "content": system})
        if attachments:
            content: List[Dict[str, Any]] = [a.to_content_part() for a in attachments]
            content.append({"type": "text", "text": prompt})
            messages.append({"role": "user", "content": content})
        else:
            messages.append({"role": "user", "content": prompt})
        return messages

    def _complete(self, messages: List[Dict[str, Any]], model: str, temperature: float) -> str:
        client = self.client

        def call():
            return client.chat.completions.create(
                model=model,
                messages=messages,
                temperature=temperature,
            )

        try:
            with LogContext(logger, f"AI request ({model})", level=logging.DEBUG):
                response = self.retry.run(call, description=f"AI request ({model})")
        except AIGatewayError:
            raise
        except Exception as e:
            if is_transient(e):
                raise AIServiceUnavailableError(
                    "요청 과부하입니다. 잠시 후 다시 시도하세요.", model=model,
                    details={"error": str(e)},
                ) from e
            raise AIRequestError(f"AI 요청이 거부되었습니다: {e}", model=model) from e

        return self._extract_text(response, model)

    @staticmethod
    def _extract_text(response, model: str) -> str:
        if not getattr(response, "choices", None):
            raise AIResponseFormatError("AI 응답이 비어있습니다.", model=model)
        choice = response.choices[0]
        finish_reason = (getattr(choice, "finish_reason", None) or "").lower()
        if finish_reason in BLOCKED_FINISH_REASONS:
            raise AIContentBlockedError("내용이 안전 정책에 의해 차단되었습니다.", model=model)
        text = choice.message.content if choice.message else None
        if not text:
            raise AIResponseFormatError(
                "AI 응답이 비어있습니다.", model=model,
                details={"finish_reason": finish_reason},
            )
        return text
