from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Protocol

import anthropic
from openai import OpenAI

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-5"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 2048


class ProviderError(RuntimeError):
    """Raised when a chat provider returns nothing usable."""


@dataclass
class ImageInput:
    media_type: str  # e.g. "jpeg", "png"
    data: str  # base64 payload without the data URL prefix

    @property
    def data_url(self) -> str:
        return f"data:image/{self.media_type};base64,{self.data}"

    @property
    def mime_type(self) -> str:
        media_type = "jpeg" if self.media_type == "jpg" else self.media_type
        return f"image/{media_type}"


class ChatProvider(Protocol):
    name: str

    def complete(
        self,
        system: str,
        user: str,
        json_response: bool = False,
        image: Optional[ImageInput] = None,
    ) -> str:
        ...


@dataclass
class RankingRequest:
    instructions: str
    query: str
    sanitized_data: Dict[str, List[Dict[str, Any]]]
    language: str = "en"

    def user_message(self) -> str:
        return (
            f'Search query: "{self.query}"\n\n'
            "Sanitized data (personal details removed for privacy):\n"
            f"{json.dumps(self.sanitized_data)}"
        )


class RankingBackend(Protocol):
    def rank(self, request: RankingRequest) -> str:
        """Return the backend's raw response text."""
        ...


class OpenAIChatProvider:
    name = "openai"

    def __init__(self, model: Optional[str] = None, client: Any = None) -> None:
        self.model = model or os.getenv("BAILDESK_OPENAI_MODEL") or DEFAULT_OPENAI_MODEL
        if client is None:
            client = OpenAI()
        self.client = client

    def complete(
        self,
        system: str,
        user: str,
        json_response: bool = False,
        image: Optional[ImageInput] = None,
    ) -> str:
        if image is not None:
            content: Any = [
                {"type": "text", "text": user},
                {"type": "image_url", "image_url": {"url": image.data_url}},
            ]
        else:
            content = user
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": content},
            ],
        }
        if json_response:
            request["response_format"] = {"type": "json_object"}

        response = self.client.chat.completions.create(**request)
        choices = getattr(response, "choices", None) or []
        if not choices:
            raise ProviderError("OpenAI response contained no choices")
        return choices[0].message.content or ""


class AnthropicChatProvider:
    name = "anthropic"

    def __init__(
        self,
        model: Optional[str] = None,
        client: Any = None,
        max_tokens: Optional[int] = None,
    ) -> None:
        self.model = model or os.getenv("BAILDESK_ANTHROPIC_MODEL") or DEFAULT_ANTHROPIC_MODEL
        self.max_tokens = max_tokens or int(os.getenv("BAILDESK_ANTHROPIC_MAX_TOKENS", str(DEFAULT_MAX_TOKENS)))
        if client is None:
            client = anthropic.Anthropic(api_key=os.getenv("ANTHROPIC_API_KEY"))
        self.client = client

    def complete(
        self,
        system: str,
        user: str,
        json_response: bool = False,
        image: Optional[ImageInput] = None,
    ) -> str:
        blocks: List[Dict[str, Any]] = []
        if image is not None:
            blocks.append({
                "type": "image",
                "source": {"type": "base64", "media_type": image.mime_type, "data": image.data},
            })
        text = user
        if json_response:
            text = f"{user}\n\nReturn JSON only."
        blocks.append({"type": "text", "text": text})

        message = self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            messages=[{"role": "user", "content": blocks}],
        )
        return _extract_output_text(message)


def _extract_output_text(message: Any) -> str:
    content = getattr(message, "content", None)
    if not isinstance(content, list):
        return ""
    texts: List[str] = []
    for block in content:
        text = None
        if isinstance(block, dict):
            if block.get("type") == "text":
                text = block.get("text")
        else:
            text = getattr(block, "text", None)
        if text:
            texts.append(str(text))
    return "\n".join(texts)


class ChatRankingBackend:
    """Ranks candidates by asking a chat provider for the JSON results object."""

    def __init__(self, provider: ChatProvider) -> None:
        self.provider = provider

    def rank(self, request: RankingRequest) -> str:
        return self.provider.complete(
            system=request.instructions,
            user=request.user_message(),
            json_response=True,
        )


def detect_provider(env: Optional[dict] = None) -> Optional[str]:
    env = env if env is not None else os.environ
    explicit = (env.get("BAILDESK_AI_PROVIDER") or "").strip().lower()
    if explicit in {"none", "off", "local"}:
        return None
    if explicit in {"openai", "anthropic"}:
        return explicit
    if explicit:
        logger.warning("Unknown BAILDESK_AI_PROVIDER '%s', detecting from API keys", explicit)
    if env.get("OPENAI_API_KEY"):
        return "openai"
    if env.get("ANTHROPIC_API_KEY"):
        return "anthropic"
    return None


def build_provider(env: Optional[dict] = None) -> Optional[ChatProvider]:
    name = detect_provider(env)
    if name == "openai":
        return OpenAIChatProvider()
    if name == "anthropic":
        return AnthropicChatProvider()
    logger.info("No AI provider configured; search will rank locally")
    return None
