"""Async client for the chat-completion endpoint (DeepSeek, OpenAI-compatible)."""

import asyncio
import logging
from typing import Optional

import aiohttp

from trade_legal_chat.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)

COMPLETIONS_PATH = "/v1/chat/completions"


class CompletionError(Exception):
    """The completion endpoint could not produce a usable reply."""


def _prepare_payload(
    model: str,
    system_prompt: str,
    user_prompt: str,
    max_tokens: int,
    temperature: float,
) -> dict:
    """Build the JSON body for a chat-completions request."""
    messages = []
    if system_prompt:
        messages.append({"role": "system", "content": system_prompt})
    messages.append({"role": "user", "content": user_prompt})
    return {
        "model": model,
        "messages": messages,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }


def _extract_text(data) -> str:
    """Pull choices[0].message.content out of a completion body."""
    try:
        text = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as e:
        raise CompletionError(f"Malformed completion payload: {e!r}") from e
    if not isinstance(text, str):
        raise CompletionError("Malformed completion payload: content is not a string")
    if not text.strip():
        raise CompletionError("Completion payload has empty content")
    return text


class CompletionClient:
    """Calls ``POST {base_url}/v1/chat/completions`` and returns the reply text.

    A missing API key is not an error here: the request goes out without an
    ``Authorization`` header (a local proxy may add one) and a warning is
    logged the first time this happens for this client.
    """

    def __init__(self, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self.base_url = settings.deepseek_base_url.rstrip("/")
        self.api_key = settings.deepseek_api_key
        self.model = settings.llm_model
        self.timeout = settings.llm_timeout
        self._warned_missing_key = False

    @property
    def url(self) -> str:
        return f"{self.base_url}{COMPLETIONS_PATH}"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        elif not self._warned_missing_key:
            logger.warning(
                "DEEPSEEK_API_KEY not set; sending completion requests unauthenticated"
            )
            self._warned_missing_key = True
        return headers

    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int,
        temperature: float,
    ) -> str:
        """Send one system+user exchange and return the generated text.

        Raises:
            CompletionError: on transport errors, timeouts, non-2xx statuses
                or a body without ``choices[0].message.content``.
        """
        payload = _prepare_payload(
            self.model, system_prompt, user_prompt, max_tokens, temperature
        )
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self.url, json=payload, headers=self._headers()
                ) as response:
                    if response.status < 200 or response.status >= 300:
                        body = await response.text()
                        raise CompletionError(
                            f"Completion API error {response.status}: {body[:300]}"
                        )
                    try:
                        data = await response.json(content_type=None)
                    except ValueError as e:
                        raise CompletionError(f"Completion API returned invalid JSON: {e}") from e
        except asyncio.TimeoutError as e:
            raise CompletionError(f"Completion request timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise CompletionError(f"Completion request failed: {e}") from e

        return _extract_text(data)
