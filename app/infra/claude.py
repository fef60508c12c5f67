"""
Claude API Client

Manages Anthropic API connections with async support, retry logic,
and model fallback. Implements the chat completion capability used by
the crisis chat orchestrator.
"""

import asyncio
import logging
import time
from typing import Any, Optional

from anthropic import AsyncAnthropic, APIError, RateLimitError, APIConnectionError

from app.config import settings
from app.core.triage.types import CompletionParams

logger = logging.getLogger(__name__)


class ClaudeClientError(Exception):
    """Raised when Claude API call fails."""
    pass


class ClaudeClient:
    """
    Async Claude API client wrapper.

    Features:
    - Async API calls
    - Automatic retries with exponential backoff
    - Model fallback (Sonnet -> Haiku)
    - OpenAI-style message lists (system entry first) mapped to the
      Anthropic Messages API
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        fallback_model: Optional[str] = None,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
    ):
        """Initialize Claude client.

        The API key is checked at call time so the service can start
        (and answer with the fallback message) before it is configured.

        Args:
            api_key: Anthropic API key (defaults to settings)
            model: Primary model (defaults to settings.claude_chat_model)
            fallback_model: Model tried once after a failure
            timeout: Request timeout in seconds
            max_retries: Attempts per model for transient errors
        """
        self.api_key = api_key or settings.anthropic_api_key
        self._default_model = model or settings.claude_chat_model
        self._fallback_model = fallback_model if fallback_model is not None else settings.claude_fallback_model
        self._max_retries = max_retries if max_retries is not None else settings.llm_max_retries

        self._client: Optional[AsyncAnthropic] = None
        if self.api_key:
            # SDK retries are disabled; _call_with_retry owns the policy
            self._client = AsyncAnthropic(
                api_key=self.api_key,
                timeout=timeout or settings.llm_timeout_seconds,
                max_retries=0,
            )
        else:
            logger.warning("ANTHROPIC_API_KEY not set - crisis chat will use fallback responses")

        logger.info(f"ClaudeClient initialized with model={self._default_model}")

    @property
    def is_configured(self) -> bool:
        return self._client is not None

    async def complete(
        self,
        messages: list[dict[str, str]],
        params: CompletionParams,
        model: Optional[str] = None,
        use_fallback_on_error: bool = True,
    ) -> str:
        """
        Generate a chat completion.

        Args:
            messages: Ordered role/content dicts; "system" entries become
                the system prompt
            params: Decoding parameters
            model: Model to use (defaults to chat model)
            use_fallback_on_error: Try fallback model on failure

        Returns:
            Completion text

        Raises:
            ClaudeClientError: If API call fails after retries
        """
        if self._client is None:
            raise ClaudeClientError("Anthropic API key is not configured")

        model = model or self._default_model
        system, turns = to_anthropic_messages(messages)
        start_time = time.time()

        try:
            response = await self._call_with_retry(
                messages=turns,
                system=system,
                model=model,
                max_tokens=params.max_tokens,
                temperature=params.temperature,
            )
            text = extract_text(response)
            if not text:
                raise ClaudeClientError(f"Empty completion (stop_reason={response.stop_reason})")

            latency_ms = (time.time() - start_time) * 1000
            logger.debug(
                f"Claude completion: model={model} "
                f"input_tokens={response.usage.input_tokens} "
                f"output_tokens={response.usage.output_tokens} "
                f"latency_ms={latency_ms:.0f}"
            )
            return text

        except Exception as e:
            if use_fallback_on_error and self._fallback_model and model != self._fallback_model:
                logger.warning(f"Primary model failed, trying fallback: {e}")
                return await self.complete(
                    messages=messages,
                    params=params,
                    model=self._fallback_model,
                    use_fallback_on_error=False,
                )
            if isinstance(e, ClaudeClientError):
                raise
            raise ClaudeClientError(f"Claude API call failed: {e}") from e

    async def _call_with_retry(
        self,
        messages: list[dict],
        system: Optional[str],
        model: str,
        max_tokens: int,
        temperature: float,
    ) -> Any:
        """Call API with exponential backoff retry."""
        last_error = None

        for attempt in range(max(self._max_retries, 1)):
            try:
                kwargs: dict[str, Any] = {
                    "model": model,
                    "max_tokens": max_tokens,
                    "temperature": temperature,
                    "messages": messages,
                }
                if system:
                    kwargs["system"] = system

                return await self._client.messages.create(**kwargs)

            except RateLimitError as e:
                last_error = e
                wait_time = 2 ** attempt
                logger.warning(f"Rate limited, waiting {wait_time}s (attempt {attempt + 1})")
                await asyncio.sleep(wait_time)

            except APIConnectionError as e:
                last_error = e
                wait_time = 2 ** attempt
                logger.warning(f"Connection error, retrying in {wait_time}s (attempt {attempt + 1})")
                await asyncio.sleep(wait_time)

            except APIError as e:
                logger.error(f"API error: {e}")
                raise

        raise last_error or ClaudeClientError("Max retries exceeded")

    async def close(self) -> None:
        """Close the client."""
        if self._client is not None:
            await self._client.close()


def to_anthropic_messages(
    messages: list[dict[str, str]],
) -> tuple[Optional[str], list[dict[str, str]]]:
    """
    Convert a system-first message list to Anthropic's format.

    - "system" entries are joined into the system prompt
    - non-system entries with blank content are dropped
    - consecutive turns with the same role are merged
    - assistant turns before the first user turn are folded into the
      system prompt, since the conversation must open with a user turn

    Returns:
        (system prompt or None, alternating user/assistant turns)
    """
    system_parts: list[str] = []
    turns: list[dict[str, str]] = []

    for msg in messages:
        role = msg.get("role", "user")
        content = msg.get("content", "")

        if role == "system":
            system_parts.append(content)
        elif not content.strip():
            continue
        elif role == "assistant" and not turns:
            system_parts.append(f"Earlier in this conversation you said: {content}")
        elif turns and turns[-1]["role"] == role:
            turns[-1] = {"role": role, "content": f"{turns[-1]['content']}\n\n{content}"}
        else:
            turns.append({"role": role, "content": content})

    system = "\n\n".join(part for part in system_parts if part) or None
    return system, turns


def extract_text(response: Any) -> str:
    """Join the text blocks of a Messages API response."""
    return "".join(
        block.text for block in response.content if getattr(block, "type", None) == "text"
    ).strip()
