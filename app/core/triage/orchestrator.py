"""
Crisis Chat Orchestrator

Coordinates one crisis chat request:

1. Keyword check for immediate danger. A match returns the fixed
   emergency message for the user's language. NO AI on this path.
2. Otherwise build the augmented system prompt and call the LLM once.
3. Analyze the exchange for urgency, actions and resources.
4. If the LLM call fails for any reason, return the fixed fallback
   message instead. Errors never reach the caller.
"""

import logging
import time
from collections.abc import Sequence
from typing import Optional, Protocol

from app.core.resources.catalog import ResourceCatalog
from app.core.triage.analyzer import ResponseAnalyzer
from app.core.triage.augmenter import build_system_prompt
from app.core.triage.keywords import is_immediate_crisis
from app.core.triage.prompts import CRISIS_SYSTEM_PROMPT, FALLBACK_MESSAGE
from app.core.triage.types import (
    ActionTag,
    CompletionParams,
    ConversationContext,
    ConversationTurn,
    CrisisResponse,
    Urgency,
)

logger = logging.getLogger(__name__)

IMMEDIATE_ACTIONS: tuple[ActionTag, ...] = (
    ActionTag.CALL_HOTLINE,
    ActionTag.FIND_ER,
    ActionTag.ALERT_CASEWORKER,
)


class ChatCompletionClient(Protocol):
    """LLM capability consumed by the orchestrator."""

    async def complete(
        self,
        messages: list[dict[str, str]],
        params: CompletionParams,
    ) -> str:
        """Return the completion text or raise on any failure."""
        ...


class CrisisChatService:
    """
    Handles crisis chat requests.

    The LLM client is injected so tests and alternative providers can
    stand in for Claude.

    Usage:
        service = CrisisChatService(llm=claude_client, catalog=get_catalog())
        response = await service.handle_crisis_chat("I'm so cold", history, context)
    """

    def __init__(
        self,
        llm: ChatCompletionClient,
        catalog: ResourceCatalog,
        base_prompt: str = CRISIS_SYSTEM_PROMPT,
        params: Optional[CompletionParams] = None,
        analyzer: Optional[ResponseAnalyzer] = None,
    ):
        self._llm = llm
        self._catalog = catalog
        self._base_prompt = base_prompt
        self._params = params or CompletionParams()
        self._analyzer = analyzer or ResponseAnalyzer()

    async def handle_crisis_chat(
        self,
        message: str,
        history: Sequence[ConversationTurn] = (),
        context: Optional[ConversationContext] = None,
    ) -> CrisisResponse:
        """
        Process one user message.

        Args:
            message: User's message
            history: Earlier turns, oldest first
            context: Language, emotion, mood and location signals

        Returns:
            CrisisResponse (immediate, analyzed or fallback)
        """
        context = context or ConversationContext()

        if is_immediate_crisis(message):
            return self._immediate_response(context)

        messages = self.build_messages(message, history, context)
        start_time = time.time()

        try:
            reply = await self._llm.complete(messages, self._params)
        except Exception as e:
            logger.exception(
                f"Crisis chat LLM call failed for session={context.session_id or 'unknown'}: {e}"
            )
            return self.fallback_response()

        latency_ms = (time.time() - start_time) * 1000
        analysis = self._analyzer.analyze(message, reply, context)

        logger.info(
            f"Crisis chat answered: session={context.session_id or 'unknown'} "
            f"urgency={analysis.urgency.value} "
            f"actions={[a.value for a in analysis.actions]} "
            f"latency_ms={latency_ms:.0f}"
        )

        return CrisisResponse(
            message=reply,
            urgency=analysis.urgency,
            actions=tuple(analysis.actions),
            resources=tuple(analysis.resources),
            peer_support=analysis.needs_peer_support,
        )

    def build_messages(
        self,
        message: str,
        history: Sequence[ConversationTurn],
        context: ConversationContext,
    ) -> list[dict[str, str]]:
        """Build the ordered message list: system, history, current message."""
        system_prompt = build_system_prompt(
            self._base_prompt,
            context,
            language_names=self._catalog.language_names,
        )

        messages = [{"role": "system", "content": system_prompt}]
        messages.extend({"role": turn.role, "content": turn.text} for turn in history)
        messages.append({"role": "user", "content": message})
        return messages

    def _immediate_response(self, context: ConversationContext) -> CrisisResponse:
        """Fixed emergency response. The message text is never logged."""
        logger.warning(
            f"Immediate crisis response triggered for session={context.session_id or 'unknown'} "
            f"language={context.language}. Providing hotline resources."
        )

        return CrisisResponse(
            message=self._catalog.emergency_message(context.language),
            urgency=Urgency.IMMEDIATE,
            actions=IMMEDIATE_ACTIONS,
            peer_support=True,
        )

    @staticmethod
    def fallback_response() -> CrisisResponse:
        """Safe response used whenever an answer cannot be generated."""
        return CrisisResponse(
            message=FALLBACK_MESSAGE,
            urgency=Urgency.ERROR,
            fallback=True,
        )
