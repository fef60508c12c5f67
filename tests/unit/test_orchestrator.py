"""Tests for the crisis chat orchestrator."""

import asyncio

import pytest
from unittest.mock import AsyncMock

from app.core.resources.catalog import get_catalog
from app.core.triage.orchestrator import IMMEDIATE_ACTIONS, CrisisChatService
from app.core.triage.prompts import CRISIS_SYSTEM_PROMPT, FALLBACK_MESSAGE
from app.core.triage.types import (
    ActionTag,
    CompletionParams,
    ConversationContext,
    ConversationTurn,
    Emotion,
    Location,
    ResourceCategory,
    Urgency,
)
from app.infra.claude import ClaudeClientError


class TestCrisisChatService:
    """Test orchestrator state machine."""

    @pytest.fixture
    def catalog(self):
        return get_catalog()

    @pytest.fixture
    def mock_llm(self):
        """Mock LLM capability."""
        llm = AsyncMock()
        llm.complete.return_value = "Let's find you food and shelter."
        return llm

    @pytest.fixture
    def service(self, mock_llm, catalog):
        """Create service with mock LLM."""
        return CrisisChatService(llm=mock_llm, catalog=catalog)

    # === Immediate Path ===

    @pytest.mark.asyncio
    async def test_immediate_crisis_skips_llm(self, service, mock_llm, catalog):
        """Immediate danger returns the emergency message without the LLM."""
        response = await service.handle_crisis_chat("I want to kill myself")

        assert response.urgency == Urgency.IMMEDIATE
        assert response.actions == (
            ActionTag.CALL_HOTLINE,
            ActionTag.FIND_ER,
            ActionTag.ALERT_CASEWORKER,
        )
        assert response.peer_support is True
        assert response.fallback is False
        assert response.message == catalog.emergency_message("en")
        assert "988" in response.message
        mock_llm.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_immediate_crisis_spanish(self, service, mock_llm, catalog):
        """Emergency message follows the context language."""
        response = await service.handle_crisis_chat(
            "I want to kill myself",
            context=ConversationContext(language="es"),
        )

        assert response.message == catalog.emergency_message("es")
        assert response.message != catalog.emergency_message("en")
        assert response.urgency == Urgency.IMMEDIATE
        assert response.actions == IMMEDIATE_ACTIONS
        mock_llm.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_immediate_crisis_unknown_language(self, service, catalog):
        """Unknown language falls back to the English emergency message."""
        response = await service.handle_crisis_chat(
            "SUICIDE",
            context=ConversationContext(language="tl"),
        )
        assert response.message == catalog.emergency_message("en")

    # === Augmented / Analyzed Path ===

    @pytest.mark.asyncio
    async def test_llm_called_once_with_message_last(self, service, mock_llm):
        """LLM is called exactly once; last entry is the user message."""
        await service.handle_crisis_chat("I'm hungry and it's so cold out here")

        mock_llm.complete.assert_called_once()
        messages, params = mock_llm.complete.call_args.args

        assert messages[0]["role"] == "system"
        assert messages[0]["content"] == CRISIS_SYSTEM_PROMPT
        assert messages[-1] == {
            "role": "user",
            "content": "I'm hungry and it's so cold out here",
        }
        assert params == CompletionParams(temperature=0.7, max_tokens=300)

    @pytest.mark.asyncio
    async def test_history_mapped_to_roles(self, service, mock_llm):
        """History keeps order and maps isBot to assistant."""
        history = [
            ConversationTurn(text="Hi, I'm here to help.", is_bot=True),
            ConversationTurn(text="I'm scared", is_bot=False),
            ConversationTurn(text="You're safe talking to me.", is_bot=True),
        ]

        await service.handle_crisis_chat("It's cold", history=history)

        messages = mock_llm.complete.call_args.args[0]
        assert messages[1:] == [
            {"role": "assistant", "content": "Hi, I'm here to help."},
            {"role": "user", "content": "I'm scared"},
            {"role": "assistant", "content": "You're safe talking to me."},
            {"role": "user", "content": "It's cold"},
        ]

    @pytest.mark.asyncio
    async def test_system_prompt_augmented(self, service, mock_llm):
        """Context signals reach the system prompt in order."""
        context = ConversationContext(
            language="ru",
            emotion=Emotion.PANICKED,
            location=Location(latitude=40.72, longitude=-73.99),
        )

        await service.handle_crisis_chat("help me", context=context)

        system = mock_llm.complete.call_args.args[0][0]["content"]
        assert system.startswith(CRISIS_SYSTEM_PROMPT)
        assert system.index("breathing") < system.index("Respond in Russian") < system.index("40.72")

    @pytest.mark.asyncio
    async def test_analyzed_response(self, service):
        """LLM text is returned with the analysis."""
        response = await service.handle_crisis_chat("I'm hungry and it's so cold out here")

        assert response.message == "Let's find you food and shelter."
        assert response.urgency == Urgency.HIGH
        assert ActionTag.FIND_FOOD in response.actions
        assert ActionTag.FIND_SHELTER in response.actions
        assert ResourceCategory.FOOD_PANTRY in response.resources
        assert ResourceCategory.EMERGENCY_SHELTER in response.resources
        assert response.peer_support is False
        assert response.fallback is False

    @pytest.mark.asyncio
    async def test_peer_support_flag(self, service):
        """needs_peer_support maps to peer_support."""
        response = await service.handle_crisis_chat("I feel so lonely")
        assert response.peer_support is True

    @pytest.mark.asyncio
    async def test_custom_params(self, mock_llm, catalog):
        """Decoding parameters are passed through."""
        params = CompletionParams(temperature=0.2, max_tokens=150)
        service = CrisisChatService(llm=mock_llm, catalog=catalog, params=params)

        await service.handle_crisis_chat("hello")

        assert mock_llm.complete.call_args.args[1] == params

    @pytest.mark.asyncio
    async def test_idempotent(self, service):
        """Same inputs with a deterministic LLM give the same response."""
        context = ConversationContext(language="es")
        history = [ConversationTurn(text="hola", is_bot=False)]

        first = await service.handle_crisis_chat("tengo hambre, food?", history, context)
        second = await service.handle_crisis_chat("tengo hambre, food?", history, context)

        assert first == second

    # === Fallback Path ===

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            ClaudeClientError("network down"),
            ConnectionError("connection reset"),
            asyncio.TimeoutError(),
            ValueError("malformed completion"),
        ],
    )
    async def test_llm_failure_returns_fallback(self, service, mock_llm, error):
        """Any LLM failure becomes the fallback response."""
        mock_llm.complete.side_effect = error

        response = await service.handle_crisis_chat("I'm so cold")

        assert response.urgency == Urgency.ERROR
        assert response.fallback is True
        assert response.message == FALLBACK_MESSAGE
        assert response.actions == ()
        assert response.resources == ()

    @pytest.mark.asyncio
    async def test_failure_does_not_affect_next_request(self, service, mock_llm):
        """A failed request leaves the service usable."""
        mock_llm.complete.side_effect = [ClaudeClientError("boom"), "I'm here."]

        first = await service.handle_crisis_chat("hello")
        second = await service.handle_crisis_chat("hello")

        assert first.fallback is True
        assert second.message == "I'm here."
        assert second.urgency == Urgency.LOW


class TestCrisisResponse:
    """Test CrisisResponse serialization."""

    def test_fallback_to_dict(self):
        d = CrisisChatService.fallback_response().to_dict()

        assert d == {
            "message": FALLBACK_MESSAGE,
            "urgency": "error",
            "actions": [],
            "resources": [],
            "peerSupport": False,
            "fallback": True,
        }
