"""
Crisis Triage Module

Immediate-danger detection, prompt augmentation, exchange analysis and
the orchestrator that ties them together.

Usage:
    from app.core.triage import CrisisChatService, ConversationContext

    service = CrisisChatService(llm=claude_client, catalog=get_catalog())
    response = await service.handle_crisis_chat(
        "I'm hungry and it's so cold out here",
        context=ConversationContext(language="es"),
    )
    print(response.urgency)  # Urgency.HIGH
"""

from app.core.triage.types import (
    ActionTag,
    CompletionParams,
    ConversationContext,
    ConversationTurn,
    CrisisResponse,
    Emotion,
    Location,
    Mood,
    ResourceCategory,
    TriageResult,
    Urgency,
)
from app.core.triage.keywords import IMMEDIATE_CRISIS_KEYWORDS, is_immediate_crisis
from app.core.triage.augmenter import build_system_prompt
from app.core.triage.analyzer import (
    TRIAGE_RULES,
    ResponseAnalyzer,
    TriageRule,
    analyze,
    get_analyzer,
)
from app.core.triage.orchestrator import ChatCompletionClient, CrisisChatService

__all__ = [
    # Types
    "ActionTag",
    "CompletionParams",
    "ConversationContext",
    "ConversationTurn",
    "CrisisResponse",
    "Emotion",
    "Location",
    "Mood",
    "ResourceCategory",
    "TriageResult",
    "Urgency",
    # Keyword matcher
    "IMMEDIATE_CRISIS_KEYWORDS",
    "is_immediate_crisis",
    # Augmenter
    "build_system_prompt",
    # Analyzer
    "TRIAGE_RULES",
    "ResponseAnalyzer",
    "TriageRule",
    "analyze",
    "get_analyzer",
    # Orchestrator
    "ChatCompletionClient",
    "CrisisChatService",
]
