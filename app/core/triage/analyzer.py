"""
Response Analyzer

Derives urgency, follow-up actions and resource categories from a
crisis chat exchange.

Rules are evaluated in table order. Every rule that matches adds its
actions and resources. A rule that carries an urgency overwrites the
current value, so the last matching rule wins, not the most severe one.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from app.core.triage.types import (
    ActionTag,
    ConversationContext,
    ResourceCategory,
    TriageResult,
    Urgency,
)

logger = logging.getLogger(__name__)

# (lower-cased message, context) -> bool
RuleCondition = Callable[[str, ConversationContext], bool]


@dataclass(frozen=True)
class TriageRule:
    """One condition -> effect entry of the triage table."""

    name: str
    condition: RuleCondition
    urgency: Optional[Urgency] = None
    actions: tuple[ActionTag, ...] = ()
    resources: tuple[ResourceCategory, ...] = ()
    peer_support: bool = False

    def matches(self, text: str, context: ConversationContext) -> bool:
        return self.condition(text, context)


def mentions(*phrases: str) -> RuleCondition:
    """Condition that matches when the message contains any phrase."""

    def condition(text: str, context: ConversationContext) -> bool:
        return any(phrase in text for phrase in phrases)

    return condition


def context_in_crisis(text: str, context: ConversationContext) -> bool:
    return context.is_in_crisis


# ==================================
# Triage Rules (order matters)
# ==================================

TRIAGE_RULES: tuple[TriageRule, ...] = (
    TriageRule(
        name="reported_crisis_state",
        condition=context_in_crisis,
        urgency=Urgency.HIGH,
        actions=(ActionTag.BREATHING_EXERCISE,),
    ),
    TriageRule(
        name="hearing_voices",
        condition=mentions("voices", "hearing things"),
        urgency=Urgency.MEDIUM,
        actions=(ActionTag.GROUNDING_EXERCISE,),
        resources=(ResourceCategory.MENTAL_HEALTH,),
        peer_support=True,
    ),
    TriageRule(
        name="substance_use",
        condition=mentions("drugs", "withdrawal"),
        urgency=Urgency.MEDIUM,
        actions=(ActionTag.FIND_DETOX,),
        resources=(ResourceCategory.SUBSTANCE_ABUSE,),
        peer_support=True,
    ),
    TriageRule(
        name="food",
        condition=mentions("hungry", "food"),
        actions=(ActionTag.FIND_FOOD,),
        resources=(ResourceCategory.FOOD_PANTRY,),
    ),
    TriageRule(
        name="shelter",
        condition=mentions("cold", "shelter"),
        urgency=Urgency.HIGH,
        actions=(ActionTag.FIND_SHELTER,),
        resources=(ResourceCategory.EMERGENCY_SHELTER,),
    ),
    TriageRule(
        name="isolation",
        condition=mentions("lonely", "alone", "nobody"),
        actions=(ActionTag.PEER_CONNECTION,),
        peer_support=True,
    ),
    TriageRule(
        name="tech_access",
        condition=mentions("phone", "charge", "wifi"),
        actions=(ActionTag.FIND_CHARGING,),
        resources=(ResourceCategory.TECH_RESOURCES,),
    ),
)


class ResponseAnalyzer:
    """
    Applies the triage table to a message and its context.

    Usage:
        analyzer = ResponseAnalyzer()
        result = analyzer.analyze("I'm so hungry", ai_text, context)
        print(result.actions)  # [ActionTag.FIND_FOOD]
    """

    def __init__(self, rules: tuple[TriageRule, ...] = TRIAGE_RULES):
        self.rules = rules

    def analyze(
        self,
        message: str,
        ai_response: str,
        context: Optional[ConversationContext] = None,
    ) -> TriageResult:
        """
        Analyze one exchange.

        Args:
            message: User's message
            ai_response: LLM reply (not inspected by the current rules)
            context: Conversation context

        Returns:
            TriageResult, low urgency when nothing matches
        """
        context = context or ConversationContext()
        text = (message or "").lower()
        result = TriageResult()

        for rule in self.rules:
            if not rule.matches(text, context):
                continue

            logger.debug(f"Triage rule matched: {rule.name}")

            if rule.urgency is not None:
                result.urgency = rule.urgency
            result.actions.extend(rule.actions)
            result.resources.extend(rule.resources)
            if rule.peer_support:
                result.needs_peer_support = True

        return result


_analyzer: Optional[ResponseAnalyzer] = None


def get_analyzer() -> ResponseAnalyzer:
    """Get singleton ResponseAnalyzer."""
    global _analyzer
    if _analyzer is None:
        _analyzer = ResponseAnalyzer()
    return _analyzer


def analyze(
    message: str,
    ai_response: str,
    context: Optional[ConversationContext] = None,
) -> TriageResult:
    """Convenience function to analyze an exchange."""
    return get_analyzer().analyze(message, ai_response, context)
