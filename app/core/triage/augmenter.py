"""Augment the crisis system prompt with per-request context."""

import logging
from collections.abc import Mapping
from typing import Optional

from app.core.triage.types import ConversationContext

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

CALMING_INSTRUCTION = (
    "The user is experiencing high anxiety. Use extra calming, slow-paced "
    "language and guide them through a simple breathing exercise "
    "(for example: breathe in for 4 counts, hold for 4, out for 4)."
)

LANGUAGE_INSTRUCTION = (
    "Respond in {language_name}. Keep the language simple and clear."
)

LOCATION_INSTRUCTION = (
    "The user is at latitude {latitude}, longitude {longitude}. "
    "Provide location-specific resources near them when possible."
)


def resolve_language_name(
    code: str,
    language_names: Mapping[str, str],
) -> str:
    """Map a language code to the name used in the prompt (English if unknown)."""
    name = language_names.get(code)
    if name is None:
        logger.debug(f"Unknown language code '{code}', falling back to English")
        return language_names.get(DEFAULT_LANGUAGE, "English")
    return name


def build_system_prompt(
    base_prompt: str,
    context: ConversationContext,
    language_names: Optional[Mapping[str, str]] = None,
) -> str:
    """
    Build the system prompt for one LLM call.

    Fragments are appended in a fixed order: calming, language, location.

    Args:
        base_prompt: Fixed crisis-intervention prompt
        context: Conversation context from the client
        language_names: Language code -> name table (defaults to the catalog)

    Returns:
        System prompt string
    """
    if language_names is None:
        from app.core.resources.catalog import get_catalog

        language_names = get_catalog().language_names

    parts = [base_prompt]

    if context.is_anxious:
        parts.append(CALMING_INSTRUCTION)

    if context.language != DEFAULT_LANGUAGE:
        parts.append(
            LANGUAGE_INSTRUCTION.format(
                language_name=resolve_language_name(context.language, language_names),
            )
        )

    if context.location is not None:
        parts.append(
            LOCATION_INSTRUCTION.format(
                latitude=context.location.latitude,
                longitude=context.location.longitude,
            )
        )

    return "\n\n".join(parts)
