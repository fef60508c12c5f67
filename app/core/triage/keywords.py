"""
Immediate Crisis Keyword Matcher

Flags messages that carry an explicit self-harm or suicide indicator.
A match sends the fixed emergency response and the LLM is never called.
"""

from typing import Optional

# Literal, lower-case substrings. Any one is enough.
IMMEDIATE_CRISIS_KEYWORDS: tuple[str, ...] = (
    "kill myself",
    "suicide",
    "want to die",
    "end it",
)


def is_immediate_crisis(
    message: Optional[str],
    keywords: tuple[str, ...] = IMMEDIATE_CRISIS_KEYWORDS,
) -> bool:
    """
    Check a message for immediate-danger phrases.

    Args:
        message: Raw user text (any casing)
        keywords: Lower-case phrases to look for

    Returns:
        True if the lower-cased text contains any phrase
    """
    if not message:
        return False

    text = message.lower()
    return any(keyword in text for keyword in keywords)
