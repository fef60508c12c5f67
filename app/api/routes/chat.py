"""
Crisis Chat API Endpoint.

Accepts a user message with optional history and context, and returns
the triaged response: an immediate emergency message, an LLM reply with
urgency/actions/resources, or the fallback message.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from app.api.dependencies import get_crisis_service
from app.core.triage.orchestrator import CrisisChatService
from app.core.triage.types import (
    ConversationContext,
    ConversationTurn,
    CrisisResponse,
    Emotion,
    Location,
    Mood,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Crisis Chat"])


class LocationPayload(BaseModel):
    """Device coordinates.

    A location missing either coordinate is ignored.
    """

    latitude: Optional[float] = None
    longitude: Optional[float] = None

    def to_location(self) -> Optional[Location]:
        if self.latitude is None or self.longitude is None:
            return None
        return Location(latitude=self.latitude, longitude=self.longitude)


class ConversationTurnPayload(BaseModel):
    """One earlier message."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = ""
    is_bot: bool = Field(default=False, alias="isBot")


class ContextPayload(BaseModel):
    """
    Conversation context.

    Unknown emotion or mood values are ignored rather than rejected.
    """

    model_config = ConfigDict(populate_by_name=True)

    language: Optional[str] = Field(
        default="en",
        description="ISO 639-1 language code",
        examples=["es"],
    )
    emotion: Optional[str] = Field(default=None, examples=["panicked"])
    mood: Optional[str] = Field(default=None, examples=["anxious"])
    location: Optional[LocationPayload] = None
    session_id: Optional[str] = Field(default=None, alias="sessionId")

    def to_context(self) -> ConversationContext:
        """Convert to the core context type."""
        return ConversationContext(
            language=self.language or "en",
            emotion=_parse_enum(Emotion, self.emotion),
            mood=_parse_enum(Mood, self.mood),
            location=self.location.to_location() if self.location else None,
            session_id=self.session_id,
        )


class CrisisChatRequest(BaseModel):
    """Crisis chat request."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(
        ...,
        description="User's message",
        examples=["I'm hungry and it's so cold out here"],
    )
    conversation_history: Optional[list[ConversationTurnPayload]] = Field(
        default=None,
        alias="conversationHistory",
        description="Earlier turns, oldest first",
    )
    context: Optional[ContextPayload] = None

    def history(self) -> list[ConversationTurn]:
        return [
            ConversationTurn(text=turn.text, is_bot=turn.is_bot)
            for turn in self.conversation_history or []
        ]


class CrisisChatResponse(BaseModel):
    """Crisis chat response."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    urgency: str = Field(..., description="low, medium, high, immediate or error")
    actions: list[str] = Field(default_factory=list)
    resources: list[str] = Field(default_factory=list)
    peer_support: bool = Field(default=False, alias="peerSupport")
    fallback: bool = False

    @classmethod
    def from_result(cls, result: CrisisResponse) -> "CrisisChatResponse":
        return cls.model_validate(result.to_dict())


def fallback_json_response(status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR, **extra) -> JSONResponse:
    """Supportive fallback payload with the given status code."""
    body = CrisisChatResponse.from_result(CrisisChatService.fallback_response())
    content = body.model_dump(by_alias=True, mode="json")
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def _parse_enum(enum_cls, value: Optional[str]):
    if not value:
        return None
    try:
        return enum_cls(value.strip().lower())
    except ValueError:
        logger.debug(f"Ignoring unknown {enum_cls.__name__} value: {value!r}")
        return None


@router.post(
    "/crisis-chat",
    response_model=CrisisChatResponse,
    status_code=status.HTTP_200_OK,
    summary="Send a crisis chat message",
    description="Triage a message and return a supportive response with follow-up actions.",
    responses={
        200: {"description": "Successful response"},
        500: {"model": CrisisChatResponse, "description": "Fallback response"},
    },
)
async def crisis_chat(
    request: CrisisChatRequest,
    service: CrisisChatService = Depends(get_crisis_service),
):
    """
    Process a crisis chat message.

    - Immediate-danger phrases get the fixed hotline message (no AI)
    - Everything else goes to the LLM with an augmented prompt
    - A failed LLM call returns the fallback message with HTTP 500
    """
    try:
        result = await service.handle_crisis_chat(
            message=request.message,
            history=request.history(),
            context=request.context.to_context() if request.context else None,
        )
    except Exception as e:
        logger.exception(f"Error processing crisis chat message: {e}")
        return fallback_json_response()

    body = CrisisChatResponse.from_result(result)
    if result.fallback:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=body.model_dump(by_alias=True, mode="json"),
        )
    return body
