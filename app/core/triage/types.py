"""Types shared by the crisis triage pipeline."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Urgency(str, Enum):
    """Coarse severity attached to a triage result."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    IMMEDIATE = "immediate"   # Self-harm indicator, no LLM involved
    ERROR = "error"           # LLM unavailable, fallback message sent


class ActionTag(str, Enum):
    """Follow-up actions the client app can surface."""

    BREATHING_EXERCISE = "breathing_exercise"
    GROUNDING_EXERCISE = "grounding_exercise"
    FIND_DETOX = "find_detox"
    FIND_FOOD = "find_food"
    FIND_SHELTER = "find_shelter"
    PEER_CONNECTION = "peer_connection"
    FIND_CHARGING = "find_charging"

    # Immediate crisis
    CALL_HOTLINE = "call_hotline"
    FIND_ER = "find_er"
    ALERT_CASEWORKER = "alert_caseworker"


class ResourceCategory(str, Enum):
    """Classes of real-world aid suggested by the analyzer."""

    MENTAL_HEALTH = "mental_health"
    SUBSTANCE_ABUSE = "substance_abuse"
    FOOD_PANTRY = "food_pantry"
    EMERGENCY_SHELTER = "emergency_shelter"
    TECH_RESOURCES = "tech_resources"


class Emotion(str, Enum):
    """Emotion reported by the client (check-in buttons)."""

    CALM = "calm"
    SAD = "sad"
    ANXIOUS = "anxious"
    PANICKED = "panicked"
    ANGRY = "angry"
    CONFUSED = "confused"


class Mood(str, Enum):
    """Mood reported by the client."""

    OKAY = "okay"
    LOW = "low"
    ANXIOUS = "anxious"
    CRISIS = "crisis"


@dataclass(frozen=True)
class Location:
    """Coordinates shared by the user's device."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class ConversationTurn:
    """One message of the conversation so far."""

    text: str
    is_bot: bool = False

    @property
    def role(self) -> str:
        """Chat role for the LLM message list."""
        return "assistant" if self.is_bot else "user"


@dataclass(frozen=True)
class ConversationContext:
    """Signals the client sends alongside a message.

    Every field is independently optional.
    """

    language: str = "en"
    emotion: Optional[Emotion] = None
    mood: Optional[Mood] = None
    location: Optional[Location] = None
    session_id: Optional[str] = None

    def __post_init__(self):
        # Language codes compare lower-case; blank means English
        object.__setattr__(self, "language", (self.language or "").strip().lower() or "en")

    @property
    def is_anxious(self) -> bool:
        return self.emotion == Emotion.PANICKED or self.mood == Mood.ANXIOUS

    @property
    def is_in_crisis(self) -> bool:
        return self.emotion == Emotion.PANICKED or self.mood == Mood.CRISIS


@dataclass
class TriageResult:
    """Result of analyzing one exchange."""

    urgency: Urgency = Urgency.LOW
    actions: list[ActionTag] = field(default_factory=list)
    resources: list[ResourceCategory] = field(default_factory=list)
    needs_peer_support: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "urgency": self.urgency.value,
            "actions": [a.value for a in self.actions],
            "resources": [r.value for r in self.resources],
            "needs_peer_support": self.needs_peer_support,
        }


@dataclass(frozen=True)
class CrisisResponse:
    """Payload returned to the client for one chat request."""

    message: str
    urgency: Urgency
    actions: tuple[ActionTag, ...] = ()
    resources: tuple[ResourceCategory, ...] = ()
    peer_support: bool = False
    fallback: bool = False

    def to_dict(self) -> dict:
        """Convert to the camelCase wire format."""
        return {
            "message": self.message,
            "urgency": self.urgency.value,
            "actions": [a.value for a in self.actions],
            "resources": [r.value for r in self.resources],
            "peerSupport": self.peer_support,
            "fallback": self.fallback,
        }


@dataclass(frozen=True)
class CompletionParams:
    """Decoding parameters for a chat completion."""

    temperature: float = 0.7
    max_tokens: int = 300
