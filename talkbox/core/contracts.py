from dataclasses import dataclass, asdict, field
from typing import Any, Optional
import time
import uuid

# Base Event
@dataclass(slots=True)
class Event:
    topic: str
    ts_ms: int = field(default_factory=lambda: int(time.time() * 1000))
    corr_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def dict(self) -> dict[str, Any]:
        return asdict(self)

# NLU Events

@dataclass(slots=True)
class NLUInference(Event):
    topic: str = "nlu.inference"
    intent_posteriors: list[float] = field(default_factory=list)  # one score per intent
    tag_posteriors: list[float] = field(default_factory=list)     # tokens x tags, token-major
    words: list[str] = field(default_factory=list)                # source words
    # token -> word index, None for special tokens; one token per word if omitted
    word_ids: Optional[list[Optional[int]]] = None
    token_ids: Optional[list[int]] = None
    utterance: str = ""

    def __post_init__(self) -> None:
        if not self.intent_posteriors:
            raise ValueError("NLUInference requires intent_posteriors")
        if self.word_ids is not None and self.token_ids is not None \
                and len(self.word_ids) != len(self.token_ids):
            raise ValueError("NLUInference word_ids and token_ids differ in length")

@dataclass(slots=True)
class NLUIntent(Event):
    topic: str = "nlu.intent"
    intent: str = "unknown"
    confidence: float = 0.0
    # {"unit": {"raw": "fahrenheit", "value": "fahrenheit"}}
    slots: dict[str, dict[str, Any]] = field(default_factory=dict)
    utterance: str = ""

@dataclass(slots=True)
class NLUFailed(Event):
    topic: str = "nlu.error"
    stage: Optional[str] = None   # "intent", "tags", "slots"
    intent: Optional[str] = None
    slot: Optional[str] = None
    message: str = ""
    utterance: str = ""

# Debugging helper
def same_trace(parent: Event, child: Event) -> Event:
    """Copy corr_id so downstream events stay in the same trace."""
    child.corr_id = parent.corr_id
    return child
