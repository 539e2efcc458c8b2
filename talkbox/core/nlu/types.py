from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping


@dataclass(slots=True, frozen=True)
class Slot:
    name: str
    raw_value: str
    value: Any = None


@dataclass(slots=True, frozen=True)
class NLUResult:
    intent: str
    confidence: float = 0.0
    slots: Mapping[str, Slot] = field(default_factory=lambda: MappingProxyType({}))
    utterance: str = ""

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict view used for events and JSON output."""
        return {
            "intent": self.intent,
            "confidence": self.confidence,
            "slots": {
                name: {"raw": slot.raw_value, "value": slot.value}
                for name, slot in self.slots.items()
            },
            "utterance": self.utterance,
        }
