"""
Model metadata: the intents, their slots and the tag vocabulary a trained
NLU model was exported with.

Metadata is loaded once per model and never mutated afterwards, so a single
instance can be shared by every decode call.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

from .errors import MetadataError

logger = logging.getLogger("nlu.metadata")


@dataclass(slots=True, frozen=True)
class SlotSpec:
    name: str
    type: str
    facets: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    value: Any = None   # implicit value, None when the slot must come from text

    @property
    def is_implicit(self) -> bool:
        return self.value is not None


@dataclass(slots=True, frozen=True)
class IntentSpec:
    name: str
    slots: tuple[SlotSpec, ...] = ()

    def get_slot(self, name: str) -> Optional[SlotSpec]:
        for slot in self.slots:
            if slot.name == name:
                return slot
        return None

    @property
    def implicit_slots(self) -> tuple[SlotSpec, ...]:
        return tuple(s for s in self.slots if s.is_implicit)


@dataclass(slots=True, frozen=True)
class Metadata:
    intents: tuple[IntentSpec, ...]
    tags: tuple[str, ...]

    @property
    def num_intents(self) -> int:
        return len(self.intents)

    @property
    def num_tags(self) -> int:
        return len(self.tags)

    def get_intent(self, name: str) -> Optional[IntentSpec]:
        for intent in self.intents:
            if intent.name == name:
                return intent
        return None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Metadata":
        """
        Build metadata from the JSON structure exported alongside a model.

        Raises:
            MetadataError: if intents or tags are missing or malformed
        """
        if not isinstance(raw, Mapping):
            raise MetadataError("metadata must be a JSON object")
        try:
            raw_intents = raw["intents"]
            raw_tags = raw["tags"]
        except KeyError as e:
            raise MetadataError(f"Missing metadata key: {e}") from e

        if not raw_intents:
            raise MetadataError("metadata declares no intents")
        if not raw_tags:
            raise MetadataError("metadata declares no tags")

        intents = tuple(_parse_intent(i) for i in raw_intents)
        tags = tuple(str(t) for t in raw_tags)
        return cls(intents=intents, tags=tags)


def _parse_intent(raw: Mapping[str, Any]) -> IntentSpec:
    try:
        name = raw["name"]
    except (KeyError, TypeError) as e:
        raise MetadataError(f"intent without a name: {raw!r}") from e
    slots = tuple(_parse_slot(name, s) for s in raw.get("slots") or ())
    return IntentSpec(name=name, slots=slots)


def _parse_slot(intent_name: str, raw: Mapping[str, Any]) -> SlotSpec:
    try:
        name = raw["name"]
        slot_type = raw["type"]
    except (KeyError, TypeError) as e:
        raise MetadataError(f"malformed slot in intent {intent_name}: {raw!r}") from e

    value = raw.get("value", raw.get("implicit_value"))
    return SlotSpec(
        name=name,
        type=slot_type,
        facets=MappingProxyType(_parse_facets(intent_name, name, raw.get("facets"))),
        value=value,
    )


def _parse_facets(intent_name: str, slot_name: str, facets: Any) -> dict[str, Any]:
    # exported models write facets as a JSON-encoded string
    if facets is None or facets == "":
        return {}
    if isinstance(facets, str):
        try:
            facets = json.loads(facets)
        except json.JSONDecodeError as e:
            raise MetadataError(f"invalid facets for {intent_name}.{slot_name}: {e}") from e
    if not isinstance(facets, Mapping):
        raise MetadataError(f"facets for {intent_name}.{slot_name} must be an object")
    return dict(facets)


def load_metadata(path: Union[str, Path]) -> Metadata:
    """
    Load model metadata from a JSON file.

    Args:
        path: Path to the metadata JSON exported with the model

    Returns:
        Immutable Metadata instance

    Raises:
        FileNotFoundError: If the file doesn't exist
        MetadataError: If the content is not valid metadata
    """
    meta_path = Path(path)
    if not meta_path.exists():
        raise FileNotFoundError(f"Metadata file not found: {meta_path}")

    with open(meta_path, "r", encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            raise MetadataError(f"invalid metadata JSON in {meta_path}: {e}") from e

    metadata = Metadata.from_dict(raw)
    logger.info(
        "Loaded NLU metadata from %s (%d intents, %d tags)",
        meta_path, metadata.num_intents, metadata.num_tags,
    )
    return metadata
