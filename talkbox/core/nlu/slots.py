import logging
from types import MappingProxyType
from typing import Mapping

from .metadata import IntentSpec
from .parsers import SlotParserRegistry
from .types import Slot

logger = logging.getLogger("nlu.decoder")


def implicit_slots(intent: IntentSpec) -> dict[str, Slot]:
    return {
        spec.name: Slot(spec.name, str(spec.value), spec.value)
        for spec in intent.implicit_slots
    }


def explicit_slots(
    intent: IntentSpec,
    raw_slots: Mapping[str, str],
    registry: SlotParserRegistry,
) -> dict[str, Slot]:
    """
    Parse slot values extracted from the utterance.

    Names the intent does not declare are passed through unparsed.

    Raises:
        SlotParsingError: if a declared slot's value cannot be parsed
    """
    parsed: dict[str, Slot] = {}
    for name, raw_value in raw_slots.items():
        spec = intent.get_slot(name)
        if spec is None:
            logger.warning("no %s slot in %s intent", name, intent.name)
            parsed[name] = Slot(name, raw_value, raw_value)
            continue
        parsed[name] = Slot(name, raw_value, registry.parse(spec, raw_value, intent=intent.name))
    return parsed


def resolve_slots(
    intent: IntentSpec,
    raw_slots: Mapping[str, str],
    registry: SlotParserRegistry,
) -> Mapping[str, Slot]:
    """Implicit slot values, overridden by anything found in the text."""
    explicit = explicit_slots(intent, raw_slots, registry)
    return MappingProxyType({**implicit_slots(intent), **explicit})
