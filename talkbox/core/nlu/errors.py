"""
Errors raised while decoding model output into an NLUResult.

Every error carries the decode stage that raised it ("intent", "tags",
"slots") and, where known, the intent and slot involved, so callers can
report "could not understand request" without inspecting buffer details.
"""

from typing import Optional


class NLUError(Exception):
    def __init__(
        self,
        message: str,
        stage: Optional[str] = None,
        intent: Optional[str] = None,
        slot: Optional[str] = None,
    ):
        super().__init__(message)
        self.stage = stage
        self.intent = intent
        self.slot = slot


class MetadataError(NLUError):
    """Model metadata is missing required fields or is not valid JSON."""


class BufferUnderflow(NLUError):
    def __init__(self, requested: int, remaining: int, stage: Optional[str] = None):
        super().__init__(
            f"posterior buffer underflow: needed {requested} scores, {remaining} remaining",
            stage=stage,
        )
        self.requested = requested
        self.remaining = remaining


class SlotParsingError(NLUError):
    def __init__(self, slot: str, intent: Optional[str] = None, message: Optional[str] = None):
        super().__init__(message or f"error parsing slot {slot}", stage="slots", intent=intent, slot=slot)


class MissingParserError(SlotParsingError):
    def __init__(self, slot: str, slot_type: str, intent: Optional[str] = None):
        super().__init__(slot, intent=intent, message=f"no parser registered for slot {slot} (type {slot_type!r})")
        self.slot_type = slot_type
