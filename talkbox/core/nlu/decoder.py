"""
Decoder for the output of a joint intent/slot model.

The model produces two posterior buffers per utterance: one score per
declared intent, and one score per tag for every token (token-major).
Decoding picks the top intent, labels each token, groups labelled tokens
into slot spans, and parses the span text with the registered slot
parsers. Any failure aborts the whole decode; a partial result is never
returned.
"""

import asyncio
import logging
from contextlib import contextmanager
from typing import Iterator, Optional, Union

from .classify import classify_intent
from .encoding import TokenSource
from .errors import NLUError
from .metadata import Metadata
from .parsers import SlotParserRegistry, default_registry
from .posterior import PosteriorReader, Posteriors
from .slots import resolve_slots
from .spans import assemble_raw_slots
from .tagging import decode_labels, decode_spans
from .types import NLUResult

logger = logging.getLogger("nlu.decoder")

Buffer = Union[PosteriorReader, Posteriors]


@contextmanager
def _stage(name: str, intent: Optional[str] = None) -> Iterator[None]:
    try:
        yield
    except NLUError as e:
        if e.stage is None:
            e.stage = name
        if e.intent is None:
            e.intent = intent
        raise


def _reader(buffer: Buffer) -> PosteriorReader:
    return buffer if isinstance(buffer, PosteriorReader) else PosteriorReader(buffer)


def decode(
    intent_buffer: Buffer,
    tag_buffer: Buffer,
    encoded: TokenSource,
    metadata: Metadata,
    registry: SlotParserRegistry,
    num_tokens: Optional[int] = None,
    utterance: str = "",
) -> NLUResult:
    """
    Decode one utterance's posteriors into an NLUResult.

    Args:
        intent_buffer: num_intents scores (or a fresh PosteriorReader)
        tag_buffer: num_tokens * num_tags scores, token-major
        encoded: the utterance's tokens, used to recover slot text
        metadata: model metadata
        registry: slot parsers keyed by slot type
        num_tokens: tokens to label; defaults to len(encoded)
        utterance: source text, copied onto the result

    Raises:
        BufferUnderflow: if either buffer is shorter than expected
        SlotParsingError: if a declared slot's value cannot be parsed
    """
    if num_tokens is None:
        num_tokens = len(encoded)

    with _stage("intent"):
        intent, confidence = classify_intent(_reader(intent_buffer), metadata)

    with _stage("tags", intent.name):
        labels = decode_labels(_reader(tag_buffer), num_tokens, metadata)
        raw_slots = assemble_raw_slots(decode_spans(labels), labels, encoded)

    with _stage("slots", intent.name):
        slots = resolve_slots(intent, raw_slots, registry)

    return NLUResult(intent=intent.name, confidence=confidence, slots=slots, utterance=utterance)


class ResultDecoder:
    """
    Binds model metadata and slot parsers for repeated decoding.

    Both are read-only, so one ResultDecoder can serve concurrent calls;
    each call gets its own buffers.
    """

    def __init__(self, metadata: Metadata, registry: Optional[SlotParserRegistry] = None):
        self.metadata = metadata
        self.registry = registry if registry is not None else default_registry()
        self.log = logger

    def decode(
        self,
        intent_buffer: Buffer,
        tag_buffer: Buffer,
        encoded: TokenSource,
        num_tokens: Optional[int] = None,
        utterance: str = "",
    ) -> NLUResult:
        result = decode(
            intent_buffer, tag_buffer, encoded, self.metadata, self.registry,
            num_tokens=num_tokens, utterance=utterance,
        )
        self.log.info("Intent decoded: %s (confidence: %.2f, slots: %s)",
                      result.intent, result.confidence, sorted(result.slots))
        return result

    async def decode_async(
        self,
        intent_buffer: Buffer,
        tag_buffer: Buffer,
        encoded: TokenSource,
        num_tokens: Optional[int] = None,
        utterance: str = "",
    ) -> NLUResult:
        """Run `decode` in the default executor to keep the event loop free."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, lambda: self.decode(intent_buffer, tag_buffer, encoded, num_tokens, utterance)
        )
