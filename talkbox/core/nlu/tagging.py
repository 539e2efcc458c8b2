"""
Per-token tag decoding.

Tags follow a BIO scheme: `b_<slot>` opens a slot, `i_<slot>` continues
it, and `o` marks tokens outside any slot.
"""

import logging

from .metadata import Metadata
from .posterior import PosteriorReader

logger = logging.getLogger("nlu.decoder")

OUTSIDE = "o"


def slot_name(label: str) -> str:
    """Strip the two-character `b_` / `i_` prefix from a tag label."""
    return label[2:]


def decode_labels(reader: PosteriorReader, num_tokens: int, metadata: Metadata) -> tuple[str, ...]:
    labels = tuple(
        metadata.tags[reader.argmax(metadata.num_tags)[0]]
        for _ in range(num_tokens)
    )
    logger.debug("Tag labels: %s", list(labels))
    return labels


def decode_spans(labels: tuple[str, ...]) -> dict[int, int]:
    """
    Map each slot span's start token to its (exclusive) end token.

    A continuation tag extends the span that is currently open, whatever
    slot it names; the span keeps the name of its opening `b` tag.
    A continuation with no open span is dropped.
    """
    spans: dict[int, int] = {}
    start = None
    for i, label in enumerate(labels):
        if label == OUTSIDE:
            start = None
            continue
        if label.startswith("b"):
            start = i
        if start is not None:
            spans[start] = i + 1
    return spans
