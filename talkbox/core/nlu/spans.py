from typing import Mapping

from .encoding import TokenSource
from .tagging import slot_name


def assemble_raw_slots(
    spans: Mapping[int, int],
    labels: tuple[str, ...],
    encoded: TokenSource,
) -> dict[str, str]:
    """
    Turn token spans into raw slot strings.

    Spans are read in start order; spans sharing a slot name are joined
    with a single space.
    """
    raw: dict[str, str] = {}
    for start in sorted(spans):
        value = encoded.decode_range(start, spans[start], drop_special=True)
        name = slot_name(labels[start])
        if name in raw:
            raw[name] = f"{raw[name]} {value}"
        else:
            raw[name] = value
    return raw
