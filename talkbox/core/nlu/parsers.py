"""
Slot parsers: turn the raw text of a slot into a typed value.

A parser is anything with `parse(facets, raw_value)`, or a plain callable
with the same signature. Parsers raise ValueError when they cannot
interpret the raw value; the registry wraps that into SlotParsingError.
"""

import logging
import re
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Protocol, Union, runtime_checkable

from .errors import MissingParserError, SlotParsingError
from .metadata import SlotSpec

logger = logging.getLogger("nlu.parsers")


@runtime_checkable
class SlotParser(Protocol):
    def parse(self, facets: Mapping[str, Any], raw_value: str) -> Any: ...


ParserLike = Union[SlotParser, Callable[[Mapping[str, Any], str], Any]]


class IdentityParser:
    """Free-form entities; the raw text is the value."""

    def parse(self, facets: Mapping[str, Any], raw_value: str) -> Any:
        return raw_value


class SelsetParser:
    """Map a raw value onto one of a fixed set of named selections."""

    def parse(self, facets: Mapping[str, Any], raw_value: str) -> Any:
        needle = raw_value.strip().lower()
        for selection in facets.get("selections", ()):
            name = selection["name"]
            aliases = [name, *selection.get("aliases", ())]
            if any(needle == alias.lower() for alias in aliases):
                return name
        raise ValueError(f"{raw_value!r} matches no selection")


_UNITS = {
    "zero": 0, "oh": 0, "one": 1, "two": 2, "three": 3, "four": 4, "five": 5,
    "six": 6, "seven": 7, "eight": 8, "nine": 9, "ten": 10, "eleven": 11,
    "twelve": 12, "thirteen": 13, "fourteen": 14, "fifteen": 15,
    "sixteen": 16, "seventeen": 17, "eighteen": 18, "nineteen": 19,
    "a": 1, "an": 1,
}
_TENS = {
    "twenty": 20, "thirty": 30, "forty": 40, "fifty": 50,
    "sixty": 60, "seventy": 70, "eighty": 80, "ninety": 90,
}
_SCALES = {"hundred": 100, "thousand": 1000, "million": 1_000_000}
_DIGIT_WORDS = {w: str(n) for w, n in _UNITS.items() if n < 10 and w not in ("a", "an")}


def words_to_int(text: str) -> int:
    """
    Parse digits or English number words ("one hundred and five") to an int.

    Raises:
        ValueError: if any word is not part of a number
    """
    cleaned = text.strip().lower().replace(",", "")
    if re.fullmatch(r"-?\d+", cleaned):
        return int(cleaned)

    words = [w for w in re.split(r"[\s-]+", cleaned) if w and w != "and"]
    if not words:
        raise ValueError(f"no number in {text!r}")

    total = current = 0
    for word in words:
        if word in _UNITS:
            current += _UNITS[word]
        elif word in _TENS:
            current += _TENS[word]
        elif word == "hundred":
            current = (current or 1) * 100
        elif word in _SCALES:
            total += (current or 1) * _SCALES[word]
            current = 0
        elif word.isdigit():
            current += int(word)
        else:
            raise ValueError(f"{word!r} is not a number word")
    return total + current


class IntegerParser:
    """Integers, optionally limited by a `range: [lo, hi]` facet (hi exclusive)."""

    def parse(self, facets: Mapping[str, Any], raw_value: str) -> Any:
        value = words_to_int(raw_value)
        bounds = facets.get("range")
        if bounds:
            lo, hi = bounds
            if not lo <= value < hi:
                raise ValueError(f"{value} outside range [{lo}, {hi})")
        return value


class DigitsParser:
    """Spoken digit strings ("four oh two") kept as text, e.g. zip codes."""

    def parse(self, facets: Mapping[str, Any], raw_value: str) -> Any:
        digits = []
        for word in raw_value.lower().split():
            if word.isdigit():
                digits.append(word)
            elif word in _DIGIT_WORDS:
                digits.append(_DIGIT_WORDS[word])
            else:
                raise ValueError(f"{word!r} is not a digit")
        result = "".join(digits)
        if not result:
            raise ValueError(f"no digits in {raw_value!r}")
        count = facets.get("count")
        if count is not None and len(result) != int(count):
            raise ValueError(f"expected {count} digits, got {len(result)}")
        return result


_NUMBER = r"(?:\d+|" + "|".join(sorted([*_UNITS, *_TENS, *_SCALES], key=len, reverse=True)) + r")"
_DURATION = re.compile(
    rf"\b({_NUMBER}(?:[\s-]+(?:and\s+)?{_NUMBER})*)\s*(hours?|hrs?|h|minutes?|mins?|m|seconds?|secs?|s)\b"
)


class DurationParser:
    """Durations such as "1 hour 30 minutes" or "ten seconds", in seconds."""

    def parse(self, facets: Mapping[str, Any], raw_value: str) -> Any:
        seconds = 0
        found = False
        for amount, unit in _DURATION.findall(raw_value.lower()):
            n = words_to_int(amount)
            seconds += n * 3600 if unit.startswith("h") else n * 60 if unit.startswith("m") else n
            found = True
        if not found:
            raise ValueError(f"no duration in {raw_value!r}")
        return seconds


class SlotParserRegistry(Mapping[str, ParserLike]):
    """
    Read-only mapping of slot type to parser.

    Registration happens by building a new registry with `with_parsers`;
    an existing registry never changes, so it can be shared by concurrent
    decode calls.
    """

    def __init__(self, parsers: Mapping[str, ParserLike] | None = None):
        self._parsers = MappingProxyType(dict(parsers or {}))

    def __getitem__(self, slot_type: str) -> ParserLike:
        return self._parsers[slot_type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._parsers)

    def __len__(self) -> int:
        return len(self._parsers)

    def with_parsers(self, parsers: Mapping[str, ParserLike] | None = None, **more: ParserLike) -> "SlotParserRegistry":
        return SlotParserRegistry({**self._parsers, **(parsers or {}), **more})

    def parse(self, slot: SlotSpec, raw_value: str, intent: str | None = None) -> Any:
        """
        Parse `raw_value` with the parser registered for the slot's type.

        Raises:
            MissingParserError: if no parser is registered for the type
            SlotParsingError: if the parser rejects the value
        """
        parser = self._parsers.get(slot.type)
        if parser is None:
            raise MissingParserError(slot.name, slot.type, intent=intent)

        parse = parser.parse if isinstance(parser, SlotParser) else parser
        try:
            return parse(slot.facets, raw_value)
        except Exception as e:
            logger.debug("parser for %s rejected %r: %s", slot.type, raw_value, e)
            raise SlotParsingError(slot.name, intent=intent) from e


def default_registry() -> SlotParserRegistry:
    return SlotParserRegistry({
        "entity": IdentityParser(),
        "selset": SelsetParser(),
        "integer": IntegerParser(),
        "digits": DigitsParser(),
        "duration": DurationParser(),
    })
