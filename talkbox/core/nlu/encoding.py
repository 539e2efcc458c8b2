from dataclasses import dataclass
from typing import Optional, Protocol, Sequence


class TokenSource(Protocol):
    """What the decoder needs from a tokenizer's output."""

    def __len__(self) -> int: ...

    def decode_range(self, start: int, end: int, drop_special: bool = True) -> str: ...


@dataclass(slots=True, frozen=True)
class EncodedTokens:
    """
    One utterance as the model saw it.

    Each encoded token points back at the source word it came from through
    `word_ids`; special tokens ([CLS], [SEP], padding) point at None.
    Sub-word pieces of one word share a word id, so decoding a token range
    yields whole source words rather than word pieces.
    """

    words: tuple[str, ...]
    ids: tuple[int, ...]
    word_ids: tuple[Optional[int], ...]
    tokens: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if len(self.word_ids) != len(self.ids):
            raise ValueError("EncodedTokens requires one word id per token id")
        if self.tokens and len(self.tokens) != len(self.ids):
            raise ValueError("EncodedTokens token strings must match token ids")
        for word_id in self.word_ids:
            if word_id is not None and not 0 <= word_id < len(self.words):
                raise ValueError(f"word id {word_id} outside 0..{len(self.words)}")

    def __len__(self) -> int:
        return len(self.ids)

    @classmethod
    def from_words(cls, words: Sequence[str]) -> "EncodedTokens":
        """One token per whitespace-separated word; ids are word positions."""
        words = tuple(words)
        positions = tuple(range(len(words)))
        return cls(words=words, ids=positions, word_ids=positions, tokens=words)

    @classmethod
    def from_word_ids(
        cls,
        words: Sequence[str],
        ids: Sequence[int],
        word_ids: Sequence[Optional[int]],
        tokens: Sequence[str] = (),
    ) -> "EncodedTokens":
        """Adapt a fast tokenizer encoding (`enc.word_ids()`) of pre-split words."""
        return cls(
            words=tuple(words),
            ids=tuple(int(i) for i in ids),
            word_ids=tuple(word_ids),
            tokens=tuple(tokens),
        )

    def decode_range(self, start: int, end: int, drop_special: bool = True) -> str:
        """
        Reconstruct the source text covered by tokens [start, end).

        Raises:
            IndexError: if the range falls outside the encoded tokens
        """
        if not 0 <= start <= end <= len(self.ids):
            raise IndexError(f"token range [{start}, {end}) outside 0..{len(self.ids)}")

        pieces: list[str] = []
        last_word = None
        for i in range(start, end):
            word_id = self.word_ids[i]
            if word_id is None:
                if not drop_special and self.tokens:
                    pieces.append(self.tokens[i])
                last_word = None
                continue
            if word_id != last_word:
                pieces.append(self.words[word_id])
                last_word = word_id
        return " ".join(pieces)
