"""Sequential reader over a flat buffer of model posteriors."""

from typing import Literal, Sequence, Union

import numpy as np

from .errors import BufferUnderflow

Posteriors = Union[Sequence[float], np.ndarray]


class PosteriorReader:
    """
    Forward-only cursor over one posterior buffer.

    A reader belongs to a single decode call: every `argmax` consumes its
    window, and the cursor is never rewound.
    """

    __slots__ = ("_scores", "_pos")

    def __init__(self, scores: Posteriors):
        scores = np.asarray(scores)
        if not np.issubdtype(scores.dtype, np.floating):
            scores = scores.astype(np.float64)
        self._scores = scores.ravel()
        self._pos = 0

    @classmethod
    def from_bytes(cls, data: bytes, byteorder: Literal["little", "big"] = "little") -> "PosteriorReader":
        """Wrap raw float32 output as written by an inference engine."""
        dtype = np.dtype("<f4") if byteorder == "little" else np.dtype(">f4")
        if len(data) % dtype.itemsize:
            raise ValueError(f"posterior bytes not a multiple of {dtype.itemsize}: {len(data)}")
        return cls(np.frombuffer(data, dtype=dtype))

    @property
    def position(self) -> int:
        return self._pos

    @property
    def remaining(self) -> int:
        return len(self._scores) - self._pos

    def argmax(self, n: int) -> tuple[int, float]:
        """
        Consume the next `n` scores and return (index, score) of the largest.

        Ties go to the lowest index. NaN scores never win, except a NaN in
        the first slot, which nothing compares greater than.

        Raises:
            BufferUnderflow: if fewer than `n` scores remain
        """
        if n < 1:
            raise ValueError(f"window size must be positive, got {n}")
        if self.remaining < n:
            raise BufferUnderflow(n, self.remaining)

        window = self._scores[self._pos:self._pos + n]
        self._pos += n
        if np.isnan(window[0]):
            index = 0
        else:
            # first occurrence of the maximum, skipping NaN
            index = int(np.nanargmax(window))
        return index, float(window[index])
