import numpy as np
import pytest

from talkbox.core.nlu.errors import BufferUnderflow
from talkbox.core.nlu.posterior import PosteriorReader


def test_argmax_returns_index_and_score():
    reader = PosteriorReader([0.1, 0.7, 0.2])
    index, score = reader.argmax(3)
    assert index == 1
    assert score == pytest.approx(0.7)


def test_tie_goes_to_lowest_index():
    reader = PosteriorReader([0.5, 0.5, 0.3])
    assert reader.argmax(3) == (0, 0.5)


def test_cursor_advances_per_window():
    reader = PosteriorReader([0.9, 0.1, 0.2, 0.8])
    assert reader.argmax(2)[0] == 0
    assert reader.position == 2
    assert reader.argmax(2)[0] == 1
    assert reader.remaining == 0


def test_underflow_reports_sizes():
    reader = PosteriorReader([0.2, 0.8])
    with pytest.raises(BufferUnderflow) as exc:
        reader.argmax(3)
    assert exc.value.requested == 3
    assert exc.value.remaining == 2
    # a failed read consumes nothing
    assert reader.position == 0


def test_underflow_after_partial_reads():
    reader = PosteriorReader([0.2, 0.8, 0.4])
    reader.argmax(2)
    with pytest.raises(BufferUnderflow):
        reader.argmax(2)


def test_window_must_be_positive():
    with pytest.raises(ValueError):
        PosteriorReader([1.0]).argmax(0)


def test_accepts_numpy_arrays():
    scores = np.array([[0.1, 0.9], [0.6, 0.4]], dtype=np.float32)
    reader = PosteriorReader(scores)
    assert reader.argmax(2)[0] == 1
    assert reader.argmax(2)[0] == 0


@pytest.mark.parametrize("byteorder,dtype", [("little", "<f4"), ("big", ">f4")])
def test_from_bytes(byteorder, dtype):
    data = np.array([0.25, 0.75, 0.5], dtype=dtype).tobytes()
    reader = PosteriorReader.from_bytes(data, byteorder=byteorder)
    assert reader.argmax(3) == (1, 0.75)


def test_from_bytes_rejects_partial_floats():
    with pytest.raises(ValueError):
        PosteriorReader.from_bytes(b"\x00\x00\x80")


def test_float64_scores_keep_precision():
    reader = PosteriorReader([0.30000001, 0.30000002])
    assert reader.argmax(2)[0] == 1


def test_confidence_is_the_raw_score():
    assert PosteriorReader([0.1, 0.8, 0.1]).argmax(3) == (1, 0.8)


def test_integer_scores_are_read_as_floats():
    assert PosteriorReader([0, 3, 1]).argmax(3) == (1, 3.0)


def test_nan_scores_never_win():
    reader = PosteriorReader([0.2, float("nan"), 0.7, float("nan")])
    assert reader.argmax(4) == (2, 0.7)


def test_leading_nan_wins():
    index, score = PosteriorReader([float("nan"), 0.9]).argmax(2)
    assert index == 0
    assert np.isnan(score)
