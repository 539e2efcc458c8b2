import logging

import pytest

from conftest import one_hot
from talkbox.core.nlu.errors import BufferUnderflow
from talkbox.core.nlu.posterior import PosteriorReader
from talkbox.core.nlu.tagging import decode_labels, decode_spans, slot_name


def test_decode_labels_maps_argmax_to_tags(metadata):
    labels = ["o", "b_date", "i_date"]
    reader = PosteriorReader(one_hot(labels))
    assert decode_labels(reader, 3, metadata) == tuple(labels)
    assert reader.remaining == 0


def test_decode_labels_underflow(metadata):
    reader = PosteriorReader(one_hot(["o", "b_date"]))
    with pytest.raises(BufferUnderflow):
        decode_labels(reader, 3, metadata)


def test_decode_labels_logs_sequence(metadata, caplog):
    with caplog.at_level(logging.DEBUG, logger="nlu.decoder"):
        decode_labels(PosteriorReader(one_hot(["b_unit"])), 1, metadata)
    assert "b_unit" in caplog.text


def test_decode_labels_zero_tokens(metadata):
    assert decode_labels(PosteriorReader([]), 0, metadata) == ()


def test_slot_name_strips_prefix():
    assert slot_name("b_date") == "date"
    assert slot_name("i_location") == "location"


def test_spans_for_two_slots():
    labels = ("b_date", "i_date", "o", "b_date", "i_date")
    assert decode_spans(labels) == {0: 2, 3: 5}


def test_single_token_span():
    assert decode_spans(("o", "b_unit", "o")) == {1: 2}


def test_dangling_continuation_is_dropped():
    assert decode_spans(("o", "i_date", "o")) == {}


def test_continuation_after_outside_is_dropped():
    assert decode_spans(("b_date", "o", "i_date")) == {0: 1}


def test_adjacent_starts_open_new_spans():
    assert decode_spans(("b_date", "b_date", "i_date")) == {0: 1, 1: 3}


def test_continuation_of_other_type_extends_open_span():
    # the span keeps its opening label; the i_unit token is absorbed
    assert decode_spans(("b_date", "i_unit", "i_date")) == {0: 3}


def test_all_outside():
    assert decode_spans(tuple(["o"] * 4)) == {}
