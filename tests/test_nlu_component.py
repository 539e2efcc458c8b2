import asyncio
import pytest

from conftest import intent_scores, one_hot
from talkbox.core.bus import Bus
from talkbox.core.contracts import NLUInference
from talkbox.core.nlu.decoder import ResultDecoder
from talkbox.core.nlu.nlu import NLU, encode_event

pytestmark = pytest.mark.asyncio


async def _run(metadata, payload):
    bus = Bus()
    nlu = NLU(bus, ResultDecoder(metadata))
    await nlu.start()

    captures = []

    async def capture(payload):
        captures.append(payload)

    bus.subscribe("nlu.intent", capture)
    bus.subscribe("nlu.error", capture)
    await bus.publish("nlu.inference", payload)
    await asyncio.sleep(0.01)
    return captures


async def test_inference_to_intent(metadata):
    event = NLUInference(
        intent_posteriors=intent_scores("weather.get", metadata),
        tag_posteriors=one_hot(["o", "o", "b_location"]),
        words=["weather", "in", "paris"],
        utterance="weather in paris",
    )
    captures = await _run(metadata, event.dict())

    assert len(captures) == 1
    got = captures[0]
    assert got["topic"] == "nlu.intent"
    assert got["intent"] == "weather.get"
    assert got["corr_id"] == event.corr_id
    assert got["slots"]["location"] == {"raw": "paris", "value": "paris"}
    assert got["slots"]["unit"]["value"] == "celsius"


async def test_decode_failure_publishes_error(metadata):
    event = NLUInference(
        intent_posteriors=intent_scores("weather.get", metadata),
        tag_posteriors=one_hot(["o", "b_unit"]),
        words=["in", "kelvin"],
        utterance="in kelvin",
    )
    captures = await _run(metadata, event.dict())

    assert len(captures) == 1
    got = captures[0]
    assert got["topic"] == "nlu.error"
    assert got["stage"] == "slots"
    assert got["slot"] == "unit"
    assert got["corr_id"] == event.corr_id


async def test_malformed_event_is_skipped(metadata):
    captures = await _run(metadata, {"topic": "nlu.inference", "intent_posteriors": []})
    assert captures == []


async def test_stop_unsubscribes(metadata):
    bus = Bus()
    nlu = NLU(bus, ResultDecoder(metadata))
    await nlu.start()
    assert bus.subscribers("nlu.inference") == 1
    await nlu.stop()
    assert bus.subscribers("nlu.inference") == 0


async def test_encode_event_with_word_ids():
    event = NLUInference(
        intent_posteriors=[1.0],
        words=["playlist"],
        word_ids=[None, 0, 0, None],
        token_ids=[101, 2377, 9863, 102],
    )
    encoded = encode_event(event)
    assert len(encoded) == 4
    assert encoded.decode_range(0, 4) == "playlist"


async def test_start_components(metadata):
    from talkbox.app import start_components

    bus = Bus()
    nlu = await start_components(bus, ResultDecoder(metadata))
    assert isinstance(nlu, NLU)
    assert bus.subscribers("nlu.inference") == 1


async def test_word_id_outside_words_is_skipped(metadata):
    payload = {
        "topic": "nlu.inference",
        "intent_posteriors": intent_scores("weather.get", metadata),
        "tag_posteriors": one_hot(["b_location"]),
        "words": ["paris"],
        "word_ids": [3],
        "utterance": "paris",
    }
    captures = await _run(metadata, payload)
    assert captures == []
