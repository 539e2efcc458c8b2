import pytest
from talkbox.core.nlu.metadata import Metadata

TAGS = [
    "o",
    "b_date", "i_date",
    "b_unit", "i_unit",
    "b_duration", "i_duration",
    "b_location", "i_location",
]

METADATA = {
    "intents": [
        {"name": "greet"},
        {
            "name": "weather.get",
            "slots": [
                {"name": "date", "type": "entity"},
                {"name": "location", "type": "entity"},
                {
                    "name": "unit",
                    "type": "selset",
                    "value": "celsius",
                    "facets": '{"selections": [{"name": "celsius", "aliases": ["c", "centigrade"]},'
                              ' {"name": "fahrenheit", "aliases": ["f"]}]}',
                },
            ],
        },
        {
            "name": "timer.set",
            "slots": [{"name": "duration", "type": "duration"}],
        },
    ],
    "tags": TAGS,
}


def one_hot(labels, tags=TAGS, score=0.9):
    """Token-major tag posteriors that put `score` on each label."""
    rest = (1.0 - score) / (len(tags) - 1)
    out = []
    for label in labels:
        out.extend(score if tag == label else rest for tag in tags)
    return out


def intent_scores(name, metadata, score=0.8):
    names = [i.name for i in metadata.intents]
    rest = (1.0 - score) / (len(names) - 1)
    return [score if n == name else rest for n in names]


@pytest.fixture
def raw_metadata():
    return METADATA


@pytest.fixture
def metadata():
    return Metadata.from_dict(METADATA)
