from .metadata import IntentSpec, Metadata
from .posterior import PosteriorReader


def classify_intent(reader: PosteriorReader, metadata: Metadata) -> tuple[IntentSpec, float]:
    """
    Pick the top intent from the intent posteriors.

    The confidence is the raw model score; posteriors are expected to be
    normalized already.
    """
    index, score = reader.argmax(metadata.num_intents)
    return metadata.intents[index], score
