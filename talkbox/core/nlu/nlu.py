import logging
from .decoder import ResultDecoder
from .encoding import EncodedTokens
from .errors import NLUError
from ..contracts import NLUInference, NLUIntent, NLUFailed, same_trace


def encode_event(event: NLUInference) -> EncodedTokens:
    """Rebuild the utterance's token alignment from an inference event."""
    if event.word_ids is None:
        return EncodedTokens.from_words(event.words)
    token_ids = event.token_ids if event.token_ids is not None else range(len(event.word_ids))
    return EncodedTokens.from_word_ids(event.words, token_ids, event.word_ids)


class NLU:
    """
    Listens on 'nlu.inference' and emits 'nlu.intent' or 'nlu.error'.
    Uses a ResultDecoder to turn model posteriors into intents and slots.
    """

    def __init__(self, bus, decoder: ResultDecoder):
        self.bus = bus
        self.decoder = decoder
        self.log = logging.getLogger("nlu")

    async def start(self):
        self.bus.subscribe("nlu.inference", self._on_inference)

    async def stop(self):
        self.bus.unsubscribe("nlu.inference", self._on_inference)

    async def _on_inference(self, payload: dict):
        try:
            event = NLUInference(**payload)
            encoded = encode_event(event)
        except (TypeError, ValueError):
            self.log.warning("NLU: Malformed nlu.inference event, skipping")
            return

        self.log.info("NLU: Decoding %d tokens for '%s'", len(encoded), event.utterance)
        try:
            result = await self.decoder.decode_async(
                event.intent_posteriors,
                event.tag_posteriors,
                encoded,
                utterance=event.utterance,
            )
        except NLUError as e:
            self.log.warning("NLU: Decode failed at %s stage: %s", e.stage, e)
            failed = NLUFailed(
                stage=e.stage,
                intent=e.intent,
                slot=e.slot,
                message=str(e),
                utterance=event.utterance,
            )
            same_trace(event, failed)
            await self.bus.publish(failed.topic, failed.dict())
            return

        nlu_event = NLUIntent(**result.to_dict())
        same_trace(event, nlu_event)
        self.log.info("NLU: Intent detected: %s (confidence: %.2f)", result.intent, result.confidence)
        await self.bus.publish(nlu_event.topic, nlu_event.dict())
