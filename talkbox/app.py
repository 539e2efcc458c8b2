import logging
from typing import Optional
from talkbox.core.bus import Bus
from talkbox.core.config import Config
from talkbox.core.nlu.decoder import ResultDecoder
from talkbox.core.nlu.nlu import NLU


def build_decoder(metadata_path: Optional[str] = None) -> ResultDecoder:
    """Create a ResultDecoder from configured metadata and slot parsers."""
    metadata = Config.load_metadata(metadata_path)
    return ResultDecoder(metadata, Config.get_slot_parsers())


async def start_components(bus: Bus, decoder: Optional[ResultDecoder] = None) -> NLU:
    """Subscribe the NLU component to the bus."""
    if decoder is None:
        decoder = build_decoder()
    nlu = NLU(bus, decoder)
    await nlu.start()
    logging.getLogger("app").info("NLU ready (%d intents, %d tags)",
                                  decoder.metadata.num_intents, decoder.metadata.num_tags)
    return nlu
