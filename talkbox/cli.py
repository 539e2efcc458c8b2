import base64
import json
from pathlib import Path
from typing import Optional

import typer

from talkbox.core.config import Config
from talkbox.core.contracts import NLUInference
from talkbox.core.nlu.errors import MetadataError, NLUError
from talkbox.core.nlu.nlu import encode_event
from talkbox.core.nlu.posterior import PosteriorReader

app = typer.Typer(help="talkbox NLU CLI")


def _posteriors(value):
    if isinstance(value, str):
        return PosteriorReader.from_bytes(base64.b64decode(value), Config.NLU_BYTE_ORDER)
    return value


@app.callback()
def main():
    Config.configure_logging()


@app.command("config")
def show_config():
    """Print the current configuration."""
    Config.print_config()


@app.command("nlu:inspect")
def nlu_inspect(metadata: Optional[Path] = typer.Option(None, "--metadata", "-m")):
    """List the intents, slots and tags declared in model metadata."""
    meta = Config.load_metadata(str(metadata) if metadata else None)
    for intent in meta.intents:
        typer.echo(intent.name)
        for slot in intent.slots:
            implicit = f" = {slot.value!r}" if slot.is_implicit else ""
            typer.echo(f"  {slot.name}: {slot.type}{implicit}")
    typer.echo(f"tags: {' '.join(meta.tags)}")


@app.command("nlu:decode")
def nlu_decode(
    inference: Path,
    metadata: Optional[Path] = typer.Option(None, "--metadata", "-m"),
):
    """
    Decode a JSON file of model posteriors and print the NLU result.

    The file holds `intent_posteriors`, `tag_posteriors` and `utterance`
    (plus optional `words`, `word_ids` and `token_ids`). Posteriors may be
    lists of floats or base64-encoded float32 bytes in NLU_BYTE_ORDER.
    """
    from talkbox.app import build_decoder

    try:
        decoder = build_decoder(str(metadata) if metadata else None)
    except (FileNotFoundError, RuntimeError, MetadataError) as e:
        typer.echo(f"could not load metadata: {e}", err=True)
        raise typer.Exit(code=2)

    with open(inference, "r", encoding="utf-8") as f:
        raw = json.load(f)
    raw.setdefault("words", raw.get("utterance", "").split())

    try:
        event = NLUInference(**raw)
        encoded = encode_event(event)
    except (TypeError, ValueError) as e:
        typer.echo(f"invalid inference file: {e}", err=True)
        raise typer.Exit(code=2)

    try:
        result = decoder.decode(
            _posteriors(event.intent_posteriors),
            _posteriors(event.tag_posteriors),
            encoded,
            utterance=event.utterance,
        )
    except NLUError as e:
        typer.echo(f"could not understand request ({e.stage}): {e}", err=True)
        raise typer.Exit(code=1)

    typer.echo(json.dumps(result.to_dict(), indent=2, default=str))


if __name__ == "__main__":
    app()
