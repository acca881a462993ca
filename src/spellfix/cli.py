from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer
from pygls.workspace import TextDocument

from spellfix.dictionary import SpellOracle
from spellfix.document_settings import DocumentSettings
from spellfix.settings_cache import SettingsCache, SettingsOracle
from spellfix.suggestions import SuggestionGenerator

app = typer.Typer(add_completion=False)

_LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


async def run_suggest(
    word: str,
    *,
    oracle: SettingsOracle,
    config: Path | None = None,
    language_id: str = "plaintext",
) -> list[str]:
    """Suggest replacements for `word` as if it were an untitled document."""
    document = TextDocument(
        "untitled:spellfix-cli",
        source=word,
        version=0,
        language_id=language_id,
    )
    document_settings = DocumentSettings(config_path=config)
    cache = SettingsCache(
        document_settings.get_settings,
        document_settings.settings_version,
        oracle,
    )
    return await SuggestionGenerator(cache.resolve).gen_word_suggestions(document, word)


@app.command()
def serve(
    log_level: str = typer.Option("WARNING", "--log-level"),
) -> None:
    """Run the spellfix language server over stdio."""
    logging.basicConfig(level=log_level.upper(), format=_LOG_FORMAT)
    from spellfix import server

    server.start()


@app.command()
def suggest(
    word: str = typer.Argument(...),
    config: Optional[Path] = typer.Option(None, "--config"),
    language_id: str = typer.Option("plaintext", "--language-id"),
    as_json: bool = typer.Option(False, "--json/--no-json"),
) -> None:
    """Print case-adjusted suggestions for a single word."""
    suggestions = asyncio.run(
        run_suggest(word, oracle=SpellOracle(), config=config, language_id=language_id)
    )
    if as_json:
        typer.echo(json.dumps(suggestions))
        return
    if not suggestions:
        typer.echo(f"No suggestions for {word!r}.")
        raise typer.Exit(code=1)
    for suggestion in suggestions:
        typer.echo(suggestion)


def main() -> None:  # pragma: no cover
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
