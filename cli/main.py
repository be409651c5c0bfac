"""CLI entry point — Typer app for filing-rag commands.

Usage:
    python -m cli.main section AAPL 10-K 2024-11-01
    python -m cli.main embed AAPL 10-K 2024-11-01 --max-chunks 20
    python -m cli.main embed AAPL 10-K 2024-11-01 --all --section "Risk Factors"
    python -m cli.main query AAPL 10-K 2024-11-01 "What are the supply chain risks?"
    python -m cli.main status
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer
from rich.console import Console
from rich.table import Table

from filing_rag.errors import FilingRAGError

if TYPE_CHECKING:
    from filing_rag.storage.paths import FilingKey

app = typer.Typer(
    name="filing-rag",
    help="SEC filing RAG — section, embed, query.",
    no_args_is_help=True,
)

console = Console()

_TICKER = typer.Argument(..., help="Company ticker, e.g. AAPL")
_FORM = typer.Argument(..., help="Form type, e.g. 10-K")
_FILED = typer.Argument(..., help="Filing date, e.g. 2024-11-01")


def _fail(exc: FilingRAGError) -> NoReturn:
    console.print(f"[bold red]Error ({exc.status_code}):[/] {exc.message}")
    raise typer.Exit(code=1)


def _key(ticker: str, form: str, filed: str) -> FilingKey:
    from filing_rag.storage.paths import FilingKey

    try:
        return FilingKey(ticker, form, filed)
    except FilingRAGError as exc:
        _fail(exc)


@app.command()
def section(
    ticker: str = _TICKER,
    form: str = _FORM,
    filed: str = _FILED,
) -> None:
    """Detect sections in text.txt and write sections.json + chunks.jsonl."""
    from filing_rag.chunking.window_chunker import WindowChunker
    from filing_rag.config import load_settings
    from filing_rag.pipeline.sectioning import SectioningPipeline
    from filing_rag.storage.paths import FilingStorage

    settings = load_settings()
    chunker = WindowChunker(
        chunk_size=settings.chunking.chunk_size,
        overlap=settings.chunking.overlap,
        min_chars=settings.chunking.min_chars,
    )
    pipeline = SectioningPipeline(FilingStorage(settings.storage.data_root), chunker)

    try:
        result = pipeline.run(_key(ticker, form, filed))
    except FilingRAGError as exc:
        _fail(exc)

    console.print(f"\n[bold green]Sectioned:[/] {result.key}")
    console.print(f"  Sections: {result.sections}")
    console.print(f"  Chunks: {result.chunks}")
    if result.warning:
        console.print(f"  [yellow]Warning:[/] {result.warning}")


@app.command()
def sections(
    ticker: str = _TICKER,
    form: str = _FORM,
    filed: str = _FILED,
) -> None:
    """List the stored sections of a filing."""
    from filing_rag.config import load_settings
    from filing_rag.pipeline.artifacts import load_sections
    from filing_rag.storage.paths import FilingStorage

    settings = load_settings()
    key = _key(ticker, form, filed)
    try:
        summaries = load_sections(FilingStorage(settings.storage.data_root), key)
    except FilingRAGError as exc:
        _fail(exc)

    table = Table(title=f"Sections — {key}")
    table.add_column("Name", style="cyan")
    table.add_column("Lines")
    table.add_column("Chars", justify="right")
    table.add_column("Chunks", justify="right")

    for s in summaries:
        table.add_row(
            s.section.name,
            f"{s.section.start_line}-{s.section.end_line}",
            str(s.section.char_count),
            str(s.chunks),
        )

    console.print(table)


@app.command()
def embed(
    ticker: str = _TICKER,
    form: str = _FORM,
    filed: str = _FILED,
    section_filter: str | None = typer.Option(
        None, "--section", "-s", help="Only chunks whose section contains this text",
    ),
    max_chunks: int | None = typer.Option(
        None, "--max-chunks", "-m", help="Chunks embedded per call",
    ),
    batch: int | None = typer.Option(
        None, "--batch", "-b", help="Chunks per embedding-function call",
    ),
    resume: bool | None = typer.Option(
        None, "--resume/--no-resume", help="Skip chunks already embedded",
    ),
    embed_all: bool = typer.Option(
        False, "--all", help="Repeat calls until every chunk is embedded",
    ),
) -> None:
    """Embed the next slice of a filing's chunks into embeddings.json."""
    from filing_rag.config import load_settings
    from filing_rag.embeddings.factory import provider_from_settings
    from filing_rag.pipeline.embedding_job import EmbeddingJob
    from filing_rag.pipeline.schemas import EmbedOptions
    from filing_rag.storage.paths import FilingStorage

    settings = load_settings()
    key = _key(ticker, form, filed)

    try:
        options = EmbedOptions(
            section=section_filter or None,
            resume=settings.embed_job.resume if resume is None else resume,
            max_chunks=settings.embed_job.max_chunks if max_chunks is None else max_chunks,
            batch_size=settings.embed_job.batch_size if batch is None else batch,
            pause_seconds=settings.embed_job.pause_seconds,
        )
        job = EmbeddingJob(
            embedding_provider=provider_from_settings(settings.embedding),
            storage=FilingStorage(settings.storage.data_root),
        )
        if embed_all:
            results = job.embed_all(key, options)
        else:
            results = [job.embed_batch(key, options)]
    except FilingRAGError as exc:
        _fail(exc)

    for result in results:
        if result.done:
            console.print(f"[dim]{result.message}[/]")
        else:
            console.print(
                f"[bold green]Embedded:[/] {result.embedded} chunks from offset "
                f"{result.start} (store total: {result.total})",
            )


@app.command()
def query(
    ticker: str = _TICKER,
    form: str = _FORM,
    filed: str = _FILED,
    question: str = typer.Argument(..., help="Question to search for"),
    top_k: int | None = typer.Option(
        None, "--top-k", "-k", help="Number of chunks to return",
    ),
) -> None:
    """Rank a filing's embedded chunks by similarity to a question."""
    from filing_rag.config import load_settings
    from filing_rag.embeddings.factory import provider_from_settings
    from filing_rag.retrieval.retriever import Retriever
    from filing_rag.storage.paths import FilingStorage

    settings = load_settings()
    key = _key(ticker, form, filed)

    try:
        retriever = Retriever(
            embedding_provider=provider_from_settings(settings.embedding),
            storage=FilingStorage(settings.storage.data_root),
        )
        k = settings.retrieval.top_k if top_k is None else top_k
        results = retriever.search(key, question, top_k=k)
    except FilingRAGError as exc:
        _fail(exc)

    console.print(f"\n[bold]Q:[/] {question}\n")
    for rank, r in enumerate(results, start=1):
        console.print(
            f"[bold cyan]{rank}.[/] [green]{r.score:.4f}[/] "
            f"[dim]{r.metadata.section} (record {r.index})[/]",
        )
        console.print(f"   {r.text[:300]}\n")


@app.command()
def status() -> None:
    """Show providers, configuration, and per-filing artifact state."""
    from filing_rag import __version__
    from filing_rag.config import load_settings
    from filing_rag.embeddings.factory import available_providers
    from filing_rag.pipeline.artifacts import load_chunks, load_sections
    from filing_rag.storage.paths import FilingStorage
    from filing_rag.store.embedding_store import EmbeddingStore

    settings = load_settings()
    storage = FilingStorage(settings.storage.data_root)

    console.print(f"\n[bold green]sec-filing-rag[/] v{__version__}\n")

    config = Table(title="Configuration")
    config.add_column("Setting", style="cyan")
    config.add_column("Value")
    config.add_row("Data root", str(storage.data_root))
    config.add_row("Embedding provider", settings.embedding.provider)
    config.add_row("Embedding model", settings.embedding.model)
    config.add_row("Available providers", ", ".join(available_providers()))
    config.add_row(
        "Chunking",
        f"size={settings.chunking.chunk_size} overlap={settings.chunking.overlap}",
    )
    console.print(config)

    filings = Table(title="Filings")
    filings.add_column("Filing", style="cyan")
    filings.add_column("Text", justify="center")
    filings.add_column("Sections", justify="right")
    filings.add_column("Chunks", justify="right")
    filings.add_column("Embedded", justify="right")

    def count(load) -> str:
        try:
            return str(load())
        except FilingRAGError as exc:
            return "-" if exc.status_code == 404 else "[red]error[/]"

    for key in storage.list_filings():
        store = EmbeddingStore(storage, key)
        filings.add_row(
            str(key),
            "✓" if storage.text_path(key).is_file() else "-",
            count(lambda: len(load_sections(storage, key))),
            count(lambda: len(load_chunks(storage, key))),
            count(store.count) if store.exists() else "-",
        )

    console.print(filings)


if __name__ == "__main__":
    app()
