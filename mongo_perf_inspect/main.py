from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from bson import json_util

from mongo_perf_inspect.config import get_settings, resolve_config
from mongo_perf_inspect.domain.synthesizer import DocumentSynthesizer
from mongo_perf_inspect.errors import ConfigurationError, LoadGeneratorError
from mongo_perf_inspect.orchestrator import run_load
from mongo_perf_inspect.reporter import print_results
from mongo_perf_inspect.utils.logging import configure_logging, get_logger

app = typer.Typer(help="MongoDB performance inspector: synthetic insert load generator.")

log = get_logger(__name__)

EXIT_LOAD_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def _resolve_or_exit(**overrides):
    try:
        return resolve_config(get_settings(), **overrides)
    except ConfigurationError as exc:
        typer.echo(f"Configuration error: {exc}", err=True)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    config = _resolve_or_exit()
    typer.echo(
        f"URI={config.mongodb_uri} | namespace={config.namespace} | "
        f"workers={config.workers} duration={config.duration_seconds}s "
        f"fields={config.shape.field_count} depth={config.shape.nesting_depth} "
        f"binary={config.shape.binary_blob_size} worker_id_start={config.worker_id_start}"
    )


@app.command()
def sample(
    num_fields: Optional[int] = typer.Option(
        None, "--num-fields", help="Number of top level fields."
    ),
    binary: Optional[int] = typer.Option(
        None, "--binary", help="Non-zero adds a binary blob field."
    ),
    worker_id: str = typer.Option(
        "worker-0", "--worker-id", help="Identity to embed; pass an empty string to omit it."
    ),
    seed: Optional[int] = typer.Option(
        None, "--seed", help="Seed for reproducible field content."
    ),
) -> None:
    """
    Print a sample document for the configured shape, then quit.
    """
    config = _resolve_or_exit(num_fields=num_fields, binary=binary)
    document = DocumentSynthesizer(seed=seed).synthesize(config.shape, worker_id or None)
    typer.echo(json_util.dumps(document, indent=2))


@app.command()
def run(
    uri: Optional[str] = typer.Option(None, "--uri", help="MongoDB connection URI."),
    namespace: Optional[str] = typer.Option(
        None, "--namespace", "-n", help="Target namespace, e.g. myDatabase.myCollection."
    ),
    workers: Optional[int] = typer.Option(None, "--workers", "-w", help="Number of workers."),
    duration: Optional[int] = typer.Option(
        None, "--duration", "-d", help="Test duration in seconds."
    ),
    num_fields: Optional[int] = typer.Option(
        None, "--num-fields", help="Number of top level fields in test documents."
    ),
    depth: Optional[int] = typer.Option(
        None, "--depth", help="Document depth (accepted, not applied)."
    ),
    binary: Optional[int] = typer.Option(
        None, "--binary", help="Non-zero adds a fixed-size binary blob field."
    ),
    worker_id_start: Optional[int] = typer.Option(
        None, "--worker-id-start", help="Index of the first worker identity."
    ),
    no_embed_worker_id: bool = typer.Option(
        False, "--no-embed-worker-id", help="Do not write the worker identity into documents."
    ),
    empty: bool = typer.Option(
        False, "--empty", help="Remove data from the collection on startup."
    ),
    persist: bool = typer.Option(False, "--persist", help="Write results JSON to --results-dir."),
    results_dir: Path = typer.Option(Path("results"), "--results-dir", help="Results directory."),
    as_json: bool = typer.Option(False, "--json", help="Print the result payload as JSON."),
) -> None:
    """
    Run an insert load for the configured duration and report throughput.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)
    config = _resolve_or_exit(
        mongodb_uri=uri,
        namespace=namespace,
        workers=workers,
        duration_seconds=duration,
        num_fields=num_fields,
        depth=depth,
        binary=binary,
        worker_id_start=worker_id_start,
        embed_worker_id=False if no_embed_worker_id else None,
        empty_collection=True if empty else None,
    )

    typer.echo(
        f"Running insert load on '{config.namespace}' for {config.duration_seconds}s "
        f"(workers={config.workers}, fields={config.shape.field_count})."
    )
    try:
        result = run_load(config, results_dir=results_dir, persist=persist)
    except LoadGeneratorError as exc:
        log.error(f"[LOAD FAILED] {exc}", extra={"error_type": type(exc).__name__})
        typer.echo(f"Load aborted: {exc}", err=True)
        raise typer.Exit(code=EXIT_LOAD_ERROR) from exc
    except KeyboardInterrupt as exc:
        typer.echo("Cancelled by user.", err=True)
        raise typer.Exit(code=EXIT_INTERRUPTED) from exc

    if as_json:
        typer.echo(json.dumps(result, indent=2))
    else:
        print_results(result)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(EXIT_INTERRUPTED)


if __name__ == "__main__":
    main()
