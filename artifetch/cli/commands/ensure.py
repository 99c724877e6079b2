import importlib.metadata
import re
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from artifetch.adapters.buildomat import BuildomatStoreClient
from artifetch.adapters.pin_registry import PinRegistry
from artifetch.adapters.storage_fs import FileSystemArtifactFetcher
from artifetch.internal import paths
from artifetch.internal.config import FetchSettings
from artifetch.internal.constants import (
    DEFAULT_SERIES,
    EXIT_CHECKSUM,
    EXIT_FAILURE,
    EXIT_IO,
    EXIT_NETWORK,
    EXIT_NOT_FOUND,
    EXIT_OK,
    EXIT_USAGE,
)
from artifetch.internal.logging import get_logger, setup_logging
from artifetch.kernel.artifacts import ArtifactSpec
from artifetch.kernel.errors import (
    ArtifactIOError,
    ChecksumMismatchError,
    FetchError,
    InvalidPinError,
    NetworkError,
    NotFoundError,
)

logger = get_logger(__name__)

_EXIT_CODES = [
    (NotFoundError, EXIT_NOT_FOUND),
    (NetworkError, EXIT_NETWORK),
    (ArtifactIOError, EXIT_IO),
    (ChecksumMismatchError, EXIT_CHECKSUM),
]

_SHA256 = re.compile(r"[0-9a-fA-F]{64}")


def exit_code_for(error: FetchError) -> int:
    for error_type, code in _EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return EXIT_FAILURE


def _load_registry() -> PinRegistry:
    return PinRegistry(paths.get_pin_registry_path())


# ---------------------------------------------------------------------
# Eager options
# ---------------------------------------------------------------------

def _show_version(value: bool):
    if not value:
        return
    try:
        typer.echo(f"artifetch version: {importlib.metadata.version('artifetch')}")
    except importlib.metadata.PackageNotFoundError:
        typer.echo("artifetch is not installed or version metadata not found.", err=True)
        raise typer.Exit(EXIT_FAILURE)
    raise typer.Exit(EXIT_OK)


def _list_pins(value: bool):
    if not value:
        return

    table = Table(title="Pinned Artifacts")
    table.add_column("Name", style="cyan", no_wrap=True)
    table.add_column("Repo")
    table.add_column("Series")
    table.add_column("Commit", style="green")
    table.add_column("Exec", justify="center")

    for pinned in _load_registry().list():
        table.add_row(
            pinned.spec.name,
            pinned.spec.repo,
            pinned.spec.series,
            pinned.spec.commit,
            "yes" if pinned.executable else "no",
        )

    Console().print(table)
    raise typer.Exit(EXIT_OK)


def _fail(message: str, code: int):
    typer.echo(f"{typer.style('error:', fg=typer.colors.RED, bold=True)} {message}", err=True)
    raise typer.Exit(code)


# ---------------------------------------------------------------------
# Command
# ---------------------------------------------------------------------

def ensure(
    name: str = typer.Argument(..., help="Artifact name, e.g. 'npuzone'."),
    repo: Optional[str] = typer.Argument(None, help="Repository that produced the artifact."),
    commit: Optional[str] = typer.Argument(None, help="Pinned commit hash of the CI run."),
    output_dir: Optional[Path] = typer.Option(
        None, "-O", "--output-dir", help="Destination directory [default: out/<name>]."
    ),
    series: Optional[str] = typer.Option(None, "-s", "--series", help="Job output series [default: image]."),
    sha256: Optional[str] = typer.Option(None, "--sha256", help="Expected SHA-256 of the artifact."),
    force: bool = typer.Option(False, "-f", "--force", help="Download even if already present."),
    executable: Optional[bool] = typer.Option(
        None, "--executable/--no-executable", help="Set the execute bit [default: on]."
    ),
    store_url: Optional[str] = typer.Option(None, "--store-url", help="Base URL of the artifact store."),
    verbose: bool = typer.Option(False, "-v", "--verbose", help="Log progress to stderr."),
    list_pins: bool = typer.Option(
        False, "--list-pins", callback=_list_pins, is_eager=True, help="Show known pins and exit."
    ),
    version: bool = typer.Option(
        False, "--version", callback=_show_version, is_eager=True, help="Show the version and exit."
    ),
):
    """
    Ensure a pinned CI artifact is present locally, downloading it if needed.

    REPO and COMMIT may be omitted when NAME is a known pin.
    """
    setup_logging("INFO" if verbose else "WARNING")

    pinned = None
    if repo is None and commit is None:
        pinned = _load_registry().get(name)
        if pinned is None:
            raise typer.BadParameter(
                f"'{name}' is not a known pin; pass REPO and COMMIT.", param_hint="NAME"
            )
        repo, commit = pinned.spec.repo, pinned.spec.commit
    elif repo is None or commit is None:
        raise typer.BadParameter("REPO and COMMIT must be given together.", param_hint="COMMIT")

    if sha256 is not None and not _SHA256.fullmatch(sha256):
        raise typer.BadParameter("must be 64 hexadecimal characters.", param_hint="--sha256")

    try:
        spec = ArtifactSpec(
            name=name,
            repo=repo,
            commit=commit,
            series=series or (pinned.spec.series if pinned else DEFAULT_SERIES),
        )
    except InvalidPinError as e:
        # A moving or malformed ref can never name a published artifact.
        not_found = NotFoundError(f"No artifact '{name}' for {repo} at {commit!r}: {e}")
        logger.error("Artifact fetch failed", error=not_found.message, kind="NotFoundError")
        _fail(not_found.message, exit_code_for(not_found))
    except ValueError as e:
        raise typer.BadParameter(str(e))

    try:
        settings = FetchSettings.from_env(store_url=store_url)
    except ValueError as e:
        _fail(str(e), EXIT_USAGE)

    if sha256 is None and pinned is not None:
        sha256 = pinned.sha256
    if executable is None:
        executable = pinned.executable if pinned is not None else True

    dest_dir = output_dir if output_dir is not None else paths.get_default_output_dir(name)
    fetcher = FileSystemArtifactFetcher(BuildomatStoreClient(settings))

    try:
        path = fetcher.ensure(spec, dest_dir, force=force, sha256=sha256)
        if executable:
            fetcher.mark_executable(path)
    except FetchError as e:
        logger.error("Artifact fetch failed", ref=spec.ref, error=e.message, kind=type(e).__name__)
        _fail(e.message, exit_code_for(e))

    typer.echo(str(path.resolve()))
