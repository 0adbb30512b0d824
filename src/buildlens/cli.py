"""buildlens CLI."""

import logging
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from buildlens.artifacts import LocalStorageClient, PodLogArtifact, PodLogArtifactFetcher
from buildlens.config import BuildLensConfig, get_config_template, load_config, parse_size
from buildlens.errors import JobNotFound, MalformedJobKey, MalformedReference
from buildlens.jobs import SQLiteJobStore
from buildlens.locator import ArtifactLocator
from buildlens.pods import PodClient, make_pod_client
from buildlens.types import JOB_STATES, Diagnostic, JobRecord

app = typer.Typer(help="buildlens - find the logs and artifacts of a test run")
jobs_app = typer.Typer(help="Manage recorded job builds")
app.add_typer(jobs_app, name="jobs")
console = Console()

BUILDLENS_DIR = ".buildlens"
CONFIG_FILE = "buildlens.yaml"


def setup_logging(verbose: bool = False):
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    logging.getLogger("paramiko").setLevel(logging.WARNING)


def get_config() -> BuildLensConfig:
    config_path = Path(CONFIG_FILE)
    if not config_path.exists():
        console.print(f"[red]Error:[/red] {CONFIG_FILE} not found. Run 'buildlens init' first.")
        raise typer.Exit(1)
    return load_config(config_path)


def get_job_store(config: BuildLensConfig) -> SQLiteJobStore:
    """Get the job store, initializing its schema if needed."""
    store = SQLiteJobStore(Path(config.jobs.db_path))
    store.initialize()
    return store


def get_locator(config: BuildLensConfig, store: SQLiteJobStore, pods: PodClient) -> ArtifactLocator:
    """Wire an ArtifactLocator from configuration."""
    return ArtifactLocator(
        storage=LocalStorageClient(Path(config.storage.path)),
        jobs=store,
        pod_logs=PodLogArtifactFetcher(store, pods),
        url_prefix=lambda: config.jobs.url_prefix,
        storage_kind=config.sources.storage_kind,
        job_kind=config.sources.job_kind,
        max_workers=config.fetch.max_workers,
    )


def print_diagnostics(diagnostics: list[Diagnostic]) -> None:
    for d in diagnostics:
        target = f" {d.artifact}" if d.artifact else ""
        console.print("[yellow]Warning:[/yellow] " + escape(f"[{d.stage}]{target} {d.message}"))


@app.command()
def init():
    """Initialize buildlens in the current directory."""
    config_file = Path(CONFIG_FILE)

    if config_file.exists():
        console.print(f"[yellow]Warning:[/yellow] {CONFIG_FILE} already exists.")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit(0)

    config_file.write_text(get_config_template())
    config = load_config(config_file)

    Path(BUILDLENS_DIR).mkdir(exist_ok=True)
    Path(config.storage.path).mkdir(parents=True, exist_ok=True)
    get_job_store(config).close()

    console.print("[green]Initialized buildlens.[/green]")
    console.print(f"  Config: {CONFIG_FILE}")
    console.print(f"  Storage: {config.storage.path}")
    console.print(f"  Jobs: {config.jobs.db_path}")


@jobs_app.command("add")
def jobs_add(
    job_name: str = typer.Argument(..., help="Job name"),
    build_id: str = typer.Argument(..., help="Build ID"),
    url: str | None = typer.Option(None, "--url", help="Status URL (default: prefix + job/build)"),
    pod: str | None = typer.Option(None, "--pod", "-p", help="Pod the build runs in"),
    state: str = typer.Option("pending", "--state", "-s", help="Job state"),
):
    """Record a job build."""
    config = get_config()
    store = get_job_store(config)
    try:
        record = JobRecord(
            job_name=job_name,
            build_id=build_id,
            status_url=url or f"{config.jobs.url_prefix}{job_name}/{build_id}",
            state=state,
            pod_name=pod,
            started_at=datetime.now(),
        )
        store.record_job(record)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    finally:
        store.close()
    console.print(f"Recorded {job_name}/{build_id} -> {record.status_url}")


@jobs_app.command("list")
def jobs_list(
    job_name: str | None = typer.Argument(None, help="Only show builds of this job"),
    limit: int = typer.Option(20, "--limit", "-n", help="Maximum builds to show"),
):
    """List recorded job builds."""
    config = get_config()
    store = get_job_store(config)
    try:
        jobs = store.list_jobs(job_name=job_name, limit=limit)
    finally:
        store.close()

    if not jobs:
        console.print("No jobs recorded.")
        return

    table = Table()
    table.add_column("Job")
    table.add_column("Build")
    table.add_column("State")
    table.add_column("Pod")
    table.add_column("Status URL")
    for job in jobs:
        table.add_row(job.job_name, job.build_id, job.state, job.pod_name or "", job.status_url)
    console.print(table)


@jobs_app.command("set-state")
def jobs_set_state(
    job_name: str = typer.Argument(..., help="Job name"),
    build_id: str = typer.Argument(..., help="Build ID"),
    state: str = typer.Argument(..., help="New state: pending, running, success, failure or aborted"),
):
    """Update the state of a recorded job build."""
    if state not in JOB_STATES:
        console.print(f"[red]Error:[/red] Invalid state {escape(state)!r}. Use one of: {', '.join(JOB_STATES)}")
        raise typer.Exit(1)

    config = get_config()
    store = get_job_store(config)
    try:
        finished_at = datetime.now() if state in ("success", "failure", "aborted") else None
        store.set_job_state(job_name, build_id, state, finished_at=finished_at)
    except JobNotFound as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    finally:
        store.close()
    console.print(f"{job_name}/{build_id} is now {state}")


@app.command("ls")
def list_command(
    reference: str = typer.Argument(..., help="Reference: <kind>/<key>"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """List the artifacts of a test run."""
    setup_logging(verbose)
    config = get_config()
    store = get_job_store(config)
    pods = make_pod_client(config.pods)
    try:
        listing = get_locator(config, store, pods).list_artifacts(reference)
    except MalformedReference as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    finally:
        pods.close()
        store.close()

    for name in listing.names:
        console.print(escape(name))
    print_diagnostics(listing.diagnostics)


@app.command()
def fetch(
    reference: str = typer.Argument(..., help="Reference: <kind>/<key>"),
    names: list[str] | None = typer.Argument(None, help="Artifact names (default: all listed)"),
    pod: str = typer.Option("", "--pod", "-p", help="Pod the build runs in"),
    size_limit: str | None = typer.Option(None, "--size-limit", help="Per-artifact limit, e.g. 10MB"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Fetch handles to the artifacts of a test run and show their sizes."""
    setup_logging(verbose)
    config = get_config()
    try:
        limit = parse_size(size_limit) if size_limit else config.fetch.size_limit_bytes
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    store = get_job_store(config)
    pods = make_pod_client(config.pods)
    try:
        locator = get_locator(config, store, pods)
        if not names:
            names = locator.list_artifacts(reference).names
        result = locator.fetch_artifacts(reference, pod, limit, names)

        table = Table()
        table.add_column("Artifact")
        table.add_column("Size", justify="right")
        table.add_column("Source")
        table.add_column("Link")
        for artifact in result.artifacts:
            try:
                size = str(artifact.size())
            except Exception as e:
                size = f"[red]{escape(str(e))}[/red]"
            if isinstance(artifact, PodLogArtifact):
                source = "pod (live)" if artifact.is_live() else "pod"
            else:
                source = "storage"
            table.add_row(artifact.name, size, source, artifact.canonical_link())
    except (MalformedReference, MalformedJobKey) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    finally:
        pods.close()
        store.close()

    console.print(table)
    print_diagnostics(result.diagnostics)
    console.print(f"[dim]{len(result.artifacts)} artifact(s) in {result.duration_s:.2f}s[/dim]")


if __name__ == "__main__":
    app()
