"""CLI commands for binding configuration maps."""

import json
import logging
import sys
import uuid
from dataclasses import dataclass
from pathlib import Path

import click
import structlog
import yaml

from src.cbi import BindContext, CbiError, FormData, load
from src.cbi.constants import COMPONENT_CLI
from src.observability import BindMetrics, configure_logging, request_context
from src.renderer import TemplateRenderer
from src.settings import get_settings
from src.uci import MemoryStore, UciCliStore, UciStoreError
from src.uci.protocols import ConfigStore


logger = structlog.get_logger()


def _read_form(form_path: Path | None) -> FormData:
    """Read a YAML mapping of dotted form keys.

    Args:
        form_path: Path to the form file, or None for no submission.

    Returns:
        The decoded form values.
    """
    if form_path is None:
        return FormData()

    with form_path.open(encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise click.BadParameter("form file must hold a mapping", param_hint="--form")
    return FormData({str(key): value for key, value in data.items()})


def _open_store(
    state_path: Path | None, use_uci: bool, confdir: Path | None
) -> ConfigStore:
    if use_uci:
        return UciCliStore(binary=get_settings().uci_binary, confdir=confdir)
    if state_path is None:
        raise click.UsageError("--state is required unless --uci is given")
    return MemoryStore.load(state_path)


@dataclass
class RenderOptions:
    """Options for the render command."""

    map_name: str
    state_path: Path | None
    form_path: Path | None
    map_dir: Path | None
    use_uci: bool = False
    confdir: Path | None = None


def _execute_render(options: RenderOptions, request_id: str) -> bool:
    """Run one construct, parse and render cycle.

    Returns:
        Whether every store call made during the parse succeeded.
    """
    log = logger.bind(component=COMPONENT_CLI, command="render")
    log.info(
        "render_started",
        map_name=options.map_name,
        form=str(options.form_path or ""),
    )

    try:
        store = _open_store(options.state_path, options.use_uci, options.confdir)
    except (UciStoreError, yaml.YAMLError) as e:
        log.error("store_open_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    context = BindContext(
        store=store,
        form=_read_form(options.form_path),
        renderer=TemplateRenderer(get_settings().template_dir),
        request_id=request_id,
    )

    try:
        m = load(options.map_name, context, map_dir=options.map_dir)
        ok = m.parse() if options.form_path is not None else True
        markup = m.render()
    except CbiError as e:
        log.error("render_failed", error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if isinstance(store, MemoryStore) and options.state_path and m.changes:
        store.dump(options.state_path)

    click.echo(markup)
    report = {
        "ok": ok,
        "changes": [change.model_dump(mode="json") for change in m.changes],
        "invalid": [list(field) for field in m.invalid_fields()],
        "metrics": BindMetrics.get_instance().to_dict(),
    }
    click.echo(json.dumps(report, indent=2), err=True)

    log.info("render_complete", ok=ok, change_count=len(m.changes), bytes=len(markup))
    return ok


@click.group()
@click.version_option(version="0.1.0")
def cli() -> None:
    """Configuration bind interface CLI."""


@cli.command()
@click.argument("map_name")
@click.option(
    "--state",
    "state_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Path to the YAML state file backing the store.",
)
@click.option(
    "--form",
    "form_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file of submitted form values; the map is parsed when given.",
)
@click.option(
    "--map-dir",
    "map_dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=None,
    help="Directory holding map scripts (default: CBI_MAP_DIR).",
)
@click.option(
    "--uci",
    "use_uci",
    is_flag=True,
    help="Use the uci command line tool instead of the state file.",
)
@click.option(
    "--confdir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Configuration directory passed to uci (with --uci).",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=True,
    help="Use JSON format for logs (default: true).",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
def render(  # noqa: PLR0913
    map_name: str,
    state_path: Path | None,
    form_path: Path | None,
    map_dir: Path | None,
    use_uci: bool,
    confdir: Path | None,
    json_logs: bool,
    verbose: bool,
) -> None:
    """Load MAP_NAME, apply an optional form submission and print the markup.

    Changes written to the store are reported on stderr as JSON; with a
    state file they are persisted back to it.
    """
    options = RenderOptions(
        map_name=map_name,
        state_path=state_path,
        form_path=form_path,
        map_dir=map_dir,
        use_uci=use_uci,
        confdir=confdir,
    )
    request_id = str(uuid.uuid4())

    log_level = logging.DEBUG if verbose else logging.INFO
    configure_logging(level=log_level, json_format=json_logs)

    with request_context(request_id):
        ok = _execute_render(options, request_id)
    if not ok:
        sys.exit(1)


@cli.command()
@click.argument("config")
@click.option(
    "--state",
    "state_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to the YAML state file backing the store.",
)
def show(config: str, state_path: Path) -> None:
    """Print the CONFIG namespace of a state file as JSON."""
    configure_logging(json_format=False)

    store = MemoryStore.load(state_path)
    data = store.show(config)
    if data is None:
        click.echo(f"Error: no such config '{config}'", err=True)
        sys.exit(1)
    click.echo(json.dumps(data, indent=2))
