"""CLI entrypoint for pardu."""

from __future__ import annotations

import json
from pathlib import Path

import click

from pardu.app import ParduApp
from pardu.config.models import ScanSettings
from pardu.config.store import SettingsStore
from pardu.fs.pool import ScanError
from pardu.fs.scanner import scan_directory
from pardu.paths import settings_path
from pardu.runtime_logging import configure_runtime_logging
from pardu.version import __version__

_concurrency_option = click.option(
    "-c",
    "--concurrency",
    type=click.IntRange(min=0),
    default=None,
    help="Scan workers (0 = one per available CPU)",
)
_threshold_option = click.option(
    "-t",
    "--threshold",
    "threshold_mb",
    type=click.IntRange(min=0),
    default=None,
    help="Group files smaller than this many MB",
)


@click.group(invoke_without_command=True, context_settings={"help_option_names": ["-h", "--help"]})
@click.pass_context
def main(ctx: click.Context) -> None:
    """pardu: parallel disk usage browser."""
    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@main.command()
@click.argument("path", required=False, default=".")
@_concurrency_option
@_threshold_option
@click.option("--log-level", default=None, help="off, error, warning, info or debug")
@click.option("--log-file", default=None, help="JSONL runtime log destination")
def run(
    path: str,
    concurrency: int | None,
    threshold_mb: int | None,
    log_level: str | None,
    log_file: str | None,
) -> None:
    """Scan PATH and browse the results."""
    app = ParduApp(
        root_path=Path(path),
        concurrency=concurrency,
        threshold_mb=threshold_mb,
        log_level=log_level,
        log_file=log_file,
    )
    app.run()


@main.command()
@click.argument("path", required=False, default=".")
@_concurrency_option
@_threshold_option
@click.option("--limit", type=click.IntRange(min=1), default=None, help="Only print the largest N entries")
def report(path: str, concurrency: int | None, threshold_mb: int | None, limit: int | None) -> None:
    """Scan PATH and print the top-level breakdown as JSON."""
    root_path = Path(path).expanduser().resolve()
    if not root_path.is_dir():
        raise click.ClickException(f"Directory not found: {root_path}")

    if concurrency is None or threshold_mb is None:
        scan_settings = SettingsStore().load().scan
    else:
        scan_settings = ScanSettings()
    scan_settings = scan_settings.with_overrides(concurrency=concurrency, threshold_mb=threshold_mb)

    configure_runtime_logging()
    try:
        entries = scan_directory(root_path, scan_settings.concurrency, scan_settings.threshold_bytes)
    except ScanError as exc:
        raise click.ClickException(str(exc))

    entries.sort(key=lambda entry: entry.size(), reverse=True)
    root = entries[0].parent if entries else None
    payload = {
        "path": str(root_path),
        "size": root.size() if root is not None else 0,
        "count": root.count() if root is not None else 0,
        "entries": [
            {
                "name": entry.name,
                "label": entry.label(),
                "size": entry.size(),
                "count": entry.count(),
                "is_dir": entry.is_dir,
                "is_virtual": entry.is_virtual,
            }
            for entry in entries[:limit]
        ],
    }
    click.echo(json.dumps(payload, indent=2))


@main.command("settings")
@click.argument("key", required=False)
@click.argument("value", required=False)
def settings_command(key: str | None, value: str | None) -> None:
    """Show all settings, show KEY, or set KEY to VALUE."""
    store = SettingsStore()
    if key is None:
        for name, current in store.load().setting_items():
            click.echo(f"{name} = {current}")
        return

    if value is None:
        try:
            click.echo(f"{key} = {store.get(key)}")
        except KeyError as exc:
            raise click.ClickException(str(exc.args[0]))
        return

    try:
        updated = store.update(key, value)
    except KeyError as exc:
        raise click.ClickException(str(exc.args[0]))
    except ValueError as exc:
        raise click.ClickException(f"Invalid value for {key}: {exc}")
    current = dict(updated.setting_items())[key]
    click.echo(f"{key} = {current}")


@main.command("settings-path")
def settings_path_command() -> None:
    """Print settings file path."""
    click.echo(str(settings_path()))


@main.command()
def about() -> None:
    """Show version and project summary."""
    payload = {
        "name": "pardu",
        "version": __version__,
        "description": "Parallel disk usage scanner and browser",
    }
    click.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()
