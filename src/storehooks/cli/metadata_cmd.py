"""Metadata CLI commands: validate and show."""

import importlib
from pathlib import Path

import click

from storehooks.config import Settings
from storehooks.hooks.types import Phase
from storehooks.metadata.loader import MetadataLoader, unregistered_hooks
from storehooks.metadata.validator import validate_metadata_dir, validate_yaml_file

_metadata_dir_option = click.option(
    "--metadata-dir",
    default=None,
    type=click.Path(path_type=Path),
    help="Metadata directory (default: STOREHOOKS_METADATA_PATH or ./metadata).",
)
_hooks_module_option = click.option(
    "--hooks-module",
    "hooks_modules",
    multiple=True,
    help="Module registering named hooks; repeatable.",
)


def _import_hook_modules(modules: list[str]) -> None:
    for name in modules:
        try:
            importlib.import_module(name)
        except ImportError as e:
            click.echo(click.style(f"Error: cannot import hooks module '{name}': {e}", fg="red"), err=True)
            raise SystemExit(1)


def _resolve(settings: Settings, metadata_dir: Path | None, hooks_modules: tuple[str, ...]):
    modules = list(hooks_modules) or settings.hook_modules
    _import_hook_modules(modules)
    return metadata_dir or settings.metadata_path, bool(modules)


def _load(metadata_path: Path) -> MetadataLoader:
    try:
        loader = MetadataLoader(metadata_path)
        loader.load_all()
    except Exception as e:
        click.echo(click.style(f"\nSemantic validation failed: {e}", fg="red"), err=True)
        raise SystemExit(1)
    return loader


@click.group()
def metadata():
    """Metadata commands."""
    pass


@metadata.command()
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="Validate a single YAML file instead of the whole metadata directory.",
)
@_metadata_dir_option
@_hooks_module_option
@click.pass_obj
def validate(
    settings: Settings,
    strict: bool,
    target_path: Path | None,
    metadata_dir: Path | None,
    hooks_modules: tuple[str, ...],
):
    """Validate entity hook YAML files."""
    metadata_path, check_names = _resolve(settings, metadata_dir, hooks_modules)

    # ── Schema (JSON Schema) validation ─────────────────────────────────────
    if target_path is not None:
        schema_issues = validate_yaml_file(target_path)
    else:
        if not metadata_path.exists():
            click.echo(f"Error: Metadata directory not found at {metadata_path}", err=True)
            raise SystemExit(1)
        schema_issues = validate_metadata_dir(metadata_path, strict=strict)

    errors = [i for i in schema_issues if i.severity == "error"]
    warnings = [i for i in schema_issues if i.severity == "warning"]

    for issue in schema_issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} schema error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    # ── Semantic (loader) validation ─────────────────────────────────────────
    if target_path is None:
        loader = _load(metadata_path)
        entities = loader.list_entities()
        click.echo(f"\nLoaded {len(entities)} entities:")

        missing_total = 0
        for name in sorted(entities):
            entity = loader.get_entity(name)
            click.echo(f"  ✓ {name} ({len(entity.hook_names())} hooks)")
            if check_names:
                missing = unregistered_hooks(entity)
                missing_total += len(missing)
                for hook_name in missing:
                    click.echo(click.style(f"    ✗ hook '{hook_name}' is not registered", fg="red"))

        if missing_total:
            click.echo(
                click.style(f"\n{missing_total} unregistered hook(s) found", fg="red", bold=True)
            )
            raise SystemExit(1)

    click.echo(click.style("\nAll metadata is valid.", fg="green", bold=True))


@metadata.command("show")
@_metadata_dir_option
@_hooks_module_option
@click.pass_obj
def show_cmd(settings: Settings, metadata_dir: Path | None, hooks_modules: tuple[str, ...]):
    """Print every entity's hook chains in execution order."""
    metadata_path, _ = _resolve(settings, metadata_dir, hooks_modules)

    if not metadata_path.exists():
        click.echo(f"Error: Metadata directory not found at {metadata_path}", err=True)
        raise SystemExit(1)

    loader = _load(metadata_path)
    if not loader.list_entities():
        click.echo("No entities found.")
        return

    for name in sorted(loader.list_entities()):
        entity = loader.get_entity(name)
        click.echo(click.style(name, bold=True))
        if entity.custom_operations:
            click.echo(f"  custom operations: {', '.join(entity.custom_operations)}")
        for operation in entity.operations:
            for phase in Phase:
                chain = entity.chain(operation, phase)
                if chain:
                    names = " -> ".join(c.name for c in chain)
                    click.echo(f"  {phase.value:<4} {operation}: {names}")
