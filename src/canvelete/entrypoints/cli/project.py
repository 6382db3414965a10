"""``canvelete init`` and ``canvelete validate``."""

from __future__ import annotations

import json
from pathlib import Path

import click

from canvelete.domain.value_objects import DEFAULT_FORMAT, DEFAULT_QUALITY
from canvelete.files import write_json_atomic
from canvelete.service_layer.project import (
    DEFAULT_OUTPUT_DIR,
    PROJECT_CONFIG_FILE,
    TEMPLATES,
    apply_template,
    default_project_config,
    scaffold,
    update_gitignore,
    validate_config,
    validate_data,
)

from .helpers import detail, error, info, success, warn

PROMPT_FORMATS = ("png", "jpg", "pdf", "svg")


@click.command("init")
@click.option("--yes", "-y", is_flag=True, help="Skip prompts and use defaults.")
@click.option("--template", type=click.Choice(TEMPLATES), help="Project template.")
def init(yes: bool, template: str | None) -> None:
    """Initialize a Canvelete project in the current directory."""
    root = Path.cwd()
    config_file = root / PROJECT_CONFIG_FILE
    if config_file.exists() and not click.confirm(
        f"{PROJECT_CONFIG_FILE} already exists. Overwrite?", default=False, err=True
    ):
        info("Cancelled.")
        return

    if yes:
        config = default_project_config(root.name)
    else:
        name = click.prompt("Project name", default=root.name, err=True)
        fmt = click.prompt(
            "Default output format", type=click.Choice(PROMPT_FORMATS), default=DEFAULT_FORMAT, err=True
        )
        quality = click.prompt(
            "Default quality (1-100)", type=click.IntRange(1, 100), default=DEFAULT_QUALITY, err=True
        )
        output_dir = click.prompt("Default output directory", default=DEFAULT_OUTPUT_DIR, err=True)
        config = default_project_config(
            name, default_format=fmt, default_quality=quality, output_dir=output_dir
        )
        if click.confirm("Create directory structure?", default=True, err=True):
            for path in scaffold(root, output_dir):
                detail(f"  Created {path.relative_to(root)}")

    config = apply_template(config, template)
    write_json_atomic(config_file, config)
    success(f"Created {PROJECT_CONFIG_FILE}")

    gitignore = update_gitignore(root)
    if gitignore == "created":
        info("Created .gitignore")
    elif gitignore == "updated":
        info("Updated .gitignore")

    click.secho("\nProject initialized!\n", bold=True, err=True)
    click.echo("Next steps:", err=True)
    detail("  1. Run `canvelete auth login` to authenticate")
    detail(f"  2. Add design IDs to {PROJECT_CONFIG_FILE}")
    detail("  3. Run `canvelete render` to generate images")


def _load(path: Path, kind: str) -> tuple[bool, object]:
    """Read and parse a JSON file, reporting problems. Returns (ok, document)."""
    if not path.exists():
        error(f"{kind} file not found: {path}")
        return False, None
    try:
        return True, json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        error(f"Invalid JSON: {e}")
        return False, None


@click.command("validate")
@click.option(
    "--config", "-c", "config_file", default=PROJECT_CONFIG_FILE, show_default=True,
    help="Config file to validate.",
)
@click.option("--data", "-d", "data_file", help="Data file to validate.")
def validate(config_file: str, data_file: str | None) -> None:
    """Validate the project configuration and data files.

    Exits with status 1 if any file is missing, unparsable or invalid.
    """
    has_errors = False

    if config_file:
        click.secho(f"\nValidating {config_file}...", bold=True, err=True)
        ok, document = _load(Path(config_file), "Config")
        if ok:
            issues = validate_config(document)
            if issues:
                for issue in issues:
                    warn(issue)
                has_errors = True
            else:
                success("Config file is valid")
        else:
            has_errors = True

    if data_file:
        click.secho(f"\nValidating {data_file}...", bold=True, err=True)
        ok, document = _load(Path(data_file), "Data")
        if ok:
            report = validate_data(document)
            if report.valid:
                success(report.summary)
            else:
                error(report.summary)
                has_errors = True
            for warning in report.warnings:
                warn(warning)
        else:
            has_errors = True

    if has_errors:
        raise SystemExit(1)
