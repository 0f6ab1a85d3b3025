"""CLI entry point for api-scout."""

import json
import logging
from pathlib import Path

import click
import pydantic

from api_scout.definitions.base import JobContext
from api_scout.definitions.discovery import discover
from api_scout.errors import ScoutError
from api_scout.settings import ScoutSettings
from api_scout.targets.consolidate import consolidate
from api_scout.targets.files import get_upload_target_files, group_by_mount_path
from api_scout.validation import get_validation_summary, validate_definitions


def _load_settings(**overrides) -> ScoutSettings:
    """Read settings from the environment, letting CLI options take precedence."""
    try:
        return ScoutSettings(**{k: v for k, v in overrides.items() if v is not None})
    except pydantic.ValidationError as e:
        raise click.ClickException(f"Invalid configuration:\n{e}")


def _echo_json(data: list[pydantic.BaseModel] | pydantic.BaseModel) -> None:
    if isinstance(data, list):
        click.echo(json.dumps([m.model_dump(mode="json") for m in data], indent=2))
    else:
        click.echo(data.model_dump_json(indent=2))


@click.group()
@click.option("--log-level", default=None, help="Logging level (overrides LOG_LEVEL).")
def main(log_level: str | None):
    """api-scout: find API definitions in a repository and plan their upload."""
    if log_level is None:
        log_level = _load_settings().log_level
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@main.command("discover")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--api-folder", default=None, help="Folder to scan, relative to ROOT (default: API_FOLDER or /).")
def discover_cmd(root: Path, api_folder: str | None):
    """List API definitions found under ROOT."""
    settings = _load_settings(api_folder=api_folder)
    try:
        result = discover(root.resolve(), settings.api_folder, settings.discovery_options())
    except ScoutError as e:
        raise click.ClickException(str(e))
    _echo_json(result)


@main.command("targets")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--org-id", required=True, help="Namespace / organization of the repository.")
@click.option("--repo-id", required=True, help="Repository identifier.")
@click.option("--api-folder", default=None, help="Folder to scan, relative to ROOT.")
@click.option("--template", default=None, help="Destination path template (overrides REDOCLY_DEST_FOLDER_PATH).")
@click.option("--files", "list_files", is_flag=True, help="Group targets by mount path and list the files each one uploads.")
def targets_cmd(
    root: Path,
    org_id: str,
    repo_id: str,
    api_folder: str | None,
    template: str | None,
    list_files: bool,
):
    """Plan the upload targets for the API definitions under ROOT."""
    settings = _load_settings(api_folder=api_folder, redocly_dest_folder_path=template)
    root = root.resolve()
    job = JobContext(namespace_id=org_id, repository_id=repo_id)

    try:
        result = discover(root, settings.api_folder, settings.discovery_options())
    except ScoutError as e:
        raise click.ClickException(str(e))

    if result.is_api_folder_missing:
        raise click.ClickException(f"APIs folder `{settings.api_folder}` not found")

    targets = consolidate(
        result.definitions,
        root,
        settings.redocly_dest_folder_path,
        job,
        settings.discovery_options(),
    )
    if not list_files:
        _echo_json(targets)
        return

    groups = {
        mount_path: [
            {**t.model_dump(mode="json"), "files": sorted(get_upload_target_files(t))}
            for t in group
        ]
        for mount_path, group in group_by_mount_path(targets).items()
    }
    click.echo(json.dumps(groups, indent=2))


@main.command("validate")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--commit-sha", default="", help="Commit shown in the summary header.")
@click.option("--api-folder", default=None, help="Folder to scan, relative to ROOT.")
@click.option("--template", default=None, help="Destination path template (overrides REDOCLY_DEST_FOLDER_PATH).")
@click.option("--metadata-required/--no-metadata-required", default=None, help="Fail when no definitions are found.")
def validate_cmd(
    root: Path,
    commit_sha: str,
    api_folder: str | None,
    template: str | None,
    metadata_required: bool | None,
):
    """Validate definition metadata under ROOT and print a Markdown summary."""
    settings = _load_settings(
        api_folder=api_folder,
        redocly_dest_folder_path=template,
        redocly_metadata_required=metadata_required,
    )
    root = root.resolve()

    try:
        result = discover(root, settings.api_folder, settings.discovery_options())
    except ScoutError as e:
        raise click.ClickException(str(e))

    results = validate_definitions(result.definitions, settings.redocly_dest_folder_path)
    summary = get_validation_summary(
        results,
        result,
        commit_sha,
        root,
        api_folder=settings.api_folder,
        metadata_required=settings.redocly_metadata_required,
    )

    click.echo(summary.details)
    click.echo(f"\n{summary.message}")
    if summary.status == "FAILED":
        raise SystemExit(1)
