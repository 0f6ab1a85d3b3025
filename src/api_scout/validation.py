"""Metadata validation against the destination template, and result summaries.

Schema validation of the metadata itself is done by the catalog backend;
this module only checks what the destination template needs and renders
the Markdown summary posted back to the pull request.
"""

import json
import logging
import os
from pathlib import Path

from api_scout.definitions.base import (
    DefinitionDiscoveryResult,
    DefinitionValidationResult,
    DiscoveredDefinition,
    ValidationError,
    ValidationResult,
    ValidationSummary,
)
from api_scout.targets.destination import get_value_by_path, metadata_variables

logger = logging.getLogger(__name__)


def validate_mount_path_variables(template: str, metadata: dict) -> ValidationResult:
    """Check that every ``{metadata.x}`` in ``template`` resolves to a scalar."""
    missing = []
    objects = []
    for field in metadata_variables(template):
        value = get_value_by_path(field, metadata)
        if value is None:
            missing.append(field)
        elif isinstance(value, (dict, list)):
            objects.append(field)

    errors = [ValidationError(message=f'"{f}" metadata attribute is required') for f in missing]
    errors += [
        ValidationError(message=f'"{f}" metadata attribute should not be an object') for f in objects
    ]
    return ValidationResult(is_valid=not errors, errors=errors)


def validate_definitions(
    definitions: list[DiscoveredDefinition], template: str
) -> list[DefinitionValidationResult]:
    results = []
    for definition in definitions:
        result = validate_mount_path_variables(template, definition.metadata)
        logger.debug("Metadata validated for %s: valid=%s", definition.path, result.is_valid)
        results.append(DefinitionValidationResult(definition=definition, result=result))
    return results


def get_validation_summary(
    results: list[DefinitionValidationResult],
    discovery: DefinitionDiscoveryResult,
    commit_sha: str,
    root_path: Path,
    api_folder: str = "/",
    metadata_required: bool = False,
) -> ValidationSummary:
    """Build the status message and Markdown details for a validation run."""
    header = f"### Redocly scout\n\nCommit: {commit_sha}\n\n## Metadata validation\n\n"

    if results:
        success = all(r.result.is_valid for r in results)
        details = "\n\n".join(_result_message(r, root_path) for r in results)
        return ValidationSummary(
            message=f"Metadata validation {'successful' if success else 'failed'}",
            details=f"{header}{details}",
            status="SUCCEEDED" if success else "FAILED",
        )

    if not metadata_required:
        details = (
            f"APIs folder `{api_folder}` not found"
            if discovery.is_api_folder_missing
            else "APIs not found"
        )
        return ValidationSummary(
            message="Metadata validation skipped",
            details=f"{header}{details}",
            status="SUCCEEDED",
        )

    if discovery.is_api_folder_missing:
        return ValidationSummary(
            message="APIs folder not found",
            details=f"{header}APIs folder `{api_folder}` not found",
            status="FAILED",
        )

    if not discovery.has_redocly_config:
        return ValidationSummary(
            message="redocly.yaml file not found",
            details=f"{header}redocly.yaml file not found",
            status="FAILED",
        )

    # a redocly.yaml exists but declares no metadata
    return ValidationSummary(
        message="metadata.yaml not found",
        details=f"{header}metadata.yaml not found",
        status="FAILED",
    )


def _result_message(validation: DefinitionValidationResult, root_path: Path) -> str:
    path = Path(os.path.relpath(validation.definition.path, root_path)).as_posix()
    warning = "\n\n>[!WARNING]\n>API spec file not found" if validation.definition.empty else ""

    if validation.result.is_valid:
        return f"**{path}** ✅{warning}"

    errors = json.dumps([e.model_dump() for e in validation.result.errors], indent=2)
    return (
        f"<details><summary><b>{path}</b> ❌</summary>\n\n"
        f"```json\n{errors}\n```\n</details>{warning}"
    )
