"""Destination path templating for upload targets.

Templates look like ``apis/{metadata.team}/{repoId}/{title}``. Supported
placeholders are ``{title}``, ``{repoId}``, ``{orgId}`` and
``{metadata.<dotted.path>}``.
"""

import re
from typing import Any

from api_scout.definitions.base import DiscoveredDefinition, JobContext, UploadTargetDestination
from api_scout.errors import InvalidDestinationTemplateError

LATEST_VERSION = "@latest"
PLAIN_VARIABLES = ("title", "repoId", "orgId")

_VARIABLE_RE = re.compile(r"\{(.+?)\}")
_METADATA_VARIABLE_RE = re.compile(r"\{metadata\.(.+?)\}")


def get_value_by_path(path: str, data: Any) -> Any:
    """Look up a dotted path (``a.b.c``) in nested dicts; None if any link is missing."""
    for key in path.split("."):
        if not key:
            continue
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def template_variables(template: str) -> list[str]:
    return _VARIABLE_RE.findall(template)


def metadata_variables(template: str) -> list[str]:
    """Dotted metadata paths referenced by ``template``."""
    return _METADATA_VARIABLE_RE.findall(template)


def validate_template(template: str) -> str:
    """Return ``template`` unchanged, or raise if it uses an unknown placeholder."""
    invalid = [
        v for v in template_variables(template)
        if not (v in PLAIN_VARIABLES or (v.startswith("metadata.") and len(v) > len("metadata.")))
    ]
    if invalid:
        raise InvalidDestinationTemplateError(template, invalid)
    return template


def render_template(template: str, definition: DiscoveredDefinition, job: JobContext) -> str:
    """Substitute placeholders and strip leading/trailing slashes."""
    plain = {"orgId": job.namespace_id, "repoId": job.repository_id, "title": definition.title}

    def substitute(match: re.Match) -> str:
        variable = match.group(1)
        if variable in plain:
            return plain[variable]
        if variable.startswith("metadata."):
            value = get_value_by_path(variable[len("metadata."):], definition.metadata)
            return "" if value is None else str(value)
        return match.group(0)

    # one pass, so substituted values are never expanded again
    return _VARIABLE_RE.sub(substitute, template).strip("/")


def render_destination(
    template: str,
    definition: DiscoveredDefinition,
    job: JobContext,
    is_versioned: bool = False,
) -> UploadTargetDestination:
    """Split the rendered template into mount folder and leaf name.

    Non-versioned targets publish under ``<leaf>/@latest``; versioned ones
    take their version names from the source folders.
    """
    parts = [p for p in render_template(template, definition, job).split("/") if p]
    leaf = parts[-1:]
    if not is_versioned:
        leaf.append(LATEST_VERSION)

    return UploadTargetDestination(
        target_path="/".join(leaf),
        remote_mount_path="/".join(parts[:-1]),
    )
