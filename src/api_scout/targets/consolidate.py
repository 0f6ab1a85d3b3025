"""Upload target consolidation.

Turns discovered definitions into the smallest set of files and folders to
publish. Each definition is classified in priority order:

1. inside a version partition (``specs/@v1/openapi.yaml``): the folder
   holding all versions (``specs``), versioned. Skipped when that folder is
   the repository root.
2. a redocly.yaml with root metadata: its folder.
3. sharing its folder with other definitions: the file alone.
4. otherwise: its folder.

Targets with the same source path are merged (last one wins), then any
target nested inside another target is dropped.
"""

import logging
from collections import Counter
from pathlib import Path

from api_scout.definitions.base import (
    DefinitionUploadTarget,
    DiscoveredDefinition,
    JobContext,
    UploadTargetConfig,
)
from api_scout.definitions.walker import DEFAULT_OPTIONS, DiscoveryOptions
from api_scout.paths import is_nested_in, is_root_folder, versions_folder
from api_scout.targets.destination import render_destination

logger = logging.getLogger(__name__)


def get_upload_target_config(
    definition: DiscoveredDefinition,
    definitions: list[DiscoveredDefinition],
    root_path: Path,
    options: DiscoveryOptions = DEFAULT_OPTIONS,
    folder_counts: Counter | None = None,
) -> UploadTargetConfig | None:
    """Decide where ``definition`` is published from, or None to skip it."""
    folder = definition.path.parent

    parent_of_versions = versions_folder(folder, root_path)
    if parent_of_versions is not None:
        # versioned api folders in the repository root are not publishable
        if is_root_folder(parent_of_versions, root_path):
            logger.debug("Skipping root-level versioned definition %s", definition.path)
            return None
        return UploadTargetConfig(path=parent_of_versions, type="folder", is_versioned=True)

    if definition.path.name == options.config_filename:
        return UploadTargetConfig(path=folder, type="folder")

    if folder_counts is None:
        folder_counts = Counter(d.path.parent for d in definitions)
    if folder_counts[folder] > 1:
        return UploadTargetConfig(path=definition.path, type="file")

    return UploadTargetConfig(path=folder, type="folder")


def consolidate(
    definitions: list[DiscoveredDefinition],
    root_path: Path,
    template: str,
    job: JobContext,
    options: DiscoveryOptions = DEFAULT_OPTIONS,
) -> list[DefinitionUploadTarget]:
    """Compute the non-overlapping upload targets for ``definitions``."""
    folder_counts = Counter(d.path.parent for d in definitions)
    targets: dict[Path, DefinitionUploadTarget] = {}

    for definition in definitions:
        config = get_upload_target_config(definition, definitions, root_path, options, folder_counts)
        if config is None:
            continue

        destination = render_destination(template, definition, job, config.is_versioned)
        # last writer wins, position of the first insert is kept
        targets[config.path] = DefinitionUploadTarget(
            source_path=config.path,
            target_path=destination.target_path,
            remote_mount_path=destination.remote_mount_path,
            type=config.type,
            title=definition.title,
            metadata=definition.metadata,
            is_versioned=config.is_versioned,
        )

    result = [
        target for target in targets.values()
        if not any(is_nested_in(target.source_path, other) for other in targets)
    ]
    logger.info(
        "Consolidated %d definitions into %d upload targets", len(definitions), len(result)
    )
    return result
