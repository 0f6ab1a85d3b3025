"""Definition extraction from redocly.yaml configs and OpenAPI / Swagger files."""

import logging
import os
from pathlib import Path

import pydantic

from api_scout.definitions.base import DiscoveredDefinition, RedoclyConfig
from api_scout.definitions.loader import load_mapping
from api_scout.definitions.refs import resolve_metadata
from api_scout.paths import versions_folder

logger = logging.getLogger(__name__)

METADATA_EXTENSION = "x-metadata"


def extract_from_config(config_path: Path, root_path: Path | None = None) -> list[DiscoveredDefinition]:
    """Extract definitions declared by a redocly.yaml file.

    Emits one definition for the config itself when it carries root-level
    metadata, plus one per ``apis`` entry that has a ``root`` and resolvable
    metadata (its own, or the root-level metadata as a fallback).
    """
    data = load_mapping(config_path)
    if data is None:
        return []

    try:
        config = RedoclyConfig.model_validate(data)
    except pydantic.ValidationError as e:
        logger.warning("Invalid config %s: %s", config_path, e)
        return []

    definitions = []
    root_metadata, _ = resolve_metadata(config.metadata, config_path)

    if root_metadata is not None:
        definitions.append(
            DiscoveredDefinition(
                path=config_path,
                title=str(root_metadata.get("title") or _effective_folder(config_path, root_path).name),
                metadata=root_metadata,
            )
        )

    for name, api in config.apis.items():
        if api.metadata is not None:
            metadata, _ = resolve_metadata(api.metadata, config_path)
        else:
            metadata = root_metadata
        if metadata is None or not api.root:
            continue

        root = Path(os.path.normpath(config_path.parent / api.root))
        definitions.append(
            DiscoveredDefinition(
                path=root,
                title=name,
                metadata=metadata,
                empty=not root.is_file(),
            )
        )

    logger.debug("Config %s declares %d definitions", config_path, len(definitions))
    return definitions


def extract_from_file(file_path: Path) -> DiscoveredDefinition | None:
    """Extract a definition from an OpenAPI / Swagger document.

    Returns None unless the document declares ``openapi`` or ``swagger``,
    has a title and carries resolvable ``info.x-metadata``.
    """
    doc = load_mapping(file_path)
    if doc is None:
        return None

    if not (doc.get("openapi") or doc.get("swagger")):
        return None

    info = doc.get("info")
    if not isinstance(info, dict):
        return None

    metadata, _ = resolve_metadata(info.get(METADATA_EXTENSION), file_path)
    title = info.get("title")
    if metadata is None or not title:
        return None

    return DiscoveredDefinition(path=file_path, title=str(title), metadata=metadata)


def _effective_folder(config_path: Path, root_path: Path | None) -> Path:
    # A config inside a version partition names the API after the folder
    # holding all the versions.
    folder = versions_folder(config_path, root_path)
    return config_path.parent if folder is None else folder
