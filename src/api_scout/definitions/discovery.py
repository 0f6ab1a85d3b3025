"""Discovery of API definitions inside a repository checkout."""

import logging
from pathlib import Path

from api_scout.definitions.base import DefinitionDiscoveryResult, DiscoveredDefinition
from api_scout.definitions.extract import extract_from_config, extract_from_file
from api_scout.definitions.walker import (
    DEFAULT_OPTIONS,
    DiscoveryOptions,
    is_definition_file,
    is_redocly_config,
    list_files,
)

logger = logging.getLogger(__name__)


def api_folder_path(root_path: Path, api_folder: str) -> Path:
    """Join ``api_folder`` under ``root_path``; "/" or "" means the root itself."""
    return root_path / api_folder.strip("/")


def discover(
    root_path: Path,
    api_folder: str = "/",
    options: DiscoveryOptions = DEFAULT_OPTIONS,
) -> DefinitionDiscoveryResult:
    """Find every API definition below ``root_path/api_folder``.

    Definitions are keyed by path and the first one inserted wins. Config
    files are processed before plain files, so a definition declared by a
    redocly.yaml is kept over the same file found by the scan.
    """
    folder = api_folder_path(root_path, api_folder)
    if not folder.is_dir():
        logger.info("API folder %s not found", folder)
        return DefinitionDiscoveryResult(
            is_api_folder_missing=True, has_redocly_config=False, definitions=[]
        )

    definitions: dict[Path, DiscoveredDefinition] = {}

    # Walk first so insertion order is fixed by the directory listing, then
    # insert config-declared definitions ahead of scanned files.
    files = list(list_files(folder, options))
    config_files = [f for f in files if is_redocly_config(f, options)]
    definition_files = [
        f for f in files if not is_redocly_config(f, options) and is_definition_file(f, options)
    ]

    for config_path in config_files:
        for definition in extract_from_config(config_path, root_path):
            definitions.setdefault(definition.path, definition)

    for file_path in definition_files:
        definition = extract_from_file(file_path)
        if definition:
            definitions.setdefault(definition.path, definition)

    logger.info(
        "Discovered %d definitions in %d files under %s", len(definitions), len(files), folder
    )
    return DefinitionDiscoveryResult(
        is_api_folder_missing=False,
        has_redocly_config=bool(config_files),
        definitions=list(definitions.values()),
    )
