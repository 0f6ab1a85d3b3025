"""YAML / JSON file loading."""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


def load_file(file_path: Path) -> Any | None:
    """Parse a YAML or JSON file, returning None if it cannot be read or parsed.

    JSON is a subset of YAML, so both go through ``yaml.safe_load``.
    """
    try:
        text = file_path.read_text(encoding="utf-8")
        return yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        logger.warning("Unable to parse file %s: %s", file_path, e)
        return None


def load_mapping(file_path: Path) -> dict | None:
    """Like load_file, but only accept documents whose top level is a mapping."""
    data = load_file(file_path)
    if data is None:
        return None
    if not isinstance(data, dict):
        logger.warning("Unexpected document type in %s: %s", file_path, type(data).__name__)
        return None
    return data
