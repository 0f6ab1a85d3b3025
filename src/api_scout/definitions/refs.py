"""Metadata reference resolver.

Metadata may be declared inline or as ``{"$ref": "relative/path.yaml"}``,
pointing at another file that holds the real metadata (possibly another
``$ref``). Resolution follows the chain until it reaches a block without
``$ref``.
"""

import logging
import os
from pathlib import Path
from typing import NamedTuple

from api_scout.definitions.loader import load_file
from api_scout.errors import MetadataRefCycleError

logger = logging.getLogger(__name__)

REF_KEY = "$ref"
MAX_REF_DEPTH = 32


class ResolvedMetadata(NamedTuple):
    metadata: dict | None
    resolved_path: Path  # file the metadata actually lives in


def resolve_metadata(metadata: dict | None, current_path: Path) -> ResolvedMetadata:
    """Follow ``$ref`` links starting from metadata found in ``current_path``.

    Returns the terminal metadata and the path of the file that holds it.
    ``resolved_path == current_path`` means the metadata is inline. A link to
    a missing or unparsable file resolves to None.

    Raises MetadataRefCycleError if the chain revisits a file or exceeds
    MAX_REF_DEPTH links.
    """
    chain = [current_path]

    while isinstance(metadata, dict) and metadata.get(REF_KEY):
        ref_path = Path(os.path.normpath(Path(current_path).parent / str(metadata[REF_KEY])))
        if ref_path in chain[1:] or len(chain) > MAX_REF_DEPTH:
            raise MetadataRefCycleError(chain + [ref_path])
        chain.append(ref_path)

        logger.debug("Following metadata $ref %s -> %s", current_path, ref_path)
        metadata = load_file(ref_path)
        current_path = ref_path

    if metadata is not None and not isinstance(metadata, dict):
        logger.warning("Metadata in %s is not a mapping, ignoring it", current_path)
        metadata = None

    return ResolvedMetadata(metadata, current_path)
