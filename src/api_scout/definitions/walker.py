"""Directory walking and file classification."""

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

REDOCLY_CONFIG_FILENAME = "redocly.yaml"
OPENAPI_DEFINITION_EXTENSIONS = ("json", "yaml", "yml")


@dataclass(frozen=True)
class DiscoveryOptions:
    """Reserved filenames and extensions used to classify files."""

    config_filename: str = REDOCLY_CONFIG_FILENAME
    extensions: tuple[str, ...] = OPENAPI_DEFINITION_EXTENSIONS
    ignored_dirs: tuple[str, ...] = (".git",)


DEFAULT_OPTIONS = DiscoveryOptions()


def list_files(folder: Path, options: DiscoveryOptions = DEFAULT_OPTIONS) -> Iterator[Path]:
    """Yield every file below ``folder``, depth-first in sorted name order.

    Yields nothing if ``folder`` does not exist.
    """
    if not folder.is_dir():
        return

    for entry in sorted(folder.iterdir(), key=lambda p: p.name):
        if entry.is_symlink():
            continue
        if entry.is_dir():
            if entry.name in options.ignored_dirs:
                continue
            yield from list_files(entry, options)
        elif entry.is_file():
            yield entry


def is_redocly_config(file_path: Path, options: DiscoveryOptions = DEFAULT_OPTIONS) -> bool:
    return file_path.name == options.config_filename


def is_definition_file(file_path: Path, options: DiscoveryOptions = DEFAULT_OPTIONS) -> bool:
    return file_path.suffix.lstrip(".") in options.extensions
