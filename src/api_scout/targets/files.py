"""File listing and grouping of upload targets for the uploader."""

from pathlib import Path

from api_scout.definitions.base import DefinitionUploadTarget

IGNORE_FILE_ENTRIES = (".git",)


def get_upload_target_files(
    target: DefinitionUploadTarget, ignore: tuple[str, ...] = IGNORE_FILE_ENTRIES
) -> dict[str, Path]:
    """Map upload names to local files for a target.

    A file target maps its own basename. A folder target maps every file
    below it, named by its path relative to the folder.
    """
    if target.type == "file":
        if not target.source_path.is_file():
            return {}
        return {target.source_path.name: target.source_path}
    if not target.source_path.is_dir():
        return {}
    return _folder_files(target.source_path, target.source_path, ignore)


def _folder_files(folder: Path, root: Path, ignore: tuple[str, ...]) -> dict[str, Path]:
    files = {}
    for entry in sorted(folder.iterdir(), key=lambda p: p.name):
        if entry.name in ignore:
            continue
        if entry.is_file():
            files[entry.relative_to(root).as_posix()] = entry
        elif entry.is_dir():
            files.update(_folder_files(entry, root, ignore))
    return files


def group_by_mount_path(
    targets: list[DefinitionUploadTarget],
) -> dict[str, list[DefinitionUploadTarget]]:
    """Group targets sharing a remote mount path, keeping their order."""
    groups: dict[str, list[DefinitionUploadTarget]] = {}
    for target in targets:
        groups.setdefault(target.remote_mount_path, []).append(target)
    return groups
