"""Data models shared by discovery, consolidation and validation.

Discovered API definitions and the upload targets derived from them are
plain pydantic models so they can be dumped straight to JSON by the CLI.
"""

import logging
from pathlib import Path
from typing import Literal

import pydantic
from pydantic import BaseModel, ConfigDict, field_validator

logger = logging.getLogger(__name__)

UploadTargetType = Literal["file", "folder"]

# Free-form governance fields (owner, team, title, ...). May hold a "$ref"
# pointing at another file with the real metadata.
ApiDefinitionMetadata = dict


class RedoclyConfigApi(BaseModel):
    """One entry of the ``apis`` mapping in a redocly.yaml file."""

    model_config = ConfigDict(extra="ignore")

    root: str | None = None
    metadata: ApiDefinitionMetadata | None = None


class RedoclyConfig(BaseModel):
    """Parsed redocly.yaml root configuration."""

    model_config = ConfigDict(extra="ignore")

    apis: dict[str, RedoclyConfigApi] = {}
    metadata: ApiDefinitionMetadata | None = None

    @field_validator("apis", mode="before")
    @classmethod
    def _valid_apis(cls, value):
        # "apis:" with no entries loads as None
        if value is None:
            return {}
        if not isinstance(value, dict):
            return value

        apis = {}
        for name, entry in value.items():
            try:
                apis[str(name)] = RedoclyConfigApi.model_validate(entry)
            except pydantic.ValidationError as e:
                logger.warning("Skipping invalid api entry %r: %s", name, e)
        return apis


class DiscoveredDefinition(BaseModel):
    """An API description file (or config-declared API) with resolved metadata."""

    model_config = ConfigDict(frozen=True)

    path: Path
    title: str
    metadata: ApiDefinitionMetadata
    empty: bool = False  # config-declared entry point missing on disk


class DefinitionDiscoveryResult(BaseModel):
    is_api_folder_missing: bool
    has_redocly_config: bool
    definitions: list[DiscoveredDefinition]


class UploadTargetConfig(BaseModel):
    """Where a single definition would be published from, before merging."""

    path: Path
    type: UploadTargetType
    is_versioned: bool = False


class UploadTargetDestination(BaseModel):
    target_path: str  # leaf name, e.g. "Petstore/@latest"
    remote_mount_path: str


class DefinitionUploadTarget(BaseModel):
    """A file or folder to publish as one unit."""

    source_path: Path
    target_path: str
    remote_mount_path: str
    type: UploadTargetType
    title: str
    metadata: ApiDefinitionMetadata
    is_versioned: bool = False


class JobContext(BaseModel):
    """Repository coordinates used for destination templating."""

    namespace_id: str
    repository_id: str
    commit_sha: str = ""


class ValidationError(BaseModel):
    message: str


class ValidationResult(BaseModel):
    is_valid: bool
    errors: list[ValidationError] = []


class DefinitionValidationResult(BaseModel):
    definition: DiscoveredDefinition
    result: ValidationResult


class ValidationSummary(BaseModel):
    message: str
    details: str
    status: Literal["SUCCEEDED", "FAILED"]
