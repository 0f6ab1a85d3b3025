"""Runtime settings read from the environment."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from api_scout.definitions.walker import DiscoveryOptions
from api_scout.targets.destination import validate_template

DEFAULT_DEST_FOLDER_PATH = "apis/{metadata.team}/{repoId}/{title}"


class ScoutSettings(BaseSettings):
    """Settings for discovery and target planning.

    Field names match the environment variables (case-insensitive), e.g.
    ``REDOCLY_DEST_FOLDER_PATH`` and ``API_FOLDER``.
    """

    model_config = SettingsConfigDict(extra="ignore")

    redocly_dest_folder_path: str = DEFAULT_DEST_FOLDER_PATH
    api_folder: str = "/"
    redocly_metadata_required: bool = False
    redocly_config_filename: str = "redocly.yaml"
    log_level: str = "INFO"

    @field_validator("redocly_dest_folder_path")
    @classmethod
    def _check_dest_folder_path(cls, value: str) -> str:
        return validate_template(value.strip())

    @field_validator("redocly_metadata_required", mode="before")
    @classmethod
    def _empty_means_false(cls, value):
        return False if value == "" else value

    def discovery_options(self) -> DiscoveryOptions:
        return DiscoveryOptions(config_filename=self.redocly_config_filename)
